"""
Lodestone 取得処理の入口。

各操作は「組み立て → 送信 → 解析」の一直線の処理で、内部で再試行はしない。
同期版と非同期版（*_async）は同じ記述子組み立て・同じ解析関数を使うため、
同じHTMLからは同じレコードが得られる。

transport を省略した場合は、その呼び出しの間だけ既定のトランスポートを作って閉じる。
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple, TypeVar, Union

from lodestone import parser
from lodestone.config import Settings
from lodestone.models import (
    ClassLevel,
    DatacenterStatus,
    FreeCompanyRanking,
    Profile,
    ProfileSearchResult,
)
from lodestone.request import (
    RequestDescriptor,
    SearchBuilder,
    SearchFilter,
    class_job_request,
    free_company_ranking_request,
    profile_request,
    search_request,
    world_status_request,
)
from lodestone.scraper import AiohttpTransport, RequestsTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")

SearchQuery = Union[SearchBuilder, SearchFilter, None]


def _search_descriptor(query: SearchQuery) -> RequestDescriptor:
    if isinstance(query, SearchBuilder):
        return query.build_for_search()
    return search_request(query)


def _run(
    descriptor: RequestDescriptor,
    parse: Callable[[str], T],
    transport: Optional[RequestsTransport],
    settings: Optional[Settings],
) -> T:
    if transport is None:
        with RequestsTransport(settings) as owned:
            html = owned.dispatch(descriptor)
    else:
        html = transport.dispatch(descriptor)
    return parse(html)


async def _run_async(
    descriptor: RequestDescriptor,
    parse: Callable[[str], T],
    transport: Optional[AiohttpTransport],
    settings: Optional[Settings],
) -> T:
    if transport is None:
        async with AiohttpTransport(settings) as owned:
            html = await owned.dispatch(descriptor)
    else:
        html = await transport.dispatch(descriptor)
    return parse(html)


def _check_profile_id(requested: int, profile: Profile) -> Profile:
    if profile.id != int(requested):
        logger.warning("要求したIDと異なるプロフィールを受信: requested=%s, received=%s", requested, profile.id)
    return profile


def fetch_profile(
    profile_id: int,
    transport: Optional[RequestsTransport] = None,
    settings: Optional[Settings] = None,
) -> Profile:
    """
    キャラクターIDを指定してプロフィールを取得する。

    Args:
        profile_id: Lodestone のキャラクターID。
        transport: 同期トランスポート。省略時は一時的に作成する。
        settings: transport 省略時に使う接続設定。

    Returns:
        Profile。

    Raises:
        TransportError: 通信に失敗した場合。
        HttpStatusError: 200番台以外の応答の場合（404 は ID が存在しない）。
        ParseError: ページ構造が想定と異なる場合。
    """
    logger.debug("プロフィール取得: id=%s", profile_id)
    profile = _run(profile_request(profile_id), parser.parse_profile, transport, settings)
    return _check_profile_id(profile_id, profile)


async def fetch_profile_async(
    profile_id: int,
    transport: Optional[AiohttpTransport] = None,
    settings: Optional[Settings] = None,
) -> Profile:
    """fetch_profile の非同期版。"""
    logger.debug("プロフィール取得: id=%s", profile_id)
    profile = await _run_async(profile_request(profile_id), parser.parse_profile, transport, settings)
    return _check_profile_id(profile_id, profile)


def fetch_class_jobs(
    profile_id: int,
    transport: Optional[RequestsTransport] = None,
    settings: Optional[Settings] = None,
) -> Tuple[ClassLevel, ...]:
    """クラス/ジョブ詳細ページ（経験値を含む）を取得する。"""
    return _run(class_job_request(profile_id), parser.parse_class_jobs, transport, settings)


async def fetch_class_jobs_async(
    profile_id: int,
    transport: Optional[AiohttpTransport] = None,
    settings: Optional[Settings] = None,
) -> Tuple[ClassLevel, ...]:
    """fetch_class_jobs の非同期版。"""
    return await _run_async(class_job_request(profile_id), parser.parse_class_jobs, transport, settings)


def search(
    query: SearchQuery = None,
    transport: Optional[RequestsTransport] = None,
    settings: Optional[Settings] = None,
) -> List[ProfileSearchResult]:
    """
    キャラクター検索を行う。

    Args:
        query: SearchBuilder または SearchFilter。None は全件検索。
        transport: 同期トランスポート。省略時は一時的に作成する。
        settings: transport 省略時に使う接続設定。

    Returns:
        ProfileSearchResult のリスト（サイト上の順序）。該当なしなら空リスト。

    Raises:
        TransportError: 通信に失敗した場合。
        HttpStatusError: 200番台以外の応答の場合。
        ParseError: 検索結果領域が無いなど、ページ構造が想定と異なる場合。
    """
    descriptor = _search_descriptor(query)
    logger.debug("キャラクター検索: %s", descriptor.query_string())
    return _run(descriptor, parser.parse_search, transport, settings)


async def search_async(
    query: SearchQuery = None,
    transport: Optional[AiohttpTransport] = None,
    settings: Optional[Settings] = None,
) -> List[ProfileSearchResult]:
    """search の非同期版。"""
    descriptor = _search_descriptor(query)
    logger.debug("キャラクター検索: %s", descriptor.query_string())
    return await _run_async(descriptor, parser.parse_search, transport, settings)


def fetch_world_status(
    transport: Optional[RequestsTransport] = None,
    settings: Optional[Settings] = None,
) -> List[DatacenterStatus]:
    """全ワールドの稼働状況・新規作成可否を取得する。"""
    return _run(world_status_request(), parser.parse_world_status, transport, settings)


async def fetch_world_status_async(
    transport: Optional[AiohttpTransport] = None,
    settings: Optional[Settings] = None,
) -> List[DatacenterStatus]:
    """fetch_world_status の非同期版。"""
    return await _run_async(world_status_request(), parser.parse_world_status, transport, settings)


def fetch_free_company_ranking(
    period: str = "weekly",
    transport: Optional[RequestsTransport] = None,
    settings: Optional[Settings] = None,
    **filters,
) -> List[FreeCompanyRanking]:
    """
    フリーカンパニーランキング（週間/月間）を取得する。

    filters には number / world / datacenter / grand_company / page を指定できる。
    """
    descriptor = free_company_ranking_request(period, **filters)
    return _run(descriptor, parser.parse_free_company_ranking, transport, settings)


async def fetch_free_company_ranking_async(
    period: str = "weekly",
    transport: Optional[AiohttpTransport] = None,
    settings: Optional[Settings] = None,
    **filters,
) -> List[FreeCompanyRanking]:
    """fetch_free_company_ranking の非同期版。"""
    descriptor = free_company_ranking_request(period, **filters)
    return await _run_async(descriptor, parser.parse_free_company_ranking, transport, settings)
