"""
Lodestone 取得の実行例（コマンドライン）。

使い方:
    python main.py profile 12345
    python main.py classjobs 12345
    python main.py search --name "Strawberry Custard" --datacenter Primal --language en
    python main.py worlds
    python main.py fc-ranking weekly --datacenter Primal
    python main.py --async search --name "Strawberry Custard"

結果は JSON で標準出力に書き出す。失敗時は終了コード 1。
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict, is_dataclass

from lodestone import client
from lodestone.config import load_settings
from lodestone.errors import HttpStatusError, LodestoneError
from lodestone.request import SearchBuilder
from lodestone.scraper import AiohttpTransport, RequestsTransport

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """ロギングの初期設定."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Lodestone character scraper")
    p.add_argument("--settings", default=None, help="settings.yaml のパス")
    p.add_argument("--async", dest="use_async", action="store_true", help="非同期トランスポートを使う")
    p.add_argument("-v", "--verbose", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    profile = sub.add_parser("profile", help="プロフィールを取得する")
    profile.add_argument("profile_id", type=int)

    classjobs = sub.add_parser("classjobs", help="クラス/ジョブ詳細を取得する")
    classjobs.add_argument("profile_id", type=int)

    search = sub.add_parser("search", help="キャラクターを検索する")
    search.add_argument("--name")
    search.add_argument("--world")
    search.add_argument("--datacenter")
    search.add_argument("--class-job")
    search.add_argument("--race")
    search.add_argument("--clan")
    search.add_argument("--language")
    search.add_argument("--gc", dest="grand_company")
    search.add_argument("--page", type=int)

    sub.add_parser("worlds", help="ワールドステータスを取得する")

    ranking = sub.add_parser("fc-ranking", help="フリーカンパニーランキングを取得する")
    ranking.add_argument("period", choices=["weekly", "monthly"])
    ranking.add_argument("--number", type=int)
    ranking.add_argument("--world")
    ranking.add_argument("--datacenter")
    ranking.add_argument("--gc", dest="grand_company")
    ranking.add_argument("--page", type=int)

    return p


def build_search(args: argparse.Namespace) -> SearchBuilder:
    """コマンドライン引数から SearchBuilder を組み立てる。"""
    builder = SearchBuilder()
    if args.name is not None:
        builder = builder.character(args.name)
    if args.datacenter is not None:
        builder = builder.datacenter(args.datacenter)
    if args.world is not None:
        builder = builder.world(args.world)
    if args.class_job is not None:
        builder = builder.class_job(args.class_job)
    if args.race is not None:
        builder = builder.race(args.race)
    if args.clan is not None:
        builder = builder.clan(args.clan)
    if args.language is not None:
        builder = builder.language(args.language)
    if args.grand_company is not None:
        builder = builder.grand_company(args.grand_company)
    if args.page is not None:
        builder = builder.page(args.page)
    return builder


def _ranking_filters(args: argparse.Namespace) -> dict:
    names = ["number", "world", "datacenter", "grand_company", "page"]
    return {n: getattr(args, n) for n in names if getattr(args, n) is not None}


def run_blocking(args: argparse.Namespace, settings):
    with RequestsTransport(settings) as transport:
        if args.command == "profile":
            return client.fetch_profile(args.profile_id, transport)
        if args.command == "classjobs":
            return client.fetch_class_jobs(args.profile_id, transport)
        if args.command == "search":
            return client.search(build_search(args), transport)
        if args.command == "worlds":
            return client.fetch_world_status(transport)
        return client.fetch_free_company_ranking(args.period, transport, **_ranking_filters(args))


async def run_async(args: argparse.Namespace, settings):
    async with AiohttpTransport(settings) as transport:
        if args.command == "profile":
            return await client.fetch_profile_async(args.profile_id, transport)
        if args.command == "classjobs":
            return await client.fetch_class_jobs_async(args.profile_id, transport)
        if args.command == "search":
            return await client.search_async(build_search(args), transport)
        if args.command == "worlds":
            return await client.fetch_world_status_async(transport)
        return await client.fetch_free_company_ranking_async(
            args.period, transport, **_ranking_filters(args)
        )


def to_jsonable(result):
    """レコード（またはそのリスト/タプル）を JSON 化できる形に変換する。"""
    if is_dataclass(result):
        return asdict(result)
    if isinstance(result, (list, tuple)):
        return [to_jsonable(r) for r in result]
    return result


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = load_settings(args.settings)
        if args.use_async:
            result = asyncio.run(run_async(args, settings))
        else:
            result = run_blocking(args, settings)
    except HttpStatusError as e:
        if e.not_found:
            logger.error("見つかりません: %s", e.url)
        else:
            logger.error("HTTPエラー: %s", e)
        return 1
    except LodestoneError as e:
        logger.error("取得失敗: %s", e)
        return 1

    print(json.dumps(to_jsonable(result), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
