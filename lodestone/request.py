"""
リクエスト組み立て処理。

検索条件を不変の SearchFilter として蓄積し、プロフィール取得・キャラクター検索などの
取得対象ごとに RequestDescriptor（パス + 順序付きクエリパラメータ）を生成する。
通信は行わない。組み立ては副作用の無い純粋なデータ変換である。

検索クエリのパラメータは常に次の順序で出力する:
    q, worldname, classjob, race_tribe, blog_lang, gcid, page
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union
from urllib.parse import urlencode

from lodestone.errors import InvalidFilterError
from lodestone.vocabulary import (
    ClassJob,
    Clan,
    Datacenter,
    GrandCompany,
    Language,
    Race,
    World,
)

PROFILE_PATH = "/lodestone/character/{profile_id}/"
CLASS_JOB_PATH = "/lodestone/character/{profile_id}/class_job/"
SEARCH_PATH = "/lodestone/character/"
WORLD_STATUS_PATH = "/lodestone/worldstatus/"
FREE_COMPANY_RANKING_PATH = "/lodestone/ranking/fc/{period}/"

SEARCH_PARAM_ORDER = ("q", "worldname", "classjob", "race_tribe", "blog_lang", "gcid", "page")

RANKING_PERIODS = ("weekly", "monthly")

Params = Tuple[Tuple[str, str], ...]


@dataclass(frozen=True)
class RequestDescriptor:
    """
    1回の取得リクエストを表す不変の記述子。

    Attributes:
        path: ホストからの相対パス。
        params: (名前, 値) の順序付きタプル。
    """

    path: str
    params: Params = ()

    def query_string(self) -> str:
        return urlencode(self.params)

    def url(self, base_url: str) -> str:
        """base_url と結合した完全なURLを返す。"""
        qs = self.query_string()
        url = base_url.rstrip("/") + self.path
        return f"{url}?{qs}" if qs else url


@dataclass(frozen=True)
class SearchFilter:
    """
    キャラクター検索条件。全項目が任意で、空の条件は「全件検索」を表す。

    world には World と Datacenter のどちらかが入る（サイト側では同じ worldname パラメータ）。
    race には Race と Clan のどちらかが入る（サイト側では同じ race_tribe パラメータ）。
    """

    name: Optional[str] = None
    world: Union[World, Datacenter, None] = None
    class_job: Optional[ClassJob] = None
    race: Union[Race, Clan, None] = None
    language: Optional[Language] = None
    grand_company: Optional[GrandCompany] = None
    page: Optional[int] = None

    def to_params(self) -> Params:
        """検索条件をクエリパラメータへ変換する（SEARCH_PARAM_ORDER 順）。"""
        values = {
            "q": self.name,
            "worldname": self.world.query_value() if self.world is not None else None,
            "classjob": self.class_job.query_value() if self.class_job is not None else None,
            "race_tribe": self.race.query_value() if self.race is not None else None,
            "blog_lang": self.language.query_value() if self.language is not None else None,
            "gcid": self.grand_company.query_value() if self.grand_company is not None else None,
            "page": str(self.page) if self.page is not None else None,
        }
        return tuple((key, values[key]) for key in SEARCH_PARAM_ORDER if values[key] is not None)


@dataclass(frozen=True)
class SearchBuilder:
    """
    検索条件を流れるように組み立てるビルダー。

    各メソッドは新しいビルダーを返し、元のビルダーは変更しない。
    同じ項目を 2 回指定した場合は後の値で置き換える。
    文字列で指定された語彙は即座に照合し、未知の値は InvalidFilterError とする。

    例:
        SearchBuilder().character("Strawberry Custard").datacenter("Primal").build_for_search()
    """

    filters: SearchFilter = field(default_factory=SearchFilter)

    def _with(self, **changes) -> "SearchBuilder":
        return SearchBuilder(replace(self.filters, **changes))

    def character(self, name: str) -> "SearchBuilder":
        """検索するキャラクター名。内容はサーバー側で判定するため検証しない。"""
        return self._with(name=name)

    def datacenter(self, datacenter: Union[Datacenter, str]) -> "SearchBuilder":
        """データセンターで絞り込む。指定済みのワールドは置き換えられる。"""
        return self._with(world=Datacenter.parse(datacenter))

    def world(self, world: Union[World, str]) -> "SearchBuilder":
        """ワールドで絞り込む。指定済みのデータセンターは置き換えられる。"""
        return self._with(world=World.parse(world))

    def class_job(self, class_job: Union[ClassJob, str]) -> "SearchBuilder":
        return self._with(class_job=ClassJob.parse(class_job))

    def race(self, race: Union[Race, str]) -> "SearchBuilder":
        """種族で絞り込む。指定済みの部族は置き換えられる。"""
        return self._with(race=Race.parse(race))

    def clan(self, clan: Union[Clan, str]) -> "SearchBuilder":
        """部族で絞り込む。指定済みの種族は置き換えられる。"""
        return self._with(race=Clan.parse(clan))

    def language(self, language: Union[Language, str]) -> "SearchBuilder":
        return self._with(language=Language.parse(language))

    def grand_company(self, grand_company: Union[GrandCompany, str]) -> "SearchBuilder":
        return self._with(grand_company=GrandCompany.parse(grand_company))

    def page(self, page: int) -> "SearchBuilder":
        """検索結果のページ番号（1始まり）。"""
        return self._with(page=_positive_int("page", page))

    def build_for_search(self) -> RequestDescriptor:
        return search_request(self.filters)

    def build_for_profile(self, profile_id: int) -> RequestDescriptor:
        """プロフィール取得用の記述子。蓄積した検索条件は使わない。"""
        return profile_request(profile_id)


def _positive_int(name: str, value) -> int:
    """
    int または数字文字列を正の整数に変換する。

    bool・float など整数以外の型は切り捨てずに InvalidFilterError とする。
    """
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidFilterError(name, value)
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidFilterError(name, value) from e
    if number < 1:
        raise InvalidFilterError(name, value)
    return number


def profile_request(profile_id: int) -> RequestDescriptor:
    """
    プロフィールページ取得用の記述子を返す。

    ID の実在確認は行わない（サーバーの応答で判定する）。

    Raises:
        InvalidFilterError: profile_id が正の整数でない場合。
    """
    return RequestDescriptor(PROFILE_PATH.format(profile_id=_positive_int("profile id", profile_id)))


def class_job_request(profile_id: int) -> RequestDescriptor:
    """クラス/ジョブ詳細ページ（経験値を含む）取得用の記述子を返す。"""
    return RequestDescriptor(CLASS_JOB_PATH.format(profile_id=_positive_int("profile id", profile_id)))


def search_request(filters: Optional[SearchFilter] = None) -> RequestDescriptor:
    """キャラクター検索ページ取得用の記述子を返す。"""
    filters = filters or SearchFilter()
    return RequestDescriptor(SEARCH_PATH, filters.to_params())


def world_status_request() -> RequestDescriptor:
    return RequestDescriptor(WORLD_STATUS_PATH)


def free_company_ranking_request(
    period: str = "weekly",
    *,
    number: Optional[int] = None,
    world: Union[World, str, None] = None,
    datacenter: Union[Datacenter, str, None] = None,
    grand_company: Union[GrandCompany, str, None] = None,
    page: Optional[int] = None,
) -> RequestDescriptor:
    """
    フリーカンパニーランキングページ取得用の記述子を返す。

    Args:
        period: "weekly" または "monthly"。
        number: 集計週/月の番号。None の場合は最新。
        world: ワールドで絞り込む。
        datacenter: データセンターで絞り込む。
        grand_company: グランドカンパニーで絞り込む。
        page: ページ番号（1始まり）。

    Raises:
        InvalidFilterError: period や各語彙が不正な場合。
    """
    if period not in RANKING_PERIODS:
        raise InvalidFilterError("ranking period", period)

    path = FREE_COMPANY_RANKING_PATH.format(period=period)
    if number is not None:
        path = f"{path}{_positive_int('ranking number', number)}/"

    params = []
    if world is not None:
        params.append(("worldname", World.parse(world).query_value()))
    if datacenter is not None:
        params.append(("dcgroup", Datacenter.parse(datacenter).value))
    if grand_company is not None:
        params.append(("gcid", GrandCompany.parse(grand_company).query_value()))
    if page is not None:
        params.append(("page", str(_positive_int("page", page))))

    return RequestDescriptor(path, tuple(params))
