"""
データモデル定義モジュール。

Lodestone のページから取り出した結果を呼び出し側へ渡すための不変レコードを定義する。
レコードは取得1回ごとに生成され、以降変更されない。
任意項目は取得できなかった場合 None（配列は空タプル）で表す。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from lodestone.vocabulary import ClassJob, Clan, Gender, GrandCompany, Race


@dataclass(frozen=True)
class FreeCompanyRef:
    """
    フリーカンパニーへの参照（名前とID）。

    プロフィールはフリーカンパニーの情報を所有せず、参照のみを持つ。
    """

    name: str
    id: Optional[str] = None


@dataclass(frozen=True)
class ClassLevel:
    """
    1クラス/ジョブ分のレベル情報。

    開放済みだが未プレイの場合 level は None。経験値は表示が "--" の場合 None。
    """

    class_job: ClassJob
    level: Optional[int]
    current_exp: Optional[int] = None
    max_exp: Optional[int] = None


@dataclass(frozen=True)
class Attribute:
    """能力値1件（例: Strength = 130）。"""

    name: str
    value: Optional[int]


@dataclass(frozen=True)
class SecondaryAttribute:
    """HP 以外のパラメータ（戦闘職は MP、ギャザラーは GP、クラフターは CP）。"""

    kind: str
    value: Optional[int]


@dataclass(frozen=True)
class Profile:
    """
    1キャラクター分のプロフィール。

    id と name は必須。それ以外はすべてベストエフォートで、取得できなければ None になる。
    attributes は戦闘職でのみ表示されるため、それ以外では空になりうる。
    """

    id: int
    name: str
    title: Optional[str] = None
    world: Optional[str] = None
    datacenter: Optional[str] = None
    race: Optional[Race] = None
    clan: Optional[Clan] = None
    gender: Optional[Gender] = None
    nameday: Optional[str] = None
    guardian: Optional[str] = None
    city_state: Optional[str] = None
    grand_company: Optional[GrandCompany] = None
    grand_company_rank: Optional[str] = None
    free_company: Optional[FreeCompanyRef] = None
    active_class_job: Optional[ClassJob] = None
    active_level: Optional[int] = None
    class_levels: Tuple[ClassLevel, ...] = ()
    attributes: Tuple[Attribute, ...] = ()
    hp: Optional[int] = None
    secondary_attribute: Optional[SecondaryAttribute] = None
    avatar_url: Optional[str] = None
    portrait_url: Optional[str] = None


@dataclass(frozen=True)
class ProfileSearchResult:
    """キャラクター検索結果の1行。並び順はページ上の順序のまま保持する。"""

    id: int
    name: str
    world: Optional[str] = None
    datacenter: Optional[str] = None
    free_company_name: Optional[str] = None
    rank: Optional[str] = None
    avatar_url: Optional[str] = None


class ServerStatus(str, Enum):
    """ワールドの稼働状態。"""

    ONLINE = "Online"
    PARTIAL_MAINTENANCE = "Partial Maintenance"
    MAINTENANCE = "Maintenance"


@dataclass(frozen=True)
class WorldStatus:
    """
    ワールド1件の稼働状況。

    category は Standard / Preferred / Congested / New など。
    character_creation は新規キャラクター作成の可否（表示が無ければ None）。
    """

    name: str
    status: Optional[ServerStatus] = None
    category: Optional[str] = None
    character_creation: Optional[bool] = None


@dataclass(frozen=True)
class DatacenterStatus:
    """データセンター1件分のワールド稼働状況。"""

    name: str
    worlds: Tuple[WorldStatus, ...] = ()


@dataclass(frozen=True)
class FreeCompanyRanking:
    """フリーカンパニーランキングの1行。"""

    rank: int
    name: str
    id: Optional[str] = None
    world: Optional[str] = None
    datacenter: Optional[str] = None
    grand_company: Optional[GrandCompany] = None
    credits: Optional[int] = None
