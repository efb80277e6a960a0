"""
HTMLパーサ。

Lodestone の各ページHTMLから必要な領域を特定し、models.py のレコードへ変換する責務を持つ。
サイト側のマークアップ変更に追従する場合は、本モジュールだけを修正すればよい。

方針:
- 必須項目（プロフィールの id/name、検索結果各行の id/name）が取れなければ ParseError
- 任意項目は取れなければ None（配列は空）として解析を続ける
- 数値は parse_int で変換し、数値でなければ None
- 検索結果領域があって行が 0 件なら空リスト、領域自体が無ければ ParseError
- 関数はすべて純粋で、同じHTMLからは常に等しいレコードを返す
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from lodestone.errors import ParseError
from lodestone.models import (
    Attribute,
    ClassLevel,
    DatacenterStatus,
    FreeCompanyRanking,
    FreeCompanyRef,
    Profile,
    ProfileSearchResult,
    SecondaryAttribute,
    ServerStatus,
    WorldStatus,
)
from lodestone.normalize import clean_text, normalize_text, parse_int
from lodestone.vocabulary import ClassJob, Clan, Gender, GrandCompany, Race

logger = logging.getLogger(__name__)

_CHARACTER_HREF = re.compile(r"/lodestone/character/(\d+)")
_FREE_COMPANY_HREF = re.compile(r"/lodestone/freecompany/(\d+)")
_WORLD_DC = re.compile(r"^(?P<world>[^\[\(]+?)\s*[\[\(](?P<dc>[^\]\)]+)[\]\)]")
_LEVEL = re.compile(r"(\d+)")
_SOUL_CRYSTAL = re.compile(r"^Soul of the (.+)$", re.IGNORECASE)
_WEAPON_CATEGORY = re.compile(
    r"^(?:One-handed |Two-handed )?(.+?)'s (?:Arm|Primary Tool|Grimoire)$", re.IGNORECASE
)
_PARAM_CLASS = re.compile(r"character__param__text__(hp|mp|gp|cp)")


def _soup(html: Optional[str]) -> BeautifulSoup:
    """
    HTML文字列を BeautifulSoup に変換する。

    Raises:
        ParseError: 本文が空の場合。
    """
    if html is None or not html.strip():
        raise ParseError("document", "empty response body")
    return BeautifulSoup(html, "html.parser")


def _text(node: Any) -> Optional[str]:
    """ノードの整形済みテキストを返す。ノードが無い・空なら None。"""
    if node is None:
        return None
    text = clean_text(node.get_text(" ", strip=True))
    return text or None


def _select_text(root: Any, selector: str) -> Optional[str]:
    return _text(root.select_one(selector))


def _attr(node: Any, name: str) -> Optional[str]:
    if node is None:
        return None
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    value = clean_text(value)
    return value or None


def _match_id(pattern: re.Pattern, text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    m = pattern.search(text)
    return m.group(1) if m else None


def _split_world(text: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    "Famfrit [Primal]" 形式の文字列をワールド名とデータセンター名に分割する。

    データセンター表記が無ければ (text, None) を返す。
    """
    if not text:
        return None, None
    m = _WORLD_DC.match(text)
    if not m:
        return text, None
    return clean_text(m.group("world")), clean_text(m.group("dc"))


# ---------------------------------------------------------------------------
# プロフィール
# ---------------------------------------------------------------------------


def _profile_id(soup: BeautifulSoup) -> int:
    """
    プロフィールのキャラクターIDを取得する。

    og:url → ヘッダーのキャラクターリンク → canonical の順に探す。

    Raises:
        ParseError: いずれからもIDが取れない場合。
    """
    candidates = [
        _attr(soup.select_one('meta[property="og:url"]'), "content"),
        _attr(soup.select_one("a.frame__chara__link"), "href"),
        _attr(soup.select_one('link[rel="canonical"]'), "href"),
    ]
    for candidate in candidates:
        found = _match_id(_CHARACTER_HREF, candidate)
        if found:
            return int(found)
    raise ParseError("profile id")


def _character_blocks(soup: BeautifulSoup) -> Dict[str, Any]:
    """
    character-block の見出しと値ノードの対応を返す。

    見出し（"Race/Clan/Gender" など）の直後にある p 要素を値ノードとみなす。
    キーは normalize_text 済みの見出し。
    """
    blocks: Dict[str, Any] = {}
    for title in soup.select(".character-block__title"):
        key = normalize_text(title.get_text(" ", strip=True))
        value = title.find_next_sibling("p")
        if key and value is not None and key not in blocks:
            blocks[key] = value
    return blocks


def _race_clan_gender(node: Any) -> Tuple[Optional[Race], Optional[Clan], Optional[Gender]]:
    """
    "Lalafell<br>Plainsfolk / ♀" 形式のノードから種族・部族・性別を取り出す。

    種族名は "Au Ra" のように空白を含みうるため、<br> 区切りで分けてから解析する。
    """
    if node is None:
        return None, None, None

    parts = [clean_text(s) for s in node.stripped_strings]
    parts = [p for p in parts if p]
    if not parts:
        return None, None, None

    race = Race.lookup(parts[0])
    clan = None
    gender = None
    if len(parts) >= 2:
        clan_gender = [clean_text(x) for x in parts[1].split("/")]
        clan = Clan.lookup(clan_gender[0])
        if len(clan_gender) >= 2:
            gender = Gender.lookup(clan_gender[1])
    return race, clan, gender


def _grand_company(node: Any) -> Tuple[Optional[GrandCompany], Optional[str]]:
    """"Maelstrom / Second Storm Lieutenant" 形式からGCと階級を取り出す。"""
    text = _text(node)
    if not text:
        return None, None
    company, _, rank = text.partition("/")
    return GrandCompany.lookup(clean_text(company)), clean_text(rank) or None


def _free_company(soup: BeautifulSoup) -> Optional[FreeCompanyRef]:
    link = soup.select_one(".character__freecompany__name a")
    name = _text(link)
    if not name:
        return None
    return FreeCompanyRef(name=name, id=_match_id(_FREE_COMPANY_HREF, _attr(link, "href")))


def _active_class_job(soup: BeautifulSoup) -> Optional[ClassJob]:
    """
    現在のクラス/ジョブを推定する。

    ソウルクリスタル（"Soul of the Black Mage" など）を装備していればそのジョブ、
    無ければ武器カテゴリ（"Two-handed Thaumaturge's Arm" など）のクラスとする。
    """
    for node in soup.select(".character__detail .db-tooltip__item__name"):
        m = _SOUL_CRYSTAL.match(_text(node) or "")
        if m:
            job = ClassJob.lookup(m.group(1))
            if job is not None:
                return job

    category = _select_text(soup, ".character__class__arms .db-tooltip__item__category")
    if category:
        m = _WEAPON_CATEGORY.match(category)
        if m:
            return ClassJob.lookup(m.group(1))
    return None


def _active_level(soup: BeautifulSoup) -> Optional[int]:
    text = _select_text(soup, ".character__class__data p")
    if not text:
        return None
    m = _LEVEL.search(text)
    return int(m.group(1)) if m else None


def _parameters(soup: BeautifulSoup) -> Tuple[Optional[int], Optional[SecondaryAttribute]]:
    """HP と MP/GP/CP を取り出す。"""
    hp = None
    secondary = None
    for item in soup.select(".character__param li"):
        label = item.find(class_=_PARAM_CLASS)
        if label is None:
            continue
        kind = _PARAM_CLASS.search(" ".join(label.get("class", []))).group(1)
        value = parse_int(_select_text(item, "span"))
        if kind == "hp":
            hp = value
        elif secondary is None:
            secondary = SecondaryAttribute(kind=kind.upper(), value=value)
    return hp, secondary


def _attributes(soup: BeautifulSoup) -> Tuple[Attribute, ...]:
    """能力値表（Strength など）を表示順に取り出す。"""
    attributes: List[Attribute] = []
    for row in soup.select(".character__param__list tr"):
        name = _text(row.find("th"))
        if not name:
            continue
        attributes.append(Attribute(name=name, value=parse_int(_text(row.find("td")))))
    return tuple(attributes)


def _portrait_url(soup: BeautifulSoup) -> Optional[str]:
    return _attr(soup.select_one(".character__detail__image a.js__image_popup"), "href") or _attr(
        soup.select_one(".character__detail__image img"), "src"
    )


def parse_profile(html: str) -> Profile:
    """
    プロフィールページHTMLを Profile に変換する。

    Args:
        html: /lodestone/character/<id>/ のHTML文字列。

    Returns:
        Profile。任意項目は取得できなければ None / 空。

    Raises:
        ParseError: 本文が空、または id / name が取得できない場合。
    """
    soup = _soup(html)

    profile_id = _profile_id(soup)
    name = _select_text(soup, ".frame__chara__name")
    if not name:
        raise ParseError("profile name")

    world, datacenter = _split_world(_select_text(soup, ".frame__chara__world"))
    blocks = _character_blocks(soup)
    race, clan, gender = _race_clan_gender(blocks.get("race/clan/gender"))
    grand_company, grand_company_rank = _grand_company(blocks.get("grand company"))
    hp, secondary = _parameters(soup)

    return Profile(
        id=profile_id,
        name=name,
        title=_select_text(soup, ".frame__chara__title"),
        world=world,
        datacenter=datacenter,
        race=race,
        clan=clan,
        gender=gender,
        nameday=_select_text(soup, ".character-block__birth"),
        guardian=_text(blocks.get("guardian")),
        city_state=_text(blocks.get("city-state")),
        grand_company=grand_company,
        grand_company_rank=grand_company_rank,
        free_company=_free_company(soup),
        active_class_job=_active_class_job(soup),
        active_level=_active_level(soup),
        class_levels=_class_levels(soup),
        attributes=_attributes(soup),
        hp=hp,
        secondary_attribute=secondary,
        avatar_url=_attr(soup.select_one(".frame__chara__face img"), "src"),
        portrait_url=_portrait_url(soup),
    )


# ---------------------------------------------------------------------------
# クラス/ジョブ
# ---------------------------------------------------------------------------


def _class_job_name(item: Any) -> Optional[str]:
    """
    li 要素からクラス/ジョブ名を取り出す。

    "Paladin / Gladiator" のように併記されている場合は先頭（上位のジョブ）を使う。
    """
    name = _select_text(item, ".character__job__name") or _attr(
        item.select_one(".character__job__icon img"), "data-tooltip"
    )
    if not name:
        return None
    return clean_text(name.split("/")[0])


def _exp(item: Any) -> Tuple[Optional[int], Optional[int]]:
    text = _select_text(item, ".character__job__exp")
    if not text:
        return None, None
    current, _, maximum = text.partition("/")
    return parse_int(current), parse_int(maximum)


def _class_levels(soup: BeautifulSoup) -> Tuple[ClassLevel, ...]:
    entries: List[ClassLevel] = []
    seen = set()
    for item in soup.select(".character__job li"):
        name = _class_job_name(item)
        class_job = ClassJob.lookup(name)
        if class_job is None:
            logger.debug("未知のクラス/ジョブ名をスキップ: %s", name)
            continue
        if class_job in seen:
            continue

        current_exp, max_exp = _exp(item)
        entry = ClassLevel(
            class_job=class_job,
            level=parse_int(_select_text(item, ".character__job__level")),
            current_exp=current_exp,
            max_exp=max_exp,
        )
        entries.append(entry)
        seen.add(class_job)

    # ジョブのレベルは元クラスのレベルでもある（Paladin → Gladiator など）
    mirrored: List[ClassLevel] = []
    for entry in entries:
        mirrored.append(entry)
        base = entry.class_job.base_class
        if base is not None and base not in seen and entry.level is not None:
            mirrored.append(
                ClassLevel(
                    class_job=base,
                    level=entry.level,
                    current_exp=entry.current_exp,
                    max_exp=entry.max_exp,
                )
            )
            seen.add(base)
    return tuple(mirrored)


def parse_class_jobs(html: str) -> Tuple[ClassLevel, ...]:
    """
    クラス/ジョブ一覧を ClassLevel のタプルとして返す。

    プロフィールページ・/class_job/ ページのどちらにも使える。
    未開放・未プレイのクラスは level=None、未知の名前は読み飛ばす。
    ジョブのレベルは、元クラスが個別に載っていなければ元クラスにも複製する。

    Raises:
        ParseError: 本文が空の場合。
    """
    return _class_levels(_soup(html))


# ---------------------------------------------------------------------------
# キャラクター検索
# ---------------------------------------------------------------------------


def _find_results_region(soup: BeautifulSoup) -> Any:
    """
    検索結果領域（.ldst__window）を特定する。

    件数表示・0件表示・結果行のいずれかを含む .ldst__window を結果領域とみなす。

    Raises:
        ParseError: 結果領域が存在しない場合。
    """
    for window in soup.select(".ldst__window"):
        if window.select_one(".parts__total, .parts__zero, .entry"):
            return window
    raise ParseError("search results")


def _search_row(row: Any) -> ProfileSearchResult:
    link = row.select_one("a.entry__link")
    found = _match_id(_CHARACTER_HREF, _attr(link, "href"))
    if found is None:
        raise ParseError("search result id")

    name = _select_text(row, ".entry__name")
    if not name:
        raise ParseError("search result name", f"id={found}")

    world, datacenter = _split_world(_select_text(row, ".entry__world"))

    rank = None
    for icon in row.select(".entry__chara_info [data-tooltip]"):
        tooltip = _attr(icon, "data-tooltip")
        if tooltip and "/" in tooltip:
            rank = tooltip
            break

    return ProfileSearchResult(
        id=int(found),
        name=name,
        world=world,
        datacenter=datacenter,
        free_company_name=_select_text(row, ".entry__freecompany__link span")
        or _select_text(row, ".entry__freecompany__link"),
        rank=rank,
        avatar_url=_attr(row.select_one(".entry__chara__face img"), "src"),
    )


def parse_search(html: str) -> List[ProfileSearchResult]:
    """
    キャラクター検索結果ページHTMLから結果行を抽出する。

    Args:
        html: /lodestone/character/?q=... のHTML文字列。

    Returns:
        ProfileSearchResult のリスト（ページ上の順序）。該当なしなら空リスト。

    Raises:
        ParseError: 本文が空、結果領域が無い、または行の id / name が取れない場合。
    """
    region = _find_results_region(_soup(html))
    results = [_search_row(row) for row in region.select("div.entry")]
    logger.debug("検索結果: %d 件", len(results))
    return results


# ---------------------------------------------------------------------------
# ワールドステータス
# ---------------------------------------------------------------------------


def _server_status(item: Any) -> Optional[ServerStatus]:
    if item.select_one(".world-ic__1"):
        return ServerStatus.ONLINE
    if item.select_one(".world-ic__2"):
        return ServerStatus.PARTIAL_MAINTENANCE
    if item.select_one(".world-ic__3"):
        return ServerStatus.MAINTENANCE
    return None


def _character_creation(item: Any) -> Optional[bool]:
    if item.select_one(".world-ic__available"):
        return True
    if item.select_one(".world-ic__unavailable"):
        return False
    return None


def parse_world_status(html: str) -> List[DatacenterStatus]:
    """
    ワールドステータスページHTMLをデータセンター単位の稼働状況に変換する。

    Raises:
        ParseError: 本文が空、データセンター領域が無い、
            またはデータセンター名・ワールド名が取れない場合。
    """
    soup = _soup(html)
    groups = soup.select(".world-dcgroup__item")
    if not groups:
        raise ParseError("world status")

    result: List[DatacenterStatus] = []
    for group in groups:
        dc_name = _select_text(group, ".world-dcgroup__header")
        if not dc_name:
            raise ParseError("datacenter name")

        worlds: List[WorldStatus] = []
        for item in group.select(".world-list__item"):
            world_name = _select_text(item, ".world-list__world_name")
            if not world_name:
                raise ParseError("world name", f"datacenter={dc_name}")
            worlds.append(
                WorldStatus(
                    name=world_name,
                    status=_server_status(item),
                    category=_select_text(item, ".world-list__world_category"),
                    character_creation=_character_creation(item),
                )
            )
        result.append(DatacenterStatus(name=dc_name, worlds=tuple(worlds)))
    return result


# ---------------------------------------------------------------------------
# フリーカンパニーランキング
# ---------------------------------------------------------------------------


def _ranking_row(row: Any) -> FreeCompanyRanking:
    rank = parse_int(_select_text(row, ".ranking-character__number"))
    if rank is None:
        raise ParseError("ranking number")

    info = row.select_one(".ranking-character__info")
    name = _text(info.find("h4")) if info is not None else None
    if not name:
        raise ParseError("free company name", f"rank={rank}")

    world, datacenter = _split_world(_text(info.find("p")))

    grand_company = None
    gc_icon = row.select_one(".ranking-character__gcrank img")
    if gc_icon is not None:
        grand_company = GrandCompany.lookup(_attr(gc_icon, "alt"))

    return FreeCompanyRanking(
        rank=rank,
        name=name,
        id=_match_id(_FREE_COMPANY_HREF, _attr(row, "data-href")),
        world=world,
        datacenter=datacenter,
        grand_company=grand_company,
        credits=parse_int(_select_text(row, ".ranking-character__value")),
    )


def parse_free_company_ranking(html: str) -> List[FreeCompanyRanking]:
    """
    フリーカンパニーランキングページHTMLから順位表を抽出する。

    td を持たない行（見出し行）は読み飛ばす。

    Raises:
        ParseError: 本文が空、ランキング表が無い、または順位・名前が取れない場合。
    """
    soup = _soup(html)
    table = soup.select_one(".ranking-character")
    if table is None:
        raise ParseError("ranking table")

    return [_ranking_row(tr) for tr in table.find_all("tr") if tr.find("td")]
