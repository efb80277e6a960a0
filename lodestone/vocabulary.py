"""
Lodestone の検索条件・プロフィールで使われる列挙語彙。

データセンター・ワールド・言語・グランドカンパニー・クラス/ジョブ・種族・部族・性別を
列挙型で表し、検索クエリへの変換は固定の対応表で行う（計算しない）。

文字列からの変換は 2 種類ある:
- parse(): 検索条件用。未知の文字列は InvalidFilterError（組み立て時に失敗させる）。
- lookup(): HTML解析用。未知の文字列は None（任意項目として扱う）。
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

from lodestone.errors import InvalidFilterError
from lodestone.normalize import normalize_text


def _key(text: str) -> str:
    """語彙照合用のキー（正規化・小文字化・アンダースコアを空白化）を返す。"""
    return normalize_text(str(text).replace("_", " "))


class _Vocabulary(str, Enum):
    """parse()/lookup() を共通実装する語彙列挙の基底。"""

    @classmethod
    def lookup(cls, text):
        """
        文字列を語彙に変換する。一致しなければ None を返す。

        表示名・メンバー名・別名を大文字小文字を区別せずに照合する。
        """
        if text is None:
            return None
        if isinstance(text, cls):
            return text

        key = _key(text)
        for member in cls:
            if key == _key(member.value) or key == _key(member.name):
                return member
        return _ALIASES.get(cls.__name__, {}).get(key)

    @classmethod
    def parse(cls, text):
        """
        文字列を語彙に変換する。

        Raises:
            InvalidFilterError: 既知の語彙に一致しない場合。
        """
        member = cls.lookup(text)
        if member is None:
            raise InvalidFilterError(cls.__name__, text)
        return member

    def __str__(self) -> str:
        return self.value


class Datacenter(_Vocabulary):
    """データセンター。"""

    AETHER = "Aether"
    CHAOS = "Chaos"
    CRYSTAL = "Crystal"
    DYNAMIS = "Dynamis"
    ELEMENTAL = "Elemental"
    GAIA = "Gaia"
    LIGHT = "Light"
    MANA = "Mana"
    MATERIA = "Materia"
    METEOR = "Meteor"
    PRIMAL = "Primal"

    def query_value(self) -> str:
        return f"_dc_{self.value}"


class World(_Vocabulary):
    """ワールド（サーバー）。所属データセンターは WORLD_DATACENTERS で引く。"""

    # Aether
    ADAMANTOISE = "Adamantoise"
    CACTUAR = "Cactuar"
    FAERIE = "Faerie"
    GILGAMESH = "Gilgamesh"
    JENOVA = "Jenova"
    MIDGARDSORMR = "Midgardsormr"
    SARGATANAS = "Sargatanas"
    SIREN = "Siren"
    # Primal
    BEHEMOTH = "Behemoth"
    EXCALIBUR = "Excalibur"
    EXODUS = "Exodus"
    FAMFRIT = "Famfrit"
    HYPERION = "Hyperion"
    LAMIA = "Lamia"
    LEVIATHAN = "Leviathan"
    ULTROS = "Ultros"
    # Crystal
    BALMUNG = "Balmung"
    BRYNHILDR = "Brynhildr"
    COEURL = "Coeurl"
    DIABOLOS = "Diabolos"
    GOBLIN = "Goblin"
    MALBORO = "Malboro"
    MATEUS = "Mateus"
    ZALERA = "Zalera"
    # Dynamis
    CUCHULAINN = "Cuchulainn"
    GOLEM = "Golem"
    HALICARNASSUS = "Halicarnassus"
    KRAKEN = "Kraken"
    MADUIN = "Maduin"
    MARILITH = "Marilith"
    RAFFLESIA = "Rafflesia"
    SERAPH = "Seraph"
    # Chaos
    CERBERUS = "Cerberus"
    LOUISOIX = "Louisoix"
    MOOGLE = "Moogle"
    OMEGA = "Omega"
    PHANTOM = "Phantom"
    RAGNAROK = "Ragnarok"
    SAGITTARIUS = "Sagittarius"
    SPRIGGAN = "Spriggan"
    # Light
    ALPHA = "Alpha"
    LICH = "Lich"
    ODIN = "Odin"
    PHOENIX = "Phoenix"
    RAIDEN = "Raiden"
    SHIVA = "Shiva"
    TWINTANIA = "Twintania"
    ZODIARK = "Zodiark"
    # Materia
    BISMARCK = "Bismarck"
    RAVANA = "Ravana"
    SEPHIROT = "Sephirot"
    SOPHIA = "Sophia"
    ZURVAN = "Zurvan"
    # Elemental
    AEGIS = "Aegis"
    ATOMOS = "Atomos"
    CARBUNCLE = "Carbuncle"
    GARUDA = "Garuda"
    GUNGNIR = "Gungnir"
    KUJATA = "Kujata"
    TONBERRY = "Tonberry"
    TYPHON = "Typhon"
    # Gaia
    ALEXANDER = "Alexander"
    BAHAMUT = "Bahamut"
    DURANDAL = "Durandal"
    FENRIR = "Fenrir"
    IFRIT = "Ifrit"
    RIDILL = "Ridill"
    TIAMAT = "Tiamat"
    ULTIMA = "Ultima"
    # Mana
    ANIMA = "Anima"
    ASURA = "Asura"
    CHOCOBO = "Chocobo"
    HADES = "Hades"
    IXION = "Ixion"
    MASAMUNE = "Masamune"
    PANDAEMONIUM = "Pandaemonium"
    TITAN = "Titan"
    # Meteor
    BELIAS = "Belias"
    MANDRAGORA = "Mandragora"
    RAMUH = "Ramuh"
    SHINRYU = "Shinryu"
    UNICORN = "Unicorn"
    VALEFOR = "Valefor"
    YOJIMBO = "Yojimbo"
    ZEROMUS = "Zeromus"

    @property
    def datacenter(self) -> Datacenter:
        return WORLD_DATACENTERS[self]

    def query_value(self) -> str:
        return self.value


class Language(_Vocabulary):
    """プロフィール・ブログの使用言語。"""

    JAPANESE = "Japanese"
    ENGLISH = "English"
    GERMAN = "German"
    FRENCH = "French"

    def query_value(self) -> str:
        return LANGUAGE_CODES[self]


class GrandCompany(_Vocabulary):
    """グランドカンパニー。"""

    UNAFFILIATED = "Unaffiliated"
    MAELSTROM = "Maelstrom"
    TWIN_ADDER = "Order of the Twin Adder"
    IMMORTAL_FLAMES = "Immortal Flames"

    def query_value(self) -> str:
        return str(GRAND_COMPANY_IDS[self])


class ClassJob(_Vocabulary):
    """クラス/ジョブ。値は Lodestone 上の英語表示名。"""

    GLADIATOR = "Gladiator"
    PUGILIST = "Pugilist"
    MARAUDER = "Marauder"
    LANCER = "Lancer"
    ARCHER = "Archer"
    CONJURER = "Conjurer"
    THAUMATURGE = "Thaumaturge"
    CARPENTER = "Carpenter"
    BLACKSMITH = "Blacksmith"
    ARMORER = "Armorer"
    GOLDSMITH = "Goldsmith"
    LEATHERWORKER = "Leatherworker"
    WEAVER = "Weaver"
    ALCHEMIST = "Alchemist"
    CULINARIAN = "Culinarian"
    MINER = "Miner"
    BOTANIST = "Botanist"
    FISHER = "Fisher"
    PALADIN = "Paladin"
    MONK = "Monk"
    WARRIOR = "Warrior"
    DRAGOON = "Dragoon"
    BARD = "Bard"
    WHITE_MAGE = "White Mage"
    BLACK_MAGE = "Black Mage"
    ARCANIST = "Arcanist"
    SUMMONER = "Summoner"
    SCHOLAR = "Scholar"
    ROGUE = "Rogue"
    NINJA = "Ninja"
    MACHINIST = "Machinist"
    DARK_KNIGHT = "Dark Knight"
    ASTROLOGIAN = "Astrologian"
    SAMURAI = "Samurai"
    RED_MAGE = "Red Mage"
    BLUE_MAGE = "Blue Mage"
    GUNBREAKER = "Gunbreaker"
    DANCER = "Dancer"
    REAPER = "Reaper"
    SAGE = "Sage"
    VIPER = "Viper"
    PICTOMANCER = "Pictomancer"

    @property
    def base_class(self) -> Optional["ClassJob"]:
        """ジョブの元になるクラス。クラスそのもの・独立ジョブは None。"""
        return JOB_BASE_CLASSES.get(self)

    def query_value(self) -> str:
        return str(CLASS_JOB_IDS[self])


class Race(_Vocabulary):
    """種族。"""

    HYUR = "Hyur"
    ELEZEN = "Elezen"
    LALAFELL = "Lalafell"
    MIQOTE = "Miqo'te"
    ROEGADYN = "Roegadyn"
    AU_RA = "Au Ra"
    HROTHGAR = "Hrothgar"
    VIERA = "Viera"

    def query_value(self) -> str:
        return f"race_{RACE_IDS[self]}"


class Clan(_Vocabulary):
    """部族。所属種族は CLAN_RACES で引く。"""

    MIDLANDER = "Midlander"
    HIGHLANDER = "Highlander"
    WILDWOOD = "Wildwood"
    DUSKWIGHT = "Duskwight"
    PLAINSFOLK = "Plainsfolk"
    DUNESFOLK = "Dunesfolk"
    SEEKER_OF_THE_SUN = "Seeker of the Sun"
    KEEPER_OF_THE_MOON = "Keeper of the Moon"
    SEA_WOLF = "Sea Wolf"
    HELLSGUARD = "Hellsguard"
    RAEN = "Raen"
    XAELA = "Xaela"
    HELIONS = "Helions"
    THE_LOST = "The Lost"
    RAVA = "Rava"
    VEENA = "Veena"

    @property
    def race(self) -> Race:
        return CLAN_RACES[self]

    def query_value(self) -> str:
        return f"tribe_{CLAN_IDS[self]}"


class Gender(_Vocabulary):
    """性別。Lodestone 上では記号で表示される。"""

    FEMALE = "♀"
    MALE = "♂"


WORLD_DATACENTERS: Dict[World, Datacenter] = {}
for _dc, _names in (
    (Datacenter.AETHER, "ADAMANTOISE CACTUAR FAERIE GILGAMESH JENOVA MIDGARDSORMR SARGATANAS SIREN"),
    (Datacenter.PRIMAL, "BEHEMOTH EXCALIBUR EXODUS FAMFRIT HYPERION LAMIA LEVIATHAN ULTROS"),
    (Datacenter.CRYSTAL, "BALMUNG BRYNHILDR COEURL DIABOLOS GOBLIN MALBORO MATEUS ZALERA"),
    (Datacenter.DYNAMIS, "CUCHULAINN GOLEM HALICARNASSUS KRAKEN MADUIN MARILITH RAFFLESIA SERAPH"),
    (Datacenter.CHAOS, "CERBERUS LOUISOIX MOOGLE OMEGA PHANTOM RAGNAROK SAGITTARIUS SPRIGGAN"),
    (Datacenter.LIGHT, "ALPHA LICH ODIN PHOENIX RAIDEN SHIVA TWINTANIA ZODIARK"),
    (Datacenter.MATERIA, "BISMARCK RAVANA SEPHIROT SOPHIA ZURVAN"),
    (Datacenter.ELEMENTAL, "AEGIS ATOMOS CARBUNCLE GARUDA GUNGNIR KUJATA TONBERRY TYPHON"),
    (Datacenter.GAIA, "ALEXANDER BAHAMUT DURANDAL FENRIR IFRIT RIDILL TIAMAT ULTIMA"),
    (Datacenter.MANA, "ANIMA ASURA CHOCOBO HADES IXION MASAMUNE PANDAEMONIUM TITAN"),
    (Datacenter.METEOR, "BELIAS MANDRAGORA RAMUH SHINRYU UNICORN VALEFOR YOJIMBO ZEROMUS"),
):
    for _name in _names.split():
        WORLD_DATACENTERS[World[_name]] = _dc

LANGUAGE_CODES: Dict[Language, str] = {
    Language.JAPANESE: "ja",
    Language.ENGLISH: "en",
    Language.GERMAN: "de",
    Language.FRENCH: "fr",
}

GRAND_COMPANY_IDS: Dict[GrandCompany, int] = {
    GrandCompany.UNAFFILIATED: 0,
    GrandCompany.MAELSTROM: 1,
    GrandCompany.TWIN_ADDER: 2,
    GrandCompany.IMMORTAL_FLAMES: 3,
}

# ゲーム内 ClassJob ID（Lodestone の classjob パラメータと同じ）
CLASS_JOB_IDS: Dict[ClassJob, int] = {cj: i for i, cj in enumerate(ClassJob, start=1)}

JOB_BASE_CLASSES: Dict[ClassJob, ClassJob] = {
    ClassJob.PALADIN: ClassJob.GLADIATOR,
    ClassJob.MONK: ClassJob.PUGILIST,
    ClassJob.WARRIOR: ClassJob.MARAUDER,
    ClassJob.DRAGOON: ClassJob.LANCER,
    ClassJob.BARD: ClassJob.ARCHER,
    ClassJob.WHITE_MAGE: ClassJob.CONJURER,
    ClassJob.BLACK_MAGE: ClassJob.THAUMATURGE,
    ClassJob.SUMMONER: ClassJob.ARCANIST,
    ClassJob.NINJA: ClassJob.ROGUE,
}

RACE_IDS: Dict[Race, int] = {race: i for i, race in enumerate(Race, start=1)}

CLAN_IDS: Dict[Clan, int] = {clan: i for i, clan in enumerate(Clan, start=1)}

# 部族は 2 つずつ種族の定義順に並ぶ
CLAN_RACES: Dict[Clan, Race] = {clan: list(Race)[(i - 1) // 2] for clan, i in CLAN_IDS.items()}

_ALIASES: Dict[str, Dict[str, _Vocabulary]] = {
    "Language": {
        "ja": Language.JAPANESE,
        "en": Language.ENGLISH,
        "de": Language.GERMAN,
        "fr": Language.FRENCH,
    },
    "GrandCompany": {
        "none": GrandCompany.UNAFFILIATED,
        "twin adder": GrandCompany.TWIN_ADDER,
        "twinadder": GrandCompany.TWIN_ADDER,
        "immortalflames": GrandCompany.IMMORTAL_FLAMES,
    },
    "Race": {
        "miqote": Race.MIQOTE,
        "aura": Race.AU_RA,
    },
    "Gender": {
        "female": Gender.FEMALE,
        "male": Gender.MALE,
    },
}
