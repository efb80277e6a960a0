"""Lodestone HTMLパーサの fixture テスト。"""

from __future__ import annotations

from dataclasses import fields

import pytest

from lodestone.errors import ParseError
from lodestone.models import (
    Attribute,
    ClassLevel,
    FreeCompanyRef,
    Profile,
    ProfileSearchResult,
    SecondaryAttribute,
    ServerStatus,
)
from lodestone.parser import (
    parse_class_jobs,
    parse_free_company_ranking,
    parse_profile,
    parse_search,
    parse_world_status,
)
from lodestone.vocabulary import ClassJob, Clan, Gender, GrandCompany, Race


@pytest.mark.light
def test_parse_full_profile(fixture_html):
    profile = parse_profile(fixture_html("profile_full.html"))

    assert profile.id == 11908971
    assert profile.name == "Strawberry Custard"
    assert profile.title == "Warrior of Light"
    assert profile.world == "Famfrit"
    assert profile.datacenter == "Primal"
    assert profile.race is Race.LALAFELL
    assert profile.clan is Clan.PLAINSFOLK
    assert profile.gender is Gender.FEMALE
    assert profile.nameday == "3rd Sun of the 1st Umbral Moon"
    assert profile.guardian == "Halone, the Fury"
    assert profile.city_state == "Limsa Lominsa"
    assert profile.grand_company is GrandCompany.MAELSTROM
    assert profile.grand_company_rank == "Second Storm Lieutenant"
    assert profile.free_company == FreeCompanyRef(name="Custard Crew", id="9229001536389012345")
    assert profile.active_class_job is ClassJob.BLACK_MAGE
    assert profile.active_level == 70
    assert profile.hp == 15141
    assert profile.secondary_attribute == SecondaryAttribute(kind="MP", value=10000)
    assert profile.avatar_url == "https://img2.finalfantasyxiv.com/f/0a1b2c3d4e5f_96x96.jpg"
    assert profile.portrait_url == "https://img2.finalfantasyxiv.com/f/0a1b2c3d4e5f_640x873.jpg"


@pytest.mark.light
def test_parse_profile_attributes(fixture_html):
    profile = parse_profile(fixture_html("profile_full.html"))

    assert profile.attributes[0] == Attribute(name="Strength", value=130)
    assert {a.name: a.value for a in profile.attributes} == {
        "Strength": 130,
        "Dexterity": 295,
        "Vitality": 1246,
        "Intelligence": 1349,
        "Mind": 219,
    }


@pytest.mark.light
def test_parse_profile_class_levels(fixture_html):
    """未知のクラス名は読み飛ばし、ジョブのレベルを元クラスにも複製することを確認する。"""
    profile = parse_profile(fixture_html("profile_full.html"))
    levels = {c.class_job: c.level for c in profile.class_levels}

    assert [c.class_job for c in profile.class_levels] == [
        ClassJob.GLADIATOR,
        ClassJob.WARRIOR,
        ClassJob.MARAUDER,
        ClassJob.GUNBREAKER,
        ClassJob.BLACK_MAGE,
        ClassJob.THAUMATURGE,
        ClassJob.FISHER,
    ]
    assert levels[ClassJob.GLADIATOR] == 22
    assert ClassJob.PALADIN not in levels
    assert levels[ClassJob.MARAUDER] == 60
    assert levels[ClassJob.GUNBREAKER] is None
    assert levels[ClassJob.THAUMATURGE] == 70


@pytest.mark.light
def test_parse_minimal_profile_marks_optional_fields_absent(fixture_html):
    """id と name だけのページでも例外にならず、任意項目がすべて未設定になることを確認する。"""
    profile = parse_profile(fixture_html("profile_minimal.html"))

    assert profile.id == 12345
    assert profile.name == "Strawberry Custard"
    for f in fields(Profile):
        if f.name in ("id", "name"):
            continue
        assert getattr(profile, f.name) in (None, ()), f.name


@pytest.mark.light
def test_parse_profile_requires_name(fixture_html):
    html = fixture_html("profile_minimal.html").replace("frame__chara__name", "frame__chara__nickname")
    with pytest.raises(ParseError) as exc_info:
        parse_profile(html)
    assert exc_info.value.context == "profile name"


@pytest.mark.light
def test_parse_profile_requires_id(fixture_html):
    html = fixture_html("profile_minimal.html").replace("/lodestone/character/12345/", "/lodestone/")
    with pytest.raises(ParseError) as exc_info:
        parse_profile(html)
    assert exc_info.value.context == "profile id"


@pytest.mark.light
def test_parse_profile_lenient_numbers_and_unknown_vocabulary(fixture_html):
    html = (
        fixture_html("profile_full.html")
        .replace("<span>15141</span>", "<span>???</span>")
        .replace("Plainsfolk / ♀", "Moonfolk / ?")
        .replace("<td>130</td>", "<td>-</td>")
    )
    profile = parse_profile(html)

    assert profile.hp is None
    assert profile.race is Race.LALAFELL
    assert profile.clan is None
    assert profile.gender is None
    assert profile.attributes[0] == Attribute(name="Strength", value=None)


@pytest.mark.light
def test_parse_au_ra_race_block():
    html = """
    <html><head><meta property="og:url" content="https://na.finalfantasyxiv.com/lodestone/character/7/"></head>
    <body>
      <p class="frame__chara__name">Aya Raen</p>
      <div class="character-block__box">
        <p class="character-block__title">Race/Clan/Gender</p>
        <p class="character-block__name">Au Ra<br/>Raen / ♂</p>
      </div>
    </body></html>
    """
    profile = parse_profile(html)
    assert (profile.race, profile.clan, profile.gender) == (Race.AU_RA, Clan.RAEN, Gender.MALE)


@pytest.mark.light
@pytest.mark.parametrize("html", ["", "   \n  ", None])
def test_empty_document_is_parse_error(html):
    with pytest.raises(ParseError) as exc_info:
        parse_profile(html)
    assert exc_info.value.context == "document"


@pytest.mark.light
def test_parse_is_idempotent(fixture_html):
    html = fixture_html("profile_full.html")
    assert parse_profile(html) == parse_profile(html)

    html = fixture_html("search_results.html")
    assert parse_search(html) == parse_search(html)


@pytest.mark.light
def test_parse_class_job_page(fixture_html):
    levels = parse_class_jobs(fixture_html("class_job.html"))
    by_job = {c.class_job: c for c in levels}

    assert by_job[ClassJob.GLADIATOR] == ClassLevel(ClassJob.GLADIATOR, 22, 10122, 71400)
    assert by_job[ClassJob.WARRIOR] == ClassLevel(ClassJob.WARRIOR, 60, 51841, 4470000)
    assert by_job[ClassJob.MARAUDER] == ClassLevel(ClassJob.MARAUDER, 60, 51841, 4470000)
    assert by_job[ClassJob.DARK_KNIGHT] == ClassLevel(ClassJob.DARK_KNIGHT, 30, 0, 162500)
    assert by_job[ClassJob.GUNBREAKER] == ClassLevel(ClassJob.GUNBREAKER, None, None, None)
    assert by_job[ClassJob.ARCANIST].level == 33
    assert by_job[ClassJob.THAUMATURGE].current_exp == 6910613
    assert by_job[ClassJob.FISHER].max_exp == 162500
    assert ClassJob.PALADIN not in by_job
    assert ClassJob.WHITE_MAGE not in by_job


@pytest.mark.light
def test_parse_search_results(fixture_html):
    results = parse_search(fixture_html("search_results.html"))

    assert [r.id for r in results] == [11908971, 38686892, 4242]
    assert results[0] == ProfileSearchResult(
        id=11908971,
        name="Strawberry Custard",
        world="Famfrit",
        datacenter="Primal",
        free_company_name="Custard Crew",
        rank="Maelstrom / Second Storm Lieutenant",
        avatar_url="https://img2.finalfantasyxiv.com/f/aaa_96x96.jpg",
    )
    assert results[1].world == "Lamia"
    assert results[1].free_company_name is None
    assert results[1].rank is None
    assert results[2] == ProfileSearchResult(id=4242, name="Strawberry Tart")


@pytest.mark.light
def test_parse_search_zero_rows_is_empty_list(fixture_html):
    assert parse_search(fixture_html("search_zero.html")) == []


@pytest.mark.light
def test_parse_search_without_results_region_is_parse_error(fixture_html):
    with pytest.raises(ParseError) as exc_info:
        parse_search(fixture_html("maintenance.html"))
    assert exc_info.value.context == "search results"


@pytest.mark.light
def test_parse_search_row_without_name_is_parse_error(fixture_html):
    html = fixture_html("search_results.html").replace(
        '<p class="entry__name">Strawberry Tart</p>', ""
    )
    with pytest.raises(ParseError) as exc_info:
        parse_search(html)
    assert exc_info.value.context == "search result name"


@pytest.mark.light
def test_parse_world_status(fixture_html):
    datacenters = parse_world_status(fixture_html("world_status.html"))

    assert [dc.name for dc in datacenters] == ["Primal", "Light"]
    famfrit, lamia = datacenters[0].worlds
    assert famfrit.name == "Famfrit"
    assert famfrit.status is ServerStatus.ONLINE
    assert famfrit.category == "Standard"
    assert famfrit.character_creation is False
    assert lamia.status is ServerStatus.PARTIAL_MAINTENANCE
    assert lamia.character_creation is True

    (alpha,) = datacenters[1].worlds
    assert alpha.status is ServerStatus.MAINTENANCE
    assert alpha.category is None
    assert alpha.character_creation is None


@pytest.mark.light
def test_parse_world_status_without_groups_is_parse_error(fixture_html):
    with pytest.raises(ParseError):
        parse_world_status(fixture_html("maintenance.html"))


@pytest.mark.light
def test_parse_free_company_ranking(fixture_html):
    rows = parse_free_company_ranking(fixture_html("fc_ranking.html"))

    assert len(rows) == 2
    first = rows[0]
    assert first.rank == 1
    assert first.name == "Custard Crew"
    assert first.id == "9229001536389012345"
    assert (first.world, first.datacenter) == ("Famfrit", "Primal")
    assert first.grand_company is GrandCompany.MAELSTROM
    assert first.credits == 1234567
    assert rows[1].grand_company is GrandCompany.TWIN_ADDER


@pytest.mark.light
def test_parse_free_company_ranking_without_table_is_parse_error(fixture_html):
    with pytest.raises(ParseError) as exc_info:
        parse_free_company_ranking(fixture_html("search_zero.html"))
    assert exc_info.value.context == "ranking table"
