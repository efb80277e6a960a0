"""リクエスト組み立て処理のテスト。"""

from __future__ import annotations

import itertools

import pytest

from lodestone.errors import InvalidFilterError
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
from lodestone.vocabulary import (
    ClassJob,
    Clan,
    Datacenter,
    GrandCompany,
    Language,
    Race,
    World,
)


@pytest.mark.light
def test_empty_builder_searches_everything():
    descriptor = SearchBuilder().build_for_search()
    assert descriptor == RequestDescriptor("/lodestone/character/", ())
    assert descriptor.query_string() == ""
    assert descriptor.url("https://na.finalfantasyxiv.com") == "https://na.finalfantasyxiv.com/lodestone/character/"


@pytest.mark.light
def test_search_params_follow_fixed_order():
    descriptor = (
        SearchBuilder()
        .page(2)
        .grand_company(GrandCompany.MAELSTROM)
        .language(Language.ENGLISH)
        .race(Race.LALAFELL)
        .class_job(ClassJob.BLACK_MAGE)
        .datacenter(Datacenter.PRIMAL)
        .character("Strawberry Custard")
        .build_for_search()
    )
    assert descriptor.params == (
        ("q", "Strawberry Custard"),
        ("worldname", "_dc_Primal"),
        ("classjob", "25"),
        ("race_tribe", "race_3"),
        ("blog_lang", "en"),
        ("gcid", "1"),
        ("page", "2"),
    )
    assert descriptor.query_string() == (
        "q=Strawberry+Custard&worldname=_dc_Primal&classjob=25"
        "&race_tribe=race_3&blog_lang=en&gcid=1&page=2"
    )


@pytest.mark.light
def test_search_query_is_identical_for_any_mutator_order():
    """同じ条件なら適用順に関係なく同一のクエリ文字列になることを確認する。"""
    steps = [
        lambda b: b.character("Strawberry Custard"),
        lambda b: b.world(World.FAMFRIT),
        lambda b: b.language(Language.JAPANESE),
        lambda b: b.grand_company(GrandCompany.IMMORTAL_FLAMES),
        lambda b: b.clan(Clan.PLAINSFOLK),
    ]
    queries = set()
    for order in itertools.permutations(steps):
        builder = SearchBuilder()
        for step in order:
            builder = step(builder)
        queries.add(builder.build_for_search().query_string())

    assert queries == {
        "q=Strawberry+Custard&worldname=Famfrit&race_tribe=tribe_5&blog_lang=ja&gcid=3"
    }


@pytest.mark.light
def test_last_write_wins():
    builder = SearchBuilder().character("First").character("Second")
    assert builder.filters.name == "Second"

    builder = SearchBuilder().language("en").language("fr")
    assert builder.filters.language is Language.FRENCH


@pytest.mark.light
def test_world_and_datacenter_share_one_key():
    builder = SearchBuilder().world("Famfrit").datacenter("Primal")
    assert builder.build_for_search().params == (("worldname", "_dc_Primal"),)

    builder = SearchBuilder().datacenter("Primal").world("famfrit")
    assert builder.build_for_search().params == (("worldname", "Famfrit"),)


@pytest.mark.light
def test_race_and_clan_share_one_key():
    builder = SearchBuilder().race("Au Ra").clan("Xaela")
    assert builder.build_for_search().params == (("race_tribe", "tribe_12"),)


@pytest.mark.light
def test_builder_is_immutable():
    base = SearchBuilder().character("Strawberry Custard")
    narrowed = base.datacenter(Datacenter.PRIMAL)

    assert base.filters == SearchFilter(name="Strawberry Custard")
    assert narrowed.filters.world is Datacenter.PRIMAL
    assert base.build_for_search().params == (("q", "Strawberry Custard"),)


@pytest.mark.light
def test_character_name_is_not_validated():
    descriptor = SearchBuilder().character("  ??? 名前 ").build_for_search()
    assert descriptor.params == (("q", "  ??? 名前 "),)


@pytest.mark.light
@pytest.mark.parametrize(
    "call",
    [
        lambda b: b.datacenter("Atlantis"),
        lambda b: b.world("Nowhere"),
        lambda b: b.language("Klingon"),
        lambda b: b.grand_company("Sylphs"),
        lambda b: b.class_job("Chronomancer"),
        lambda b: b.race("Galka"),
        lambda b: b.page(0),
        lambda b: b.page("abc"),
        lambda b: b.page(2.5),
    ],
)
def test_unknown_vocabulary_fails_at_build_time(call):
    with pytest.raises(InvalidFilterError):
        call(SearchBuilder())


@pytest.mark.light
def test_profile_request_has_no_filters():
    builder = SearchBuilder().character("ignored").datacenter("Primal")
    descriptor = builder.build_for_profile(12345)

    assert descriptor == profile_request(12345)
    assert descriptor.path == "/lodestone/character/12345/"
    assert descriptor.params == ()


@pytest.mark.light
def test_other_descriptors():
    assert class_job_request(12345).path == "/lodestone/character/12345/class_job/"
    assert world_status_request().path == "/lodestone/worldstatus/"
    assert search_request() == SearchBuilder().build_for_search()


@pytest.mark.light
def test_free_company_ranking_request():
    descriptor = free_company_ranking_request(
        "monthly", number=3, datacenter="primal", grand_company="Maelstrom", page=2
    )
    assert descriptor.path == "/lodestone/ranking/fc/monthly/3/"
    assert descriptor.params == (("dcgroup", "Primal"), ("gcid", "1"), ("page", "2"))

    assert free_company_ranking_request().path == "/lodestone/ranking/fc/weekly/"

    with pytest.raises(InvalidFilterError):
        free_company_ranking_request("daily")


@pytest.mark.light
@pytest.mark.parametrize("profile_id", [0, -5, True, 12.9, "abc", None])
def test_profile_id_must_be_positive_integer(profile_id):
    with pytest.raises(InvalidFilterError) as exc_info:
        profile_request(profile_id)
    assert exc_info.value.vocabulary == "profile id"

    with pytest.raises(InvalidFilterError):
        class_job_request(profile_id)
    with pytest.raises(InvalidFilterError):
        SearchBuilder().build_for_profile(profile_id)


@pytest.mark.light
def test_profile_id_accepts_digit_string():
    assert profile_request("12345") == profile_request(12345)


@pytest.mark.light
@pytest.mark.parametrize("value", ["", "   "])
def test_empty_grand_company_is_rejected(value):
    with pytest.raises(InvalidFilterError):
        SearchBuilder().grand_company(value)
