"""コマンドライン実行例のテスト。取得処理は patch で差し替える。"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

import main
from lodestone.errors import HttpStatusError, TransportError
from lodestone.models import FreeCompanyRef, Profile
from lodestone.vocabulary import ClassJob, Datacenter, Language


@pytest.mark.light
def test_build_search_from_arguments():
    args = main.build_arg_parser().parse_args(
        ["search", "--name", "Strawberry Custard", "--datacenter", "primal", "--language", "en", "--page", "2"]
    )
    filters = main.build_search(args).filters

    assert filters.name == "Strawberry Custard"
    assert filters.world is Datacenter.PRIMAL
    assert filters.language is Language.ENGLISH
    assert filters.page == 2


@pytest.mark.light
def test_profile_command_prints_json(capsys):
    profile = Profile(
        id=12345,
        name="Strawberry Custard",
        free_company=FreeCompanyRef(name="Custard Crew"),
        active_class_job=ClassJob.BLACK_MAGE,
    )
    with patch("main.client.fetch_profile", return_value=profile) as fetch:
        assert main.main(["profile", "12345"]) == 0

    assert fetch.call_args.args[0] == 12345
    out = json.loads(capsys.readouterr().out)
    assert out["id"] == 12345
    assert out["free_company"] == {"name": "Custard Crew", "id": None}
    assert out["active_class_job"] == "Black Mage"


@pytest.mark.light
@pytest.mark.parametrize(
    "error",
    [HttpStatusError(404, "/lodestone/character/1/"), HttpStatusError(500), TransportError("refused")],
)
def test_failures_exit_with_status_1(error, capsys):
    with patch("main.client.fetch_profile", side_effect=error):
        assert main.main(["profile", "1"]) == 1
    assert capsys.readouterr().out == ""


@pytest.mark.light
def test_invalid_filter_exits_with_status_1():
    assert main.main(["search", "--datacenter", "Atlantis"]) == 1
