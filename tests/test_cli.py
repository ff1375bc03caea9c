"""
Tests for the typer CLI, run in-process with CliRunner.
"""
import json
import logging

import pytest

from typer.testing import CliRunner

from conftest import SMALL_CATALOG
from generals_grid.main import app, parse_pick

runner = CliRunner()


def test_parse_pick():
    assert parse_pick("主将:t0:关羽") == ("主将", "T0", "关羽")
    assert parse_pick("A:T1:Name:With:Colons") == ("A", "T1", "Name:With:Colons")


def test_grid_renders():
    result = runner.invoke(app, ["grid", "-p", "主将:T0:关羽"])
    assert result.exit_code == 0, result.output
    assert "Added" in result.output
    assert "Selected: 1/5" in result.output


def test_grid_reports_blocked_pick():
    result = runner.invoke(app, ["grid", "-p", "主将:T0:关羽", "-p", "军师:T0:诸葛亮"])
    assert result.exit_code == 0, result.output
    assert "Blocked" in result.output
    assert "Selected: 1/5" in result.output


def test_grid_json():
    result = runner.invoke(app, ["grid", "--json", "-p", "主将:T3:徐晃", "-p", "军师:T0:郭嘉"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["count"] == 2
    assert data["used_tiers"] == ["T0", "T3"]
    statuses = {c["unit"]: c["status"] for c in data["board"]["先锋"]["T2"]}
    assert statuses == {"甘宁": "available", "太史慈": "available", "徐晃": "dimmed"}


def test_grid_unknown_pick_fails():
    result = runner.invoke(app, ["grid", "-p", "主将:T0:吕布"])
    assert result.exit_code == 1
    assert "Not in catalog" in result.output


def test_grid_malformed_pick_fails():
    result = runner.invoke(app, ["grid", "-p", "主将-T0-关羽"])
    assert result.exit_code != 0


def test_missing_catalog_fails(tmp_path):
    result = runner.invoke(app, ["roles", "--catalog", str(tmp_path / "nope.yaml")])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_check_explains_block():
    result = runner.invoke(app, ["check", "先锋", "T2", "徐晃", "-p", "主将:T3:徐晃"])
    assert result.exit_code == 0, result.output
    assert "DIMMED" in result.output
    assert "already picked" in result.output


def test_check_available():
    result = runner.invoke(app, ["check", "先锋", "t2", "甘宁"])
    assert result.exit_code == 0, result.output
    assert "AVAILABLE" in result.output


def test_roles_with_custom_catalog(write_catalog):
    path = write_catalog(SMALL_CATALOG)
    result = runner.invoke(app, ["roles", "--catalog", str(path)])
    assert result.exit_code == 0, result.output
    assert "Vanguard" in result.output
    assert "Strategist" in result.output


def test_play_session():
    commands = "\n".join([
        "主将 T0 关羽",
        "军师 T0 诸葛亮",
        "nonsense",
        "主将 T0 吕布",
        "team",
        "clear",
        "quit",
    ]) + "\n"
    result = runner.invoke(app, ["play"], input=commands)
    assert result.exit_code == 0, result.output
    assert "Added" in result.output
    assert "Blocked" in result.output
    assert "Expected: <role> <tier> <general>" in result.output
    assert "Not in catalog" in result.output
    assert "Team cleared." in result.output
    assert "No generals selected." in result.output


def test_grid_shows_legend():
    result = runner.invoke(app, ["grid"])
    assert result.exit_code == 0, result.output
    assert "available / swap" in result.output
    assert "blocked" in result.output


@pytest.fixture
def restore_root_level():
    root = logging.getLogger()
    level = root.level
    yield root
    root.setLevel(level)


def test_verbose_shows_load_info(restore_root_level, caplog):
    result = runner.invoke(app, ["-v", "roles"])
    assert result.exit_code == 0, result.output
    assert restore_root_level.level == logging.INFO
    assert "Loaded catalog" in caplog.text


def test_double_verbose_shows_transitions(restore_root_level, caplog):
    result = runner.invoke(app, ["-vv", "grid", "-p", "主将:T0:关羽"])
    assert result.exit_code == 0, result.output
    assert restore_root_level.level == logging.DEBUG
    assert "Selected 主将/T0/关羽" in caplog.text
