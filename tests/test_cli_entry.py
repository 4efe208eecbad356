"""CLI tests driven through typer's CliRunner."""

import json
import logging

import pytest
from typer.testing import CliRunner

from sfokit import cli
from sfokit.sfo.parser import SfoFile

from tests.helpers import write_sfo

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logger():
    # the CLI callback attaches a handler bound to the runner's stderr
    logger = logging.getLogger("sfokit")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


def test_help_shows_commands():
    res = runner.invoke(cli.app, ["--help"])
    assert res.exit_code == 0
    for name in ("show", "table", "get", "set", "rename", "add", "remove", "json"):
        assert name in res.stdout


def test_show_prints_key_value_lines(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["show", str(p)])
    assert res.exit_code == 0
    lines = res.stdout.splitlines()
    assert lines[0] == "APP_VER: 01.00"
    assert "PARENTAL_LEVEL: 5" in lines
    assert "TITLE_ID: BLUS12345" in lines
    assert "RAW_BLOB: deadbeef01" in lines
    assert len(lines) == 7


def test_show_defaults_to_param_sfo(tmp_path, monkeypatch):
    write_sfo(tmp_path / "PARAM.SFO")
    monkeypatch.chdir(tmp_path)
    res = runner.invoke(cli.app, ["show"])
    assert res.exit_code == 0
    assert "TITLE: My Game" in res.stdout


def test_show_missing_file_exits_nonzero(tmp_path):
    res = runner.invoke(cli.app, ["show", str(tmp_path / "nope.sfo")])
    assert res.exit_code == 1
    assert res.stdout.startswith("Error:")


def test_show_bad_magic(tmp_path):
    p = tmp_path / "bad.sfo"
    p.write_bytes(b"\x7fELF" + b"\x00" * 40)
    res = runner.invoke(cli.app, ["show", str(p)])
    assert res.exit_code == 1
    assert "not a valid SFO file" in res.stdout


def test_get(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["get", "CATEGORY", "--path", str(p)])
    assert res.exit_code == 0
    assert res.stdout.strip() == "DG"


def test_get_missing_key(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["get", "NOPE", "--path", str(p)])
    assert res.exit_code == 1
    assert "key not found" in res.output


def test_set_saves_file(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["set", "4", "Another Title", "--path", str(p)])
    assert res.exit_code == 0
    assert SfoFile.open(p).get_value("TITLE") == "Another Title\x00"


def test_set_int_parse_error_leaves_file(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    before = p.read_bytes()
    res = runner.invoke(cli.app, ["set", "3", "high", "--path", str(p)])
    assert res.exit_code == 1
    assert "cannot parse" in res.output
    assert p.read_bytes() == before


def test_set_index_out_of_range(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["set", "7", "x", "--path", str(p)])
    assert res.exit_code == 1
    assert "index out of range" in res.output


def test_rename(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["rename", "2", "CAT", "--path", str(p)])
    assert res.exit_code == 0
    sfo = SfoFile.open(p)
    assert sfo.get_key_by_index(2) == "CAT"
    assert sfo.get_value("CAT") == "DG\x00"


def test_add_and_remove(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["add", "RESOLUTION", "int", "63", "--path", str(p)])
    assert res.exit_code == 0
    sfo = SfoFile.open(p)
    assert len(sfo) == 8
    assert sfo.get_value("RESOLUTION") == 63

    res = runner.invoke(cli.app, ["remove", "7", "--path", str(p)])
    assert res.exit_code == 0
    assert "RESOLUTION" not in SfoFile.open(p)


def test_add_unknown_type(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["add", "X", "float", "1.0", "--path", str(p)])
    assert res.exit_code == 2


def test_json(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["json", str(p)])
    assert res.exit_code == 0
    payload = json.loads(res.stdout)
    assert payload[1] == {"key": "ATTRIBUTE", "type": "int32", "value": 0}
    assert payload[-1]["value"] == "deadbeef01"
    assert payload[0]["value"] == "01.00\x00"


def test_table(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["table", str(p)])
    assert res.exit_code == 0
    assert "TITLE_ID" in res.stdout
    assert "BLUS12345" in res.stdout


def test_verbose_json_logging(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    res = runner.invoke(cli.app, ["--verbose", "--log-format", "json", "show", str(p)])
    assert res.exit_code == 0
    assert "Decoded SFO" in res.output


def test_show_non_utf8_title(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO", [("TITLE", 2, b"Caf\xe9\x00")])
    res = runner.invoke(cli.app, ["show", str(p)])
    assert res.exit_code == 0
    assert res.stdout.strip() == "TITLE: Caf�"


def test_rename_with_nul_fails(tmp_path):
    p = write_sfo(tmp_path / "PARAM.SFO")
    before = p.read_bytes()
    res = runner.invoke(cli.app, ["rename", "0", "A\x00B", "--path", str(p)])
    assert res.exit_code != 0
    assert p.read_bytes() == before
