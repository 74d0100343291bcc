import json
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from conftest import TEST_CUE_LOVELESS, TEST_CUE_MIXED_MODE
from cuesheet.__main__ import main
from cuesheet.cli import Context, cli, commands, dump, musicbrainz, tokens
from cuesheet.commands import CueSyntaxError
from cuesheet.config import Config


def test_dump(config: Config) -> None:
    ctx = Context(config=config)
    runner = CliRunner()
    res = runner.invoke(dump, [str(TEST_CUE_MIXED_MODE)], obj=ctx)
    assert res.exit_code == 0
    data = json.loads(res.output)
    assert data["title"] == "Mixed Mode Disc"
    assert data["files"][0]["format"] == "BINARY"
    assert [t["type"] for t in data["files"][0]["tracks"]] == ["MODE1/2352", "AUDIO", "AUDIO"]
    assert data["files"][0]["tracks"][1]["indexes"] == [
        {"number": 0, "time": "58:39:36"},
        {"number": 1, "time": "58:41:36"},
    ]


def test_musicbrainz(config: Config) -> None:
    ctx = Context(config=config)
    runner = CliRunner()
    res = runner.invoke(musicbrainz, [str(TEST_CUE_LOVELESS)], obj=ctx)
    assert res.exit_code == 0
    assert res.output.splitlines() == [
        "01 Only Shallow - My Bloody Valentine 04:17",
        "02 Loomer - My Bloody Valentine 02:38",
        "03 Touched - My Bloody Valentine ??:??",
    ]


def test_tokens(config: Config) -> None:
    ctx = Context(config=config)
    runner = CliRunner()
    res = runner.invoke(tokens, [str(TEST_CUE_LOVELESS)], obj=ctx)
    assert res.exit_code == 0
    lines = res.output.splitlines()
    assert lines[:3] == ['StringToken\t"REM"', 'StringToken\t"GENRE"', 'StringToken\t"Alternative"']
    assert "NumberToken\t01" in lines
    assert lines[-1] == "TimeToken\t06:56:15"


def test_commands(config: Config) -> None:
    ctx = Context(config=config)
    runner = CliRunner()
    res = runner.invoke(commands, [str(TEST_CUE_LOVELESS)], obj=ctx)
    assert res.exit_code == 0
    lines = res.output.splitlines()
    assert lines[0] == "RemCommand(key='GENRE', value=StringToken(value='Alternative'))"
    assert lines[-1] == "IndexCommand(number=1, time=Time(minutes=6, seconds=56, frames=15))"


def test_cli_reads_config_file(config_path: Path) -> None:
    config_path.write_text('unknown_duration = "-"')
    runner = CliRunner()
    res = runner.invoke(cli, ["-c", str(config_path), "musicbrainz", str(TEST_CUE_LOVELESS)])
    assert res.exit_code == 0
    assert res.output.splitlines()[-1] == "03 Touched - My Bloody Valentine -"


def test_cli_propagates_parse_errors(config_path: Path, isolated_dir: Path) -> None:
    path = isolated_dir / "broken.cue"
    path.write_text("TITLE")
    runner = CliRunner()
    res = runner.invoke(cli, ["-c", str(config_path), "dump", str(path)])
    assert res.exit_code == 1
    assert isinstance(res.exception, CueSyntaxError)


def test_main_prints_expected_errors(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    config_path: Path,
    isolated_dir: Path,
) -> None:
    path = isolated_dir / "broken.cue"
    path.write_text("TITLE")
    monkeypatch.setattr(sys, "argv", ["cuesheet", "-c", str(config_path), "dump", str(path)])
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert out.startswith("cuesheet.commands.CueSyntaxError: ")
    assert "expected a title, found end of file" in out
