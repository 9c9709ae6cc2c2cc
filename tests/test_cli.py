"""CLI tests through typer's runner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from ui.cli import commands
from ui.cli.cli import app

runner = CliRunner()

BOARD = """\
# release
- @ alice
- % ship it
- : build ~design
# build
- @ bob
"""


def write(tmp_path: Path, text: str, name: str = "todo.md") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_render_term(tmp_path: Path) -> None:
    todo = write(tmp_path, BOARD)

    result = runner.invoke(app, ["render", str(todo), "--auto-add", "--no-color", "--width", "80"])

    assert result.exit_code == 0, result.output
    assert "└── release" in result.output
    assert "│ alice │ ship it │" in result.output
    assert "├── build" in result.output
    assert "└── design" in result.output


def test_render_json_with_target(tmp_path: Path) -> None:
    todo = write(tmp_path, BOARD)

    result = runner.invoke(app, ["render", str(todo), "--auto-add", "-f", "json", "-t", "build"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert [child["name"] for child in payload["dependencies"]] == ["build"]
    assert payload["dependencies"][0]["status"] == "actionable"


def test_render_reports_errors(tmp_path: Path) -> None:
    todo = write(tmp_path, BOARD)

    result = runner.invoke(app, ["render", str(todo), "--no-color"])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "undefined todo 'design'" in result.output


def test_render_rejects_unknown_format(tmp_path: Path) -> None:
    todo = write(tmp_path, "# a\n")

    result = runner.invoke(app, ["render", str(todo), "--format", "pdf"])

    assert result.exit_code == 1
    assert "wrong format string 'pdf'" in result.output


def test_config_file_supplies_defaults(tmp_path: Path) -> None:
    todo = write(tmp_path, BOARD)
    config = write(tmp_path, "tree:\n  auto_add: true\n  format: md\n", name="todotree.yaml")

    result = runner.invoke(app, ["render", str(todo), "--config", str(config)])

    assert result.exit_code == 0, result.output
    assert result.output.endswith("# build\n- @ bob\n# ~design\n")


def test_config_show(tmp_path: Path) -> None:
    config = write(tmp_path, "watch:\n  interval: 2.5\n", name="todotree.yaml")

    result = runner.invoke(app, ["config", "show", "--config", str(config)])

    assert result.exit_code == 0, result.output
    shown = json.loads(result.output)
    assert shown["watch"]["interval"] == 2.5
    assert shown["tree"]["format"] == "term"


def test_watch_renders_the_tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    todo = write(tmp_path, "# a\n")
    output: list[str] = []
    monkeypatch.setattr(commands.typer, "echo", lambda text="", **_kwargs: output.append(str(text)))

    # The command itself loops until interrupted, so bound it here.
    commands.watch(
        files=[todo],
        config_path=None,
        overrides={"no_color": True, "width": 40},
        interval=0.0,
        max_cycles=1,
    )

    assert output[0] == commands.CLEAR_SCREEN
    assert len(output) == 2
    assert [line.rstrip() for line in output[1].splitlines()] == ["/", "└── a"]


def test_render_reports_undecodable_file(tmp_path: Path) -> None:
    todo = tmp_path / "todo.md"
    todo.write_bytes(b"# caf\xe9\n")

    result = runner.invoke(app, ["render", str(todo)])

    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "not valid UTF-8" in result.output
