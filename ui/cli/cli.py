"""CLI entrypoint for todotree."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

import typer

from ui.cli import commands

app = typer.Typer(help="Render a markdown todo list as a dependency tree")
config_app = typer.Typer(help="Configuration commands")


def _overrides(
    target: Optional[List[str]],
    output_format: Optional[str],
    hide_completed: Optional[bool],
    depth: Optional[int],
    separator: Optional[str],
    no_color: Optional[bool],
    auto_add: Optional[bool],
    hide_comment: Optional[bool],
    hide_owner: Optional[bool],
    owner: Optional[List[str]],
    reverse: Optional[bool],
    width: Optional[int],
) -> dict[str, Any]:
    return {
        "targets": target or None,
        "format": output_format,
        "hide_completed": hide_completed,
        "depth": depth,
        "separator": separator,
        "no_color": no_color,
        "auto_add": auto_add,
        "hide_comment": hide_comment,
        "hide_owner": hide_owner,
        "owners": owner or None,
        "reverse": reverse,
        "width": width,
    }


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Render a markdown todo list as a dependency tree."""
    commands.configure_logging(verbose)


@app.command("render")
def render_cmd(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Todo markdown file(s)"),
    target: Optional[List[str]] = typer.Option(None, "--target", "-t", help="Todo to start from (repeatable)"),
    output_format: Optional[str] = typer.Option(None, "--format", "-f", help="term, html, json or md"),
    hide_completed: Optional[bool] = typer.Option(None, "--hide-completed/--show-completed"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d", help="Levels from the top (>0) or from the leaves (<0)"),
    separator: Optional[str] = typer.Option(None, "--separator", help="Joins multiple comment lines of one todo"),
    no_color: Optional[bool] = typer.Option(None, "--no-color/--color"),
    auto_add: Optional[bool] = typer.Option(None, "--auto-add/--no-auto-add", help="Create todos only named as dependencies"),
    hide_comment: Optional[bool] = typer.Option(None, "--hide-comment/--show-comment"),
    hide_owner: Optional[bool] = typer.Option(None, "--hide-owner/--show-owner"),
    owner: Optional[List[str]] = typer.Option(None, "--owner", "-o", help="Only branches touching this owner (repeatable)"),
    reverse: Optional[bool] = typer.Option(None, "--reverse/--no-reverse", help="Children above their parent"),
    width: Optional[int] = typer.Option(None, "--width", "-w", min=0, help="Display width, 0 to detect"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """Render the todo tree once."""
    commands.render(
        files=files,
        config_path=config,
        overrides=_overrides(
            target, output_format, hide_completed, depth, separator, no_color,
            auto_add, hide_comment, hide_owner, owner, reverse, width,
        ),
    )


@app.command("watch")
def watch_cmd(
    files: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Todo markdown file(s)"),
    target: Optional[List[str]] = typer.Option(None, "--target", "-t"),
    output_format: Optional[str] = typer.Option(None, "--format", "-f"),
    hide_completed: Optional[bool] = typer.Option(None, "--hide-completed/--show-completed"),
    depth: Optional[int] = typer.Option(None, "--depth", "-d"),
    separator: Optional[str] = typer.Option(None, "--separator"),
    no_color: Optional[bool] = typer.Option(None, "--no-color/--color"),
    auto_add: Optional[bool] = typer.Option(None, "--auto-add/--no-auto-add"),
    hide_comment: Optional[bool] = typer.Option(None, "--hide-comment/--show-comment"),
    hide_owner: Optional[bool] = typer.Option(None, "--hide-owner/--show-owner"),
    owner: Optional[List[str]] = typer.Option(None, "--owner", "-o"),
    reverse: Optional[bool] = typer.Option(None, "--reverse/--no-reverse"),
    width: Optional[int] = typer.Option(None, "--width", "-w", min=0),
    interval: Optional[float] = typer.Option(None, "--interval", min=0.1, help="Polling period in seconds"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """Re-render whenever a file or the terminal size changes."""
    commands.watch(
        files=files,
        config_path=config,
        overrides=_overrides(
            target, output_format, hide_completed, depth, separator, no_color,
            auto_add, hide_comment, hide_owner, owner, reverse, width,
        ),
        interval=interval,
    )


@config_app.command("show")
def config_show_cmd(config: Optional[Path] = typer.Option(None, "--config", help="YAML config file")) -> None:
    """Show effective configuration."""
    commands.config_show(config_path=config)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
