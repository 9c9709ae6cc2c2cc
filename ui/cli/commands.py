"""Typer command handlers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import typer

from core.config_loader import load_effective_config
from core.errors import TodoSyntaxError, TodoTreeError
from core.options import TreeOptions
from core.orchestrator import Orchestrator
from core.watch_loop import WatchLoop

logger = logging.getLogger("todotree.cli")

CLEAR_SCREEN = "\x1b[2J\x1b[H"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def read_sources(paths: list[Path]) -> list[tuple[str, str]]:
    """Read every input file as UTF-8 text."""
    sources: list[tuple[str, str]] = []
    for path in paths:
        try:
            sources.append((str(path), path.read_text(encoding="utf-8")))
        except UnicodeDecodeError as exc:
            raise TodoSyntaxError(f"not valid UTF-8 text ({exc.reason})", source=str(path)) from exc
    return sources


def clear_screen() -> None:
    typer.echo(CLEAR_SCREEN, nl=False)


def build_options(config_path: Path | None, overrides: dict[str, Any]) -> tuple[TreeOptions, dict[str, Any]]:
    config = load_effective_config(config_path)
    return TreeOptions.build(config.get("tree", {}), **overrides), config


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def render(files: list[Path], config_path: Path | None, overrides: dict[str, Any]) -> None:
    """Render the todo tree once."""
    try:
        options, _ = build_options(config_path, overrides)
        text = Orchestrator(options).render(read_sources(files))
    except (TodoTreeError, OSError) as exc:
        _fail(exc)
    typer.echo(text, nl=False)


def watch(
    files: list[Path],
    config_path: Path | None,
    overrides: dict[str, Any],
    interval: float | None,
    max_cycles: int | None = None,
) -> None:
    """Re-render whenever an input file or the terminal size changes."""
    try:
        options, config = build_options(config_path, overrides)
        orchestrator = Orchestrator(options)
        orchestrator.registry.build(options)
    except TodoTreeError as exc:
        _fail(exc)
    period = interval if interval is not None else float(config.get("watch", {}).get("interval", 1.0))
    loop = WatchLoop(
        paths=files,
        refresh=lambda: orchestrator.render(read_sources(files)),
        echo=lambda text: typer.echo(text, nl=not text.endswith("\n")),
        interval=period,
        clear=clear_screen,
    )
    logger.info("Watching %s every %.1fs", ", ".join(str(path) for path in files), period)
    loop.run(max_cycles=max_cycles)


def config_show(config_path: Path | None) -> None:
    """Show effective configuration."""
    try:
        config = load_effective_config(config_path)
    except TodoTreeError as exc:
        _fail(exc)
    typer.echo(json.dumps(config, indent=2))
