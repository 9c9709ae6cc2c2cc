"""ANSI terminal renderer."""

from __future__ import annotations

import typer

from planner.dependency_graph import Status
from renderers.box_renderer import BoxRenderer


class TermRenderer(BoxRenderer):
    """Box-drawing tree with colored status labels."""

    format_name = "term"

    def decorate(self, label: str, status: Status) -> str:
        if self.options.no_color:
            return label
        if status is Status.COMPLETED:
            return typer.style(label, fg=typer.colors.BLUE, strikethrough=True)
        if status is Status.ACTIONABLE:
            return typer.style(label, fg=typer.colors.RED)
        return label
