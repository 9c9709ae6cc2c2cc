"""HTML renderer: the terminal layout as monospace paragraphs."""

from __future__ import annotations

import html

from planner.dependency_graph import Status
from renderers.box_renderer import BoxRenderer

HTML_ROW = (
    "<p style='font-family: monospace; font-size: 16px; "
    "margin: 0px; line-height: 16px'>"
)
COMPLETED_SPAN = "<span style='text-decoration:line-through;color:blue'>"
ACTIONABLE_SPAN = "<span style='color:red'>"


class HtmlRenderer(BoxRenderer):
    format_name = "html"
    space = "&nbsp;"
    row_prefix = HTML_ROW
    eol = "</p>\n"

    def escape(self, text: str) -> str:
        return html.escape(text, quote=True).replace(" ", self.space)

    def decorate(self, label: str, status: Status) -> str:
        if self.options.no_color:
            return label
        if status is Status.COMPLETED:
            return f"{COMPLETED_SPAN}{label}</span>"
        if status is Status.ACTIONABLE:
            return f"{ACTIONABLE_SPAN}{label}</span>"
        return label
