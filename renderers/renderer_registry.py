"""Renderer registry and default format wiring."""

from __future__ import annotations

import logging

from core.errors import ConfigurationError
from core.options import TreeOptions
from renderers.base_renderer import BaseRenderer
from renderers.html_renderer import HtmlRenderer
from renderers.json_renderer import JsonRenderer
from renderers.markdown_renderer import MarkdownRenderer
from renderers.term_renderer import TermRenderer

logger = logging.getLogger("todotree.render")


class RendererRegistry:
    """Maps format names to renderer classes."""

    def __init__(self) -> None:
        self._renderers: dict[str, type[BaseRenderer]] = {}

    def register(self, name: str, renderer: type[BaseRenderer]) -> None:
        self._renderers[name] = renderer

    def formats(self) -> list[str]:
        return sorted(self._renderers)

    def build(self, options: TreeOptions) -> BaseRenderer:
        """Instantiate the renderer for ``options.format`` after checking option compatibility."""
        renderer_cls = self._renderers.get(options.format)
        if renderer_cls is None:
            raise ConfigurationError(
                f"wrong format string '{options.format}' (expected one of: {', '.join(self.formats())})"
            )
        if options.reverse and not renderer_cls.supports_reverse:
            raise ConfigurationError(f"reverse order is not supported by the '{options.format}' format")
        logger.debug("Using %s renderer for format '%s'", renderer_cls.__name__, options.format)
        return renderer_cls(options)


def build_default_registry() -> RendererRegistry:
    registry = RendererRegistry()
    for renderer in (TermRenderer, HtmlRenderer, JsonRenderer, MarkdownRenderer):
        registry.register(renderer.format_name, renderer)
    return registry


def build_renderer(options: TreeOptions) -> BaseRenderer:
    return build_default_registry().build(options)
