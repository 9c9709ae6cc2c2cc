"""Top-level pipeline: parse, assemble, resolve, render."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from typing import Sequence

from core.options import TreeOptions
from planner.dependency_graph import DependencyGraph, GraphAssembler
from planner.record_parser import RecordParser, TodoDocument
from planner.tree_resolver import ResolvedTree, TreeResolver
from renderers.base_renderer import BaseRenderer
from renderers.renderer_registry import RendererRegistry, build_default_registry

logger = logging.getLogger("todotree.pipeline")

DEFAULT_SURFACE_WIDTH = 80


@dataclass
class TreeRun:
    """Everything one pipeline run produced."""

    options: TreeOptions
    document: TodoDocument
    graph: DependencyGraph
    tree: ResolvedTree
    text: str


class Orchestrator:
    """Wires the pipeline stages for one set of options.

    Sources are ``(name, text)`` pairs; reading files is left to the caller.
    """

    def __init__(self, options: TreeOptions | None = None, registry: RendererRegistry | None = None) -> None:
        self.options = options or TreeOptions()
        self.registry = registry or build_default_registry()

    def build(self, sources: Sequence[tuple[str, str]]) -> TreeRun:
        # Renderer first: format/option errors surface before any parsing.
        renderer = self.registry.build(self.options)
        document = TodoDocument.merge(RecordParser(source=name).parse(text) for name, text in sources)
        graph = GraphAssembler(auto_add=self.options.auto_add).assemble(document, self.options.targets)
        tree = TreeResolver(self.options, width=self._surface_width(renderer)).resolve(graph)
        text = renderer.render(tree)
        # Every rendered todo has a children entry, plus one for the root.
        logger.debug("Rendered %d todo(s) as %s", len(tree.children) - 1, self.options.format)
        return TreeRun(options=self.options, document=document, graph=graph, tree=tree, text=text)

    def render(self, sources: Sequence[tuple[str, str]]) -> str:
        return self.build(sources).text

    def _surface_width(self, renderer: BaseRenderer) -> int | None:
        if not renderer.uses_layout:
            return None
        if self.options.width:
            return self.options.width
        if renderer.format_name == "term":
            return shutil.get_terminal_size((DEFAULT_SURFACE_WIDTH, 24)).columns
        return DEFAULT_SURFACE_WIDTH
