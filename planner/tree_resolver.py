"""Resolve a dependency graph into the single-parent tree that gets rendered.

Resolution runs two passes from the synthetic root:

1. settle: an explicit-stack depth-first walk that detects cycles, derives
   every reachable node's status, height and owner-filter flag;
2. claim: a pre-order walk that hands each node to the first parent reaching
   it, applies depth / completed / owner pruning and measures the columns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from core.errors import ConfigurationError, ConsistencyError, DependencyCycleError, LayoutError
from core.options import TreeOptions
from planner.dependency_graph import DependencyGraph, Node, Status
from planner.record_parser import PATH_SEPARATOR, ROOT_NAME

logger = logging.getLogger("todotree.resolver")

TRUNCATION_SUFFIX = PATH_SEPARATOR
OWNER_HEADER = "OWNER"
COMMENT_HEADER = "COMMENT"
# Connector cell width, and the border overhead around owner/comment cells.
INDENT = 4
BORDER_OVERHEAD = 8

_UNVISITED, _ON_STACK, _FINISHED = range(3)


@dataclass
class ColumnWidths:
    """Maximum extents of the name, owner and comment columns."""

    name: int = 0
    owner: int = 0
    comment: int = 0

    @property
    def has_cells(self) -> bool:
        return self.owner + self.comment > 0


@dataclass
class ResolvedTree:
    """Rendered view over a graph: child names per node, never copies of nodes."""

    graph: DependencyGraph
    options: TreeOptions
    children: dict[str, list[str]] = field(default_factory=dict)
    truncated: set[str] = field(default_factory=set)
    widths: ColumnWidths = field(default_factory=ColumnWidths)

    @property
    def root(self) -> Node:
        return self.graph.root

    def node(self, name: str) -> Node:
        return self.graph.get(name)

    def children_of(self, name: str) -> list[Node]:
        return [self.graph.get(child) for child in self.children.get(name, [])]

    def label(self, name: str) -> str:
        return name + TRUNCATION_SUFFIX if name in self.truncated else name

    def owner_text(self, name: str) -> str:
        if name == ROOT_NAME:
            return OWNER_HEADER if self.widths.owner > 0 else ""
        if self.options.hide_owner:
            return ""
        return self.graph.get(name).display_owner

    def comment_text(self, name: str) -> str:
        if name == ROOT_NAME:
            return COMMENT_HEADER if self.widths.comment > 0 else ""
        if self.options.hide_comment:
            return ""
        return self.options.separator.join(self.graph.get(name).display_comments)

    def comment_rows(self, name: str) -> list[str]:
        text = self.comment_text(name)
        return text.split("\n") if text else []

    def walk(self) -> Iterator[tuple[Node, int]]:
        """Pre-order over the rendered tree, root included, with depths."""
        stack: list[tuple[Node, int]] = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            for child in reversed(self.children_of(node.name)):
                stack.append((child, depth + 1))


class TreeResolver:
    """Turns a ``DependencyGraph`` into a ``ResolvedTree``.

    ``width`` is the display surface in columns; ``None`` skips the fit check
    (formats that have no column layout).
    """

    def __init__(self, options: TreeOptions | None = None, width: int | None = None) -> None:
        self.options = options or TreeOptions()
        self.width = width
        self.owner_filter = set(self.options.owners)

    def resolve(self, graph: DependencyGraph) -> ResolvedTree:
        matched = self._settle(graph)
        unknown = sorted(self.owner_filter - matched)
        if unknown:
            raise ConfigurationError(f"unknown owner(s) in filter: {', '.join(unknown)}")

        tree = ResolvedTree(graph=graph, options=self.options)
        claimed: set[str] = set()
        self._claim(tree, graph.root, 0, claimed)
        self._fit_root(tree)
        logger.debug(
            "Resolved tree: %d claimed, %d truncated, widths=%s",
            len(claimed),
            len(tree.truncated),
            tree.widths,
        )
        return tree

    # ── Pass 1: settle ───────────────────────────────────────────────

    def _settle(self, graph: DependencyGraph) -> set[str]:
        """Walk every node reachable from root; return the owners that matched."""
        for node in graph:
            node.reset()
        graph.root.reset()

        matched: set[str] = set()
        colors: dict[str, int] = {graph.root.name: _ON_STACK}
        stack: list[tuple[Node, Iterator[str]]] = [(graph.root, iter(graph.root.dependency_names))]
        while stack:
            node, pending = stack[-1]
            name = next(pending, None)
            if name is None:
                stack.pop()
                self._finish(graph, node, matched)
                colors[node.name] = _FINISHED
                continue
            state = colors.get(name, _UNVISITED)
            if state == _ON_STACK:
                raise DependencyCycleError(node.name)
            if state == _UNVISITED:
                child = graph.get(name)
                colors[name] = _ON_STACK
                stack.append((child, iter(child.dependency_names)))
        return matched

    def _finish(self, graph: DependencyGraph, node: Node, matched: set[str]) -> None:
        waiting = False
        height = 0
        owned = self._matches_owner(node, matched)
        for name in node.dependency_names:
            child = graph.get(name)
            waiting = waiting or child.status is not Status.COMPLETED
            height = max(height, child.height + 1)
            owned = owned or child.owned

        if node.status is Status.COMPLETED:
            if waiting:
                raise ConsistencyError(
                    f"todo '{node.name}' is completed but still has incomplete dependencies",
                    source=node.source,
                    line_no=node.line_no,
                )
        else:
            node.status = Status.PENDING if waiting else Status.ACTIONABLE
        node.height = height
        node.owned = owned

    def _matches_owner(self, node: Node, matched: set[str]) -> bool:
        if not self.owner_filter:
            return True
        if node.is_root:
            return False
        owner = node.display_owner
        hits = {wanted for wanted in self.owner_filter if wanted == owner or wanted in owner.split()}
        matched.update(hits)
        return bool(hits)

    # ── Pass 2: claim and measure ────────────────────────────────────

    def _claim(self, tree: ResolvedTree, node: Node, depth: int, claimed: set[str]) -> None:
        children: list[str] = []
        for name in node.dependency_names:
            if name in claimed:
                continue
            child = tree.graph.get(name)
            if not self._within_depth(child, depth + 1):
                continue
            claimed.add(name)
            if self._filtered(child):
                continue
            children.append(name)
            self._claim(tree, child, depth + 1, claimed)
        tree.children[node.name] = children

        if self._truncates(tree, node, depth):
            tree.truncated.add(node.name)
        if not node.is_root:
            self._fold(tree, node, depth)

    def _within_depth(self, node: Node, depth: int) -> bool:
        limit = self.options.depth
        if limit > 0:
            return depth - 1 <= limit
        if limit < 0:
            return node.height >= -limit
        return True

    def _filtered(self, node: Node) -> bool:
        if self.options.hide_completed and node.status is Status.COMPLETED:
            return True
        return bool(self.owner_filter) and not node.owned

    def _truncates(self, tree: ResolvedTree, node: Node, depth: int) -> bool:
        limit = self.options.depth
        if node.is_root or limit == 0:
            return False
        if limit > 0 and depth - 1 != limit:
            return False
        if limit < 0 and node.height != -limit:
            return False
        return any(not self._filtered(tree.graph.get(name)) for name in node.dependency_names)

    def _fold(self, tree: ResolvedTree, node: Node, depth: int) -> None:
        widths = tree.widths
        label = tree.label(node.name)
        widths.name = max(widths.name, depth * INDENT + max(len(label), INDENT))
        widths.owner = max(widths.owner, len(tree.owner_text(node.name)))
        rows = tree.comment_rows(node.name)
        if rows:
            widths.comment = max(widths.comment, max(len(row) for row in rows))

    def _fit_root(self, tree: ResolvedTree) -> None:
        widths = tree.widths
        widths.name = max(widths.name, INDENT)
        if widths.owner > 0:
            widths.owner = max(widths.owner, len(OWNER_HEADER))
        if widths.comment > 0:
            widths.comment = max(widths.comment, len(COMMENT_HEADER))
        if self.width is None:
            return
        if self.width <= widths.name + widths.owner + BORDER_OVERHEAD:
            raise LayoutError(
                f"screen width {self.width} is too narrow for this todotree "
                f"(needs more than {widths.name + widths.owner + BORDER_OVERHEAD} columns)"
            )
        widths.comment = min(widths.comment, self.width - widths.name - widths.owner - BORDER_OVERHEAD)


def resolve(graph: DependencyGraph, options: TreeOptions | None = None, width: int | None = None) -> ResolvedTree:
    """Convenience wrapper around ``TreeResolver``."""
    return TreeResolver(options=options, width=width).resolve(graph)
