"""Box-drawing layout shared by the terminal and HTML renderers.

Every node becomes a block of rows::

    ├── name     │ owner │ comment    │
    │   │        │       │ (wrapped)  │     <- continuation rows
    │   │        ├───────┼────────────┤     <- separator row

Subclasses only choose the glyph for a space, the row prefix / end of line
and how a label is decorated for its status.
"""

from __future__ import annotations

from planner.dependency_graph import Node, Status
from planner.tree_resolver import INDENT, ResolvedTree
from renderers.base_renderer import BaseRenderer


def wrap_rows(rows: list[str], width: int) -> list[str]:
    """Slice each comment row into ``width``-sized chunks; at least one chunk."""
    if width <= 0:
        return [""]
    chunks: list[str] = []
    for row in rows:
        if not row:
            chunks.append("")
            continue
        chunks.extend(row[start:start + width] for start in range(0, len(row), width))
    return chunks or [""]


def connector_prefix(connectors: list[bool], space: str = " ", reverse: bool = False) -> str:
    """Tree connectors for a row; each flag says whether that ancestor is the last sibling."""
    cells: list[str] = []
    for pos, last in enumerate(connectors):
        if pos + 1 < len(connectors):
            cells.append(space * INDENT if last else "│" + space * (INDENT - 1))
        elif last:
            cells.append(("┌──" if reverse else "└──") + space)
        else:
            cells.append("├──" + space)
    return "".join(cells)


class BoxRenderer(BaseRenderer):
    """Tree rows with aligned owner and comment cells."""

    space = " "
    row_prefix = ""
    eol = "\n"
    supports_reverse = True

    def render(self, tree: ResolvedTree) -> str:
        out: list[str] = []
        self._header(tree, out)
        if self.options.reverse:
            self._emit_reversed(tree, tree.root, [], out)
        else:
            self._emit(tree, tree.root, [], out)
        return "".join(out)

    def decorate(self, label: str, status: Status) -> str:
        return label

    def escape(self, text: str) -> str:
        return text

    # ── traversal ────────────────────────────────────────────────────

    def _emit(self, tree: ResolvedTree, node: Node, connectors: list[bool], out: list[str]) -> None:
        children = tree.children_of(node.name)
        final = not children and all(connectors)
        self._block(tree, node, connectors, final, out)
        for pos, child in enumerate(children):
            connectors.append(pos + 1 == len(children))
            self._emit(tree, child, connectors, out)
            connectors.pop()

    def _emit_reversed(self, tree: ResolvedTree, node: Node, connectors: list[bool], out: list[str]) -> None:
        children = tree.children_of(node.name)
        for pos in reversed(range(len(children))):
            connectors.append(pos + 1 == len(children))
            self._emit_reversed(tree, children[pos], connectors, out)
            connectors.pop()
        self._block(tree, node, connectors, not connectors, out)

    # ── rows ─────────────────────────────────────────────────────────

    def _header(self, tree: ResolvedTree, out: list[str]) -> None:
        widths = tree.widths
        if not widths.has_cells:
            return
        both = widths.owner > 0 and widths.comment > 0
        out.append(self.row_prefix)
        out.append(self.space * (widths.name + 1))
        out.append("┌─" + "─" * widths.owner)
        if both:
            out.append("─┬─")
        out.append("─" * widths.comment + "─┐")
        out.append(self.eol)

    def _block(
        self,
        tree: ResolvedTree,
        node: Node,
        connectors: list[bool],
        final: bool,
        out: list[str],
    ) -> None:
        widths = tree.widths
        sp = self.space
        depth = len(connectors)
        label = tree.label(node.name)

        out.append(self.row_prefix)
        out.append(connector_prefix(connectors, sp, self.options.reverse))
        out.append(self.decorate(self.escape(label), node.status))
        out.append(sp * (widths.name - depth * INDENT - len(label)))
        if not widths.has_cells:
            out.append(self.eol)
            return

        both = widths.owner > 0 and widths.comment > 0
        bar = sp + "│" + sp
        owner = tree.owner_text(node.name)
        out.append(bar + self.escape(owner) + sp * (widths.owner - len(owner)))
        if both:
            out.append(bar)

        chunks = wrap_rows(tree.comment_rows(node.name), widths.comment)
        has_children = bool(tree.children.get(node.name))
        for index, chunk in enumerate(chunks):
            out.append(self.escape(chunk) + sp * (widths.comment - len(chunk)) + sp + "│" + self.eol)
            out.append(self.row_prefix)
            out.append(self._scaffold(connectors, has_children))
            out.append(sp * (widths.name - INDENT - depth * INDENT))
            if index + 1 < len(chunks):
                out.append(bar + sp * widths.owner)
                if both:
                    out.append(bar)
            else:
                out.append(self._separator(widths.owner, widths.comment, both, final))

    def _scaffold(self, connectors: list[bool], has_children: bool) -> str:
        sp = self.space
        reverse = self.options.reverse
        cells: list[str] = []
        for pos, last in enumerate(connectors):
            # Reversed, a child's own line always runs down to its parent.
            if reverse and pos + 1 == len(connectors):
                cells.append("│" + sp * (INDENT - 1))
            else:
                cells.append((sp if last else "│") + sp * (INDENT - 1))
        stem = has_children and not reverse
        cells.append(("│" if stem else sp) + sp * (INDENT - 1))
        return "".join(cells)

    def _separator(self, owner_width: int, comment_width: int, both: bool, final: bool) -> str:
        parts = [self.space, "└─" if final else "├─", "─" * owner_width]
        if both:
            parts.append("─┴─" if final else "─┼─")
        parts.append("─" * comment_width)
        parts.append("─┘" if final else "─┤")
        parts.append(self.eol)
        return "".join(parts)
