"""Markdown renderer: writes the resolved tree back in the input grammar."""

from __future__ import annotations

from planner.record_parser import (
    COMMENT_PREFIX,
    COMPLETION_MARKER,
    DEPENDENCY_PREFIX,
    HEADER_PREFIX,
    OWNER_PREFIX,
)
from planner.tree_resolver import ResolvedTree
from renderers.base_renderer import BaseRenderer


class MarkdownRenderer(BaseRenderer):
    """Round-trip output; column layout and hide-owner/comment flags do not apply."""

    format_name = "md"
    uses_layout = False

    def render(self, tree: ResolvedTree) -> str:
        lines = list(tree.graph.prelude)
        shown = [node for node, _depth in tree.walk() if not node.is_root]
        # Pruned todos get no header, so they drop out of the dependency lists too.
        written = {node.name for node in shown}
        for node in shown:
            dependencies = [name for name in node.dependency_names if name in written]
            marker = COMPLETION_MARKER if node.completed else ""
            lines.append(f"{HEADER_PREFIX}{marker}{node.name}")
            if node.owner:
                lines.append(f"{OWNER_PREFIX} {node.owner}")
            if dependencies:
                lines.append(f"{DEPENDENCY_PREFIX} {' '.join(dependencies)}")
            lines.extend(f"{COMMENT_PREFIX} {comment}" for comment in node.comment_lines)
            lines.extend(node.auxiliary_lines)
        return "\n".join(lines) + "\n" if lines else ""
