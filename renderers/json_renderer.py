"""JSON renderer."""

from __future__ import annotations

import json
from typing import Any

from planner.dependency_graph import Node
from planner.tree_resolver import ResolvedTree
from renderers.base_renderer import BaseRenderer


class JsonRenderer(BaseRenderer):
    """One nested object per rendered node."""

    format_name = "json"
    uses_layout = False

    def render(self, tree: ResolvedTree) -> str:
        return json.dumps(self._payload(tree, tree.root), indent=2, ensure_ascii=False) + "\n"

    def _payload(self, tree: ResolvedTree, node: Node) -> dict[str, Any]:
        entry: dict[str, Any] = {"name": tree.label(node.name), "status": node.status.value}
        if node.name in tree.truncated:
            entry["truncated"] = True
        if not node.is_root:
            if tree.widths.owner > 0:
                entry["owner"] = tree.owner_text(node.name)
            if tree.widths.comment > 0:
                entry["comment"] = tree.comment_text(node.name)
        entry["dependencies"] = [self._payload(tree, child) for child in tree.children_of(node.name)]
        return entry
