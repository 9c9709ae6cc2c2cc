"""Base renderer interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from core.options import TreeOptions
from planner.tree_resolver import ResolvedTree


class BaseRenderer(ABC):
    """Serializes a resolved tree into one output format."""

    format_name = ""
    supports_reverse = False
    # Formats without column layout skip the surface-width check.
    uses_layout = True

    def __init__(self, options: TreeOptions | None = None) -> None:
        self.options = options or TreeOptions()

    @abstractmethod
    def render(self, tree: ResolvedTree) -> str:
        """Return the full output text for ``tree``."""
