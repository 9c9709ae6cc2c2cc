"""Error hierarchy for the todotree pipeline.

Every failure is terminal for the current run: nothing is rendered once one
of these is raised. The CLI and watch loop catch ``TodoTreeError`` and report
the message.
"""

from __future__ import annotations


class TodoTreeError(Exception):
    """Base class for all pipeline failures."""

    kind = "error"

    def __init__(self, message: str, *, source: str | None = None, line_no: int | None = None) -> None:
        self.message = message
        self.source = source
        self.line_no = line_no
        super().__init__(self._format())

    def _format(self) -> str:
        if self.source and self.line_no:
            return f"{self.source}:{self.line_no}: {self.message}"
        if self.source:
            return f"{self.source}: {self.message}"
        return self.message


class TodoSyntaxError(TodoTreeError):
    """Malformed header, misplaced attribute line, bad name, self-dependency."""

    kind = "syntax"


class StructuralError(TodoTreeError):
    """Duplicate names, undefined dependencies, missing targets."""

    kind = "structural"


class DependencyCycleError(StructuralError):
    """A dependency chain loops back onto itself."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"todo '{name}' has a dependency loop")


class NoRootError(StructuralError):
    """Every todo is somebody's dependency, so there is nothing to start from."""

    def __init__(self) -> None:
        super().__init__("all todos are in a dependency loop, no root candidate left")


class ConsistencyError(TodoTreeError):
    """Completion markers that contradict each other or the graph."""

    kind = "consistency"


class LayoutError(TodoTreeError):
    """The display surface cannot fit the required columns."""

    kind = "layout"


class ConfigurationError(TodoTreeError):
    """Unknown format, incompatible options, unknown owner filter."""

    kind = "configuration"
