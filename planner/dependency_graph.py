"""Todo dependency graph: a name-keyed node store plus the synthetic root."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

from core.errors import ConsistencyError, NoRootError, StructuralError
from planner.record_parser import (
    COMPLETION_MARKER,
    ROOT_NAME,
    RawRecord,
    TodoDocument,
    split_marker,
    unescape_markdown,
)

logger = logging.getLogger("todotree.graph")


class Status(str, Enum):
    """Computed state of a todo."""

    PENDING = "pending"
    ACTIONABLE = "actionable"
    COMPLETED = "completed"


@dataclass
class Node:
    """A todo in the store. ``status``, ``height`` and ``owned`` are filled in by the resolver."""

    name: str
    owner: str = ""
    comment_lines: list[str] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    completed: bool = False
    stub: bool = False
    introduced_by: str | None = None
    auxiliary_lines: list[str] = field(default_factory=list)
    source: str | None = None
    line_no: int | None = None
    status: Status = Status.PENDING
    height: int = 0
    owned: bool = True

    def __post_init__(self) -> None:
        self.reset()

    @classmethod
    def from_record(cls, record: RawRecord) -> Node:
        return cls(
            name=record.name,
            owner=record.owner,
            comment_lines=list(record.comment_lines),
            dependencies=list(record.dependency_tokens),
            completed=record.completed,
            auxiliary_lines=list(record.auxiliary_lines),
            source=record.source,
            line_no=record.line_no,
        )

    @property
    def is_root(self) -> bool:
        return self.name == ROOT_NAME

    @property
    def dependency_names(self) -> list[str]:
        return [split_marker(token)[0] for token in self.dependencies]

    @property
    def display_owner(self) -> str:
        return unescape_markdown(self.owner)

    @property
    def display_comments(self) -> list[str]:
        return [unescape_markdown(line) for line in self.comment_lines]

    def reset(self) -> None:
        """Forget anything a previous resolution computed."""
        self.status = Status.COMPLETED if self.completed else Status.PENDING
        self.height = 0
        self.owned = True


@dataclass
class DependencyGraph:
    """Represents dependencies among todos."""

    nodes: dict[str, Node] = field(default_factory=dict)
    root: Node = field(default_factory=lambda: Node(name=ROOT_NAME))
    prelude: list[str] = field(default_factory=list)

    def get(self, name: str) -> Node:
        if name == ROOT_NAME:
            return self.root
        try:
            return self.nodes[name]
        except KeyError:
            raise StructuralError(f"no such todo '{name}'") from None

    def __contains__(self, name: object) -> bool:
        return name in self.nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def __len__(self) -> int:
        return len(self.nodes)

    def edges(self) -> Iterator[tuple[str, str]]:
        """Yield ``(dependant, dependency)`` pairs in definition order."""
        for node in self.nodes.values():
            for name in node.dependency_names:
                yield node.name, name

    def no_parent_names(self) -> list[str]:
        """Names that are nobody's dependency, in definition order."""
        referenced = {child for _, child in self.edges()}
        return [name for name in self.nodes if name not in referenced]


class GraphAssembler:
    """Builds a ``DependencyGraph`` from parsed records."""

    def __init__(self, auto_add: bool = False) -> None:
        self.auto_add = auto_add

    def assemble(self, document: TodoDocument, targets: Sequence[str] = ()) -> DependencyGraph:
        graph = DependencyGraph(prelude=list(document.prelude))
        for record in document.records:
            if record.name in graph.nodes:
                raise StructuralError(
                    f"duplicated todo name '{record.name}'",
                    source=record.source,
                    line_no=record.line_no,
                )
            graph.nodes[record.name] = Node.from_record(record)
        if not graph.nodes:
            raise StructuralError("the markdown input doesn't have any todo")

        self._add_stubs(graph)
        graph.root.dependencies = self._root_dependencies(graph, targets)
        logger.debug(
            "Assembled graph: %d node(s), root -> %s",
            len(graph),
            ", ".join(graph.root.dependencies),
        )
        return graph

    def _add_stubs(self, graph: DependencyGraph) -> None:
        stubs: dict[str, Node] = {}
        for node in list(graph.nodes.values()):
            for token in node.dependencies:
                name, marked = split_marker(token)
                if name in graph.nodes:
                    if marked:
                        raise ConsistencyError(
                            f"todo '{name}' has its own '# ' line, so '{node.name}' "
                            f"must not list it as '{token}'",
                            source=node.source,
                            line_no=node.line_no,
                        )
                    continue
                stub = stubs.get(name)
                if stub is not None:
                    if stub.completed != marked:
                        raise ConsistencyError(
                            f"todo '{node.name}' lists '{token}' but todo "
                            f"'{stub.introduced_by}' lists it as "
                            f"'{COMPLETION_MARKER if stub.completed else ''}{name}'",
                            source=node.source,
                            line_no=node.line_no,
                        )
                    continue
                if not self.auto_add:
                    raise StructuralError(
                        f"todo '{node.name}' depends on undefined todo '{name}'",
                        source=node.source,
                        line_no=node.line_no,
                    )
                stubs[name] = Node(name=name, completed=marked, stub=True, introduced_by=node.name)
                logger.debug("Added stub todo '%s' (first referenced by '%s')", name, node.name)
        graph.nodes.update(stubs)

    @staticmethod
    def _root_dependencies(graph: DependencyGraph, targets: Sequence[str]) -> list[str]:
        if targets:
            for target in targets:
                if target not in graph:
                    raise StructuralError(f"todo '{target}' is missing in the markdown input")
            return list(targets)
        names = graph.no_parent_names()
        if not names:
            raise NoRootError()
        return names


def assemble(document: TodoDocument, targets: Sequence[str] = (), auto_add: bool = False) -> DependencyGraph:
    """Convenience wrapper around ``GraphAssembler``."""
    return GraphAssembler(auto_add=auto_add).assemble(document, targets)
