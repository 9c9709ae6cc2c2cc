"""Line-oriented parser for todotree markdown files.

A file is a prelude of free lines followed by records::

    # name            (or "# ~name" / "# ~~name~~" when completed)
    - @ owner text
    - % comment text
    - : dep ~stub other

Attribute lines repeat and accumulate. Unrecognised lines after a header
stay with that record so the markdown renderer can write them back.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable

from core.errors import TodoSyntaxError

logger = logging.getLogger("todotree.parser")

ROOT_NAME = "/"
COMPLETION_MARKER = "~"
PATH_SEPARATOR = "/"

HEADER_PREFIX = "# "
OWNER_PREFIX = "- @"
COMMENT_PREFIX = "- %"
DEPENDENCY_PREFIX = "- :"

NAME_PUNCTUATION = frozenset("!@$%&()-_=+:'\".?")

_MARKED_NAME = re.compile(r"^(?:~~(?P<struck>.+)~~|~+(?P<marked>[^~].*))$")
_MARKDOWN_ESCAPE = re.compile(r"\\([\\`*_{}\[\]()#+\-.!])")


@dataclass
class RawRecord:
    """One ``# name`` block as written in the file."""

    name: str
    completed: bool = False
    owner: str = ""
    comment_lines: list[str] = field(default_factory=list)
    dependency_tokens: list[str] = field(default_factory=list)
    auxiliary_lines: list[str] = field(default_factory=list)
    source: str = "<input>"
    line_no: int = 0


@dataclass
class TodoDocument:
    """Parsed file: free prelude lines plus records in definition order."""

    prelude: list[str] = field(default_factory=list)
    records: list[RawRecord] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [record.name for record in self.records]

    @classmethod
    def merge(cls, documents: Iterable[TodoDocument]) -> TodoDocument:
        """Concatenate several files into one document, keeping file order."""
        merged = cls()
        for document in documents:
            merged.prelude.extend(document.prelude)
            merged.records.extend(document.records)
        return merged


def split_marker(token: str) -> tuple[str, bool]:
    """Return ``(name, completed)`` for ``name``, ``~name`` or ``~~name~~``."""
    match = _MARKED_NAME.match(token)
    if match is None:
        return token, False
    return match.group("struck") or match.group("marked"), True


def unescape_markdown(text: str) -> str:
    """Drop the backslash in front of escaped markdown characters."""
    return _MARKDOWN_ESCAPE.sub(r"\1", text)


def validate_name(name: str, *, source: str = "<input>", line_no: int = 0) -> str:
    """Raise ``TodoSyntaxError`` unless ``name`` is usable as a todo name."""
    if not name or name == ROOT_NAME:
        raise TodoSyntaxError(
            f"'{name}' is not a valid todo name ('{ROOT_NAME}' and empty names are reserved)",
            source=source,
            line_no=line_no,
        )
    if name.endswith(PATH_SEPARATOR):
        raise TodoSyntaxError(
            f"todo name '{name}' must not end with '{PATH_SEPARATOR}'",
            source=source,
            line_no=line_no,
        )
    bad = sorted({ch for ch in name if not (ch.isalnum() or ch in NAME_PUNCTUATION)})
    if bad:
        raise TodoSyntaxError(
            f"todo name '{name}' contains invalid character(s): {''.join(bad)!r}",
            source=source,
            line_no=line_no,
        )
    return name


class RecordParser:
    """Turn raw text into a ``TodoDocument``."""

    def __init__(self, source: str = "<input>") -> None:
        self.source = source

    def parse(self, text: str) -> TodoDocument:
        document = TodoDocument()
        current: RawRecord | None = None
        for line_no, line in enumerate(text.splitlines(), start=1):
            if line.startswith(HEADER_PREFIX):
                current = self._header(line, line_no)
                document.records.append(current)
                continue

            attribute = self._attribute(line)
            if attribute is None:
                if current is None:
                    document.prelude.append(line)
                else:
                    current.auxiliary_lines.append(line)
                continue

            if current is None:
                raise TodoSyntaxError(
                    "missing '# <todo>' header before '- @', '- %' or '- :' line",
                    source=self.source,
                    line_no=line_no,
                )
            prefix, value = attribute
            if prefix == OWNER_PREFIX:
                if value:
                    current.owner = f"{current.owner} {value}" if current.owner else value
            elif prefix == COMMENT_PREFIX:
                current.comment_lines.append(value)
            else:
                current.dependency_tokens.extend(self._dependencies(current, value, line_no))

        logger.debug(
            "Parsed %s: %d record(s), %d prelude line(s)",
            self.source,
            len(document.records),
            len(document.prelude),
        )
        return document

    def _header(self, line: str, line_no: int) -> RawRecord:
        raw = line[len(HEADER_PREFIX):].strip()
        name, completed = split_marker(raw)
        validate_name(name, source=self.source, line_no=line_no)
        return RawRecord(name=name, completed=completed, source=self.source, line_no=line_no)

    @staticmethod
    def _attribute(line: str) -> tuple[str, str] | None:
        for prefix in (OWNER_PREFIX, COMMENT_PREFIX, DEPENDENCY_PREFIX):
            if line.startswith(prefix):
                return prefix, line[len(prefix):].strip()
        return None

    def _dependencies(self, record: RawRecord, value: str, line_no: int) -> list[str]:
        tokens = value.split()
        for token in tokens:
            name, _ = split_marker(token)
            validate_name(name, source=self.source, line_no=line_no)
            if name == record.name:
                raise TodoSyntaxError(
                    f"todo '{record.name}' depends on itself",
                    source=self.source,
                    line_no=line_no,
                )
        return tokens


def parse_records(text: str, source: str = "<input>") -> TodoDocument:
    """Parse one file's text."""
    return RecordParser(source=source).parse(text)
