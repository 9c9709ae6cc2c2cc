"""Polling refresh loop: re-render whenever an input file or the terminal changes.

Refreshes run one at a time. A refresh that fails is reported and the loop
keeps waiting for the next change.
"""

from __future__ import annotations

import logging
import shutil
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from core.errors import TodoTreeError

logger = logging.getLogger("todotree.watch")

Snapshot = tuple[tuple[float | None, ...], int]


def _terminal_columns() -> int:
    return shutil.get_terminal_size((80, 24)).columns


@dataclass
class WatchResult:
    """Counters for one watch session."""

    cycles: int = 0
    refreshes: int = 0
    failures: list[str] = field(default_factory=list)


class WatchLoop:
    """Re-invokes ``refresh`` each time the watched snapshot changes."""

    def __init__(
        self,
        paths: Sequence[Path],
        refresh: Callable[[], str],
        echo: Callable[[str], None],
        interval: float = 1.0,
        clear: Callable[[], None] | None = None,
        sleep: Callable[[float], None] = time.sleep,
        columns: Callable[[], int] = _terminal_columns,
    ) -> None:
        self.paths = list(paths)
        self.refresh = refresh
        self.echo = echo
        self.interval = interval
        self.clear = clear
        self.sleep = sleep
        self.columns = columns

    def snapshot(self) -> Snapshot:
        mtimes: list[float | None] = []
        for path in self.paths:
            try:
                mtimes.append(path.stat().st_mtime)
            except OSError:
                mtimes.append(None)
        return tuple(mtimes), self.columns()

    def run(self, max_cycles: int | None = None) -> WatchResult:
        """Poll until interrupted, or for ``max_cycles`` polls."""
        result = WatchResult()
        last: Snapshot | None = None
        try:
            while max_cycles is None or result.cycles < max_cycles:
                current = self.snapshot()
                if current != last:
                    last = current
                    self._refresh_once(result)
                result.cycles += 1
                if max_cycles is None or result.cycles < max_cycles:
                    self.sleep(self.interval)
        except KeyboardInterrupt:
            logger.info("Watch loop interrupted after %d cycle(s)", result.cycles)
        return result

    def _refresh_once(self, result: WatchResult) -> None:
        if self.clear is not None:
            self.clear()
        try:
            text = self.refresh()
        except (TodoTreeError, OSError) as exc:
            logger.warning("Refresh failed: %s", exc)
            result.failures.append(str(exc))
            self.echo(f"Error: {exc}")
            return
        result.refreshes += 1
        self.echo(text)
