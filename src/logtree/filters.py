from __future__ import annotations

from typing import Callable, List, Protocol, runtime_checkable

from src.logtree.log_level import LogLevel
from src.logtree.log_record import LogRecord


@runtime_checkable
class Filter(Protocol):
    """
    Predicate over a LogRecord.

    Filters are shared objects: one instance may sit in several
    chains, and chains remove them by identity.
    """

    def admit(self, record: LogRecord) -> bool:
        ...


class Filterer:
    """
    Ordered chain of filters. A record passes only if every
    filter admits it; an empty chain admits everything.
    """

    def __init__(self):
        self._filters: List[Filter] = []

    @property
    def filters(self) -> List[Filter]:
        return list(self._filters)

    def add_filter(self, f: Filter) -> None:
        self._filters.append(f)

    def remove_filter(self, f: Filter) -> None:
        """Remove the first entry that is `f`. Absent filters are ignored."""
        for i, existing in enumerate(self._filters):
            if existing is f:
                del self._filters[i]
                return

    def clear_filters(self) -> None:
        self._filters.clear()

    def filter(self, record: LogRecord) -> bool:
        for f in self._filters:
            if not f.admit(record):
                return False
        return True


# ----------------------------
# Stock filters
# ----------------------------

class LevelFilter:
    """Admits records at or above `min_level`."""

    def __init__(self, min_level: LogLevel):
        self.min_level = min_level

    def admit(self, record: LogRecord) -> bool:
        return record.level >= self.min_level

    def __repr__(self) -> str:
        return f"LevelFilter({self.min_level.name})"


class SourceFilter:
    """Admits records emitted at `prefix` or anywhere below it."""

    def __init__(self, prefix: str):
        self.prefix = prefix.rstrip("/")

    def admit(self, record: LogRecord) -> bool:
        return record.source == self.prefix or record.source.startswith(self.prefix + "/")

    def __repr__(self) -> str:
        return f"SourceFilter({self.prefix!r})"


class PredicateFilter:
    def __init__(self, predicate: Callable[[LogRecord], bool]):
        self._predicate = predicate

    def admit(self, record: LogRecord) -> bool:
        return bool(self._predicate(record))
