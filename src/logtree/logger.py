"""
Module: logger.py
Location: src/logtree/

Hierarchical logger tree and the process-wide registry.

Loggers are named by "/"-delimited paths and created lazily on first
reference. Sinks subscribe to a logger and are attached to it and to every
descendant that exists at that moment. The tree never owns a sink: it keeps
weak references and prunes dead ones as it meets them.
"""

from __future__ import annotations

import threading
import weakref
from typing import Dict, Iterator, List, Optional, Union

from src.logtree.clock import time_now
from src.logtree.filters import Filterer
from src.logtree.log_level import LogLevel
from src.logtree.log_record import LogRecord
from src.logtree.sink import LogSink

PATH_DELIMITER = "/"


class Logger:
    """
    Named node of the logger tree.

    Owns its children and a filter chain; holds its sinks weakly.
    The filter chain is reserved and is not consulted on publish:
    gating happens in each sink's own chain.
    """

    def __init__(self, parent: Optional["Logger"], name: str, propagate: bool = True):
        self.parent = parent            # None for the root logger
        self.name = name
        self.propagate = propagate      # reserved
        self.filters = Filterer()

        self._lock = threading.RLock()
        self._children: Dict[str, Logger] = {}
        self._sinks: List[weakref.ref] = []

    def __repr__(self) -> str:
        return f"Logger({self.name!r})"

    # -------------------------------------------------
    # Inspection
    # -------------------------------------------------
    @property
    def children(self) -> Dict[str, "Logger"]:
        with self._lock:
            return dict(self._children)

    @property
    def sinks(self) -> List[weakref.ref]:
        with self._lock:
            return list(self._sinks)

    def walk(self) -> Iterator["Logger"]:
        """Yield this logger and every existing descendant, depth first."""
        yield self
        for child in self.children.values():
            yield from child.walk()

    # -------------------------------------------------
    # Name resolution
    # -------------------------------------------------
    def _ensure_child(self, segment: str) -> "Logger":
        with self._lock:
            child = self._children.get(segment)
            if child is None:
                child = Logger(self, f"{self.name}{PATH_DELIMITER}{segment}")
                self._children[segment] = child
            return child

    def get(self, path: str) -> "Logger":
        """
        Resolve `path` relative to this logger, creating missing
        segments. Empty segments are legal and key a child by "".
        """
        head, delim, tail = path.partition(PATH_DELIMITER)
        child = self._ensure_child(head)
        if not delim:
            return child
        return child.get(tail)

    def find(self, path: str) -> Optional["Logger"]:
        """Like get() but never creates nodes; None if a segment is missing."""
        head, delim, tail = path.partition(PATH_DELIMITER)
        with self._lock:
            child = self._children.get(head)
        if child is None or not delim:
            return child
        return child.find(tail)

    # -------------------------------------------------
    # Sink attachment
    # -------------------------------------------------
    def attach_sink(self, sink_ref: weakref.ref) -> None:
        with self._lock:
            self._sinks = [r for r in self._sinks if r() is not None]
            self._sinks.append(sink_ref)
            children = list(self._children.values())
        for child in children:
            child.attach_sink(sink_ref)

    def detach_sink(self, sink: Union[LogSink, weakref.ref]) -> None:
        target = sink() if isinstance(sink, weakref.ref) else sink
        with self._lock:
            kept = []
            for r in self._sinks:
                live = r()
                if live is None or live is target:
                    continue
                kept.append(r)
            self._sinks = kept
            children = list(self._children.values())
        for child in children:
            child.detach_sink(sink)

    # -------------------------------------------------
    # Emission
    # -------------------------------------------------
    def publish_log(self, record: LogRecord) -> None:
        """
        Deliver `record` to every live sink, dropping dead references.

        Sinks are called outside the lock so a sink may itself log.
        """
        with self._lock:
            live_sinks = []
            kept = []
            for r in self._sinks:
                sink = r()
                if sink is None:
                    continue
                kept.append(r)
                live_sinks.append(sink)
            self._sinks = kept

        for sink in live_sinks:
            sink.handle(record)

    def log(self, level: LogLevel, message: str) -> None:
        self.publish_log(LogRecord(self.name, time_now(), level, message))

    def debug(self, message: str) -> None:
        self.log(LogLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(LogLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.log(LogLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.log(LogLevel.ERROR, message)

    def critical(self, message: str) -> None:
        self.log(LogLevel.CRITICAL, message)


# ----------------------------
# Process-wide registry
# ----------------------------

root_logger = Logger(None, "")


def get(path: str) -> Logger:
    """
    Resolve `path` against the root logger.

    A single leading "/" marks an absolute path, so "/svc/http" and
    "svc/http" name the same node ("/svc/http").
    """
    if path.startswith(PATH_DELIMITER):
        path = path[1:]
    return root_logger.get(path)


def _resolve(logger: Union[Logger, str]) -> Logger:
    return get(logger) if isinstance(logger, str) else logger


def subscribe(sink: LogSink, logger: Union[Logger, str]) -> None:
    """
    Attach `sink` to `logger` and to every descendant existing now.

    Loggers created later do not inherit the sink.
    """
    _resolve(logger).attach_sink(weakref.ref(sink))


def unsubscribe(sink: LogSink, logger: Union[Logger, str]) -> None:
    _resolve(logger).detach_sink(sink)


def publish_log(logger: Union[Logger, str], record: LogRecord) -> None:
    _resolve(logger).publish_log(record)


def debug(logger: Union[Logger, str], message: str) -> None:
    _resolve(logger).debug(message)


def info(logger: Union[Logger, str], message: str) -> None:
    _resolve(logger).info(message)


def warning(logger: Union[Logger, str], message: str) -> None:
    _resolve(logger).warning(message)


def error(logger: Union[Logger, str], message: str) -> None:
    _resolve(logger).error(message)


def critical(logger: Union[Logger, str], message: str) -> None:
    _resolve(logger).critical(message)
