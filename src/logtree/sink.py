from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Protocol, Union

from src.logtree.filters import Filterer
from src.logtree.log_record import LogRecord

if TYPE_CHECKING:
    from src.logtree.logger import Logger


class LogSink(Protocol):
    """
    Destination for admitted log records.

    The logger tree holds sinks only through weak references,
    so an implementation must support weakref and must be kept
    alive by its creator.
    """

    def handle(self, record: LogRecord) -> None:
        """
        Receive a log record.

        Must not raise exceptions outward.
        """


class Sink(Filterer):
    """
    Base class for concrete sinks.

    handle() gates each record through the sink's own filter
    chain and passes admitted records to emit(). Failures in a
    filter or in emit() are reported through `logger` and never
    reach the publishing Logger.
    """

    def __init__(self, *, logger: Optional[Callable[[str], None]] = None):
        super().__init__()
        self._log = logger or (lambda s: None)

    def handle(self, record: LogRecord) -> None:
        try:
            if not self.filter(record):
                return
            self.emit(record)
        except Exception as e:
            # Logging must never destabilize the caller.
            self._log(f"[{type(self).__name__} ERROR] {e!r}")

    def emit(self, record: LogRecord) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def subscribe(self, logger: Union["Logger", str]) -> None:
        from src.logtree.logger import subscribe
        subscribe(self, logger)

    def unsubscribe(self, logger: Union["Logger", str]) -> None:
        from src.logtree.logger import unsubscribe
        unsubscribe(self, logger)
