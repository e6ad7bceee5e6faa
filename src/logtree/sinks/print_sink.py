import sys
import threading
from typing import Callable, Optional, TextIO

from src.logtree.log_record import LogRecord, format_line
from src.logtree.sink import Sink


class PrintSink(Sink):
    """
    Console sink: one formatted line per admitted record,
    optionally with the level name colored.
    """

    def __init__(
        self,
        with_color: bool = False,
        stream: Optional[TextIO] = None,
        *,
        logger: Optional[Callable[[str], None]] = None,
    ):
        super().__init__(logger=logger)
        self.with_color = with_color
        self._stream = stream
        self._lock = threading.Lock()

    def emit(self, record: LogRecord) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        line = format_line(record, with_color=self.with_color)
        try:
            with self._lock:
                stream.write(line + "\n")
        except (OSError, ValueError) as e:
            self._log(f"[PrintSink ERROR] {e!r}")
