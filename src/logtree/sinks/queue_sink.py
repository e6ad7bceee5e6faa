import queue
import threading
from typing import Callable, Optional

from src.logtree.log_record import LogRecord
from src.logtree.sink import Sink


class QueueSink(Sink):
    """
    Sink that forwards admitted records to a thread-safe queue.

    Performs no I/O and never blocks, so it is safe to feed a GUI
    or worker thread. Records are dropped when the queue is full.
    """

    def __init__(
        self,
        record_queue: queue.Queue,
        *,
        logger: Optional[Callable[[str], None]] = None,
    ):
        super().__init__(logger=logger)
        self._queue = record_queue
        self._lock = threading.Lock()
        self._dropped = 0

    @property
    def dropped(self) -> int:
        with self._lock:
            return self._dropped

    def emit(self, record: LogRecord) -> None:
        try:
            self._queue.put_nowait(record)
        except queue.Full:
            with self._lock:
                self._dropped += 1
