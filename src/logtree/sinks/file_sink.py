import json
import threading
from pathlib import Path
from typing import Callable, Optional

from src.logtree.errors import SinkInitError
from src.logtree.log_record import LogRecord, format_line
from src.logtree.sink import Sink


class FileSink(Sink):
    """
    Sink that appends one line per admitted record to a file.

    Lines use the reference text layout, or the JSON wire
    document when as_json is set (one object per line).
    """

    def __init__(
        self,
        file_path: str,
        as_json: bool = False,
        *,
        logger: Optional[Callable[[str], None]] = None,
    ):
        super().__init__(logger=logger)
        self._path = Path(file_path)
        self.as_json = as_json
        self._lock = threading.Lock()

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self._path, "a", encoding="utf-8")
        except OSError as e:
            raise SinkInitError(f"FileSink({self._path})", "cannot open file for append", e) from e

    @property
    def path(self) -> Path:
        return self._path

    def emit(self, record: LogRecord) -> None:
        if self.as_json:
            line = json.dumps(record.to_dict())
        else:
            line = format_line(record, width=12, precision=8)
        try:
            with self._lock:
                self._file.write(line + "\n")
                self._file.flush()
        except (OSError, ValueError) as e:
            # Closed or failing file; logging must not break the caller.
            self._log(f"[FileSink ERROR] {self._path}: {e!r}")

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.close()
