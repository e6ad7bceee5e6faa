from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from src.logtree.errors import ConfigError, RecordDecodeError
from src.logtree.log_level import LogLevel, to_display_string


@dataclass(frozen=True)
class LogRecord:
    """
    Immutable record of a single log call.

    Created by a Logger per emission and handed by value to
    every live sink reachable from it. Never retained by the tree.
    """

    source: str
    # Full path name of the originating logger (e.g. "/svc/http").

    timestamp: float
    # Seconds since process start, monotonic (see clock.time_now).

    level: LogLevel

    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Wire document used by the publish sink and JSON file output."""
        return {
            "source": self.source,
            "time": self.timestamp,
            "level": self.level.name,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogRecord":
        missing = [k for k in ("source", "time", "level", "message") if k not in data]
        if missing:
            raise RecordDecodeError(f"Log record missing fields: {', '.join(missing)}")
        try:
            level = LogLevel.from_name(data["level"])
        except ConfigError as e:
            raise RecordDecodeError(str(e)) from e
        try:
            timestamp = float(data["time"])
        except (TypeError, ValueError) as e:
            raise RecordDecodeError(f"Invalid log record time: {data['time']!r}") from e
        return cls(
            source=str(data["source"]),
            timestamp=timestamp,
            level=level,
            message=str(data["message"]),
        )


def format_line(
    record: LogRecord,
    *,
    with_color: bool = False,
    width: int = 9,
    precision: int = 5,
) -> str:
    """
    Render the reference text line:
        <time> [<LEVEL>] <message> (<source>)
    The source is shown without its leading "/".
    """
    source = record.source[1:] if record.source.startswith("/") else record.source
    level = to_display_string(record.level, with_color)
    return f"{record.timestamp:{width}.{precision}f} [{level}] {record.message} ({source})"
