from enum import Enum
from functools import total_ordering

from src.logtree.errors import ConfigError


@total_ordering
class LogLevel(Enum):
    """
    Ordered severity level for log records.

    ANY sits below every real level so a LevelFilter(ANY)
    admits everything.
    """

    ANY = 0
    DEBUG = 1
    INFO = 2
    WARNING = 3
    ERROR = 4
    CRITICAL = 5

    def __lt__(self, other):
        if self.__class__ is other.__class__:
            return self.value < other.value
        return NotImplemented

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        try:
            return cls[name.upper()]
        except (KeyError, AttributeError):
            raise ConfigError(f"Unknown log level: {name!r}") from None


COLOR_RESET = "\033[0m"

LEVEL_COLORS = {
    LogLevel.ANY:      "\033[97m",   # white
    LogLevel.DEBUG:    "\033[96m",   # cyan
    LogLevel.INFO:     "\033[92m",   # green
    LogLevel.WARNING:  "\033[93m",   # yellow
    LogLevel.ERROR:    "\033[91m",   # bright red
    LogLevel.CRITICAL: "\033[31m",   # red
}


def to_display_string(level: LogLevel, with_color: bool = False) -> str:
    if with_color:
        return f"{LEVEL_COLORS[level]}{level.name}{COLOR_RESET}"
    return level.name
