import time

# Captured once at import; read-only afterwards.
_TIME_START = time.perf_counter()


def time_now() -> float:
    """Seconds elapsed since the process imported the logging package."""
    return time.perf_counter() - _TIME_START
