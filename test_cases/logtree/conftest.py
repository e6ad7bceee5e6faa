import uuid

import pytest

from src.logtree.sink import Sink


class CaptureSink(Sink):
    """Keeps every admitted record in memory."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record) -> None:
        self.records.append(record)


@pytest.fixture
def base_path() -> str:
    # The registry is process-wide and nodes are never removed,
    # so every test works under its own top-level logger.
    return f"/t{uuid.uuid4().hex}"


@pytest.fixture
def capture() -> CaptureSink:
    return CaptureSink()
