"""
Module: zmq_pub_sink.py
Location: src/logtree/sinks/

Publishes admitted log records on a ZeroMQ PUB socket.

Each record goes out as a two-frame multipart message:
    [topic][JSON wire document]
Subscribers filter on the topic frame with the usual SUB prefix match.
"""

from __future__ import annotations

import json
import threading
from typing import Callable, Optional, Sequence, Tuple

import zmq

from src.logtree.errors import RecordDecodeError, SinkInitError
from src.logtree.log_record import LogRecord
from src.logtree.sink import Sink


class ZmqPubSink(Sink):
    def __init__(
        self,
        host: str,
        port: Optional[int],
        topic: str,
        *,
        logger: Optional[Callable[[str], None]] = None,
    ):
        super().__init__(logger=logger)
        self.host = host
        self.topic = topic
        self._lock = threading.Lock()

        self._ctx = zmq.Context.instance()
        self._socket = self._ctx.socket(zmq.PUB)
        try:
            if port is None:
                self.port = self._socket.bind_to_random_port(f"tcp://{host}")
            else:
                self._socket.bind(f"tcp://{host}:{port}")
                self.port = port
        except zmq.ZMQError as e:
            self._socket.close(linger=0)
            raise SinkInitError(f"ZmqPubSink(tcp://{host}:{port})", "cannot bind socket", e) from e

        self._log(f"[ZmqPubSink] Publishing topic '{topic}' on {self.address}")

    @property
    def address(self) -> str:
        return f"tcp://{self.host}:{self.port}"

    def emit(self, record: LogRecord) -> None:
        frames = [
            self.topic.encode("utf-8"),
            json.dumps(record.to_dict()).encode("utf-8"),
        ]
        try:
            with self._lock:
                self._socket.send_multipart(frames, flags=zmq.NOBLOCK)
        except zmq.ZMQError as e:
            # PUB drops on its own when there are no peers; this covers
            # a closed socket or a full high-water mark.
            self._log(f"[ZmqPubSink ERROR] {self.address}: {e!r}")

    def close(self) -> None:
        with self._lock:
            if not self._socket.closed:
                self._socket.close(linger=0)
        # Do NOT terminate Context.instance() here; other sockets may use it.


def decode_frames(frames: Sequence[bytes]) -> Tuple[str, LogRecord]:
    """Inverse of ZmqPubSink.emit: returns (topic, record)."""
    if len(frames) != 2:
        raise RecordDecodeError(f"Expected 2 frames, got {len(frames)}")
    topic = frames[0].decode("utf-8")
    try:
        data = json.loads(frames[1].decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RecordDecodeError(f"Malformed log record payload: {e}") from e
    if not isinstance(data, dict):
        raise RecordDecodeError("Log record payload is not a JSON object")
    return topic, LogRecord.from_dict(data)
