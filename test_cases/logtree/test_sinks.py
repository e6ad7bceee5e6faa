import io
import json
import queue

import pytest

from src.logtree.errors import SinkInitError
from src.logtree.filters import LevelFilter, PredicateFilter
from src.logtree.log_level import LogLevel
from src.logtree.log_record import LogRecord
from src.logtree.logger import get, subscribe
from src.logtree.sink import Sink
from src.logtree.sinks.file_sink import FileSink
from src.logtree.sinks.print_sink import PrintSink
from src.logtree.sinks.queue_sink import QueueSink


def test_print_sink_writes_one_line_per_record(base_path) -> None:
    stream = io.StringIO()
    sink = PrintSink(stream=stream)
    node = get(f"{base_path}/svc")
    subscribe(sink, node)

    node.info("started")
    node.error("stopped")

    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    assert lines[0].endswith(f"[INFO] started ({base_path[1:]}/svc)")
    assert "[ERROR] stopped" in lines[1]


def test_print_sink_color_and_filter() -> None:
    stream = io.StringIO()
    sink = PrintSink(with_color=True, stream=stream)
    sink.add_filter(LevelFilter(LogLevel.WARNING))

    sink.handle(LogRecord("/a", 0.0, LogLevel.DEBUG, "hidden"))
    sink.handle(LogRecord("/a", 0.0, LogLevel.WARNING, "shown"))

    assert stream.getvalue() == "  0.00000 [\033[93mWARNING\033[0m] shown (a)\n"


def test_print_sink_swallows_stream_errors() -> None:
    stream = io.StringIO()
    stream.close()
    errors = []
    sink = PrintSink(stream=stream, logger=errors.append)

    sink.handle(LogRecord("/a", 0.0, LogLevel.INFO, "lost"))
    assert len(errors) == 1
    assert errors[0].startswith("[PrintSink ERROR]")


def test_file_sink_appends_text_lines(tmp_path, base_path) -> None:
    path = tmp_path / "logs" / "app.log"
    path.parent.mkdir()
    path.write_text("existing\n", encoding="utf-8")

    sink = FileSink(str(path))
    node = get(base_path)
    subscribe(sink, node)
    node.warning("disk low")
    sink.close()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "existing"
    assert len(lines) == 2
    assert lines[1].endswith(f"[WARNING] disk low ({base_path[1:]})")


def test_file_sink_json_lines_round_trip(tmp_path) -> None:
    path = tmp_path / "nested" / "dir" / "app.jsonl"
    sink = FileSink(str(path), as_json=True)
    record = LogRecord("/svc/db", 3.125, LogLevel.CRITICAL, "connection lost")

    sink.handle(record)
    sink.close()

    line = path.read_text(encoding="utf-8").strip()
    assert LogRecord.from_dict(json.loads(line)) == record


def test_file_sink_open_failure(tmp_path) -> None:
    with pytest.raises(SinkInitError):
        FileSink(str(tmp_path))


def test_file_sink_write_after_close_is_reported(tmp_path) -> None:
    errors = []
    sink = FileSink(str(tmp_path / "a.log"), logger=errors.append)
    sink.close()
    sink.close()

    sink.handle(LogRecord("/a", 0.0, LogLevel.INFO, "late"))
    assert len(errors) == 1
    assert errors[0].startswith("[FileSink ERROR]")


def test_queue_sink_forwards_and_drops_when_full() -> None:
    q = queue.Queue(maxsize=1)
    sink = QueueSink(q)
    first = LogRecord("/a", 0.0, LogLevel.INFO, "one")

    sink.handle(first)
    sink.handle(LogRecord("/a", 0.1, LogLevel.INFO, "two"))

    assert q.get_nowait() == first
    assert sink.dropped == 1


def test_sink_subscribe_methods(base_path) -> None:
    q = queue.Queue()
    sink = QueueSink(q)
    sink.subscribe(f"{base_path}/svc")
    get(f"{base_path}/svc").info("in")

    sink.unsubscribe(f"{base_path}/svc")
    get(f"{base_path}/svc").info("out")

    assert q.get_nowait().message == "in"
    assert q.empty()


def test_base_sink_without_emit_is_reported() -> None:
    errors = []
    Sink(logger=errors.append).handle(LogRecord("/a", 0.0, LogLevel.INFO, "x"))
    assert errors == ["[Sink ERROR] NotImplementedError()"]


def test_failing_filter_does_not_block_other_sinks(base_path, capture) -> None:
    errors = []
    broken = QueueSink(queue.Queue(), logger=errors.append)
    broken.add_filter(PredicateFilter(lambda r: r.message.missing))
    node = get(base_path)
    subscribe(broken, node)
    subscribe(capture, node)

    node.info("x")

    assert [r.message for r in capture.records] == ["x"]
    assert len(errors) == 1
    assert errors[0].startswith("[QueueSink ERROR] AttributeError")


def test_failing_emit_does_not_block_other_sinks(base_path, capture) -> None:
    class ExplodingSink(Sink):
        def emit(self, record) -> None:
            raise RuntimeError("sink down")

    errors = []
    exploding = ExplodingSink(logger=errors.append)
    node = get(base_path)
    subscribe(exploding, node)
    subscribe(capture, node)

    node.error("y")

    assert len(capture.records) == 1
    assert errors == ["[ExplodingSink ERROR] RuntimeError('sink down')"]


def test_queue_sink_counts_drops_across_threads() -> None:
    import threading

    q = queue.Queue(maxsize=1)
    sink = QueueSink(q)
    sink.handle(LogRecord("/a", 0.0, LogLevel.INFO, "fill"))
    record = LogRecord("/a", 0.0, LogLevel.INFO, "overflow")

    def flood() -> None:
        for _ in range(500):
            sink.handle(record)

    threads = [threading.Thread(target=flood) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sink.dropped == 8 * 500
