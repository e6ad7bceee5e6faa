"""
Module: config.py
Location: src/logtree/

Declarative sink setup. A LoggingConfig lists sinks, what kind each one is,
which logger paths it subscribes to and an optional minimum level.

The tree only holds weak references to sinks, so apply_config() returns the
built sinks and the caller must keep that list alive for as long as output
is wanted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from src.logtree.errors import ConfigError, LogTreeError
from src.logtree.filters import LevelFilter
from src.logtree.log_level import LogLevel
from src.logtree.logger import root_logger, subscribe
from src.logtree.sink import Sink
from src.logtree.sinks.file_sink import FileSink
from src.logtree.sinks.print_sink import PrintSink
from src.logtree.sinks.zmq_pub_sink import ZmqPubSink

DEFAULT_PUB_HOST = "127.0.0.1"
DEFAULT_PUB_PORT = 7100
DEFAULT_PUB_TOPIC = "LOG"

SINK_KINDS = ("print", "file", "zmq_pub")

# Subscribes at the root logger itself instead of resolving a path.
ROOT_PATH = "/"


@dataclass(frozen=True)
class SinkConfig:
    """Configuration for a single sink."""

    kind: str                               # one of SINK_KINDS
    subscribe_to: Tuple[str, ...] = (ROOT_PATH,)    # logger paths
    min_level: Optional[LogLevel] = None
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SinkConfig":
        if not isinstance(data, Mapping):
            raise ConfigError(f"Sink entry must be a mapping, got {type(data).__name__}")

        kind = data.get("kind")
        if kind not in SINK_KINDS:
            raise ConfigError(f"Unknown sink kind: {kind!r}")

        subscribe_to = data.get("subscribe_to", (ROOT_PATH,))
        if isinstance(subscribe_to, str):
            subscribe_to = (subscribe_to,)
        if not isinstance(subscribe_to, (list, tuple)) or not all(
            isinstance(p, str) for p in subscribe_to
        ):
            raise ConfigError(f"subscribe_to must list logger paths, got {subscribe_to!r}")

        min_level = data.get("min_level")
        if min_level is not None and not isinstance(min_level, LogLevel):
            min_level = LogLevel.from_name(min_level)

        options = data.get("options", {})
        if not isinstance(options, Mapping):
            raise ConfigError(f"options must be a mapping, got {type(options).__name__}")

        return cls(
            kind=kind,
            subscribe_to=tuple(subscribe_to),
            min_level=min_level,
            options=dict(options),
        )


@dataclass(frozen=True)
class LoggingConfig:
    sinks: Tuple[SinkConfig, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LoggingConfig":
        entries = data.get("sinks", [])
        if not isinstance(entries, (list, tuple)):
            raise ConfigError("'sinks' must be a list")
        return cls(sinks=tuple(SinkConfig.from_dict(e) for e in entries))


def build_sink(config: SinkConfig, *, logger: Optional[Callable[[str], None]] = None) -> Sink:
    """Construct the sink described by `config` without subscribing it."""
    opts = config.options
    try:
        if config.kind == "print":
            sink = PrintSink(with_color=bool(opts.get("with_color", False)), logger=logger)
        elif config.kind == "file":
            sink = FileSink(opts["path"], as_json=bool(opts.get("as_json", False)), logger=logger)
        elif config.kind == "zmq_pub":
            sink = ZmqPubSink(
                opts.get("host", DEFAULT_PUB_HOST),
                opts.get("port", DEFAULT_PUB_PORT),
                opts.get("topic", DEFAULT_PUB_TOPIC),
                logger=logger,
            )
        else:
            raise ConfigError(f"Unknown sink kind: {config.kind!r}")
    except KeyError as e:
        raise ConfigError(f"Sink '{config.kind}' missing option {e}") from e

    if config.min_level is not None:
        sink.add_filter(LevelFilter(config.min_level))
    return sink


def apply_config(
    config: LoggingConfig,
    *,
    logger: Optional[Callable[[str], None]] = None,
) -> List[Sink]:
    """
    Build and subscribe every configured sink.

    Returns the sinks; they stop receiving records once the
    returned list (and every other owner) is released.
    """
    sinks: List[Sink] = []
    for sink_config in config.sinks:
        try:
            sink = build_sink(sink_config, logger=logger)
        except LogTreeError:
            # Sinks built so far would stay subscribed but unreachable.
            for built in sinks:
                built.unsubscribe(root_logger)
                built.close()
            raise
        for path in sink_config.subscribe_to:
            subscribe(sink, root_logger if path == ROOT_PATH else path)
        sinks.append(sink)
    return sinks
