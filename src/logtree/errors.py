class LogTreeError(Exception):
    pass


class SinkInitError(LogTreeError):
    def __init__(self, sink, reason, details=None):
        self.sink = sink
        self.reason = reason
        self.details = details
        super().__init__(f"{sink}: {reason}")


class ConfigError(LogTreeError):
    pass


class RecordDecodeError(LogTreeError):
    pass
