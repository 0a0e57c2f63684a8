"""Logging filters routing records to stdout or stderr."""

import logging


class StreamRoutingFilter(logging.Filter):
    """Pass records below WARNING to stdout and the rest to stderr.

    Parameters
    ----------
    stream : str
        ``"stdout"`` or ``"stderr"``, the stream the handler writes to
    """

    def __init__(self, stream: str) -> None:
        super().__init__()
        if stream not in ("stdout", "stderr"):
            raise ValueError(f"stream must be 'stdout' or 'stderr', got {stream!r}")
        self.stream = stream

    def filter(self, record: logging.LogRecord) -> bool:
        is_error_stream = record.levelno >= logging.WARNING
        return is_error_stream == (self.stream == "stderr")
