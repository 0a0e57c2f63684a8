import logging

import pytest

from ec2run.logging import StreamFormatter, StreamRoutingFilter


def make_record(level: int, msg: str = "message") -> logging.LogRecord:
    return logging.LogRecord("ec2run", level, __file__, 1, msg, None, None)


@pytest.mark.parametrize(
    "level, expected",
    [
        (logging.DEBUG, "message"),
        (logging.INFO, "message"),
        (logging.WARNING, "Warning: message"),
        (logging.ERROR, "Error: message"),
        (logging.CRITICAL, "Error: message"),
    ],
)
def test_formatter_prefixes_severity(level, expected) -> None:
    assert StreamFormatter("%(message)s").format(make_record(level)) == expected


@pytest.mark.parametrize(
    "level, stdout, stderr",
    [
        (logging.DEBUG, True, False),
        (logging.INFO, True, False),
        (logging.WARNING, False, True),
        (logging.ERROR, False, True),
    ],
)
def test_routing_filter(level, stdout, stderr) -> None:
    record = make_record(level)

    assert StreamRoutingFilter("stdout").filter(record) is stdout
    assert StreamRoutingFilter("stderr").filter(record) is stderr


def test_routing_filter_rejects_unknown_stream() -> None:
    with pytest.raises(ValueError):
        StreamRoutingFilter("tty")
