"""Logging helpers for ec2-run."""

from ec2run.logging.filters import StreamRoutingFilter
from ec2run.logging.formatters import StreamFormatter

__all__ = ["StreamFormatter", "StreamRoutingFilter"]
