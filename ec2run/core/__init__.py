"""Core ec2-run functionality."""

from __future__ import annotations

from ec2run.core.config import ConfigLoader, RunOptions
from ec2run.core.run_executor import RunExecutor
from ec2run.core.selection import InstanceSelector
from ec2run.core.session import (
    RemoteSettings,
    SessionCommandBuilder,
    SessionMode,
    SessionModeKind,
)

__all__ = [
    "ConfigLoader",
    "RunOptions",
    "RunExecutor",
    "InstanceSelector",
    "RemoteSettings",
    "SessionCommandBuilder",
    "SessionMode",
    "SessionModeKind",
]
