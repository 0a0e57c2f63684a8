"""Transport services."""

from __future__ import annotations

from ec2run.services.ssh import ExitOutcome, SSHExecutor, format_session_listing

__all__ = ["ExitOutcome", "SSHExecutor", "format_session_listing"]
