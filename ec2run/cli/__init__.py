"""CLI argument parsing and handling."""

from __future__ import annotations

from ec2run.cli.parsing import join_command, parse_bool, parse_optional_str

__all__ = [
    "join_command",
    "parse_bool",
    "parse_optional_str",
]
