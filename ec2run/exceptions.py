"""Exceptions for stack resolution, instance selection and the ssh transport."""

from __future__ import annotations

from enum import Enum


class ConfigError(ValueError):
    """Configuration is missing or invalid.

    Parameters
    ----------
    message : str
        Human readable description
    missing_stack : bool
        True when the error is the absence of a stack identifier, which the
        CLI answers with guidance on how to find or set one
    region : str | None
        Region the stack was looked up in, used in that guidance
    """

    def __init__(
        self, message: str, missing_stack: bool = False, region: str | None = None
    ) -> None:
        super().__init__(message)
        self.missing_stack = missing_stack
        self.region = region


class SelectionReason(str, Enum):
    """Why an instance could not be selected."""

    NONE_FOUND = "none_found"
    INVALID_INPUT = "invalid_input"


class SelectionError(Exception):
    """No instance could be selected.

    Parameters
    ----------
    reason : SelectionReason
        Whether nothing matched or the operator's answer was unusable
    message : str
        Message shown to the operator
    """

    def __init__(self, reason: SelectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class TransportError(RuntimeError):
    """The ssh session could not be established or exited with an error.

    Parameters
    ----------
    message : str
        Human readable description
    returncode : int | None
        Exit status of the ssh process, if it ran
    unreachable : bool
        True when the status means the host was unreachable or
        authentication was refused
    """

    def __init__(
        self,
        message: str,
        returncode: int | None = None,
        unreachable: bool = False,
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.unreachable = unreachable
