"""Interactive ssh execution through the local OpenSSH client."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ec2run.constants import (
    SSH_CONNECT_TIMEOUT_SECONDS,
    SSH_UNREACHABLE_EXIT_CODE,
    TMUX_NO_SERVER_MARKERS,
)
from ec2run.exceptions import TransportError

logger = logging.getLogger(__name__)

NO_SESSIONS_MESSAGE = "No sessions open."


@dataclass(frozen=True)
class ExitOutcome:
    """Result of one ssh invocation.

    Attributes
    ----------
    returncode : int
        Exit status of the ssh process
    output : str | None
        Captured stdout, None when output was streamed live
    """

    returncode: int
    output: str | None = None

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def unreachable(self) -> bool:
        """True for the status ssh uses when it cannot connect or authenticate."""
        return self.returncode == SSH_UNREACHABLE_EXIT_CODE


def format_session_listing(output: str | None) -> str:
    """Turn ``tmux list-sessions`` output into the text shown to the operator.

    tmux reports a missing server as an error; that simply means there are
    no sessions.

    Parameters
    ----------
    output : str | None
        Captured remote output

    Returns
    -------
    str
        Listing without trailing newlines, or ``No sessions open.``
    """
    text = (output or "").rstrip("\r\n")
    lowered = text.lower()

    if not text.strip() or any(marker in lowered for marker in TMUX_NO_SERVER_MARKERS):
        return NO_SESSIONS_MESSAGE

    return text.replace("\r\n", "\n")


class SSHExecutor:
    """Run a remote program over ssh with a forced pseudo-terminal.

    Parameters
    ----------
    username : str | None
        Remote login user, None for the ssh client's default
    verbose : bool
        Pass ``-v`` to ssh and log the full argument list
    run_func : Callable[..., Any] | None
        Replacement for ``subprocess.run`` (tests)
    which_func : Callable[[str], str | None] | None
        Replacement for ``shutil.which`` (tests)
    """

    def __init__(
        self,
        username: str | None = None,
        verbose: bool = False,
        run_func: Callable[..., Any] | None = None,
        which_func: Callable[[str], str | None] | None = None,
    ) -> None:
        self.username = username
        self.verbose = verbose
        self.run_func = run_func or subprocess.run
        self.which_func = which_func or shutil.which

    def build_args(self, target: str, program: str) -> list[str]:
        """Build the ssh argument list (without the executable).

        Parameters
        ----------
        target : str
            Host address
        program : str
            Remote program

        Returns
        -------
        list[str]
            Arguments for the ssh client
        """
        args = [
            target,
            "-o",
            "LogLevel=ERROR",
            "-o",
            "StrictHostKeyChecking=no",
            "-o",
            "UserKnownHostsFile=/dev/null",
            "-o",
            f"ConnectTimeout={SSH_CONNECT_TIMEOUT_SECONDS}",
            "-t",
        ]
        if self.username:
            args.extend(["-l", self.username])
        if self.verbose:
            args.append("-v")
        args.append(program)
        return args

    def run(self, target: str, program: str, capture_output: bool = False) -> ExitOutcome:
        """Execute a program on the target.

        Parameters
        ----------
        target : str
            Host address
        program : str
            Remote program
        capture_output : bool
            Capture stdout instead of streaming it; stdin stays attached so
            the remote side can still prompt

        Returns
        -------
        ExitOutcome
            Exit status and captured output

        Raises
        ------
        TransportError
            If the target is empty or the ssh client cannot be started
        """
        if not target:
            raise TransportError("No address to connect to.")

        ssh_path = self.which_func("ssh")
        if not ssh_path:
            raise TransportError("ssh not found. Please install OpenSSH or add it to your PATH.")

        cmd = [ssh_path, *self.build_args(target, program)]
        logger.debug("ssh %s", cmd[1:])

        try:
            if capture_output:
                result = self.run_func(
                    cmd, stdout=subprocess.PIPE, text=True, errors="replace", check=False
                )
                return ExitOutcome(returncode=result.returncode, output=result.stdout or "")

            result = self.run_func(cmd, check=False)
        except OSError as e:
            raise TransportError(f"Failed to start ssh: {e}") from e

        logger.debug("ssh exited with status %d", result.returncode)
        return ExitOutcome(returncode=result.returncode)
