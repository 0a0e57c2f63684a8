"""Remote shell program construction.

The builder only produces strings. Nothing here touches the network, so
every mode can be checked byte for byte without an ssh connection.

Persistent sessions use a small shell state machine that runs on the
remote host::

    has-session? --no--> new-session (runs the command)
         |
        yes --> prompt "(a)ttach or (k)ill"
                  a  -> attach-session
                  k  -> kill-session, "Killed <name>."
                  *  -> "Did not understand '<answer>'" (session untouched)
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from enum import Enum

from ec2run.constants import (
    DEFAULT_APP_DIR,
    DEFAULT_COMMAND,
    DEFAULT_ENV_FILE,
    DEFAULT_SERVICE_USER,
    DEFAULT_SESSION_PREFIX,
)

LIST_SESSIONS_PROGRAM = "tmux list-sessions"

DETACH_HINT = "Press Ctrl+B then D to detach your session."


class SessionModeKind(str, Enum):
    """How the remote command is run."""

    PLAIN_EXEC = "plain_exec"
    TMUX_NAMED = "tmux_named"
    TMUX_DEFAULT = "tmux_default"
    LIST_SESSIONS = "list_sessions"


@dataclass(frozen=True)
class SessionMode:
    """Session mode with the tmux session name it targets, if any.

    Use the constructors rather than instantiating directly so that tmux
    modes always carry a non-empty session name.
    """

    kind: SessionModeKind
    session_name: str | None = None

    @classmethod
    def plain_exec(cls) -> SessionMode:
        return cls(SessionModeKind.PLAIN_EXEC)

    @classmethod
    def list_sessions(cls) -> SessionMode:
        return cls(SessionModeKind.LIST_SESSIONS)

    @classmethod
    def tmux_named(cls, name: str) -> SessionMode:
        if not name or not name.strip():
            raise ValueError("tmux session name must not be empty")
        return cls(SessionModeKind.TMUX_NAMED, name.strip())

    @classmethod
    def tmux_default(cls, user: str) -> SessionMode:
        return cls(SessionModeKind.TMUX_DEFAULT, default_session_name(user))

    @classmethod
    def resolve(
        cls,
        list_sessions: bool,
        session_name: str | None,
        tmux: bool,
        user: str,
    ) -> SessionMode:
        """Pick the mode implied by the operator's flags.

        Listing wins over everything, an explicit session name implies tmux.
        """
        if list_sessions:
            return cls.list_sessions()
        if session_name:
            return cls.tmux_named(session_name)
        if tmux:
            return cls.tmux_default(user)
        return cls.plain_exec()

    @property
    def uses_tmux(self) -> bool:
        return self.kind in (SessionModeKind.TMUX_NAMED, SessionModeKind.TMUX_DEFAULT)


def default_session_name(user: str) -> str:
    """Return ``console-<user>``, or ``console`` when the user is unknown."""
    user = (user or "").strip()
    if not user:
        return DEFAULT_SESSION_PREFIX
    return f"{DEFAULT_SESSION_PREFIX}-{user}"


@dataclass(frozen=True)
class RemoteSettings:
    """Where and as whom the application command runs on the remote host."""

    service_user: str = DEFAULT_SERVICE_USER
    app_dir: str = DEFAULT_APP_DIR
    env_file: str = DEFAULT_ENV_FILE
    default_command: str = DEFAULT_COMMAND


def escape_double_quoted(text: str) -> str:
    """Escape text for embedding inside a double-quoted shell string."""
    for char in ("\\", '"', "$", "`"):
        text = text.replace(char, "\\" + char)
    return text


def escape_single_quoted(text: str) -> str:
    """Escape text for embedding inside a single-quoted shell string."""
    return text.replace("'", "'\"'\"'")


class SessionCommandBuilder:
    """Build the shell program handed to ssh for each session mode.

    Parameters
    ----------
    settings : RemoteSettings | None
        Remote service identity, directory, environment file and fallback
        command. Defaults to ``RemoteSettings()``
    """

    def __init__(self, settings: RemoteSettings | None = None) -> None:
        self.settings = settings or RemoteSettings()

    def resolve_command(self, remote_command: str | None) -> str:
        """Return the command to run, falling back to the default command."""
        if remote_command is None or not remote_command.strip():
            return self.settings.default_command
        return remote_command.strip()

    def build(self, mode: SessionMode, remote_command: str | None = None) -> str:
        """Build the remote program for a mode.

        Parameters
        ----------
        mode : SessionMode
            Session mode to build for
        remote_command : str | None
            Command requested by the operator, ignored for ListSessions

        Returns
        -------
        str
            Shell program to execute on the remote host
        """
        if mode.kind == SessionModeKind.LIST_SESSIONS:
            return LIST_SESSIONS_PROGRAM

        command = self.resolve_command(remote_command)

        if mode.uses_tmux:
            return self._build_tmux(mode.session_name, command)

        return self._build_plain(command)

    def _app_shell(self, inner: str) -> str:
        """Wrap an inner script to run as the service user in the app directory."""
        settings = self.settings
        return (
            f"sudo -su {settings.service_user} -- bash -i -c "
            f'"cd {settings.app_dir}; source {settings.env_file}; {inner}"'
        )

    def _build_plain(self, command: str) -> str:
        banner = escape_double_quoted(escape_single_quoted(f"Running: {command}"))
        inner = f"echo '{banner}'; echo; {escape_double_quoted(command)}"
        return self._app_shell(inner)

    def _build_tmux(self, session_name: str | None, command: str) -> str:
        if not session_name:
            raise ValueError("tmux session name must not be empty")

        # Quoted once per nesting level: tmux runs the pane with sh -c and
        # sudo hands the inner script to bash -c.
        settings = self.settings
        banner = shlex.quote(f"Running: {command}... {DETACH_HINT}")
        inner = (
            f"cd {settings.app_dir}; source {settings.env_file}; "
            f"echo {banner}; echo; {command}"
        )
        pane = f"sudo -su {settings.service_user} -- bash -i -c {shlex.quote(inner)}"

        return (
            "\n"
            f'export COMMAND="{escape_double_quoted(command)}"\n'
            f'export SESSION_NAME="{escape_double_quoted(session_name)}"\n'
            'tmux has-session -t "$SESSION_NAME"\n'
            "if [[ $? -eq 0 ]]; then\n"
            '  read -p "There is a session with the name $SESSION_NAME already. '
            'Do you want to (a)ttach to or (k)ill the session? " WAT\n'
            '  if [[ "$WAT" == "a" ]]; then\n'
            '    tmux attach-session -t "$SESSION_NAME"\n'
            '  elif [[ "$WAT" == "k" ]]; then\n'
            '    tmux kill-session -t "$SESSION_NAME"\n'
            '    echo "Killed $SESSION_NAME."\n'
            "  else\n"
            "    echo \"Did not understand '$WAT'\"\n"
            "  fi\n"
            "else\n"
            f'  tmux new-session -s "$SESSION_NAME" {shlex.quote(pane)}\n'
            "fi"
        )
