"""Utility functions for ec2-run."""

import getpass
import logging
import subprocess

from ec2run.constants import DEFAULT_NAME_COLUMN_WIDTH, GIT_CONFIG_SECTION

logger = logging.getLogger(__name__)


def get_git_config(key: str, scope: str = "local") -> str | None:
    """Read a value from git config.

    Parameters
    ----------
    key : str
        Config key (e.g. ``ec2-run.stack``)
    scope : str
        ``local`` for the repository config or ``global`` for the user config

    Returns
    -------
    str | None
        Configured value, or None if unset, git is missing, or not in a repository
    """
    try:
        result = subprocess.run(
            ["git", "config", f"--{scope}", "--get", key],
            capture_output=True,
            text=True,
            timeout=2,
            check=False,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, ValueError):
        return None

    if result.returncode != 0:
        return None

    value = result.stdout.strip()
    return value or None


def get_git_project_name() -> str | None:
    """Detect the project name from the git remote URL.

    Returns
    -------
    str | None
        Lower-cased last path component of remote.origin.url without a
        trailing ``.git``, or None if there is no remote
    """
    url = get_git_config("remote.origin.url")
    if not url:
        return None

    project = url.rstrip("/").split("/")[-1].split(":")[-1].lower()
    if project.endswith(".git"):
        project = project[:-4]

    if not project:
        logger.debug("Could not extract project name from git remote %s", url)
        return None

    return project


def get_default_stack() -> str | None:
    """Resolve the stack name configured for the current repository.

    Uses ``ec2-run.stack`` from local git config, then the repository name.

    Returns
    -------
    str | None
        Stack name, or None outside a configured repository
    """
    stack = get_git_config(f"{GIT_CONFIG_SECTION}.stack")
    if stack:
        return stack
    return get_git_project_name()


def get_default_tmux() -> bool | None:
    """Read ``ec2-run.tmux`` from local, then global git config.

    Returns
    -------
    bool | None
        Whether tmux is enabled by default, or None if unset
    """
    value = get_git_config(f"{GIT_CONFIG_SECTION}.tmux")
    if value is None:
        value = get_git_config(f"{GIT_CONFIG_SECTION}.tmux", scope="global")
    if value is None:
        return None
    return value.strip().lower() == "true"


def current_user() -> str:
    """Return the local login name used for the default tmux session."""
    return getpass.getuser()


def truncate_name(name: str, max_width: int = DEFAULT_NAME_COLUMN_WIDTH) -> str:
    """Truncate name to fit in column width.

    Parameters
    ----------
    name : str
        Name to truncate
    max_width : int
        Maximum width for name (default: DEFAULT_NAME_COLUMN_WIDTH)

    Returns
    -------
    str
        Truncated name with ellipsis if exceeds max_width, otherwise original name
    """
    if len(name) > max_width:
        return name[: max_width - 3] + "..."

    return name


def format_uptime(hours: float) -> str:
    """Format an uptime in hours with one decimal place."""
    return f"{hours:.1f}"
