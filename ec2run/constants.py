"""Global constants for ec2-run.

This module contains application-wide constants shared by the inventory
query, the session command builder, and the ssh transport.
"""

from enum import Enum

VERSION = "0.1.0"

DEFAULT_PROFILE = "default"
"""AWS shared-credentials profile used when none is configured."""

DEFAULT_REGION = "us-east-1"
"""AWS region used when no region is configured or passed on the command line."""

DEFAULT_COMMAND = "rails console"
"""Remote command run when the operator supplies none."""

DEFAULT_SERVICE_USER = "deploy"
"""Application service identity the remote command runs as (via sudo)."""

DEFAULT_APP_DIR = "/srv"
"""Application working directory on the remote host."""

DEFAULT_ENV_FILE = "app-env"
"""Environment file sourced inside the application directory."""

DEFAULT_SESSION_PREFIX = "console"
"""Prefix of the default tmux session name (``console-<user>``)."""

STACK_NAME_TAG = "aws:cloudformation:stack-name"
"""Instance tag holding the CloudFormation stack an instance belongs to."""

NAME_TAG = "Name"
ROLES_TAG = "Roles"

SSH_CONNECT_TIMEOUT_SECONDS = 10
"""Bound on ssh connection establishment.

This is the only timer in the tool; everything after the connection is
interactive and unbounded.
"""

SSH_UNREACHABLE_EXIT_CODE = 255
"""Exit status ssh uses for connection and authentication failures.

Mapped to a VPN connectivity hint rather than a generic error.
"""

TMUX_NO_SERVER_MARKERS = (
    "no server running",
    "failed to connect to server",
    "error connecting to",
)
"""Fragments of tmux output meaning there are no sessions at all."""

SECONDS_PER_HOUR = 3600

DEFAULT_NAME_COLUMN_WIDTH = 30
"""Width in characters of the name column in the selection table."""

CONFIG_FILENAME = ".ec2-run.yaml"
"""Project-local YAML settings file, overridable with EC2_RUN_CONFIG."""

GIT_CONFIG_SECTION = "ec2-run"
"""Git config section holding project-local defaults (ec2-run.stack, ec2-run.tmux)."""

CLOUDFORMATION_CONSOLE_URL = (
    "https://console.aws.amazon.com/cloudformation/home?region={region}#/stacks?filter=active"
)

VPN_HINT = "Please make sure you are connected to the VPN if you are away from the office."

EXIT_ERROR = 1
"""Exit code for missing stack, no match, bad selection, provider or transport errors."""

EXIT_CONFIG_ERROR = 2
"""Exit code for an invalid configuration file."""

EXIT_INTERRUPTED = 130
"""Exit code when the operator presses Ctrl+C."""


class InstanceState(str, Enum):
    """Instance state values."""

    RUNNING = "running"
