"""AWS-specific utility functions for ec2-run."""

from __future__ import annotations

from ec2run.exceptions import ConfigError


def build_stack_matcher(stack: str | None) -> str:
    """Build the tag glob used to find a stack's instances.

    Parameters
    ----------
    stack : str | None
        Stack identifier

    Returns
    -------
    str
        Glob of the form ``*<stack>*``

    Raises
    ------
    ConfigError
        If the stack identifier is missing or blank
    """
    if stack is None or not str(stack).strip():
        raise ConfigError("Missing stack name.", missing_stack=True)
    return f"*{str(stack).strip()}*"


def get_aws_credentials_error_message(profile: str | None = None) -> str:
    """Get standard AWS credentials error message.

    Parameters
    ----------
    profile : str | None
        Profile that was requested, if any

    Returns
    -------
    str
        Formatted AWS credentials error message
    """
    profile_line = f"Profile in use: {profile}\n\n" if profile else ""
    return (
        "AWS credentials not found\n\n"
        f"{profile_line}"
        "Configure your credentials:\n"
        "  aws configure --profile <name>\n\n"
        "Or set environment variables:\n"
        "  export AWS_ACCESS_KEY_ID=...\n"
        "  export AWS_SECRET_ACCESS_KEY=..."
    )
