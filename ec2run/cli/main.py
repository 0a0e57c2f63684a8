"""CLI entry point for ec2-run."""

from __future__ import annotations

import logging
import os
import sys

import fire

from ec2run.constants import (
    CLOUDFORMATION_CONSOLE_URL,
    DEFAULT_REGION,
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    VPN_HINT,
)
from ec2run.exceptions import ConfigError, SelectionError, SelectionReason, TransportError
from ec2run.logging import StreamFormatter, StreamRoutingFilter
from ec2run.providers import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    ProviderError,
)
from ec2run.providers.aws.utils import get_aws_credentials_error_message


def get_ec2run_class() -> type:
    """Get the Ec2Run class on-demand to avoid circular imports.

    Returns
    -------
    type
        Ec2Run class
    """
    from ec2run.__main__ import Ec2Run

    return Ec2Run


def handle_config_error(error: ConfigError, debug_mode: bool) -> None:
    """Handle a missing stack identifier or invalid configuration.

    Parameters
    ----------
    error : ConfigError
        The configuration error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ConfigError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    if error.missing_stack:
        region = error.region or DEFAULT_REGION
        print(f"Error: {error}", file=sys.stderr)
        print(
            "Use 'ec2-run stacks' to list stacks or visit "
            f"{CLOUDFORMATION_CONSOLE_URL.format(region=region)}",
            file=sys.stderr,
        )
        print(
            "Set a default stack with: git config ec2-run.stack <stack-name>",
            file=sys.stderr,
        )
        sys.exit(EXIT_ERROR)

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(EXIT_CONFIG_ERROR)


def handle_credentials_error(error: ProviderCredentialsError, debug_mode: bool) -> None:
    """Handle provider credentials error.

    Parameters
    ----------
    error : ProviderCredentialsError
        The credentials error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderCredentialsError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"{error}\n", file=sys.stderr)
    print(get_aws_credentials_error_message(), file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_api_error(error: ProviderAPIError, debug_mode: bool) -> None:
    """Handle provider API error with context-specific messages.

    Parameters
    ----------
    error : ProviderAPIError
        The API error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderAPIError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    error_code = error.error_code

    if error_code in ["UnauthorizedOperation", "AccessDenied", "AccessDeniedException"]:
        print("Insufficient IAM permissions\n", file=sys.stderr)
        print(f"{error}\n", file=sys.stderr)
        print("ec2-run needs:", file=sys.stderr)
        print("  - ec2:DescribeInstances", file=sys.stderr)
        print("  - cloudformation:DescribeStacks (for 'ec2-run stacks')", file=sys.stderr)
    elif error_code in ["ExpiredToken", "RequestExpired", "ExpiredTokenException"]:
        print("AWS credentials have expired\n", file=sys.stderr)
        print("Fix it:", file=sys.stderr)
        print("  aws sso login           # If using AWS SSO", file=sys.stderr)
        print("  aws configure           # Re-configure credentials", file=sys.stderr)
    elif error_code in ["AuthFailure", "InvalidClientTokenId", "UnrecognizedClientException"]:
        print("AWS rejected the credentials\n", file=sys.stderr)
        print(f"{error}\n", file=sys.stderr)
        print("Check the --profile you are using.", file=sys.stderr)
    else:
        print(f"AWS API error: {error}", file=sys.stderr)

    sys.exit(EXIT_ERROR)


def handle_connection_error(error: ProviderConnectionError, debug_mode: bool) -> None:
    """Handle an unreachable AWS endpoint.

    Parameters
    ----------
    error : ProviderConnectionError
        The connection error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderConnectionError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"Could not reach AWS: {error}", file=sys.stderr)
    print("Check your network connection and the --region you are using.", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_provider_error(error: ProviderError, debug_mode: bool) -> None:
    """Handle any other failure reported by AWS.

    Parameters
    ----------
    error : ProviderError
        The provider error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"AWS error: {error}", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_selection_error(error: SelectionError, debug_mode: bool) -> None:
    """Handle an empty match or an unusable selection.

    Parameters
    ----------
    error : SelectionError
        The selection error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    SelectionError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    if error.reason == SelectionReason.NONE_FOUND:
        print(str(error))
        print("List stacks with 'ec2-run stacks'. See usage with --help.")
    else:
        print(f"Error: {error}", file=sys.stderr)

    sys.exit(EXIT_ERROR)


def handle_transport_error(error: TransportError, debug_mode: bool) -> None:
    """Handle a failed ssh session.

    Parameters
    ----------
    error : TransportError
        The transport error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    TransportError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    if error.unreachable:
        print(VPN_HINT, file=sys.stderr)
    else:
        print(str(error), file=sys.stderr)

    sys.exit(EXIT_ERROR)


def handle_os_error(error: OSError, debug_mode: bool) -> None:
    """Handle a local system failure, such as an unreadable terminal.

    Parameters
    ----------
    error : OSError
        The error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    OSError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"System error: {error}", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_interrupt(debug_mode: bool) -> None:
    """Handle Ctrl+C, typically at the instance prompt.

    Parameters
    ----------
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    KeyboardInterrupt
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print("\nAborted.", file=sys.stderr)
    sys.exit(EXIT_INTERRUPTED)


def handle_runtime_error(error: RuntimeError, debug_mode: bool) -> None:
    """Handle unexpected runtime error.

    Parameters
    ----------
    error : RuntimeError
        The runtime error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    RuntimeError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise error

    print(f"Unexpected error: {error}", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def configure_logging() -> None:
    """Route INFO and DEBUG to stdout, warnings and errors to stderr."""
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(StreamFormatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(StreamFormatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=logging.INFO,
        handlers=[stdout_handler, stderr_handler],
    )


def main() -> None:
    """Entry point for Fire CLI with graceful error handling.

    Fire maps the methods of Ec2Run to subcommands (connect, stacks,
    version). Every failure is terminal and exits non-zero with a message;
    set EC2_RUN_DEBUG=1 to get the traceback instead.
    """
    configure_logging()

    debug_mode = os.environ.get("EC2_RUN_DEBUG") == "1"

    try:
        fire.Fire(get_ec2run_class()(), name="ec2-run")
    except ConfigError as e:
        handle_config_error(e, debug_mode)
    except ProviderCredentialsError as e:
        handle_credentials_error(e, debug_mode)
    except ProviderAPIError as e:
        handle_api_error(e, debug_mode)
    except ProviderConnectionError as e:
        handle_connection_error(e, debug_mode)
    except ProviderError as e:
        handle_provider_error(e, debug_mode)
    except SelectionError as e:
        handle_selection_error(e, debug_mode)
    except TransportError as e:
        handle_transport_error(e, debug_mode)
    except ValueError as e:
        handle_config_error(ConfigError(str(e)), debug_mode)
    except OSError as e:
        handle_os_error(e, debug_mode)
    except RuntimeError as e:
        handle_runtime_error(e, debug_mode)
    except KeyboardInterrupt:
        handle_interrupt(debug_mode)
