#!/usr/bin/env python3
"""ec2-run - open a shell on a running instance of a stack."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

for _boto_module in ["botocore", "boto3", "urllib3"]:
    logging.getLogger(_boto_module).setLevel(logging.WARNING)

from ec2run.cli.parsing import join_command, parse_bool, parse_optional_str  # noqa: E402
from ec2run.constants import VERSION  # noqa: E402
from ec2run.core.config import ConfigLoader, RunOptions  # noqa: E402
from ec2run.core.run_executor import RunExecutor  # noqa: E402
from ec2run.core.selection import InstanceSelector  # noqa: E402
from ec2run.exceptions import ConfigError  # noqa: E402
from ec2run.providers.aws.compute import EC2Manager, create_session  # noqa: E402
from ec2run.providers.aws.errors import handle_aws_errors  # noqa: E402
from ec2run.providers.aws.stacks import StackManager  # noqa: E402
from ec2run.providers.exceptions import ProviderCredentialsError  # noqa: E402
from ec2run.services.ssh import SSHExecutor  # noqa: E402


class Ec2Run:
    """Open a shell (optionally inside tmux) on a running instance of a stack."""

    def __init__(
        self,
        session_factory: Callable[[str | None, str], Any] | None = None,
        executor_factory: Callable[[RunOptions], Any] | None = None,
        input_func: Callable[[str], str] | None = None,
        user_getter: Callable[[], str] | None = None,
    ) -> None:
        """Initialize with optional dependency injection.

        Parameters
        ----------
        session_factory : Callable[[str | None, str], Any] | None
            Creates a boto3 session from (profile, region)
        executor_factory : Callable[[RunOptions], Any] | None
            Creates the ssh transport for the options
        input_func : Callable[[str], str] | None
            Prompt function used for instance selection
        user_getter : Callable[[], str] | None
            Returns the local user for the default tmux session name
        """
        self._config_loader = ConfigLoader()
        self._session_factory = session_factory or create_session
        self._executor_factory = executor_factory or (
            lambda options: SSHExecutor(username=options.ssh_user, verbose=options.verbose)
        )
        self._input_func = input_func
        self._user_getter = user_getter

    def _create_session(self, options: RunOptions) -> Any:
        session = self._session_factory(options.profile, options.region)

        if options.verbose:
            with handle_aws_errors():
                credentials = session.get_credentials()
            if credentials is None:
                raise ProviderCredentialsError(
                    f"No credentials found for profile '{options.profile}'"
                )
            print(
                f'Using access key {credentials.access_key} from profile "{options.profile}".'
            )

        return session

    def _create_compute_provider(self, options: RunOptions) -> EC2Manager:
        return EC2Manager(region=options.region, session=self._create_session(options))

    def _create_selector(self, options: RunOptions) -> InstanceSelector:
        return InstanceSelector(input_func=self._input_func, verbose=options.verbose)

    def connect(
        self,
        *command: Any,
        stack: str | None = None,
        yes: bool = False,
        verbose: bool = False,
        tmux: bool | None = None,
        name: str | None = None,
        list_sessions: bool = False,
        list_stacks: bool = False,
        profile: str | None = None,
        region: str | None = None,
        user: str | None = None,
    ) -> None:
        """Open a shell on a running instance of a stack.

        Parameters
        ----------
        *command : Any
            Command to run on the remote server (default "rails console")
        stack : str | None
            Stack name; defaults to git config ec2-run.stack or the repository name
        yes : bool
            Automatically pick the oldest server if presented with more than one
        verbose : bool
            Be more verbose
        tmux : bool | None
            Use tmux. Recommended if your ssh session is critical or you are
            running a big migration
        name : str | None
            Name of the tmux session. Use this to open another person's session
        list_sessions : bool
            List tmux sessions running on the server
        list_stacks : bool
            List stacks instead of connecting; the command is used as a filter
        profile : str | None
            AWS profile to use
        region : str | None
            AWS region to use
        user : str | None
            Remote login user for ssh
        """
        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        options = self._config_loader.build_options(
            stack=parse_optional_str(stack),
            profile=parse_optional_str(profile),
            region=parse_optional_str(region),
            yes=yes,
            verbose=verbose,
            tmux=parse_bool(tmux),
            name=parse_optional_str(name),
            list_sessions=list_sessions,
            command=join_command(command),
            ssh_user=parse_optional_str(user),
        )

        if list_stacks:
            self._print_stacks(options, options.command)
            return

        if not options.stack:
            raise ConfigError("Missing stack name.", missing_stack=True, region=options.region)

        executor = RunExecutor(
            compute_provider_factory=self._create_compute_provider,
            executor_factory=self._executor_factory,
            selector_factory=self._create_selector,
            user_getter=self._user_getter,
        )
        executor.execute(options)

    def stacks(
        self,
        name_filter: str | None = None,
        profile: str | None = None,
        region: str | None = None,
        verbose: bool = False,
    ) -> None:
        """List CloudFormation stacks, optionally filtered by substring.

        Parameters
        ----------
        name_filter : str | None
            Only show stacks whose name contains this text
        profile : str | None
            AWS profile to use
        region : str | None
            AWS region to use
        verbose : bool
            Be more verbose
        """
        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        options = self._config_loader.build_options(
            profile=parse_optional_str(profile),
            region=parse_optional_str(region),
            verbose=verbose,
        )
        self._print_stacks(options, parse_optional_str(name_filter))

    def _print_stacks(self, options: RunOptions, name_filter: str | None) -> None:
        manager = StackManager(region=options.region, session=self._create_session(options))
        for stack_name in manager.list_stacks(name_filter):
            print(stack_name)

    def version(self) -> str:
        """Print version number."""
        return VERSION


if __name__ == "__main__":
    from ec2run.cli.main import main

    main()
