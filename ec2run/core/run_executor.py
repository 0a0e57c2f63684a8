from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ec2run.core.config import RunOptions
from ec2run.core.selection import InstanceSelector
from ec2run.core.session import SessionCommandBuilder, SessionMode, SessionModeKind
from ec2run.exceptions import TransportError
from ec2run.providers.aws.utils import build_stack_matcher
from ec2run.services.ssh import ExitOutcome, SSHExecutor, format_session_listing
from ec2run.utils import current_user

logger = logging.getLogger(__name__)


class RunExecutor:
    """Orchestrates one connect invocation.

    Inventory query, instance selection, remote program construction and the
    ssh session, in that order, with every failure terminal.

    Parameters
    ----------
    compute_provider_factory : Callable[[RunOptions], Any]
        Creates the inventory client (an EC2Manager) for the options
    executor_factory : Callable[[RunOptions], Any] | None
        Creates the transport, defaults to an SSHExecutor
    selector_factory : Callable[[RunOptions], InstanceSelector] | None
        Creates the instance selector
    user_getter : Callable[[], str] | None
        Returns the local user for the default tmux session name
    output_func : Callable[[str], None] | None
        Prints progress lines and session listings
    """

    def __init__(
        self,
        compute_provider_factory: Callable[[RunOptions], Any],
        executor_factory: Callable[[RunOptions], Any] | None = None,
        selector_factory: Callable[[RunOptions], InstanceSelector] | None = None,
        user_getter: Callable[[], str] | None = None,
        output_func: Callable[[str], None] | None = None,
    ) -> None:
        self.compute_provider_factory = compute_provider_factory
        self.executor_factory = executor_factory or (
            lambda options: SSHExecutor(username=options.ssh_user, verbose=options.verbose)
        )
        self.selector_factory = selector_factory or (
            lambda options: InstanceSelector(verbose=options.verbose)
        )
        self.user_getter = user_getter or current_user
        self.output_func = output_func or print

    def execute(self, options: RunOptions) -> ExitOutcome:
        """Resolve the stack to an instance and run the session on it.

        Parameters
        ----------
        options : RunOptions
            Options for this invocation

        Returns
        -------
        ExitOutcome
            Outcome of the ssh session

        Raises
        ------
        ConfigError
            If no stack identifier is configured
        ProviderError
            If the inventory query fails
        SelectionError
            If nothing matches or the selection answer is invalid
        TransportError
            If the ssh session fails
        """
        matcher = build_stack_matcher(options.stack)

        compute_provider = self.compute_provider_factory(options)
        instances = compute_provider.find_running_instances(matcher)

        selector = self.selector_factory(options)
        instance, _ = selector.select(instances, options.auto_yes, matcher=matcher)

        if not instance.private_ip:
            raise TransportError(
                f"Instance {instance.label} ({instance.instance_id}) has no private IP address."
            )

        mode = SessionMode.resolve(
            list_sessions=options.list_sessions,
            session_name=options.session_name,
            tmux=options.tmux,
            user=self.user_getter(),
        )
        builder = SessionCommandBuilder(options.remote)

        if mode.kind != SessionModeKind.LIST_SESSIONS and not (
            options.command and options.command.strip()
        ):
            logger.debug("Missing command, will run '%s'.", options.remote.default_command)
        if mode.uses_tmux:
            logger.debug("Using tmux session name '%s'.", mode.session_name)

        program = builder.build(mode, options.command)

        self.output_func(
            f"Opening ssh session to: {instance.label} ({instance.private_ip})..."
        )

        executor = self.executor_factory(options)
        capture = mode.kind == SessionModeKind.LIST_SESSIONS
        outcome = executor.run(instance.private_ip, program, capture_output=capture)

        if outcome.unreachable:
            raise TransportError(
                f"ssh to {instance.private_ip} failed with exit status {outcome.returncode}",
                returncode=outcome.returncode,
                unreachable=True,
            )

        # tmux exits non-zero when no server is running; the listing says so.
        if capture:
            self.output_func("")
            self.output_func("Open tmux sessions:")
            self.output_func(format_session_listing(outcome.output))
            return outcome

        if not outcome.ok:
            raise TransportError(
                f"exit status {outcome.returncode}", returncode=outcome.returncode
            )

        return outcome
