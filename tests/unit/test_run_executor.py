"""Tests for RunExecutor orchestration."""

import logging

import pytest

from ec2run.core.config import RunOptions
from ec2run.core.run_executor import RunExecutor
from ec2run.exceptions import ConfigError, SelectionError, SelectionReason, TransportError
from ec2run.providers.exceptions import ProviderAPIError
from tests.unit.fakes.fake_ec2_manager import FakeEC2Manager
from tests.unit.fakes.fake_ssh_executor import FakeSSHExecutor


@pytest.fixture
def output() -> list[str]:
    return []


@pytest.fixture
def make_executor(output):
    """Build a RunExecutor wired to fakes.

    Returns
    -------
    callable
        Takes the instances, a FakeSSHExecutor and optional prompt answer
    """

    def _make(instances, ssh=None, inventory_error=None):
        inventory = FakeEC2Manager(instances, error=inventory_error)
        ssh = ssh or FakeSSHExecutor()
        executor = RunExecutor(
            compute_provider_factory=lambda options: inventory,
            executor_factory=lambda options: ssh,
            user_getter=lambda: "alice",
            output_func=output.append,
        )
        return executor, inventory, ssh

    return _make


def test_auto_yes_runs_default_command_on_oldest(make_executor, instance_factory, output) -> None:
    instances = [
        instance_factory("web-b", 2, private_ip="10.0.0.12"),
        instance_factory("web-a", 0, private_ip="10.0.0.11"),
    ]
    executor, inventory, ssh = make_executor(instances)

    outcome = executor.execute(RunOptions(stack="checkout", auto_yes=True))

    assert outcome.ok
    assert inventory.queries == ["*checkout*"]
    target, program, capture = ssh.calls[0]
    assert target == "10.0.0.11"
    assert "rails console" in program
    assert "tmux" not in program
    assert capture is False
    assert "Opening ssh session to: web-a (10.0.0.11)..." in output


def test_named_session(make_executor, instance_factory) -> None:
    executor, _, ssh = make_executor([instance_factory("web-a")])

    executor.execute(
        RunOptions(stack="checkout", session_name="demo", command="bin/rake jobs:work")
    )

    assert 'export SESSION_NAME="demo"' in ssh.last_program
    assert 'export COMMAND="bin/rake jobs:work"' in ssh.last_program


def test_tmux_default_session_uses_local_user(make_executor, instance_factory) -> None:
    executor, _, ssh = make_executor([instance_factory("web-a")])

    executor.execute(RunOptions(stack="checkout", tmux=True))

    assert 'export SESSION_NAME="console-alice"' in ssh.last_program


def test_list_sessions_prints_listing(make_executor, instance_factory, output) -> None:
    ssh = FakeSSHExecutor(output="console-alice: 1 windows (created Fri Mar  1 09:00:00 2024)\n")
    executor, _, ssh = make_executor([instance_factory("web-a")], ssh=ssh)

    executor.execute(RunOptions(stack="checkout", list_sessions=True, command="ls"))

    _, program, capture = ssh.calls[0]
    assert program == "tmux list-sessions"
    assert capture is True
    assert output[-2:] == [
        "Open tmux sessions:",
        "console-alice: 1 windows (created Fri Mar  1 09:00:00 2024)",
    ]


def test_list_sessions_without_server(make_executor, instance_factory, output) -> None:
    ssh = FakeSSHExecutor(returncode=1, output="")
    executor, _, _ = make_executor([instance_factory("web-a")], ssh=ssh)

    executor.execute(RunOptions(stack="checkout", list_sessions=True))

    assert output[-1] == "No sessions open."


@pytest.mark.parametrize("list_sessions", [True, False])
def test_unreachable_host(make_executor, instance_factory, list_sessions) -> None:
    executor, _, _ = make_executor(
        [instance_factory("web-a")], ssh=FakeSSHExecutor(returncode=255)
    )

    with pytest.raises(TransportError) as exc_info:
        executor.execute(RunOptions(stack="checkout", list_sessions=list_sessions))

    assert exc_info.value.unreachable
    assert exc_info.value.returncode == 255


def test_remote_failure_reports_status(make_executor, instance_factory) -> None:
    executor, _, _ = make_executor(
        [instance_factory("web-a")], ssh=FakeSSHExecutor(returncode=130)
    )

    with pytest.raises(TransportError) as exc_info:
        executor.execute(RunOptions(stack="checkout"))

    assert not exc_info.value.unreachable
    assert str(exc_info.value) == "exit status 130"


@pytest.mark.parametrize("stack", [None, "", "   "])
def test_missing_stack_never_queries(make_executor, stack) -> None:
    executor, inventory, ssh = make_executor([])

    with pytest.raises(ConfigError) as exc_info:
        executor.execute(RunOptions(stack=stack))

    assert exc_info.value.missing_stack
    assert inventory.queries == []
    assert ssh.calls == []


def test_no_instances(make_executor) -> None:
    executor, _, ssh = make_executor([])

    with pytest.raises(SelectionError) as exc_info:
        executor.execute(RunOptions(stack="checkout", auto_yes=True))

    assert exc_info.value.reason == SelectionReason.NONE_FOUND
    assert ssh.calls == []


def test_inventory_failure_propagates(make_executor) -> None:
    error = ProviderAPIError("denied", error_code="UnauthorizedOperation")
    executor, _, ssh = make_executor([], inventory_error=error)

    with pytest.raises(ProviderAPIError):
        executor.execute(RunOptions(stack="checkout"))

    assert ssh.calls == []


def test_instance_without_private_ip(make_executor, instance_factory) -> None:
    executor, _, ssh = make_executor([instance_factory("web-a", private_ip=None)])

    with pytest.raises(TransportError, match="no private IP"):
        executor.execute(RunOptions(stack="checkout"))

    assert ssh.calls == []


def test_missing_command_logged_in_debug(make_executor, instance_factory, caplog) -> None:
    executor, _, _ = make_executor([instance_factory("web-a")])

    with caplog.at_level(logging.DEBUG, logger="ec2run.core.run_executor"):
        executor.execute(RunOptions(stack="checkout"))

    assert "Missing command, will run 'rails console'." in caplog.text
