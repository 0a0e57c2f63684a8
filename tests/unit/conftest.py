"""Pytest configuration and fixtures for ec2-run tests."""

import importlib.util
import os
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
import yaml

project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tests.unit.fakes.instances import make_instance  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path) -> Generator[None, None, None]:
    """Keep the developer's git config and YAML settings out of unit tests.

    Yields
    ------
    None
        Control back to test with git-derived defaults disabled and
        EC2_RUN_CONFIG pointing at a file that does not exist
    """
    original_config = os.environ.get("EC2_RUN_CONFIG")
    os.environ["EC2_RUN_CONFIG"] = str(tmp_path / "absent.yaml")

    with (
        patch("ec2run.core.config.get_default_stack", return_value=None),
        patch("ec2run.core.config.get_default_tmux", return_value=None),
    ):
        yield

    if original_config is not None:
        os.environ["EC2_RUN_CONFIG"] = original_config
    else:
        os.environ.pop("EC2_RUN_CONFIG", None)


@pytest.fixture(scope="session")
def ec2run_module() -> Any:
    """Load the ec2run entry module.

    Returns
    -------
    Any
        The ec2run.__main__ module with the Ec2Run class available.
    """
    script_path = Path(__file__).parent.parent.parent / "ec2run" / "__main__.py"
    spec = importlib.util.spec_from_file_location("ec2run_script", script_path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    return module


@pytest.fixture
def aws_credentials() -> Generator[None, None, None]:
    """Fixture to set AWS credentials for testing with proper cleanup.

    Yields
    ------
    None
        Control back to test after setting credentials
    """
    keys = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION")
    old_values = {key: os.environ.get(key) for key in keys}

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

    yield

    for key, value in old_values.items():
        if value is not None:
            os.environ[key] = value
        else:
            os.environ.pop(key, None)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Point EC2_RUN_CONFIG at a temporary config file path.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory path

    Returns
    -------
    Path
        Path to temporary config file (restored by isolated_settings)
    """
    config_path = tmp_path / ".ec2-run.yaml"
    os.environ["EC2_RUN_CONFIG"] = str(config_path)
    return config_path


@pytest.fixture
def write_config(config_file: Path):
    """Helper fixture to write config data to file.

    Parameters
    ----------
    config_file : Path
        Path to config file from config_file fixture

    Returns
    -------
    callable
        Function that takes config_data dict and writes to file
    """

    def _write(config_data: dict[str, Any]) -> None:
        with open(config_file, "w") as f:
            yaml.dump(config_data, f)

    return _write


@pytest.fixture
def instance_factory():
    """Return the make_instance helper."""
    return make_instance
