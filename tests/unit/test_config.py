import logging
from unittest.mock import patch

import pytest

from ec2run.core.config import ConfigLoader
from ec2run.core.session import RemoteSettings
from ec2run.exceptions import ConfigError


@pytest.fixture
def loader() -> ConfigLoader:
    return ConfigLoader()


def test_built_in_defaults(loader) -> None:
    options = loader.build_options()

    assert options.stack is None
    assert options.profile == "default"
    assert options.region == "us-east-1"
    assert options.tmux is False
    assert options.ssh_user is None
    assert options.remote == RemoteSettings()


def test_missing_config_file(loader, tmp_path) -> None:
    assert loader.load_config(str(tmp_path / "missing.yaml")) == {"defaults": {}}


def test_yaml_defaults_applied(loader, write_config) -> None:
    write_config(
        {
            "defaults": {
                "stack": "checkout",
                "region": "eu-west-1",
                "service_user": "app",
                "app_dir": "/opt/app",
                "default_command": "bin/console",
            }
        }
    )

    options = loader.build_options()

    assert options.stack == "checkout"
    assert options.region == "eu-west-1"
    assert options.remote.service_user == "app"
    assert options.remote.app_dir == "/opt/app"
    assert options.remote.env_file == "app-env"
    assert options.remote.default_command == "bin/console"


def test_git_config_overrides_yaml(loader, write_config) -> None:
    write_config({"defaults": {"stack": "from-yaml", "tmux": False}})

    with (
        patch("ec2run.core.config.get_default_stack", return_value="from-git"),
        patch("ec2run.core.config.get_default_tmux", return_value=True),
    ):
        options = loader.build_options()

    assert options.stack == "from-git"
    assert options.tmux is True


def test_command_line_wins(loader, write_config) -> None:
    write_config({"defaults": {"stack": "from-yaml", "profile": "ops", "tmux": True}})

    with patch("ec2run.core.config.get_default_stack", return_value="from-git"):
        options = loader.build_options(
            stack="from-cli",
            profile="admin",
            region="us-west-2",
            tmux=False,
            yes=True,
            name="demo",
            command="bin/rake jobs:work",
            ssh_user="ubuntu",
        )

    assert options.stack == "from-cli"
    assert options.profile == "admin"
    assert options.region == "us-west-2"
    assert options.tmux is False
    assert options.auto_yes is True
    assert options.session_name == "demo"
    assert options.command == "bin/rake jobs:work"
    assert options.ssh_user == "ubuntu"


def test_interpolation_resolved(loader, write_config) -> None:
    write_config({"vars": {"base": "/srv"}, "defaults": {"app_dir": "${vars.base}/shop"}})

    assert loader.build_options().remote.app_dir == "/srv/shop"


def test_unknown_keys_warned(loader, write_config, caplog) -> None:
    write_config({"defaults": {"stak": "typo"}})

    with caplog.at_level(logging.WARNING):
        options = loader.build_options()

    assert options.stack is None
    assert "stak" in caplog.text


def test_invalid_yaml(loader, config_file) -> None:
    config_file.write_text("defaults: [unclosed\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        loader.build_options()


def test_unresolvable_interpolation(loader, write_config) -> None:
    write_config({"defaults": {"app_dir": "${vars.missing}"}})

    with pytest.raises(ConfigError):
        loader.build_options()


@pytest.mark.parametrize(
    "defaults",
    [
        {"region": ""},
        {"service_user": 5},
        {"tmux": "yes"},
        {"stack": ["a", "b"]},
    ],
)
def test_invalid_values_rejected(loader, write_config, defaults) -> None:
    write_config({"defaults": defaults})

    with pytest.raises(ConfigError):
        loader.build_options()


def test_defaults_must_be_mapping(loader, write_config) -> None:
    write_config({"defaults": ["stack"]})

    with pytest.raises(ConfigError, match="mapping"):
        loader.build_options()
