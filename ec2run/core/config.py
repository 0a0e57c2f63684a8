"""Configuration loading and the immutable per-invocation options."""

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from ec2run.constants import (
    CONFIG_FILENAME,
    DEFAULT_APP_DIR,
    DEFAULT_COMMAND,
    DEFAULT_ENV_FILE,
    DEFAULT_PROFILE,
    DEFAULT_REGION,
    DEFAULT_SERVICE_USER,
)
from ec2run.core.session import RemoteSettings
from ec2run.exceptions import ConfigError
from ec2run.utils import get_default_stack, get_default_tmux

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    """Everything one invocation needs, assembled once at startup.

    Attributes
    ----------
    stack : str | None
        Stack identifier, validated before the inventory query
    profile : str
        AWS shared-credentials profile
    region : str
        AWS region
    auto_yes : bool
        Pick the oldest instance without prompting
    verbose : bool
        Print diagnostics
    tmux : bool
        Run the command inside the default tmux session
    session_name : str | None
        Explicit tmux session name (implies tmux)
    list_sessions : bool
        List tmux sessions instead of running a command
    command : str | None
        Remote command, None to use the configured fallback
    ssh_user : str | None
        Login user passed to ssh, None for the ssh default
    remote : RemoteSettings
        Service identity, app directory, env file and fallback command
    """

    stack: str | None = None
    profile: str = DEFAULT_PROFILE
    region: str = DEFAULT_REGION
    auto_yes: bool = False
    verbose: bool = False
    tmux: bool = False
    session_name: str | None = None
    list_sessions: bool = False
    command: str | None = None
    ssh_user: str | None = None
    remote: RemoteSettings = field(default_factory=RemoteSettings)


class ConfigLoader:
    """Load and merge YAML configuration, git config and built-in defaults."""

    def __init__(self) -> None:
        self.BUILT_IN_DEFAULTS = {
            "profile": DEFAULT_PROFILE,
            "region": DEFAULT_REGION,
            "stack": None,
            "tmux": False,
            "ssh_user": None,
            "service_user": DEFAULT_SERVICE_USER,
            "app_dir": DEFAULT_APP_DIR,
            "env_file": DEFAULT_ENV_FILE,
            "default_command": DEFAULT_COMMAND,
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks EC2_RUN_CONFIG env var,
            then falls back to .ec2-run.yaml

        Returns
        -------
        dict[str, Any]
            Parsed configuration with all variable interpolations resolved

        Raises
        ------
        ConfigError
            If the file is not valid YAML or variables cannot be resolved
        RuntimeError
            If the file exists but cannot be read
        """
        if config_path is None:
            config_path = os.environ.get("EC2_RUN_CONFIG", CONFIG_FILENAME)

        config_file = Path(config_path)

        if not config_file.exists():
            return {"defaults": {}}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.debug("Failed to parse YAML config file %s: %s", config_file, e)
            raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {"defaults": {}}

        try:
            config = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            raise ConfigError(f"Configuration variable resolution error: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"{config_file} must contain a mapping")

        return config

    def get_defaults(self, config: dict[str, Any]) -> dict[str, Any]:
        """Merge built-in defaults, YAML defaults and git config.

        Parameters
        ----------
        config : dict[str, Any]
            Full configuration from YAML

        Returns
        -------
        dict[str, Any]
            Merged defaults; git config wins over YAML, YAML over built-ins
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        yaml_defaults = config.get("defaults") or {}
        if not isinstance(yaml_defaults, dict):
            raise ConfigError("defaults must be a mapping")

        unknown = sorted(set(yaml_defaults) - set(merged))
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", ", ".join(unknown))

        for key, value in yaml_defaults.items():
            if key in merged:
                merged[key] = value

        git_stack = get_default_stack()
        if git_stack:
            merged["stack"] = git_stack

        git_tmux = get_default_tmux()
        if git_tmux is not None:
            merged["tmux"] = git_tmux

        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate merged defaults have the expected types.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration to validate

        Raises
        ------
        ConfigError
            If a value has the wrong type or is empty
        """
        required_strings = (
            "profile",
            "region",
            "service_user",
            "app_dir",
            "env_file",
            "default_command",
        )
        for key in required_strings:
            value = config.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"{key} must be a non-empty string")

        for key in ("stack", "ssh_user"):
            value = config.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{key} must be a string")

        if not isinstance(config.get("tmux"), bool):
            raise ConfigError("tmux must be a boolean")

    def build_options(
        self,
        stack: str | None = None,
        profile: str | None = None,
        region: str | None = None,
        yes: bool = False,
        verbose: bool = False,
        tmux: bool | None = None,
        name: str | None = None,
        list_sessions: bool = False,
        command: str | None = None,
        ssh_user: str | None = None,
    ) -> RunOptions:
        """Apply command-line values over configured defaults.

        Parameters
        ----------
        stack, profile, region, tmux, ssh_user
            Command-line overrides; None keeps the configured default
        yes, verbose, list_sessions
            Command-line switches
        name : str | None
            tmux session name
        command : str | None
            Remote command

        Returns
        -------
        RunOptions
            Immutable options for this invocation
        """
        defaults = self.get_defaults(self.load_config())
        self.validate_config(defaults)

        remote = RemoteSettings(
            service_user=defaults["service_user"],
            app_dir=defaults["app_dir"],
            env_file=defaults["env_file"],
            default_command=defaults["default_command"],
        )

        return RunOptions(
            stack=stack if stack is not None else defaults["stack"],
            profile=profile or defaults["profile"],
            region=region or defaults["region"],
            auto_yes=bool(yes),
            verbose=bool(verbose),
            tmux=defaults["tmux"] if tmux is None else bool(tmux),
            session_name=name or None,
            list_sessions=bool(list_sessions),
            command=command or None,
            ssh_user=ssh_user or defaults["ssh_user"],
            remote=remote,
        )
