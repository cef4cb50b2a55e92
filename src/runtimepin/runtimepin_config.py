"""
Configuration parameters for runtimepin.
"""

import logging
import os
import pathlib
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from runtimepin.runtimepin_exceptions import ConfigurationError
from runtimepin.runtimepin_settings import RuntimePinSettings

TOML_SECTION = "runtimepin"

RUNTIMEPIN_TOML_SCHEMA = """
# runtimepin configuration

[runtimepin]
# Directory the runtime is installed into
install_root = "/usr/local/lib/nodejs"

# Directory that receives one symlink per launcher (node, npm, npx, corepack)
bin_dir = "/usr/local/bin"

# System-wide version-manager installation removed after a successful install
# ("" disables removal; a per-user tree such as "~/.nvm" is only removed when named here)
legacy_dir = "/usr/local/nvm"

# Parent of the per-run workspace (defaults to the parent of install_root)
# workspace_parent = "/usr/local/lib"

# Custom certificate authority bundle used instead of the system trust store
# trust_anchor = "/etc/ssl/private-ca.pem"

# Download retry policy (a single attempt by default)
# max_attempts = 3
# backoff_seconds = 1.0
# max_backoff_seconds = 30.0
"""


@dataclass(frozen=True)
class RuntimePinConfig:
    """
    Configuration parameters
    """

    install_root: pathlib.Path = field(default_factory=lambda: pathlib.Path(RuntimePinSettings.get_install_root()))
    bin_dir: pathlib.Path = field(default_factory=lambda: pathlib.Path(RuntimePinSettings.get_bin_directory()))
    legacy_dir: Optional[pathlib.Path] = field(
        default_factory=lambda: pathlib.Path(RuntimePinSettings.get_legacy_directory())
    )
    workspace_parent: Optional[pathlib.Path] = None
    trust_anchor: Optional[pathlib.Path] = None
    dist_host: str = RuntimePinSettings.DIST_HOST
    max_attempts: int = 1
    backoff_seconds: float = 1.0
    max_backoff_seconds: float = 30.0
    request_timeout: float = 60.0
    version_timeout: float = 10.0
    log_level: str = "INFO"

    def __post_init__(self):
        for name in ("install_root", "bin_dir"):
            value = getattr(self, name)
            if value is None or str(value) == "":
                raise ConfigurationError(f"'{name}' must not be empty")
            object.__setattr__(self, name, _as_path(value))

        for name in ("legacy_dir", "workspace_parent", "trust_anchor"):
            value = getattr(self, name)
            object.__setattr__(self, name, _as_path(value) if value not in (None, "") else None)

        if not isinstance(self.max_attempts, int) or self.max_attempts < 1:
            raise ConfigurationError(f"'max_attempts' must be a positive integer, got {self.max_attempts!r}")
        for name in ("backoff_seconds", "max_backoff_seconds", "request_timeout", "version_timeout"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(f"'{name}' must be a non-negative number, got {value!r}")
        if not self.dist_host:
            raise ConfigurationError("'dist_host' must not be empty")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ConfigurationError(f"Unknown log level: {self.log_level}")

    def get_workspace_parent(self) -> pathlib.Path:
        """
        The workspace lives next to the install root unless configured otherwise,
        so that committing the staged tree is a rename within one filesystem.
        """
        return self.workspace_parent or self.install_root.parent

    @classmethod
    def from_dict(cls, env: Dict[str, Any]) -> "RuntimePinConfig":
        """
        Create a RuntimePinConfig instance from a dictionary. Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in env.items() if k in known})

    @classmethod
    def from_toml(cls, path: str) -> "RuntimePinConfig":
        """
        Create a RuntimePinConfig from the [runtimepin] table of a TOML file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            with open(path, "rb") as f:
                toml_dict = tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration from {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(get_configuration_error_message(path, str(e))) from e

        section = toml_dict.get(TOML_SECTION, {})
        if not isinstance(section, dict):
            raise ConfigurationError(get_configuration_error_message(path, f"'{TOML_SECTION}' must be a table"))
        return cls.from_dict(section)

    def with_environment(self, environ: Mapping[str, str]) -> "RuntimePinConfig":
        """
        Returns a copy with values taken from environment variables applied on top.
        """
        ca_bundle = environ.get(RuntimePinSettings.CA_BUNDLE_ENV_VAR)
        if ca_bundle:
            return replace(self, trust_anchor=pathlib.Path(ca_bundle))
        return self


def get_configuration_error_message(path: str, reason: str) -> str:
    """
    Get an informative error message for a configuration file that could not be used.

    Returns:
        Formatted error message with schema instructions.
    """
    return (
        f"Invalid configuration in {path}: {reason}\n\n"
        "The file must follow this schema:\n"
        f"{RUNTIMEPIN_TOML_SCHEMA}"
    )


def load_config(environ: Mapping[str, str]) -> RuntimePinConfig:
    """
    Loads the configuration named by RUNTIMEPIN_CONFIG, else the system-wide file if it exists,
    else the defaults. Environment overrides are applied last.
    """
    path = environ.get(RuntimePinSettings.CONFIG_ENV_VAR)
    if path:
        config = RuntimePinConfig.from_toml(path)
    elif os.path.exists(RuntimePinSettings.SYSTEM_CONFIG_PATH):
        config = RuntimePinConfig.from_toml(RuntimePinSettings.SYSTEM_CONFIG_PATH)
    else:
        config = RuntimePinConfig()
    return config.with_environment(environ)


def _as_path(value: Any) -> pathlib.Path:
    return pathlib.Path(os.path.expanduser(str(value)))
