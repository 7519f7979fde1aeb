"""Configuration management for bumpwatch."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from bumpwatch.errors import ConfigurationError

CONFIG_FILE_NAMES = (".bumpwatch.yml", ".bumpwatch.yaml")


class ScannerConfig(BaseModel):
    """Configuration for reading package.json."""

    include_dev: bool = Field(
        default=True,
        description="Check devDependencies as well as dependencies",
    )
    exclude_prefixes: list[str] = Field(
        default_factory=lambda: ["http", "@types"],
        description="Package name prefixes to skip",
    )


class RegistryConfig(BaseModel):
    """Configuration for npm registry queries."""

    npm_command: str = Field(
        default="npm",
        description="npm executable (prefer BUMPWATCH_NPM_COMMAND env var)",
    )
    timeout: float = Field(
        default=60.0,
        gt=0,
        description="Seconds to wait for one npm view call",
    )


class ProbeConfig(BaseModel):
    """Configuration for changelog URL probing."""

    forge: str = Field(
        default="github",
        description="Forge hosting the repositories that are probed",
    )
    default_branch: str = Field(
        default="master",
        description="Branch used for CHANGELOG.md and HISTORY.md candidates",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds",
    )
    retries: int = Field(
        default=0,
        ge=0,
        description="Retries for connection errors (never for HTTP statuses)",
    )
    github_token: str | None = Field(
        default=None,
        description="GitHub token sent with probes (prefer GITHUB_TOKEN env var)",
    )

    @field_validator("forge")
    @classmethod
    def validate_forge(cls, v: str) -> str:
        """Validate forge value."""
        allowed = {"github"}
        if v.lower() not in allowed:
            raise ValueError(f"forge must be one of: {allowed}")
        return v.lower()


class BumpwatchConfig(BaseModel):
    """Complete bumpwatch configuration."""

    version: int = Field(default=1, description="Configuration file version")
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find the nearest .bumpwatch.yml configuration file.

    Searches from start_path up to the root directory.

    Args:
        start_path: Starting directory for search (defaults to cwd).

    Returns:
        Path to config file if found, None otherwise.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while True:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.exists():
                return config_path
        if current == current.parent:
            return None
        current = current.parent


def _section(config_data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return a mutable config section, creating it if missing."""
    section = config_data.get(name)
    if section is None:
        section = config_data[name] = {}
    elif not isinstance(section, dict):
        raise ConfigurationError(f"Invalid configuration: '{name}' must be a mapping")
    return section


def load_config(config_path: Path | None = None) -> BumpwatchConfig:
    """Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file
    3. Defaults

    Args:
        config_path: Path to config file (searches if not provided).

    Returns:
        Loaded configuration.

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation.
    """
    config_data: dict[str, Any] = {}

    if config_path is None:
        config_path = find_config_file()

    if config_path and config_path.exists():
        try:
            with open(config_path) as f:
                file_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"YAML parse error in {config_path}: {e}") from e
        if file_data:
            if not isinstance(file_data, dict):
                raise ConfigurationError(f"{config_path} must contain a mapping")
            # An empty "probe:" loads as None; fall back to the section defaults.
            config_data = {k: v for k, v in file_data.items() if v is not None}

    github_token = os.environ.get("GITHUB_TOKEN")
    if github_token:
        _section(config_data, "probe")["github_token"] = github_token

    npm_command = os.environ.get("BUMPWATCH_NPM_COMMAND")
    if npm_command:
        _section(config_data, "registry")["npm_command"] = npm_command

    try:
        return BumpwatchConfig(**config_data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            hint="Run 'bumpwatch config init --force' to regenerate a default file.",
        ) from e


def generate_example_config() -> str:
    """Generate an example configuration file.

    Returns:
        YAML string of example configuration.
    """
    example = """# bumpwatch configuration

version: 1

# package.json scanning
scanner:
  # Check devDependencies as well as dependencies
  include_dev: true
  # Package name prefixes to skip
  exclude_prefixes:
    - http
    - "@types"

# npm registry queries (executable can also come from BUMPWATCH_NPM_COMMAND)
registry:
  npm_command: npm
  timeout: 60

# Changelog URL probing (token via GITHUB_TOKEN env var)
probe:
  forge: github
  default_branch: master
  timeout: 30
  retries: 0
"""
    return example
