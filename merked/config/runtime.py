"""
Runtime Configuration

Central configuration for DAG construction and the command line tool.

Sources, later ones winning:
1. Built-in defaults
2. A YAML or JSON config file (explicit path, or the first of
   ./merked.yaml, ./merked.yml, ./merked.json, ~/.config/merked/config.yaml)
3. Environment variables (a .env file is loaded on import)
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from merked.crypto.hashing import DEFAULT_HASH_ALGORITHM, get_hash_func
from merked.schemas.errors import InvalidConfigurationException
from merked.split.splitter import parse_size

load_dotenv()

logger = logging.getLogger(__name__)


ENV_PREFIX = "MERKED_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG_PATHS = (
    Path("merked.yaml"),
    Path("merked.yml"),
    Path("merked.json"),
    Path.home() / ".config" / "merked" / "config.yaml",
)


def _parse_bool(value: Any, option: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", "off", ""):
        return False
    raise InvalidConfigurationException(f"Invalid boolean for {option}: {value!r}", option=option)


@dataclass
class DagConfig:
    """Configuration for DAG construction."""
    slice_size: int | str = "4M"
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    random_fill: bool = False

    def validate(self) -> None:
        """
        Raises:
            InvalidConfigurationException: On a bad size or unknown hash name
        """
        parse_size(self.slice_size, "slice_size")
        get_hash_func(self.hash_algorithm)
        if not isinstance(self.random_fill, bool):
            raise InvalidConfigurationException(
                f"Invalid boolean for random_fill: {self.random_fill!r}", option="random_fill"
            )


@dataclass
class CLIConfig:
    """Configuration for the merk command line tool."""
    slice_size: int | str = 512
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def validate(self) -> None:
        parse_size(self.slice_size, "cli.slice_size")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise InvalidConfigurationException(
                f"Invalid log level: {self.log_level!r}", option="log_level"
            )
        if self.log_file is not None and not isinstance(self.log_file, str):
            raise InvalidConfigurationException(
                f"Invalid log file: {self.log_file!r}", option="log_file"
            )


def _build_section(cls: type, data: Any, section: str) -> Any:
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise InvalidConfigurationException(
            f"Config section '{section}' must be a mapping", option=section
        )
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise InvalidConfigurationException(
            f"Unknown keys in config section '{section}': {unknown}", option=section
        )
    return cls(**data)


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML or JSON file
    - Programmatic construction
    """
    dag: DagConfig = field(default_factory=DagConfig)
    cli: CLIConfig = field(default_factory=CLIConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - MERKED_SLICE_SIZE: Library shard size (e.g. 4M, 65536)
        - MERKED_HASH_ALGORITHM: Hasher name (sha256, blake2b-256, ...)
        - MERKED_RANDOM_FILL: Pad shards with random bytes (true/false)
        - MERKED_CLI_SLICE_SIZE: Default shard size of the merk tool
        - MERKED_LOG_LEVEL: Log level for the merk tool
        - MERKED_LOG_FILE: Optional log file for the merk tool
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}SLICE_SIZE"):
            overrides.setdefault("dag", {})["slice_size"] = os.getenv(f"{ENV_PREFIX}SLICE_SIZE")
        if os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM"):
            overrides.setdefault("dag", {})["hash_algorithm"] = os.getenv(f"{ENV_PREFIX}HASH_ALGORITHM")
        if os.getenv(f"{ENV_PREFIX}RANDOM_FILL"):
            overrides.setdefault("dag", {})["random_fill"] = _parse_bool(
                os.getenv(f"{ENV_PREFIX}RANDOM_FILL"), "random_fill"
            )

        if os.getenv(f"{ENV_PREFIX}CLI_SLICE_SIZE"):
            overrides.setdefault("cli", {})["slice_size"] = os.getenv(f"{ENV_PREFIX}CLI_SLICE_SIZE")
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("cli", {})["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("cli", {})["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise InvalidConfigurationException(
                    f"Invalid YAML in config file {path}: {e}"
                ) from e

        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load from a .json file, or YAML for any other extension."""
        path = Path(path)
        if path.suffix.lower() == ".json":
            return cls.from_json(path)
        return cls.from_yaml(path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """
        Load configuration from a dictionary (supports partial data).

        Raises:
            InvalidConfigurationException: On unknown keys or invalid values
        """
        if not isinstance(data, dict):
            raise InvalidConfigurationException("Configuration must be a mapping")

        dag = _build_section(DagConfig, data.get("dag"), "dag")
        cli = _build_section(CLIConfig, data.get("cli"), "cli")
        if not isinstance(dag.random_fill, bool):
            dag.random_fill = _parse_bool(dag.random_fill, "random_fill")

        dag.validate()
        cli.validate()

        return cls(dag=dag, cli=cli, extra=data.get("extra", {}) or {})

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for key, value in overrides.get("dag", {}).items():
            setattr(new_config.dag, key, value)
        for key, value in overrides.get("cli", {}).items():
            setattr(new_config.cli, key, value)

        new_config.dag.validate()
        new_config.cli.validate()
        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "dag": {
                "slice_size": self.dag.slice_size,
                "hash_algorithm": self.dag.hash_algorithm,
                "random_fill": self.dag.random_fill,
            },
            "cli": {
                "slice_size": self.cli.slice_size,
                "log_level": self.cli.log_level,
                "log_file": self.cli.log_file,
            },
            "extra": self.extra,
        }


def load_config(config_path: str | Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings. Without an explicit
    path, the first existing default location is used.

    Raises:
        FileNotFoundError: If an explicit config path does not exist
        InvalidConfigurationException: If the configuration is invalid
    """
    config = RuntimeConfig()

    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
    else:
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                logger.debug("Loading config from %s", default_path)
                config = RuntimeConfig.from_file(default_path)
                break

    return config.with_env_overrides()


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config


__all__ = [
    "ENV_PREFIX",
    "DagConfig",
    "CLIConfig",
    "RuntimeConfig",
    "load_config",
    "get_default_config",
]
