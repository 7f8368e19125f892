"""Configuration management for Strong Events."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from strong_events.core.exceptions import ConfigurationError

ENV_PREFIX = "STRONG_EVENTS_"


class EmitterConfig(BaseSettings):
    """
    Configuration for EventEmitter.

    Can be loaded from:
    - Environment variables (prefix: STRONG_EVENTS_)
    - YAML file
    - Direct initialization

    Example:
        >>> config = EmitterConfig(validate_payloads=False)
        >>> config = EmitterConfig.from_yaml("events.yaml")
        >>> config = EmitterConfig()
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True,
    )

    validate_payloads: bool = Field(
        default=True,
        description="Check payloads against the kind's declared payload type before dispatch",
    )
    log_listener_errors: bool = Field(
        default=True,
        description="Log listener failures through the default error sink",
    )
    trace_enabled: bool = Field(
        default=False,
        description="Record emission trace points (True=tests/debug, False=production)",
    )
    max_trace_points: int = Field(
        default=10000,
        ge=0,
        description="Max trace points to keep in memory (0=unlimited)",
    )

    @classmethod
    def from_yaml(cls, path: Path | str) -> EmitterConfig:
        """
        Load configuration from a YAML file.

        Environment variables still take precedence over keys in the file.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationError: If the file is not a YAML mapping
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        if not isinstance(yaml_data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")

        result_data = {}
        for key, value in yaml_data.items():
            if f"{ENV_PREFIX}{key.upper()}" in os.environ:
                continue
            result_data[key] = value

        return cls(**result_data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(
                self.model_dump(mode="json"),
                f,
                default_flow_style=False,
                sort_keys=False,
            )

    def __repr__(self) -> str:
        return (
            f"EmitterConfig(validate_payloads={self.validate_payloads}, "
            f"trace_enabled={self.trace_enabled})"
        )
