"""Configuration management with Pydantic models and validation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli
from pydantic import BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from bumpstat.errors import ConfigError, ValidationError


# Environment variable mapping
ENV_VAR_MAPPING = {
    # Stats
    "enabled": ["BUMPSTAT_ENABLED"],
    "prefixes": ["BUMPSTAT_PREFIXES"],
    "sample_rate": ["BUMPSTAT_SAMPLE_RATE"],
    "meter_name": ["BUMPSTAT_METER_NAME"],

    # Logging
    "debug": ["BUMPSTAT_DEBUG"],
}

CONFIG_FILE_NAME = "bumpstat.toml"

_TRUE_VALUES = ("true", "1", "yes")


class StatsConfig(BaseModel):
    """Stats configuration section."""

    enabled: bool = Field(
        default=True,
        description="Enable stats collection (False makes init() return no client)"
    )
    prefixes: List[str] = Field(
        default_factory=list,
        description="Key prefixes; each bump is recorded once per prefix"
    )
    sample_rate: float = Field(
        default=1.0,
        ge=0.0,
        le=1.0,
        description="Sampling rate (0.0 to 1.0)"
    )
    meter_name: str = Field(
        default="bumpstat",
        min_length=1,
        description="OpenTelemetry meter name used by the default client"
    )

    @model_validator(mode='after')
    def check_unique_prefixes(self) -> 'StatsConfig':
        """Reject duplicate prefixes, which would record the same key twice."""
        seen = set()
        duplicates = []
        for prefix in self.prefixes:
            if prefix in seen and prefix not in duplicates:
                duplicates.append(prefix)
            seen.add(prefix)
        if duplicates:
            raise ValidationError(
                "Prefixes must be unique.",
                details={"duplicates": duplicates}
            )
        return self


class LoggingConfig(BaseModel):
    """Logging configuration section."""

    debug: bool = Field(
        default=False,
        description="Enable debug logging for the bumpstat logger"
    )


class BumpstatConfig(BaseModel):
    """
    Complete bumpstat configuration.

    Merged from, in increasing priority:
    1. Config file (bumpstat.toml)
    2. Environment variables
    3. Explicit parameters
    """

    stats: StatsConfig = Field(default_factory=StatsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def find_config_file() -> Optional[str]:
    """
    Find bumpstat.toml in standard locations.

    Lookup order:
    1. ./bumpstat.toml (current directory)
    2. ~/.bumpstat/config.toml (user home)
    """
    cwd_config = Path.cwd() / CONFIG_FILE_NAME
    if cwd_config.exists():
        return str(cwd_config)

    home_config = Path.home() / ".bumpstat" / "config.toml"
    if home_config.exists():
        return str(home_config)

    return None


def load_toml_config(path: str) -> Dict[str, Any]:
    """
    Load configuration from a TOML file.

    Returns:
        Nested config dictionary, empty if the file does not exist
    """
    if not os.path.exists(path):
        return {}

    try:
        with open(path, "rb") as f:
            return tomli.load(f)
    except (OSError, tomli.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load config file: {e}", details={"path": path}) from e


def get_env_value(config_key: str) -> Optional[str]:
    """Get the first set environment variable for a config key."""
    for env_var in ENV_VAR_MAPPING.get(config_key, []):
        value = os.getenv(env_var)
        if value is not None:
            return value
    return None


def load_config_from_env() -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Returns:
        Nested dictionary holding only the sections that were set
    """
    env_config: Dict[str, Dict[str, Any]] = {
        "stats": {},
        "logging": {},
    }

    value = get_env_value("enabled")
    if value is not None:
        env_config["stats"]["enabled"] = value.lower() in _TRUE_VALUES

    value = get_env_value("prefixes")
    if value is not None:
        env_config["stats"]["prefixes"] = [p.strip() for p in value.split(",") if p.strip()]

    value = get_env_value("sample_rate")
    if value is not None:
        try:
            env_config["stats"]["sample_rate"] = float(value)
        except ValueError:
            raise ConfigError(f"Invalid sample_rate value: {value}. Must be a float between 0.0 and 1.0.")

    value = get_env_value("meter_name")
    if value is not None:
        env_config["stats"]["meter_name"] = value

    value = get_env_value("debug")
    if value is not None:
        env_config["logging"]["debug"] = value.lower() in _TRUE_VALUES

    return {k: v for k, v in env_config.items() if v}


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dictionaries; ``override`` wins."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def load_config(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> BumpstatConfig:
    """
    Load and validate configuration from all sources.

    Priority (highest to lowest):
    1. Explicit overrides
    2. Environment variables
    3. Config file (explicit path, else ./bumpstat.toml or ~/.bumpstat/config.toml)
    4. Defaults

    Raises:
        ConfigError: If configuration is unreadable or invalid
    """
    merged_config: Dict[str, Any] = {}

    path = config_file or find_config_file()
    if path:
        merged_config = merge_configs(merged_config, load_toml_config(path))

    merged_config = merge_configs(merged_config, load_config_from_env())

    if overrides:
        merged_config = merge_configs(merged_config, overrides)

    try:
        return BumpstatConfig(**merged_config)
    except ConfigError:
        raise
    except PydanticValidationError as e:
        raise ConfigError(
            f"Configuration validation failed: {e}",
            details={"errors": e.errors(include_url=False)}
        ) from e
    except Exception as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e


def validate_config(
    config_file: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> tuple[bool, str, Optional[BumpstatConfig]]:
    """
    Validate configuration without installing a client.

    Returns:
        Tuple of (is_valid, message, config_or_none)
    """
    try:
        config = load_config(config_file=config_file, overrides=overrides)
        return True, "Configuration is valid", config
    except ConfigError as e:
        return False, f"Configuration error: {e}", None
