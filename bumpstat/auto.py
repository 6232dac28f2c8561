"""Initialization of the global stats client from configuration."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from opentelemetry.metrics import Meter

from bumpstat import config as sdk_config
from bumpstat.client import Client
from bumpstat.metrics.otel_client import OTelClient
from bumpstat.metrics.recorder import get_client, set_global_client
from bumpstat.prefix import PrefixClient

logger = logging.getLogger(__name__)

# Flat init() keyword -> (section, key) in the nested config
_FLAT_TO_NESTED = {
    "enabled": ("stats", "enabled"),
    "prefixes": ("stats", "prefixes"),
    "sample_rate": ("stats", "sample_rate"),
    "meter_name": ("stats", "meter_name"),
    "debug": ("logging", "debug"),
}


def _nest_overrides(overrides: Dict[str, Any]) -> Dict[str, Any]:
    nested: Dict[str, Dict[str, Any]] = {}
    for flat_key, value in overrides.items():
        if value is None:
            continue
        if flat_key not in _FLAT_TO_NESTED:
            raise TypeError(f"init() got an unexpected keyword argument '{flat_key}'")
        section, key = _FLAT_TO_NESTED[flat_key]
        nested.setdefault(section, {})[key] = value
    return nested


def build_client(config: sdk_config.BumpstatConfig, meter: Optional[Meter] = None) -> Optional[Client]:
    """Build the client described by ``config`` without installing it."""
    stats = config.stats
    if not stats.enabled:
        return None

    client: Client = OTelClient(
        meter=meter,
        sample_rate=stats.sample_rate,
        meter_name=stats.meter_name,
    )
    if stats.prefixes:
        client = PrefixClient(stats.prefixes, client)
    return client


def init(
    config_file: Optional[str] = None,
    meter: Optional[Meter] = None,
    **overrides: Any,
) -> Optional[Client]:
    """
    Configure stats and install the global client.

    Configuration priority:
    1. Explicit keyword overrides (enabled, prefixes, sample_rate, meter_name, debug)
    2. Environment variables (BUMPSTAT_*)
    3. Config file (bumpstat.toml)

    Args:
        config_file: Optional explicit path to config file
        meter: Optional OTEL meter; defaults to the global meter provider's
        **overrides: Flat config keys

    Returns:
        The installed client, or None when stats are disabled

    Raises:
        ConfigError: If configuration is invalid

    Example:
        >>> import bumpstat
        >>> client = bumpstat.init(prefixes=["svc.", "env.prod."])
        >>> bumpstat.bump_sum(client, "requests", 1.0)
    """
    config = sdk_config.load_config(
        config_file=config_file,
        overrides=_nest_overrides(overrides),
    )

    if config.logging.debug:
        logging.getLogger("bumpstat").setLevel(logging.DEBUG)

    if get_client() is not None:
        logger.debug("Replacing previously installed stats client")

    client = build_client(config, meter=meter)
    set_global_client(client)
    if client is None:
        logger.debug("Stats disabled; no client installed")
    else:
        logger.debug("Installed stats client %r", client)
    return client


def shutdown() -> None:
    """Remove the global client. Helpers then fall back to no-ops."""
    set_global_client(None)
