"""Lightweight interface for collecting statistics."""

from bumpstat.client import (
    NO_OP_END,
    Client,
    Ender,
    NoOpEnd,
    bump_avg,
    bump_histogram,
    bump_sum,
    bump_time,
    timed,
)
from bumpstat.prefix import MultiEnder, PrefixClient, prefix_client
from bumpstat.hook import HookClient
from bumpstat.errors import BumpstatError, ConfigError, ValidationError
from bumpstat.metrics import OTelClient, get_client, set_global_client
from bumpstat.auto import init, shutdown

# Version exposure
from importlib.metadata import version, PackageNotFoundError
try:
    __version__ = version("bumpstat")
except PackageNotFoundError:
    __version__ = "0.1.0"


__all__ = [
    "__version__",
    "Client",
    "Ender",
    "NoOpEnd",
    "NO_OP_END",
    "bump_avg",
    "bump_sum",
    "bump_histogram",
    "bump_time",
    "timed",
    "PrefixClient",
    "MultiEnder",
    "prefix_client",
    "HookClient",
    "OTelClient",
    "get_client",
    "set_global_client",
    "init",
    "shutdown",
    "BumpstatError",
    "ConfigError",
    "ValidationError",
]
