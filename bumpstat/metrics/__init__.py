"""OpenTelemetry-backed stats client and the global client registry."""

from __future__ import annotations

from .instruments import StandardInstruments, instrument_name, tags_to_attributes
from .otel_client import OTelClient, OTelTimer
from .recorder import get_client, set_global_client

__all__ = [
    "StandardInstruments",
    "instrument_name",
    "tags_to_attributes",
    "OTelClient",
    "OTelTimer",
    "get_client",
    "set_global_client",
]
