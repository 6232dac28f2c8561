"""Client backed by the OpenTelemetry metrics API.

Transport and aggregation belong to whatever ``MeterProvider`` the
application installs; this module only maps bumps onto instruments.
"""

from __future__ import annotations

import logging
import random
import threading
import time
from typing import Any, Dict, Optional, Sequence

from opentelemetry import metrics
from opentelemetry.metrics import Histogram, Meter

from bumpstat.client import NO_OP_END, Ender
from bumpstat.metrics.instruments import (
    AVG,
    HISTOGRAM,
    SUM,
    TIME,
    StandardInstruments,
    instrument_name,
    tags_to_attributes,
)

logger = logging.getLogger(__name__)

DEFAULT_METER_NAME = "bumpstat"

# Cached in place of an instrument whose creation failed
_FAILED = object()


class OTelTimer:
    """Timer handle that records elapsed seconds on its first ``end()``."""

    def __init__(self, histogram: Histogram, attributes: Dict[str, str]) -> None:
        self._histogram = histogram
        self._attributes = attributes
        self._start = time.perf_counter()
        self._ended = False

    def end(self) -> None:
        if self._ended:
            return
        self._ended = True
        elapsed = time.perf_counter() - self._start
        try:
            self._histogram.record(elapsed, attributes=self._attributes)
        except Exception:
            logger.warning("Failed to record timer duration", exc_info=True)


class OTelClient:
    """Records bumps as OTEL metrics on a single meter."""

    def __init__(
        self,
        meter: Optional[Meter] = None,
        sample_rate: float = 1.0,
        meter_name: str = DEFAULT_METER_NAME,
    ):
        """Initialize the client.

        Args:
            meter: Meter to create instruments on (default: global meter ``meter_name``)
            sample_rate: Fraction of bumps to record (0.0 to 1.0)
            meter_name: Name passed to ``metrics.get_meter`` when no meter is given
        """
        if not 0.0 <= sample_rate <= 1.0:
            raise ValueError(f"sample_rate must be between 0.0 and 1.0, got {sample_rate}")
        self.meter = meter if meter is not None else metrics.get_meter(meter_name)
        self.sample_rate = sample_rate
        self._instruments: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def should_record(self) -> bool:
        """Determine if this bump should be recorded based on sample rate."""
        if self.sample_rate >= 1.0:
            return True
        return random.random() < self.sample_rate

    def _instrument(self, kind: str, key: str) -> Any:
        """Return the cached instrument for ``kind``/``key``, or None if it can't be created.

        A name whose creation failed is remembered, so the failure is logged once.
        """
        name = instrument_name(kind, key)
        with self._lock:
            instrument = self._instruments.get(name)
            if instrument is None:
                try:
                    instrument = StandardInstruments.create(self.meter, kind, name)
                except Exception:
                    logger.warning(
                        "Failed to create %s instrument %r for key %r; dropping its bumps",
                        kind, name, key, exc_info=True,
                    )
                    instrument = _FAILED
                self._instruments[name] = instrument
        return None if instrument is _FAILED else instrument

    def _record(self, kind: str, key: str, value: float, tags: Sequence[str]) -> None:
        if not self.should_record():
            return
        instrument = self._instrument(kind, key)
        if instrument is None:
            return
        try:
            attributes = tags_to_attributes(tags)
            if kind == SUM:
                instrument.add(value, attributes=attributes)
            else:
                instrument.record(value, attributes=attributes)
        except Exception:
            logger.warning("Failed to record %s for %r", kind, key, exc_info=True)

    def bump_avg(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        self._record(AVG, key, value, tags)

    def bump_sum(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        self._record(SUM, key, value, tags)

    def bump_histogram(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        self._record(HISTOGRAM, key, value, tags)

    def bump_time(self, key: str, tags: Sequence[str] = ()) -> Ender:
        if not self.should_record():
            return NO_OP_END
        histogram = self._instrument(TIME, key)
        if histogram is None:
            return NO_OP_END
        return OTelTimer(histogram, tags_to_attributes(tags))
