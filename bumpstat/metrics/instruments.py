"""Factory for the OpenTelemetry instruments backing each bump kind."""

from __future__ import annotations

import re
from typing import Any, Dict, Sequence

from opentelemetry.metrics import Histogram, Meter, UpDownCounter

AVG = "avg"
SUM = "sum"
HISTOGRAM = "histogram"
TIME = "time"

# Appended to the key so each kind exports under its own metric name
KIND_SUFFIXES = {
    AVG: ".avg",
    SUM: ".sum",
    HISTOGRAM: ".hist",
    TIME: ".time",
}

# OTEL instrument names: a letter, then up to 254 of [-_./a-zA-Z0-9]
MAX_NAME_LENGTH = 255
_INVALID_NAME_CHARS = re.compile(r"[^-_./a-zA-Z0-9]")


def instrument_name(kind: str, key: str) -> str:
    """
    Return the OTEL instrument name for a bump of ``kind`` on ``key``.

    Characters OTEL does not accept become ``_``, a key not starting with a
    letter gets an ``m_`` prefix, and the result is cut to fit the kind
    suffix within 255 characters.
    """
    try:
        suffix = KIND_SUFFIXES[kind]
    except KeyError:
        raise ValueError(f"Unknown instrument kind: {kind!r}") from None
    name = _INVALID_NAME_CHARS.sub("_", key)
    if not name[:1].isalpha():
        name = "m_" + name
    return name[:MAX_NAME_LENGTH - len(suffix)] + suffix


class StandardInstruments:
    """Creates the instrument used for each kind of bump."""

    @staticmethod
    def create_avg_histogram(meter: Meter, name: str) -> Histogram:
        """Averages are read back from the histogram's sum and count."""
        return meter.create_histogram(
            name=name,
            unit="1",
            description=f"Average of {name}",
        )

    @staticmethod
    def create_sum_counter(meter: Meter, name: str) -> UpDownCounter:
        """Sums may go down, so an up/down counter is used."""
        return meter.create_up_down_counter(
            name=name,
            unit="1",
            description=f"Sum of {name}",
        )

    @staticmethod
    def create_histogram(meter: Meter, name: str) -> Histogram:
        return meter.create_histogram(
            name=name,
            unit="1",
            description=f"Distribution of {name}",
        )

    @staticmethod
    def create_timer_histogram(meter: Meter, name: str) -> Histogram:
        return meter.create_histogram(
            name=name,
            unit="s",
            description=f"Duration of {name}",
        )

    @staticmethod
    def create(meter: Meter, kind: str, name: str) -> Any:
        """Create the instrument for ``kind`` (one of AVG, SUM, HISTOGRAM, TIME)."""
        factories = {
            AVG: StandardInstruments.create_avg_histogram,
            SUM: StandardInstruments.create_sum_counter,
            HISTOGRAM: StandardInstruments.create_histogram,
            TIME: StandardInstruments.create_timer_histogram,
        }
        try:
            factory = factories[kind]
        except KeyError:
            raise ValueError(f"Unknown instrument kind: {kind!r}") from None
        return factory(meter, name)


def tags_to_attributes(tags: Sequence[str]) -> Dict[str, str]:
    """
    Convert ``name:value`` tags into OTEL attributes.

    A tag without ``:`` becomes ``{tag: "true"}``. When a name repeats the
    later tag wins.
    """
    attributes: Dict[str, str] = {}
    for tag in tags:
        name, sep, value = tag.partition(":")
        attributes[name] = value if sep else "true"
    return attributes
