"""Client decorator that records every value under several key prefixes."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence, Tuple

from bumpstat.client import Client, Ender

logger = logging.getLogger(__name__)


class MultiEnder:
    """Combines many enders together.

    ``end()`` ends every wrapped handle once, in order. A handle that raises
    is logged and skipped over; the rest are still ended.
    """

    __slots__ = ("enders",)

    def __init__(self, enders: Iterable[Ender] = ()) -> None:
        self.enders: Tuple[Ender, ...] = tuple(enders)

    def end(self) -> None:
        for ender in self.enders:
            try:
                ender.end()
            except Exception:
                logger.warning("Failed to end timer %r", ender, exc_info=True)

    def __len__(self) -> int:
        return len(self.enders)


class PrefixClient:
    """Adds multiple keys for the same value, one per prefix.

    Each call is replayed against the wrapped client once per prefix, in
    list order, with ``prefix + key`` as the key. Values and tags are passed
    through unchanged.
    """

    def __init__(self, prefixes: Iterable[str], client: Client) -> None:
        self.prefixes: Tuple[str, ...] = tuple(prefixes)
        self.client = client

    def bump_avg(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        for prefix in self.prefixes:
            self.client.bump_avg(prefix + key, value, tags)

    def bump_sum(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        for prefix in self.prefixes:
            self.client.bump_sum(prefix + key, value, tags)

    def bump_histogram(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        for prefix in self.prefixes:
            self.client.bump_histogram(prefix + key, value, tags)

    def bump_time(self, key: str, tags: Sequence[str] = ()) -> MultiEnder:
        return MultiEnder(
            self.client.bump_time(prefix + key, tags) for prefix in self.prefixes
        )

    def __repr__(self) -> str:
        return f"PrefixClient(prefixes={list(self.prefixes)!r}, client={self.client!r})"


def prefix_client(prefixes: Iterable[str], client: Client) -> PrefixClient:
    """Wrap ``client`` so each value is recorded once per prefix."""
    return PrefixClient(prefixes, client)
