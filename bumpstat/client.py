"""Lightweight interface for collecting statistics.

This module provides no backend. It defines the shared ``Client`` contract,
the timer handle returned by ``Client.bump_time``, and helpers that accept an
optional client so components can hold ``Optional[Client]`` without guarding
every call site.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Ender(Protocol):
    """Handle for an in-flight timer. Call ``end()`` once to finish it."""

    def end(self) -> None:
        ...


@runtime_checkable
class Client(Protocol):
    """Methods to collect statistics.

    Every method is fire-and-forget: implementations must not let backend
    failures propagate to the caller.
    """

    def bump_avg(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        """Bump the average for the given key."""
        ...

    def bump_sum(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        """Bump the sum for the given key."""
        ...

    def bump_histogram(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        """Bump the histogram for the given key."""
        ...

    def bump_time(self, key: str, tags: Sequence[str] = ()) -> Ender:
        """Start a timer for the given key.

        The returned handle's ``end()`` finishes the timer. The elapsed time
        is recorded by the backend as a histogram observation. See ``timed``
        for the context manager form.
        """
        ...


class NoOpEnd:
    """Ender that does nothing."""

    __slots__ = ()

    def end(self) -> None:
        pass

    def __repr__(self) -> str:
        return "NO_OP_END"


# Shared inert handle, a valid return value for bump_time() in tests and
# when no client is configured.
NO_OP_END = NoOpEnd()


def bump_avg(client: Optional[Client], key: str, value: float, tags: Sequence[str] = ()) -> None:
    """Call ``bump_avg`` on the client if it isn't None."""
    if client is not None:
        client.bump_avg(key, value, tags)


def bump_sum(client: Optional[Client], key: str, value: float, tags: Sequence[str] = ()) -> None:
    """Call ``bump_sum`` on the client if it isn't None."""
    if client is not None:
        client.bump_sum(key, value, tags)


def bump_histogram(client: Optional[Client], key: str, value: float, tags: Sequence[str] = ()) -> None:
    """Call ``bump_histogram`` on the client if it isn't None."""
    if client is not None:
        client.bump_histogram(key, value, tags)


def bump_time(client: Optional[Client], key: str, tags: Sequence[str] = ()) -> Ender:
    """Call ``bump_time`` on the client if it isn't None.

    Without a client this still returns a valid handle, ``NO_OP_END``.
    """
    if client is not None:
        return client.bump_time(key, tags)
    return NO_OP_END


@contextmanager
def timed(client: Optional[Client], key: str, tags: Sequence[str] = ()) -> Iterator[Ender]:
    """Time the body of a ``with`` block under ``key``.

    Example:
        >>> with timed(client, "db.query", ["table:users"]):
        ...     run_query()
    """
    ender = bump_time(client, key, tags)
    try:
        yield ender
    finally:
        ender.end()
