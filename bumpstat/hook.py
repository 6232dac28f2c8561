"""Hook-based client for tests."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from bumpstat.client import NO_OP_END, Ender

BumpHook = Callable[[str, float, Sequence[str]], None]
TimeHook = Callable[[str, Sequence[str]], Ender]


class HookClient:
    """
    Client with an optional hook per method.

    A hook that is set is called with the exact arguments of the call. A hook
    left as None turns the method into a no-op (``bump_time`` then returns
    ``NO_OP_END``). Tests can assert on just the calls they care about.

    Usage:
        seen = []
        client = HookClient(bump_sum_hook=lambda k, v, t: seen.append((k, v, t)))
    """

    def __init__(
        self,
        bump_avg_hook: Optional[BumpHook] = None,
        bump_sum_hook: Optional[BumpHook] = None,
        bump_histogram_hook: Optional[BumpHook] = None,
        bump_time_hook: Optional[TimeHook] = None,
    ) -> None:
        self.bump_avg_hook = bump_avg_hook
        self.bump_sum_hook = bump_sum_hook
        self.bump_histogram_hook = bump_histogram_hook
        self.bump_time_hook = bump_time_hook

    def bump_avg(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        """Call ``bump_avg_hook`` if defined."""
        if self.bump_avg_hook is not None:
            self.bump_avg_hook(key, value, tags)

    def bump_sum(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        """Call ``bump_sum_hook`` if defined."""
        if self.bump_sum_hook is not None:
            self.bump_sum_hook(key, value, tags)

    def bump_histogram(self, key: str, value: float, tags: Sequence[str] = ()) -> None:
        """Call ``bump_histogram_hook`` if defined."""
        if self.bump_histogram_hook is not None:
            self.bump_histogram_hook(key, value, tags)

    def bump_time(self, key: str, tags: Sequence[str] = ()) -> Ender:
        """Call ``bump_time_hook`` if defined, else return ``NO_OP_END``."""
        if self.bump_time_hook is not None:
            return self.bump_time_hook(key, tags)
        return NO_OP_END
