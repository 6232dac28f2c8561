"""Global client shared by components that don't carry their own."""

from typing import Optional

from bumpstat.client import Client

# Global client instance (installed by bumpstat.auto.init)
_global_client: Optional[Client] = None


def set_global_client(client: Optional[Client]) -> None:
    """Set the global client. Pass None to disable global stats."""
    global _global_client
    _global_client = client


def get_client() -> Optional[Client]:
    """Get the global client.

    Returns:
        The installed client, or None if stats are not enabled. Either value
        can be passed straight to the ``bumpstat.bump_*`` helpers.

    Example:
        >>> from bumpstat import bump_sum, get_client
        >>> bump_sum(get_client(), "jobs.processed", 1.0, ["queue:default"])
    """
    return _global_client
