"""Abstract base class for cache service providers.

Defines the contract for the key-value caches that sit in front of every
upstream API call (Knowledge Graph searches, Wikipedia searches and page
extracts).  Each provider instance is handed its own cache at construction,
so the expiry policy is chosen per cache rather than shared globally.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Contract for key-value cache services.

    All operations are async to allow for network-backed stores (e.g. Redis)
    without blocking the event loop.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve the value stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        Any or None
            The cached value if present and not expired; ``None`` otherwise.
            An expired entry is removed as a side effect of the lookup.
        """

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* using the cache's expiry policy.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The value to store.  ``None`` is not a storable value since
            :meth:`get` uses it to signal a miss.
        """

    @abstractmethod
    def size(self) -> int:
        """Return the number of entries currently held (expired ones may count)."""
