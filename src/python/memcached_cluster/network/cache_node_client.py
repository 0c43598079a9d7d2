"""Client for a single memcached node.

Wraps a :mod:`pymemcache` base client with the three operations the
cluster view needs: key enumeration (``stats items`` followed by
``stats cachedump`` per slab), ``get`` and ``delete``.  A miss is
reported as ``None`` / ``False``; every network or protocol failure is
translated into :class:`CacheTransportError`.
"""

from __future__ import annotations

import logging
from typing import Any

from pymemcache.client.base import Client
from pymemcache.exceptions import MemcacheError

from ..exceptions import CacheTransportError, NodeDiscoveryError
from ..models import NodeAddress, SlabStats

logger = logging.getLogger(__name__)

# Default settings
_DEFAULT_CONNECT_TIMEOUT = 2.0
_DEFAULT_TIMEOUT = 5.0
# ``stats cachedump <slab> 0`` asks memcached for every item in the slab
_CACHEDUMP_ALL_ITEMS = "0"


def _as_text(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class CacheNodeClient:
    """Talks to exactly one memcached endpoint.

    Parameters:
        address: The node's :class:`NodeAddress`.
        connect_timeout: TCP connect timeout in seconds.
        timeout: Socket read/write timeout in seconds.
        client: Optional pre-built pymemcache client (used by tests).
    """

    def __init__(
        self,
        address: NodeAddress,
        connect_timeout: float = _DEFAULT_CONNECT_TIMEOUT,
        timeout: float = _DEFAULT_TIMEOUT,
        client: Any | None = None,
    ) -> None:
        self._address = address
        self._client = client or Client(
            address.as_tuple(),
            connect_timeout=connect_timeout,
            timeout=timeout,
        )

    @property
    def address(self) -> str:
        return str(self._address)

    # ── Key Operations ────────────────────────────────────────────

    def get(self, key: str) -> bytes | None:
        """Return the raw value for *key*, or ``None`` on a miss."""
        try:
            return self._client.get(key)
        except (MemcacheError, OSError) as exc:
            raise CacheTransportError(self.address, reason=str(exc)) from exc

    def delete(self, key: str) -> bool:
        """Delete *key*; ``True`` if removed, ``False`` if it was not there."""
        try:
            return bool(self._client.delete(key, noreply=False))
        except (MemcacheError, OSError) as exc:
            raise CacheTransportError(self.address, reason=str(exc)) from exc

    # ── Enumeration ───────────────────────────────────────────────

    def list_slabs(self) -> list[SlabStats]:
        """List slab classes with their item counts (``stats items``)."""
        stats = self._stats("items")
        slabs: dict[int, SlabStats] = {}
        for name, value in stats.items():
            parts = _as_text(name).split(":")
            if len(parts) != 3 or parts[0] != "items" or parts[2] != "number":
                continue
            try:
                slab_id = int(parts[1])
                item_count = int(value)
            except (TypeError, ValueError):
                logger.debug("Ignoring malformed stat %s=%r on %s", name, value, self.address)
                continue
            slabs[slab_id] = SlabStats(slab_id=slab_id, item_count=item_count)
        return [slabs[slab_id] for slab_id in sorted(slabs)]

    def list_slab_keys(self, slab_id: int) -> list[str]:
        """List the item keys stored in one slab (``stats cachedump``)."""
        dump = self._stats("cachedump", str(slab_id), _CACHEDUMP_ALL_ITEMS)
        return [_as_text(key) for key in dump]

    def enumerate_keys(self) -> set[str]:
        """Return every key currently stored on this node.

        Raises:
            NodeDiscoveryError: If any phase of the enumeration fails.
        """
        keys: set[str] = set()
        try:
            for slab in self.list_slabs():
                if slab.is_empty:
                    continue
                keys.update(self.list_slab_keys(slab.slab_id))
        except CacheTransportError as exc:
            raise NodeDiscoveryError(self.address, reason=str(exc.__cause__ or exc)) from exc
        logger.debug("Enumerated %d key(s) on %s", len(keys), self.address)
        return keys

    # ── Lifecycle ─────────────────────────────────────────────────

    def close(self) -> None:
        try:
            self._client.close()
        except (MemcacheError, OSError):
            logger.debug("Error closing connection to %s", self.address, exc_info=True)

    def _stats(self, *args: str) -> dict[Any, Any]:
        try:
            return self._client.stats(*args)
        except (MemcacheError, OSError) as exc:
            raise CacheTransportError(self.address, reason=str(exc)) from exc

    def __repr__(self) -> str:
        return f"CacheNodeClient(address={self.address!r})"
