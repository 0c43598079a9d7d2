"""Sharded client over every configured memcached node.

This is the "preferred" route for a key: pymemcache's ``HashClient``
picks a node by hashing the key, exactly like the producers that wrote
it (when they use the same server list).  When the producers hash
differently, or the list changed, the key is elsewhere and the cluster
view falls back to probing each node.
"""

from __future__ import annotations

import logging
from typing import Any

from pymemcache.client.hash import HashClient
from pymemcache.exceptions import MemcacheError

from ..exceptions import CacheTransportError
from ..models import NodeAddress

logger = logging.getLogger(__name__)


class ShardedCacheClient:
    """Key-hashing client used as the primary lookup path.

    Parameters:
        addresses: All configured memcached nodes.
        connect_timeout: TCP connect timeout in seconds.
        timeout: Socket read/write timeout in seconds.
        client: Optional pre-built client (used by tests).
    """

    def __init__(
        self,
        addresses: list[NodeAddress],
        connect_timeout: float = 2.0,
        timeout: float = 5.0,
        client: Any | None = None,
    ) -> None:
        self._label = f"sharded[{','.join(str(a) for a in addresses)}]"
        self._client = client or HashClient(
            [address.as_tuple() for address in addresses],
            connect_timeout=connect_timeout,
            timeout=timeout,
            ignore_exc=False,
        )

    @property
    def address(self) -> str:
        return self._label

    def get(self, key: str) -> bytes | None:
        try:
            return self._client.get(key)
        except (MemcacheError, OSError) as exc:
            raise CacheTransportError(self.address, reason=str(exc)) from exc

    def delete(self, key: str) -> bool:
        try:
            return bool(self._client.delete(key, noreply=False))
        except (MemcacheError, OSError) as exc:
            raise CacheTransportError(self.address, reason=str(exc)) from exc

    def close(self) -> None:
        try:
            self._client.close()
        except (MemcacheError, OSError):
            logger.debug("Error closing %s", self.address, exc_info=True)
