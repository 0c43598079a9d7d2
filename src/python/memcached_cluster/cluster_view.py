"""Cluster view: one logical key space over N memcached nodes.

The nodes share a namespace but nothing guarantees where a given key
lives: producers may shard with a different hash, the server list may
have changed, or a key may have moved between discovery and fetch.
The view therefore:

1. Discovers keys by enumerating *every* node and taking the union.
2. Resolves ``get`` / ``delete`` through the sharded primary client
   first, then falls back to probing each node in configured order.

A key is reported as not found only when every node answered with a
miss.  If some node could not be reached, absence is not proven and a
:class:`CacheTransportError` is raised instead.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Protocol, Sequence, TypeVar

from .exceptions import CacheKeyNotFoundError, CacheTransportError, NodeDiscoveryError
from .models import NodeAddress
from .network.cache_node_client import CacheNodeClient
from .network.sharded_cache_client import ShardedCacheClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheNode(Protocol):
    """Minimal per-node contract the view relies on."""

    @property
    def address(self) -> str: ...

    def get(self, key: str) -> bytes | None: ...

    def delete(self, key: str) -> bool: ...

    def close(self) -> None: ...


class EnumerableCacheNode(CacheNode, Protocol):

    def enumerate_keys(self) -> set[str]: ...


class CacheClusterView:
    """Aggregates the configured memcached nodes.

    Parameters:
        nodes: Individual node clients, in fallback order.
        primary: Client tried first for ``fetch`` / ``delete``.
        discovery_workers: Number of threads used to enumerate nodes
            concurrently.  ``1`` enumerates sequentially.
    """

    def __init__(
        self,
        nodes: Sequence[EnumerableCacheNode],
        primary: CacheNode,
        discovery_workers: int = 1,
    ) -> None:
        if not nodes:
            raise ValueError("At least one memcached node is required")
        self._nodes = list(nodes)
        self._primary = primary
        self._discovery_workers = max(1, discovery_workers)

    @classmethod
    def from_addresses(
        cls,
        addresses: Sequence[str],
        connect_timeout: float = 2.0,
        timeout: float = 5.0,
        discovery_workers: int = 1,
    ) -> CacheClusterView:
        """Build a view backed by pymemcache clients."""
        parsed = [NodeAddress.parse(address) for address in addresses]
        nodes = [
            CacheNodeClient(address, connect_timeout=connect_timeout, timeout=timeout)
            for address in parsed
        ]
        primary = ShardedCacheClient(parsed, connect_timeout=connect_timeout, timeout=timeout)
        return cls(nodes, primary, discovery_workers=discovery_workers)

    @property
    def node_addresses(self) -> list[str]:
        return [node.address for node in self._nodes]

    # ── Discovery ─────────────────────────────────────────────────

    def discover_keys(self) -> set[str]:
        """Union of the key enumerations of every node.

        A node that fails to enumerate is logged and skipped; whatever
        it holds is picked up on a later pass.
        """
        if self._discovery_workers > 1 and len(self._nodes) > 1:
            workers = min(self._discovery_workers, len(self._nodes))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="discovery") as pool:
                per_node = list(pool.map(self._enumerate_node, self._nodes))
        else:
            per_node = [self._enumerate_node(node) for node in self._nodes]

        keys: set[str] = set()
        for node_keys in per_node:
            keys.update(node_keys)
        logger.info("Discovered %d key(s) across %d node(s)", len(keys), len(self._nodes))
        return keys

    def _enumerate_node(self, node: EnumerableCacheNode) -> set[str]:
        try:
            return node.enumerate_keys()
        except NodeDiscoveryError as exc:
            logger.warning("Error getting keys from server %s: %s", node.address, exc.message)
            return set()

    # ── Fetch / Delete ────────────────────────────────────────────

    def fetch(self, key: str) -> bytes:
        """Return the raw value of *key* from whichever node holds it.

        Raises:
            CacheKeyNotFoundError: If every node reported a miss.
            CacheTransportError: If the key was not found and at least
                one node could not be queried.
        """
        return self._resolve(key, "found", lambda node: node.get(key))

    def delete(self, key: str) -> None:
        """Delete *key* from whichever node holds it.

        Raises:
            CacheKeyNotFoundError: If every node reported not-found.
            CacheTransportError: If no node confirmed the delete and at
                least one node could not be queried.
        """
        self._resolve(key, "deleted", lambda node: True if node.delete(key) else None)

    def _resolve(
        self,
        key: str,
        verb: str,
        operation: Callable[[CacheNode], T | None],
    ) -> T:
        """Run *operation* on the primary, then on each node until a hit.

        *operation* returns ``None`` for a miss and raises
        :class:`CacheTransportError` when the node cannot be queried.
        """
        try:
            result = operation(self._primary)
            if result is not None:
                return result
            logger.debug("Key %s not %s via %s, probing all nodes", key, verb, self._primary.address)
        except CacheTransportError as exc:
            logger.warning("Primary lookup for key %s failed, probing all nodes: %s", key, exc.message)

        failed: list[str] = []
        for node in self._nodes:
            try:
                result = operation(node)
            except CacheTransportError as exc:
                logger.warning("Error accessing key %s on server %s: %s", key, node.address, exc.message)
                failed.append(node.address)
                continue
            if result is not None:
                logger.info("Key %s %s on server %s", key, verb, node.address)
                return result

        if failed:
            raise CacheTransportError(
                ", ".join(failed),
                reason=f"key '{key}' not {verb} on any reachable node",
            )
        raise CacheKeyNotFoundError(key, probed_nodes=len(self._nodes))

    # ── Lifecycle ─────────────────────────────────────────────────

    def close(self) -> None:
        self._primary.close()
        for node in self._nodes:
            node.close()

    def __enter__(self) -> CacheClusterView:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.close()

    def __repr__(self) -> str:
        return f"CacheClusterView(nodes={self.node_addresses!r})"
