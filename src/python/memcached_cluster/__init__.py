"""Memcached cluster client.

Treats a flat list of memcached servers as one logical key space with
no trusted routing function: keys are discovered on every node, and
lookups fall back from the hashed primary route to a scan of each node.

Quick Start::

    from memcached_cluster import CacheClusterView

    with CacheClusterView.from_addresses(["10.0.0.1:11211", "10.0.0.2:11211"]) as view:
        for key in view.discover_keys():
            value = view.fetch(key)
            view.delete(key)
"""

from .cluster_view import CacheClusterView, CacheNode, EnumerableCacheNode
from .exceptions import (
    CacheKeyNotFoundError,
    CacheTransportError,
    MemcachedClusterError,
    NodeDiscoveryError,
)
from .models import DEFAULT_MEMCACHED_PORT, NodeAddress, SlabStats
from .network import CacheNodeClient, ShardedCacheClient

__all__ = [
    "CacheClusterView",
    "CacheKeyNotFoundError",
    "CacheNode",
    "CacheNodeClient",
    "CacheTransportError",
    "DEFAULT_MEMCACHED_PORT",
    "EnumerableCacheNode",
    "MemcachedClusterError",
    "NodeAddress",
    "NodeDiscoveryError",
    "ShardedCacheClient",
    "SlabStats",
]
