from .cache_node_client import CacheNodeClient
from .sharded_cache_client import ShardedCacheClient

__all__ = [
    "CacheNodeClient",
    "ShardedCacheClient",
]
