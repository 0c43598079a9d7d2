"""Exception hierarchy for the memcached cluster client."""

from __future__ import annotations


class MemcachedClusterError(Exception):
    """Base exception for all memcached cluster errors."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


# ── Discovery Errors ──────────────────────────────────────────────

class NodeDiscoveryError(MemcachedClusterError):
    """Raised when a node's key enumeration cannot be completed."""

    def __init__(self, address: str, reason: str = "") -> None:
        self.address = address
        msg = f"Key discovery failed on node {address}."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg)


# ── Key Errors ────────────────────────────────────────────────────

class CacheKeyNotFoundError(MemcachedClusterError):
    """Raised when a key is absent from every configured node."""

    def __init__(self, key: str, probed_nodes: int = 0) -> None:
        self.key = key
        self.probed_nodes = probed_nodes
        super().__init__(f"Key '{key}' not found on any of {probed_nodes} node(s).")


# ── Transport Errors ──────────────────────────────────────────────

class CacheTransportError(MemcachedClusterError):
    """Raised when a memcached node cannot be reached or answers garbage."""

    def __init__(self, address: str, reason: str = "") -> None:
        self.address = address
        msg = f"Memcached request to {address} failed."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg)
