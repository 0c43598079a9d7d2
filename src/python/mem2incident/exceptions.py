"""Exception hierarchy for the mem2incident service.

Cache errors live in :mod:`memcached_cluster.exceptions` and HTTP
errors in :mod:`client_handler.exceptions`; these are the errors the
service itself raises.
"""

from __future__ import annotations


class Mem2IncidentError(Exception):
    """Base exception for all mem2incident errors."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(message)


class ConfigError(Mem2IncidentError):
    """Raised when the configuration file cannot be loaded. Fatal at startup."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        msg = f"Error reading config {path}."
        if reason:
            msg += f" Reason: {reason}"
        super().__init__(msg)


class PayloadDecodeError(Mem2IncidentError):
    """Raised when a cached value cannot be turned into a delivery payload.

    The key is left in the cache; it will fail the same way on every
    pass until an operator fixes or removes it.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Malformed cached payload: {reason}")
