"""Data models for the memcached cluster client.

All models use Pydantic for validation and serialization.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MEMCACHED_PORT = 11211


class NodeAddress(BaseModel):
    """A single memcached endpoint."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(default=DEFAULT_MEMCACHED_PORT, ge=1, le=65535)

    @staticmethod
    def parse(address: str) -> NodeAddress:
        """Parse a ``host:port`` string; a bare host gets the default port.

        Bracketed IPv6 literals (``[::1]:11211``) are accepted.
        """
        address = address.strip()
        if address.startswith("["):
            host, _, rest = address[1:].partition("]")
            port = rest.lstrip(":")
        elif address.count(":") == 1:
            host, _, port = address.partition(":")
        else:
            host, port = address, ""
        if not port:
            return NodeAddress(host=host)
        return NodeAddress(host=host, port=int(port))

    def as_tuple(self) -> tuple[str, int]:
        return (self.host, self.port)

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


class SlabStats(BaseModel):
    """Item count of one memcached slab class, as reported by ``stats items``."""

    slab_id: int
    item_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.item_count <= 0
