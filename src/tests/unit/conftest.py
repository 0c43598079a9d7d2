"""Shared fixtures: in-memory memcached nodes and a recording incidents API."""

import json
from typing import Callable, Optional

import httpx
import pytest

from memcached_cluster import CacheClusterView, CacheTransportError, NodeDiscoveryError
from mem2incident.clients.incidents import IncidentsApiClient
from mem2incident.configs import Mem2IncidentConfig

API_ENDPOINT = "https://webui.example/api/v1/incidents"
AUTH_TOKEN = "configured-token"


class FakeCacheNode:
    """Dict-backed stand-in for a single memcached node."""

    def __init__(self, address: str, items: Optional[dict] = None, down: bool = False, fail_delete: bool = False):
        self.address = address
        self.items: dict[str, bytes] = dict(items or {})
        self.down = down
        self.fail_delete = fail_delete
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    def enumerate_keys(self) -> set[str]:
        if self.down:
            raise NodeDiscoveryError(self.address, "connection refused")
        return set(self.items)

    def get(self, key: str) -> Optional[bytes]:
        self.calls.append(("get", key))
        if self.down:
            raise CacheTransportError(self.address, "connection refused")
        return self.items.get(key)

    def delete(self, key: str) -> bool:
        self.calls.append(("delete", key))
        if self.down or self.fail_delete:
            raise CacheTransportError(self.address, "connection reset")
        return self.items.pop(key, None) is not None

    def close(self) -> None:
        self.closed = True


class RecordingApi:
    """httpx transport handler that records requests and replies with a fixed response."""

    def __init__(self, status_code: int = 201, body: Optional[object] = None, error: Optional[Callable] = None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self.body is None:
            return httpx.Response(self.status_code)
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(request.content) for request in self.requests]

    @property
    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def config() -> Mem2IncidentConfig:
    return Mem2IncidentConfig(
        memcached_servers=["cache-1:11211", "cache-2:11211", "cache-3:11211"],
        api_endpoint=API_ENDPOINT,
        auth_token=AUTH_TOKEN,
        loop_interval=1,
    )


@pytest.fixture
def nodes() -> list[FakeCacheNode]:
    return [FakeCacheNode(f"cache-{i}:11211") for i in (1, 2, 3)]


@pytest.fixture
def primary() -> FakeCacheNode:
    # Hashes nowhere useful: every lookup must fall back to the node scan
    return FakeCacheNode("sharded[cache-1,cache-2,cache-3]")


@pytest.fixture
def cluster_view(nodes, primary) -> CacheClusterView:
    return CacheClusterView(nodes, primary)


@pytest.fixture
def api() -> RecordingApi:
    return RecordingApi()


@pytest.fixture
def incidents_api_client(api) -> IncidentsApiClient:
    return IncidentsApiClient(API_ENDPOINT, transport=httpx.MockTransport(api))
