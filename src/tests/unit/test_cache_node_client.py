"""Tests for the single-node memcached client."""

import socket

import pytest
from pymemcache.exceptions import MemcacheUnexpectedCloseError

from memcached_cluster import CacheNodeClient, CacheTransportError, NodeAddress, NodeDiscoveryError
from memcached_cluster.network import ShardedCacheClient

ITEMS_STATS = {
    b"items:1:number": 2,
    b"items:1:age": 120,
    b"items:3:number": 0,
    b"items:5:number": 1,
    b"items:5:evicted": 0,
}
CACHEDUMPS = {
    "1": {b"rbincident:incident:ab12": b"[10 b; 0 s]", b"session:42": b"[3 b; 0 s]"},
    "3": {b"never-dumped": b"[1 b; 0 s]"},
    "5": {b"rbincident:relation:cd34": b"[38 b; 0 s]"},
}


class FakeMemcacheClient:

    def __init__(self, values=None, error=None):
        self.values = dict(values or {})
        self.error = error
        self.stats_calls = []
        self.closed = False

    def stats(self, *args):
        if self.error is not None:
            raise self.error
        self.stats_calls.append(args)
        if args == ("items",):
            return dict(ITEMS_STATS)
        assert args[0] == "cachedump" and args[2] == "0"
        return dict(CACHEDUMPS[args[1]])

    def get(self, key):
        if self.error is not None:
            raise self.error
        return self.values.get(key)

    def delete(self, key, noreply=None):
        assert noreply is False
        if self.error is not None:
            raise self.error
        return self.values.pop(key, None) is not None

    def close(self):
        self.closed = True


def make_client(**kwargs) -> tuple[CacheNodeClient, FakeMemcacheClient]:
    fake = FakeMemcacheClient(**kwargs)
    return CacheNodeClient(NodeAddress(host="cache-1", port=11211), client=fake), fake


def test_list_slabs_reads_item_counts():
    client, _ = make_client()
    slabs = client.list_slabs()
    assert [(s.slab_id, s.item_count) for s in slabs] == [(1, 2), (3, 0), (5, 1)]
    assert slabs[1].is_empty


def test_enumerate_keys_skips_empty_slabs():
    client, fake = make_client()
    keys = client.enumerate_keys()
    assert keys == {"rbincident:incident:ab12", "session:42", "rbincident:relation:cd34"}
    dumped = [call[1] for call in fake.stats_calls if call[0] == "cachedump"]
    assert dumped == ["1", "5"]


def test_enumerate_keys_wraps_transport_failure():
    client, _ = make_client(error=MemcacheUnexpectedCloseError())
    with pytest.raises(NodeDiscoveryError) as exc:
        client.enumerate_keys()
    assert exc.value.address == "cache-1:11211"


def test_get_returns_none_on_miss_and_bytes_on_hit():
    client, _ = make_client(values={"present": b"value"})
    assert client.get("present") == b"value"
    assert client.get("absent") is None


def test_get_timeout_is_a_transport_error():
    client, _ = make_client(error=socket.timeout("timed out"))
    with pytest.raises(CacheTransportError):
        client.get("any")


def test_delete_distinguishes_not_found():
    client, fake = make_client(values={"present": b"value"})
    assert client.delete("present") is True
    assert client.delete("present") is False
    assert "present" not in fake.values


def test_close_closes_underlying_client():
    client, fake = make_client()
    client.close()
    assert fake.closed


@pytest.mark.parametrize(
    "raw, host, port",
    [
        ("10.0.0.1:11212", "10.0.0.1", 11212),
        ("cache.local", "cache.local", 11211),
        ("[::1]:11213", "::1", 11213),
        ("  cache:11211 ", "cache", 11211),
    ],
)
def test_node_address_parse(raw, host, port):
    address = NodeAddress.parse(raw)
    assert (address.host, address.port) == (host, port)


def test_node_address_str_brackets_ipv6():
    assert str(NodeAddress(host="::1", port=11211)) == "[::1]:11211"


def test_sharded_client_labels_every_node_and_wraps_errors():
    addresses = [NodeAddress(host="cache-1"), NodeAddress(host="cache-2", port=11212)]
    client = ShardedCacheClient(addresses, client=FakeMemcacheClient(error=ConnectionRefusedError()))
    assert client.address == "sharded[cache-1:11211,cache-2:11212]"
    with pytest.raises(CacheTransportError):
        client.get("any")
    with pytest.raises(CacheTransportError):
        client.delete("any")


def test_sharded_client_reports_hit_miss_and_delete():
    fake = FakeMemcacheClient(values={"present": b"value"})
    client = ShardedCacheClient([NodeAddress(host="cache-1")], client=fake)
    assert client.get("present") == b"value"
    assert client.get("absent") is None
    assert client.delete("present") is True
    assert client.delete("present") is False
