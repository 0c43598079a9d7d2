"""Tests for cache key classification."""

import pytest

from mem2incident.models import CreateIncidentKey, LinkIncidentKey, UnmatchedKey
from mem2incident.services.keys import KeyClassifierService

classifier = KeyClassifierService()


@pytest.mark.parametrize(
    "key, domain_uuid",
    [
        ("rbincident:incident:ab12cd34-0000-4e5f-9a8b-001122334455", None),
        ("rbincident:7f1e2d3c-aaaa-bbbb:incident:ab12cd34-0000-4e5f-9a8b-001122334455", "7f1e2d3c-aaaa-bbbb"),
        ("rbincident_7f1e2d3c-aaaa-bbbb_incident_ab12cd34-0000-4e5f-9a8b-001122334455", "7f1e2d3c-aaaa-bbbb"),
    ],
)
def test_create_keys_extract_same_incident_uuid(key, domain_uuid):
    kind = classifier.classify(key)
    assert isinstance(kind, CreateIncidentKey)
    assert kind.incident_uuid == "ab12cd34-0000-4e5f-9a8b-001122334455"
    assert kind.domain_uuid == domain_uuid


def test_uuid_match_is_case_insensitive():
    kind = classifier.classify("rbincident:incident:ABCDEF-12")
    assert kind == CreateIncidentKey(incident_uuid="ABCDEF-12")


def test_link_key_takes_parent_from_third_segment():
    kind = classifier.classify("rbincident:relation:11112222-3333-4444")
    assert isinstance(kind, LinkIncidentKey)
    assert kind.parent_uuid == "11112222-3333-4444"


@pytest.mark.parametrize(
    "key",
    [
        "",
        "session:42",
        "rbincident",
        "rbincident:incident:",
        "rbincident:incident:not-hex-zz",
        "rbincident:relation:",
        "rbincident:relation:1111:2222",
        "rbincident:incident:ab12\n",
        "prefix-rbincident:incident:ab12",
        "rbincident:incident:ab12:extra",
        "rbincident_ab12_incident_",
        "RBINCIDENT:incident:ab12",
    ],
)
def test_everything_else_is_unmatched(key):
    assert classifier.classify(key) == UnmatchedKey()
