"""Tests for the CBOR transport."""

import pytest

cbor2 = pytest.importorskip("cbor2", reason="cbor2 required for CBOR tests")

from asvocab._constants import ACTIVITYSTREAMS_CONTEXT_URL
from asvocab.cbor import (
    DEFAULT_CONTEXT_REGISTRY,
    PayloadStats,
    from_cbor,
    payload_stats,
    to_cbor,
)
from asvocab.registry import TypeRegistry


@pytest.fixture
def registry():
    return TypeRegistry()


@pytest.fixture
def note(registry):
    return registry.deserialize(
        {
            "type": "Note",
            "id": "https://social.example/notes/1",
            "content": "Hello",
            "published": "2015-01-01T06:00:00Z",
            "sensitive": False,
        }
    )


class TestRoundTrip:
    def test_entity_restored(self, note, registry):
        restored = from_cbor(to_cbor(note), registry=registry)
        assert restored == note

    def test_context_compressed(self, note):
        decoded = cbor2.loads(to_cbor(note))
        assert decoded["@context"] == DEFAULT_CONTEXT_REGISTRY[ACTIVITYSTREAMS_CONTEXT_URL]
        assert decoded["type"] == "Note"

    def test_custom_registry(self, note, registry):
        custom = {ACTIVITYSTREAMS_CONTEXT_URL: 42}
        data = to_cbor(note, custom)
        assert cbor2.loads(data)["@context"] == 42
        assert from_cbor(data, custom, registry=registry) == note

    def test_unknown_context_passes_through(self, note):
        data = to_cbor(note, context="https://custom.example/ns")
        assert cbor2.loads(data)["@context"] == "https://custom.example/ns"

    def test_array_context(self, note):
        data = to_cbor(note, context=[ACTIVITYSTREAMS_CONTEXT_URL, "https://w3id.org/security/v1"])
        assert cbor2.loads(data)["@context"] == [2, 3]

    def test_without_context(self, note):
        assert "@context" not in cbor2.loads(to_cbor(note, context=None))

    def test_non_map_payload(self):
        with pytest.raises(TypeError, match="map"):
            from_cbor(cbor2.dumps([1, 2]))


class TestPayloadStats:
    def test_cbor_smaller(self, note):
        stats = payload_stats(note)
        assert isinstance(stats, PayloadStats)
        assert stats.cbor_bytes < stats.json_bytes
        assert 0 < stats.cbor_ratio < 1
