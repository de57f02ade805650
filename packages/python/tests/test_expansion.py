"""Tests for JSON-LD processing through PyLD."""

import pytest

from asvocab._constants import ACTIVITYSTREAMS_NS, XSD
from asvocab.catalog import TypeDefinition
from asvocab.codecs import STRING
from asvocab.expansion import activitystreams_context, compact_to_entity, expand, to_rdf
from asvocab.properties import define_property
from asvocab.registry import TypeRegistry

PUBLIC = ACTIVITYSTREAMS_NS + "Public"


@pytest.fixture
def registry():
    return TypeRegistry()


@pytest.fixture
def note(registry):
    return registry.deserialize(
        {
            "type": "Note",
            "id": "https://social.example/notes/1",
            "content": "Hi",
            "contentMap": {"en": "Hi", "fr": "Salut"},
            "to": PUBLIC,
            "published": "2015-01-01T06:00:00Z",
        }
    )


class TestContext:
    def test_keywords(self, registry):
        ctx = activitystreams_context(registry)
        assert ctx["@vocab"] == ACTIVITYSTREAMS_NS
        assert ctx["id"] == "@id"
        assert ctx["type"] == "@type"

    def test_entity_properties_coerced_to_id(self, registry):
        ctx = activitystreams_context(registry)
        assert ctx["actor"] == {"@id": ACTIVITYSTREAMS_NS + "actor", "@type": "@id"}
        assert ctx["inbox"]["@type"] == "@id"

    def test_text_properties_not_coerced(self, registry):
        ctx = activitystreams_context(registry)
        assert ctx["content"] == {"@id": ACTIVITYSTREAMS_NS + "content"}

    def test_typed_literals(self, registry):
        ctx = activitystreams_context(registry)
        assert ctx["published"]["@type"] == XSD + "dateTime"
        assert ctx["duration"]["@type"] == XSD + "duration"
        assert ctx["totalItems"]["@type"] == XSD + "nonNegativeInteger"

    def test_language_maps(self, registry):
        ctx = activitystreams_context(registry)
        assert ctx["contentMap"] == {
            "@id": ACTIVITYSTREAMS_NS + "content",
            "@container": "@language",
        }

    def test_extension_terms(self, registry):
        registry.register(
            TypeDefinition(
                "Emoji",
                extends=("Object",),
                properties=(
                    define_property(
                        "emojiCode",
                        codecs=(STRING,),
                        uri="http://joinmastodon.org/ns#emojiCode",
                    ),
                ),
                uri="http://joinmastodon.org/ns#Emoji",
            )
        )
        ctx = activitystreams_context(registry)
        assert ctx["emojiCode"] == {"@id": "http://joinmastodon.org/ns#emojiCode"}
        assert ctx["Emoji"] == "http://joinmastodon.org/ns#Emoji"
        assert "Note" not in ctx

    def test_extension_type_expands_to_its_iri(self, registry):
        registry.register(
            TypeDefinition("Emoji", extends=("Object",), uri="http://joinmastodon.org/ns#Emoji")
        )
        (node,) = expand(registry.new("Emoji"))
        assert node["@type"] == ["http://joinmastodon.org/ns#Emoji"]


class TestExpand:
    def test_expand_entity(self, note):
        (node,) = expand(note)
        assert node["@id"] == "https://social.example/notes/1"
        assert node["@type"] == [ACTIVITYSTREAMS_NS + "Note"]
        assert node[ACTIVITYSTREAMS_NS + "to"] == [{"@id": PUBLIC}]
        assert node[ACTIVITYSTREAMS_NS + "published"] == [
            {"@value": "2015-01-01T06:00:00Z", "@type": XSD + "dateTime"}
        ]

    def test_language_values(self, note):
        (node,) = expand(note)
        values = node[ACTIVITYSTREAMS_NS + "content"]
        assert {"@value": "Hi"} in values
        assert {"@value": "Salut", "@language": "fr"} in values

    def test_remote_context_replaced(self, registry):
        doc = {
            "@context": "https://www.w3.org/ns/activitystreams",
            "type": "Like",
            "object": "https://social.example/notes/1",
        }
        (node,) = expand(doc, registry=registry)
        assert node[ACTIVITYSTREAMS_NS + "object"] == [{"@id": "https://social.example/notes/1"}]

    def test_rejects_other_inputs(self):
        with pytest.raises(TypeError, match="VocabularyEntity or dict"):
            expand("https://social.example/notes/1")


class TestToRdf:
    def test_type_triple(self, note):
        nquads = to_rdf(note)
        assert (
            "<https://social.example/notes/1> "
            "<http://www.w3.org/1999/02/22-rdf-syntax-ns#type> "
            "<https://www.w3.org/ns/activitystreams#Note> ."
        ) in nquads

    def test_language_literal(self, note):
        assert '"Salut"@fr' in to_rdf(note)


class TestCompactToEntity:
    def test_round_trip(self, note, registry):
        restored = compact_to_entity(expand(note), registry=registry)
        assert restored.type_name == "Note"
        assert restored.serialize() == note.serialize()

    def test_several_nodes_rejected(self, registry):
        expanded = [
            {"@id": "https://a.example/1", "@type": [ACTIVITYSTREAMS_NS + "Note"]},
            {"@id": "https://a.example/2", "@type": [ACTIVITYSTREAMS_NS + "Note"]},
        ]
        with pytest.raises(ValueError, match="one top-level node"):
            compact_to_entity(expanded, registry=registry)
