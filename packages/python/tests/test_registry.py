"""Tests for the capability-aware type registry."""

import threading

import pytest

from asvocab._constants import (
    COLLECTION,
    COLLECTION_PAGE,
    LINK,
    OBJECT,
    ORDERED_COLLECTION_PAGE,
)
from asvocab.catalog import TypeDefinition
from asvocab.codecs import STRING
from asvocab.entity import UnhandledTypeError
from asvocab.properties import define_property
from asvocab.registry import TypeRegistry, default_registry


@pytest.fixture
def registry():
    """A private registry so extension types never leak between tests."""
    return TypeRegistry()


def _emoji(**kwargs):
    return TypeDefinition(
        "Emoji",
        extends=("Object",),
        properties=(define_property("emojiCode", codecs=(STRING,), functional=True),),
        **kwargs,
    )


# ═══════════════════════════════════════════════════════════════════
# Capability closure
# ═══════════════════════════════════════════════════════════════════


class TestAncestors:
    def test_self_first(self, registry):
        assert registry.ancestors("Note") == ("Note", "Object")

    def test_transitive(self, registry):
        assert registry.ancestors("TentativeAccept") == (
            "TentativeAccept", "Accept", "Activity", "Object",
        )

    def test_multiple_parents(self, registry):
        assert registry.ancestors("OrderedCollectionPage") == (
            "OrderedCollectionPage",
            "OrderedCollection",
            "Collection",
            "Object",
            "CollectionPage",
        )

    def test_unknown(self, registry):
        with pytest.raises(KeyError, match="Bogus"):
            registry.ancestors("Bogus")


class TestSatisfies:
    def test_direct(self, registry):
        assert registry.satisfies("Object", OBJECT)

    def test_subtype(self, registry):
        assert registry.satisfies("Dislike", OBJECT)
        assert registry.satisfies("Mention", LINK)

    def test_ordered_collection_is_collection(self, registry):
        assert registry.satisfies("OrderedCollection", COLLECTION)

    def test_unrelated(self, registry):
        assert not registry.satisfies("Note", LINK)
        assert not registry.satisfies("Collection", COLLECTION_PAGE)

    def test_unknown_and_non_string(self, registry):
        assert not registry.satisfies("Bogus", OBJECT)
        assert not registry.satisfies(["Note"], OBJECT)


# ═══════════════════════════════════════════════════════════════════
# Effective properties
# ═══════════════════════════════════════════════════════════════════


class TestPropertiesOf:
    def test_inherited(self, registry):
        props = registry.properties_of("Note")
        assert "content" in props and "id" in props
        assert "actor" not in props

    def test_own_before_inherited(self, registry):
        names = list(registry.properties_of("Activity"))
        assert names.index("actor") < names.index("content")

    def test_without_removes(self, registry):
        props = registry.properties_of("IntransitiveActivity")
        assert "object" not in props
        assert "actor" in props

    def test_without_inherited_by_children(self, registry):
        assert "object" not in registry.properties_of("Question")
        assert "oneOf" in registry.properties_of("Question")

    def test_paging_properties_differ_per_type(self, registry):
        plain = registry.properties_of("Collection")["current"]
        ordered = registry.properties_of("OrderedCollection")["current"]
        assert plain.capabilities == (COLLECTION_PAGE, LINK)
        assert ordered.capabilities == (ORDERED_COLLECTION_PAGE, LINK)

    def test_ordered_collection_page(self, registry):
        props = registry.properties_of("OrderedCollectionPage")
        assert "items" not in props
        assert {"orderedItems", "partOf", "startIndex"} <= set(props)
        assert props["next"].capabilities == (ORDERED_COLLECTION_PAGE, LINK)
        assert props["first"].capabilities == (ORDERED_COLLECTION_PAGE, LINK)

    def test_names_unique(self, registry):
        for name in registry.names():
            props = registry.properties_of(name)
            assert len(props) == len(set(props))

    def test_read_only(self, registry):
        with pytest.raises(TypeError):
            registry.properties_of("Note")["bogus"] = None


# ═══════════════════════════════════════════════════════════════════
# Resolution
# ═══════════════════════════════════════════════════════════════════


class TestResolveAsCapability:
    def test_hit(self, registry):
        entity = registry.resolve_as_capability("Note", OBJECT)
        assert entity.type_name == "Note"

    def test_fresh_instances(self, registry):
        a = registry.resolve_as_capability("Note", OBJECT)
        b = registry.resolve_as_capability("Note", OBJECT)
        assert a is not b

    def test_known_tag_wrong_capability(self, registry):
        assert registry.resolve_as_capability("Note", LINK) is None

    def test_unknown_tag(self, registry):
        assert registry.resolve_as_capability("Bogus", OBJECT) is None

    def test_non_string_tag(self, registry):
        assert registry.resolve_as_capability({"x": 1}, OBJECT) is None

    def test_subtype_satisfies_collection(self, registry):
        entity = registry.resolve_as_capability("OrderedCollection", COLLECTION)
        assert entity.type_name == "OrderedCollection"


class TestNewAndResolve:
    def test_new(self, registry):
        entity = registry.new("Create")
        assert entity.type_name == "Create"
        assert entity.serialize() == {"type": "Create"}

    def test_new_unknown(self, registry):
        with pytest.raises(KeyError, match="Available"):
            registry.new("Bogus")

    def test_resolve_unknown(self, registry):
        assert registry.resolve("Bogus") is None


class TestDocumentDeserialize:
    def test_first_known_tag_wins(self, registry):
        entity = registry.deserialize({"type": ["Bogus", "Note", "Article"]})
        assert entity.type_name == "Note"
        assert entity.type_tags == ["Bogus", "Note", "Article"]

    def test_explicit_kind(self, registry):
        entity = registry.deserialize({"type": "Bogus", "content": "hi"}, kind="Note")
        assert entity.type_name == "Note"
        assert entity.get_value("content") == "hi"

    def test_no_known_tag(self, registry):
        with pytest.raises(UnhandledTypeError, match="Bogus"):
            registry.deserialize({"type": "Bogus"})

    def test_missing_type(self, registry):
        with pytest.raises(UnhandledTypeError):
            registry.deserialize({"content": "hi"})

    def test_not_a_dict(self, registry):
        with pytest.raises(TypeError, match="dict"):
            registry.deserialize([{"type": "Note"}])


# ═══════════════════════════════════════════════════════════════════
# Registration
# ═══════════════════════════════════════════════════════════════════


class TestRegistration:
    def test_register_extension(self, registry):
        registry.register(_emoji())
        assert "Emoji" in registry
        assert registry.satisfies("Emoji", OBJECT)
        assert "emojiCode" in registry.properties_of("Emoji")
        assert "content" in registry.properties_of("Emoji")

    def test_extension_resolves_as_capability(self, registry):
        registry.register(_emoji())
        entity = registry.resolve_as_capability("Emoji", OBJECT)
        assert entity.type_name == "Emoji"

    def test_duplicate_rejected(self, registry):
        registry.register(_emoji())
        with pytest.raises(ValueError, match="already registered"):
            registry.register(_emoji())

    def test_force_override(self, registry):
        registry.register(_emoji())
        registry.register(TypeDefinition("Emoji", extends=("Link",)), force=True)
        assert registry.satisfies("Emoji", LINK)
        assert not registry.satisfies("Emoji", OBJECT)

    def test_missing_parent_leaves_registry_unchanged(self, registry):
        with pytest.raises(ValueError, match="unregistered"):
            registry.register(TypeDefinition("Orphan", extends=("Nowhere",)))
        assert "Orphan" not in registry

    def test_cycle_rejected(self, registry):
        registry.register(TypeDefinition("A", extends=("Object",)))
        registry.register(TypeDefinition("B", extends=("A",)))
        with pytest.raises(ValueError, match="cycle"):
            registry.register(TypeDefinition("A", extends=("B",)), force=True)
        assert registry.ancestors("A") == ("A", "Object")

    def test_not_a_definition(self, registry):
        with pytest.raises(TypeError, match="TypeDefinition"):
            registry.register({"name": "Emoji"})

    def test_unregister_extension(self, registry):
        registry.register(_emoji())
        registry.unregister("Emoji")
        assert "Emoji" not in registry

    def test_unregister_builtin_refused(self, registry):
        with pytest.raises(ValueError, match="built-in"):
            registry.unregister("Note")

    def test_unregister_unknown(self, registry):
        with pytest.raises(KeyError):
            registry.unregister("Bogus")

    def test_unregister_parent_refused(self, registry):
        registry.register(TypeDefinition("A", extends=("Object",)))
        registry.register(TypeDefinition("B", extends=("A",)))
        with pytest.raises(ValueError, match="extended by B"):
            registry.unregister("A")

    def test_duplicate_builtin_definitions(self):
        with pytest.raises(ValueError, match="defined twice"):
            TypeRegistry([TypeDefinition("Object"), TypeDefinition("Object")])

    def test_concurrent_registration(self, registry):
        names = [f"Custom{i}" for i in range(16)]
        threads = [
            threading.Thread(
                target=registry.register,
                args=(TypeDefinition(name, extends=("Object",)),),
            )
            for name in names
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert set(names) <= set(registry.names())


class TestConfiguration:
    def test_default_policy(self, registry):
        assert registry.functional_array_policy == "first"

    def test_invalid_policy(self):
        with pytest.raises(ValueError, match="functional_array_policy"):
            TypeRegistry(functional_array_policy="last")

    def test_default_registry_is_shared(self):
        assert default_registry() is default_registry()
        assert "Note" in default_registry()
