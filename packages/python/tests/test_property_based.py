"""
Property-based tests for lossless round trips using Hypothesis.

Documents are generated in canonical form (single values bare, several
values as lists, no empty lists), for which
``serialize(deserialize(doc)) == doc`` must hold exactly, including
arbitrary extension keys the vocabulary does not define.
"""

from datetime import timedelta, timezone

from hypothesis import given, settings
from hypothesis import strategies as st

from asvocab.codecs import CODECS, DATE_TIME, DURATION, FLOAT, IRI
from asvocab.registry import TypeRegistry

REGISTRY = TypeRegistry()

# ═══════════════════════════════════════════════════════════════════
# Custom Hypothesis Strategies
# ═══════════════════════════════════════════════════════════════════

_iris = st.builds(
    "https://{}.example/{}".format,
    st.sampled_from(["social", "other", "mastodon"]),
    st.text(alphabet="abcdefghij0123456789", min_size=1, max_size=8),
)

_json_values = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=10),
    lambda children: st.lists(children, max_size=3)
    | st.dictionaries(st.text(max_size=5), children, max_size=3),
    max_leaves=8,
)

# Extension keys never collide with vocabulary property names.
_extension_keys = st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8).map(
    lambda s: "x_" + s
)


def _canonical(values):
    return values[0] if len(values) == 1 else values


@st.composite
def notes(draw):
    """Generate a canonical Note document."""
    doc = {"type": "Note"}
    if draw(st.booleans()):
        doc["id"] = draw(_iris)
    content = draw(st.lists(st.text(max_size=20), max_size=3))
    if content:
        doc["content"] = _canonical(content)
    if draw(st.booleans()):
        doc["contentMap"] = draw(
            st.dictionaries(st.sampled_from(["en", "fr", "de", "ja"]), st.text(max_size=10))
        )
    to = draw(st.lists(_iris, max_size=4))
    if to:
        doc["to"] = _canonical(to)
    doc.update(draw(st.dictionaries(_extension_keys, _json_values, max_size=3)))
    return doc


@st.composite
def creates(draw):
    """Generate a canonical Create document embedding Notes."""
    doc = {"type": "Create", "actor": draw(_iris)}
    objects = draw(st.lists(st.one_of(notes(), _iris), min_size=1, max_size=3))
    doc["object"] = _canonical(objects)
    return doc


# ═══════════════════════════════════════════════════════════════════
# Round-trip properties
# ═══════════════════════════════════════════════════════════════════


@given(notes())
@settings(max_examples=200)
def test_note_round_trip_is_lossless(doc):
    assert REGISTRY.deserialize(doc).serialize() == doc


@given(creates())
@settings(max_examples=100)
def test_embedded_round_trip_is_lossless(doc):
    assert REGISTRY.deserialize(doc).serialize() == doc


@given(creates())
@settings(max_examples=100)
def test_reserialized_entity_equal(doc):
    entity = REGISTRY.deserialize(doc)
    assert REGISTRY.deserialize(entity.serialize()) == entity


@given(st.lists(_iris, max_size=5))
def test_arity_folding(values):
    serialized = REGISTRY.deserialize({"type": "Note", "to": values}).serialize()
    if not values:
        assert "to" not in serialized
    elif len(values) == 1:
        assert serialized["to"] == values[0]
    else:
        assert serialized["to"] == values


@given(st.timedeltas(min_value=-timedelta(days=3650), max_value=timedelta(days=3650)))
def test_duration_round_trip(value):
    codec = CODECS[DURATION]
    assert codec.deserialize(codec.serialize(value)) == value


@given(st.datetimes(timezones=st.just(timezone.utc)))
def test_date_time_round_trip(value):
    codec = CODECS[DATE_TIME]
    assert codec.deserialize(codec.serialize(value)) == value


# ═══════════════════════════════════════════════════════════════════
# Out-of-range scalars never break deserialization
# ═══════════════════════════════════════════════════════════════════


@given(st.integers(min_value=-(10**400), max_value=10**400) | st.floats(allow_nan=False))
def test_any_latitude_deserializes(value):
    place = REGISTRY.deserialize({"type": "Place", "latitude": value})
    variant = place.get("latitude")
    if variant.is_unknown:
        assert place.serialize()["latitude"] == value
    else:
        assert variant.kind == FLOAT
        assert variant.value == float(value)


@given(
    st.builds(
        "P{}{}".format,
        st.integers(min_value=0, max_value=10**12),
        st.sampled_from(["Y", "M", "D"]),
    )
)
def test_any_duration_deserializes(raw):
    note = REGISTRY.deserialize({"type": "Note", "duration": raw})
    variant = note.get("duration")
    assert variant.kind in (DURATION, IRI)
    if variant.kind == IRI:
        assert note.serialize()["duration"] == raw
