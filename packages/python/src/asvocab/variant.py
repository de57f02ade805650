"""
Generic property-value resolver.

A property value is held as a :class:`PropertyVariant`: a *kind* tag
(a capability such as ``"Object"``, a codec name such as ``"dateTime"``,
or ``"unknown"``) plus the native value.  One resolver, driven by a
:class:`~asvocab.properties.PropertySpec`, turns raw JSON into variants
and back for every property in the vocabulary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from asvocab._constants import TYPE_KEY, UNKNOWN
from asvocab.codecs import (
    CODECS,
    IRI_CODECS,
    unknown_value_deserialize,
    unknown_value_serialize,
)
from asvocab.properties import PropertySpec

if TYPE_CHECKING:
    from asvocab.registry import TypeRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PropertyVariant:
    """One immutable value of a property.

    Attributes
    ----------
    kind:
        Which alternative of the property's union is populated.
    value:
        The native value: an entity, a codec's native type, or an
        arbitrary JSON value when *kind* is ``"unknown"``.
    """

    kind: str
    value: Any = None

    @property
    def is_unknown(self) -> bool:
        return self.kind == UNKNOWN

    @property
    def is_iri(self) -> bool:
        return self.kind in IRI_CODECS

    @property
    def is_entity(self) -> bool:
        return self.kind != UNKNOWN and self.kind not in CODECS


def type_tags(value: Any) -> list[str]:
    """Return the string tags of a raw ``type`` value, in order."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [tag for tag in value if isinstance(tag, str)]
    return []


def deserialize_variant(
    spec: PropertySpec, raw: Any, registry: TypeRegistry
) -> PropertyVariant:
    """Resolve one raw JSON element of property *spec*.

    1. A map with a ``type`` key: for each of its tags in order, the
       first capability of *spec* the tag satisfies wins, and the map is
       deserialized into a fresh entity of that type.  Failures inside
       the embedded entity propagate.
    2. Any other map is kept verbatim as an unknown value.
    3. A non-null scalar or list: the first codec of *spec* that parses
       it wins.
    4. Otherwise the value is kept verbatim as an unknown value.
    """
    if isinstance(raw, dict):
        if TYPE_KEY in raw:
            for tag in type_tags(raw[TYPE_KEY]):
                for capability in spec.capabilities:
                    entity = registry.resolve_as_capability(tag, capability)
                    if entity is not None:
                        entity.deserialize(raw)
                        return PropertyVariant(capability, entity)
            logger.debug(
                "No %s capability matches type %r; keeping value as unknown",
                spec.name,
                raw[TYPE_KEY],
            )
        return PropertyVariant(UNKNOWN, unknown_value_deserialize(raw))

    if raw is not None:
        for name in spec.codecs:
            try:
                value = CODECS[name].deserialize(raw)
            except (TypeError, ValueError):
                continue
            return PropertyVariant(name, value)

    return PropertyVariant(UNKNOWN, unknown_value_deserialize(raw))


def serialize_variant(variant: PropertyVariant) -> Any:
    """Inverse of :func:`deserialize_variant` for one variant."""
    if variant.is_unknown:
        return unknown_value_serialize(variant.value)
    codec = CODECS.get(variant.kind)
    if codec is not None:
        return codec.serialize(variant.value)
    return variant.value.serialize()
