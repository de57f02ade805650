"""
Vocabulary entities.

A :class:`VocabularyEntity` is one instance of a vocabulary type
(``Note``, ``Create``, ``OrderedCollectionPage``, ...).  It holds:

* one slot per effective property of its type, each an ordered list of
  :class:`~asvocab.variant.PropertyVariant` plus, for natural-language
  properties, an optional language map;
* the raw ``type`` tag sequence;
* an *unknown* map carrying every key the type does not define, so
  extensions survive a deserialize/serialize round trip.

Entities are built by :class:`asvocab.registry.TypeRegistry` and are
not safe for concurrent mutation.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional

from asvocab._constants import (
    CONTEXT_KEY,
    FUNCTIONAL_ARRAY_ERROR,
    TYPE_KEY,
    UNKNOWN,
)
from asvocab.catalog import TypeDefinition
from asvocab.codecs import (
    CODECS,
    unknown_value_deserialize,
    unknown_value_serialize,
)
from asvocab.properties import PropertySpec
from asvocab.variant import PropertyVariant, deserialize_variant, serialize_variant

if TYPE_CHECKING:
    from asvocab.registry import TypeRegistry

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════


class VocabularyError(ValueError):
    """A document is structurally incompatible with its vocabulary type.

    The message is prefixed with the ``Type.property`` path of every
    enclosing entity, outermost first.
    """


class UnhandledTypeError(VocabularyError):
    """No ``type`` tag of a document names a registered vocabulary type."""


# ═══════════════════════════════════════════════════════════════════
# DATA STRUCTURES
# ═══════════════════════════════════════════════════════════════════


@dataclass
class PropertySlot:
    """Stored state of one property of an entity."""

    spec: PropertySpec
    variants: list[PropertyVariant] = field(default_factory=list)
    language_map: Optional[dict[str, str]] = None

    @property
    def is_empty(self) -> bool:
        return not self.variants and self.language_map is None


def _is_language_map(value: Any) -> bool:
    return isinstance(value, dict) and all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    )


# ═══════════════════════════════════════════════════════════════════
# ENTITY
# ═══════════════════════════════════════════════════════════════════


class VocabularyEntity:
    """One instance of a vocabulary type.

    Use :meth:`TypeRegistry.new` or :meth:`TypeRegistry.deserialize`
    rather than constructing directly.

    Accessors raise ``KeyError`` for property names the type does not
    define, ``ValueError`` for functional/non-functional misuse, and
    ``TypeError`` for values no legal kind of the property accepts.
    """

    def __init__(self, definition: TypeDefinition, registry: TypeRegistry) -> None:
        self._definition = definition
        self._registry = registry
        self._specs: Mapping[str, PropertySpec] = registry.properties_of(
            definition.name
        )
        self._slots = self._empty_slots()
        self._types: list[Any] = []
        self._unknown: dict[str, Any] = {}

    def _empty_slots(self) -> dict[str, PropertySlot]:
        return {name: PropertySlot(spec) for name, spec in self._specs.items()}

    # ── Introspection ────────────────────────────────────────────

    @property
    def type_name(self) -> str:
        """Canonical name of this entity's vocabulary type."""
        return self._definition.name

    @property
    def definition(self) -> TypeDefinition:
        return self._definition

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def property_names(self) -> list[str]:
        """Effective property names of this type, in declared order."""
        return list(self._specs)

    def property_spec(self, name: str) -> PropertySpec:
        """Return the configuration of property *name*.

        Raises
        ------
        KeyError
            If this type has no property *name*.
        """
        try:
            return self._specs[name]
        except KeyError:
            raise KeyError(
                f"Type '{self.type_name}' has no property '{name}'"
            ) from None

    def satisfies(self, capability: str) -> bool:
        """``True`` when this entity's type is, or extends, *capability*."""
        return self._registry.satisfies(self.type_name, capability)

    # ── Property values ──────────────────────────────────────────

    def has(self, name: str) -> bool:
        """``True`` when property *name* holds a value or a language map."""
        self.property_spec(name)
        return not self._slots[name].is_empty

    def count(self, name: str) -> int:
        self.property_spec(name)
        return len(self._slots[name].variants)

    def values(self, name: str) -> list[PropertyVariant]:
        """Return a copy of the variant list of property *name*.

        Variants are immutable; use :meth:`set`, :meth:`append` or
        :meth:`remove` to change the stored values.
        """
        self.property_spec(name)
        return list(self._slots[name].variants)

    def get(self, name: str, index: int = 0) -> Optional[PropertyVariant]:
        """Return variant *index* of property *name*, or ``None`` if absent."""
        self.property_spec(name)
        variants = self._slots[name].variants
        if -len(variants) <= index < len(variants):
            return variants[index]
        return None

    def get_value(self, name: str, index: int = 0) -> Any:
        """Return the native value of variant *index*, or ``None``."""
        variant = self.get(name, index)
        return None if variant is None else variant.value

    def set(self, name: str, value: Any, kind: Optional[str] = None) -> None:
        """Replace the single value of functional property *name*.

        *kind* selects the alternative explicitly; otherwise an entity
        takes the first capability its type satisfies and any other
        value the first codec that accepts it.  Pass ``kind="unknown"``
        (or a :class:`PropertyVariant`) to store an arbitrary JSON value.
        """
        spec = self.property_spec(name)
        if not spec.functional:
            raise ValueError(
                f"Property '{name}' is not functional; use append() or prepend()"
            )
        self._slots[name].variants = [self._coerce(spec, value, kind)]

    def append(self, name: str, value: Any, kind: Optional[str] = None) -> None:
        """Add a value at the end of non-functional property *name*."""
        spec = self._non_functional(name)
        self._slots[name].variants.append(self._coerce(spec, value, kind))

    def prepend(self, name: str, value: Any, kind: Optional[str] = None) -> None:
        """Add a value at the start of non-functional property *name*."""
        spec = self._non_functional(name)
        self._slots[name].variants.insert(0, self._coerce(spec, value, kind))

    def remove(self, name: str, index: int) -> PropertyVariant:
        """Remove and return variant *index* of property *name*.

        Raises
        ------
        IndexError
            If *index* is out of range.
        """
        self.property_spec(name)
        variants = self._slots[name].variants
        try:
            return variants.pop(index)
        except IndexError:
            raise IndexError(
                f"Property '{name}' has {len(variants)} values, no index {index}"
            ) from None

    def clear(self, name: str) -> None:
        """Remove every value of property *name*; its language map stays."""
        self.property_spec(name)
        self._slots[name].variants = []

    def _non_functional(self, name: str) -> PropertySpec:
        spec = self.property_spec(name)
        if spec.functional:
            raise ValueError(f"Property '{name}' is functional; use set()")
        return spec

    def _coerce(self, spec: PropertySpec, value: Any, kind: Optional[str]) -> PropertyVariant:
        if isinstance(value, PropertyVariant):
            if kind is not None and kind != value.kind:
                raise ValueError(
                    f"Variant kind '{value.kind}' conflicts with kind '{kind}'"
                )
            kind, value = value.kind, value.value
        if kind is None:
            kind = self._infer_kind(spec, value)
        elif kind not in spec.kinds:
            raise ValueError(
                f"Property '{spec.name}' does not accept kind '{kind}'. "
                f"Legal kinds: {list(spec.kinds)}"
            )

        if kind == UNKNOWN:
            return PropertyVariant(UNKNOWN, unknown_value_deserialize(value))
        codec = CODECS.get(kind)
        if codec is not None:
            if not codec.accepts(value):
                raise TypeError(
                    f"{value!r} is not a legal {kind} value for '{spec.name}'"
                )
            return PropertyVariant(kind, value)
        if not isinstance(value, VocabularyEntity) or not self._registry.satisfies(
            value.type_name, kind
        ):
            raise TypeError(
                f"{value!r} does not satisfy capability '{kind}' for '{spec.name}'"
            )
        return PropertyVariant(kind, value)

    def _infer_kind(self, spec: PropertySpec, value: Any) -> str:
        if isinstance(value, VocabularyEntity):
            for capability in spec.capabilities:
                if self._registry.satisfies(value.type_name, capability):
                    return capability
        else:
            for name in spec.codecs:
                if CODECS[name].accepts(value):
                    return name
        raise TypeError(
            f"{value!r} matches no legal kind of '{spec.name}' "
            f"({', '.join(spec.kinds)}); pass kind='unknown' to keep it verbatim"
        )

    # ── Natural-language maps ────────────────────────────────────

    def _language_spec(self, name: str) -> PropertySpec:
        spec = self.property_spec(name)
        if not spec.natural_language_map:
            raise ValueError(f"Property '{name}' has no natural-language map")
        return spec

    def language_map(self, name: str) -> Optional[dict[str, str]]:
        """Return a copy of the ``<name>Map`` of property *name*, or ``None``."""
        self._language_spec(name)
        current = self._slots[name].language_map
        return None if current is None else dict(current)

    def set_language(self, name: str, tag: str, text: str) -> None:
        """Set one language-tagged alternative of property *name*."""
        self._language_spec(name)
        if not isinstance(tag, str) or not isinstance(text, str):
            raise TypeError("Language tag and text must both be strings")
        slot = self._slots[name]
        if slot.language_map is None:
            slot.language_map = {}
        slot.language_map[tag] = text

    def set_language_map(self, name: str, mapping: Mapping[str, str]) -> None:
        """Replace the whole ``<name>Map`` of property *name*."""
        self._language_spec(name)
        if not _is_language_map(dict(mapping)):
            raise TypeError(
                f"Language map of '{name}' must map string tags to strings"
            )
        self._slots[name].language_map = dict(mapping)

    def clear_language_map(self, name: str) -> None:
        self._language_spec(name)
        self._slots[name].language_map = None

    # ── Type tags ────────────────────────────────────────────────

    @property
    def type_tags(self) -> list[Any]:
        """Copy of the raw ``type`` tag sequence."""
        return list(self._types)

    def has_type(self, tag: str) -> bool:
        return tag in self._types

    def add_type(self, tag: str) -> None:
        """Append *tag* to the ``type`` sequence unless already present."""
        if tag not in self._types:
            self._types.append(tag)

    def clear_types(self) -> None:
        self._types = []

    # ── Unknown fields ───────────────────────────────────────────

    @property
    def unknown_fields(self) -> dict[str, Any]:
        """Copy of the keys this type does not define, as stored."""
        return unknown_value_serialize(self._unknown)

    def has_unknown(self, key: str) -> bool:
        return key in self._unknown

    def get_unknown(self, key: str, default: Any = None) -> Any:
        if key not in self._unknown:
            return default
        return unknown_value_serialize(self._unknown[key])

    def set_unknown(self, key: str, value: Any) -> None:
        """Store an extension value emitted verbatim on serialize.

        A known property of the same name, when populated, overrides the
        unknown value in the output.
        """
        if not isinstance(key, str):
            raise TypeError(f"Unknown field key must be a string, got: {key!r}")
        if key == CONTEXT_KEY:
            raise ValueError(f"'{CONTEXT_KEY}' belongs to the document, not the entity")
        self._unknown[key] = unknown_value_deserialize(value)

    def remove_unknown(self, key: str) -> None:
        self._unknown.pop(key, None)

    # ── Deserialize ──────────────────────────────────────────────

    def deserialize(self, m: Mapping[str, Any]) -> None:
        """Populate this entity from a JSON-LD map.

        ``@context`` is ignored, ``type`` is stored as a raw tag list,
        each defined property is resolved through its configuration, a
        well-formed ``<name>Map`` goes to the language map, and every
        other key is kept verbatim in the unknown map.  State is replaced
        only when the whole map deserializes.

        Raises
        ------
        TypeError
            If *m* is not a dict.
        VocabularyError
            If a value is structurally incompatible with its property.
        """
        if not isinstance(m, dict):
            raise TypeError(f"Expected a dict, got: {type(m).__name__}")
        language_specs = {
            spec.map_name: spec
            for spec in self._specs.values()
            if spec.natural_language_map
        }
        slots = self._empty_slots()
        types: list[Any] = []
        unknown: dict[str, Any] = {}

        for key, value in m.items():
            if key == CONTEXT_KEY:
                continue
            if key == TYPE_KEY:
                types = unknown_value_deserialize(value if isinstance(value, list) else [value])
                continue
            spec = self._specs.get(key)
            if spec is not None:
                slots[key].variants = self._deserialize_property(spec, value)
                continue
            spec = language_specs.get(key)
            if spec is not None and _is_language_map(value):
                slots[spec.name].language_map = dict(value)
                continue
            unknown[key] = unknown_value_deserialize(value)

        self._slots, self._types, self._unknown = slots, types, unknown

    def _deserialize_property(self, spec: PropertySpec, raw: Any) -> list[PropertyVariant]:
        items = list(raw) if isinstance(raw, list) else [raw]
        if spec.functional and len(items) > 1:
            if self._registry.functional_array_policy == FUNCTIONAL_ARRAY_ERROR:
                raise VocabularyError(
                    f"{self.type_name}.{spec.name}: functional property "
                    f"given {len(items)} values"
                )
            logger.warning(
                "%s.%s is functional but was given %d values; keeping the first",
                self.type_name,
                spec.name,
                len(items),
            )
            items = items[:1]
        try:
            return [self._deserialize_value(spec, item) for item in items]
        except VocabularyError as exc:
            raise type(exc)(f"{self.type_name}.{spec.name}: {exc}") from exc

    def _deserialize_value(self, spec: PropertySpec, raw: Any) -> PropertyVariant:
        if spec.is_single_value and raw is not None:
            (name,) = spec.codecs
            try:
                return PropertyVariant(name, CODECS[name].deserialize(raw))
            except (TypeError, ValueError) as exc:
                raise VocabularyError(str(exc)) from exc
        return deserialize_variant(spec, raw, self._registry)

    # ── Serialize ────────────────────────────────────────────────

    def serialize(self) -> dict[str, Any]:
        """Produce the JSON-LD map of this entity.

        Unknown fields are emitted first so defined properties override
        them.  The canonical type name is appended to the ``type``
        sequence when missing (this mutates the entity); a single tag is
        emitted as a bare string.  A functional property emits its value
        or is omitted; a non-functional property emits a bare value for
        one element, a list for several, and is omitted when empty.
        ``@context`` is never emitted.
        """
        m = {key: unknown_value_serialize(value) for key, value in self._unknown.items()}

        if self.type_name not in self._types:
            self._types.append(self.type_name)
        types = unknown_value_serialize(self._types)
        m[TYPE_KEY] = types[0] if len(types) == 1 else types

        for name, spec in self._specs.items():
            slot = self._slots[name]
            try:
                values = [serialize_variant(v) for v in slot.variants]
            except VocabularyError as exc:
                raise type(exc)(f"{self.type_name}.{name}: {exc}") from exc
            if len(values) == 1 or (values and spec.functional):
                m[name] = values[0]
            elif values:
                m[name] = values
            if slot.language_map is not None:
                m[spec.map_name] = dict(slot.language_map)
        return m

    # ── Dunder methods ───────────────────────────────────────────

    def _state(self) -> dict[str, tuple[list[PropertyVariant], Optional[dict[str, str]]]]:
        return {
            name: (slot.variants, slot.language_map)
            for name, slot in self._slots.items()
            if not slot.is_empty
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VocabularyEntity):
            return NotImplemented
        return (
            self.type_name == other.type_name
            and self._types == other._types
            and self._unknown == other._unknown
            and self._state() == other._state()
        )

    __hash__ = None  # type: ignore[assignment]

    def __deepcopy__(self, memo: dict) -> VocabularyEntity:
        clone = type(self)(self._definition, self._registry)
        memo[id(self)] = clone
        clone._slots = copy.deepcopy(self._slots, memo)
        clone._types = copy.deepcopy(self._types, memo)
        clone._unknown = copy.deepcopy(self._unknown, memo)
        return clone

    def __repr__(self) -> str:
        identifier = self.get_value("id") if "id" in self._specs else None
        if identifier is None:
            return f"<{self.type_name}>"
        return f"<{self.type_name} id={identifier!r}>"
