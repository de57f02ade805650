"""Type registry for vocabulary entities.

Maps a JSON-LD ``type`` tag to a freshly constructed, empty
:class:`~asvocab.entity.VocabularyEntity` of the matching type, optionally
restricted to a capability (``Object``, ``Link``, ``Collection``, ...).
Ships preloaded with the ActivityStreams catalog and accepts extension
types at runtime.

Design principles
-----------------
* **Pure lookups**: resolution never touches the network or disk;
  unknown tags return ``None`` instead of raising.
* **Copy-on-write**: derived tables (ancestor closures, effective
  property lists) are rebuilt under a lock on registration and swapped
  in as one object, so lookups never take the lock.
* **Fail-loud registration**: duplicate names, missing parents and
  inheritance cycles raise immediately.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Literal, Mapping, Optional

from asvocab._constants import (
    FUNCTIONAL_ARRAY_FIRST,
    FUNCTIONAL_ARRAY_POLICIES,
    TYPE_KEY,
)
from asvocab.catalog import ACTIVITYSTREAMS_TYPES, TypeDefinition
from asvocab.entity import UnhandledTypeError, VocabularyEntity
from asvocab.properties import PropertySpec
from asvocab.variant import type_tags

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Tables:
    definitions: Mapping[str, TypeDefinition]
    ancestors: Mapping[str, tuple[str, ...]]
    properties: Mapping[str, Mapping[str, PropertySpec]]


class TypeRegistry:
    """Closed catalog of constructible vocabulary types.

    Parameters
    ----------
    definitions:
        Built-in types of this registry.  Defaults to the ActivityStreams
        catalog.  Built-ins can be overridden with ``force=True`` but not
        unregistered.
    functional_array_policy:
        What entities built by this registry do when a functional
        property receives an array of several values: ``"first"`` keeps
        the first element and logs a warning, ``"error"`` raises
        :class:`~asvocab.entity.VocabularyError`.
    """

    def __init__(
        self,
        definitions: Iterable[TypeDefinition] = ACTIVITYSTREAMS_TYPES,
        *,
        functional_array_policy: Literal["first", "error"] = FUNCTIONAL_ARRAY_FIRST,
    ) -> None:
        if functional_array_policy not in FUNCTIONAL_ARRAY_POLICIES:
            raise ValueError(
                f"Unknown functional_array_policy {functional_array_policy!r}. "
                f"Supported: {', '.join(FUNCTIONAL_ARRAY_POLICIES)}"
            )
        self.functional_array_policy = functional_array_policy
        self._lock = threading.RLock()

        staged: dict[str, TypeDefinition] = {}
        for definition in definitions:
            if definition.name in staged:
                raise ValueError(f"Type '{definition.name}' is defined twice")
            staged[definition.name] = definition
        self._builtin = frozenset(staged)
        self._tables = _build_tables(staged)

    # ── Registration ─────────────────────────────────────────────

    def register(self, definition: TypeDefinition, *, force: bool = False) -> None:
        """Add an extension type.

        Raises
        ------
        TypeError
            If *definition* is not a :class:`TypeDefinition`.
        ValueError
            If the name is already registered without *force*, a parent
            is not registered, or the inheritance graph has a cycle.
        """
        if not isinstance(definition, TypeDefinition):
            raise TypeError(
                f"Expected a TypeDefinition, got: {type(definition).__name__}"
            )
        with self._lock:
            current = dict(self._tables.definitions)
            if not force and definition.name in current:
                raise ValueError(
                    f"Type '{definition.name}' is already registered. "
                    "Pass force=True to override."
                )
            current[definition.name] = definition
            self._tables = _build_tables(current)
        logger.debug("Registered vocabulary type %s", definition.name)

    def unregister(self, name: str) -> None:
        """Remove an extension type.

        Raises
        ------
        KeyError
            If *name* is not registered.
        ValueError
            If *name* is built in, or other registered types extend it.
        """
        with self._lock:
            current = dict(self._tables.definitions)
            if name not in current:
                raise KeyError(f"No vocabulary type registered as '{name}'")
            if name in self._builtin:
                raise ValueError(f"Cannot unregister built-in type '{name}'")
            children = sorted(n for n, d in current.items() if name in d.extends)
            if children:
                raise ValueError(
                    f"Cannot unregister '{name}': extended by {', '.join(children)}"
                )
            del current[name]
            self._tables = _build_tables(current)
        logger.debug("Unregistered vocabulary type %s", name)

    # ── Lookups ──────────────────────────────────────────────────

    def get(self, name: str) -> Optional[TypeDefinition]:
        return self._tables.definitions.get(name)

    def names(self) -> list[str]:
        """Return a sorted snapshot of every registered type name."""
        return sorted(self._tables.definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._tables.definitions

    def ancestors(self, name: str) -> tuple[str, ...]:
        """Return *name* followed by all its transitive parents.

        Raises
        ------
        KeyError
            If *name* is not registered.
        """
        try:
            return self._tables.ancestors[name]
        except KeyError:
            raise KeyError(f"No vocabulary type registered as '{name}'") from None

    def satisfies(self, name: Any, capability: str) -> bool:
        """``True`` when type *name* is, or extends, *capability*."""
        chain = self._tables.ancestors.get(name) if isinstance(name, str) else None
        return chain is not None and capability in chain

    def properties_of(self, name: str) -> Mapping[str, PropertySpec]:
        """Return the effective properties of *name*, keyed by JSON name.

        Own properties come first, then each parent's in declared order;
        the first definition of a name wins and names in ``without`` are
        dropped.

        Raises
        ------
        KeyError
            If *name* is not registered.
        """
        try:
            return self._tables.properties[name]
        except KeyError:
            raise KeyError(f"No vocabulary type registered as '{name}'") from None

    # ── Construction ─────────────────────────────────────────────

    def new(self, name: str) -> VocabularyEntity:
        """Construct an empty entity of type *name*.

        Raises
        ------
        KeyError
            If *name* is not registered.
        """
        definition = self._tables.definitions.get(name)
        if definition is None:
            raise KeyError(
                f"No vocabulary type registered as '{name}'. "
                f"Available: {self.names()}"
            )
        return VocabularyEntity(definition, self)

    def resolve(self, tag: Any) -> Optional[VocabularyEntity]:
        """Construct an empty entity for *tag*, or ``None`` if unknown."""
        if not isinstance(tag, str) or tag not in self._tables.definitions:
            return None
        return self.new(tag)

    def resolve_as_capability(
        self, tag: Any, capability: str
    ) -> Optional[VocabularyEntity]:
        """Construct an empty entity for *tag* if it satisfies *capability*.

        Returns ``None`` for unknown tags and for known tags that are
        not, and do not extend, *capability*.
        """
        if not self.satisfies(tag, capability):
            return None
        return self.new(tag)

    def deserialize(
        self, document: Mapping[str, Any], *, kind: Optional[str] = None
    ) -> VocabularyEntity:
        """Build an entity from a whole document.

        With *kind*, the document is deserialized into that type.
        Otherwise the first ``type`` tag known to this registry decides.

        Raises
        ------
        TypeError
            If *document* is not a dict.
        UnhandledTypeError
            If no ``type`` tag names a registered type.
        KeyError
            If *kind* is given and not registered.
        """
        if not isinstance(document, dict):
            raise TypeError(
                f"Document must be a dict, got: {type(document).__name__}"
            )
        if kind is not None:
            entity = self.new(kind)
        else:
            tags = type_tags(document.get(TYPE_KEY))
            entity = next(
                (e for e in map(self.resolve, tags) if e is not None), None
            )
            if entity is None:
                raise UnhandledTypeError(
                    f"Cannot determine vocabulary type from type tags {tags!r}"
                )
        entity.deserialize(document)
        return entity


# ═══════════════════════════════════════════════════════════════════
# DERIVED TABLES
# ═══════════════════════════════════════════════════════════════════


def _build_tables(definitions: dict[str, TypeDefinition]) -> _Tables:
    for definition in definitions.values():
        missing = [p for p in definition.extends if p not in definitions]
        if missing:
            raise ValueError(
                f"Type '{definition.name}' extends unregistered types: {missing}"
            )

    ancestors: dict[str, tuple[str, ...]] = {}
    properties: dict[str, Mapping[str, PropertySpec]] = {}
    effective: dict[str, tuple[PropertySpec, ...]] = {}

    def chain(name: str, visiting: tuple[str, ...]) -> tuple[str, ...]:
        if name in ancestors:
            return ancestors[name]
        if name in visiting:
            raise ValueError(
                f"Inheritance cycle: {' -> '.join(visiting + (name,))}"
            )
        result = [name]
        for parent in definitions[name].extends:
            for ancestor in chain(parent, visiting + (name,)):
                if ancestor not in result:
                    result.append(ancestor)
        ancestors[name] = tuple(result)
        return ancestors[name]

    def props(name: str) -> tuple[PropertySpec, ...]:
        if name in effective:
            return effective[name]
        definition = definitions[name]
        omit = set(definition.without)
        inherited = [spec for parent in definition.extends for spec in props(parent)]
        seen: set[str] = set()
        result = []
        for spec in (*definition.properties, *inherited):
            if spec.name in omit or spec.name in seen:
                continue
            seen.add(spec.name)
            result.append(spec)
        effective[name] = tuple(result)
        return effective[name]

    for name in definitions:
        chain(name, ())
        properties[name] = MappingProxyType({s.name: s for s in props(name)})

    return _Tables(
        definitions=MappingProxyType(dict(definitions)),
        ancestors=MappingProxyType(ancestors),
        properties=MappingProxyType(properties),
    )


# ═══════════════════════════════════════════════════════════════════
# DEFAULT REGISTRY
# ═══════════════════════════════════════════════════════════════════

_default: Optional[TypeRegistry] = None
_default_lock = threading.Lock()


def default_registry() -> TypeRegistry:
    """Return the process-wide registry preloaded with ActivityStreams."""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = TypeRegistry()
    return _default


def register_type(definition: TypeDefinition, *, force: bool = False) -> None:
    """Register an extension type with the default registry."""
    default_registry().register(definition, force=force)


def unregister_type(name: str) -> None:
    """Remove an extension type from the default registry."""
    default_registry().unregister(name)
