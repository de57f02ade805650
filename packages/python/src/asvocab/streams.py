"""
Document-level helpers for ActivityStreams payloads.

Turns whole JSON documents into entities by their ``type`` tags,
writes entities back out as documents with an ``@context``, and
dispatches documents to per-type callbacks.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping, Optional

from asvocab._constants import ACTIVITYSTREAMS_CONTEXT_URL, CONTEXT_KEY, TYPE_KEY
from asvocab.entity import UnhandledTypeError, VocabularyEntity, VocabularyError
from asvocab.limits import enforce_resource_limits
from asvocab.registry import TypeRegistry, default_registry
from asvocab.variant import type_tags


class NoCallbackMatchError(VocabularyError):
    """A document resolved to a type that has no registered callback."""


def deserialize(
    document: Mapping[str, Any],
    *,
    registry: Optional[TypeRegistry] = None,
    kind: Optional[str] = None,
) -> VocabularyEntity:
    """Build an entity from *document* using its first known ``type`` tag.

    Raises
    ------
    UnhandledTypeError
        If no tag names a type of *registry*.
    VocabularyError
        If the document is structurally incompatible with that type.
    """
    return (registry or default_registry()).deserialize(document, kind=kind)


def to_document(
    entity: VocabularyEntity,
    context: Any = ACTIVITYSTREAMS_CONTEXT_URL,
) -> dict[str, Any]:
    """Serialize *entity* as a top-level document.

    ``@context`` comes first; pass ``context=None`` to omit it.
    """
    body = entity.serialize()
    if context is None:
        return body
    return {CONTEXT_KEY: context, **body}


def to_json(
    entity: VocabularyEntity,
    context: Any = ACTIVITYSTREAMS_CONTEXT_URL,
    **dumps_kwargs: Any,
) -> str:
    """Serialize *entity* to JSON text (see :func:`to_document`)."""
    return json.dumps(to_document(entity, context), **dumps_kwargs)


def from_json(
    text: str | bytes,
    *,
    registry: Optional[TypeRegistry] = None,
    limits: Optional[dict[str, int]] = None,
) -> VocabularyEntity:
    """Parse JSON *text* within resource *limits* and deserialize it."""
    document = enforce_resource_limits(text, limits)
    if not isinstance(document, dict):
        raise TypeError(
            f"Top-level JSON value must be an object, got: {type(document).__name__}"
        )
    return deserialize(document, registry=registry)


# ── Type predicates ────────────────────────────────────────────────


def has_type(entity: VocabularyEntity, name: str) -> bool:
    """``True`` when *name* is literally one of the entity's type tags."""
    return entity.has_type(name)


def is_or_extends(
    entity: VocabularyEntity,
    name: str,
    registry: Optional[TypeRegistry] = None,
) -> bool:
    """``True`` when the entity's type is *name* or one of its descendants."""
    return (registry or entity.registry).satisfies(entity.type_name, name)


# ═══════════════════════════════════════════════════════════════════
# CALLBACK DISPATCH
# ═══════════════════════════════════════════════════════════════════


class JSONResolver:
    """Dispatch documents to callbacks keyed by vocabulary type name.

    The first ``type`` tag of a document known to the registry decides
    the entity type; the callback registered under that exact name is
    called with the deserialized entity and its result returned.

    Example::

        resolver = JSONResolver({
            "Create": handle_create,
            "Follow": handle_follow,
        })
        resolver.resolve(document)
    """

    def __init__(
        self,
        callbacks: Optional[Mapping[str, Callable[[VocabularyEntity], Any]]] = None,
        *,
        registry: Optional[TypeRegistry] = None,
    ) -> None:
        self._registry = registry or default_registry()
        self._callbacks: dict[str, Callable[[VocabularyEntity], Any]] = {}
        for name, callback in (callbacks or {}).items():
            self.register(name, callback)

    def register(
        self,
        name: str,
        callback: Callable[[VocabularyEntity], Any],
        *,
        force: bool = False,
    ) -> None:
        """Register *callback* for entities of type *name*.

        Raises
        ------
        TypeError
            If *callback* is not callable.
        KeyError
            If *name* is not a registered type.
        ValueError
            If *name* already has a callback and *force* is not set.
        """
        if not callable(callback):
            raise TypeError(f"Callback for '{name}' must be callable")
        if name not in self._registry:
            raise KeyError(
                f"No vocabulary type registered as '{name}'. "
                f"Available: {self._registry.names()}"
            )
        if not force and name in self._callbacks:
            raise ValueError(
                f"Callback for '{name}' already registered. Pass force=True to override."
            )
        self._callbacks[name] = callback

    def resolve(self, document: Mapping[str, Any]) -> Any:
        """Deserialize *document* and hand it to its type's callback.

        Raises
        ------
        UnhandledTypeError
            If no ``type`` tag names a registered type.
        NoCallbackMatchError
            If the resolved type has no callback.
        """
        if not isinstance(document, dict):
            raise TypeError(
                f"Document must be a dict, got: {type(document).__name__}"
            )
        tags = type_tags(document.get(TYPE_KEY))
        name = next((tag for tag in tags if tag in self._registry), None)
        if name is None:
            raise UnhandledTypeError(
                f"Cannot determine vocabulary type from type tags {tags!r}"
            )
        callback = self._callbacks.get(name)
        if callback is None:
            raise NoCallbackMatchError(f"No callback registered for type '{name}'")
        return callback(self._registry.deserialize(document, kind=name))
