"""
VocabularyProcessor: one object bundling a type registry, resource
limits, and the document, JSON-LD, and CBOR helpers.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from asvocab import cbor, expansion, streams
from asvocab._constants import ACTIVITYSTREAMS_CONTEXT_URL
from asvocab.catalog import TypeDefinition
from asvocab.entity import VocabularyEntity
from asvocab.limits import enforce_resource_limits, resolve_limits
from asvocab.registry import TypeRegistry, default_registry


class VocabularyProcessor:
    """ActivityStreams processor with resource-limit enforcement."""

    def __init__(
        self,
        registry: Optional[TypeRegistry] = None,
        resource_limits: Optional[dict[str, int]] = None,
    ):
        self.registry = registry or default_registry()
        self._limits = resolve_limits(resource_limits)

    @property
    def resource_limits(self) -> dict[str, int]:
        return dict(self._limits)

    # ── Types ────────────────────────────────────────────────────

    def new(self, name: str) -> VocabularyEntity:
        """Construct an empty entity of type *name*."""
        return self.registry.new(name)

    def register_type(self, definition: TypeDefinition, *, force: bool = False) -> None:
        self.registry.register(definition, force=force)

    # ── Documents ────────────────────────────────────────────────

    def deserialize(
        self, document: Union[str, bytes, dict[str, Any]], *, kind: Optional[str] = None
    ) -> VocabularyEntity:
        """Deserialize a document or JSON text within resource limits."""
        parsed = enforce_resource_limits(document, self._limits)
        if not isinstance(parsed, dict):
            raise TypeError(
                f"Top-level JSON value must be an object, got: {type(parsed).__name__}"
            )
        return self.registry.deserialize(parsed, kind=kind)

    def serialize(
        self, entity: VocabularyEntity, context: Any = ACTIVITYSTREAMS_CONTEXT_URL
    ) -> dict[str, Any]:
        """Serialize *entity* as a top-level document with ``@context``."""
        return streams.to_document(entity, context)

    def to_json(self, entity: VocabularyEntity, **dumps_kwargs: Any) -> str:
        return streams.to_json(entity, **dumps_kwargs)

    def resolver(
        self, callbacks: Mapping[str, Callable[[VocabularyEntity], Any]]
    ) -> streams.JSONResolver:
        """Build a :class:`~asvocab.streams.JSONResolver` on this registry."""
        return streams.JSONResolver(callbacks, registry=self.registry)

    # ── JSON-LD ──────────────────────────────────────────────────

    def context(self) -> dict[str, Any]:
        return expansion.activitystreams_context(self.registry)

    def expand(self, source: Union[VocabularyEntity, dict[str, Any]]) -> list[dict[str, Any]]:
        """Expand with resource limit enforcement."""
        if isinstance(source, dict):
            enforce_resource_limits(source, self._limits)
        return expansion.expand(source, registry=self.registry)

    def to_rdf(self, source: Union[VocabularyEntity, dict[str, Any]]) -> str:
        """Convert to N-Quads."""
        if isinstance(source, dict):
            enforce_resource_limits(source, self._limits)
        return expansion.to_rdf(source, registry=self.registry)

    def compact_to_entity(self, expanded: Union[list[Any], dict[str, Any]]) -> VocabularyEntity:
        enforce_resource_limits(expanded, self._limits)
        return expansion.compact_to_entity(expanded, registry=self.registry)

    # ── CBOR ─────────────────────────────────────────────────────

    def to_cbor(self, entity: VocabularyEntity) -> bytes:
        return cbor.to_cbor(entity)

    def from_cbor(self, data: bytes) -> VocabularyEntity:
        return cbor.from_cbor(data, registry=self.registry)
