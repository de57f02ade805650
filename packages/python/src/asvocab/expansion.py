"""
JSON-LD processing of vocabulary entities via PyLD.

The ActivityStreams context is generated from a
:class:`~asvocab.registry.TypeRegistry` and passed inline, so expansion,
compaction and RDF conversion never fetch anything over the network.
Extension types registered at runtime get terms automatically.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pyld import jsonld

from asvocab._constants import ACTIVITYSTREAMS_NS, CONTEXT_KEY, TYPE_KEY, XSD
from asvocab.codecs import (
    DATE_TIME,
    DURATION,
    IRI_CODECS,
    NON_NEGATIVE_INTEGER,
)
from asvocab.entity import VocabularyEntity
from asvocab.properties import PropertySpec
from asvocab.registry import TypeRegistry, default_registry

_XSD_TYPES = {
    DATE_TIME: XSD + "dateTime",
    DURATION: XSD + "duration",
    NON_NEGATIVE_INTEGER: XSD + "nonNegativeInteger",
}

_ID_KEY = "id"


def _term_type(spec: PropertySpec) -> Optional[str]:
    if spec.capabilities or all(c in IRI_CODECS for c in spec.codecs):
        return "@id"
    return _XSD_TYPES.get(spec.codecs[0]) if spec.codecs else None


def activitystreams_context(registry: Optional[TypeRegistry] = None) -> dict[str, Any]:
    """Build the inline ``@context`` value for *registry*.

    ``@vocab`` is the ActivityStreams namespace, ``id``/``type`` alias
    ``@id``/``@type``, properties holding entities or IRIs are coerced
    to ``@id``, date/duration/count properties carry their XSD datatype,
    every ``<name>Map`` term is a ``@language`` container, and types
    with an IRI outside the ActivityStreams namespace get their own term.
    """
    registry = registry or default_registry()
    context: dict[str, Any] = {
        "@vocab": ACTIVITYSTREAMS_NS,
        _ID_KEY: "@id",
        TYPE_KEY: "@type",
    }
    for name in registry.names():
        definition = registry.get(name)
        if definition.uri != ACTIVITYSTREAMS_NS + name and name not in context:
            context[name] = definition.uri
        for spec in registry.properties_of(name).values():
            if spec.name in context:
                continue
            term: dict[str, Any] = {"@id": spec.uri}
            term_type = _term_type(spec)
            if term_type is not None:
                term["@type"] = term_type
            context[spec.name] = term
            if spec.natural_language_map:
                context[spec.map_name] = {"@id": spec.uri, "@container": "@language"}
    return context


def _offline_loader(url: str, options: Any = None) -> Any:
    raise jsonld.JsonLdError(
        f"Remote context {url} is not loaded; the ActivityStreams context is inline",
        "jsonld.LoadDocumentError",
        {"url": url},
        code="loading document failed",
    )


def _options(**extra: Any) -> dict[str, Any]:
    return {"documentLoader": _offline_loader, **extra}


def _document(
    source: Union[VocabularyEntity, dict[str, Any]],
    registry: Optional[TypeRegistry],
) -> dict[str, Any]:
    if isinstance(source, VocabularyEntity):
        body = source.serialize()
        registry = registry or source.registry
    elif isinstance(source, dict):
        body = {k: v for k, v in source.items() if k != CONTEXT_KEY}
    else:
        raise TypeError(
            f"Expected a VocabularyEntity or dict, got: {type(source).__name__}"
        )
    return {CONTEXT_KEY: activitystreams_context(registry), **body}


def expand(
    source: Union[VocabularyEntity, dict[str, Any]],
    *,
    registry: Optional[TypeRegistry] = None,
) -> list[dict[str, Any]]:
    """Expand an entity or document with the generated context.

    A document's own ``@context`` is replaced by the generated one.
    """
    return jsonld.expand(_document(source, registry), _options())


def to_rdf(
    source: Union[VocabularyEntity, dict[str, Any]],
    *,
    registry: Optional[TypeRegistry] = None,
) -> str:
    """Convert an entity or document to N-Quads."""
    return jsonld.to_rdf(
        _document(source, registry), _options(format="application/n-quads")
    )


def compact_to_entity(
    expanded: Union[list[Any], dict[str, Any]],
    *,
    registry: Optional[TypeRegistry] = None,
) -> VocabularyEntity:
    """Compact expanded JSON-LD and deserialize the single top-level node.

    Raises
    ------
    ValueError
        If the input holds no node or several top-level nodes.
    UnhandledTypeError
        If the node's type names no registered type.
    """
    registry = registry or default_registry()
    context = activitystreams_context(registry)
    compacted = jsonld.compact(expanded, {CONTEXT_KEY: context}, _options())
    if "@graph" in compacted:
        raise ValueError(
            f"Expected one top-level node, got {len(compacted['@graph'])}"
        )
    if TYPE_KEY not in compacted:
        raise ValueError("Compacted document has no top-level typed node")
    compacted.pop(CONTEXT_KEY, None)
    return registry.deserialize(compacted)
