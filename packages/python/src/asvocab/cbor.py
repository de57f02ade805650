"""
CBOR transport for vocabulary entities.

Serializes entities to CBOR (RFC 8949) with context compression:
well-known ``@context`` URLs are replaced by short integer IDs, as in
the CBOR-LD approach to repetitive context references.

Requires the ``cbor2`` package::

    pip install asvocab[cbor]
"""

from __future__ import annotations

import gzip
import json
from dataclasses import dataclass
from typing import Any, Optional

try:
    import cbor2

    _HAS_CBOR2 = True
except ImportError:
    _HAS_CBOR2 = False

from asvocab._constants import ACTIVITYSTREAMS_CONTEXT_URL, CONTEXT_KEY
from asvocab.entity import VocabularyEntity
from asvocab.registry import TypeRegistry
from asvocab.streams import deserialize, to_document


def _require_cbor2() -> None:
    if not _HAS_CBOR2:
        raise ImportError(
            "cbor2 is required for CBOR serialization. "
            "Install it with: pip install asvocab[cbor]"
        )


# ── Default context registry ──────────────────────────────────────

DEFAULT_CONTEXT_REGISTRY: dict[str, int] = {
    ACTIVITYSTREAMS_CONTEXT_URL: 2,
    "https://w3id.org/security/v1": 3,
    "https://w3id.org/security/v2": 3,
}

_REVERSE_DEFAULT: dict[int, str] = {
    2: ACTIVITYSTREAMS_CONTEXT_URL,
    3: "https://w3id.org/security/v1",
}


@dataclass
class PayloadStats:
    """Comparison of serialization sizes for an entity."""

    json_bytes: int
    cbor_bytes: int
    gzip_json_bytes: int
    gzip_cbor_bytes: int

    @property
    def cbor_ratio(self) -> float:
        """CBOR size as a fraction of JSON size (lower = better)."""
        if self.json_bytes == 0:
            return 0.0
        return self.cbor_bytes / self.json_bytes


# ═══════════════════════════════════════════════════════════════════
# SERIALIZATION
# ═══════════════════════════════════════════════════════════════════


def to_cbor(
    entity: VocabularyEntity,
    context_registry: Optional[dict[str, int]] = None,
    *,
    context: Any = ACTIVITYSTREAMS_CONTEXT_URL,
) -> bytes:
    """Serialize *entity* as a CBOR document with context compression.

    Raises:
        ImportError: If ``cbor2`` is not installed.
    """
    _require_cbor2()
    registry = context_registry or DEFAULT_CONTEXT_REGISTRY
    document = to_document(entity, context)
    if CONTEXT_KEY in document:
        document[CONTEXT_KEY] = _compress_context_value(document[CONTEXT_KEY], registry)
    return cbor2.dumps(document)


def from_cbor(
    data: bytes,
    context_registry: Optional[dict[str, int]] = None,
    *,
    registry: Optional[TypeRegistry] = None,
) -> VocabularyEntity:
    """Decode CBOR bytes produced by :func:`to_cbor` into an entity.

    Raises:
        ImportError: If ``cbor2`` is not installed.
        TypeError: If the payload is not a CBOR map.
    """
    _require_cbor2()
    decoded = cbor2.loads(data)
    if not isinstance(decoded, dict):
        raise TypeError(
            f"CBOR payload must decode to a map, got: {type(decoded).__name__}"
        )
    if CONTEXT_KEY in decoded:
        reverse = (
            _REVERSE_DEFAULT
            if context_registry is None
            else {v: k for k, v in context_registry.items()}
        )
        decoded[CONTEXT_KEY] = _decompress_context_value(decoded[CONTEXT_KEY], reverse)
    return deserialize(decoded, registry=registry)


def payload_stats(
    entity: VocabularyEntity,
    context_registry: Optional[dict[str, int]] = None,
) -> PayloadStats:
    """Compare JSON, CBOR, and gzipped sizes of *entity*."""
    _require_cbor2()
    json_bytes = json.dumps(to_document(entity), separators=(",", ":")).encode("utf-8")
    cbor_bytes = to_cbor(entity, context_registry)
    return PayloadStats(
        json_bytes=len(json_bytes),
        cbor_bytes=len(cbor_bytes),
        gzip_json_bytes=len(gzip.compress(json_bytes)),
        gzip_cbor_bytes=len(gzip.compress(cbor_bytes)),
    )


# ═══════════════════════════════════════════════════════════════════
# INTERNAL HELPERS
# ═══════════════════════════════════════════════════════════════════


def _compress_context_value(ctx: Any, registry: dict[str, int]) -> Any:
    if isinstance(ctx, str):
        return registry.get(ctx, ctx)
    if isinstance(ctx, list):
        return [_compress_context_value(item, registry) for item in ctx]
    return ctx


def _decompress_context_value(ctx: Any, reverse: dict[int, str]) -> Any:
    if isinstance(ctx, int) and not isinstance(ctx, bool):
        return reverse.get(ctx, ctx)
    if isinstance(ctx, list):
        return [_decompress_context_value(item, reverse) for item in ctx]
    return ctx
