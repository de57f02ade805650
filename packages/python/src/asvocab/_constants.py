"""
Shared constants for the ActivityStreams vocabulary model.

Namespace IRIs, capability names, and policy names used across the
package are centralised here to avoid circular imports between the
codec, registry, and entity layers.
"""

from __future__ import annotations

# ── Namespace & Context Constants ──────────────────────────────────

ACTIVITYSTREAMS_NS = "https://www.w3.org/ns/activitystreams#"
"""Base IRI of every ActivityStreams 2.0 term."""

ACTIVITYSTREAMS_CONTEXT_URL = "https://www.w3.org/ns/activitystreams"
"""Canonical ``@context`` value for ActivityStreams documents."""

PUBLIC_COLLECTION = ACTIVITYSTREAMS_NS + "Public"

XSD = "http://www.w3.org/2001/XMLSchema#"

# ── JSON keys with special handling ────────────────────────────────

CONTEXT_KEY = "@context"
TYPE_KEY = "type"
LANGUAGE_MAP_SUFFIX = "Map"

# ── Variant kinds ──────────────────────────────────────────────────

UNKNOWN = "unknown"
"""Variant kind holding a value no declared branch recognised."""

# ── Capabilities ───────────────────────────────────────────────────
#
# A capability names the base type a concrete vocabulary type must be
# (or extend) to populate an embedded-entity branch of a property.

OBJECT = "Object"
LINK = "Link"
COLLECTION = "Collection"
ORDERED_COLLECTION = "OrderedCollection"
COLLECTION_PAGE = "CollectionPage"
ORDERED_COLLECTION_PAGE = "OrderedCollectionPage"
IMAGE = "Image"

CAPABILITIES = (
    OBJECT,
    LINK,
    COLLECTION,
    ORDERED_COLLECTION,
    COLLECTION_PAGE,
    ORDERED_COLLECTION_PAGE,
    IMAGE,
)

# ── Functional-array policies ──────────────────────────────────────

FUNCTIONAL_ARRAY_FIRST = "first"
FUNCTIONAL_ARRAY_ERROR = "error"

FUNCTIONAL_ARRAY_POLICIES = (FUNCTIONAL_ARRAY_FIRST, FUNCTIONAL_ARRAY_ERROR)
