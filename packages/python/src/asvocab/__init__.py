"""
asvocab: ActivityStreams 2.0 vocabulary model

Typed entities for every ActivityStreams / ActivityPub type, a
capability-aware type registry, lossless JSON-LD round trips that keep
unknown extension fields, and PyLD-backed JSON-LD processing.
"""

__version__ = "0.1.0"

from asvocab._constants import (
    ACTIVITYSTREAMS_CONTEXT_URL,
    ACTIVITYSTREAMS_NS,
    CAPABILITIES,
    PUBLIC_COLLECTION,
    UNKNOWN,
)
from asvocab.codecs import Codec, get_codec, unknown_value_deserialize, unknown_value_serialize
from asvocab.properties import PropertySpec, define_property
from asvocab.catalog import ACTIVITYSTREAMS_TYPES, TypeDefinition
from asvocab.variant import PropertyVariant, deserialize_variant, serialize_variant
from asvocab.entity import (
    PropertySlot,
    UnhandledTypeError,
    VocabularyEntity,
    VocabularyError,
)
from asvocab.registry import (
    TypeRegistry,
    default_registry,
    register_type,
    unregister_type,
)
from asvocab.limits import DEFAULT_RESOURCE_LIMITS, enforce_resource_limits
from asvocab.streams import (
    JSONResolver,
    NoCallbackMatchError,
    deserialize,
    from_json,
    has_type,
    is_or_extends,
    to_document,
    to_json,
)
from asvocab.expansion import activitystreams_context, compact_to_entity, expand, to_rdf
from asvocab.cbor import from_cbor, to_cbor
from asvocab.processor import VocabularyProcessor

__all__ = [
    "__version__",
    # Constants
    "ACTIVITYSTREAMS_CONTEXT_URL",
    "ACTIVITYSTREAMS_NS",
    "CAPABILITIES",
    "PUBLIC_COLLECTION",
    "UNKNOWN",
    # Codecs
    "Codec",
    "get_codec",
    "unknown_value_deserialize",
    "unknown_value_serialize",
    # Vocabulary
    "PropertySpec",
    "define_property",
    "ACTIVITYSTREAMS_TYPES",
    "TypeDefinition",
    # Entities
    "PropertyVariant",
    "deserialize_variant",
    "serialize_variant",
    "PropertySlot",
    "VocabularyEntity",
    "VocabularyError",
    "UnhandledTypeError",
    # Registry
    "TypeRegistry",
    "default_registry",
    "register_type",
    "unregister_type",
    # Documents
    "DEFAULT_RESOURCE_LIMITS",
    "enforce_resource_limits",
    "JSONResolver",
    "NoCallbackMatchError",
    "deserialize",
    "from_json",
    "has_type",
    "is_or_extends",
    "to_document",
    "to_json",
    # JSON-LD / CBOR
    "activitystreams_context",
    "compact_to_entity",
    "expand",
    "to_rdf",
    "from_cbor",
    "to_cbor",
    # Processor
    "VocabularyProcessor",
]
