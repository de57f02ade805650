"""
Property configurations for the ActivityStreams vocabulary.

Every vocabulary property is described by one :class:`PropertySpec`:
which embedded-entity capabilities it accepts for typed map values,
which scalar codecs it tries for everything else, whether it is
functional, and whether it carries a natural-language map.  A single
generic resolver (:mod:`asvocab.variant`) is driven by these records,
so no per-property code exists anywhere in the package.

The ordering inside ``capabilities`` and ``codecs`` is significant:
it is the precedence the resolver uses when deserializing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from asvocab._constants import (
    ACTIVITYSTREAMS_NS,
    COLLECTION,
    COLLECTION_PAGE,
    IMAGE,
    LANGUAGE_MAP_SUFFIX,
    LINK,
    OBJECT,
    ORDERED_COLLECTION,
    ORDERED_COLLECTION_PAGE,
    UNKNOWN,
)
from asvocab.codecs import (
    ANY_URI,
    BCP47_LANGUAGE_TAG,
    BOOLEAN,
    CODECS,
    DATE_TIME,
    DURATION,
    FLOAT,
    IRI,
    IRI_CODECS,
    LANG_STRING,
    LINK_RELATION,
    MIME_MEDIA_TYPE,
    NON_NEGATIVE_INTEGER,
    STRING,
    UNITS_VALUE,
)


@dataclass(frozen=True)
class PropertySpec:
    """Configuration of one named property.

    Parameters
    ----------
    name:
        JSON key of the property (``"actor"``).
    capabilities:
        Embedded-entity roles accepted for typed map values, in
        precedence order.
    codecs:
        Scalar codec names tried for non-map values, in precedence order.
    functional:
        ``True`` when the property holds at most one value.
    natural_language_map:
        ``True`` when ``<name>Map`` carries language-tagged alternatives.
    uri:
        Expanded IRI of the property.
    notes:
        Free-form remarks on the property.
    """

    name: str
    capabilities: tuple[str, ...] = ()
    codecs: tuple[str, ...] = ()
    functional: bool = False
    natural_language_map: bool = False
    uri: str = ""
    notes: str = ""

    def __post_init__(self) -> None:
        unknown_codecs = [c for c in self.codecs if c not in CODECS]
        if unknown_codecs:
            raise ValueError(
                f"Property '{self.name}' names unknown codecs: {unknown_codecs}"
            )

    @property
    def map_name(self) -> str:
        """JSON key of the natural-language map (``"contentMap"``)."""
        return self.name + LANGUAGE_MAP_SUFFIX

    @property
    def is_single_value(self) -> bool:
        """``True`` when the only legal shape is one ``anyURI`` value.

        Such properties are not wrapped in a fallback union: a value the
        codec rejects is a structural error rather than an unknown.
        """
        return not self.capabilities and self.codecs == (ANY_URI,)

    @property
    def accepts_iri(self) -> bool:
        return any(c in IRI_CODECS for c in self.codecs)

    @property
    def kinds(self) -> tuple[str, ...]:
        """Every variant kind legal for this property, in precedence order."""
        return self.capabilities + self.codecs + (UNKNOWN,)


def define_property(
    name: str,
    *,
    capabilities: Iterable[str] = (),
    codecs: Iterable[str] = (),
    functional: bool = False,
    natural_language_map: bool = False,
    uri: str | None = None,
) -> PropertySpec:
    """Build a :class:`PropertySpec`.

    Unless the property already accepts ``anyURI``, a by-reference
    ``IRI`` codec is appended as the last fallback: any property may
    point at its value instead of embedding it.
    """
    codecs = tuple(codecs)
    if ANY_URI not in codecs:
        codecs += (IRI,)
    return PropertySpec(
        name=name,
        capabilities=tuple(capabilities),
        codecs=codecs,
        functional=functional,
        natural_language_map=natural_language_map,
        uri=uri if uri is not None else ACTIVITYSTREAMS_NS + name,
    )


def _object_or_link(name: str, **kwargs) -> PropertySpec:
    return define_property(name, capabilities=(OBJECT, LINK), **kwargs)


# ═══════════════════════════════════════════════════════════════════
# ACTIVITYSTREAMS 2.0 CORE PROPERTIES
# ═══════════════════════════════════════════════════════════════════

ID = define_property("id", codecs=(ANY_URI,), functional=True, uri="@id")

ACTOR = _object_or_link("actor")
ATTACHMENT = _object_or_link("attachment")
ATTRIBUTED_TO = _object_or_link("attributedTo")
AUDIENCE = _object_or_link("audience")
BCC = _object_or_link("bcc")
BTO = _object_or_link("bto")
CC = _object_or_link("cc")
CONTEXT = _object_or_link("context")
GENERATOR = _object_or_link("generator")
IN_REPLY_TO = _object_or_link("inReplyTo")
INSTRUMENT = _object_or_link("instrument")
LOCATION = _object_or_link("location")
ITEMS = _object_or_link("items")
ORDERED_ITEMS = _object_or_link("orderedItems")
ONE_OF = _object_or_link("oneOf")
ANY_OF = _object_or_link("anyOf")
ORIGIN = _object_or_link("origin")
PREVIEW = _object_or_link("preview")
RESULT = _object_or_link("result")
TAG = _object_or_link("tag")
TARGET = _object_or_link("target")
TO = _object_or_link("to")
SUBJECT = _object_or_link("subject", functional=True)

CLOSED = define_property(
    "closed", capabilities=(OBJECT, LINK), codecs=(DATE_TIME, BOOLEAN)
)

# Paging properties differ between plain and ordered collections.
CURRENT = define_property("current", capabilities=(COLLECTION_PAGE, LINK), functional=True)
FIRST = define_property("first", capabilities=(COLLECTION_PAGE, LINK), functional=True)
LAST = define_property("last", capabilities=(COLLECTION_PAGE, LINK), functional=True)
NEXT = define_property("next", capabilities=(COLLECTION_PAGE, LINK), functional=True)
PREV = define_property("prev", capabilities=(COLLECTION_PAGE, LINK), functional=True)

CURRENT_ORDERED = define_property(
    "current", capabilities=(ORDERED_COLLECTION_PAGE, LINK), functional=True
)
FIRST_ORDERED = define_property(
    "first", capabilities=(ORDERED_COLLECTION_PAGE, LINK), functional=True
)
LAST_ORDERED = define_property(
    "last", capabilities=(ORDERED_COLLECTION_PAGE, LINK), functional=True
)
NEXT_ORDERED = define_property(
    "next", capabilities=(ORDERED_COLLECTION_PAGE, LINK), functional=True
)
PREV_ORDERED = define_property(
    "prev", capabilities=(ORDERED_COLLECTION_PAGE, LINK), functional=True
)

PART_OF = define_property("partOf", capabilities=(LINK, COLLECTION), functional=True)

ICON = define_property("icon", capabilities=(IMAGE, LINK))
IMAGE_PROPERTY = define_property("image", capabilities=(IMAGE, LINK))

OBJECT_PROPERTY = define_property("object", capabilities=(OBJECT,))
REPLIES = define_property("replies", capabilities=(COLLECTION,), functional=True)
RELATIONSHIP = define_property("relationship", capabilities=(OBJECT,), functional=True)
DESCRIBES = define_property("describes", capabilities=(OBJECT,), functional=True)
FORMER_TYPE = define_property("formerType", capabilities=(OBJECT,), codecs=(STRING,))

URL = define_property("url", capabilities=(LINK,), codecs=(ANY_URI,))

ACCURACY = define_property("accuracy", codecs=(FLOAT,), functional=True)
ALTITUDE = define_property("altitude", codecs=(FLOAT,), functional=True)
LATITUDE = define_property("latitude", codecs=(FLOAT,), functional=True)
LONGITUDE = define_property("longitude", codecs=(FLOAT,), functional=True)
RADIUS = define_property("radius", codecs=(FLOAT,), functional=True)
UNITS = define_property("units", codecs=(UNITS_VALUE, ANY_URI), functional=True)

CONTENT = define_property(
    "content", codecs=(STRING, LANG_STRING), natural_language_map=True
)
NAME = define_property("name", codecs=(STRING, LANG_STRING), natural_language_map=True)
SUMMARY = define_property(
    "summary", codecs=(STRING, LANG_STRING), natural_language_map=True
)

DURATION_PROPERTY = define_property("duration", codecs=(DURATION,), functional=True)
HEIGHT = define_property("height", codecs=(NON_NEGATIVE_INTEGER,), functional=True)
WIDTH = define_property("width", codecs=(NON_NEGATIVE_INTEGER,), functional=True)
HREF = define_property("href", codecs=(ANY_URI,), functional=True)
HREFLANG = define_property("hreflang", codecs=(BCP47_LANGUAGE_TAG,), functional=True)
MEDIA_TYPE = define_property("mediaType", codecs=(MIME_MEDIA_TYPE,), functional=True)
REL = define_property("rel", codecs=(LINK_RELATION,))
START_INDEX = define_property(
    "startIndex", codecs=(NON_NEGATIVE_INTEGER,), functional=True
)
TOTAL_ITEMS = define_property(
    "totalItems", codecs=(NON_NEGATIVE_INTEGER,), functional=True
)

END_TIME = define_property("endTime", codecs=(DATE_TIME,), functional=True)
PUBLISHED = define_property("published", codecs=(DATE_TIME,), functional=True)
START_TIME = define_property("startTime", codecs=(DATE_TIME,), functional=True)
UPDATED = define_property("updated", codecs=(DATE_TIME,), functional=True)
DELETED = define_property("deleted", codecs=(DATE_TIME,), functional=True)

# ═══════════════════════════════════════════════════════════════════
# ACTIVITYPUB PROPERTIES
# ═══════════════════════════════════════════════════════════════════

SOURCE = define_property("source", capabilities=(OBJECT,), functional=True)
INBOX = define_property(
    "inbox", capabilities=(ORDERED_COLLECTION,), codecs=(ANY_URI,), functional=True
)
OUTBOX = define_property(
    "outbox", capabilities=(ORDERED_COLLECTION,), codecs=(ANY_URI,), functional=True
)
FOLLOWING = define_property(
    "following",
    capabilities=(COLLECTION, ORDERED_COLLECTION),
    codecs=(ANY_URI,),
    functional=True,
)
FOLLOWERS = define_property(
    "followers",
    capabilities=(COLLECTION, ORDERED_COLLECTION),
    codecs=(ANY_URI,),
    functional=True,
)
LIKED = define_property(
    "liked",
    capabilities=(COLLECTION, ORDERED_COLLECTION),
    codecs=(ANY_URI,),
    functional=True,
)
LIKES = define_property(
    "likes",
    capabilities=(COLLECTION, ORDERED_COLLECTION),
    codecs=(ANY_URI,),
    functional=True,
)
STREAMS = define_property("streams", codecs=(ANY_URI,))
PREFERRED_USERNAME = define_property(
    "preferredUsername",
    codecs=(STRING,),
    functional=True,
    natural_language_map=True,
)
ENDPOINTS = define_property("endpoints", capabilities=(OBJECT,), functional=True)
PROXY_URL = define_property("proxyUrl", codecs=(ANY_URI,), functional=True)
OAUTH_AUTHORIZATION_ENDPOINT = define_property(
    "oauthAuthorizationEndpoint", codecs=(ANY_URI,), functional=True
)
OAUTH_TOKEN_ENDPOINT = define_property(
    "oauthTokenEndpoint", codecs=(ANY_URI,), functional=True
)
PROVIDE_CLIENT_KEY = define_property(
    "provideClientKey", codecs=(ANY_URI,), functional=True
)
SIGN_CLIENT_KEY = define_property("signClientKey", codecs=(ANY_URI,), functional=True)
SHARED_INBOX = define_property("sharedInbox", codecs=(ANY_URI,), functional=True)
