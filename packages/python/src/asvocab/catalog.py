"""
The ActivityStreams 2.0 type catalog.

Each vocabulary type is plain data: a :class:`TypeDefinition` naming its
parents, the properties it declares itself, and the inherited
properties it drops.  Effective property lists and capability checks
are derived by :class:`asvocab.registry.TypeRegistry`.

Core types follow https://www.w3.org/TR/activitystreams-core/ and the
extended types https://www.w3.org/TR/activitystreams-vocabulary/; the
ActivityPub actor properties are attached to ``Object``.
"""

from __future__ import annotations

from dataclasses import dataclass

from asvocab import properties as p
from asvocab._constants import ACTIVITYSTREAMS_NS
from asvocab.properties import PropertySpec


@dataclass(frozen=True)
class TypeDefinition:
    """Static description of one vocabulary type.

    Parameters
    ----------
    name:
        Canonical type tag (``"Dislike"``).
    extends:
        Names of the parent types, in precedence order.
    properties:
        Properties declared by this type itself.
    without:
        Names of inherited properties this type does not carry.
    uri:
        Expanded IRI of the type.
    notes:
        Free-form remarks on the type.
    """

    name: str
    extends: tuple[str, ...] = ()
    properties: tuple[PropertySpec, ...] = ()
    without: tuple[str, ...] = ()
    uri: str = ""
    notes: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(
                f"Type name must be a non-empty string, got: {self.name!r}"
            )
        if not self.uri:
            object.__setattr__(self, "uri", ACTIVITYSTREAMS_NS + self.name)


def _extended(name: str, *extends: str, properties=(), without=()) -> TypeDefinition:
    return TypeDefinition(
        name=name,
        extends=extends,
        properties=tuple(properties),
        without=tuple(without),
    )


# ── Core types ─────────────────────────────────────────────────────

OBJECT_TYPE = TypeDefinition(
    name="Object",
    properties=(
        p.ALTITUDE,
        p.ATTACHMENT,
        p.ATTRIBUTED_TO,
        p.AUDIENCE,
        p.CONTENT,
        p.CONTEXT,
        p.NAME,
        p.END_TIME,
        p.GENERATOR,
        p.ICON,
        p.ID,
        p.IMAGE_PROPERTY,
        p.IN_REPLY_TO,
        p.LOCATION,
        p.PREVIEW,
        p.PUBLISHED,
        p.REPLIES,
        p.START_TIME,
        p.SUMMARY,
        p.TAG,
        p.UPDATED,
        p.URL,
        p.TO,
        p.BTO,
        p.CC,
        p.BCC,
        p.MEDIA_TYPE,
        p.DURATION_PROPERTY,
        # ActivityPub
        p.SOURCE,
        p.INBOX,
        p.OUTBOX,
        p.FOLLOWING,
        p.FOLLOWERS,
        p.LIKED,
        p.LIKES,
        p.STREAMS,
        p.PREFERRED_USERNAME,
        p.ENDPOINTS,
        p.PROXY_URL,
        p.OAUTH_AUTHORIZATION_ENDPOINT,
        p.OAUTH_TOKEN_ENDPOINT,
        p.PROVIDE_CLIENT_KEY,
        p.SIGN_CLIENT_KEY,
        p.SHARED_INBOX,
    ),
)

LINK_TYPE = TypeDefinition(
    name="Link",
    properties=(
        p.ATTRIBUTED_TO,
        p.HREF,
        p.ID,
        p.REL,
        p.MEDIA_TYPE,
        p.NAME,
        p.SUMMARY,
        p.HREFLANG,
        p.HEIGHT,
        p.WIDTH,
        p.PREVIEW,
    ),
)

ACTIVITY_TYPE = _extended(
    "Activity",
    "Object",
    properties=(p.ACTOR, p.OBJECT_PROPERTY, p.TARGET, p.RESULT, p.ORIGIN, p.INSTRUMENT),
)

INTRANSITIVE_ACTIVITY_TYPE = _extended(
    "IntransitiveActivity", "Activity", without=("object",)
)

COLLECTION_TYPE = _extended(
    "Collection",
    "Object",
    properties=(p.TOTAL_ITEMS, p.CURRENT, p.FIRST, p.LAST, p.ITEMS),
)

ORDERED_COLLECTION_TYPE = _extended(
    "OrderedCollection",
    "Collection",
    properties=(p.ORDERED_ITEMS, p.CURRENT_ORDERED, p.FIRST_ORDERED, p.LAST_ORDERED),
    without=("items",),
)

COLLECTION_PAGE_TYPE = _extended(
    "CollectionPage",
    "Collection",
    properties=(p.PART_OF, p.NEXT, p.PREV),
)

ORDERED_COLLECTION_PAGE_TYPE = _extended(
    "OrderedCollectionPage",
    "OrderedCollection",
    "CollectionPage",
    properties=(p.START_INDEX, p.NEXT_ORDERED, p.PREV_ORDERED),
    without=("items",),
)

# ── Extended types ─────────────────────────────────────────────────

_ACTIVITY_SUBTYPES = {
    "Accept": "Activity",
    "TentativeAccept": "Accept",
    "Add": "Activity",
    "Arrive": "IntransitiveActivity",
    "Create": "Activity",
    "Delete": "Activity",
    "Follow": "Activity",
    "Ignore": "Activity",
    "Join": "Activity",
    "Leave": "Activity",
    "Like": "Activity",
    "Offer": "Activity",
    "Invite": "Offer",
    "Reject": "Activity",
    "TentativeReject": "Reject",
    "Remove": "Activity",
    "Undo": "Activity",
    "Update": "Activity",
    "View": "Activity",
    "Listen": "Activity",
    "Read": "Activity",
    "Move": "Activity",
    "Travel": "IntransitiveActivity",
    "Announce": "Activity",
    "Block": "Ignore",
    "Flag": "Activity",
    "Dislike": "Activity",
}

QUESTION_TYPE = _extended(
    "Question",
    "IntransitiveActivity",
    properties=(p.ONE_OF, p.ANY_OF, p.CLOSED),
)

_ACTOR_TYPES = ("Application", "Group", "Organization", "Person", "Service")

RELATIONSHIP_TYPE = _extended(
    "Relationship",
    "Object",
    properties=(p.SUBJECT, p.OBJECT_PROPERTY, p.RELATIONSHIP),
)

DOCUMENT_TYPE = _extended("Document", "Object")
IMAGE_TYPE = _extended("Image", "Document", properties=(p.HEIGHT, p.WIDTH))

PLACE_TYPE = _extended(
    "Place",
    "Object",
    properties=(p.ACCURACY, p.ALTITUDE, p.LATITUDE, p.LONGITUDE, p.RADIUS, p.UNITS),
)
PROFILE_TYPE = _extended("Profile", "Object", properties=(p.DESCRIBES,))
TOMBSTONE_TYPE = _extended(
    "Tombstone", "Object", properties=(p.FORMER_TYPE, p.DELETED)
)
MENTION_TYPE = _extended("Mention", "Link")


ACTIVITYSTREAMS_TYPES: tuple[TypeDefinition, ...] = (
    OBJECT_TYPE,
    LINK_TYPE,
    ACTIVITY_TYPE,
    INTRANSITIVE_ACTIVITY_TYPE,
    COLLECTION_TYPE,
    ORDERED_COLLECTION_TYPE,
    COLLECTION_PAGE_TYPE,
    ORDERED_COLLECTION_PAGE_TYPE,
    *(_extended(name, parent) for name, parent in _ACTIVITY_SUBTYPES.items()),
    QUESTION_TYPE,
    *(_extended(name, "Object") for name in _ACTOR_TYPES),
    RELATIONSHIP_TYPE,
    _extended("Article", "Object"),
    DOCUMENT_TYPE,
    _extended("Audio", "Document"),
    IMAGE_TYPE,
    _extended("Video", "Document"),
    _extended("Note", "Object"),
    _extended("Page", "Document"),
    _extended("Event", "Object"),
    PLACE_TYPE,
    PROFILE_TYPE,
    TOMBSTONE_TYPE,
    MENTION_TYPE,
)
"""Every built-in type, parents listed before children."""
