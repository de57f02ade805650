"""
Example 01: Federated Inbox
===========================

Demonstrates deserializing incoming ActivityPub activities, dispatching
them by type, and re-serializing them without losing server-specific
extension fields.

Use case: A small server's shared inbox receives activities from
Mastodon-like peers that add their own keys.
"""

import json

from asvocab import JSONResolver, VocabularyProcessor, is_or_extends

processor = VocabularyProcessor(resource_limits={"max_document_size": 256 * 1024})

# ── 1. Deserializing an incoming activity ────────────────────────

print("=== 1. Deserializing ===\n")

incoming = json.dumps({
    "@context": "https://www.w3.org/ns/activitystreams",
    "type": "Create",
    "id": "https://mastodon.example/users/alice/statuses/1/activity",
    "actor": "https://mastodon.example/users/alice",
    "published": "2024-03-01T12:00:00Z",
    "to": ["https://www.w3.org/ns/activitystreams#Public"],
    "object": {
        "type": "Note",
        "id": "https://mastodon.example/users/alice/statuses/1",
        "content": "<p>Hello fediverse</p>",
        "contentMap": {"en": "<p>Hello fediverse</p>"},
        "sensitive": False,
        "atomUri": "https://mastodon.example/users/alice/statuses/1",
    },
})

create = processor.deserialize(incoming)
note = create.get_value("object")
print(f"Activity: {create!r}")
print(f"Object:   {note!r}")
print(f"Published: {create.get_value('published')!r}")
print(f"Extension fields kept: {note.unknown_fields}")

# ── 2. Dispatching by type ───────────────────────────────────────

print("\n=== 2. Dispatching ===\n")

def on_create(activity):
    return f"store {activity.get_value('object').get_value('id')}"

def on_follow(activity):
    return f"accept follow from {activity.get_value('actor')}"

resolver = processor.resolver({"Create": on_create, "Follow": on_follow})
print(resolver.resolve(json.loads(incoming)))
print(resolver.resolve({
    "type": "Follow",
    "actor": "https://other.example/users/bob",
    "object": "https://mastodon.example/users/alice",
}))

# ── 3. Type predicates ───────────────────────────────────────────

print("\n=== 3. Type Predicates ===\n")

print(f"Create is an Activity: {is_or_extends(create, 'Activity')}")
print(f"Create is intransitive: {is_or_extends(create, 'IntransitiveActivity')}")

# ── 4. Re-serializing ────────────────────────────────────────────

print("\n=== 4. Re-serializing ===\n")

print(json.dumps(processor.serialize(create), indent=2))
