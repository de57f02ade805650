"""
Example 02: Extension Types
===========================

Demonstrates registering a vocabulary extension type at runtime, using
it inside standard properties, and expanding the result with JSON-LD.

Use case: Custom emoji attached to a Note as ``tag`` entries.
"""

from asvocab import TypeDefinition, TypeRegistry, VocabularyProcessor, define_property
from asvocab.codecs import STRING

registry = TypeRegistry()
registry.register(
    TypeDefinition(
        "Emoji",
        extends=("Object",),
        properties=(
            define_property(
                "emojiCode",
                codecs=(STRING,),
                functional=True,
                uri="http://joinmastodon.org/ns#emojiCode",
            ),
        ),
        uri="http://joinmastodon.org/ns#Emoji",
    )
)
processor = VocabularyProcessor(registry=registry)

# ── 1. Building entities programmatically ────────────────────────

print("=== 1. Building ===\n")

emoji = processor.new("Emoji")
emoji.set("emojiCode", ":blobcat:")
emoji.append("name", ":blobcat:")

note = processor.new("Note")
note.set("id", "https://social.example/notes/7")
note.append("content", "I love :blobcat:")
note.append("tag", emoji)
print(processor.serialize(note))

# ── 2. Reading it back ───────────────────────────────────────────

print("\n=== 2. Deserializing ===\n")

restored = processor.deserialize(processor.serialize(note))
tag = restored.get("tag")
print(f"tag kind: {tag.kind}, type: {tag.value.type_name}")
print(f"Equal after round trip: {restored == note}")

# ── 3. JSON-LD expansion ─────────────────────────────────────────

print("\n=== 3. Expanded ===\n")

for node in processor.expand(note):
    print(node)
