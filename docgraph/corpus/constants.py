"""Corpus-wide constants."""

CORPUS_EXTENSIONS: tuple[str, ...] = ("*.md",)

LEARNING_PATH_EXTENSIONS: tuple[str, ...] = ("*.json",)

REQUIRED_FIELDS: tuple[str, ...] = (
    "title",
    "phase",
    "topic",
    "depth",
    "reading_time",
    "updated",
)

STRING_FIELDS: tuple[str, ...] = ("title", "phase", "topic", "type", "domain", "industry")

LIST_FIELDS: tuple[str, ...] = ("prerequisites", "related_topics", "personas", "keywords")

KNOWN_FIELDS: frozenset[str] = frozenset(
    (*STRING_FIELDS, *LIST_FIELDS, "depth", "reading_time", "updated")
)

# Headings whose links make up a document's navigation footer
NAVIGATION_HEADINGS: tuple[str, ...] = (
    "navigation",
    "navigate",
    "depth levels",
    "related topics",
)
