"""Parsing of document references: slugs, topic/depth pairs and relative paths."""

import posixpath
from dataclasses import dataclass

from docgraph.contracts.document import Depth

# Longest suffix first so "-mid-depth" is not read as topic "x-mid" + "depth"
_DEPTH_SUFFIXES: tuple[tuple[str, Depth], ...] = tuple(
    sorted(((f"-{d.value}", d) for d in Depth), key=lambda item: -len(item[0]))
)


@dataclass(frozen=True)
class ParsedReference:
    """
    What a reference string names.

    Exactly one of the shapes applies:
    - `path`: a corpus-relative document path (from a link or a `.md` reference)
    - `topic` + `depth` (+ optional `phase`): one slot of the index
    - `topic` alone: every document of a topic
    """

    raw: str
    path: str | None = None
    phase: str | None = None
    topic: str | None = None
    depth: Depth | None = None

    @property
    def names_slot(self) -> bool:
        return self.topic is not None and self.depth is not None


def split_slug(slug: str) -> tuple[str, Depth] | None:
    """Split `<topic>-<depth>` into its parts, or None if it has no depth suffix."""
    for suffix, depth in _DEPTH_SUFFIXES:
        if slug.endswith(suffix) and len(slug) > len(suffix):
            return slug[: -len(suffix)], depth
    return None


def normalize_link_path(target: str, source_path: str | None) -> str:
    """Resolve a link target against the linking document's directory."""
    if target.startswith("/"):
        joined = target.lstrip("/")
    else:
        base = posixpath.dirname(source_path) if source_path else ""
        joined = posixpath.join(base, target)
    normalized = posixpath.normpath(joined)
    if not normalized.endswith(".md"):
        normalized = posixpath.join(normalized, "index.md")
    return normalized


def parse_reference(ref: str, source_path: str | None = None) -> ParsedReference:
    """Classify a reference from frontmatter or a body link."""
    text = ref.strip()

    if text.endswith(".md") or text.startswith((".", "/")) or text.endswith("/"):
        path = normalize_link_path(text, source_path)
        return ParsedReference(raw=ref, path=path, **_location_of(path))

    if "/" in text:
        segments = [s for s in text.split("/") if s]
        depth_values = {d.value for d in Depth}
        if len(segments) == 3 and segments[2] in depth_values:
            return ParsedReference(
                raw=ref, phase=segments[0], topic=segments[1], depth=Depth(segments[2])
            )
        if len(segments) == 2 and segments[1] in depth_values:
            return ParsedReference(raw=ref, topic=segments[0], depth=Depth(segments[1]))
        path = normalize_link_path(text, source_path)
        return ParsedReference(raw=ref, path=path, **_location_of(path))

    split = split_slug(text)
    if split is not None:
        topic, depth = split
        return ParsedReference(raw=ref, topic=topic, depth=depth)

    return ParsedReference(raw=ref, topic=text)


def parse_link(target: str, source_path: str | None) -> ParsedReference:
    """Classify a markdown link target, which is always a path."""
    path = normalize_link_path(target.strip(), source_path)
    return ParsedReference(raw=target, path=path, **_location_of(path))


def _location_of(path: str) -> dict[str, object]:
    parts = path.split("/")
    if len(parts) < 3 or parts[-1] != "index.md" or ".." in parts:
        return {}
    if parts[-2] in {d.value for d in Depth}:
        if len(parts) < 4:
            return {}
        return {"phase": parts[-4], "topic": parts[-3], "depth": Depth(parts[-2])}
    # `<phase>/<topic>/index.md`: a topic landing page
    return {"phase": parts[-3], "topic": parts[-2]}


__all__ = [
    "ParsedReference",
    "parse_reference",
    "parse_link",
    "split_slug",
    "normalize_link_path",
]
