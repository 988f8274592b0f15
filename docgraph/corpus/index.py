"""
Phase/topic/depth directory index over a set of parsed documents.

The index is built once per run and never mutated afterwards:

    index = build_index(documents)
    index.lookup("04-testing", "compliance-validation", Depth.SURFACE)
    index.completeness("compliance-validation")

Duplicate claims on a (topic, depth) slot do not abort the build. Each
contested slot yields one DuplicateDocumentError on `index.duplicates`
naming every claiming file; the first path (in sorted order) keeps the slot.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field

from docgraph.contracts.document import DEPTH_ORDER, Depth, Document
from docgraph.contracts.report import Completeness, TopicSummary
from docgraph.corpus.references import ParsedReference, parse_reference

logger = logging.getLogger(__name__)


class DuplicateDocumentError(Exception):
    """Two or more documents claim the same (topic, depth) slot."""

    def __init__(self, topic: str, depth: Depth, paths: list[str]):
        self.topic = topic
        self.depth = depth
        self.paths = sorted(paths)
        super().__init__(
            f"Duplicate document for topic '{topic}' at depth '{depth.value}': "
            + ", ".join(self.paths)
        )


@dataclass
class DocumentIndex:
    """
    Catalog of documents grouped phase -> topic -> depth.

    Build with `build_index()`; the constructor does no grouping itself.
    """

    documents: list[Document] = field(default_factory=list)
    duplicates: list[DuplicateDocumentError] = field(default_factory=list)
    unplaced: list[Document] = field(default_factory=list)

    _by_path: dict[str, Document] = field(default_factory=dict)
    _slots: dict[tuple[str, Depth], Document] = field(default_factory=dict)
    _unknown_depth: dict[str, list[Document]] = field(default_factory=dict)
    _phases: dict[str, set[str]] = field(default_factory=dict)
    _topic_phase: dict[str, str] = field(default_factory=dict)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def raise_for_duplicates(self) -> None:
        """Raise the first duplicate conflict, for callers that want to fail fast."""
        if self.duplicates:
            raise self.duplicates[0]

    def get(self, path: str) -> Document | None:
        return self._by_path.get(path)

    def lookup(self, phase: str, topic: str, depth: Depth | None) -> Document | None:
        """Retrieve the document in a slot; depth None reads the unknown-depth bucket."""
        if depth is None:
            candidates = self._unknown_depth.get(topic, [])
            return next((d for d in candidates if d.phase == phase), None)
        doc = self._slots.get((topic, Depth(depth)))
        if doc is None or doc.phase != phase:
            return None
        return doc

    def slot(self, topic: str, depth: Depth) -> Document | None:
        """Retrieve the document for a (topic, depth) pair regardless of phase."""
        return self._slots.get((topic, depth))

    def phases(self) -> list[str]:
        return sorted(self._phases)

    def topics_in_phase(self, phase: str) -> set[str]:
        return set(self._phases.get(phase, set()))

    def topics(self) -> list[str]:
        return sorted(self._topic_phase)

    def topic_exists(self, topic: str) -> bool:
        return topic in self._topic_phase

    def phase_of(self, topic: str) -> str | None:
        return self._topic_phase.get(topic)

    def documents_for_topic(self, topic: str) -> list[Document]:
        """Placed documents of a topic in depth order, then unknown-depth ones."""
        ordered = [self._slots[(topic, d)] for d in DEPTH_ORDER if (topic, d) in self._slots]
        return ordered + list(self._unknown_depth.get(topic, []))

    def completeness(self, topic: str) -> Completeness:
        return Completeness(
            surface=(topic, Depth.SURFACE) in self._slots,
            mid_depth=(topic, Depth.MID_DEPTH) in self._slots,
            deep_water=(topic, Depth.DEEP_WATER) in self._slots,
        )

    def topic_summaries(self) -> list[TopicSummary]:
        return [
            TopicSummary(
                phase=self._topic_phase.get(topic),
                topic=topic,
                completeness=self.completeness(topic),
            )
            for topic in self.topics()
        ]

    def resolve_reference(
        self, ref: str | ParsedReference, source_path: str | None = None
    ) -> list[Document]:
        """
        Resolve a reference to the documents it names.

        Slugs and topic/depth pairs name one document, a bare topic names all of
        that topic's documents, and a path names the document stored at it (or,
        failing that, the slot its `<phase>/<topic>/<depth>` segments spell out).
        Returns an empty list when nothing matches.
        """
        parsed = ref if isinstance(ref, ParsedReference) else parse_reference(ref, source_path)

        if parsed.path is not None:
            doc = self._by_path.get(parsed.path)
            if doc is not None:
                return [doc]

        if parsed.names_slot:
            assert parsed.topic is not None and parsed.depth is not None
            doc = self._slots.get((parsed.topic, parsed.depth))
            if doc is None:
                return []
            if parsed.phase is not None and doc.phase != parsed.phase:
                return []
            return [doc]

        if parsed.topic is not None:
            if parsed.phase is not None and self.phase_of(parsed.topic) != parsed.phase:
                return []
            return self.documents_for_topic(parsed.topic)

        return []


def build_index(documents: list[Document]) -> DocumentIndex:
    """
    Group documents by phase, topic and depth.

    Documents are sorted by path first, so the result does not depend on the
    order files were listed or parsed in.
    """
    ordered = sorted(documents, key=lambda d: d.path)
    index = DocumentIndex(documents=ordered)
    claims: dict[tuple[str, Depth], list[str]] = defaultdict(list)

    for doc in ordered:
        if doc.path in index._by_path:
            logger.warning("Document path %s listed twice; keeping the first", doc.path)
            continue
        index._by_path[doc.path] = doc

        if doc.phase is None or doc.topic is None:
            index.unplaced.append(doc)
            continue

        index._phases.setdefault(doc.phase, set()).add(doc.topic)
        index._topic_phase.setdefault(doc.topic, doc.phase)

        if doc.depth is None:
            index._unknown_depth.setdefault(doc.topic, []).append(doc)
            continue

        key = (doc.topic, doc.depth)
        claims[key].append(doc.path)
        if key not in index._slots:
            index._slots[key] = doc

    for (topic, depth), paths in claims.items():
        if len(paths) > 1:
            index.duplicates.append(DuplicateDocumentError(topic, depth, paths))

    index.duplicates.sort(key=lambda e: (e.topic, DEPTH_ORDER.index(e.depth)))

    logger.debug(
        "Indexed %d documents: %d phases, %d topics, %d duplicate slots",
        len(ordered),
        len(index._phases),
        len(index._topic_phase),
        len(index.duplicates),
    )
    return index


__all__ = ["DocumentIndex", "DuplicateDocumentError", "build_index"]
