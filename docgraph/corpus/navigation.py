"""Navigation model for a document's footer, derived from the index and graph."""

from docgraph.contracts.document import DEPTH_ORDER, Document, DocumentRef
from docgraph.contracts.report import NavModel, TopicCrumb
from docgraph.corpus.depth import rank
from docgraph.corpus.graph import CrossReferenceGraph, EdgeKind
from docgraph.corpus.index import DocumentIndex


def _sibling(document: Document, index: DocumentIndex, step: int) -> Document | None:
    """Nearest existing same-topic document `step` (+1/-1) rungs away."""
    if document.topic is None or document.depth is None:
        return None
    position = rank(document.depth) + step
    while 0 <= position < len(DEPTH_ORDER):
        sibling = index.slot(document.topic, DEPTH_ORDER[position])
        if sibling is not None:
            return sibling
        position += step
    return None


def _pick_related(document: Document, candidates: list[Document]) -> Document | None:
    """Prefer the related topic's document at the same depth, else its shallowest."""
    placed = [c for c in candidates if c.depth is not None]
    for candidate in placed:
        if candidate.depth == document.depth:
            return candidate
    if placed:
        return placed[0]
    return candidates[0] if candidates else None


def render_navigation_model(
    document: Document, graph: CrossReferenceGraph, index: DocumentIndex
) -> NavModel:
    """
    Build the footer navigation data for a document.

    Pure data production; turning it into markup is left to the site renderer.
    """
    related: list[DocumentRef] = []
    seen: set[str] = {document.path}
    for edge in graph.edges_from(document, EdgeKind.RELATED_TOPIC):
        if edge.target == document.topic:
            continue
        pick = _pick_related(document, graph.resolve(edge))
        if pick is not None and pick.path not in seen:
            seen.add(pick.path)
            related.append(DocumentRef.of(pick))

    breadcrumb: list[TopicCrumb] = []
    if document.phase is not None:
        breadcrumb = [
            TopicCrumb(phase=document.phase, topic=topic, current=topic == document.topic)
            for topic in sorted(index.topics_in_phase(document.phase))
        ]

    previous = _sibling(document, index, -1)
    following = _sibling(document, index, +1)

    return NavModel(
        document=DocumentRef.of(document),
        phase=document.phase,
        previous_depth=DocumentRef.of(previous) if previous else None,
        next_depth=DocumentRef.of(following) if following else None,
        related_documents=related,
        phase_breadcrumb=breadcrumb,
    )


__all__ = ["render_navigation_model"]
