"""
Cross-reference graph over the indexed corpus.

Nodes are documents; `related_topic` edges point at a whole topic and resolve
to every document of it. The graph is general and directed: cycles are legal,
so every traversal tracks visited nodes.

Build it only after the index is complete, since edges resolve against it:

    index = build_index(documents)
    graph = build_graph(index)
    graph.find_dangling_edges()
"""

import logging
import posixpath
import re
from collections import deque
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict

from docgraph.contracts.document import Depth, Document
from docgraph.corpus.constants import NAVIGATION_HEADINGS
from docgraph.corpus.index import DocumentIndex
from docgraph.corpus.references import parse_link

logger = logging.getLogger(__name__)


class EdgeKind(str, Enum):
    RELATED_TOPIC = "related_topic"
    PREREQUISITE = "prerequisite"
    BODY_LINK = "body_link"
    NAVIGATION_LINK = "navigation_link"


_KIND_ORDER = {kind: i for i, kind in enumerate(EdgeKind)}


class Edge(BaseModel):
    """A directed reference from one document to a target as written."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    kind: EdgeKind


# =============================================================================
# Link extraction
# =============================================================================


@dataclass(frozen=True)
class ExtractedLink:
    text: str
    target: str
    kind: EdgeKind
    line: int


_LINK_RE = re.compile(r"(?<!!)\[([^\]]*)\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")
_HEADING_RE = re.compile(r"^\s{0,3}#{1,6}\s+(.*?)\s*#*\s*$")
_BOLD_LABEL_RE = re.compile(r"^\s*\*\*(.+?)\*\*:?\s*$")
_FENCE_RE = re.compile(r"^\s{0,3}(```|~~~)")
_INLINE_CODE_RE = re.compile(r"`[^`]*`")
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def _is_navigation_label(text: str) -> bool:
    label = re.sub(r"[^a-z ]", "", text.lower()).strip()
    return any(label.startswith(heading) for heading in NAVIGATION_HEADINGS)


def _document_target(target: str) -> str | None:
    """Strip query/fragment; None when the target is not a corpus document."""
    if target.startswith(("#", "//")) or _SCHEME_RE.match(target):
        return None
    cleaned = target.split("#", 1)[0].split("?", 1)[0]
    if not cleaned:
        return None
    suffix = posixpath.splitext(cleaned.rstrip("/"))[1].lower()
    if suffix not in ("", ".md"):
        return None
    return cleaned


def extract_links(body: str) -> list[ExtractedLink]:
    """
    Scan markdown for relative document links.

    A plain text scan, not a markdown parse: fenced code blocks and inline code
    are skipped, and links under a navigation heading (or a bold
    "**Related Topics**"-style label) are tagged as navigation links.
    """
    links: list[ExtractedLink] = []
    in_fence = False
    in_navigation = False

    for lineno, line in enumerate(body.splitlines(), start=1):
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            in_navigation = _is_navigation_label(heading.group(1))
            continue
        label = _BOLD_LABEL_RE.match(line)
        if label and _is_navigation_label(label.group(1)):
            in_navigation = True
            continue

        kind = EdgeKind.NAVIGATION_LINK if in_navigation else EdgeKind.BODY_LINK
        for match in _LINK_RE.finditer(_INLINE_CODE_RE.sub("", line)):
            target = _document_target(match.group(2))
            if target is not None:
                links.append(
                    ExtractedLink(text=match.group(1), target=target, kind=kind, line=lineno)
                )

    return links


# =============================================================================
# Graph
# =============================================================================


@dataclass
class CrossReferenceGraph:
    """Directed reference graph resolved against a built index."""

    index: DocumentIndex

    _edges: list[Edge] = field(default_factory=list)
    _seen: set[Edge] = field(default_factory=set)
    _outgoing: dict[str, list[Edge]] = field(default_factory=dict)
    _resolved: dict[Edge, list[Document]] = field(default_factory=dict)

    def _add(self, edge: Edge) -> None:
        if edge in self._seen:
            return
        self._seen.add(edge)
        self._edges.append(edge)
        self._outgoing.setdefault(edge.source, []).append(edge)

    def add_edges_from_frontmatter(self, document: Document) -> None:
        for topic in document.related_topics:
            self._add(Edge(source=document.path, target=topic, kind=EdgeKind.RELATED_TOPIC))
        for ref in document.prerequisites:
            self._add(Edge(source=document.path, target=ref, kind=EdgeKind.PREREQUISITE))

    def add_edges_from_body(self, document: Document, links: list[ExtractedLink]) -> None:
        for link in links:
            self._add(Edge(source=document.path, target=link.target, kind=link.kind))

    def edges(self, kind: EdgeKind | None = None) -> list[Edge]:
        return [e for e in self._edges if kind is None or e.kind == kind]

    def edges_from(self, document: Document, kind: EdgeKind | None = None) -> list[Edge]:
        return [
            e for e in self._outgoing.get(document.path, []) if kind is None or e.kind == kind
        ]

    def resolve(self, edge: Edge) -> list[Document]:
        """Documents an edge points at; empty when the edge dangles."""
        if edge not in self._resolved:
            self._resolved[edge] = self._resolve(edge)
        return self._resolved[edge]

    def _resolve(self, edge: Edge) -> list[Document]:
        match edge.kind:
            case EdgeKind.RELATED_TOPIC:
                return self.index.documents_for_topic(edge.target)
            case EdgeKind.PREREQUISITE:
                return self.index.resolve_reference(edge.target, edge.source)
            case _:
                return self.index.resolve_reference(parse_link(edge.target, edge.source))

    def find_dangling_edges(self) -> list[tuple[Document, Edge]]:
        """Every edge whose target is not in the index, once each."""
        dangling: list[tuple[Document, Edge]] = []
        for edge in sorted(
            self._edges, key=lambda e: (e.source, _KIND_ORDER[e.kind], e.target)
        ):
            if self.resolve(edge):
                continue
            source = self.index.get(edge.source)
            if source is None:
                logger.warning("Edge source %s is not indexed", edge.source)
                continue
            dangling.append((source, edge))
        return dangling

    def related_documents(
        self,
        document: Document,
        kind: EdgeKind | None = None,
        depth: Depth | None = None,
        hops: int = 1,
    ) -> list[Document]:
        """
        Documents reachable within `hops` edges, in discovery order.

        Args:
            document: Start document (never part of the result)
            kind: Only follow edges of this kind
            depth: Only return documents at this depth
            hops: Maximum number of edges to follow
        """
        visited = {document.path}
        found: list[Document] = []
        frontier = [document]

        for _ in range(max(hops, 0)):
            next_frontier: list[Document] = []
            for node in frontier:
                for edge in self.edges_from(node, kind):
                    for target in self.resolve(edge):
                        if target.path in visited:
                            continue
                        visited.add(target.path)
                        found.append(target)
                        next_frontier.append(target)
            if not next_frontier:
                break
            frontier = next_frontier

        if depth is not None:
            found = [d for d in found if d.depth == depth]
        return found

    def shortest_prerequisite_path(
        self, from_document: Document, to_document: Document
    ) -> list[Document] | None:
        """BFS over prerequisite edges; the path includes both endpoints."""
        if from_document.path == to_document.path:
            return [from_document]

        parents: dict[str, Document | None] = {from_document.path: None}
        queue: deque[Document] = deque([from_document])

        while queue:
            node = queue.popleft()
            for edge in self.edges_from(node, EdgeKind.PREREQUISITE):
                for target in self.resolve(edge):
                    if target.path in parents:
                        continue
                    parents[target.path] = node
                    if target.path == to_document.path:
                        return self._unwind(parents, target)
                    queue.append(target)

        return None

    @staticmethod
    def _unwind(parents: dict[str, Document | None], last: Document) -> list[Document]:
        path = [last]
        parent = parents[last.path]
        while parent is not None:
            path.append(parent)
            parent = parents[parent.path]
        path.reverse()
        return path


def build_graph(index: DocumentIndex) -> CrossReferenceGraph:
    """Add frontmatter and body edges for every indexed document."""
    graph = CrossReferenceGraph(index=index)
    for document in index.documents:
        graph.add_edges_from_frontmatter(document)
        graph.add_edges_from_body(document, extract_links(document.body))
    logger.debug("Built cross-reference graph with %d edges", len(graph.edges()))
    return graph


__all__ = [
    "CrossReferenceGraph",
    "Edge",
    "EdgeKind",
    "ExtractedLink",
    "build_graph",
    "extract_links",
]
