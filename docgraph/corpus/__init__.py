"""Corpus model - frontmatter, depth tiers, index, cross-reference graph."""

from docgraph.corpus.depth import (
    find_tier_gaps,
    next_depth,
    previous_depth,
    rank,
    validate_prerequisite_ordering,
)
from docgraph.corpus.frontmatter import MalformedFrontmatterError, parse, serialize, validate
from docgraph.corpus.graph import (
    CrossReferenceGraph,
    Edge,
    EdgeKind,
    build_graph,
    extract_links,
)
from docgraph.corpus.index import DocumentIndex, DuplicateDocumentError, build_index
from docgraph.corpus.loader import CorpusLoadError, DocumentLoader, LoadResult
from docgraph.corpus.navigation import render_navigation_model

__all__ = [
    # Frontmatter
    "MalformedFrontmatterError",
    "parse",
    "serialize",
    "validate",
    # Depth tiers
    "rank",
    "next_depth",
    "previous_depth",
    "validate_prerequisite_ordering",
    "find_tier_gaps",
    # Index
    "DocumentIndex",
    "DuplicateDocumentError",
    "build_index",
    # Graph
    "CrossReferenceGraph",
    "Edge",
    "EdgeKind",
    "build_graph",
    "extract_links",
    # Loading
    "CorpusLoadError",
    "DocumentLoader",
    "LoadResult",
    # Navigation
    "render_navigation_model",
]
