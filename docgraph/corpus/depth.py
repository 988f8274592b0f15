"""Depth tier ordering and the checks that depend on it."""

from docgraph.contracts.document import DEPTH_ORDER, Depth, Document
from docgraph.contracts.issues import IssueKind, Severity, ValidationIssue
from docgraph.corpus.index import DocumentIndex
from docgraph.corpus.references import parse_reference


def rank(depth: Depth | str) -> int:
    """surface=0, mid-depth=1, deep-water=2."""
    return DEPTH_ORDER.index(Depth(depth))


def next_depth(depth: Depth | str) -> Depth | None:
    position = rank(depth) + 1
    return DEPTH_ORDER[position] if position < len(DEPTH_ORDER) else None


def previous_depth(depth: Depth | str) -> Depth | None:
    position = rank(depth) - 1
    return DEPTH_ORDER[position] if position >= 0 else None


def validate_prerequisite_ordering(
    document: Document, index: DocumentIndex
) -> list[ValidationIssue]:
    """
    Check that a deeper document lists its shallower sibling as a prerequisite.

    The sibling may be named by slug (`topic-mid-depth`), by `topic/depth`, or
    by path. Whether that sibling actually exists is a dangling-reference
    question and is left to the cross-reference graph.
    """
    if document.topic is None or document.depth is None:
        return []

    shallower = previous_depth(document.depth)
    if shallower is None:
        return []

    for ref in document.prerequisites:
        parsed = parse_reference(ref, document.path)
        if parsed.topic == document.topic and parsed.depth == shallower:
            return []
        if parsed.path is not None:
            named = index.get(parsed.path)
            if named is not None and named.topic == document.topic and named.depth == shallower:
                return []

    expected = f"{document.topic}-{shallower.value}"
    return [
        ValidationIssue(
            kind=IssueKind.MISSING_SHALLOWER_PREREQUISITE,
            severity=Severity.WARNING,
            path=document.path,
            message=(
                f"{document.depth.value} document should list '{expected}' "
                "among its prerequisites"
            ),
            field="prerequisites",
            target=expected,
        )
    ]


def find_tier_gaps(index: DocumentIndex) -> list[ValidationIssue]:
    """
    Flag topics that skip a rung below their deepest document.

    A topic with only a surface document is incomplete but not gapped; a topic
    with surface and deep-water but no mid-depth is.
    """
    issues: list[ValidationIssue] = []

    for topic in index.topics():
        present = [d for d in DEPTH_ORDER if index.slot(topic, d) is not None]
        if not present:
            continue
        deepest = max(rank(d) for d in present)
        skipped = [d for d in DEPTH_ORDER[:deepest] if d not in present]
        if not skipped:
            continue

        anchor = index.slot(topic, DEPTH_ORDER[deepest])
        assert anchor is not None
        issues.append(
            ValidationIssue(
                kind=IssueKind.SKIPPED_TIER,
                severity=Severity.WARNING,
                path=anchor.path,
                message=(
                    f"Topic '{topic}' skips depth tier(s): "
                    + ", ".join(d.value for d in skipped)
                ),
                target=topic,
            )
        )

    return issues


__all__ = [
    "rank",
    "next_depth",
    "previous_depth",
    "validate_prerequisite_ordering",
    "find_tier_gaps",
]
