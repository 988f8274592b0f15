"""Unit tests for the phase/topic/depth index."""

import pytest

from docgraph.contracts.document import Depth
from docgraph.corpus.index import DuplicateDocumentError, build_index
from factories import make_document


@pytest.fixture
def documents():
    return [
        make_document(topic="ci", depth="surface"),
        make_document(topic="ci", depth="mid-depth"),
        make_document(phase="03-development", topic="api-design", depth="surface"),
        make_document(phase="03-development", topic="api-design", depth="deep-water"),
    ]


def test_lookup_by_phase_topic_depth(documents):
    index = build_index(documents)

    doc = index.lookup("04-testing", "ci", Depth.MID_DEPTH)
    assert doc is not None
    assert doc.path == "04-testing/ci/mid-depth/index.md"

    assert index.lookup("04-testing", "ci", Depth.DEEP_WATER) is None
    # Right slot, wrong phase
    assert index.lookup("03-development", "ci", Depth.SURFACE) is None


def test_phases_and_topics(documents):
    index = build_index(documents)

    assert index.phases() == ["03-development", "04-testing"]
    assert index.topics_in_phase("04-testing") == {"ci"}
    assert index.topics() == ["api-design", "ci"]
    assert index.phase_of("api-design") == "03-development"
    assert index.topic_exists("ci")
    assert not index.topic_exists("unknown")


def test_completeness(documents):
    index = build_index(documents)

    ci = index.completeness("ci")
    assert (ci.surface, ci.mid_depth, ci.deep_water) == (True, True, False)
    assert ci.missing == [Depth.DEEP_WATER]
    assert not ci.complete

    assert index.completeness("api-design").missing == [Depth.MID_DEPTH]
    assert index.completeness("nothing").missing == list(Depth)


def test_topic_summaries_are_sorted(documents):
    summaries = build_index(documents).topic_summaries()

    assert [s.topic for s in summaries] == ["api-design", "ci"]
    assert summaries[0].phase == "03-development"


def test_duplicate_slot_is_collected_not_raised():
    """Test that a contested slot yields one error naming both files."""
    first = make_document(path="04-testing/ci/surface/index.md", topic="ci")
    second = make_document(path="04-testing/ci/surface/copy.md", topic="ci")

    index = build_index([second, first])

    assert len(index.duplicates) == 1
    error = index.duplicates[0]
    assert error.topic == "ci"
    assert error.depth == Depth.SURFACE
    assert error.paths == [
        "04-testing/ci/surface/copy.md",
        "04-testing/ci/surface/index.md",
    ]
    assert "copy.md" in str(error) and "index.md" in str(error)
    # First path in sorted order keeps the slot
    assert index.slot("ci", Depth.SURFACE).path == "04-testing/ci/surface/copy.md"

    with pytest.raises(DuplicateDocumentError):
        index.raise_for_duplicates()


def test_duplicate_across_phases_is_still_a_duplicate():
    index = build_index(
        [
            make_document(phase="03-development", topic="ci"),
            make_document(phase="04-testing", topic="ci"),
        ]
    )

    assert len(index.duplicates) == 1
    assert len(index.duplicates[0].paths) == 2


def test_no_duplicates_does_not_raise(documents):
    build_index(documents).raise_for_duplicates()


def test_build_is_order_independent(documents):
    forward = build_index(documents)
    backward = build_index(list(reversed(documents)))

    assert [d.path for d in forward.documents] == [d.path for d in backward.documents]
    assert forward.topic_summaries() == backward.topic_summaries()


def test_unplaced_and_unknown_depth_documents():
    no_topic = make_document(path="loose/index.md", topic=None)
    bad_depth = make_document(path="04-testing/ci/expert/index.md", topic="ci", depth="expert")

    index = build_index([no_topic, bad_depth])

    assert index.unplaced == [no_topic]
    assert index.get("loose/index.md") is no_topic
    assert index.topics() == ["ci"]
    assert index.lookup("04-testing", "ci", None) is bad_depth
    assert index.documents_for_topic("ci") == [bad_depth]
    assert index.completeness("ci").missing == list(Depth)


class TestResolveReference:
    @pytest.fixture
    def index(self, documents):
        return build_index(documents)

    def test_slug(self, index):
        [doc] = index.resolve_reference("ci-mid-depth")
        assert doc.path == "04-testing/ci/mid-depth/index.md"

    def test_topic_depth_pair(self, index):
        [doc] = index.resolve_reference("api-design/deep-water")
        assert doc.depth == Depth.DEEP_WATER

    def test_phase_must_match(self, index):
        assert index.resolve_reference("04-testing/api-design/surface") == []
        assert len(index.resolve_reference("03-development/api-design/surface")) == 1

    def test_bare_topic_returns_all_in_depth_order(self, index):
        docs = index.resolve_reference("api-design")
        assert [d.depth for d in docs] == [Depth.SURFACE, Depth.DEEP_WATER]

    def test_relative_path(self, index):
        [doc] = index.resolve_reference(
            "../surface/index.md", "04-testing/ci/mid-depth/index.md"
        )
        assert doc.path == "04-testing/ci/surface/index.md"

    def test_unresolved(self, index):
        assert index.resolve_reference("ci-deep-water") == []
        assert index.resolve_reference("no-such-topic") == []
        assert index.resolve_reference("../deep-water/index.md", "04-testing/ci/surface/index.md") == []
