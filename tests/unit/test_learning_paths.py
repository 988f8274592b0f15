"""Unit tests for learning-path and topic-metadata checks."""

import json

import pytest

from docgraph.audit.learning_paths import (
    LearningPath,
    audit_learning_paths,
    audit_topic_metadata,
)
from docgraph.contracts.issues import IssueKind, Severity
from docgraph.corpus.index import build_index
from factories import make_document


@pytest.fixture
def index():
    return build_index(
        [
            make_document(topic="ci", depth="surface"),
            make_document(topic="ci", depth="mid-depth"),
        ]
    )


@pytest.fixture
def paths_dir(tmp_path):
    directory = tmp_path / "learning-paths"
    directory.mkdir()
    return directory


def write_path(directory, name, data):
    target = directory / name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")


def test_all_step_shapes_are_collected():
    learning_path = LearningPath.model_validate(
        {
            "milestones": [{"steps": [{"topic": "a"}]}, {"steps": [{"topic": "b"}]}],
            "journey_steps": [{"topic": "c"}],
            "steps": [{"topic": "d"}],
            "title": "extra keys are kept",
        }
    )

    assert [s.topic for s in learning_path.all_steps()] == ["a", "b", "c", "d"]


def test_valid_path(paths_dir, index):
    write_path(
        paths_dir,
        "new-developer.json",
        {
            "milestones": [
                {
                    "steps": [
                        {"phase": "04-testing", "topic": "ci", "depth": "surface"},
                        {"phase": "04-testing", "topic": "ci", "depth": "mid-depth"},
                    ]
                }
            ]
        },
    )

    audit = audit_learning_paths(paths_dir, index)

    assert audit.paths_scanned == 1
    assert audit.steps_checked == 2
    assert audit.valid_references == 2
    assert audit.issues == []
    assert audit.referenced_documents == {
        "04-testing/ci/surface/index.md",
        "04-testing/ci/mid-depth/index.md",
    }
    assert audit.referenced_topics == {"ci"}


def test_missing_and_incomplete_steps(paths_dir, index):
    write_path(
        paths_dir,
        "roles/lead.json",
        {
            "steps": [
                {"phase": "04-testing", "topic": "ci", "depth": "deep-water"},
                {"phase": "03-development", "topic": "ci", "depth": "surface"},
                {"phase": "04-testing", "topic": "ci", "depth": "abyss"},
                {"topic": "ci"},
                {"note": "Reflect on your own pipeline"},
            ]
        },
    )

    audit = audit_learning_paths(paths_dir, index)

    assert audit.valid_references == 0
    assert [i.kind for i in audit.issues] == [
        IssueKind.MISSING_PATH_STEP,
        IssueKind.MISSING_PATH_STEP,
        IssueKind.MISSING_PATH_STEP,
        IssueKind.INCOMPLETE_PATH_STEP,
    ]
    assert audit.issues[0].path == "learning-paths/roles/lead.json"
    assert audit.issues[0].target == "04-testing/ci/deep-water"
    assert "Step 4" in audit.issues[3].message


def test_unparseable_file_is_reported_and_skipped(paths_dir, index):
    write_path(paths_dir, "broken.json", "{not json")
    write_path(paths_dir, "wrong-shape.json", {"steps": "nope"})

    audit = audit_learning_paths(paths_dir, index)

    assert audit.paths_scanned == 2
    assert [i.kind for i in audit.issues] == [IssueKind.INVALID_LEARNING_PATH] * 2
    assert all(i.severity == Severity.WARNING for i in audit.issues)


def test_topic_metadata(tmp_path):
    metadata_dir = tmp_path / "metadata"
    (metadata_dir / "topics").mkdir(parents=True)
    (metadata_dir / "topics" / "ci.json").write_text("{}", encoding="utf-8")

    issues = audit_topic_metadata(metadata_dir, ["lint", "ci", "lint"])

    assert [(i.kind, i.target) for i in issues] == [(IssueKind.MISSING_TOPIC_METADATA, "lint")]
    assert issues[0].severity == Severity.INFO
    assert issues[0].path == "metadata/topics/lint.json"


def test_null_lists_and_loose_entries_do_not_reject_the_file(paths_dir, index):
    """Test that null step lists count as absent and non-object steps as incomplete."""
    write_path(
        paths_dir,
        "sparse.json",
        {
            "milestones": None,
            "journey_steps": None,
            "steps": [
                {"phase": "04-testing", "topic": "ci", "depth": "surface"},
                "loose text",
            ],
        },
    )

    audit = audit_learning_paths(paths_dir, index)

    assert audit.paths_scanned == 1
    assert audit.steps_checked == 2
    assert audit.valid_references == 1
    assert [i.kind for i in audit.issues] == [IssueKind.INCOMPLETE_PATH_STEP]
    assert "Step 2" in audit.issues[0].message


def test_milestone_with_null_steps():
    learning_path = LearningPath.model_validate(
        {"milestones": [{"steps": None}, {"steps": [{"topic": "a"}]}], "steps": None}
    )

    assert len(learning_path.milestones) == 2
    assert [s.topic for s in learning_path.all_steps()] == ["a"]
