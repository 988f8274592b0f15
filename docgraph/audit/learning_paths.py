"""Learning-path and topic-metadata checks against the built index."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from docgraph.contracts.document import Depth
from docgraph.contracts.issues import IssueKind, Severity, ValidationIssue
from docgraph.corpus.constants import LEARNING_PATH_EXTENSIONS
from docgraph.corpus.index import DocumentIndex

logger = logging.getLogger(__name__)


def _as_object_list(value: Any) -> Any:
    """Null means absent; entries that are not objects become empty ones."""
    if value is None:
        return []
    if isinstance(value, list):
        return [item if isinstance(item, dict) else {} for item in value]
    return value


class PathStep(BaseModel):
    """One step of a learning path. Dynamic steps carry a note or problem instead."""

    model_config = ConfigDict(extra="allow")

    phase: str | None = None
    topic: str | None = None
    depth: str | None = None
    note: str | None = None
    problem: str | None = None

    @property
    def is_dynamic(self) -> bool:
        return bool(self.note or self.problem)


class Milestone(BaseModel):
    model_config = ConfigDict(extra="allow")

    steps: list[PathStep] = Field(default_factory=list)

    @field_validator("steps", mode="before")
    @classmethod
    def absent_as_empty(cls, v: Any) -> Any:
        return _as_object_list(v)


class LearningPath(BaseModel):
    """A curated sequence of documents, stored as JSON."""

    model_config = ConfigDict(extra="allow")

    description: str | None = None
    category: str | None = None
    milestones: list[Milestone] = Field(default_factory=list)
    journey_steps: list[PathStep] = Field(default_factory=list)
    steps: list[PathStep] = Field(default_factory=list)

    @field_validator("milestones", "journey_steps", "steps", mode="before")
    @classmethod
    def absent_as_empty(cls, v: Any) -> Any:
        return _as_object_list(v)

    def all_steps(self) -> list[PathStep]:
        collected = [step for milestone in self.milestones for step in milestone.steps]
        return collected + list(self.journey_steps) + list(self.steps)


@dataclass
class LearningPathAudit:
    paths_scanned: int = 0
    steps_checked: int = 0
    valid_references: int = 0
    issues: list[ValidationIssue] = field(default_factory=list)
    referenced_documents: set[str] = field(default_factory=set)
    referenced_topics: set[str] = field(default_factory=set)


def _find_path_files(paths_dir: Path) -> list[Path]:
    files: list[Path] = []
    for ext in LEARNING_PATH_EXTENSIONS:
        files.extend(p for p in paths_dir.rglob(ext) if p.is_file())
    return sorted(files)


def audit_learning_paths(paths_dir: Path, index: DocumentIndex) -> LearningPathAudit:
    """
    Check that every learning-path step points at an existing document.

    Steps without phase/topic/depth are skipped when they are dynamic (have a
    note or problem) and flagged otherwise. Unparseable files are reported and
    skipped.
    """
    audit = LearningPathAudit()

    for file_path in _find_path_files(paths_dir):
        label = f"{paths_dir.name}/{file_path.relative_to(paths_dir).as_posix()}"
        audit.paths_scanned += 1

        try:
            learning_path = LearningPath.model_validate_json(
                file_path.read_text(encoding="utf-8")
            )
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            audit.issues.append(
                ValidationIssue(
                    kind=IssueKind.INVALID_LEARNING_PATH,
                    severity=Severity.WARNING,
                    path=label,
                    message=f"Failed to parse learning path: {e}",
                )
            )
            continue

        for number, step in enumerate(learning_path.all_steps(), start=1):
            audit.steps_checked += 1

            if not (step.phase and step.topic and step.depth):
                if step.is_dynamic:
                    continue
                audit.issues.append(
                    ValidationIssue(
                        kind=IssueKind.INCOMPLETE_PATH_STEP,
                        severity=Severity.WARNING,
                        path=label,
                        message=f"Step {number} is missing phase/topic/depth",
                    )
                )
                continue

            audit.referenced_topics.add(step.topic)
            target = f"{step.phase}/{step.topic}/{step.depth}"
            document = None
            if step.depth in {d.value for d in Depth}:
                document = index.lookup(step.phase, step.topic, Depth(step.depth))

            if document is None:
                audit.issues.append(
                    ValidationIssue(
                        kind=IssueKind.MISSING_PATH_STEP,
                        severity=Severity.WARNING,
                        path=label,
                        message=f"Step {number} references missing content {target}",
                        target=target,
                    )
                )
                continue

            audit.valid_references += 1
            audit.referenced_documents.add(document.path)

    logger.debug(
        "Checked %d learning paths (%d steps, %d valid references)",
        audit.paths_scanned,
        audit.steps_checked,
        audit.valid_references,
    )
    return audit


def audit_topic_metadata(metadata_dir: Path, topics: Iterable[str]) -> list[ValidationIssue]:
    """Report topics with no `topics/<topic>.json` metadata file."""
    issues: list[ValidationIssue] = []
    for topic in sorted(set(topics)):
        metadata_path = metadata_dir / "topics" / f"{topic}.json"
        if not metadata_path.is_file():
            issues.append(
                ValidationIssue(
                    kind=IssueKind.MISSING_TOPIC_METADATA,
                    severity=Severity.INFO,
                    path=f"{metadata_dir.name}/topics/{topic}.json",
                    message=f"Missing metadata file for topic '{topic}'",
                    target=topic,
                )
            )
    return issues


__all__ = [
    "LearningPath",
    "LearningPathAudit",
    "Milestone",
    "PathStep",
    "audit_learning_paths",
    "audit_topic_metadata",
]
