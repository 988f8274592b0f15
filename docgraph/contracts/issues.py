"""Validation issue contracts shared by every check."""

from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """How an issue affects the exit status."""

    ERROR = "error"  # hard: always fails the run
    WARNING = "warning"  # soft: fails only in strict mode
    INFO = "info"  # never fails the run


class IssueKind(str, Enum):
    # Hard errors
    MALFORMED_FRONTMATTER = "malformed_frontmatter"
    UNREADABLE_FILE = "unreadable_file"
    DUPLICATE_DOCUMENT = "duplicate_document"

    # Schema violations
    MISSING_FIELD = "missing_field"
    INVALID_TYPE = "invalid_type"
    INVALID_DEPTH = "invalid_depth"
    INVALID_READING_TIME = "invalid_reading_time"
    INVALID_DATE = "invalid_date"
    INVALID_SLUG = "invalid_slug"
    UNKNOWN_FIELD = "unknown_field"

    # Corpus integrity
    DANGLING_REFERENCE = "dangling_reference"
    SKIPPED_TIER = "skipped_tier"
    MISSING_SHALLOWER_PREREQUISITE = "missing_shallower_prerequisite"
    LOCATION_MISMATCH = "location_mismatch"

    # Learning paths and topic metadata
    INVALID_LEARNING_PATH = "invalid_learning_path"
    INCOMPLETE_PATH_STEP = "incomplete_path_step"
    MISSING_PATH_STEP = "missing_path_step"
    MISSING_TOPIC_METADATA = "missing_topic_metadata"


class ValidationIssue(BaseModel):
    """A single problem found in the corpus."""

    kind: IssueKind = Field(description="What kind of problem this is")
    severity: Severity = Field(description="Effect on the exit status")
    path: str = Field(description="File the issue belongs to")
    message: str = Field(description="Human-readable description")
    field: str | None = Field(default=None, description="Frontmatter key involved")
    target: str | None = Field(default=None, description="Reference that failed")

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR


__all__ = ["Severity", "IssueKind", "ValidationIssue"]
