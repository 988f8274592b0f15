"""Report and navigation contracts."""

from pydantic import BaseModel, Field

from docgraph.contracts.document import Depth, DocumentRef
from docgraph.contracts.issues import IssueKind, Severity, ValidationIssue


class Completeness(BaseModel):
    """Which depth rungs exist for a topic."""

    surface: bool = False
    mid_depth: bool = False
    deep_water: bool = False

    @property
    def complete(self) -> bool:
        return self.surface and self.mid_depth and self.deep_water

    @property
    def missing(self) -> list[Depth]:
        present = {
            Depth.SURFACE: self.surface,
            Depth.MID_DEPTH: self.mid_depth,
            Depth.DEEP_WATER: self.deep_water,
        }
        return [depth for depth, exists in present.items() if not exists]


class TopicSummary(BaseModel):
    """Completeness row for one topic."""

    phase: str | None = Field(description="Phase the topic's documents declare")
    topic: str = Field(description="Topic slug")
    completeness: Completeness = Field(description="Existing depth rungs")


class TopicCrumb(BaseModel):
    """One topic entry of a phase breadcrumb."""

    phase: str
    topic: str
    current: bool = False


class NavModel(BaseModel):
    """Navigation data for one document's footer."""

    document: DocumentRef = Field(description="Document the model is for")
    phase: str | None = Field(default=None, description="Document phase")
    previous_depth: DocumentRef | None = Field(
        default=None, description="Nearest shallower document of the same topic"
    )
    next_depth: DocumentRef | None = Field(
        default=None, description="Nearest deeper document of the same topic"
    )
    related_documents: list[DocumentRef] = Field(
        default_factory=list, description="One document per related topic"
    )
    phase_breadcrumb: list[TopicCrumb] = Field(
        default_factory=list, description="Topics of the phase, current one flagged"
    )


class AuditReport(BaseModel):
    """Everything a validation run found."""

    root: str = Field(description="Corpus root that was scanned")
    documents_scanned: int = Field(default=0, ge=0, description="Files attempted")
    documents_loaded: int = Field(default=0, ge=0, description="Files parsed")
    learning_paths_scanned: int = Field(default=0, ge=0)
    orphaned_documents: int = Field(
        default=0, ge=0, description="Documents no learning path references"
    )
    issues: list[ValidationIssue] = Field(default_factory=list)
    topics: list[TopicSummary] = Field(default_factory=list)
    interrupted: bool = Field(
        default=False, description="Whether the run was aborted before finishing"
    )

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return any(i.severity == Severity.ERROR for i in self.issues)

    def issues_of(self, kind: IssueKind) -> list[ValidationIssue]:
        return [i for i in self.issues if i.kind == kind]

    def exit_code(self, strict: bool = False) -> int:
        """0 when clean, 1 on hard errors (or on warnings in strict mode)."""
        if self.has_errors:
            return 1
        if strict and self.warnings:
            return 1
        return 0


__all__ = [
    "Completeness",
    "TopicSummary",
    "TopicCrumb",
    "NavModel",
    "AuditReport",
]
