"""Data contracts for the document graph."""

from docgraph.contracts.document import (
    DEPTH_ORDER,
    DateValue,
    Depth,
    Document,
    DocumentRef,
    Frontmatter,
    FrontmatterValue,
    IntegerValue,
    StringListValue,
    StringValue,
    UnsupportedValue,
)
from docgraph.contracts.issues import IssueKind, Severity, ValidationIssue
from docgraph.contracts.report import (
    AuditReport,
    Completeness,
    NavModel,
    TopicCrumb,
    TopicSummary,
)

__all__ = [
    # Documents
    "Depth",
    "DEPTH_ORDER",
    "Document",
    "DocumentRef",
    "Frontmatter",
    "FrontmatterValue",
    "StringValue",
    "StringListValue",
    "IntegerValue",
    "DateValue",
    "UnsupportedValue",
    # Issues
    "IssueKind",
    "Severity",
    "ValidationIssue",
    # Reports
    "AuditReport",
    "Completeness",
    "NavModel",
    "TopicCrumb",
    "TopicSummary",
]
