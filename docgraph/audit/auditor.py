"""
Corpus audit orchestration.

Runs the whole batch in one direction:

    load files -> frontmatter schema -> index -> depth tiers -> graph
    -> dangling references -> learning paths -> topic metadata

Every finding lands in a single AuditReport. Nothing is persisted, so an
interrupted run can still hand back what it collected so far.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from docgraph.audit.learning_paths import audit_learning_paths, audit_topic_metadata
from docgraph.contracts.document import Document
from docgraph.contracts.issues import IssueKind, Severity, ValidationIssue
from docgraph.contracts.report import AuditReport
from docgraph.corpus.depth import find_tier_gaps, validate_prerequisite_ordering
from docgraph.corpus.frontmatter import validate
from docgraph.corpus.graph import CrossReferenceGraph, EdgeKind, build_graph
from docgraph.corpus.index import DocumentIndex, build_index
from docgraph.corpus.loader import DocumentLoader, LoadResult

if TYPE_CHECKING:
    from docgraph.cli.progress import ProgressCallback

logger = logging.getLogger(__name__)

_EDGE_LABELS = {
    EdgeKind.RELATED_TOPIC: "related topic",
    EdgeKind.PREREQUISITE: "prerequisite",
    EdgeKind.BODY_LINK: "body link",
    EdgeKind.NAVIGATION_LINK: "navigation link",
}

_EDGE_FIELDS = {
    EdgeKind.RELATED_TOPIC: "related_topics",
    EdgeKind.PREREQUISITE: "prerequisites",
}

AUDIT_PIPELINE = [
    ("load", "Loading documents"),
    ("schema", "Validating frontmatter"),
    ("index", "Building phase/topic index"),
    ("graph", "Checking cross-references"),
    ("paths", "Checking learning paths"),
]


def validate_location(document: Document) -> list[ValidationIssue]:
    """Frontmatter must agree with a `<phase>/<topic>/<depth>/index.md` path."""
    location = document.location
    if location is None:
        return []

    declared = (
        document.phase,
        document.topic,
        document.depth.value if document.depth else None,
    )
    issues: list[ValidationIssue] = []
    for key, from_path, value in zip(("phase", "topic", "depth"), location, declared):
        if value is not None and value != from_path:
            issues.append(
                ValidationIssue(
                    kind=IssueKind.LOCATION_MISMATCH,
                    severity=Severity.WARNING,
                    path=document.path,
                    message=f"Frontmatter {key} '{value}' does not match path segment '{from_path}'",
                    field=key,
                )
            )
    return issues


class CorpusAuditor:
    """
    Audit a content directory and collect every problem into one report.

    Usage:
        auditor = CorpusAuditor(Path("content"), learning_paths_dir=Path("learning-paths"))
        report = auditor.run()
        sys.exit(report.exit_code(strict=False))
    """

    def __init__(
        self,
        corpus_path: Path | str,
        learning_paths_dir: Path | str | None = None,
        metadata_dir: Path | str | None = None,
        progress: "ProgressCallback | None" = None,
    ):
        self.corpus_path = Path(corpus_path)
        self.learning_paths_dir = Path(learning_paths_dir) if learning_paths_dir else None
        self.metadata_dir = Path(metadata_dir) if metadata_dir else None
        self.progress = progress
        self.loader = DocumentLoader(self.corpus_path)

        self.report = AuditReport(root=str(self.corpus_path))
        self._loaded: list[Document] = []
        self.index: DocumentIndex | None = None
        self.graph: CrossReferenceGraph | None = None

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def run(self) -> AuditReport:
        """Load files one by one, then analyze."""
        self._start("load")
        for outcome in self.loader.iter_documents():
            self._record_outcome(outcome)
        self._complete_load()
        return self._analyze()

    async def run_async(self, concurrency: int = 8) -> AuditReport:
        """Load files concurrently, then analyze."""
        self._start("load")
        result: LoadResult = await self.loader.load_corpus(concurrency=concurrency)
        for document in result.documents:
            self._record_outcome(document)
        for failure in result.failures:
            self._record_outcome(failure)
        self._complete_load()
        return self._analyze()

    def partial_report(self) -> AuditReport:
        """Whatever has been collected so far, marked as interrupted."""
        return self.report.model_copy(update={"interrupted": True}, deep=True)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _record_outcome(self, outcome: Document | ValidationIssue) -> None:
        self.report.documents_scanned += 1
        match outcome:
            case Document():
                self._loaded.append(outcome)
                self.report.documents_loaded += 1
            case ValidationIssue():
                self.report.issues.append(outcome)

    def _complete_load(self) -> None:
        self._detail(
            f"Loaded {self.report.documents_loaded} of {self.report.documents_scanned} files"
        )
        self._complete("load", success=self.report.documents_loaded == self.report.documents_scanned)

    def _analyze(self) -> AuditReport:
        documents = self._loaded

        self._start("schema")
        before = len(self.report.issues)
        for document in documents:
            self.report.issues.extend(validate(document.frontmatter, document.path))
            self.report.issues.extend(validate_location(document))
        self._detail(f"{len(self.report.issues) - before} schema issue(s)")
        self._complete("schema")

        self._start("index")
        index = build_index(documents)
        self.index = index
        for conflict in index.duplicates:
            self.report.issues.append(
                ValidationIssue(
                    kind=IssueKind.DUPLICATE_DOCUMENT,
                    severity=Severity.ERROR,
                    path=conflict.paths[0],
                    message=str(conflict),
                    target=f"{conflict.topic}-{conflict.depth.value}",
                )
            )
        self.report.issues.extend(find_tier_gaps(index))
        for document in index.documents:
            self.report.issues.extend(validate_prerequisite_ordering(document, index))
        self.report.topics = index.topic_summaries()
        self._detail(f"{len(index.phases())} phase(s), {len(index.topics())} topic(s)")
        self._complete("index", success=not index.duplicates)

        self._start("graph")
        graph = build_graph(index)
        self.graph = graph
        dangling = graph.find_dangling_edges()
        for source, edge in dangling:
            label = _EDGE_LABELS[edge.kind]
            self.report.issues.append(
                ValidationIssue(
                    kind=IssueKind.DANGLING_REFERENCE,
                    severity=Severity.WARNING,
                    path=source.path,
                    message=f"Dangling {label} reference '{edge.target}'",
                    field=_EDGE_FIELDS.get(edge.kind),
                    target=edge.target,
                )
            )
        self._detail(f"{len(graph.edges())} edge(s), {len(dangling)} dangling")
        self._complete("graph")

        self._audit_paths(index)

        logger.info(
            "Audit of %s finished: %d documents, %d errors, %d warnings",
            self.corpus_path,
            self.report.documents_loaded,
            len(self.report.errors),
            len(self.report.warnings),
        )
        return self.report

    def _audit_paths(self, index: DocumentIndex) -> None:
        self._start("paths")
        topics: set[str] = set(index.topics())

        if self.learning_paths_dir is not None and self.learning_paths_dir.is_dir():
            audit = audit_learning_paths(self.learning_paths_dir, index)
            self.report.issues.extend(audit.issues)
            self.report.learning_paths_scanned = audit.paths_scanned
            self.report.orphaned_documents = sum(
                1 for d in index.documents if d.path not in audit.referenced_documents
            )
            topics |= audit.referenced_topics
            self._detail(
                f"{audit.paths_scanned} path(s), {audit.valid_references} valid step(s)"
            )
        elif self.learning_paths_dir is not None:
            logger.warning("Learning paths directory not found: %s", self.learning_paths_dir)

        if self.metadata_dir is not None and self.metadata_dir.is_dir():
            self.report.issues.extend(audit_topic_metadata(self.metadata_dir, topics))
        elif self.metadata_dir is not None:
            logger.warning("Metadata directory not found: %s", self.metadata_dir)

        self._complete("paths")

    # -------------------------------------------------------------------------
    # Progress hooks
    # -------------------------------------------------------------------------

    def _start(self, step_id: str) -> None:
        if self.progress is not None:
            description = dict(AUDIT_PIPELINE).get(step_id, step_id)
            self.progress.on_step_start(step_id, description)

    def _detail(self, detail: str) -> None:
        if self.progress is not None:
            self.progress.on_step_detail(detail)

    def _complete(self, step_id: str, success: bool = True) -> None:
        if self.progress is not None:
            self.progress.on_step_complete(step_id, success)


__all__ = ["CorpusAuditor", "AUDIT_PIPELINE", "validate_location"]
