"""Document loader for the corpus."""

import asyncio
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from docgraph.contracts.document import Document
from docgraph.contracts.issues import IssueKind, Severity, ValidationIssue
from docgraph.corpus.constants import CORPUS_EXTENSIONS
from docgraph.corpus.frontmatter import MalformedFrontmatterError, parse

logger = logging.getLogger(__name__)


class CorpusLoadError(Exception):
    """Raised when the corpus root itself cannot be scanned."""


LoadOutcome = Document | ValidationIssue


@dataclass
class LoadResult:
    """Parsed documents plus one hard-error issue per file that failed."""

    documents: list[Document] = field(default_factory=list)
    failures: list[ValidationIssue] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.documents) + len(self.failures)

    def add(self, outcome: LoadOutcome) -> None:
        match outcome:
            case Document():
                self.documents.append(outcome)
            case ValidationIssue():
                self.failures.append(outcome)


class DocumentLoader:
    """
    Load markdown documents from the corpus directory.

    Per-file failures (unreadable bytes, missing delimiters, broken YAML)
    never stop the scan: each becomes a hard-error issue in the result.
    """

    def __init__(self, corpus_path: Path | str):
        """
        Initialize document loader.

        Args:
            corpus_path: Path to the corpus directory
        """
        self.corpus_path = Path(corpus_path)

    def _find_markdown_files(self) -> list[Path]:
        """Find all markdown files in the corpus directory."""
        if not self.corpus_path.is_dir():
            raise CorpusLoadError(f"Corpus directory not found: {self.corpus_path}")

        files: list[Path] = []
        for ext in CORPUS_EXTENSIONS:
            files.extend(p for p in self.corpus_path.rglob(ext) if p.is_file())

        return sorted(files)

    def relative_path(self, file_path: Path) -> str:
        return file_path.relative_to(self.corpus_path).as_posix()

    def load_document(self, file_path: Path) -> LoadOutcome:
        """
        Load a single document.

        Returns the Document, or a hard-error ValidationIssue describing why
        the file could not be parsed.
        """
        rel_path = self.relative_path(file_path)

        try:
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            return ValidationIssue(
                kind=IssueKind.UNREADABLE_FILE,
                severity=Severity.ERROR,
                path=rel_path,
                message=f"File is not UTF-8 text: {e}",
            )
        except OSError as e:
            return ValidationIssue(
                kind=IssueKind.UNREADABLE_FILE,
                severity=Severity.ERROR,
                path=rel_path,
                message=f"Cannot read file: {e}",
            )

        try:
            frontmatter, body = parse(content)
        except MalformedFrontmatterError as e:
            return ValidationIssue(
                kind=IssueKind.MALFORMED_FRONTMATTER,
                severity=Severity.ERROR,
                path=rel_path,
                message=str(e),
            )

        return Document(path=rel_path, frontmatter=frontmatter, body=body)

    def iter_documents(self) -> Iterator[LoadOutcome]:
        """Yield one outcome per file in path order, loading lazily."""
        for file_path in self._find_markdown_files():
            outcome = self.load_document(file_path)
            if isinstance(outcome, ValidationIssue):
                logger.info("Failed to load %s: %s", outcome.path, outcome.message)
            yield outcome

    def load_corpus_sync(self) -> LoadResult:
        """Load all documents one after another."""
        result = LoadResult()
        for outcome in self.iter_documents():
            result.add(outcome)
        return result

    async def load_corpus(self, concurrency: int = 8) -> LoadResult:
        """
        Load all documents with parallel file reads.

        Files are parsed concurrently in worker threads (at most `concurrency`
        at a time) and merged in path order, so the result matches
        `load_corpus_sync()` exactly.
        """
        files = self._find_markdown_files()
        if not files:
            return LoadResult()

        semaphore = asyncio.Semaphore(max(concurrency, 1))

        async def load_one(file_path: Path) -> LoadOutcome:
            async with semaphore:
                return await asyncio.to_thread(self.load_document, file_path)

        outcomes = await asyncio.gather(*(load_one(p) for p in files))

        result = LoadResult()
        for outcome in outcomes:
            if isinstance(outcome, ValidationIssue):
                logger.info("Failed to load %s: %s", outcome.path, outcome.message)
            result.add(outcome)
        return result


__all__ = ["DocumentLoader", "CorpusLoadError", "LoadResult", "LoadOutcome"]
