"""CLI entry point for docgraph."""

import asyncio
import logging
import sys
from pathlib import Path

import click

from docgraph.audit.auditor import AUDIT_PIPELINE, CorpusAuditor
from docgraph.audit.report import render_json, render_text
from docgraph.cli.progress import create_pipeline_tracker
from docgraph.contracts.document import DEPTH_ORDER, Document
from docgraph.contracts.report import AuditReport
from docgraph.corpus.graph import CrossReferenceGraph, build_graph
from docgraph.corpus.index import DocumentIndex, build_index
from docgraph.corpus.loader import CorpusLoadError, DocumentLoader
from docgraph.corpus.navigation import render_navigation_model
from docgraph.settings import get_settings

logger = logging.getLogger(__name__)

EXIT_LOAD_ERROR = 2
EXIT_INTERRUPTED = 130


def load_corpus(corpus_path: Path) -> tuple[DocumentIndex, CrossReferenceGraph]:
    """Load, index and link a corpus without running the full audit."""
    loader = DocumentLoader(corpus_path)
    result = loader.load_corpus_sync()
    for failure in result.failures:
        logger.warning("Skipping %s: %s", failure.path, failure.message)

    index = build_index(result.documents)
    return index, build_graph(index)


def _resolve_root(root: Path | None) -> Path:
    return root if root is not None else Path(get_settings().content_dir)


def _find_document(index: DocumentIndex, ref: str) -> Document:
    """Look a document up by corpus path or by `<topic>-<depth>` slug."""
    document = index.get(ref)
    if document is not None:
        return document
    matches = index.resolve_reference(ref)
    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise click.BadParameter(f"No document matches '{ref}'")
    raise click.BadParameter(
        f"'{ref}' is ambiguous: " + ", ".join(d.path for d in matches)
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
@click.pass_context
def app(ctx: click.Context, verbose: bool):
    """docgraph - Validate a depth-tiered documentation corpus."""
    ctx.ensure_object(dict)

    settings = get_settings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj["settings"] = settings


@app.command()
@click.argument(
    "root", type=click.Path(file_okay=False, path_type=Path), required=False
)
@click.option("--strict", is_flag=True, help="Fail on warnings as well as errors")
@click.option(
    "--format",
    "report_format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Report format (default: text)",
)
@click.option(
    "--learning-paths",
    "learning_paths",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory of learning-path JSON files to check",
)
@click.option(
    "--metadata",
    "metadata",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory with topics/<topic>.json metadata files",
)
@click.option(
    "--concurrency",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Files parsed in parallel (default: 1)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the report to a file instead of stdout",
)
@click.option("--quiet", "-q", is_flag=True, help="Hide step progress")
@click.pass_context
def validate(
    ctx: click.Context,
    root: Path | None,
    strict: bool,
    report_format: str | None,
    learning_paths: Path | None,
    metadata: Path | None,
    concurrency: int | None,
    output: Path | None,
    quiet: bool,
):
    """Audit every document under ROOT and report all problems at once.

    Exits 0 when no hard errors (malformed frontmatter, duplicate slots) are
    found and 1 otherwise. With --strict, warnings also fail the run.
    """
    settings = ctx.obj["settings"]
    root = _resolve_root(root)
    strict = strict or settings.strict
    report_format = report_format or settings.report_format
    concurrency = concurrency or settings.concurrency
    if learning_paths is None and settings.learning_paths_dir:
        learning_paths = Path(settings.learning_paths_dir)
    if metadata is None and settings.metadata_dir:
        metadata = Path(settings.metadata_dir)

    callback = None
    if report_format == "text" and not quiet:
        _, callback = create_pipeline_tracker(AUDIT_PIPELINE)

    auditor = CorpusAuditor(
        root,
        learning_paths_dir=learning_paths,
        metadata_dir=metadata,
        progress=callback,
    )

    report: AuditReport
    try:
        if concurrency > 1:
            report = asyncio.run(auditor.run_async(concurrency=concurrency))
        else:
            report = auditor.run()
    except CorpusLoadError as e:
        click.echo(f"\n✗ {e}", err=True)
        sys.exit(EXIT_LOAD_ERROR)
    except KeyboardInterrupt:
        report = auditor.partial_report()

    if report_format == "json":
        rendered = render_json(report, strict=strict)
    else:
        rendered = render_text(report, strict=strict)

    if output is not None:
        output.write_text(rendered + "\n", encoding="utf-8")
        click.echo(f"Report saved to: {output}", err=True)
    else:
        click.echo(rendered)

    if report.interrupted:
        sys.exit(EXIT_INTERRUPTED)
    sys.exit(report.exit_code(strict=strict))


@app.command()
@click.argument(
    "root", type=click.Path(file_okay=False, path_type=Path), required=False
)
def stats(root: Path | None):
    """Show phases, topics and which depth tiers exist."""
    try:
        index, graph = load_corpus(_resolve_root(root))
    except CorpusLoadError as e:
        click.echo(f"\n✗ {e}", err=True)
        sys.exit(EXIT_LOAD_ERROR)

    click.echo("\n=== Corpus Statistics ===")
    click.echo(f"Documents: {len(index.documents)}")
    click.echo(f"Phases: {len(index.phases())}")
    click.echo(f"Topics: {len(index.topics())}")
    click.echo(f"Cross-references: {len(graph.edges())}")

    for phase in index.phases():
        click.echo(f"\n{phase}:")
        for topic in sorted(index.topics_in_phase(phase)):
            completeness = index.completeness(topic)
            present = set(DEPTH_ORDER) - set(completeness.missing)
            marks = " ".join(
                f"[{'x' if depth in present else ' '}] {depth.value}"
                for depth in DEPTH_ORDER
            )
            click.echo(f"  {topic:<40} {marks}")

    if index.unplaced:
        click.echo(f"\nUnplaced documents (missing phase or topic): {len(index.unplaced)}")
        for document in index.unplaced:
            click.echo(f"  - {document.path}")


@app.command()
@click.argument("root", type=click.Path(file_okay=False, path_type=Path))
@click.argument("document")
def nav(root: Path, document: str):
    """Print the navigation model of DOCUMENT (path or slug) as JSON."""
    try:
        index, graph = load_corpus(root)
    except CorpusLoadError as e:
        click.echo(f"\n✗ {e}", err=True)
        sys.exit(EXIT_LOAD_ERROR)

    target = _find_document(index, document)
    model = render_navigation_model(target, graph, index)
    click.echo(model.model_dump_json(indent=2))


@app.command()
@click.argument("root", type=click.Path(file_okay=False, path_type=Path))
@click.argument("from_document")
@click.argument("to_document")
def prereqs(root: Path, from_document: str, to_document: str):
    """Show the shortest prerequisite chain from one document to another."""
    try:
        index, graph = load_corpus(root)
    except CorpusLoadError as e:
        click.echo(f"\n✗ {e}", err=True)
        sys.exit(EXIT_LOAD_ERROR)

    start = _find_document(index, from_document)
    goal = _find_document(index, to_document)
    chain = graph.shortest_prerequisite_path(start, goal)

    if chain is None:
        click.echo(f"No prerequisite path from {start.path} to {goal.path}")
        sys.exit(1)

    for step, doc in enumerate(chain, 1):
        click.echo(f"  {step}. {doc.path}")


if __name__ == "__main__":
    app()
