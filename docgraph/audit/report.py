"""Plain-text and JSON renderings of an audit report."""

import json

from docgraph.contracts.issues import IssueKind, Severity, ValidationIssue
from docgraph.contracts.report import AuditReport

REPORT_SECTIONS: list[tuple[str, set[IssueKind]]] = [
    ("Parse errors", {IssueKind.MALFORMED_FRONTMATTER, IssueKind.UNREADABLE_FILE}),
    (
        "Schema violations",
        {
            IssueKind.MISSING_FIELD,
            IssueKind.INVALID_TYPE,
            IssueKind.INVALID_DEPTH,
            IssueKind.INVALID_READING_TIME,
            IssueKind.INVALID_DATE,
            IssueKind.INVALID_SLUG,
            IssueKind.UNKNOWN_FIELD,
        },
    ),
    ("Duplicate documents", {IssueKind.DUPLICATE_DOCUMENT}),
    ("Dangling references", {IssueKind.DANGLING_REFERENCE}),
    (
        "Depth tiers",
        {
            IssueKind.SKIPPED_TIER,
            IssueKind.MISSING_SHALLOWER_PREREQUISITE,
            IssueKind.LOCATION_MISMATCH,
        },
    ),
    (
        "Learning paths",
        {
            IssueKind.INVALID_LEARNING_PATH,
            IssueKind.INCOMPLETE_PATH_STEP,
            IssueKind.MISSING_PATH_STEP,
        },
    ),
    ("Topic metadata", {IssueKind.MISSING_TOPIC_METADATA}),
]

_MARKERS = {
    Severity.ERROR: "✗",
    Severity.WARNING: "⚠",
    Severity.INFO: "·",
}


def _format_issue(issue: ValidationIssue) -> str:
    return f"  {_MARKERS[issue.severity]} {issue.path}: {issue.message}"


def render_text(report: AuditReport, strict: bool = False) -> str:
    """Human-readable report, grouped by section."""
    lines: list[str] = ["", "=== Corpus Audit Report ===", f"Root: {report.root}"]

    for title, kinds in REPORT_SECTIONS:
        section = [i for i in report.issues if i.kind in kinds]
        if not section:
            continue
        lines.append("")
        lines.append(f"{title} ({len(section)}):")
        for issue in sorted(section, key=lambda i: (i.path, i.kind.value, i.message)):
            lines.append(_format_issue(issue))

    gaps = [t for t in report.topics if not t.completeness.complete]
    if gaps:
        lines.append("")
        lines.append(f"Topic completeness gaps ({len(gaps)}):")
        for summary in gaps:
            missing = ", ".join(d.value for d in summary.completeness.missing)
            phase = f"{summary.phase}/" if summary.phase else ""
            lines.append(f"  - {phase}{summary.topic}: missing {missing}")

    lines.append("")
    lines.append("=== Summary ===")
    lines.append(f"Documents scanned: {report.documents_scanned}")
    lines.append(f"Documents loaded: {report.documents_loaded}")
    lines.append(f"Topics: {len(report.topics)}")
    if report.learning_paths_scanned:
        lines.append(f"Learning paths: {report.learning_paths_scanned}")
        lines.append(
            f"Documents not in any learning path: {report.orphaned_documents} "
            "(this may be intentional)"
        )
    lines.append(f"Errors: {len(report.errors)}")
    lines.append(f"Warnings: {len(report.warnings)}")

    if report.interrupted:
        lines.append("")
        lines.append("Interrupted: results above are partial")

    exit_code = report.exit_code(strict=strict)
    lines.append("")
    if exit_code == 0:
        lines.append("✓ Audit passed")
    elif report.has_errors:
        lines.append(f"✗ Audit failed with {len(report.errors)} hard error(s)")
    else:
        lines.append(f"✗ Audit failed in strict mode with {len(report.warnings)} warning(s)")

    return "\n".join(lines)


def render_json(report: AuditReport, strict: bool = False) -> str:
    """Machine-readable report with a summary block."""
    payload = {
        "summary": {
            "errors": len(report.errors),
            "warnings": len(report.warnings),
            "has_errors": report.has_errors,
            "strict": strict,
            "exit_code": report.exit_code(strict=strict),
        },
        **report.model_dump(mode="json"),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


__all__ = ["render_text", "render_json", "REPORT_SECTIONS"]
