"""Corpus audit - orchestration, learning paths, and report rendering."""

from docgraph.audit.auditor import AUDIT_PIPELINE, CorpusAuditor, validate_location
from docgraph.audit.learning_paths import audit_learning_paths, audit_topic_metadata
from docgraph.audit.report import render_json, render_text

__all__ = [
    "AUDIT_PIPELINE",
    "CorpusAuditor",
    "audit_learning_paths",
    "audit_topic_metadata",
    "render_json",
    "render_text",
    "validate_location",
]
