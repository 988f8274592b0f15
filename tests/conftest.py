"""Shared pytest fixtures for building synthetic corpora."""

from pathlib import Path
from typing import Any, Callable

import pytest

from docgraph.settings import get_settings
from factories import render_markdown


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[..., Path]:
    """Write a document under tmp_path/content and return the file path."""
    root = tmp_path / "content"
    root.mkdir(exist_ok=True)

    def _write(rel_path: str, text: str | None = None, **kwargs: Any) -> Path:
        file_path = root / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(
            text if text is not None else render_markdown(**kwargs), encoding="utf-8"
        )
        return file_path

    return _write


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    root.mkdir(exist_ok=True)
    return root


@pytest.fixture
def sample_corpus(write_doc: Callable[..., Path], content_root: Path) -> Path:
    """
    A small, clean corpus:

    04-testing/compliance-validation: surface, mid-depth, deep-water
    03-development/secure-coding-practices: surface only
    """
    write_doc(
        "04-testing/compliance-validation/surface/index.md",
        title="Compliance Validation",
        topic="compliance-validation",
        depth="surface",
        related_topics=["secure-coding-practices"],
        body=(
            "Intro.\n\n"
            "## Navigation\n\n"
            "- [Go deeper](../mid-depth/index.md)\n"
        ),
    )
    write_doc(
        "04-testing/compliance-validation/mid-depth/index.md",
        title="Compliance Validation",
        topic="compliance-validation",
        depth="mid-depth",
        reading_time=25,
        prerequisites=["compliance-validation-surface"],
        related_topics=["secure-coding-practices"],
        body="See [the basics](../surface/index.md).\n",
    )
    write_doc(
        "04-testing/compliance-validation/deep-water/index.md",
        title="Compliance Validation",
        topic="compliance-validation",
        depth="deep-water",
        reading_time=45,
        prerequisites=["compliance-validation-mid-depth"],
        related_topics=["secure-coding-practices"],
    )
    write_doc(
        "03-development/secure-coding-practices/surface/index.md",
        title="Secure Coding Practices",
        phase="03-development",
        topic="secure-coding-practices",
        depth="surface",
        related_topics=["compliance-validation"],
    )
    return content_root


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
