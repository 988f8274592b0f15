"""Unit tests for reference parsing."""

import pytest

from docgraph.contracts.document import Depth
from docgraph.corpus.references import (
    normalize_link_path,
    parse_link,
    parse_reference,
    split_slug,
)


@pytest.mark.parametrize(
    "slug, expected",
    [
        ("code-quality-surface", ("code-quality", Depth.SURFACE)),
        ("code-quality-mid-depth", ("code-quality", Depth.MID_DEPTH)),
        ("code-quality-deep-water", ("code-quality", Depth.DEEP_WATER)),
        ("surface-mid-depth", ("surface", Depth.MID_DEPTH)),
        ("code-quality", None),
        ("-surface", None),
    ],
)
def test_split_slug(slug, expected):
    assert split_slug(slug) == expected


def test_relative_link_resolves_against_source_directory():
    assert (
        normalize_link_path("../mid-depth/index.md", "04-testing/ci/surface/index.md")
        == "04-testing/ci/mid-depth/index.md"
    )


def test_root_link_and_directory_link():
    assert normalize_link_path("/03-development/api/", "x/y/z/index.md") == (
        "03-development/api/index.md"
    )
    assert normalize_link_path("../deep-water", "a/b/surface/index.md") == (
        "a/b/deep-water/index.md"
    )


def test_slug_reference_names_a_slot():
    parsed = parse_reference("compliance-validation-mid-depth")

    assert parsed.topic == "compliance-validation"
    assert parsed.depth == Depth.MID_DEPTH
    assert parsed.path is None
    assert parsed.names_slot


def test_topic_depth_and_phase_topic_depth_references():
    two = parse_reference("ci/surface")
    three = parse_reference("04-testing/ci/deep-water")

    assert (two.phase, two.topic, two.depth) == (None, "ci", Depth.SURFACE)
    assert (three.phase, three.topic, three.depth) == ("04-testing", "ci", Depth.DEEP_WATER)


def test_bare_topic_reference():
    parsed = parse_reference("secure-coding-practices")

    assert parsed.topic == "secure-coding-practices"
    assert parsed.depth is None
    assert not parsed.names_slot


def test_path_reference_carries_location():
    parsed = parse_reference("../surface/index.md", "04-testing/ci/mid-depth/index.md")

    assert parsed.path == "04-testing/ci/surface/index.md"
    assert parsed.phase == "04-testing"
    assert parsed.topic == "ci"
    assert parsed.depth == Depth.SURFACE


def test_link_escaping_the_root_has_no_location():
    parsed = parse_link("../../../../outside.md", "a/b/surface/index.md")

    assert parsed.path.startswith("..")
    assert parsed.topic is None


def test_topic_landing_page_link():
    parsed = parse_link("../index.md", "04-testing/ci/surface/index.md")

    assert parsed.path == "04-testing/ci/index.md"
    assert (parsed.phase, parsed.topic, parsed.depth) == ("04-testing", "ci", None)
