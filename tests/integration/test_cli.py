"""CLI behaviour through click's test runner."""

import json

import pytest
from click.testing import CliRunner

from docgraph.audit.auditor import CorpusAuditor
from docgraph.cli.main import app


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("DOCGRAPH_CONTENT_DIR", "DOCGRAPH_STRICT", "DOCGRAPH_REPORT_FORMAT"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


def read_json_report(runner, args, tmp_path):
    """Run validate with the JSON report written to a file and load it."""
    report_path = tmp_path / "report.json"
    result = runner.invoke(
        app, ["validate", *args, "--format", "json", "-o", str(report_path)]
    )
    return result, json.loads(report_path.read_text(encoding="utf-8"))


class TestValidate:
    def test_clean_corpus(self, runner, sample_corpus):
        result = runner.invoke(app, ["validate", str(sample_corpus), "--quiet"])

        assert result.exit_code == 0
        assert "=== Corpus Audit Report ===" in result.output
        assert "✓ Audit passed" in result.output
        assert "secure-coding-practices: missing mid-depth, deep-water" in result.output

    def test_hard_error_exit_code(self, runner, sample_corpus, write_doc):
        write_doc("04-testing/broken/surface/index.md", "No frontmatter.\n")

        result = runner.invoke(app, ["validate", str(sample_corpus), "-q"])

        assert result.exit_code == 1
        assert "Parse errors (1):" in result.output

    def test_strict_mode_fails_on_warnings(self, runner, write_doc, content_root):
        write_doc("04-testing/ci/surface/index.md", topic="ci", related_topics=["gone"])

        lenient = runner.invoke(app, ["validate", str(content_root), "-q"])
        strict = runner.invoke(app, ["validate", str(content_root), "-q", "--strict"])

        assert lenient.exit_code == 0
        assert strict.exit_code == 1
        assert "strict mode" in strict.output

    def test_strict_from_environment(self, runner, write_doc, content_root, monkeypatch):
        write_doc("04-testing/ci/surface/index.md", topic="ci", related_topics=["gone"])
        monkeypatch.setenv("DOCGRAPH_STRICT", "1")

        result = runner.invoke(app, ["validate", str(content_root), "-q"])

        assert result.exit_code == 1

    def test_json_report(self, runner, sample_corpus, tmp_path, write_doc):
        write_doc(
            "04-testing/compliance-validation/surface/copy.md",
            topic="compliance-validation",
        )

        result, report = read_json_report(runner, [str(sample_corpus)], tmp_path)

        assert result.exit_code == 1
        assert report["summary"]["exit_code"] == 1
        assert report["summary"]["errors"] == 1
        assert report["documents_scanned"] == 5
        [issue] = [i for i in report["issues"] if i["kind"] == "duplicate_document"]
        assert issue["severity"] == "error"

    def test_concurrent_run_produces_same_report(self, runner, sample_corpus, tmp_path):
        _, sequential = read_json_report(runner, [str(sample_corpus)], tmp_path)
        _, concurrent = read_json_report(runner, [str(sample_corpus), "-j", "4"], tmp_path)

        assert concurrent == sequential

    def test_learning_paths_option(self, runner, sample_corpus, tmp_path):
        paths_dir = tmp_path / "paths"
        paths_dir.mkdir()
        (paths_dir / "p.json").write_text(
            json.dumps({"steps": [{"phase": "x", "topic": "y", "depth": "surface"}]}),
            encoding="utf-8",
        )

        _, report = read_json_report(
            runner, [str(sample_corpus), "--learning-paths", str(paths_dir)], tmp_path
        )

        assert report["learning_paths_scanned"] == 1
        assert report["orphaned_documents"] == 4
        assert [i["kind"] for i in report["issues"]] == ["missing_path_step"]

    def test_root_from_environment(self, runner, sample_corpus, monkeypatch):
        monkeypatch.setenv("DOCGRAPH_CONTENT_DIR", str(sample_corpus))

        result = runner.invoke(app, ["validate", "-q"])

        assert result.exit_code == 0
        assert f"Root: {sample_corpus}" in result.output

    def test_missing_root(self, runner, tmp_path):
        result = runner.invoke(app, ["validate", str(tmp_path / "nope"), "-q"])

        assert result.exit_code == 2


def test_stats(runner, sample_corpus):
    result = runner.invoke(app, ["stats", str(sample_corpus)])

    assert result.exit_code == 0
    assert "Documents: 4" in result.output
    assert "Phases: 2" in result.output
    [line] = [line for line in result.output.splitlines() if "secure-coding-practices" in line]
    assert line.endswith("[x] surface [ ] mid-depth [ ] deep-water")


def test_nav(runner, sample_corpus):
    result = runner.invoke(app, ["nav", str(sample_corpus), "compliance-validation-mid-depth"])

    assert result.exit_code == 0
    model = json.loads(result.output)
    assert model["previous_depth"]["depth"] == "surface"
    assert model["next_depth"]["depth"] == "deep-water"
    assert [d["topic"] for d in model["related_documents"]] == ["secure-coding-practices"]


def test_nav_accepts_paths(runner, sample_corpus):
    result = runner.invoke(
        app, ["nav", str(sample_corpus), "03-development/secure-coding-practices/surface/index.md"]
    )

    assert result.exit_code == 0
    assert json.loads(result.output)["phase"] == "03-development"


def test_nav_unknown_document(runner, sample_corpus):
    result = runner.invoke(app, ["nav", str(sample_corpus), "nothing-surface"])

    assert result.exit_code == 2
    assert "No document matches" in result.output


def test_prereqs(runner, sample_corpus):
    result = runner.invoke(
        app,
        [
            "prereqs",
            str(sample_corpus),
            "compliance-validation-deep-water",
            "compliance-validation-surface",
        ],
    )

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "  1. 04-testing/compliance-validation/deep-water/index.md",
        "  2. 04-testing/compliance-validation/mid-depth/index.md",
        "  3. 04-testing/compliance-validation/surface/index.md",
    ]


def test_prereqs_without_path(runner, sample_corpus):
    result = runner.invoke(
        app,
        [
            "prereqs",
            str(sample_corpus),
            "compliance-validation-surface",
            "compliance-validation-deep-water",
        ],
    )

    assert result.exit_code == 1
    assert "No prerequisite path" in result.output


def test_interrupt_prints_partial_report(runner, sample_corpus, monkeypatch):
    """Test that Ctrl-C after loading still prints what was collected."""

    def interrupted(self):
        raise KeyboardInterrupt

    monkeypatch.setattr(CorpusAuditor, "_analyze", interrupted)

    result = runner.invoke(app, ["validate", str(sample_corpus), "-q"])

    assert result.exit_code == 130
    assert "Documents loaded: 4" in result.output
    assert "Interrupted: results above are partial" in result.output
