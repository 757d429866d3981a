"""Unit tests for run summaries, workflow outputs and artifact selection."""

from pathlib import Path

import pytest

from pause.contexts.orchestration.results import BuildResult, summarize, write_outputs
from pause.contexts.publishing import pages_artifacts, publish_artifacts, select_artifacts
from pause.contexts.templating.manifest import TemplateType


def ok(reference, path, template_type=TemplateType.LATEX):
    return BuildResult(reference=reference, output_path=Path(path), success=True, template_type=template_type)


def failed(reference, kind="CloneFailure"):
    return BuildResult(reference=reference, error="boom", error_kind=kind, failed_stage="resolve")


@pytest.fixture
def results():
    return [
        ok("builtin:latex-template", "/out/resume.pdf"),
        failed("https://github.com/owner/missing"),
        ok("builtin:html-template", "/out/index.html", TemplateType.HTML),
    ]


@pytest.mark.unit
class TestSummary:
    def test_split_preserves_order(self, results):
        summary = summarize(results)

        assert [r.reference for r in summary.successful] == ["builtin:latex-template", "builtin:html-template"]
        assert summary.artifacts == [Path("/out/resume.pdf"), Path("/out/index.html")]
        assert summary.total == 3
        assert summary.any_failed
        assert not summary.all_failed

    def test_all_failed(self):
        summary = summarize([failed("a"), failed("b")])
        assert summary.all_failed

    def test_empty_run_is_not_a_failure(self):
        summary = summarize([])
        assert not summary.all_failed
        assert not summary.any_failed

    def test_failure_defaults(self):
        result = failed("a")
        assert result.success is False
        assert result.output_path is None


@pytest.mark.unit
class TestWriteOutputs:
    def test_appends_key_value_lines(self, results, tmp_path):
        output_file = tmp_path / "github_output"
        output_file.write_text("previous=1\n")

        write_outputs(output_file, results)

        assert output_file.read_text().splitlines() == [
            "previous=1",
            "artifacts=/out/resume.pdf,/out/index.html",
            "success_count=2",
            "failure_count=1",
        ]

    def test_no_artifacts(self, tmp_path):
        output_file = tmp_path / "github_output"

        write_outputs(output_file, [failed("a")])

        assert "artifacts=\n" in output_file.read_text()


class RecordingPublisher:
    def __init__(self):
        self.published = []

    def publish(self, artifacts):
        self.published.append(list(artifacts))


@pytest.mark.unit
class TestPublishing:
    def test_select_successful_only(self, results):
        assert [r.reference for r in select_artifacts(results)] == [
            "builtin:latex-template",
            "builtin:html-template",
        ]

    def test_select_by_type(self, results):
        selected = select_artifacts(results, types=["latex"])
        assert [r.output_path for r in selected] == [Path("/out/resume.pdf")]

    def test_pages_artifacts(self, results):
        assert [r.output_path.name for r in pages_artifacts(results)] == ["index.html"]

    def test_publish(self, results):
        publisher = RecordingPublisher()

        published = publish_artifacts(publisher, results)

        assert len(published) == 2
        assert publisher.published == [published]

    def test_nothing_to_publish(self):
        publisher = RecordingPublisher()

        assert publish_artifacts(publisher, [failed("a")]) == []
        assert publisher.published == []
