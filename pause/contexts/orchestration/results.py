"""Per-reference build results and run-level summaries."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from pause.contexts.templating.manifest import TemplateType


@dataclass(frozen=True)
class BuildResult:
    """
    Outcome of building one template reference.

    Attributes:
        reference: Normalized template reference
        output_path: Final artifact path (None when the build failed)
        success: Whether the artifact was produced
        error: Error message of the failing stage
        error_kind: Error kind of the failure (e.g. "MissingFields")
        failed_stage: Stage that failed ("resolve", "manifest", "render", "build")
        template_type: Declared template type, once the manifest has loaded
        template_name: Display name from the manifest
        page_count: Pages of a PDF artifact, when readable
    """

    reference: str
    output_path: Optional[Path] = None
    success: bool = False
    error: Optional[str] = None
    error_kind: Optional[str] = None
    failed_stage: Optional[str] = None
    template_type: Optional[TemplateType] = None
    template_name: Optional[str] = None
    page_count: Optional[int] = None


@dataclass
class RunSummary:
    """Results of a run split by outcome, each in input order."""

    successful: List[BuildResult] = field(default_factory=list)
    failed: List[BuildResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successful) + len(self.failed)

    @property
    def all_failed(self) -> bool:
        return self.total > 0 and not self.successful

    @property
    def any_failed(self) -> bool:
        return bool(self.failed)

    @property
    def artifacts(self) -> List[Path]:
        return [result.output_path for result in self.successful]


def summarize(results: Sequence[BuildResult]) -> RunSummary:
    summary = RunSummary()
    for result in results:
        (summary.successful if result.success else summary.failed).append(result)
    return summary


def write_outputs(output_file: Path, results: Sequence[BuildResult]) -> None:
    """
    Append run outputs in GitHub Actions key=value format.

    Keys: artifacts (comma-joined artifact paths), success_count, failure_count.
    """
    summary = summarize(results)
    lines = [
        f"artifacts={','.join(str(path) for path in summary.artifacts)}",
        f"success_count={len(summary.successful)}",
        f"failure_count={len(summary.failed)}",
    ]
    with open(output_file, "a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")
