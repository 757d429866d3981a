"""
Publishing Context

Interface to the collaborators that publish build artifacts (tagged releases,
static Pages sites). They consume successful BuildResults; nothing flows back
into the build pipeline.
"""

from typing import Iterable, List, Optional, Sequence

from typing_extensions import Protocol

from pause.contexts.orchestration.results import BuildResult
from pause.contexts.templating.manifest import TemplateType


class ArtifactPublisher(Protocol):
    """Publishes finished artifacts (e.g. as release assets)."""

    def publish(self, artifacts: Sequence[BuildResult]) -> None:
        ...


def select_artifacts(
    results: Iterable[BuildResult], types: Optional[Iterable[TemplateType]] = None
) -> List[BuildResult]:
    """
    Successful results, in input order, optionally restricted to template types.

    Args:
        results: Results returned by BuildPipeline.run()
        types: Template types to keep (None keeps all)
    """
    allowed = {TemplateType(t) for t in types} if types is not None else None
    return [
        result
        for result in results
        if result.success and (allowed is None or result.template_type in allowed)
    ]


def pages_artifacts(results: Iterable[BuildResult]) -> List[BuildResult]:
    """Successful HTML results, the candidates for a static Pages site."""
    return select_artifacts(results, types=[TemplateType.HTML])


def publish_artifacts(publisher: ArtifactPublisher, results: Iterable[BuildResult]) -> List[BuildResult]:
    """Hand every successful result to a publisher; returns what was published."""
    artifacts = select_artifacts(results)
    if artifacts:
        publisher.publish(artifacts)
    return artifacts
