"""
Orchestration Context

Responsibilities:
- Drives each template reference through resolve, manifest, render and build
- Isolates failures per reference and aggregates ordered results
- Summarizes a run for the caller that decides the run status

Owns: Stage sequencing, BuildResult aggregation
Never: Decides whether a partially failed run is fatal
"""

from pause.contexts.orchestration.pipeline import BuildPipeline
from pause.contexts.orchestration.results import BuildResult, RunSummary, summarize, write_outputs

__all__ = ["BuildPipeline", "BuildResult", "RunSummary", "summarize", "write_outputs"]
