"""
Build pipeline orchestration.

Drives each template reference through resolve -> manifest -> render -> build.
A failure in any stage ends that reference only: it is recorded as a failed
BuildResult and the batch moves on. Results always come back in input order,
one per reference, whether references were built sequentially or on a thread
pool (config.max_workers > 1).
"""

import shutil
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from loguru import logger

from pause.config import BuildConfig
from pause.contexts.orchestration.logger import (
    _log_debug,
    _log_info,
    _log_warning,
    log_reference_result,
)
from pause.contexts.orchestration.results import BuildResult
from pause.contexts.rendering.compiler import CompilerDispatcher
from pause.contexts.templating.manifest import TemplateManifest, load_manifest
from pause.contexts.templating.references import TemplateReference, parse_references
from pause.contexts.templating.renderer import TemplateRenderer
from pause.contexts.templating.resolver import TemplateResolver
from pause.exceptions import PauseError
from pause.utils.command_runner import CommandRunner, SubprocessCommandRunner
from pause.utils.escaping import prepare_resume_data
from pause.utils.event_logging import log_pipeline_event
from pause.utils.pdf_processing import page_count

STAGES = ("resolve", "manifest", "render", "build")
PDF_SUFFIX = ".pdf"


class BuildPipeline:
    """
    Builds a list of template references against one resume.

    Example:
        config = load_config()
        pipeline = BuildPipeline(config)
        results = pipeline.run(parse_references("latex-template\\nowner/repo"), data)
    """

    def __init__(
        self,
        config: BuildConfig,
        runner: Optional[CommandRunner] = None,
        resolver: Optional[TemplateResolver] = None,
        renderer: Optional[TemplateRenderer] = None,
        dispatcher: Optional[CompilerDispatcher] = None,
    ):
        self.config = config
        runner = runner or SubprocessCommandRunner()
        self.resolver = resolver or TemplateResolver(config, runner)
        self.renderer = renderer or TemplateRenderer(config, runner)
        self.dispatcher = dispatcher or CompilerDispatcher(config, runner)

    def run(
        self,
        references: Sequence[Union[TemplateReference, str]],
        data: Dict[str, Any],
        credential: Optional[str] = None,
    ) -> List[BuildResult]:
        """
        Build every reference; never raises for a single reference's failure.

        Args:
            references: Normalized template references, in the order to report them
            data: Resume data (not modified)
            credential: GitHub token for cloning (defaults to config.github_token)

        Returns:
            One BuildResult per reference, in input order
        """
        references = [
            ref if isinstance(ref, TemplateReference) else TemplateReference(str(ref))
            for ref in references
        ]
        _log_info(f"Building {len(references)} template(s)")

        if self.config.max_workers == 1 or len(references) <= 1:
            return [self.build_reference(ref, data, credential) for ref in references]

        workers = min(self.config.max_workers, len(references))
        _log_debug(f"Using {workers} worker threads")
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pause-build") as executor:
            # map() yields in submission order regardless of completion order
            return list(
                executor.map(lambda ref: self.build_reference(ref, data, credential), references)
            )

    def run_input(
        self, templates_input: str, data: Dict[str, Any], credential: Optional[str] = None
    ) -> List[BuildResult]:
        """Parse a newline-delimited templates input and build it."""
        return self.run(parse_references(templates_input), data, credential)

    def build_reference(
        self,
        reference: TemplateReference,
        data: Dict[str, Any],
        credential: Optional[str] = None,
    ) -> BuildResult:
        """Run all stages for one reference and capture the outcome."""
        events_file = self.config.events_file
        start_time = time.time()
        stage = STAGES[0]
        manifest: Optional[TemplateManifest] = None
        rendered_path: Optional[Path] = None

        _log_info(f"Processing template: {reference}")
        log_pipeline_event(events_file, "reference_started", str(reference))

        try:
            template_dir = self.resolver.resolve(reference, credential)
            _log_debug(f"Template path: {template_dir}")

            stage = "manifest"
            manifest = load_manifest(template_dir)
            _log_info(f"Template: {manifest.name} ({manifest.type.value})")

            stage = "render"
            render_data = data
            if self.config.escape_data:
                render_data = prepare_resume_data(data, manifest.type.value)
            rendered_path = self.renderer.render(template_dir, manifest, render_data)

            stage = "build"
            output_path = self.dispatcher.build(rendered_path, manifest)
        except PauseError as e:
            result = self._failure(reference, stage, e.kind, str(e), manifest)
        except Exception as e:
            logger.opt(exception=e).debug(f"Unexpected error while processing {reference}")
            message = f"{type(e).__name__}: {e}"
            result = self._failure(reference, stage, "UnexpectedError", message, manifest)
        else:
            result = BuildResult(
                reference=str(reference),
                output_path=output_path,
                success=True,
                template_type=manifest.type,
                template_name=manifest.name,
                page_count=self._page_count(output_path),
            )
            log_pipeline_event(
                events_file,
                "reference_succeeded",
                str(reference),
                output_path=str(output_path),
                template_type=manifest.type.value,
            )

        self._cleanup(rendered_path, result)
        log_reference_result(result, time.time() - start_time)
        return result

    def _failure(
        self,
        reference: TemplateReference,
        stage: str,
        kind: str,
        message: str,
        manifest: Optional[TemplateManifest],
    ) -> BuildResult:
        log_pipeline_event(
            self.config.events_file,
            "reference_failed",
            str(reference),
            stage=stage,
            error_kind=kind,
            error=message,
        )
        return BuildResult(
            reference=str(reference),
            output_path=None,
            success=False,
            error=message,
            error_kind=kind,
            failed_stage=stage,
            template_type=manifest.type if manifest else None,
            template_name=manifest.name if manifest else None,
        )

    def _page_count(self, output_path: Path) -> Optional[int]:
        if output_path.suffix != PDF_SUFFIX:
            return None
        count = page_count(output_path)
        if count is None:
            _log_warning(f"Could not read page count of {output_path.name}")
        return count

    def _cleanup(self, rendered_path: Optional[Path], result: BuildResult) -> None:
        if rendered_path is None:
            return
        build_dir = rendered_path.parent
        if not result.success:
            _log_debug(f"Keeping build directory for debugging: {build_dir}")
        elif not self.config.keep_build_dirs:
            shutil.rmtree(build_dir, ignore_errors=True)
