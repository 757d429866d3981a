"""
Compiler dispatch.

Turns a rendered template into its final artifact and moves it to the output
root. A manifest build_cmd always wins; otherwise the template type selects
the strategy:

    latex     tectonic <rendered> --outdir <build dir>, then rename to output_name.pdf
    typst     typst compile <rendered> <build dir>/<output_name>.pdf
    html      no compilation, rename to output_name.html
    markdown  no compilation, rename to output_name.md
"""

import os
import re
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from pause.config import BuildConfig
from pause.contexts.rendering.logger import (
    _log_debug,
    _log_info,
    log_compilation_result,
    log_compilation_start,
)
from pause.contexts.rendering.relocator import relocate_artifact
from pause.contexts.templating.manifest import TemplateManifest, TemplateType
from pause.exceptions import CompileError, UnsupportedTypeError
from pause.utils.command_runner import CommandResult, CommandRunner, SubprocessCommandRunner

OUTPUT_EXTENSIONS = {
    TemplateType.LATEX: "pdf",
    TemplateType.TYPST: "pdf",
    TemplateType.HTML: "html",
    TemplateType.MARKDOWN: "md",
}

# Characters of rendered source attached to a failed LaTeX compilation
SOURCE_EXCERPT_CHARS = 800

# Used for the expected output of a build_cmd when the type is not recognised
BUILD_CMD_FALLBACK_EXTENSION = "pdf"


def _as_template_type(template_type: Union[TemplateType, str]) -> Optional[TemplateType]:
    try:
        return TemplateType(template_type)
    except (ValueError, TypeError):
        return None


def extension_for(template_type: Union[TemplateType, str]) -> str:
    """
    File extension of the final artifact for a template type.

    Raises:
        UnsupportedTypeError: If the type is not one of latex, typst, html, markdown
    """
    resolved = _as_template_type(template_type)
    if resolved is None:
        raise UnsupportedTypeError(template_type)
    return OUTPUT_EXTENSIONS[resolved]


def artifact_name(manifest: TemplateManifest) -> str:
    """Final file name of a manifest's artifact (output_name + extension)."""
    if manifest.build_cmd and _as_template_type(manifest.type) is None:
        return f"{manifest.output_name}.{BUILD_CMD_FALLBACK_EXTENSION}"
    return f"{manifest.output_name}.{extension_for(manifest.type)}"


def parse_latex_errors(output: str) -> List[str]:
    """
    Extract error lines from LaTeX compiler output.

    Recognises TeX's "! message" lines and tectonic's "error: message" lines.
    """
    errors = []

    for pattern in (r"^! (.+)$", r"^error: (.+)$"):
        for match in re.finditer(pattern, output, re.MULTILINE):
            message = match.group(1).strip()
            if message not in errors:
                errors.append(message)

    for pattern in (r"Undefined control sequence", r"Emergency stop"):
        match = re.search(rf"({pattern}.*?)$", output, re.MULTILINE)
        if match and not any(match.group(1) in error for error in errors):
            errors.append(match.group(1))

    return errors


def source_excerpt(rendered_path: Path, limit: int = SOURCE_EXCERPT_CHARS) -> Optional[str]:
    """Leading portion of a rendered file, or None if it cannot be read."""
    try:
        text = rendered_path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    return text[:limit] + ("..." if len(text) > limit else "")


def _rename_in_place(path: Path, name: str) -> Path:
    target = path.with_name(name)
    if path != target:
        try:
            os.replace(path, target)
        except OSError as e:
            raise CompileError(f"Could not rename {path.name} to {target.name}: {e}") from e
        _log_debug(f"Renamed {path.name} -> {target.name}")
    return target


class CompilerDispatcher:
    """
    Builds rendered templates into final artifacts under config.output_dir.

    The working directory for every compiler or build command is the isolated
    build directory that holds the rendered file.
    """

    def __init__(self, config: BuildConfig, runner: Optional[CommandRunner] = None):
        self.config = config
        self.runner = runner or SubprocessCommandRunner()
        self._strategies: Dict[TemplateType, Callable[[Path, TemplateManifest], Path]] = {
            TemplateType.LATEX: self._build_latex,
            TemplateType.TYPST: self._build_typst,
            TemplateType.HTML: self._build_static,
            TemplateType.MARKDOWN: self._build_static,
        }

    def build(self, rendered_path: Path, manifest: TemplateManifest) -> Path:
        """
        Compile a rendered file and relocate the artifact to the output root.

        Args:
            rendered_path: File produced by the renderer (inside its build directory)
            manifest: Manifest of the template

        Returns:
            Final artifact path: <output_dir>/<output_name>.<extension>

        Raises:
            UnsupportedTypeError: Unknown type without a build_cmd
            CompileError: The compiler or build command failed
            RelocationError: The artifact could not be moved to the output root
        """
        rendered_path = Path(rendered_path)

        if manifest.build_cmd:
            artifact = self._build_custom(rendered_path, manifest)
        else:
            template_type = _as_template_type(manifest.type)
            if template_type is None:
                raise UnsupportedTypeError(manifest.type)
            artifact = self._strategies[template_type](rendered_path, manifest)

        final_path = relocate_artifact(artifact, self.config.output_dir / artifact.name)
        _log_info(f"Artifact: {final_path}")
        return final_path

    def _run(
        self,
        command: List[str],
        build_dir: Path,
        manifest: TemplateManifest,
        strategy: str,
        source: Path,
    ) -> CommandResult:
        log_compilation_start(manifest.output_name, source, strategy, build_dir)
        start_time = time.time()
        result = self.runner.run(command, cwd=build_dir)
        log_compilation_result(manifest.output_name, result, time.time() - start_time)
        return result

    def _build_custom(self, rendered_path: Path, manifest: TemplateManifest) -> Path:
        build_dir = rendered_path.parent
        expected = build_dir / artifact_name(manifest)

        command = ["sh", "-c", manifest.build_cmd]
        result = self._run(command, build_dir, manifest, "build_cmd", rendered_path)
        if not result.succeeded:
            raise CompileError(
                f"Build command failed (exit code {result.returncode}): {manifest.build_cmd}",
                stderr=result.output,
            )
        if not expected.is_file():
            raise CompileError(
                f"Build command did not produce {expected.name} in the build directory: "
                f"{manifest.build_cmd}",
                stderr=result.output,
            )
        return expected

    def _build_latex(self, rendered_path: Path, manifest: TemplateManifest) -> Path:
        build_dir = rendered_path.parent
        command = [self.config.latex_compiler, rendered_path.name, "--outdir", str(build_dir)]

        result = self._run(command, build_dir, manifest, "latex", rendered_path)

        # The compiler names its PDF after the input file, not output_name
        produced = build_dir / f"{rendered_path.stem}.pdf"
        if not result.succeeded or not produced.is_file():
            raise CompileError(
                f"LaTeX compilation of {rendered_path.name} failed (exit code {result.returncode})",
                stderr=result.output,
                errors=parse_latex_errors(result.output),
                source_excerpt=source_excerpt(rendered_path),
            )

        return _rename_in_place(produced, artifact_name(manifest))

    def _build_typst(self, rendered_path: Path, manifest: TemplateManifest) -> Path:
        build_dir = rendered_path.parent
        target = build_dir / artifact_name(manifest)
        command = [self.config.typst_compiler, "compile", str(rendered_path), str(target)]

        result = self._run(command, build_dir, manifest, "typst", rendered_path)
        if not result.succeeded or not target.is_file():
            raise CompileError(
                f"Typst compilation of {rendered_path.name} failed (exit code {result.returncode})",
                stderr=result.output,
            )
        return target

    def _build_static(self, rendered_path: Path, manifest: TemplateManifest) -> Path:
        # The rendered file is the artifact
        _log_debug(f"Static output: {rendered_path.name}")
        return _rename_in_place(rendered_path, artifact_name(manifest))
