"""
Template rendering.

Expands a template's entrypoint against the resume data inside a fresh
isolated build directory. Two engines are available:

- gomplate: the external renderer binary, invoked once per template
- jinja: Jinja2 in-process, using the manifest delimiters for variables

Either way the rendered file is named after the entrypoint with its template
suffix removed (resume.tex.tmpl -> resume.tex); mapping to the manifest's
output_name happens later, in the compiler dispatcher.
"""

import json
import shutil
import tempfile
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from jinja2 import ChainableUndefined, Environment, FileSystemLoader, TemplateError

from pause.config import BuildConfig
from pause.contexts.templating.logger import (
    _log_debug,
    _log_info,
    _log_warning,
    log_render_result,
)
from pause.contexts.templating.manifest import TemplateManifest, TemplateType
from pause.exceptions import RenderError, TemplateIOError
from pause.utils.command_runner import CommandRunner, SubprocessCommandRunner
from pause.utils.escaping import escape_html, escape_latex, escape_typst, format_date, join_array

TEMPLATE_SUFFIXES = (".tmpl", ".jinja", ".j2")
DATA_FILE_NAME = ".resume-data.json"
DATA_SOURCE_NAME = "resume"

# Local style/include files a LaTeX entrypoint may \usepackage or \input
LATEX_AUX_SUFFIXES = (".cls", ".sty", ".bst", ".bbx", ".cbx", ".def", ".cfg", ".tex")


def rendered_file_name(entrypoint: str) -> str:
    """
    Output file name for an entrypoint: base name minus its template suffix.

    Examples:
        >>> rendered_file_name("src/resume.tex.tmpl")
        'resume.tex'
        >>> rendered_file_name("index.html")
        'index.html'
    """
    name = Path(entrypoint).name
    for suffix in TEMPLATE_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


def create_build_dir(work_dir: Path) -> Path:
    """
    Create a uniquely named isolated build directory under work_dir.

    Raises:
        TemplateIOError: If the directory cannot be created
    """
    try:
        builds_root = work_dir / "builds"
        builds_root.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix="build-", dir=builds_root))
    except OSError as e:
        raise TemplateIOError(f"Could not create build directory under {work_dir}: {e}") from e


def write_data_file(data: Dict[str, Any], build_dir: Path) -> Path:
    """
    Serialize resume data as JSON inside the build directory.

    Raises:
        TemplateIOError: If the data is not JSON serializable or the write fails
    """
    data_path = build_dir / DATA_FILE_NAME
    try:
        data_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    except (TypeError, ValueError, OSError) as e:
        raise TemplateIOError(f"Could not write resume data file {data_path}: {e}") from e
    return data_path


def copy_latex_aux_files(template_dir: Path, build_dir: Path, entrypoint: str) -> List[Path]:
    """
    Copy style and include files sitting directly in template_dir into build_dir.

    Copy failures are logged as warnings; the caller continues regardless.

    Returns:
        Paths of the copied files
    """
    copied = []
    entrypoint_path = (template_dir / entrypoint).resolve()

    for source in sorted(template_dir.iterdir()):
        if not source.is_file() or source.suffix not in LATEX_AUX_SUFFIXES:
            continue
        if source.resolve() == entrypoint_path:
            continue
        target = build_dir / source.name
        if target.exists():
            continue
        try:
            shutil.copy2(source, target)
            copied.append(target)
        except OSError as e:
            _log_warning(f"Could not copy {source.name} into build directory: {e}")

    if copied:
        _log_debug(f"Copied {len(copied)} auxiliary file(s): {', '.join(p.name for p in copied)}")
    return copied


def jinja_delimiters(delimiters: Tuple[str, str]) -> Dict[str, str]:
    """
    Jinja2 environment markers derived from a manifest delimiter pair.

    Variables use the pair itself; blocks and comments reuse its outer
    characters, e.g. ("[[", "]]") -> [[ var ]], [% block %], [# comment #].
    """
    left, right = delimiters
    return {
        "variable_start_string": left,
        "variable_end_string": right,
        "block_start_string": f"{left[0]}%",
        "block_end_string": f"%{right[-1]}",
        "comment_start_string": f"{left[0]}#",
        "comment_end_string": f"#{right[-1]}",
    }


class TemplateRenderer:
    """
    Renders template entrypoints into isolated build directories.

    Each render() call owns a new build directory, so templates rendered in
    sequence or concurrently never see each other's intermediate files.
    """

    def __init__(self, config: BuildConfig, runner: Optional[CommandRunner] = None):
        self.config = config
        self.runner = runner or SubprocessCommandRunner()

    def render(self, template_dir: Path, manifest: TemplateManifest, data: Dict[str, Any]) -> Path:
        """
        Render a template against resume data.

        Args:
            template_dir: Resolved template directory
            manifest: Validated manifest of that directory
            data: Resume data

        Returns:
            Path of the rendered file; its parent is the isolated build directory

        Raises:
            TemplateIOError: Missing entrypoint, unwritable data, or no scratch space
            RenderError: The rendering engine failed
        """
        template_dir = Path(template_dir)
        entrypoint_path = template_dir / manifest.entrypoint
        if not entrypoint_path.is_file():
            raise TemplateIOError(f"Template entrypoint not found: {entrypoint_path}")

        build_dir = create_build_dir(self.config.work_dir)
        data_path = write_data_file(data, build_dir)
        output_path = build_dir / rendered_file_name(manifest.entrypoint)

        _log_info(f"Rendering {manifest.entrypoint} ({self.config.render_engine})")
        _log_debug(f"  Build directory: {build_dir}")

        start_time = time.time()
        if self.config.render_engine == "jinja":
            self._render_jinja(template_dir, manifest, data, output_path)
        else:
            self._render_gomplate(entrypoint_path, manifest, data_path, output_path)
        log_render_result(
            manifest.entrypoint, output_path, self.config.render_engine, time.time() - start_time
        )

        if manifest.type == TemplateType.LATEX:
            copy_latex_aux_files(template_dir, build_dir, manifest.entrypoint)

        return output_path

    def gomplate_command(
        self, entrypoint_path: Path, manifest: TemplateManifest, data_path: Path, output_path: Path
    ) -> List[str]:
        left_delim, right_delim = manifest.delimiters
        return [
            self.config.renderer_binary,
            "--file", str(entrypoint_path),
            "--out", str(output_path),
            "--datasource", f"{DATA_SOURCE_NAME}={data_path}",
            "--context", f".={DATA_SOURCE_NAME}",
            "--left-delim", left_delim,
            "--right-delim", right_delim,
            # Missing resume keys render as empty values instead of failing
            "--missing-key", "zero",
        ]

    def _render_gomplate(
        self, entrypoint_path: Path, manifest: TemplateManifest, data_path: Path, output_path: Path
    ) -> None:
        command = self.gomplate_command(entrypoint_path, manifest, data_path, output_path)
        result = self.runner.run(command, cwd=output_path.parent)

        if not result.succeeded:
            raise RenderError(
                f"Rendering {manifest.entrypoint} failed (exit code {result.returncode})",
                stderr=result.output,
            )
        if not output_path.exists():
            raise RenderError(f"Renderer reported success but produced no file: {output_path}")

    def _render_jinja(
        self,
        template_dir: Path,
        manifest: TemplateManifest,
        data: Dict[str, Any],
        output_path: Path,
    ) -> None:
        env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            # Missing resume keys render as empty values
            undefined=ChainableUndefined,
            **jinja_delimiters(manifest.delimiters),
            # Preserve whitespace (important for LaTeX)
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
            autoescape=False,
        )
        env.filters.update(
            {
                "latex": escape_latex,
                "html": escape_html,
                "typst": escape_typst,
                "date": format_date,
                "join_array": join_array,
            }
        )

        try:
            template = env.get_template(Path(manifest.entrypoint).as_posix())
            rendered = template.render({**data, DATA_SOURCE_NAME: data})
        except TemplateError as e:
            raise RenderError(f"Rendering {manifest.entrypoint} failed", original_error=e) from e

        try:
            output_path.write_text(rendered, encoding="utf-8")
        except OSError as e:
            raise TemplateIOError(f"Could not write rendered file {output_path}: {e}") from e
