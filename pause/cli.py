"""
Resume Build CLI

Builds resume documents from a resume data file and a list of templates.

Commands:
    build           - Render and compile every template against a resume
    list-templates  - Show the built-in templates
    check-tools     - Report which external tools are missing from PATH

Examples:\n

    pause build resume.json --templates latex-template                  # One built-in template

    pause build resume.json --templates-file templates.txt -w 4         # Many templates, 4 workers

    pause build resume.yaml --templates "official:classic" --engine jinja
"""

import os
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from pause.config import RENDER_ENGINES, load_config
from pause.contexts.orchestration import BuildPipeline, summarize, write_outputs
from pause.contexts.orchestration.logger import log_run_summary, setup_build_logger
from pause.contexts.rendering.toolchain import missing_tools
from pause.contexts.templating.manifest import load_manifest
from pause.contexts.templating.references import parse_references
from pause.contexts.templating.resolver import available_builtin_templates
from pause.exceptions import PauseError
from pause.utils.resume_data import load_resume_data, resume_display_name

app = typer.Typer(
    help="Build resumes from structured data using LaTeX, Typst, HTML and Markdown templates",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("build")
def build_command(
    resume_file: Annotated[
        Path,
        typer.Argument(help="Resume data file (.json, .yaml or .yml)"),
    ],
    templates: Annotated[
        Optional[str],
        typer.Option(
            "--templates",
            "-t",
            help="Newline-delimited template references (built-in name, official:<name>, owner/repo, URL)",
        ),
    ] = None,
    templates_file: Annotated[
        Optional[Path],
        typer.Option("--templates-file", "-f", help="File with one template reference per line"),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("--output-dir", "-o", help="Directory that receives the built artifacts"),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", help="Templates built concurrently", min=1, max=32),
    ] = None,
    engine: Annotated[
        Optional[str],
        typer.Option("--engine", "-e", help=f"Render engine: {' or '.join(RENDER_ENGINES)}"),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML config file"),
    ] = None,
    escape: Annotated[
        Optional[bool],
        typer.Option("--escape/--no-escape", help="Escape resume strings for each template type"),
    ] = None,
    keep_build_dirs: Annotated[
        Optional[bool],
        typer.Option("--keep-build-dirs", "-k", help="Keep build directories of successful templates"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with an error if any template fails"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output"),
    ] = False,
):
    """
    Build every template against a resume.

    Each template is resolved, rendered and compiled independently; one failing
    template never stops the others. The run fails when every template fails
    (or when any fails, with --strict).

    Examples:\n

        $ pause build resume.json -t latex-template

        $ pause build resume.json -f templates.txt --output-dir dist
    """
    if templates is None and templates_file is None:
        typer.secho("Error: provide --templates or --templates-file\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    try:
        config = load_config(
            config_file,
            output_dir=output_dir,
            max_workers=workers,
            render_engine=engine,
            escape_data=escape,
            keep_build_dirs=keep_build_dirs,
        )
        if templates is not None:
            templates_input = templates
        else:
            templates_input = templates_file.read_text(encoding="utf-8")
        data = load_resume_data(resume_file)
    except (PauseError, OSError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    setup_build_logger(config, verbose=verbose)
    missing_tools(config)

    references = parse_references(templates_input)
    typer.secho(f"\nResume: {resume_display_name(data)}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Templates: {len(references)}")
    typer.echo("")

    results = BuildPipeline(config).run(references, data)
    summary = summarize(results)
    log_run_summary(summary)

    github_output = os.getenv("GITHUB_OUTPUT")
    if github_output:
        write_outputs(Path(github_output), results)

    typer.echo("")
    if summary.successful:
        typer.secho(f"✓ Built {len(summary.successful)} artifact(s)", fg=typer.colors.GREEN, bold=True)
        for result in summary.successful:
            typer.echo(f"  {result.output_path}")
    if summary.failed:
        typer.secho(f"✗ {len(summary.failed)} template(s) failed", fg=typer.colors.RED, bold=True)
        for result in summary.failed:
            first_line = (result.error or "").splitlines()[0] if result.error else ""
            typer.secho(f"  - {result.reference}: {first_line}", fg=typer.colors.RED)
    typer.echo("")

    if summary.all_failed or (strict and summary.any_failed):
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


@app.command("list-templates")
def list_templates_command(
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML config file"),
    ] = None,
):
    """List the built-in templates and their types."""
    try:
        config = load_config(config_file)
    except PauseError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    names = available_builtin_templates(config.builtin_templates_dir)
    if not names:
        typer.echo(f"No built-in templates in {config.builtin_templates_dir}")
        raise typer.Exit(code=0)

    for name in names:
        try:
            manifest = load_manifest(config.builtin_templates_dir / name)
            typer.echo(f"  {name:<20} {manifest.type.value:<10} {manifest.name}")
        except PauseError as e:
            typer.secho(f"  {name:<20} invalid: {e}", fg=typer.colors.YELLOW)


@app.command("check-tools")
def check_tools_command(
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML config file"),
    ] = None,
):
    """Check that the renderer and compilers are on PATH."""
    try:
        config = load_config(config_file)
    except PauseError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    missing = missing_tools(config)
    if missing:
        typer.secho(f"Missing tools: {', '.join(missing)}", fg=typer.colors.RED, bold=True)
        raise typer.Exit(code=1)

    typer.secho("✓ All tools found", fg=typer.colors.GREEN, bold=True)


if __name__ == "__main__":
    app()
