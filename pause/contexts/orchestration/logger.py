"""
Orchestration context logger.

Provides logging interface for the build pipeline with automatic [build] prefix.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from pause.config import BuildConfig
from pause.utils.logger import setup_logger as _setup_logger
from pause.utils.timestamp import now

CONTEXT_PREFIX = "[build]"


def setup_build_logger(config: BuildConfig, verbose: bool = False) -> Optional[Path]:
    """
    Setup logger for a build run.

    Writes a DEBUG log to <log_dir>/build_<timestamp>/build.log when config.log_dir
    is set; otherwise logs to the console only.

    Returns:
        Path to log file, or None
    """
    session_dir = config.log_dir / f"build_{now()}" if config.log_dir else None
    return _setup_logger(
        context_name="build",
        log_dir=session_dir,
        extra_provenance={
            "Render engine": config.render_engine,
            "LaTeX compiler": config.latex_compiler,
            "Typst compiler": config.typst_compiler,
            "Output directory": config.output_dir,
            "Work directory": config.work_dir,
            "Workers": config.max_workers,
        },
        verbose=verbose,
    )


# Wrapper functions with automatic [build] prefix


def _log_info(message: str) -> None:
    """Log info message with [build] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [build] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [build] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [build] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [build] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level build-specific logging helpers


def log_reference_result(result, elapsed_time: float) -> None:
    """Log the outcome of one reference (a BuildResult)."""
    if result.success:
        _log_success(f"{result.reference}: built {result.output_path} ({elapsed_time:.2f}s)")
    else:
        _log_error(f"{result.reference}: failed in {result.failed_stage} ({elapsed_time:.2f}s)")
        for line in (result.error or "").splitlines()[:10]:
            _log_error(f"  {line}")


def log_run_summary(summary) -> None:
    """Log the outcome of a whole run (a RunSummary)."""
    _log_info(f"Successful: {len(summary.successful)}")
    _log_info(f"Failed: {len(summary.failed)}")
    for result in summary.successful:
        _log_info(f"  - {result.output_path}")
    for result in summary.failed:
        _log_warning(f"  x {result.reference} ({result.error_kind})")
