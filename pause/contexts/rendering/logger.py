"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

from pause.utils.command_runner import format_command

CONTEXT_PREFIX = "[render]"


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_compilation_start(output_name: str, source: Path, strategy: str, working_dir: Path) -> None:
    """Log start of compilation with context."""
    _log_info(f"Building {output_name} ({strategy})")
    _log_debug(f"  Source: {source}")
    _log_debug(f"  Working directory: {working_dir}")


def log_compilation_result(output_name: str, result, elapsed_time: float) -> None:
    """
    Log compiler output after a run.

    Args:
        output_name: Artifact base name
        result: CommandResult of the compiler invocation
        elapsed_time: Time taken to compile
    """
    if result.succeeded:
        _log_success(f"{output_name}: compiled ({elapsed_time:.2f}s)")
    else:
        _log_error(f"{output_name}: compiler exited with {result.returncode} ({elapsed_time:.2f}s)")
    _log_debug(f"  Command: {format_command(result.command)}")

    # Use opt(raw=True) to keep multi-line compiler output readable in the log file
    if result.stdout:
        logger.opt(raw=True).debug(f"\n{'=' * 80}\nCOMPILER STDOUT:\n{'=' * 80}\n{result.stdout}\n")
    if result.stderr:
        logger.opt(raw=True).debug(f"\n{'=' * 80}\nCOMPILER STDERR:\n{'=' * 80}\n{result.stderr}\n")
