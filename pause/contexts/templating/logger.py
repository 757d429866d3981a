"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from loguru directly.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[template]"


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_clone_attempt(url: str, strategy_name: str, local_path: Path) -> None:
    """Log one clone attempt."""
    _log_info(f"Cloning template: {url} ({strategy_name})")
    _log_debug(f"  Destination: {local_path}")


def log_render_result(entrypoint: str, rendered_path: Path, engine: str, elapsed_time: float) -> None:
    """Log a finished render."""
    _log_success(f"Rendered {entrypoint} -> {rendered_path.name} ({engine}, {elapsed_time:.2f}s)")
    _log_debug(f"  Output: {rendered_path}")
