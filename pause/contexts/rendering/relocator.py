"""Moving finished artifacts from build directories to the output root."""

import os
import shutil
from pathlib import Path

from pause.contexts.rendering.logger import _log_debug, _log_warning
from pause.exceptions import RelocationError


def relocate_artifact(source: Path, destination: Path) -> Path:
    """
    Move an artifact to its final location.

    Tries an atomic rename first. When that fails (typically because the build
    directory and the output root are on different filesystems) the file is
    copied and the source deleted, leaving exactly one copy at destination.
    If only the delete fails, the source is left behind with a warning.

    Args:
        source: Artifact inside an isolated build directory
        destination: Final path under the output root (overwritten if present)

    Returns:
        destination

    Raises:
        RelocationError: If neither the rename nor the copy succeeds
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_file():
        raise RelocationError(f"Artifact not found: {source}")

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RelocationError(f"Could not create output directory {destination.parent}: {e}") from e

    try:
        os.replace(source, destination)
        _log_debug(f"Moved {source.name} -> {destination}")
        return destination
    except OSError as e:
        _log_debug(f"Atomic move failed ({e}); copying instead")

    try:
        shutil.copy2(source, destination)
    except OSError as e:
        raise RelocationError(f"Could not move {source} to {destination}: {e}") from e

    try:
        source.unlink()
    except OSError as e:
        # The artifact is already complete at destination
        _log_warning(f"Copied {source.name} but could not remove the original: {e}")

    _log_debug(f"Copied {source.name} -> {destination}")
    return destination
