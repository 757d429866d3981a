"""Loading the resume data document (JSON Resume or equivalent YAML)."""

import json
from pathlib import Path
from typing import Any, Dict

from omegaconf import OmegaConf

from pause.exceptions import DataDocumentError

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


def load_resume_data(resume_path: Path) -> Dict[str, Any]:
    """
    Load a resume document into a plain dict.

    Args:
        resume_path: Path to a .json, .yaml or .yml document

    Returns:
        Resume data as nested dicts and lists

    Raises:
        DataDocumentError: If the file is missing, unparsable, of an unknown
            format, or its root is not a mapping
    """
    resume_path = Path(resume_path)
    if not resume_path.exists():
        raise DataDocumentError(f"Resume file not found: {resume_path}")

    suffix = resume_path.suffix.lower()
    try:
        if suffix in JSON_SUFFIXES:
            data = json.loads(resume_path.read_text(encoding="utf-8"))
        elif suffix in YAML_SUFFIXES:
            data = OmegaConf.to_container(OmegaConf.load(resume_path), resolve=False)
        else:
            raise DataDocumentError(
                f"Unsupported resume format: {resume_path.name} "
                f"(expected one of: {', '.join(JSON_SUFFIXES + YAML_SUFFIXES)})"
            )
    except DataDocumentError:
        raise
    except Exception as e:
        raise DataDocumentError(f"Could not parse resume file {resume_path}: {e}") from e

    if not isinstance(data, dict):
        raise DataDocumentError(f"Resume file must contain a mapping at its root: {resume_path}")

    return data


def resume_display_name(data: Dict[str, Any]) -> str:
    """Name from basics.name, or "Unknown"."""
    basics = data.get("basics") or {}
    if isinstance(basics, dict) and basics.get("name"):
        return str(basics["name"])
    return "Unknown"
