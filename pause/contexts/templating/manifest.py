"""
Template manifest loading and validation.

Every template directory carries a manifest (template.yaml, template.yml,
template.json or template.toml; first match wins) declaring its type,
entrypoint and output naming:

    name: Modern Resume
    type: latex
    entrypoint: resume.tex.tmpl
    output_name: resume
    build_cmd: latexmk -pdf resume.tex   # optional
    delimiters: ["[[", "]]"]              # optional

Loading is parse-then-validate: the file is read into a generic mapping, then
every violation of the closed manifest shape is checked before a
TemplateManifest is built.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from omegaconf import OmegaConf

from pause.contexts.templating.logger import _log_debug
from pause.exceptions import (
    InvalidTemplateTypeError,
    ManifestNotFoundError,
    MissingFieldsError,
    PauseError,
    UnsupportedManifestFormatError,
)

# Probed in this order; TOML is recognised but has no parser
MANIFEST_FILES = ("template.yaml", "template.yml", "template.json", "template.toml")
REQUIRED_FIELDS = ("name", "type", "entrypoint", "output_name")
DEFAULT_DELIMITERS = ("[[", "]]")


class TemplateType(str, Enum):
    LATEX = "latex"
    TYPST = "typst"
    HTML = "html"
    MARKDOWN = "markdown"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


@dataclass(frozen=True)
class TemplateManifest:
    """
    Validated template descriptor.

    Attributes:
        name: Display name
        type: Template type, selects the compiler
        entrypoint: Renderable source file, relative to the template directory
        output_name: Base name (no extension) of the final artifact
        build_cmd: Shell command overriding the default compiler dispatch
        delimiters: Left/right template markers
    """

    name: str
    type: TemplateType
    entrypoint: str
    output_name: str
    build_cmd: Optional[str] = None
    delimiters: Tuple[str, str] = DEFAULT_DELIMITERS

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], manifest_path: Optional[Path] = None) -> "TemplateManifest":
        """
        Validate a parsed manifest mapping.

        Raises:
            MissingFieldsError: Naming every absent required field
            InvalidTemplateTypeError: If type is not one of the supported values
        """
        if not isinstance(raw, dict):
            raise PauseError(f"Template manifest must be a mapping: {manifest_path}")

        missing = [field_name for field_name in REQUIRED_FIELDS if field_name not in raw]
        if missing:
            raise MissingFieldsError(missing, manifest_path)

        if raw["type"] not in TemplateType.values():
            raise InvalidTemplateTypeError(raw["type"], TemplateType.values())

        delimiters = raw.get("delimiters") or DEFAULT_DELIMITERS
        if (
            not isinstance(delimiters, (list, tuple))
            or len(delimiters) != 2
            or not all(isinstance(d, str) and d for d in delimiters)
        ):
            raise PauseError(
                f"Template manifest delimiters must be two non-empty strings, got {delimiters!r}"
            )

        return cls(
            name=str(raw["name"]),
            type=TemplateType(raw["type"]),
            entrypoint=str(raw["entrypoint"]),
            output_name=str(raw["output_name"]),
            build_cmd=raw.get("build_cmd") or None,
            delimiters=(delimiters[0], delimiters[1]),
        )


def find_manifest(template_dir: Path) -> Path:
    """
    Return the first manifest file present in template_dir.

    Raises:
        ManifestNotFoundError: If no candidate file exists
    """
    for file_name in MANIFEST_FILES:
        manifest_path = template_dir / file_name
        if manifest_path.is_file():
            return manifest_path
    raise ManifestNotFoundError(template_dir, MANIFEST_FILES)


def _parse_manifest_file(manifest_path: Path) -> Any:
    suffix = manifest_path.suffix
    try:
        if suffix == ".json":
            return json.loads(manifest_path.read_text(encoding="utf-8"))
        if suffix in (".yaml", ".yml"):
            # Unresolved, so shell ${VAR} in build_cmd stays literal
            return OmegaConf.to_container(OmegaConf.load(manifest_path), resolve=False)
    except Exception as e:
        raise PauseError(f"Could not parse template manifest {manifest_path}: {e}") from e

    raise UnsupportedManifestFormatError(manifest_path)


def load_manifest(template_dir: Path) -> TemplateManifest:
    """
    Load and validate the manifest of a template directory.

    Args:
        template_dir: Resolved template directory

    Returns:
        TemplateManifest with delimiters defaulted to ("[[", "]]")

    Raises:
        ManifestNotFoundError: No manifest candidate exists
        UnsupportedManifestFormatError: Only a TOML manifest exists
        MissingFieldsError: Required fields are absent
        InvalidTemplateTypeError: The type is not supported
    """
    template_dir = Path(template_dir)
    manifest_path = find_manifest(template_dir)
    _log_debug(f"Loading manifest: {manifest_path}")

    raw = _parse_manifest_file(manifest_path)
    return TemplateManifest.from_dict(raw, manifest_path)
