"""Exceptions raised by the template resolution and build pipeline."""

from pathlib import Path
from typing import List, Optional, Sequence


class PauseError(Exception):
    """
    Base class for every failure a pipeline stage can raise.

    Attributes:
        message: Error description
        reference: Template reference being processed when the error occurred
        kind: Stable error-kind name recorded in build results
    """

    kind = "PauseError"

    def __init__(self, message: str, reference: Optional[str] = None):
        self.message = message
        self.reference = reference
        super().__init__(message)


class ConfigError(PauseError):
    """Invalid build configuration."""

    kind = "ConfigError"


class DataDocumentError(PauseError):
    """The resume data document could not be loaded."""

    kind = "DataDocumentError"


class TemplateNotFoundError(PauseError):
    """A built-in template name does not exist under the built-in root."""

    kind = "TemplateNotFound"

    def __init__(self, name: str, available: Sequence[str], reference: Optional[str] = None):
        self.name = name
        self.available = list(available)
        super().__init__(
            f'Built-in template "{name}" not found. '
            f"Available templates: {', '.join(self.available) or '(none)'}",
            reference=reference,
        )


class CloneError(PauseError):
    """Fetching an external template repository failed on every attempt."""

    kind = "CloneFailure"

    def __init__(self, url: str, stderr: str = "", reference: Optional[str] = None):
        self.url = url
        self.stderr = stderr

        parts = [f"Failed to clone template repository: {url}"]
        if stderr:
            parts.append(stderr.strip())

        super().__init__("\n".join(parts), reference=reference)


class ManifestNotFoundError(PauseError):
    """None of the candidate manifest files exists in the template directory."""

    kind = "ManifestNotFound"

    def __init__(self, template_dir: Path, candidates: Sequence[str]):
        self.template_dir = template_dir
        self.candidates = list(candidates)
        super().__init__(
            f"No template manifest found in {template_dir}. "
            f"Expected one of: {', '.join(self.candidates)}"
        )


class UnsupportedManifestFormatError(PauseError):
    """A manifest file was found but its format has no parser."""

    kind = "UnsupportedFormat"

    def __init__(self, manifest_path: Path):
        self.manifest_path = manifest_path
        super().__init__(f"Unsupported manifest format: {manifest_path.name}")


class MissingFieldsError(PauseError):
    """The manifest lacks one or more required fields."""

    kind = "MissingFields"

    def __init__(self, missing_fields: List[str], manifest_path: Optional[Path] = None):
        self.missing_fields = list(missing_fields)
        self.manifest_path = manifest_path
        message = f"Template manifest is missing required fields: {', '.join(self.missing_fields)}"
        if manifest_path is not None:
            message += f" ({manifest_path})"
        super().__init__(message)


class InvalidTemplateTypeError(PauseError):
    """The manifest declares a type outside the supported set."""

    kind = "InvalidType"

    def __init__(self, value: object, valid_types: Sequence[str]):
        self.value = value
        self.valid_types = list(valid_types)
        super().__init__(
            f"Invalid template type: {value}. Must be one of: {', '.join(self.valid_types)}"
        )


class TemplateIOError(PauseError):
    """Reading the entrypoint, writing the data file or creating scratch space failed."""

    kind = "IOFailure"


class RenderError(PauseError):
    """The template rendering engine reported a failure."""

    kind = "RenderFailure"

    def __init__(self, message: str, stderr: str = "", original_error: Optional[Exception] = None):
        self.stderr = stderr
        self.original_error = original_error

        parts = [message]
        if stderr:
            parts.append(stderr.strip())
        if original_error is not None:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class CompileError(PauseError):
    """
    The compiler (or a custom build command) failed to produce the artifact.

    Attributes:
        stderr: Compiler diagnostics
        errors: Parsed error lines from the compiler output
        source_excerpt: Leading portion of the rendered source, for context
    """

    kind = "CompileFailure"

    def __init__(
        self,
        message: str,
        stderr: str = "",
        errors: Optional[List[str]] = None,
        source_excerpt: Optional[str] = None,
    ):
        self.stderr = stderr
        self.errors = errors or []
        self.source_excerpt = source_excerpt

        parts = [message]
        for error in self.errors[:5]:
            parts.append(f"  ! {error}")
        if stderr and not self.errors:
            parts.append(stderr.strip())
        if source_excerpt:
            parts.append(f"\nRendered source (excerpt):\n{source_excerpt}")

        super().__init__("\n".join(parts))


class UnsupportedTypeError(PauseError):
    """No compiler is registered for the template type and no build command overrides it."""

    kind = "UnsupportedType"

    def __init__(self, template_type: object):
        self.template_type = template_type
        super().__init__(f"Unsupported template type: {template_type}")


class RelocationError(PauseError):
    """The finished artifact could not be moved into the output directory."""

    kind = "RelocationFailure"
