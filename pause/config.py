"""
Build configuration.

All working-directory roots, credentials and tool names live in a single
BuildConfig that is passed to the resolver, renderer, dispatcher and pipeline.
Values are layered: dataclass defaults < environment (.env included) < YAML
config file < explicit keyword overrides.

Examples:
    >>> config = load_config()
    >>> config = load_config(Path("pause.yaml"), max_workers=4)
"""

import os
import tempfile
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

from pause.exceptions import ConfigError

PACKAGE_ROOT = Path(__file__).resolve().parent
DEFAULT_BUILTIN_TEMPLATES_PATH = PACKAGE_ROOT / "templates"

RENDER_ENGINES = ("gomplate", "jinja")

# Environment variable -> BuildConfig field
ENV_VARIABLES = {
    "PAUSE_OUTPUT_DIR": "output_dir",
    "PAUSE_WORK_DIR": "work_dir",
    "PAUSE_BUILTIN_TEMPLATES": "builtin_templates_dir",
    "PAUSE_RENDER_ENGINE": "render_engine",
    "PAUSE_MAX_WORKERS": "max_workers",
    "PAUSE_KEEP_BUILD_DIRS": "keep_build_dirs",
    "PAUSE_ESCAPE_DATA": "escape_data",
    "PAUSE_LOG_DIR": "log_dir",
    "PAUSE_EVENTS_FILE": "events_file",
    "PAUSE_LATEX_COMPILER": "latex_compiler",
    "PAUSE_TYPST_COMPILER": "typst_compiler",
    "PAUSE_RENDERER_BINARY": "renderer_binary",
}

PATH_FIELDS = {"output_dir", "work_dir", "builtin_templates_dir", "log_dir", "events_file"}
BOOL_FIELDS = {"keep_build_dirs", "escape_data"}
INT_FIELDS = {"max_workers"}


def _default_work_dir() -> Path:
    runner_temp = os.getenv("RUNNER_TEMP")
    if runner_temp:
        return Path(runner_temp) / "pause-templates"
    return Path(tempfile.gettempdir()) / "pause-templates"


@dataclass
class BuildConfig:
    """
    Settings shared by every stage of a build run.

    Attributes:
        output_dir: Output root that receives every finished artifact
        work_dir: Process-scoped scratch root for clones and isolated build directories
        builtin_templates_dir: Directory holding the built-in templates
        github_token: Credential passed to the clone subprocess (never exported)
        render_engine: "gomplate" (external binary) or "jinja" (in-process)
        max_workers: Number of references processed concurrently (1 = sequential)
        keep_build_dirs: Keep isolated build directories of successful references
        escape_data: Escape resume strings for the template type before rendering
        log_dir: Directory for the detailed log file (None = console only)
        events_file: JSON Lines pipeline event log (None = disabled)
        latex_compiler: LaTeX compiler executable
        typst_compiler: Typst compiler executable
        renderer_binary: Template renderer executable used by the gomplate engine
    """

    output_dir: Path = field(default_factory=Path.cwd)
    work_dir: Path = field(default_factory=_default_work_dir)
    builtin_templates_dir: Path = DEFAULT_BUILTIN_TEMPLATES_PATH
    github_token: Optional[str] = None
    render_engine: str = "gomplate"
    max_workers: int = 1
    keep_build_dirs: bool = False
    escape_data: bool = False
    log_dir: Optional[Path] = None
    events_file: Optional[Path] = None
    latex_compiler: str = "tectonic"
    typst_compiler: str = "typst"
    renderer_binary: str = "gomplate"

    def __post_init__(self):
        for name in PATH_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, Path):
                setattr(self, name, Path(value))
        self.validate()

    def validate(self) -> None:
        """Raise ConfigError for values no stage can work with."""
        if self.render_engine not in RENDER_ENGINES:
            raise ConfigError(
                f"Unknown render engine: {self.render_engine}. "
                f"Must be one of: {', '.join(RENDER_ENGINES)}"
            )
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be at least 1, got {self.max_workers}")

    def subprocess_env(self) -> Dict[str, str]:
        """Extra environment for subprocesses that need the GitHub credential."""
        if not self.github_token:
            return {}
        return {"GH_TOKEN": self.github_token, "GITHUB_TOKEN": self.github_token}


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        return None
    if name in BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ("1", "true", "yes", "on")
    if name in INT_FIELDS:
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{name} must be an integer, got {value!r}") from e
    if name in PATH_FIELDS:
        return Path(value).expanduser()
    return value


def _from_environment() -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for variable, name in ENV_VARIABLES.items():
        raw = os.getenv(variable)
        if raw:
            values[name] = _coerce(name, raw)

    token = os.getenv("GITHUB_TOKEN") or os.getenv("GH_TOKEN")
    if token:
        values["github_token"] = token
    return values


def _from_file(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    loaded = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    known = {f.name for f in fields(BuildConfig)}
    unknown = sorted(set(loaded) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    return {name: _coerce(name, value) for name, value in loaded.items()}


def load_config(config_path: Optional[Path] = None, **overrides: Any) -> BuildConfig:
    """
    Build a BuildConfig from the environment, an optional YAML file and overrides.

    Args:
        config_path: Optional YAML file whose keys are BuildConfig field names
        **overrides: Field values with the highest priority (None values are ignored)

    Returns:
        Validated BuildConfig

    Raises:
        ConfigError: If the file is missing, has unknown keys, or values are invalid
    """
    load_dotenv()

    values = _from_environment()
    if config_path is not None:
        values.update(_from_file(Path(config_path)))
    values.update(
        {name: _coerce(name, value) for name, value in overrides.items() if value is not None}
    )

    known = {f.name for f in fields(BuildConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"Unknown config options: {', '.join(unknown)}")

    return replace(BuildConfig(), **values)
