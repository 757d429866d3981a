"""
Template resolution.

Maps a TemplateReference to a local template directory:
- Built-in references resolve under the built-in template root, without network access
- External references are shallow-cloned into a per-run checkout directory
"""

import shutil
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pause.config import BuildConfig
from pause.contexts.templating.logger import (
    _log_debug,
    _log_info,
    _log_warning,
    log_clone_attempt,
)
from pause.contexts.templating.references import TemplateReference
from pause.exceptions import CloneError, TemplateNotFoundError
from pause.utils.command_runner import CommandResult, CommandRunner, SubprocessCommandRunner


class CloneStrategy(Enum):
    """Ordered clone attempts: the main branch first, then the repository default."""

    MAIN_BRANCH = "main branch"
    DEFAULT_BRANCH = "default branch"

    def git_args(self) -> List[str]:
        if self is CloneStrategy.MAIN_BRANCH:
            return ["--branch=main", "--depth=1"]
        return ["--depth=1"]


CLONE_STRATEGIES = (CloneStrategy.MAIN_BRANCH, CloneStrategy.DEFAULT_BRANCH)


def should_fall_back(result: CommandResult) -> bool:
    """A failed primary clone (e.g. no main branch) triggers the fallback attempt."""
    return not result.succeeded


def clone_command(reference: TemplateReference, local_path: Path, strategy: CloneStrategy) -> List[str]:
    """
    Build the clone command for one strategy.

    GitHub repositories go through the gh CLI so private repositories work with
    the provided token; other hosts use plain git.
    """
    slug = reference.github_slug()
    if slug is not None:
        return ["gh", "repo", "clone", slug, str(local_path), "--", *strategy.git_args()]

    clone_url, _ = reference.repository()
    return ["git", "clone", *strategy.git_args(), clone_url, str(local_path)]


def available_builtin_templates(builtin_root: Path) -> List[str]:
    """Names of the template directories under the built-in root."""
    if not builtin_root.is_dir():
        return []
    return sorted(path.name for path in builtin_root.iterdir() if path.is_dir())


class TemplateResolver:
    """
    Resolves template references to local directories.

    Each external reference is cloned into <checkout root>/<repository base name>.
    The checkout root is created once per resolver, so nothing is reused across
    runs. Two references with the same base name in one run collide and the
    second clone fails.
    """

    def __init__(
        self,
        config: BuildConfig,
        runner: Optional[CommandRunner] = None,
        strategies: Sequence[CloneStrategy] = CLONE_STRATEGIES,
    ):
        self.config = config
        self.runner = runner or SubprocessCommandRunner()
        self.strategies = tuple(strategies)
        self._checkout_root: Optional[Path] = None
        self._lock = threading.Lock()

    @property
    def builtin_root(self) -> Path:
        return self.config.builtin_templates_dir

    @property
    def checkout_root(self) -> Path:
        """Per-run directory that receives external template checkouts."""
        with self._lock:
            if self._checkout_root is None:
                self.config.work_dir.mkdir(parents=True, exist_ok=True)
                self._checkout_root = Path(
                    tempfile.mkdtemp(prefix="checkouts-", dir=self.config.work_dir)
                )
            return self._checkout_root

    def resolve(
        self, reference: Union[TemplateReference, str], credential: Optional[str] = None
    ) -> Path:
        """
        Resolve a reference to a local template directory.

        Args:
            reference: Normalized template reference
            credential: GitHub token for this resolution (defaults to config.github_token)

        Returns:
            Path to the template directory

        Raises:
            TemplateNotFoundError: Built-in name (or catalog sub-path) does not exist
            CloneError: Every clone attempt failed
        """
        if isinstance(reference, str):
            reference = TemplateReference(reference)

        if reference.is_builtin:
            return self._resolve_builtin(reference)

        return self._clone(reference, credential)

    def _resolve_builtin(self, reference: TemplateReference) -> Path:
        name = reference.builtin_name
        template_path = self.builtin_root / name

        if not name or not template_path.is_dir():
            raise TemplateNotFoundError(
                name,
                available_builtin_templates(self.builtin_root),
                reference=str(reference),
            )

        _log_info(f"Using built-in template: {name}")
        return template_path

    def _clone(self, reference: TemplateReference, credential: Optional[str]) -> Path:
        local_path = self.checkout_root / reference.base_name
        env = self.config.subprocess_env()
        if credential:
            env.update({"GH_TOKEN": credential, "GITHUB_TOKEN": credential})

        existed_before = local_path.exists()
        result: Optional[CommandResult] = None

        for attempt, strategy in enumerate(self.strategies):
            if attempt > 0:
                _log_warning(f"Clone failed, falling back to the {strategy.value}")
                if not existed_before and local_path.exists():
                    shutil.rmtree(local_path, ignore_errors=True)

            log_clone_attempt(str(reference), strategy.value, local_path)
            result = self.runner.run(clone_command(reference, local_path, strategy), env=env)
            if not should_fall_back(result):
                break

        if result is None or not result.succeeded:
            raise CloneError(
                str(reference),
                stderr=result.output if result is not None else "",
                reference=str(reference),
            )

        _, sub_path = reference.repository()
        if sub_path is None:
            return local_path

        template_path = local_path / sub_path
        if not template_path.is_dir():
            raise TemplateNotFoundError(
                sub_path,
                available_builtin_templates(local_path),
                reference=str(reference),
            )

        _log_debug(f"Template directory inside repository: {sub_path}")
        return template_path
