"""Utilities for executing external tools (renderer, compilers, git)."""

import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

# Exit status a shell reports for a missing executable
COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    """Represents the outcome of an executed command."""

    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for diagnostics."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


def format_command(command: Sequence[str]) -> str:
    return " ".join(shlex.quote(str(part)) for part in command)


class CommandRunner:
    """Abstract command runner interface."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        raise NotImplementedError


class SubprocessCommandRunner(CommandRunner):
    """
    Command runner that executes commands via :mod:`subprocess`.

    Blocks until the process exits. A missing executable is reported as a
    failed CommandResult (exit status 127) instead of raising, so callers
    handle it like any other tool failure.
    """

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        merged_env: Optional[Dict[str, str]] = None
        if env:
            merged_env = os.environ.copy()
            merged_env.update(env)

        try:
            process = subprocess.run(
                [str(part) for part in command],
                cwd=str(cwd) if cwd else None,
                env=merged_env,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
                check=False,
            )
        except FileNotFoundError:
            return CommandResult(
                command=command,
                returncode=COMMAND_NOT_FOUND,
                stdout="",
                stderr=f"Command not found: {command[0]}",
            )

        return CommandResult(
            command=command,
            returncode=process.returncode,
            stdout=process.stdout,
            stderr=process.stderr,
        )
