"""Shared fixtures: build configs, sample resumes, template factories and a fake command runner."""

import json
import re
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
from omegaconf import OmegaConf
from PyPDF2 import PdfWriter

from pause.config import DEFAULT_BUILTIN_TEMPLATES_PATH, BuildConfig
from pause.utils.command_runner import COMMAND_NOT_FOUND, CommandResult, CommandRunner

SAMPLE_RESUME = {
    "basics": {
        "name": "Philip J. Fry",
        "label": "Delivery Boy",
        "email": "fry@planetexpress.com",
        "summary": "Frozen in 1999, delivering since 3000.",
    },
    "work": [
        {
            "name": "Planet Express",
            "position": "Delivery Boy",
            "startDate": "3000-01",
            "highlights": ["Delivered to the Moon", "Saved the universe (twice)"],
        }
    ],
    "skills": [{"name": "Piloting", "keywords": ["Ship", "Slurm"]}],
}


def write_pdf(path: Path, pages: int = 1) -> Path:
    """Write a real (blank) PDF so page counting works."""
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    with open(path, "wb") as f:
        writer.write(f)
    return path


def _lookup(data: dict, dotted: str):
    value = data
    for key in dotted.split("."):
        if not isinstance(value, dict) or key not in value:
            return ""
        value = value[key]
    return value


def fake_gomplate(command: List[str], cwd: Optional[Path]) -> CommandResult:
    """Substitutes simple [[ .a.b ]] actions; leaves anything else untouched."""
    args = dict(zip(command[1::2], command[2::2]))
    entrypoint = Path(args["--file"])
    data_path = Path(args["--datasource"].split("=", 1)[1])
    data = json.loads(data_path.read_text(encoding="utf-8"))
    left, right = re.escape(args["--left-delim"]), re.escape(args["--right-delim"])

    text = entrypoint.read_text(encoding="utf-8")
    rendered = re.sub(
        rf"{left}\s*\.([\w.]+)\s*{right}", lambda m: str(_lookup(data, m.group(1))), text
    )
    Path(args["--out"]).write_text(rendered, encoding="utf-8")
    return CommandResult(command=command, returncode=0, stdout="", stderr="")


def fake_tectonic(command: List[str], cwd: Optional[Path]) -> CommandResult:
    source_name, outdir = command[1], Path(command[3])
    write_pdf(outdir / f"{Path(source_name).stem}.pdf")
    return CommandResult(command=command, returncode=0, stdout="note: Writing output\n", stderr="")


def fake_typst(command: List[str], cwd: Optional[Path]) -> CommandResult:
    write_pdf(Path(command[3]))
    return CommandResult(command=command, returncode=0, stdout="", stderr="")


def failing(returncode: int = 1, stderr: str = "boom") -> Callable:
    def handler(command: List[str], cwd: Optional[Path]) -> CommandResult:
        return CommandResult(command=command, returncode=returncode, stdout="", stderr=stderr)

    return handler


class FakeRunner(CommandRunner):
    """
    Records commands and fabricates the files the real tools would produce.

    Handlers are keyed by executable name; unknown executables behave like a
    missing binary (exit status 127).
    """

    def __init__(self):
        self.commands: List[dict] = []
        self.handlers: Dict[str, Callable] = {
            "gomplate": fake_gomplate,
            "tectonic": fake_tectonic,
            "typst": fake_typst,
        }
        self._lock = threading.Lock()

    def on(self, executable: str, handler: Callable) -> "FakeRunner":
        self.handlers[executable] = handler
        return self

    def run(self, command, *, cwd=None, env=None) -> CommandResult:
        command = [str(part) for part in command]
        with self._lock:
            self.commands.append({"command": command, "cwd": cwd, "env": dict(env or {})})

        handler = self.handlers.get(Path(command[0]).name)
        if handler is None:
            return CommandResult(
                command=command,
                returncode=COMMAND_NOT_FOUND,
                stdout="",
                stderr=f"Command not found: {command[0]}",
            )
        return handler(command, cwd)

    def executed(self, executable: str) -> List[dict]:
        return [record for record in self.commands if Path(record["command"][0]).name == executable]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def config(tmp_path):
    return BuildConfig(
        output_dir=tmp_path / "out",
        work_dir=tmp_path / "work",
        builtin_templates_dir=DEFAULT_BUILTIN_TEMPLATES_PATH,
    )


@pytest.fixture
def resume_data():
    return json.loads(json.dumps(SAMPLE_RESUME))


@pytest.fixture
def make_template(tmp_path):
    """
    Factory creating a template directory.

    make_template("name", manifest={...}, files={"resume.tex.tmpl": "..."},
                  manifest_file="template.yaml")
    """

    def factory(
        name: str,
        manifest: Optional[dict] = None,
        files: Optional[Dict[str, str]] = None,
        manifest_file: str = "template.yaml",
        root: Optional[Path] = None,
    ) -> Path:
        template_dir = (root or tmp_path / "templates") / name
        template_dir.mkdir(parents=True, exist_ok=True)

        if manifest is not None:
            manifest_path = template_dir / manifest_file
            if manifest_file.endswith(".json"):
                manifest_path.write_text(json.dumps(manifest), encoding="utf-8")
            elif manifest_file.endswith((".yaml", ".yml")):
                OmegaConf.save(OmegaConf.create(manifest), manifest_path)
            else:
                manifest_path.write_text(str(manifest), encoding="utf-8")

        for file_name, content in (files or {}).items():
            file_path = template_dir / file_name
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")

        return template_dir

    return factory
