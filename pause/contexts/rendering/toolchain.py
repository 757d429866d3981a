"""
External tool requirements.

Downloading and caching the binaries is the job of the provisioning step that
runs before a build; this module only records what that step installs and
probes whether the tools are on the invocation path.
"""

import shutil
from dataclasses import dataclass
from typing import List

from pause.config import BuildConfig
from pause.contexts.rendering.logger import _log_debug, _log_warning


@dataclass(frozen=True)
class BinaryInfo:
    name: str
    version: str
    url: str


BINARY_MANIFEST = (
    BinaryInfo(
        name="gomplate",
        version="3.11.6",
        url="https://github.com/hairyhenderson/gomplate/releases/download/v3.11.6/gomplate_linux-amd64",
    ),
    BinaryInfo(
        name="tectonic",
        version="0.15.0",
        url="https://github.com/tectonic-typesetting/tectonic/releases/download/tectonic%400.15.0/tectonic-0.15.0-x86_64-unknown-linux-musl.tar.gz",
    ),
    BinaryInfo(
        name="typst",
        version="0.11.0",
        url="https://github.com/typst/typst/releases/download/v0.11.0/typst-x86_64-unknown-linux-musl.tar.xz",
    ),
)


def required_tools(config: BuildConfig) -> List[str]:
    """Executables a build with this config may invoke."""
    tools = [config.latex_compiler, config.typst_compiler]
    if config.render_engine == "gomplate":
        tools.insert(0, config.renderer_binary)
    return tools


def missing_tools(config: BuildConfig) -> List[str]:
    """
    Required executables that are not on PATH.

    Logs a warning for each; a build still runs, and templates needing a
    missing tool fail individually.
    """
    missing = []
    for tool in required_tools(config):
        location = shutil.which(tool)
        if location is None:
            _log_warning(f"Required tool not found on PATH: {tool}")
            missing.append(tool)
        else:
            _log_debug(f"Found {tool}: {location}")
    return missing
