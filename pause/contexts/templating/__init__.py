"""
Templating Context

Responsibilities:
- Parses template references (built-in, official, GitHub, URL)
- Resolves references to local template directories, cloning when needed
- Loads and validates template manifests
- Renders template entrypoints against resume data

Owns: Template references, manifests, rendering into isolated build directories
Never: Invokes document compilers
"""

from pause.contexts.templating.manifest import TemplateManifest, TemplateType, load_manifest
from pause.contexts.templating.references import (
    BUILTIN_TEMPLATES,
    TemplateReference,
    parse_references,
    parse_templates,
)
from pause.contexts.templating.renderer import TemplateRenderer
from pause.contexts.templating.resolver import TemplateResolver

__all__ = [
    "BUILTIN_TEMPLATES",
    "TemplateManifest",
    "TemplateReference",
    "TemplateRenderer",
    "TemplateResolver",
    "TemplateType",
    "load_manifest",
    "parse_references",
    "parse_templates",
]
