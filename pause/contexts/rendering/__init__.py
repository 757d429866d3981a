"""
Rendering Context

Responsibilities:
- Dispatches rendered templates to the compiler matching their type
- Runs custom build commands declared by templates
- Names artifacts after the manifest's output_name
- Relocates finished artifacts to the output root

Owns: Compiler invocation, artifact naming, output management
Never: Modifies template content or resume data
"""

from pause.contexts.rendering.compiler import CompilerDispatcher, artifact_name, extension_for
from pause.contexts.rendering.relocator import relocate_artifact

__all__ = ["CompilerDispatcher", "artifact_name", "extension_for", "relocate_artifact"]
