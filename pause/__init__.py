"""
PAUSE - Profile As Unified Structured rEsume

Turns a structured resume document into finished documents (PDF, HTML,
Markdown) by resolving pluggable templates, rendering them with the resume
data and invoking the compiler that matches each template's format.

Architecture:
- Templating Context: Template references, resolution, manifests and rendering
- Rendering Context: Compiler dispatch and artifact relocation
- Orchestration Context: Per-reference pipeline with failure isolation
- Publishing Context: Interface for release and Pages collaborators
"""

__version__ = "0.1.0"
