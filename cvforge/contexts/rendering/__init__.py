"""
Rendering Context

Responsibilities:
- Resolves a template's main source in the template store
- Runs the templating pipeline inside a private, per-render workspace
- Compiles with the template's TeX engine under a time limit
- Maps compiler failures to structured render errors
- Schedules workspace cleanup after every render

Owns: Workspaces, TeX engine processes, PDF bytes
Never: Edits template sources directly (delegates to the templating context)
"""

from cvforge.contexts.rendering.compiler import CompilationResult, compile_latex
from cvforge.contexts.rendering.exceptions import RenderError
from cvforge.contexts.rendering.renderer import (
    DocumentRenderer,
    RenderResult,
    extract_placeholders,
    get_available_templates,
    get_renderer,
    load_config,
    render_document,
)
from cvforge.contexts.rendering.workspace import Workspace

__all__ = [
    # Public API
    "render_document",
    "extract_placeholders",
    "load_config",
    "get_available_templates",
    # Renderer
    "DocumentRenderer",
    "RenderResult",
    "RenderError",
    "get_renderer",
    # Building blocks
    "compile_latex",
    "CompilationResult",
    "Workspace",
]
