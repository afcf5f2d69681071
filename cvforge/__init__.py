"""
cvforge - Resume document generation from LaTeX template families

Turns structured resume data plus a chosen visual template into a compiled PDF.

Architecture:
- Templating Context: Template configs, placeholder extraction, data injection,
  customization, and sanitization of LaTeX sources
- Rendering Context: Per-render workspaces, compiler orchestration, and the
  public render interface
"""

__version__ = "0.1.0"
