"""
Templating Context

Responsibilities:
- Loads, validates and caches template configs
- Extracts placeholders and sections from template sources
- Injects resume data through per-family adapters (with a generic fallback)
- Applies user customizations as an ordered pipeline of operations
- Neutralizes leftover placeholders before compilation

Owns: Template configs, placeholder dialects, LaTeX escaping of injected text
Never: Runs the TeX engine or manages workspaces
"""

from cvforge.contexts.templating.config_store import TemplateConfigStore
from cvforge.contexts.templating.customizations import Customizations
from cvforge.contexts.templating.customizer import (
    Customizer,
    ReplacePlaceholders,
    SetColorScheme,
    SetCustomColor,
    SetFont,
    ToggleSection,
    plan_operations,
)
from cvforge.contexts.templating.injector import DataInjector, TemplateIdentity
from cvforge.contexts.templating.placeholders import (
    describe_placeholders,
    extract_placeholders,
    extract_sections,
)
from cvforge.contexts.templating.resume_data import ResumeView
from cvforge.contexts.templating.sanitizer import sanitize
from cvforge.contexts.templating.template_config import TemplateConfig

__all__ = [
    # Configs
    "TemplateConfigStore",
    "TemplateConfig",
    # Extraction
    "extract_placeholders",
    "extract_sections",
    "describe_placeholders",
    # Injection
    "DataInjector",
    "TemplateIdentity",
    "ResumeView",
    # Customization
    "Customizations",
    "Customizer",
    "plan_operations",
    "SetColorScheme",
    "SetFont",
    "ToggleSection",
    "ReplacePlaceholders",
    "SetCustomColor",
    # Sanitization
    "sanitize",
]
