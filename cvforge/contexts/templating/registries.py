"""
Templating Registries

Registry for the Jinja2 fragments adapters use to build multi-line LaTeX blocks
(experience lists, rubric files, contact lines, ...).
"""

import re
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template

from cvforge.utils.text_processing import escape_latex

FRAGMENTS_PATH = Path(__file__).resolve().parent / "fragments"


class Tex(str):
    """String that is already valid LaTeX and must not be escaped again."""


def _finalize(value: Any) -> Any:
    """Escape every <<< expression >>> result unless it is marked as Tex."""
    if value is None:
        return ""
    if isinstance(value, Tex):
        return value
    return escape_latex(value)


def tex_filter(value: Any) -> Tex:
    """<<< x | tex >>> : pass pre-built LaTeX through untouched."""
    return Tex("" if value is None else value)


def url_filter(value: Any) -> Tex:
    """<<< x | url >>> : make a URL safe for \\href and \\url arguments."""
    if not value:
        return Tex("")
    cleaned = re.sub(r"[\\{}\s]", "", str(value))
    return Tex(cleaned.replace("%", r"\%").replace("#", r"\#"))


class FragmentRegistry:
    """
    Registry for loading and caching Jinja2 fragments for LaTeX generation.

    Fragments are stored in fragments/{family}/{name}.tex.jinja and use custom
    delimiters to avoid conflicts with LaTeX syntax:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>

    Every variable is LaTeX-escaped on output; use the `tex` filter for values
    that are already LaTeX.
    """

    def __init__(self, fragments_path: Path = None):
        """
        Initialize the fragment registry.

        Args:
            fragments_path: Base directory of family fragment folders
        """
        if fragments_path is None:
            fragments_path = FRAGMENTS_PATH

        self.fragments_path = fragments_path
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(fragments_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            finalize=_finalize,
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Preserve whitespace (important for LaTeX)
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self.env.filters["tex"] = tex_filter
        self.env.filters["url"] = url_filter

    def get_template(self, family: str, name: str) -> Template:
        """
        Get a fragment, loading and caching it if necessary.

        Args:
            family: Family folder (e.g., 'hipster')
            name: Fragment name without extension (e.g., 'experience')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If fragment file doesn't exist
        """
        key = f"{family}/{name}.tex.jinja"
        if key not in self._cache:
            self._cache[key] = self.env.get_template(key)
        return self._cache[key]

    def render(self, family: str, name: str, **context: Any) -> Tex:
        """Render a fragment; the result is marked as Tex."""
        return Tex(self.get_template(family, name).render(**context).rstrip("\n"))

    def clear_cache(self) -> None:
        self._cache.clear()


_default_registry = None


def get_fragment_registry() -> FragmentRegistry:
    """Process-wide fragment registry (fragments ship with the package)."""
    global _default_registry
    if _default_registry is None:
        _default_registry = FragmentRegistry()
    return _default_registry
