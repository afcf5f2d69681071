"""
Family Adapter Base

Shared contract and token-replacement helpers for template family adapters.
An adapter knows one family's placeholder dialect and turns a raw template
source plus resume data into a populated source.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Optional

from cvforge.contexts.templating.registries import FragmentRegistry, Tex, get_fragment_registry
from cvforge.contexts.templating.resume_data import ResumeView
from cvforge.utils.text_processing import escape_latex


def as_tex(value: Any) -> str:
    """Escape plain values; pass Tex through."""
    if isinstance(value, Tex):
        return value
    return escape_latex(value)


def empty_note(what: str) -> Tex:
    """Inert comment standing in for a block with no data."""
    return Tex(f"% No {what} provided\n")


def replace_tokens(text: str, values: Mapping[str, Any]) -> str:
    """
    Replace every free-standing occurrence of each literal token in one pass.

    A token must not be glued to a command name or a longer identifier, so
    EMAIL does not match inside WORK_EMAIL or \\EMAIL. Substituted values are
    never scanned again, so user text containing a word like PHONE stays as is.
    Run this before any other pass that puts resume data into the text.

    Args:
        text: Template source
        values: Token -> value (plain values are escaped, Tex passes through)
    """
    if not values:
        return text
    replacements = {token: as_tex(value) for token, value in values.items()}
    alternatives = "|".join(re.escape(t) for t in sorted(replacements, key=len, reverse=True))
    pattern = rf"(?<![\\A-Za-z0-9_])(?:{alternatives})(?![A-Za-z0-9_])"
    return re.sub(pattern, lambda m: replacements[m.group(0)], text)


def replace_command_token(text: str, name: str, value: Any) -> str:
    """Replace a bare command placeholder like \\PLACEHOLDERNAME (and a trailing {})."""
    pattern = rf"\\{re.escape(name)}(?![A-Za-z])(?:\{{\}})?"
    replacement = as_tex(value)
    return re.sub(pattern, lambda _: replacement, text)


def replace_command_arg(text: str, command: str, value: Any) -> str:
    """Replace the first argument of every \\command{...} with value."""
    pattern = rf"(\\{re.escape(command)})\{{[^{{}}]*\}}"
    replacement = as_tex(value)
    return re.sub(pattern, lambda m: f"{m.group(1)}{{{replacement}}}", text)


def comment_out(text: str, pattern: str) -> str:
    """Prefix every line containing a match with '% '."""
    compiled = re.compile(pattern)
    lines = []
    for line in text.split("\n"):
        if compiled.search(line) and not line.lstrip().startswith("%"):
            line = f"% {line}"
        lines.append(line)
    return "\n".join(lines)


class FamilyAdapter(ABC):
    """
    Populates one template family with resume data.

    Attributes:
        name: Adapter identifier, used in logs and dispatch listings
        engine: Preferred TeX engine for this family
        fragment_family: Fragment folder (defaults to name)
        requires_workspace: Adapter writes side files and needs a workspace
    """

    name: str = "base"
    engine: str = "pdflatex"
    fragment_family: Optional[str] = None
    requires_workspace: bool = False

    def __init__(self, fragments: FragmentRegistry = None):
        self.fragments = fragments or get_fragment_registry()

    @abstractmethod
    def inject(self, text: str, resume: ResumeView, workspace_dir: Optional[Path] = None) -> str:
        """
        Populate a template source.

        Args:
            text: Raw template source
            resume: Read-only resume data
            workspace_dir: Render workspace, for families that write side files

        Returns:
            Populated template source
        """

    def render_fragment(self, name: str, **context: Any) -> Tex:
        return self.fragments.render(self.fragment_family or self.name, name, **context)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(engine={self.engine!r})"
