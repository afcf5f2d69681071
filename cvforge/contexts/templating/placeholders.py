"""
Placeholder and Section Extraction

Read-only scans of a template source: which placeholder tokens it contains and
which configured sections are present. Drives the editing UI and the
post-injection unresolved-token report.
"""

import re
from typing import Any, Dict, List

from cvforge.contexts.templating.latex_patterns import ColorPatterns, PlaceholderPatterns
from cvforge.contexts.templating.logger import _log_warning
from cvforge.contexts.templating.template_config import TemplateConfig
from cvforge.utils.text_processing import label_from_name

_PROTECTED_RE = re.compile(ColorPatterns.PROTECTED_COMMAND)
_BRACED_RE = re.compile(PlaceholderPatterns.BRACED_CAPS)
_COMMAND_RE = re.compile(PlaceholderPatterns.PLACEHOLDER_COMMAND)
_COMMAND_ARG_RE = re.compile(PlaceholderPatterns.COMMAND_ARG_CAPS)
_MUSTACHE_RE = re.compile(PlaceholderPatterns.MUSTACHE)
_BARE_RE = re.compile(PlaceholderPatterns.BARE_CAPS)
_COMMENT_RE = re.compile(r"(?<!\\)%[^\n]*")


def _without_protected(text: str) -> str:
    """Blank out color definitions so their model names are not mistaken for tokens."""
    return _PROTECTED_RE.sub("", text)


def extract_placeholders(text: str) -> Dict[str, str]:
    """
    Find placeholder tokens in a template source.

    Three token shapes are scanned in priority order, each left to right:
    {ALL_CAPS}, backslash commands containing PLACEHOLDER, and \\cmd{TOKEN}
    with a token longer than three characters. The first occurrence of a
    name wins.

    Args:
        text: Template source

    Returns:
        Ordered mapping of placeholder name to empty string

    Example:
        >>> extract_placeholders(r"\\name{FULL_NAME} \\PLACEHOLDERTAGLINE {EMAIL}")
        {'FULL_NAME': '', 'EMAIL': '', 'PLACEHOLDERTAGLINE': ''}
    """
    scan = _without_protected(text)
    found: Dict[str, str] = {}

    for match in _BRACED_RE.finditer(scan):
        found.setdefault(match.group(1), "")

    for match in _COMMAND_RE.finditer(scan):
        found.setdefault(match.group(1), "")

    for match in _COMMAND_ARG_RE.finditer(scan):
        name = match.group(2)
        if len(name) >= PlaceholderPatterns.MIN_COMMAND_ARG_LENGTH:
            found.setdefault(name, "")

    return found


def extract_sections(text: str, config: TemplateConfig) -> List[Dict[str, Any]]:
    """
    Report which configured sections are present in a source.

    Only sections with a pattern can be detected. An invalid pattern is logged
    and the section skipped.

    Returns:
        List of {id, label, exists, content} dicts in config order
    """
    sections = []
    for section_id, spec in config.sections.items():
        if not spec.pattern:
            continue
        try:
            match = re.search(spec.pattern, text)
        except re.error as e:
            _log_warning(f"Invalid pattern for section '{section_id}': {e}")
            continue
        sections.append(
            {
                "id": section_id,
                "label": spec.label,
                "exists": match is not None,
                "content": match.group(0) if match else None,
            }
        )
    return sections


def find_unresolved_tokens(text: str) -> List[str]:
    """
    List tokens an adapter left behind, in order of first appearance.

    Covers bare all-caps tokens outside command names, PLACEHOLDER commands and
    {{mustache}} tokens. Comments and color definitions are ignored.
    """
    scan = _COMMENT_RE.sub("", _without_protected(text))
    tokens: Dict[str, None] = {}

    for match in _COMMAND_RE.finditer(scan):
        tokens.setdefault("\\" + match.group(1))
    for match in _MUSTACHE_RE.finditer(scan):
        tokens.setdefault("{{" + match.group(1) + "}}")
    for match in _BARE_RE.finditer(scan):
        tokens.setdefault(match.group(0))

    return list(tokens)


def describe_placeholders(config: TemplateConfig, text: str) -> Dict[str, Dict[str, Any]]:
    """
    Merge declared placeholder metadata with tokens found in the source.

    Declared placeholders keep their label, type and default; undeclared ones
    get a label derived from the name and type 'text'.

    Returns:
        Mapping of name to {label, type, default, currentValue}
    """
    described: Dict[str, Dict[str, Any]] = {}
    for name, spec in config.placeholders.items():
        described[name] = {
            "label": spec.label,
            "type": spec.type,
            "default": spec.default,
            "currentValue": spec.default,
        }

    for name, value in extract_placeholders(text).items():
        if name in described:
            continue
        described[name] = {
            "label": label_from_name(name),
            "type": "text",
            "default": "",
            "currentValue": value,
        }
    return described
