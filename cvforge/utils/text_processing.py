"""
Text processing utilities for LaTeX-safe output and display.

Every piece of user-supplied free text goes through escape_latex() before it is
placed into a template source.
"""

import re
from typing import Any, Optional, Tuple

# Replacement for each LaTeX special character. Applied in a single pass so the
# braces produced for backslash/caret/tilde are never escaped a second time.
LATEX_SPECIAL_CHARS = {
    "\\": r"\textbackslash{}",
    "{": r"\{",
    "}": r"\}",
    "$": r"\$",
    "%": r"\%",
    "&": r"\&",
    "#": r"\#",
    "^": r"\textasciicircum{}",
    "_": r"\_",
    "~": r"\textasciitilde{}",
}

_LATEX_SPECIAL_RE = re.compile(r"[\\{}$%&#^_~]")
_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")


def escape_latex(text: Any) -> str:
    """
    Escape LaTeX special characters in free text.

    Handles the ten characters with special meaning: backslash, braces,
    dollar, percent, ampersand, hash, caret, underscore and tilde.
    None and empty values become the empty string.

    Args:
        text: Value to escape (non-strings are converted with str())

    Returns:
        Text safe to place inside a LaTeX argument or paragraph

    Example:
        >>> escape_latex("O'Brien & Sons {Inc.}")
        "O'Brien \\\\& Sons \\\\{Inc.\\\\}"
        >>> escape_latex(None)
        ''
    """
    if text is None:
        return ""
    text = str(text)
    if not text:
        return ""
    return _LATEX_SPECIAL_RE.sub(lambda m: LATEX_SPECIAL_CHARS[m.group(0)], text)


def parse_hex_color(value: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """
    Convert a 6-digit hex color (optional leading '#') to an RGB triple.

    Returns None for anything else, including named colors and 3-digit shorthand.

    Example:
        >>> parse_hex_color("#A1B2C3")
        (161, 178, 195)
        >>> parse_hex_color("red") is None
        True
    """
    if not isinstance(value, str):
        return None
    match = _HEX_COLOR_RE.match(value.strip())
    if not match:
        return None
    return tuple(int(part, 16) for part in match.groups())


def strip_profile_url(value: Optional[str], host: str) -> str:
    """
    Reduce a profile URL to its handle.

    Example:
        >>> strip_profile_url("https://www.linkedin.com/in/janedoe/", "linkedin.com/in")
        'janedoe'
        >>> strip_profile_url("janedoe", "github.com")
        'janedoe'
    """
    if not value:
        return ""
    handle = re.sub(r"^https?://", "", value.strip())
    handle = re.sub(r"^www\.", "", handle)
    if handle.startswith(host):
        handle = handle[len(host):]
    return handle.strip("/")


def split_full_name(full_name: Optional[str]) -> Tuple[str, str]:
    """Split a display name into (first, last); last may be empty."""
    if not full_name:
        return "", ""
    parts = full_name.strip().split()
    if len(parts) == 1:
        return parts[0], ""
    return " ".join(parts[:-1]), parts[-1]


def first_sentence(text: Optional[str]) -> str:
    """Return the first sentence of a paragraph, including its terminator."""
    if not text:
        return ""
    match = re.match(r"\s*(.+?[.!?])(\s|$)", text, re.DOTALL)
    return match.group(1).strip() if match else text.strip()


def label_from_name(name: str) -> str:
    """
    Derive a human label from a placeholder name.

    Example:
        >>> label_from_name("FULL_NAME")
        'Full Name'
    """
    return " ".join(word.capitalize() for word in name.split("_") if word)


def safe_filename(name: str) -> str:
    """Replace anything outside [A-Za-z0-9._-] with underscores."""
    return re.sub(r"[^A-Za-z0-9._-]", "_", name)


def set_max_consecutive_blank_lines(content: str, max_consecutive: int = 1) -> str:
    """
    Normalize consecutive blank lines to a maximum number.

    Adapters that replace block placeholders with nothing leave runs of blank
    lines behind; this keeps generated sources readable.

    Args:
        content: The text content to normalize
        max_consecutive: Maximum number of consecutive blank lines to allow.
                        Use 0 to remove all blank lines (default: 1)

    Returns:
        Content with normalized blank lines

    Example:
        >>> set_max_consecutive_blank_lines("text\\n\\n\\n\\nmore", max_consecutive=1)
        'text\\n\\nmore'
    """
    if max_consecutive == 0:
        pattern = r"\n\s*\n(\s*\n)*"
    else:
        pattern = r"\n\s*\n(\s*\n)+"

    return re.sub(pattern, "\n" * (max_consecutive + 1), content)
