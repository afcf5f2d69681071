"""
Template Sanitizer

Last pass over a customized source before compilation. Anything that still
looks like an unresolved placeholder is neutralized: an unresolved token is far
more likely to abort compilation than silently vanishing text.

Passes:
1. Image tokens: \\includegraphics{PROFILE_IMAGE} and friends point at a tiny
   placeholder PNG written into the workspace; any other \\includegraphics of
   an ALL_CAPS token is commented out.
2. Tokens: leftover \\PLACEHOLDERxxx commands are dropped, {ALL_CAPS} becomes
   {}, free-standing ALL_CAPS words are removed, and $$ collapses to $.

Arguments of color definitions (\\definecolor{x}{HTML}{A1B2C3}) are command
syntax, not tokens, and are left alone.
"""

import base64
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from cvforge.contexts.templating.latex_patterns import (
    ColorPatterns,
    ImagePatterns,
    PlaceholderPatterns,
)
from cvforge.contexts.templating.logger import _log_debug, _log_warning

PLACEHOLDER_IMAGE_NAME = "placeholder.png"

# 1x1 transparent PNG
PLACEHOLDER_PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAucB9W5y1i0AAAAASUVORK5CYII="
)
PLACEHOLDER_PNG = base64.b64decode(PLACEHOLDER_PNG_BASE64)

_PROTECTED_RE = re.compile(ColorPatterns.PROTECTED_COMMAND)
_PLACEHOLDER_COMMAND_RE = re.compile(PlaceholderPatterns.PLACEHOLDER_COMMAND + r"(?:\{\})?")
_BRACED_RE = re.compile(PlaceholderPatterns.BRACED_CAPS_MIN2)
_BARE_RE = re.compile(PlaceholderPatterns.BARE_CAPS)
_CAPS_IMAGE_LINE_RE = re.compile(ImagePatterns.INCLUDEGRAPHICS_CAPS_LINE, re.MULTILINE)


@dataclass
class SanitizationReport:
    """Sanitized source and what was neutralized."""

    text: str
    removed_tokens: List[str] = field(default_factory=list)
    images_replaced: int = 0
    images_commented: int = 0


def write_placeholder_image(workspace_dir: Path) -> Path:
    """Write the placeholder PNG into a workspace."""
    path = Path(workspace_dir) / PLACEHOLDER_IMAGE_NAME
    path.write_bytes(PLACEHOLDER_PNG)
    return path


def _outside_protected(text: str, transform: Callable[[str], str]) -> str:
    """Apply transform to every stretch of text that is not a color definition."""
    pieces = []
    last = 0
    for match in _PROTECTED_RE.finditer(text):
        pieces.append(transform(text[last:match.start()]))
        pieces.append(match.group(0))
        last = match.end()
    pieces.append(transform(text[last:]))
    return "".join(pieces)


def sanitize_images(text: str, workspace_dir: Optional[Path] = None) -> SanitizationReport:
    """
    Neutralize image placeholders.

    Args:
        text: Template source
        workspace_dir: Workspace receiving placeholder.png (skipped when None)

    Returns:
        SanitizationReport with image counts
    """
    replaced = 0
    for token in ImagePatterns.IMAGE_TOKENS:
        pattern = ImagePatterns.INCLUDEGRAPHICS_TOKEN.format(token=re.escape(token))
        text, count = re.subn(
            pattern, lambda m: f"{m.group(1)}{PLACEHOLDER_IMAGE_NAME}{m.group(2)}", text
        )
        replaced += count

    text, commented = _CAPS_IMAGE_LINE_RE.subn(lambda m: f"% {m.group(1)}", text)

    if workspace_dir is not None:
        write_placeholder_image(workspace_dir)

    if replaced:
        _log_debug(f"Pointed {replaced} image placeholder(s) at {PLACEHOLDER_IMAGE_NAME}")
    if commented:
        _log_warning(f"Commented out {commented} image inclusion(s) with unresolved paths")

    return SanitizationReport(text=text, images_replaced=replaced, images_commented=commented)


def sanitize_tokens(text: str) -> SanitizationReport:
    """
    Remove unresolved placeholder tokens.

    Example:
        >>> sanitize_tokens(r"\\textbf{FULL_NAME} at COMPANY_NAME $$x$$").text
        '\\\\textbf{} at  $x$'
    """
    removed: List[str] = []

    def record(match: re.Match) -> str:
        removed.append(match.group(0))
        return ""

    def empty_braces(match: re.Match) -> str:
        removed.append(match.group(0)[1:-1])
        return "{}"

    def neutralize(segment: str) -> str:
        segment = _PLACEHOLDER_COMMAND_RE.sub(record, segment)
        segment = _BRACED_RE.sub(empty_braces, segment)
        segment = _BARE_RE.sub(record, segment)
        return segment.replace("$$", "$")

    text = _outside_protected(text, neutralize)
    return SanitizationReport(text=text, removed_tokens=list(dict.fromkeys(removed)))


def sanitize(text: str, workspace_dir: Optional[Path] = None) -> SanitizationReport:
    """Run the image pass then the token pass."""
    images = sanitize_images(text, workspace_dir)
    tokens = sanitize_tokens(images.text)

    if tokens.removed_tokens:
        shown = ", ".join(tokens.removed_tokens[:10])
        _log_warning(
            f"PlaceholderUnresolved: removed {len(tokens.removed_tokens)} token(s): {shown}"
        )

    return SanitizationReport(
        text=tokens.text,
        removed_tokens=tokens.removed_tokens,
        images_replaced=images.images_replaced,
        images_commented=images.images_commented,
    )
