"""
LaTeX Pattern Constants

Centralized LaTeX patterns used for extraction, customization and sanitization.
Organized into frozen dataclasses by category for immutability and clear grouping.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class DocumentPatterns:
    """
    Document-level LaTeX markers.

    Used to split preamble from body.
    """
    BEGIN_DOCUMENT: str = r'\begin{document}'
    END_DOCUMENT: str = r'\end{document}'


@dataclass(frozen=True)
class ColorPatterns:
    """
    Color definition commands, in the order a scheme replacement tries them.

    The first pattern that matches anywhere in the source has all of its
    matches replaced by the scheme command.
    """
    SET_COLOR_SCHEME: str = r'\\setcolorscheme\{[^}]+\}'
    COLORLET: str = r'\\colorlet\{[^}]+\}\{[^}]+\}'
    DEFINECOLOR: str = r'\\definecolor\{[^}]+\}\{[^}]+\}\{[^}]+\}'

    # Commands whose arguments carry color models and hex values, not placeholders
    PROTECTED_COMMAND: str = (
        r'\\(?:definecolor|providecolor|colorlet)(?:\[[^\]]*\])?(?:\{[^{}]*\}){1,3}'
    )

    @classmethod
    def scheme_targets(cls) -> Tuple[str, ...]:
        return (cls.SET_COLOR_SCHEME, cls.COLORLET, cls.DEFINECOLOR)


@dataclass(frozen=True)
class FontPatterns:
    """Font package and family patterns."""
    USEPACKAGE_TEMPLATE: str = r'\\usepackage(?:\[[^\]]*\])?\{{{package}\}}'
    RENEW_FAMILYDEFAULT: str = r'\\renewcommand\{\\familydefault\}[^\n]*\n?'


@dataclass(frozen=True)
class SectionPatterns:
    """
    Commands that open a new resume section.

    A section removed by start marker alone runs up to the next of these.
    """
    NEXT_SECTION_START: str = (
        r'\\cvsection\{|\\csection\{|\\section\*?\{|\\(?:begin|end)\{document\}'
    )


@dataclass(frozen=True)
class PlaceholderPatterns:
    """
    Placeholder token shapes found in template sources.

    Extraction priority follows declaration order.
    """
    BRACED_CAPS: str = r'\{([A-Z_]+)\}'
    PLACEHOLDER_COMMAND: str = r'\\([A-Z]*PLACEHOLDER[A-Z_]*)'
    COMMAND_ARG_CAPS: str = r'\\([a-zA-Z]+)\{([A-Z_]+)\}'
    MUSTACHE: str = r'\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}'

    # Free-standing all-caps token: not part of a command name or a longer word
    BARE_CAPS: str = r'(?<![\\A-Za-z0-9_])[A-Z_]{2,}(?![A-Za-z0-9_])'
    BRACED_CAPS_MIN2: str = r'\{[A-Z_]{2,}\}'

    MIN_COMMAND_ARG_LENGTH: int = 4


@dataclass(frozen=True)
class ImagePatterns:
    """Image inclusion patterns."""
    INCLUDEGRAPHICS_TOKEN: str = r'(\\includegraphics(?:\[[^\]]*\])?\{{){token}(\}})'
    INCLUDEGRAPHICS_CAPS_LINE: str = r'^(.*\\includegraphics[^{\n]*\{[A-Z_]+\}.*)$'

    IMAGE_TOKENS: Tuple[str, ...] = (
        'PROFILE_IMAGE',
        'PHOTO_PATH',
        'PROFILE_PHOTO',
        'AVATAR_PATH',
        'IMAGE_PATH',
    )

