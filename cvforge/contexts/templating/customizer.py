"""
Template Customizer

Applies user customizations to a populated template source as an ordered
pipeline of tagged operations:

    SetColorScheme -> SetFont -> ToggleSection* -> ReplacePlaceholders -> SetCustomColor*

plan_operations() builds that list from a Customizations request, dropping
steps the template's feature flags do not allow. Customizer.apply() runs it.
Every operation is best effort: an unknown name, a missing marker or an
invalid value logs a warning and leaves the source unchanged.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Sequence, Union

from cvforge.contexts.templating.customizations import Customizations
from cvforge.contexts.templating.latex_patterns import (
    ColorPatterns,
    DocumentPatterns,
    FontPatterns,
    SectionPatterns,
)
from cvforge.contexts.templating.logger import _log_debug, _log_info, _log_warning
from cvforge.contexts.templating.placeholders import extract_placeholders, extract_sections
from cvforge.contexts.templating.template_config import TemplateConfig
from cvforge.utils.text_processing import escape_latex, parse_hex_color

_COLOR_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")


@dataclass(frozen=True)
class SetColorScheme:
    name: str


@dataclass(frozen=True)
class SetFont:
    name: str


@dataclass(frozen=True)
class ToggleSection:
    section_id: str
    enabled: bool


@dataclass(frozen=True)
class ReplacePlaceholders:
    values: Mapping[str, Any]


@dataclass(frozen=True)
class SetCustomColor:
    name: str
    hex_value: str


Operation = Union[SetColorScheme, SetFont, ToggleSection, ReplacePlaceholders, SetCustomColor]


def plan_operations(customizations: Customizations, config: TemplateConfig) -> List[Operation]:
    """
    Build the ordered operation list for a request.

    Steps whose feature flag is off are dropped with a debug message.
    Placeholder edits are not feature-gated.
    """
    features = config.features
    operations: List[Operation] = []

    if customizations.color_scheme:
        if features.supports_color_schemes:
            operations.append(SetColorScheme(customizations.color_scheme))
        else:
            _log_debug(f"{config.template_id} does not support color schemes; skipping")

    if customizations.font:
        if features.supports_fonts:
            operations.append(SetFont(customizations.font))
        else:
            _log_debug(f"{config.template_id} does not support fonts; skipping")

    if customizations.enabled_sections:
        if features.supports_section_toggle:
            operations.extend(
                ToggleSection(section_id, bool(enabled))
                for section_id, enabled in customizations.enabled_sections.items()
            )
        else:
            _log_debug(f"{config.template_id} does not support section toggles; skipping")

    if customizations.edited_content:
        operations.append(ReplacePlaceholders(dict(customizations.edited_content)))

    if customizations.custom_colors:
        if features.supports_custom_colors:
            operations.extend(
                SetCustomColor(name, value) for name, value in customizations.custom_colors.items()
            )
        else:
            _log_debug(f"{config.template_id} does not support custom colors; skipping")

    return operations


class Customizer:
    """
    Mutates one render's template source.

    Args:
        template_id: Template being customized (for log messages)
        tex: Populated template source
        config: The template's validated config
    """

    def __init__(self, template_id: str, tex: str, config: TemplateConfig):
        self.template_id = template_id
        self.config = config
        self._tex = tex
        # Operations that changed nothing (enabling a section is not counted)
        self.skipped: List[Operation] = []

    def get_modified_tex(self) -> str:
        return self._tex

    def apply(self, operations: Sequence[Operation]) -> "Customizer":
        """Run operations in the order given."""
        for op in operations:
            if isinstance(op, SetColorScheme):
                changed = self.apply_color_scheme(op.name)
            elif isinstance(op, SetFont):
                changed = self.apply_font(op.name)
            elif isinstance(op, ToggleSection):
                changed = self.toggle_section(op.section_id, op.enabled) or op.enabled
            elif isinstance(op, ReplacePlaceholders):
                changed = self.replace_all_placeholders(op.values) == len(op.values)
            elif isinstance(op, SetCustomColor):
                changed = self.apply_custom_color(op.name, op.hex_value)
            else:
                raise TypeError(f"Unknown customization operation: {op!r}")
            if not changed:
                self.skipped.append(op)
        return self

    # Helpers

    def _split_document(self):
        """(preamble, body) around \\begin{document}, or None when absent."""
        index = self._tex.find(DocumentPatterns.BEGIN_DOCUMENT)
        if index == -1:
            return None
        return self._tex[:index], self._tex[index:]

    def _insert_before_document(self, content: str, what: str) -> bool:
        parts = self._split_document()
        if parts is None:
            _log_warning(f"No \\begin{{document}} in {self.template_id}; cannot add {what}")
            return False
        preamble, body = parts
        self._tex = preamble + content + body
        return True

    # Operations

    def apply_color_scheme(self, scheme_name: str) -> bool:
        """
        Switch to a configured color scheme.

        The first color pattern present in the source (\\setcolorscheme,
        \\colorlet, \\definecolor) has every match replaced by the scheme
        command; if none is present the command goes right before
        \\begin{document}.
        """
        scheme = self.config.color_schemes.get(scheme_name)
        if scheme is None:
            _log_warning(f"Unknown color scheme '{scheme_name}' for {self.template_id}")
            return False
        if not scheme.command:
            _log_warning(f"Color scheme '{scheme_name}' has no command")
            return False

        command = scheme.command
        for pattern in ColorPatterns.scheme_targets():
            if re.search(pattern, self._tex):
                self._tex = re.sub(pattern, lambda _: command, self._tex)
                _log_info(f"Applied color scheme '{scheme_name}'")
                return True

        if self._insert_before_document(command + "\n", f"color scheme '{scheme_name}'"):
            _log_info(f"Inserted color scheme '{scheme_name}' before \\begin{{document}}")
            return True
        return False

    def apply_font(self, font_name: str) -> bool:
        """
        Switch to a configured font.

        Adds each missing \\usepackage, drops any \\renewcommand{\\familydefault}
        from the preamble, then appends the font's commands to the preamble.
        """
        font = self.config.fonts.get(font_name)
        if font is None:
            _log_warning(f"Unknown font '{font_name}' for {self.template_id}")
            return False

        parts = self._split_document()
        if parts is None:
            _log_warning(f"No \\begin{{document}} in {self.template_id}; cannot apply font")
            return False
        preamble, body = parts

        additions = []
        for package in font.packages:
            pattern = FontPatterns.USEPACKAGE_TEMPLATE.format(package=re.escape(package))
            if not re.search(pattern, preamble):
                additions.append(f"\\usepackage{{{package}}}\n")

        preamble = re.sub(FontPatterns.RENEW_FAMILYDEFAULT, "", preamble)
        if font.commands:
            additions.append(font.commands.rstrip("\n") + "\n")

        self._tex = preamble + "".join(additions) + body
        _log_info(f"Applied font '{font_name}'")
        return True

    def toggle_section(self, section_id: str, enabled: bool) -> bool:
        """
        Hide a removable section.

        Enabling is a no-op: a removed section cannot be restored from the
        modified source. Removal uses the section's pattern (every match), its
        start/end markers (first occurrence, inclusive), or its start marker up
        to the next section-start command (first occurrence).
        Patterns use default flags, so `.` stops at newlines; multi-line
        patterns spell it [\\s\\S].

        Returns:
            True if text was removed
        """
        section = self.config.sections.get(section_id)
        if section is None:
            _log_warning(f"Unknown section '{section_id}' for {self.template_id}")
            return False
        if enabled:
            _log_debug(f"Section '{section_id}' enabled; nothing to do")
            return False
        if not section.removable:
            _log_warning(f"Section '{section_id}' is not removable")
            return False

        if section.pattern:
            try:
                self._tex, count = re.subn(section.pattern, "", self._tex)
            except re.error as e:
                _log_warning(f"Invalid pattern for section '{section_id}': {e}")
                return False
            if count == 0:
                _log_warning(f"Section '{section_id}' not found in {self.template_id}")
                return False
            _log_info(f"Removed section '{section_id}' ({count} match(es))")
            return True

        start = self._tex.find(section.start_marker)
        if start == -1:
            _log_warning(f"Start marker for section '{section_id}' not found")
            return False

        search_from = start + len(section.start_marker)
        if section.end_marker:
            end = self._tex.find(section.end_marker, search_from)
            if end == -1:
                _log_warning(f"End marker for section '{section_id}' not found")
                return False
            end += len(section.end_marker)
        else:
            match = re.compile(SectionPatterns.NEXT_SECTION_START).search(self._tex, search_from)
            end = match.start() if match else len(self._tex)

        self._tex = self._tex[:start] + self._tex[end:]
        _log_info(f"Removed section '{section_id}'")
        return True

    def replace_placeholder(self, name: str, value: Any) -> bool:
        """
        Replace a placeholder with escaped text.

        Shapes are tried in order and every occurrence of the first shape that
        matches is replaced: the literal name, {name}, \\name, and \\cmd{name}.

        Returns:
            True if anything was replaced
        """
        replacement = escape_latex(value)
        bare = name.lstrip("\\").strip("{}")
        if not bare:
            _log_warning("Empty placeholder name")
            return False

        shapes = (
            (rf"(?<![\\A-Za-z0-9_]){re.escape(name)}(?![A-Za-z0-9_])", lambda m: replacement),
            (rf"\{{{re.escape(bare)}\}}", lambda m: f"{{{replacement}}}"),
            (rf"\\{re.escape(bare)}(?![A-Za-z])", lambda m: replacement),
            (rf"(\\[a-zA-Z]+)\{{{re.escape(bare)}\}}", lambda m: f"{m.group(1)}{{{replacement}}}"),
        )
        for pattern, substitute in shapes:
            if re.search(pattern, self._tex):
                self._tex = re.sub(pattern, substitute, self._tex)
                return True

        _log_warning(f"Placeholder '{name}' not found in {self.template_id}")
        return False

    def replace_all_placeholders(self, values: Mapping[str, Any]) -> int:
        """Replace several placeholders; returns how many were found."""
        replaced = sum(1 for name, value in values.items() if self.replace_placeholder(name, value))
        _log_debug(f"Replaced {replaced}/{len(values)} placeholders")
        return replaced

    def apply_custom_color(self, color_name: str, hex_value: str) -> bool:
        """
        Define a color from a 6-digit hex value and alias the requested name to it.

        Anything but #RRGGBB / RRGGBB is rejected with a warning and no change.
        """
        if not self.config.features.supports_custom_colors:
            _log_warning(f"{self.template_id} does not support custom colors")
            return False
        if not isinstance(color_name, str) or not _COLOR_NAME_RE.match(color_name):
            _log_warning(f"Invalid custom color name '{color_name}'")
            return False

        rgb = parse_hex_color(hex_value)
        if rgb is None:
            _log_warning(f"Invalid hex color for '{color_name}': {hex_value!r}")
            return False

        r, g, b = rgb
        # Defined under a private name, then aliased over the template's own color
        private_name = f"custom{color_name}"
        definition = (
            f"\\definecolor{{{private_name}}}{{RGB}}{{{r},{g},{b}}}\n"
            f"\\colorlet{{{color_name}}}{{{private_name}}}\n"
        )
        if self._insert_before_document(definition, f"custom color '{color_name}'"):
            _log_info(f"Defined custom color '{color_name}' as RGB({r},{g},{b})")
            return True
        return False

    def inject_into_preamble(self, content: str) -> bool:
        """Insert content after the configured preamble insert point, else before \\begin{document}."""
        point = self.config.preamble_insert_point
        if point:
            match = re.search(point, self._tex)
            if match:
                self._tex = self._tex[: match.end()] + "\n" + content + self._tex[match.end():]
                return True
            _log_debug(f"Preamble insert point not found in {self.template_id}")
        return self._insert_before_document(content + "\n", "preamble content")

    def inject_into_document(self, content: str) -> bool:
        """Insert content after the configured document insert point, else after \\begin{document}."""
        point = self.config.document_insert_point or re.escape(DocumentPatterns.BEGIN_DOCUMENT)
        match = re.search(point, self._tex)
        if match is None:
            _log_warning(f"Document insert point not found in {self.template_id}")
            return False
        self._tex = self._tex[: match.end()] + "\n" + content + self._tex[match.end():]
        return True

    def apply_placeholder_defaults(self) -> int:
        """
        Fill declared placeholders still in the source with their config default.

        Runs after edits, so edited placeholders are already gone. Placeholders
        without a default are left for the sanitizer.

        Returns:
            Number of placeholders filled
        """
        present = self.extract_placeholders()
        filled = 0
        for name, placeholder in self.config.placeholders.items():
            if not placeholder.default or name not in present:
                continue
            if self.replace_placeholder(name, placeholder.default):
                filled += 1
        if filled:
            _log_debug(f"Filled {filled} placeholder(s) with defaults in {self.template_id}")
        return filled

    def extract_placeholders(self) -> Dict[str, str]:
        return extract_placeholders(self._tex)

    def extract_sections(self) -> List[Dict[str, Any]]:
        return extract_sections(self._tex, self.config)
