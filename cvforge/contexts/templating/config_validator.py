"""
Template Config Validation

Structural checks for <templateId>.config.json files. Validation collects every
problem instead of stopping at the first one so a broken config can be fixed
in a single pass.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

FEATURE_KEYS = (
    "supportsColorSchemes",
    "supportsFonts",
    "supportsSectionToggle",
    "supportsCustomColors",
)
COLOR_SCHEME_TYPES = ("predefined", "custom")
PLACEHOLDER_TYPES = ("text", "textarea", "email", "phone", "url", "date")
ENGINES = ("pdflatex", "xelatex", "lualatex")


@dataclass
class ValidationReport:
    """Outcome of validating one config."""

    valid: bool
    errors: List[str] = field(default_factory=list)


def _require_str(obj: Dict[str, Any], key: str, where: str, errors: List[str]) -> None:
    if not isinstance(obj.get(key), str) or not obj.get(key):
        errors.append(f"{where}: '{key}' is required and must be a non-empty string")


def _optional_str(obj: Dict[str, Any], key: str, where: str, errors: List[str]) -> None:
    if key in obj and not isinstance(obj[key], str):
        errors.append(f"{where}: '{key}' must be a string")


def _validate_features(features: Any, errors: List[str]) -> None:
    if not isinstance(features, dict):
        errors.append("features: must be an object")
        return
    for key, value in features.items():
        if not isinstance(value, bool):
            errors.append(f"features.{key}: must be a boolean")


def _validate_color_schemes(schemes: Any, errors: List[str]) -> None:
    if not isinstance(schemes, dict):
        errors.append("colorSchemes: must be an object")
        return
    for name, scheme in schemes.items():
        where = f"colorSchemes.{name}"
        # Bare string shorthand is the command itself
        if isinstance(scheme, str):
            continue
        if not isinstance(scheme, dict):
            errors.append(f"{where}: must be an object or a command string")
            continue
        _require_str(scheme, "label", where, errors)
        _optional_str(scheme, "command", where, errors)
        if "type" in scheme and scheme["type"] not in COLOR_SCHEME_TYPES:
            errors.append(f"{where}: 'type' must be one of {', '.join(COLOR_SCHEME_TYPES)}")


def _validate_fonts(fonts: Any, errors: List[str]) -> None:
    if not isinstance(fonts, dict):
        errors.append("fonts: must be an object")
        return
    for name, font in fonts.items():
        where = f"fonts.{name}"
        if not isinstance(font, dict):
            errors.append(f"{where}: must be an object")
            continue
        _require_str(font, "label", where, errors)
        if "packages" in font and not (
            isinstance(font["packages"], list) and all(isinstance(p, str) for p in font["packages"])
        ):
            errors.append(f"{where}: 'packages' must be an array of strings")
        _optional_str(font, "commands", where, errors)


def _validate_sections(sections: Any, errors: List[str]) -> None:
    if not isinstance(sections, dict):
        errors.append("sections: must be an object")
        return
    for section_id, section in sections.items():
        where = f"sections.{section_id}"
        if not isinstance(section, dict):
            errors.append(f"{where}: must be an object")
            continue
        _require_str(section, "label", where, errors)
        for key in ("pattern", "startMarker", "endMarker"):
            _optional_str(section, key, where, errors)
        if "removable" in section and not isinstance(section["removable"], bool):
            errors.append(f"{where}: 'removable' must be a boolean")
        if section.get("removable") is True and not (
            section.get("pattern") or section.get("startMarker")
        ):
            errors.append(f"{where}: removable sections need a 'pattern' or a 'startMarker'")
        if section.get("endMarker") and not section.get("startMarker"):
            errors.append(f"{where}: 'endMarker' requires a 'startMarker'")


def _validate_placeholders(placeholders: Any, errors: List[str]) -> None:
    if not isinstance(placeholders, dict):
        errors.append("placeholders: must be an object")
        return
    for name, placeholder in placeholders.items():
        where = f"placeholders.{name}"
        if not isinstance(placeholder, dict):
            errors.append(f"{where}: must be an object")
            continue
        _require_str(placeholder, "label", where, errors)
        if "type" in placeholder and placeholder["type"] not in PLACEHOLDER_TYPES:
            errors.append(f"{where}: 'type' must be one of {', '.join(PLACEHOLDER_TYPES)}")


def validate_template_config(raw: Any) -> ValidationReport:
    """
    Validate a parsed template config.

    Args:
        raw: Parsed JSON content of a config file

    Returns:
        ValidationReport listing every problem found (empty when valid)
    """
    errors: List[str] = []

    if not isinstance(raw, dict):
        return ValidationReport(valid=False, errors=["config: must be a JSON object"])

    _require_str(raw, "templateId", "config", errors)
    _require_str(raw, "version", "config", errors)

    metadata = raw.get("metadata")
    if not isinstance(metadata, dict):
        errors.append("metadata: is required and must be an object")
    else:
        _require_str(metadata, "name", "metadata", errors)
        _require_str(metadata, "mainFile", "metadata", errors)
        _optional_str(metadata, "description", "metadata", errors)
        _optional_str(metadata, "directory", "metadata", errors)

    if "features" in raw:
        _validate_features(raw["features"], errors)
    if "colorSchemes" in raw:
        _validate_color_schemes(raw["colorSchemes"], errors)
    if "fonts" in raw:
        _validate_fonts(raw["fonts"], errors)
    if "sections" in raw:
        _validate_sections(raw["sections"], errors)
    if "placeholders" in raw:
        _validate_placeholders(raw["placeholders"], errors)
    if "engine" in raw and raw["engine"] not in ENGINES:
        errors.append(f"engine: must be one of {', '.join(ENGINES)}")

    for key in ("preambleInsertPoint", "documentInsertPoint"):
        _optional_str(raw, key, "config", errors)

    return ValidationReport(valid=not errors, errors=errors)
