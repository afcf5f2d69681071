"""
Template Config Data Structures

Typed, read-only view of a validated <templateId>.config.json. Built once by
the config store and shared between renders.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Features:
    """Capability flags gating customization operations."""

    supports_color_schemes: bool = False
    supports_fonts: bool = False
    supports_section_toggle: bool = False
    supports_custom_colors: bool = False

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "Features":
        raw = raw or {}
        return cls(
            supports_color_schemes=raw.get("supportsColorSchemes", False),
            supports_fonts=raw.get("supportsFonts", False),
            supports_section_toggle=raw.get("supportsSectionToggle", False),
            supports_custom_colors=raw.get("supportsCustomColors", False),
        )

    def to_dict(self) -> Dict[str, bool]:
        return {
            "supportsColorSchemes": self.supports_color_schemes,
            "supportsFonts": self.supports_fonts,
            "supportsSectionToggle": self.supports_section_toggle,
            "supportsCustomColors": self.supports_custom_colors,
        }


@dataclass(frozen=True)
class ColorScheme:
    label: str
    command: str
    type: str = "predefined"

    @classmethod
    def from_raw(cls, name: str, raw: Any) -> "ColorScheme":
        if isinstance(raw, str):
            return cls(label=name, command=raw)
        return cls(
            label=raw.get("label", name),
            command=raw.get("command", ""),
            type=raw.get("type", "predefined"),
        )


@dataclass(frozen=True)
class FontSpec:
    label: str
    packages: Tuple[str, ...] = ()
    commands: str = ""

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "FontSpec":
        return cls(
            label=raw["label"],
            packages=tuple(raw.get("packages", [])),
            commands=raw.get("commands", ""),
        )


@dataclass(frozen=True)
class SectionSpec:
    """
    A toggleable region of a template.

    Removal uses pattern when present, otherwise start/end markers, otherwise
    the start marker up to the next section-start command.
    """

    label: str
    pattern: Optional[str] = None
    start_marker: Optional[str] = None
    end_marker: Optional[str] = None
    removable: bool = False

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "SectionSpec":
        return cls(
            label=raw["label"],
            pattern=raw.get("pattern"),
            start_marker=raw.get("startMarker"),
            end_marker=raw.get("endMarker"),
            removable=raw.get("removable", False),
        )


@dataclass(frozen=True)
class PlaceholderSpec:
    label: str
    type: str = "text"
    default: str = ""

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "PlaceholderSpec":
        return cls(
            label=raw["label"],
            type=raw.get("type", "text"),
            default=raw.get("default", ""),
        )


@dataclass(frozen=True)
class TemplateConfig:
    """
    Validated template configuration.

    Attributes:
        template_id: Unique id, equal to the config file's name stem
        version: Config version string
        name: Display name (also used for family dispatch)
        main_file: Main .tex file inside the template's store directory
        description: Optional description for listings
        features: Capability flags
        color_schemes / fonts / sections / placeholders: Named option tables
        engine: Explicit TeX engine, or None to use the family default
        template_dir: Store directory name (defaults to template_id)
        raw: Original parsed JSON, kept for diagnostics
    """

    template_id: str
    version: str
    name: str
    main_file: str
    description: str = ""
    features: Features = field(default_factory=Features)
    color_schemes: Mapping[str, ColorScheme] = field(default_factory=dict)
    fonts: Mapping[str, FontSpec] = field(default_factory=dict)
    sections: Mapping[str, SectionSpec] = field(default_factory=dict)
    placeholders: Mapping[str, PlaceholderSpec] = field(default_factory=dict)
    engine: Optional[str] = None
    template_dir: Optional[str] = None
    preamble_insert_point: Optional[str] = None
    document_insert_point: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TemplateConfig":
        """Build from a config dict that has already passed validation."""
        metadata = raw["metadata"]
        return cls(
            template_id=raw["templateId"],
            version=raw["version"],
            name=metadata["name"],
            main_file=metadata["mainFile"],
            description=metadata.get("description", ""),
            features=Features.from_dict(raw.get("features")),
            color_schemes=MappingProxyType(
                {k: ColorScheme.from_raw(k, v) for k, v in raw.get("colorSchemes", {}).items()}
            ),
            fonts=MappingProxyType(
                {k: FontSpec.from_raw(v) for k, v in raw.get("fonts", {}).items()}
            ),
            sections=MappingProxyType(
                {k: SectionSpec.from_raw(v) for k, v in raw.get("sections", {}).items()}
            ),
            placeholders=MappingProxyType(
                {k: PlaceholderSpec.from_raw(v) for k, v in raw.get("placeholders", {}).items()}
            ),
            engine=raw.get("engine"),
            template_dir=metadata.get("directory"),
            preamble_insert_point=raw.get("preambleInsertPoint"),
            document_insert_point=raw.get("documentInsertPoint"),
            raw=MappingProxyType(raw),
        )

    @property
    def store_dir_name(self) -> str:
        return self.template_dir or self.template_id

    def summary(self) -> Dict[str, Any]:
        """Listing entry used by get_available_templates()."""
        return {
            "templateId": self.template_id,
            "name": self.name,
            "description": self.description,
            "mainFile": self.main_file,
            "features": self.features.to_dict(),
            "version": self.version,
            "engine": self.engine,
        }
