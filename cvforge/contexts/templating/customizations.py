"""User customization choices for one render request."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional


def _pick(raw: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in raw:
        return raw[camel]
    return raw.get(snake, default)


@dataclass(frozen=True)
class Customizations:
    """
    Request-scoped customization choices.

    Attributes:
        color_scheme: Name of a configured color scheme
        font: Name of a configured font
        enabled_sections: Section id -> visible flag (only False has an effect)
        edited_content: Placeholder name -> replacement text
        custom_colors: Color name -> hex value (#RRGGBB or RRGGBB)
    """

    color_scheme: Optional[str] = None
    font: Optional[str] = None
    enabled_sections: Mapping[str, bool] = field(default_factory=dict)
    edited_content: Mapping[str, str] = field(default_factory=dict)
    custom_colors: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Optional[Mapping[str, Any]]) -> "Customizations":
        """Build from a request dict using either camelCase or snake_case keys."""
        if not raw:
            return cls()
        return cls(
            color_scheme=_pick(raw, "colorScheme", "color_scheme"),
            font=_pick(raw, "font", "font"),
            enabled_sections=MappingProxyType(
                dict(_pick(raw, "enabledSections", "enabled_sections", {}) or {})
            ),
            edited_content=MappingProxyType(
                dict(_pick(raw, "editedContent", "edited_content", {}) or {})
            ),
            custom_colors=MappingProxyType(
                dict(_pick(raw, "customColors", "custom_colors", {}) or {})
            ),
        )

    def is_empty(self) -> bool:
        return not (
            self.color_scheme
            or self.font
            or self.enabled_sections
            or self.edited_content
            or self.custom_colors
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "colorScheme": self.color_scheme,
            "font": self.font,
            "enabledSections": dict(self.enabled_sections),
            "editedContent": dict(self.edited_content),
            "customColors": dict(self.custom_colors),
        }
