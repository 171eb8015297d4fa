"""
Template editor
Holds the style configuration being edited together with the sample invitation
data and preview device, and derives the live preview from them.
"""

from datetime import date
from typing import Any, Dict, Optional
from pydantic import BaseModel
from taklifnoma.core.rendering import render_page
from taklifnoma.modules.templates.presets import find_color_preset
from taklifnoma.modules.templates.schemas import (
    TemplateConfig, InvitationPreviewData, PreviewStyles, ColorScheme
)

DEVICES = ("desktop", "tablet", "mobile")

LAYOUT_CLASSES = {
    "classic": "text-center space-y-6",
    "modern": "text-center space-y-4",
    "elegant": "text-center space-y-8",
    "rustic": "text-left space-y-6",
    "luxury": "text-center space-y-10",
}

DEVICE_CLASSES = {
    "mobile": "max-w-xs scale-75 md:scale-90",
    "tablet": "max-w-sm scale-85 md:scale-95",
    "desktop": "max-w-md lg:max-w-lg",
}

TEXT_SIZES = {
    "mobile": {"title": "text-lg", "subtitle": "text-base", "body": "text-sm", "small": "text-xs"},
    "tablet": {"title": "text-xl md:text-2xl", "subtitle": "text-lg", "body": "text-base", "small": "text-sm"},
    "desktop": {
        "title": "text-2xl md:text-3xl xl:text-4xl",
        "subtitle": "text-lg xl:text-xl",
        "body": "text-base xl:text-lg",
        "small": "text-sm",
    },
}

TEMPLATE_BUILDER_VERSION = "TemplateBuilder v3.0"


def _resolve_field(model: BaseModel, key: str) -> str:
    """Map a field name or its alias to the field name; ValueError if unknown."""
    for name, field in type(model).model_fields.items():
        if key == name or key == field.alias:
            return name
    raise ValueError(f"Unknown setting '{key}' for {type(model).__name__}")


def _replace(model: BaseModel, key: str, value: Any) -> BaseModel:
    data = model.model_dump()
    data[_resolve_field(model, key)] = value
    # ValidationError subclasses ValueError, so range violations surface as ValueError
    return type(model).model_validate(data)


def compute_preview_styles(config: TemplateConfig, device: str = "desktop") -> PreviewStyles:
    colors = config.colors
    fonts = config.fonts
    layout = config.layout
    animations = config.animations

    transition = f"all {animations.duration}s ease-in-out" if animations.enabled else "none"
    container = {
        "background-color": colors.background,
        "color": colors.text,
        "font-family": fonts.body,
        "padding": f"{layout.padding}px",
        "border-radius": f"{layout.border_radius}px",
        "box-shadow": f"0 {layout.shadow_intensity}px {layout.shadow_intensity * 2}px rgba(0,0,0,0.1)",
        "border": f"2px solid {colors.accent}20",
        "transition": transition,
        "transform": "scale(1.02)" if animations.enabled and animations.type == "scale" else "scale(1)",
    }
    heading = {"font-family": fonts.heading, "color": colors.primary, "transition": transition}
    accent = {"font-family": fonts.accent, "color": colors.accent, "transition": transition}

    return PreviewStyles(
        container=container,
        heading=heading,
        accent=accent,
        layout_class=LAYOUT_CLASSES.get(layout.style, "text-center space-y-6"),
        device_class=DEVICE_CLASSES.get(device, "max-w-md"),
        text_sizes=TEXT_SIZES.get(device, TEXT_SIZES["desktop"]),
    )


def render_invitation(
    config: TemplateConfig,
    data: Any,
    device: str = "desktop",
    **extra,
) -> str:
    """Render invitation HTML; ``data`` may be a model or a mapping with the same keys."""
    return render_page(
        "invitation.html",
        styles=compute_preview_styles(config, device),
        colors=config.colors,
        animation=config.animations.type if config.animations.enabled else "none",
        data=data,
        **extra,
    )


class TemplateEditor:
    def __init__(
        self,
        config: Optional[TemplateConfig] = None,
        data: Optional[InvitationPreviewData] = None,
        device: str = "desktop",
    ):
        self.config = config or TemplateConfig()
        self.data = data or InvitationPreviewData()
        self.device = "desktop"
        self.set_device(device)

    def _set_section(self, section: str, key: str, value: Any) -> TemplateConfig:
        updated = _replace(getattr(self.config, section), key, value)
        self.config = self.config.model_copy(update={section: updated})
        return self.config

    def set_color(self, key: str, value: str) -> TemplateConfig:
        return self._set_section("colors", key, value)

    def set_font(self, key: str, value: str) -> TemplateConfig:
        return self._set_section("fonts", key, value)

    def set_layout(self, key: str, value: Any) -> TemplateConfig:
        return self._set_section("layout", key, value)

    def set_animation(self, key: str, value: Any) -> TemplateConfig:
        return self._set_section("animations", key, value)

    def set_data(self, key: str, value: str) -> InvitationPreviewData:
        self.data = _replace(self.data, key, value)
        return self.data

    def set_device(self, device: str) -> None:
        if device not in DEVICES:
            raise ValueError(f"Unknown preview device '{device}'")
        self.device = device

    def apply_change(self, section: str, key: str, value: Any) -> None:
        setters = {
            "colors": self.set_color,
            "fonts": self.set_font,
            "layout": self.set_layout,
            "animations": self.set_animation,
            "data": self.set_data,
        }
        if section not in setters:
            raise ValueError(f"Unknown section '{section}'")
        setters[section](key, value)

    def apply_color_preset(self, name: str) -> TemplateConfig:
        preset = find_color_preset(name)
        if preset is None:
            raise ValueError(f"Unknown color preset '{name}'")
        self.config = self.config.model_copy(update={"colors": ColorScheme(**preset["colors"])})
        return self.config

    def reset_to_defaults(self) -> TemplateConfig:
        """Reset the style configuration; the sample invitation data is kept."""
        self.config = TemplateConfig()
        return self.config

    def preview_styles(self) -> PreviewStyles:
        return compute_preview_styles(self.config, self.device)

    def render(self) -> str:
        return render_invitation(self.config, self.data, self.device)

    def validate_for_save(self) -> None:
        if not self.data.template_name.strip():
            raise ValueError("Template name is required")

    def build_record(self, user_id: str, today: Optional[date] = None) -> Dict[str, Any]:
        """Row written to custom_templates for the current editor state."""
        today = today or date.today()
        config = self.config.to_dict()
        return {
            "user_id": user_id,
            "name": self.data.template_name.strip(),
            "description": f"Custom template - {today.isoformat()}",
            "category": "custom",
            "config": config,
            "colors": config["colors"],
            "fonts": config["fonts"],
            "layout": config["layout"],
            "is_public": False,
            "is_featured": False,
            "tags": [self.config.layout.style, "custom", "real-time"],
            "metadata": {
                "created_with": TEMPLATE_BUILDER_VERSION,
                "responsive": True,
                "real_time_preview": True,
            },
        }
