"""
Template builder catalogues
Color presets, font choices, layout styles and animation types offered by the editor.
"""

from typing import Any, Dict, List, Optional

COLOR_PRESETS: List[Dict[str, Any]] = [
    {
        "name": "TaklifNoma Primary",
        "emoji": "💎",
        "description": "Professional and modern",
        "colors": {
            "primary": "hsl(220, 91%, 56%)",
            "secondary": "hsl(220, 14%, 96%)",
            "accent": "hsl(220, 91%, 66%)",
            "background": "hsl(0, 0%, 100%)",
            "text": "hsl(224, 71%, 4%)",
        },
    },
    {
        "name": "Romantic Pink",
        "emoji": "🌸",
        "description": "Soft and romantic",
        "colors": {
            "primary": "#be185d",
            "secondary": "#fda4af",
            "accent": "#fb7185",
            "background": "#fdf2f8",
            "text": "#881337",
        },
    },
    {
        "name": "Modern Blue",
        "emoji": "💙",
        "description": "Calm and trustworthy",
        "colors": {
            "primary": "#2563eb",
            "secondary": "#60a5fa",
            "accent": "#3b82f6",
            "background": "#eff6ff",
            "text": "#1e3a8a",
        },
    },
    {
        "name": "Gilded Gold",
        "emoji": "✨",
        "description": "Luxurious and grand",
        "colors": {
            "primary": "#d97706",
            "secondary": "#fbbf24",
            "accent": "#f59e0b",
            "background": "#fffbeb",
            "text": "#92400e",
        },
    },
    {
        "name": "Nature Green",
        "emoji": "🌿",
        "description": "Natural and fresh",
        "colors": {
            "primary": "#059669",
            "secondary": "#34d399",
            "accent": "#10b981",
            "background": "#ecfdf5",
            "text": "#064e3b",
        },
    },
    {
        "name": "Royal Purple",
        "emoji": "💜",
        "description": "Rare and striking",
        "colors": {
            "primary": "#7c3aed",
            "secondary": "#a78bfa",
            "accent": "#8b5cf6",
            "background": "#f5f3ff",
            "text": "#581c87",
        },
    },
    {
        "name": "Classic Black",
        "emoji": "🖤",
        "description": "Formal and elegant",
        "colors": {
            "primary": "#1f2937",
            "secondary": "#6b7280",
            "accent": "#d97706",
            "background": "#ffffff",
            "text": "#111827",
        },
    },
]

FONT_OPTIONS: List[Dict[str, str]] = [
    {"value": "Inter", "label": "Inter (Modern)"},
    {"value": "Poppins", "label": "Poppins (Rounded)"},
    {"value": "Playfair Display", "label": "Playfair Display (Classic)"},
    {"value": "Dancing Script", "label": "Dancing Script (Handwritten)"},
    {"value": "Montserrat", "label": "Montserrat (Crisp)"},
    {"value": "Lora", "label": "Lora (Readable)"},
    {"value": "Open Sans", "label": "Open Sans (Plain)"},
    {"value": "Roboto", "label": "Roboto (Technical)"},
    {"value": "Merriweather", "label": "Merriweather (Editorial)"},
    {"value": "Crimson Text", "label": "Crimson Text (Academic)"},
    {"value": "Great Vibes", "label": "Great Vibes (Graceful)"},
    {"value": "Libre Baskerville", "label": "Libre Baskerville (Classic)"},
]

LAYOUT_STYLES: List[Dict[str, str]] = [
    {"value": "classic", "label": "Classic", "description": "Traditional and formal", "icon": "📜"},
    {"value": "modern", "label": "Modern", "description": "Minimal and simple", "icon": "✨"},
    {"value": "elegant", "label": "Elegant", "description": "Refined and polished", "icon": "💎"},
    {"value": "rustic", "label": "Rustic", "description": "Natural and warm", "icon": "🌿"},
    {"value": "luxury", "label": "Luxury", "description": "Lavish and unique", "icon": "👑"},
]

ANIMATION_TYPES: List[Dict[str, str]] = [
    {"value": "fade", "label": "Fade"},
    {"value": "slide", "label": "Slide"},
    {"value": "scale", "label": "Scale"},
    {"value": "bounce", "label": "Bounce"},
]


def find_color_preset(name: str) -> Optional[Dict[str, Any]]:
    wanted = name.strip().lower()
    for preset in COLOR_PRESETS:
        if preset["name"].lower() == wanted:
            return preset
    return None
