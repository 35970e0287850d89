from flowgen.themes.theme_template import (
    ORIENTATION_OPTIONS,
    PRESET_THEMES,
    ThemeConfig,
    generate_theme_prompt,
    orientation_direction,
    validate_theme_config,
)
from flowgen.themes.apply import ThemedDiagram, apply_theme, strip_code_fences

__all__ = [
    "ORIENTATION_OPTIONS",
    "PRESET_THEMES",
    "ThemeConfig",
    "ThemedDiagram",
    "apply_theme",
    "generate_theme_prompt",
    "orientation_direction",
    "strip_code_fences",
    "validate_theme_config",
]
