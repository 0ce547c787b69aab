"""Rendering helpers for the orbit sweep visualizer."""

from .camera import Camera
from .assets import (
    clear_text_cache,
    get_text_surface,
    load_font,
)
from .draw import (
    downsample_points,
    draw_orbit_line,
    draw_planet,
    draw_reference_circle,
    draw_sun,
    draw_sweep,
    draw_sweep_label,
)
from .ui import (
    Button,
    ButtonVisualStyle,
    build_text_panel,
)

__all__ = [
    "Button",
    "ButtonVisualStyle",
    "Camera",
    "build_text_panel",
    "clear_text_cache",
    "downsample_points",
    "draw_orbit_line",
    "draw_planet",
    "draw_reference_circle",
    "draw_sun",
    "draw_sweep",
    "draw_sweep_label",
    "get_text_surface",
    "load_font",
]
