"""Launch presets expressed in the same units as the speed/angle controls."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LaunchPreset:
    key: str
    name: str
    speed_input: float
    angle_deg: float
    description: str


PRESET_DEFINITIONS: tuple[LaunchPreset, ...] = (
    LaunchPreset(
        key="default",
        name="Ellipse",
        speed_input=25.0,
        angle_deg=30.0,
        description="Moderately eccentric orbit (e ~ 0.57), the classic sweep demo.",
    ),
    LaunchPreset(
        key="circular",
        name="Circular",
        speed_input=30.0,
        angle_deg=0.0,
        description="1 AU circular orbit; every sweep of equal length has equal area.",
    ),
    LaunchPreset(
        key="eccentric",
        name="Eccentric",
        speed_input=38.0,
        angle_deg=0.0,
        description="Launched at perihelion, swings far out (e ~ 0.6).",
    ),
    LaunchPreset(
        key="escape",
        name="Escape",
        speed_input=45.0,
        angle_deg=20.0,
        description="Above escape speed; the path never closes.",
    ),
    LaunchPreset(
        key="radial",
        name="Radial",
        speed_input=15.0,
        angle_deg=90.0,
        description="Straight away from the sun; falls back through the centre.",
    ),
)

PRESETS: dict[str, LaunchPreset] = {preset.key: preset for preset in PRESET_DEFINITIONS}
PRESET_DISPLAY_ORDER: list[str] = [preset.key for preset in PRESET_DEFINITIONS]


def get_preset(key: str) -> LaunchPreset:
    try:
        return PRESETS[key]
    except KeyError:
        raise ValueError(f"unknown launch preset: {key!r}") from None


__all__ = [
    "PRESET_DEFINITIONS",
    "PRESET_DISPLAY_ORDER",
    "PRESETS",
    "LaunchPreset",
    "get_preset",
]
