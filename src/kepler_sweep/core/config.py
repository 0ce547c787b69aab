"""Configuration dataclasses for the orbit sweep simulation."""
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class PhysicsCfg:
    # Normalised units: GM of the sun and the 1 AU reference distance are both 1.
    gravitational_constant: float = 1.0
    central_mass: float = 1.0
    start_position: np.ndarray = field(
        default_factory=lambda: np.array([0.0, -1.0], dtype=float)
    )
    dt: float = 1.1e-2
    iterations: int = 5
    subdivisions: int = 25
    velocity_input_scale: float = 30.0
    default_speed_input: float = 25.0
    default_angle_deg: float = 30.0
    sweep_max: int = 5
    log_every_ticks: int = 10
    days_per_year: float = 365.0

    @property
    def mu(self) -> float:
        return self.gravitational_constant * self.central_mass


@dataclass(frozen=True)
class RenderCfg:
    width: int = 1100
    height: int = 800
    windowed_default_size: tuple[int, int] = (1100, 800)
    frame_rate: int = 60
    default_au_pixels: float = 150.0
    min_zoom: float = 0.2
    max_zoom: float = 5.0
    zoom_step: float = 1.1
    background_color: tuple[int, int, int] = (0, 0, 0)
    sun_color: tuple[int, int, int] = (255, 255, 0)
    sun_pixel_size: int = 40
    planet_color: tuple[int, int, int] = (0, 0, 255)
    planet_pixel_size: int = 20
    orbit_color: tuple[int, int, int] = (255, 255, 0)
    orbit_line_width: int = 1
    max_rendered_orbit_points: int = 800
    reference_circle_color: tuple[int, int, int, int] = (200, 208, 220, 90)
    sweep_colors: tuple[tuple[int, int, int], ...] = (
        (255, 99, 71),
        (46, 209, 195),
        (148, 216, 45),
        (151, 117, 250),
        (255, 169, 77),
    )
    sweep_fill_alpha: int = 110
    hud_text_color: tuple[int, int, int] = (234, 241, 255)
    hud_muted_color: tuple[int, int, int] = (180, 198, 228)
    label_background_color: tuple[int, int, int, int] = (12, 18, 30, int(255 * 0.6))
    button_color: tuple[int, int, int, int] = (8, 32, 64, int(255 * 0.78))
    button_hover_color: tuple[int, int, int, int] = (18, 52, 94, int(255 * 0.88))
    button_active_color: tuple[int, int, int, int] = (120, 40, 40, int(255 * 0.88))
    button_text_color: tuple[int, int, int] = (234, 241, 255)
    button_border_color: tuple[int, int, int, int] = (88, 140, 255, int(255 * 0.55))
    button_radius: int = 12
    speed_input_range: tuple[float, float] = (0.0, 60.0)
    angle_input_range: tuple[float, float] = (-180.0, 180.0)


PHYSICS_CFG = PhysicsCfg()
RENDER_CFG = RenderCfg()


__all__ = ["PHYSICS_CFG", "RENDER_CFG", "PhysicsCfg", "RenderCfg"]
