from __future__ import annotations

import math
from typing import Sequence, TYPE_CHECKING

import pygame

from .assets import Color, get_text_surface
from .camera import Camera

if TYPE_CHECKING:  # pragma: no cover
    from kepler_sweep.core.config import RenderCfg


def draw_sun(
    surface: pygame.Surface,
    camera: Camera,
    *,
    render_cfg: RenderCfg,
) -> None:
    radius = max(1, int(render_cfg.sun_pixel_size * camera.zoom / 2))
    pygame.draw.circle(surface, render_cfg.sun_color, camera.world_to_screen(0.0, 0.0), radius)


def draw_planet(
    surface: pygame.Surface,
    camera: Camera,
    position: Sequence[float],
    *,
    render_cfg: RenderCfg,
) -> None:
    if not all(math.isfinite(float(c)) for c in position):
        return
    radius = max(1, int(render_cfg.planet_pixel_size * camera.zoom / 2))
    center = camera.world_to_screen(float(position[0]), float(position[1]))
    pygame.draw.circle(surface, render_cfg.planet_color, center, radius)


def draw_reference_circle(
    surface: pygame.Surface,
    camera: Camera,
    *,
    render_cfg: RenderCfg,
    radius_au: float = 1.0,
) -> None:
    radius_px = int(radius_au * camera.pixels_per_au)
    if radius_px <= 0:
        return
    width, height = surface.get_size()
    overlay = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.circle(
        overlay,
        render_cfg.reference_circle_color,
        camera.world_to_screen(0.0, 0.0),
        radius_px,
        1,
    )
    surface.blit(overlay, (0, 0))


def draw_orbit_line(
    surface: pygame.Surface,
    color: Color,
    points: Sequence[tuple[int, int]],
    width: int,
) -> None:
    if len(points) < 2:
        return
    if width <= 1:
        pygame.draw.aalines(surface, color, False, points)
    else:
        pygame.draw.lines(surface, color, False, points, width)
        pygame.draw.aalines(surface, color, False, points)


def draw_sweep(
    surface: pygame.Surface,
    camera: Camera,
    points: Sequence[Sequence[float]],
    color: tuple[int, int, int],
    *,
    render_cfg: RenderCfg,
) -> None:
    """Fill the fan between the sun and a sweep path."""

    if len(points) < 2:
        return
    sun = camera.world_to_screen(0.0, 0.0)
    screen_points = camera.points_to_screen(
        downsample_points(points, render_cfg.max_rendered_orbit_points)
    )
    width, height = surface.get_size()
    overlay = pygame.Surface((width, height), pygame.SRCALPHA)
    pygame.draw.polygon(overlay, (*color, render_cfg.sweep_fill_alpha), [sun, *screen_points])
    surface.blit(overlay, (0, 0))
    pygame.draw.line(surface, color, sun, screen_points[0], 1)
    pygame.draw.line(surface, color, sun, screen_points[-1], 1)


def draw_sweep_label(
    surface: pygame.Surface,
    camera: Camera,
    points: Sequence[Sequence[float]],
    text: str,
    font: pygame.font.Font,
    color: tuple[int, int, int],
) -> None:
    if not points:
        return
    mid = points[len(points) // 2]
    # Place the label just outside the path, on the far side from the sun.
    x, y = float(mid[0]), float(mid[1])
    r = math.hypot(x, y)
    if r > 0.0:
        x, y = x * (1.0 + 0.15 / r), y * (1.0 + 0.15 / r)
    label = get_text_surface(font, text, color)
    rect = label.get_rect(center=camera.world_to_screen(x, y))
    surface.blit(label, rect)


def downsample_points(
    points: Sequence[Sequence[float]], max_points: int
) -> list[Sequence[float]]:
    if len(points) <= max_points:
        return list(points)
    step = max(1, math.ceil(len(points) / max_points))
    sampled = list(points[::step])
    if sampled[-1] is not points[-1]:
        sampled.append(points[-1])
    return sampled
