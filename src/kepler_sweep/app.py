# src/kepler_sweep/app.py
"""Interactive window: launch a planet, watch it orbit and sweep out areas."""
from __future__ import annotations

import json
import math
import os
from pathlib import Path

import pygame

from kepler_sweep.core.config import PHYSICS_CFG, RENDER_CFG
from kepler_sweep.core.logging_utils import RunLogger
from kepler_sweep.core.physics import clamp
from kepler_sweep.core.session import SimSession
from kepler_sweep.core.sweep import time_steps_per_day
from kepler_sweep.data.launches import PRESET_DISPLAY_ORDER, PRESETS
from kepler_sweep.render import (
    Button,
    ButtonVisualStyle,
    Camera,
    build_text_panel,
    downsample_points,
    draw_orbit_line,
    draw_planet,
    draw_reference_circle,
    draw_sun,
    draw_sweep,
    draw_sweep_label,
    load_font,
)

SETTINGS_DIR = Path.home() / ".kepler_sweep"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"
RUNS_DIR = Path("data") / "runs"

BUTTON_WIDTH = 170
BUTTON_HEIGHT = 40
BUTTON_GAP = 10


def load_user_settings() -> dict[str, object]:
    """Return persisted runtime settings if the JSON file is readable."""

    try:
        with SETTINGS_PATH.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def save_user_settings(settings: dict[str, object]) -> None:
    """Persist runtime settings, ignoring filesystem errors."""

    try:
        SETTINGS_DIR.mkdir(parents=True, exist_ok=True)
        with SETTINGS_PATH.open("w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2, sort_keys=True)
    except OSError:
        # The window is closing either way.
        pass


def _float_setting(settings: dict[str, object], key: str, default: float) -> float:
    value = settings.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return float(value)
    return default


def format_sweep_line(index: int, area: float, days: float, rate: float) -> str:
    return f"Sweep {index + 1}: {area:.4f} AU²  {days:6.1f} d  {rate * 1000:.3f} mAU²/d"


def main(record_runs: bool = True) -> None:
    if os.environ.get("KEPLER_SWEEP_NO_RECORD"):
        record_runs = False
    pygame.init()
    pygame.display.set_caption("Kepler sweep - equal areas in equal times")

    user_settings = load_user_settings()
    speed_lo, speed_hi = RENDER_CFG.speed_input_range
    angle_lo, angle_hi = RENDER_CFG.angle_input_range
    speed_input = clamp(
        _float_setting(user_settings, "speed_input", PHYSICS_CFG.default_speed_input),
        speed_lo,
        speed_hi,
    )
    angle_input = clamp(
        _float_setting(user_settings, "angle_deg", PHYSICS_CFG.default_angle_deg),
        angle_lo,
        angle_hi,
    )
    show_reference_circle = bool(user_settings.get("show_reference_circle", False))

    screen = pygame.display.set_mode(RENDER_CFG.windowed_default_size, pygame.RESIZABLE)
    clock = pygame.time.Clock()
    font = load_font(["consolas", "dejavusansmono", "couriernew"], 16)
    button_font = load_font(["consolas", "dejavusansmono", "couriernew"], 15, bold=True)

    camera = Camera(
        screen.get_size(),
        RENDER_CFG.default_au_pixels,
        zoom=_float_setting(user_settings, "zoom", 1.0),
        min_zoom=RENDER_CFG.min_zoom,
        max_zoom=RENDER_CFG.max_zoom,
    )

    logger_factory = (lambda: RunLogger(RUNS_DIR)) if record_runs else None
    session = SimSession(PHYSICS_CFG, logger_factory=logger_factory)
    paused = False
    running = True

    def start_orbit() -> None:
        nonlocal paused
        paused = False
        session.start_orbit(speed_input, angle_input)

    def load_preset(key: str) -> None:
        nonlocal speed_input, angle_input
        preset = PRESETS[key]
        speed_input = preset.speed_input
        angle_input = preset.angle_deg
        start_orbit()

    def sweep_button_text() -> str:
        return "End sweep" if session.is_sweeping else "Start sweep"

    button_style = ButtonVisualStyle(
        base_color=RENDER_CFG.button_color,
        hover_color=RENDER_CFG.button_hover_color,
        text_color=RENDER_CFG.button_text_color,
        radius=RENDER_CFG.button_radius,
        border_color=RENDER_CFG.button_border_color,
        border_width=1,
        active_color=RENDER_CFG.button_active_color,
    )

    def orbiting() -> bool:
        return session.is_orbiting

    button_specs = (
        ("Start new orbit", start_orbit, None, None, None),
        ("Start sweep", session.toggle_sweep, sweep_button_text, orbiting, lambda: session.is_sweeping),
        ("Clear sweeps", session.clear_sweeps, None, lambda: bool(session.sweeps), None),
        ("End orbit", session.end_orbit, None, orbiting, None),
    )
    buttons: list[Button] = []
    for idx, (text, callback, text_getter, enabled_getter, active_getter) in enumerate(button_specs):
        rect = (20, 20 + idx * (BUTTON_HEIGHT + BUTTON_GAP), BUTTON_WIDTH, BUTTON_HEIGHT)
        buttons.append(
            Button(
                rect,
                text,
                callback,
                text_getter,
                style=button_style,
                enabled_getter=enabled_getter,
                active_getter=active_getter,
            )
        )

    preset_keys = {getattr(pygame, f"K_{idx + 1}"): key for idx, key in enumerate(PRESET_DISPLAY_ORDER)}

    def collect_user_settings() -> dict[str, object]:
        return {
            "speed_input": float(speed_input),
            "angle_deg": float(angle_input),
            "zoom": float(camera.zoom_target),
            "show_reference_circle": bool(show_reference_circle),
        }

    def hud_lines() -> list[tuple[str, tuple[int, int, int]]]:
        text_color = RENDER_CFG.hud_text_color
        muted = RENDER_CFG.hud_muted_color
        lines = [
            (f"Speed {speed_input:5.1f}  (left/right)", text_color),
            (f"Angle {angle_input:5.1f}°  (up/down)", text_color),
        ]
        if session.is_orbiting:
            tracker = session.tracker
            mode = "live" if tracker.orbit.is_live else "replay"
            days = session.ticks / time_steps_per_day(PHYSICS_CFG.dt, PHYSICS_CFG.days_per_year)
            lines.append((f"Mode {mode}{'  (paused)' if paused else ''}", text_color))
            lines.append((f"Day {days:7.1f}   turn {math.degrees(tracker.angular_accumulator):6.1f}°", muted))
        else:
            lines.append(("Press Enter or 'Start new orbit'", muted))
        for idx, summary in enumerate(session.sweep_summaries()):
            color = RENDER_CFG.sweep_colors[idx % len(RENDER_CFG.sweep_colors)]
            lines.append((format_sweep_line(idx, summary.area, summary.days, summary.rate), color))
        lines.append((f"Presets 1-{len(PRESET_DISPLAY_ORDER)}  S sweep  C clear  R ring", muted))
        return lines

    start_orbit()

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue
            if event.type == pygame.VIDEORESIZE:
                camera.update_size((event.w, event.h))
                continue
            if any(btn.handle_event(event) for btn in buttons):
                continue
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                    start_orbit()
                elif event.key == pygame.K_RIGHT:
                    speed_input = clamp(speed_input + 1.0, speed_lo, speed_hi)
                elif event.key == pygame.K_LEFT:
                    speed_input = clamp(speed_input - 1.0, speed_lo, speed_hi)
                elif event.key == pygame.K_UP:
                    angle_input = clamp(angle_input + 5.0, angle_lo, angle_hi)
                elif event.key == pygame.K_DOWN:
                    angle_input = clamp(angle_input - 5.0, angle_lo, angle_hi)
                elif event.key == pygame.K_s:
                    session.toggle_sweep()
                elif event.key == pygame.K_c:
                    session.clear_sweeps()
                elif event.key == pygame.K_e:
                    session.end_orbit()
                elif event.key == pygame.K_r:
                    show_reference_circle = not show_reference_circle
                elif event.key == pygame.K_SPACE:
                    paused = not paused
                elif event.key in (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS):
                    camera.zoom_by_factor(RENDER_CFG.zoom_step)
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    camera.zoom_by_factor(1.0 / RENDER_CFG.zoom_step)
                elif event.key == pygame.K_HOME:
                    camera.recenter()
                elif event.key in preset_keys:
                    load_preset(preset_keys[event.key])
            elif event.type == pygame.MOUSEWHEEL and event.y != 0:
                camera.zoom_by_factor(RENDER_CFG.zoom_step ** event.y)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                camera.begin_pan(event.pos)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                camera.end_pan()
            elif event.type == pygame.MOUSEMOTION and camera.is_panning:
                camera.pan(event.pos)

        if not running:
            break

        # --- Physics: one tick per frame ---
        if not paused:
            session.step()
        camera.update()

        # --- Drawing ---
        screen.fill(RENDER_CFG.background_color)
        if show_reference_circle:
            draw_reference_circle(screen, camera, render_cfg=RENDER_CFG)

        for idx, sweep in enumerate(session.sweeps):
            color = RENDER_CFG.sweep_colors[idx % len(RENDER_CFG.sweep_colors)]
            draw_sweep(screen, camera, sweep.points, color, render_cfg=RENDER_CFG)

        if session.is_orbiting:
            path = downsample_points(session.tracker.path_snapshot(), RENDER_CFG.max_rendered_orbit_points)
            draw_orbit_line(
                screen,
                RENDER_CFG.orbit_color,
                camera.points_to_screen(path),
                RENDER_CFG.orbit_line_width,
            )

        draw_sun(screen, camera, render_cfg=RENDER_CFG)
        if session.is_orbiting:
            draw_planet(screen, camera, session.tracker.current_position(), render_cfg=RENDER_CFG)

        for idx, (sweep, summary) in enumerate(zip(session.sweeps, session.sweep_summaries())):
            color = RENDER_CFG.sweep_colors[idx % len(RENDER_CFG.sweep_colors)]
            draw_sweep_label(screen, camera, sweep.points, f"{summary.area:.3f}", font, color)

        mouse_pos = pygame.mouse.get_pos()
        for btn in buttons:
            btn.draw(screen, button_font, mouse_pos)

        panel = build_text_panel(
            font,
            hud_lines(),
            background_color=RENDER_CFG.label_background_color,
        )
        _, height = screen.get_size()
        screen.blit(panel, (20, height - panel.get_height() - 20))

        pygame.display.flip()
        clock.tick(RENDER_CFG.frame_rate)

    save_user_settings(collect_user_settings())
    session.close()
    pygame.quit()


if __name__ == "__main__":
    main()
