import pygame
import pytest

from kepler_sweep.core.config import PHYSICS_CFG, RENDER_CFG
from kepler_sweep.core.physics import launch_velocity
from kepler_sweep.data.launches import PRESET_DISPLAY_ORDER, get_preset
from kepler_sweep.render import (
    Button,
    Camera,
    clear_text_cache,
    downsample_points,
    draw_planet,
    draw_sweep,
)


@pytest.fixture(scope="module", autouse=True)
def pygame_display():
    pygame.init()
    pygame.display.set_mode((1, 1))
    yield
    clear_text_cache()
    pygame.quit()


def make_camera(size=(400, 400)) -> Camera:
    return Camera(size, 150, min_zoom=0.25, max_zoom=4.0)


class TestCamera:
    def test_origin_is_screen_centre(self):
        assert make_camera().world_to_screen(0.0, 0.0) == (200, 200)

    def test_start_position_is_above_the_sun(self):
        sx, sy = make_camera().world_to_screen(*PHYSICS_CFG.start_position)
        assert sx == 200
        assert sy == 50

    def test_screen_to_world_inverts(self):
        camera = make_camera()
        camera.set_zoom(2.0)
        x, y = camera.screen_to_world(*camera.world_to_screen(0.3, -0.4))
        assert x == pytest.approx(0.3, abs=1 / camera.pixels_per_au)
        assert y == pytest.approx(-0.4, abs=1 / camera.pixels_per_au)

    def test_zoom_is_clamped(self):
        camera = make_camera()
        camera.set_zoom(100.0)
        assert camera.zoom == 4.0
        camera.zoom_by_factor(1e-6)
        assert camera.zoom_target == 0.25

    def test_update_moves_towards_target(self):
        camera = make_camera()
        camera.zoom_by_factor(2.0)
        camera.update(0.5)
        assert camera.zoom == pytest.approx(1.5)

    def test_pan_moves_centre_against_drag(self):
        camera = make_camera()
        camera.begin_pan((100, 100))
        camera.pan((130, 100))
        assert camera.is_panning
        assert camera.center[0] == pytest.approx(-30 / 150)
        camera.end_pan()
        camera.pan((0, 0))
        assert camera.center[0] == pytest.approx(-30 / 150)
        camera.recenter()
        assert camera.world_to_screen(0.0, 0.0) == (200, 200)


def test_downsample_keeps_last_point():
    points = [(float(i), 0.0) for i in range(1000)]
    sampled = downsample_points(points, 100)
    assert len(sampled) <= 101
    assert sampled[0] == points[0]
    assert sampled[-1] is points[-1]
    assert downsample_points(points[:10], 100) == points[:10]


def test_draw_sweep_fills_the_fan():
    surface = pygame.Surface((400, 400))
    surface.fill((0, 0, 0))
    camera = make_camera()
    points = [(1.0, 0.0), (0.0, 1.0)]
    draw_sweep(surface, camera, points, (255, 0, 0), render_cfg=RENDER_CFG)
    inside = surface.get_at(camera.world_to_screen(0.4, 0.4))
    outside = surface.get_at(camera.world_to_screen(-0.4, -0.4))
    assert inside.r > 0
    assert tuple(outside)[:3] == (0, 0, 0)


def test_draw_sweep_ignores_single_point():
    surface = pygame.Surface((50, 50))
    surface.fill((0, 0, 0))
    draw_sweep(surface, make_camera((50, 50)), [(0.1, 0.1)], (255, 0, 0), render_cfg=RENDER_CFG)
    assert tuple(surface.get_at((25, 25)))[:3] == (0, 0, 0)


def test_draw_planet_skips_non_finite_positions():
    surface = pygame.Surface((50, 50))
    surface.fill((0, 0, 0))
    draw_planet(surface, make_camera((50, 50)), (float("nan"), 0.0), render_cfg=RENDER_CFG)
    assert tuple(surface.get_at((25, 25)))[:3] == (0, 0, 0)


class TestButton:
    def click(self, pos):
        return pygame.event.Event(pygame.MOUSEBUTTONDOWN, {"button": 1, "pos": pos})

    def test_click_inside_runs_callback(self):
        calls = []
        button = Button((10, 10, 100, 30), "Start", lambda: calls.append(1))
        assert button.handle_event(self.click((20, 20)))
        assert not button.handle_event(self.click((200, 200)))
        assert calls == [1]

    def test_disabled_button_ignores_clicks(self):
        calls = []
        enabled = [False]
        button = Button(
            (10, 10, 100, 30),
            "Start sweep",
            lambda: calls.append(1),
            enabled_getter=lambda: enabled[0],
        )
        assert not button.handle_event(self.click((20, 20)))
        enabled[0] = True
        assert button.handle_event(self.click((20, 20)))
        assert calls == [1]

    def test_text_getter_overrides_label(self):
        state = {"sweeping": False}
        button = Button(
            (0, 0, 10, 10),
            "Sweep",
            lambda: None,
            lambda: "End sweep" if state["sweeping"] else "Start sweep",
        )
        assert button.get_text() == "Start sweep"
        state["sweeping"] = True
        assert button.get_text() == "End sweep"


def test_presets():
    assert PRESET_DISPLAY_ORDER[0] == "default"
    default = get_preset("default")
    assert (default.speed_input, default.angle_deg) == (
        PHYSICS_CFG.default_speed_input,
        PHYSICS_CFG.default_angle_deg,
    )
    circular = get_preset("circular")
    assert launch_velocity(circular.speed_input, circular.angle_deg, PHYSICS_CFG) == pytest.approx([1.0, 0.0])
    with pytest.raises(ValueError):
        get_preset("hyperbolic")
