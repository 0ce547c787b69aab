from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def _clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


@dataclass
class CameraState:
    center: np.ndarray
    zoom: float
    zoom_target: float


class Camera:
    """Maps simulation coordinates (AU) to screen pixels.

    Screen y grows downwards and so does simulation y: the planet starts at
    ``(0, -1)``, one AU straight above the sun.
    """

    def __init__(
        self,
        size: tuple[int, int],
        au_pixels: float,
        *,
        zoom: float = 1.0,
        min_zoom: float,
        max_zoom: float,
    ) -> None:
        self._size = size
        self._au_pixels = au_pixels
        self._min_zoom = min_zoom
        self._max_zoom = max_zoom
        zoom = _clamp(zoom, min_zoom, max_zoom)
        self._state = CameraState(
            center=np.array([0.0, 0.0], dtype=float),
            zoom=zoom,
            zoom_target=zoom,
        )
        self._pan_anchor: tuple[int, int] | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self._size

    def update_size(self, size: tuple[int, int]) -> None:
        self._size = size

    @property
    def zoom(self) -> float:
        return self._state.zoom

    @property
    def zoom_target(self) -> float:
        return self._state.zoom_target

    @property
    def pixels_per_au(self) -> float:
        return self._au_pixels * self._state.zoom

    @property
    def center(self) -> np.ndarray:
        return self._state.center

    def set_zoom(self, zoom: float) -> None:
        clamped = _clamp(zoom, self._min_zoom, self._max_zoom)
        self._state.zoom = clamped
        self._state.zoom_target = clamped

    def zoom_by_factor(self, factor: float) -> None:
        self._state.zoom_target = _clamp(
            self._state.zoom_target * factor, self._min_zoom, self._max_zoom
        )

    def update(self, smoothing: float = 0.2) -> None:
        state = self._state
        state.zoom += (state.zoom_target - state.zoom) * smoothing
        state.zoom = _clamp(state.zoom, self._min_zoom, self._max_zoom)

    def recenter(self) -> None:
        self._state.center[:] = 0.0

    def begin_pan(self, position: tuple[int, int]) -> None:
        self._pan_anchor = position

    def pan(self, position: tuple[int, int]) -> None:
        if self._pan_anchor is None:
            return
        dx = position[0] - self._pan_anchor[0]
        dy = position[1] - self._pan_anchor[1]
        if dx == 0 and dy == 0:
            return
        scale = max(self.pixels_per_au, 1e-9)
        self._state.center[0] -= dx / scale
        self._state.center[1] -= dy / scale
        self._pan_anchor = position

    def end_pan(self) -> None:
        self._pan_anchor = None

    @property
    def is_panning(self) -> bool:
        return self._pan_anchor is not None

    def world_to_screen(self, x: float, y: float) -> tuple[int, int]:
        width, height = self._size
        cx, cy = self._state.center
        scale = self.pixels_per_au
        sx = width // 2 + int(round((x - cx) * scale))
        sy = height // 2 + int(round((y - cy) * scale))
        return sx, sy

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        width, height = self._size
        cx, cy = self._state.center
        scale = max(self.pixels_per_au, 1e-9)
        x = (sx - width / 2.0) / scale + cx
        y = (sy - height / 2.0) / scale + cy
        return x, y

    def points_to_screen(self, points) -> list[tuple[int, int]]:
        return [self.world_to_screen(float(p[0]), float(p[1])) for p in points]
