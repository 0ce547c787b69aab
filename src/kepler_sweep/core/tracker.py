"""Orbit tracker: live integration of the first orbit, then path replay.

A launch starts in ``OrbitMode.LIVE``. Every tick integrates the planet,
records its position and adds the angle swept since the previous point.
Once the accumulated angle passes a full turn the orbit is considered
closed and the tracker switches to ``OrbitMode.REPLAY``: from then on the
planet is placed by interpolating along the recorded path, so no further
integration happens for the lifetime of the launch.

The recorded path rarely spans exactly one period. The angular overshoot at
closure is converted to a fractional index (using the first step's angular
size as the unit) and added to the replay phase on every wrap, which keeps
the replayed planet from drifting out of step with the live one.
"""
from __future__ import annotations

import math
from typing import Callable

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg
from .integrator import advance_subdivided
from .model import Orbit, OrbitMode
from .physics import angle_between

FULL_TURN = 2.0 * math.pi

TrackerListener = Callable[[str, Orbit], None]


class OrbitTracker:
    """Owns the current :class:`Orbit` and advances it one tick at a time."""

    def __init__(
        self,
        cfg: PhysicsCfg = PHYSICS_CFG,
        launch_velocity: np.ndarray | None = None,
    ) -> None:
        self._cfg = cfg
        self._listeners: list[TrackerListener] = []
        if launch_velocity is None:
            launch_velocity = np.zeros(2, dtype=float)
        self._orbit = Orbit.launch(cfg.start_position, launch_velocity)

    @property
    def orbit(self) -> Orbit:
        return self._orbit

    @property
    def mode(self) -> OrbitMode:
        return self._orbit.mode

    @property
    def angular_accumulator(self) -> float:
        return self._orbit.angular_accumulator

    @property
    def closure_tick(self) -> int | None:
        return self._orbit.closure_tick

    @property
    def ticks(self) -> int:
        return self._orbit.ticks

    @property
    def velocity(self) -> np.ndarray:
        return self._orbit.state.velocity.copy()

    def add_listener(self, listener: TrackerListener) -> None:
        self._listeners.append(listener)

    def reset(self, launch_velocity: np.ndarray) -> None:
        """Discard the current orbit and launch a new one from the start position."""

        self._orbit = Orbit.launch(self._cfg.start_position, launch_velocity)
        self._notify("launch")

    def current_position(self) -> np.ndarray:
        return self._orbit.state.position.copy()

    def path_snapshot(self) -> tuple[np.ndarray, ...]:
        return tuple(point.copy() for point in self._orbit.first_orbit_path)

    def tick(self, mu: float | None = None, dt: float | None = None) -> None:
        """Advance the orbit by one frame."""

        mu = self._cfg.mu if mu is None else mu
        dt = self._cfg.dt if dt is None else dt
        if dt < 0.0:
            raise ValueError("dt must not be negative")

        orbit = self._orbit
        orbit.ticks += 1
        if orbit.mode is OrbitMode.LIVE:
            self._tick_live(orbit, mu, dt)
        else:
            self._tick_replay(orbit)

    def _tick_live(self, orbit: Orbit, mu: float, dt: float) -> None:
        orbit.state = advance_subdivided(
            orbit.state,
            mu,
            dt,
            self._cfg.subdivisions,
            self._cfg.iterations,
        )
        path = orbit.first_orbit_path
        previous = path[-1]
        path.append(orbit.state.position.copy())
        orbit.angular_accumulator += abs(angle_between(previous, path[-1]))

        if orbit.angular_accumulator > FULL_TURN:
            self._close(orbit)

    def _close(self, orbit: Orbit) -> None:
        path = orbit.first_orbit_path
        angle_carry_over = orbit.angular_accumulator - FULL_TURN
        first_step_angle = abs(angle_between(path[0], path[1]))
        if first_step_angle > 0.0:
            orbit.index_carry_over = angle_carry_over / first_step_angle
        else:
            orbit.index_carry_over = 0.0

        orbit.mode = OrbitMode.REPLAY
        orbit.closure_tick = orbit.ticks
        orbit.replay_index = 0
        orbit.replay_subindex = 0.0
        self._apply_carry_over(orbit)
        self._notify("closure")

    def _tick_replay(self, orbit: Orbit) -> None:
        n = len(orbit.first_orbit_path)
        orbit.replay_index += 1
        if orbit.replay_index >= n:
            orbit.replay_index = 0
            self._apply_carry_over(orbit)
        orbit.state.position = interpolate_position(
            orbit.first_orbit_path,
            orbit.replay_index,
            orbit.replay_subindex,
        )

    @staticmethod
    def _apply_carry_over(orbit: Orbit) -> None:
        # Whole index units move into replay_index so the subindex stays in [0, 1).
        subindex = orbit.replay_subindex + orbit.index_carry_over
        whole = math.floor(subindex)
        orbit.replay_subindex = subindex - whole
        orbit.replay_index = (orbit.replay_index + int(whole)) % len(orbit.first_orbit_path)

    def _notify(self, event: str) -> None:
        for listener in self._listeners:
            listener(event, self._orbit)


def interpolate_position(
    path: list[np.ndarray],
    index: int,
    subindex: float,
) -> np.ndarray:
    """Point ``subindex`` of the way from ``path[index]`` to the next point.

    The segment after the last point leads back to ``path[0]``.
    """

    start = path[index]
    end = path[(index + 1) % len(path)]
    return (1.0 - subindex) * start + subindex * end


__all__ = ["FULL_TURN", "OrbitTracker", "interpolate_position"]
