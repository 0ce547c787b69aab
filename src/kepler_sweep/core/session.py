"""Session state driven by the control buttons: launching, sweeping, clearing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg
from .logging_utils import RunLogger
from .model import Orbit, Sweep
from .physics import energy_specific, launch_velocity, specific_angular_momentum
from .sweep import area_rate, elapsed_days_for_path, swept_area_in_au2
from .tracker import OrbitTracker

CODE_VERSION = "v1.0"


@dataclass(frozen=True)
class SweepSummary:
    area: float
    days: float
    rate: float
    closed: bool


class SimSession:
    """One planet, its tracker and the user's sweeps.

    ``logger_factory`` is called on every launch; the previous run logger is
    closed first so each launch gets its own run folder.
    """

    def __init__(
        self,
        cfg: PhysicsCfg = PHYSICS_CFG,
        *,
        logger_factory: Callable[[], RunLogger] | None = None,
    ) -> None:
        self.cfg = cfg
        self.tracker = OrbitTracker(cfg)
        self.tracker.add_listener(self._on_tracker_event)
        self.sweeps: list[Sweep] = []
        self.is_orbiting = False
        self.is_sweeping = False
        self.speed_input = cfg.default_speed_input
        self.angle_deg = cfg.default_angle_deg
        self._logger_factory = logger_factory
        self.logger: RunLogger | None = None
        self._log_counter = 0

    @property
    def ticks(self) -> int:
        return self.tracker.ticks

    @property
    def active_sweep(self) -> Sweep | None:
        if self.is_sweeping and self.sweeps:
            return self.sweeps[-1]
        return None

    def start_orbit(self, speed_input: float | None = None, angle_deg: float | None = None) -> None:
        if speed_input is not None:
            self.speed_input = float(speed_input)
        if angle_deg is not None:
            self.angle_deg = float(angle_deg)

        self._open_logger()
        self.sweeps.clear()
        self.is_sweeping = False
        self.is_orbiting = True
        self.tracker.reset(launch_velocity(self.speed_input, self.angle_deg, self.cfg))

    def end_orbit(self) -> None:
        if not self.is_orbiting:
            return
        self.end_sweep()
        self.sweeps.clear()
        self.is_orbiting = False
        self._log_event("orbit_end", {"ticks": self.ticks})
        if self.logger is not None:
            self.logger.flush()

    def start_sweep(self) -> Sweep | None:
        if not self.is_orbiting:
            return None
        if self.is_sweeping:
            return self.sweeps[-1]
        sweep = Sweep(start_tick=self.ticks)
        sweep.append(self.tracker.current_position())
        self.sweeps.append(sweep)
        while len(self.sweeps) > self.cfg.sweep_max:
            self.sweeps.pop(0)
        self.is_sweeping = True
        self._log_event("sweep_start", {"index": len(self.sweeps) - 1})
        return sweep

    def end_sweep(self) -> Sweep | None:
        sweep = self.active_sweep
        if sweep is None:
            return None
        sweep.close(self.ticks)
        self.is_sweeping = False
        summary = self.summarize(sweep)
        self._log_event(
            "sweep_end",
            {
                "area": summary.area,
                "days": summary.days,
                "rate": summary.rate,
                "points": len(sweep.points),
            },
        )
        return sweep

    def toggle_sweep(self) -> None:
        if self.is_sweeping:
            self.end_sweep()
        else:
            self.start_sweep()

    def clear_sweeps(self) -> None:
        if self.is_sweeping:
            self.sweeps[-1].close(self.ticks)
        self.is_sweeping = False
        count = len(self.sweeps)
        self.sweeps.clear()
        self._log_event("sweeps_cleared", {"count": count})

    def step(self) -> None:
        """Advance one frame: tick the orbit and extend the open sweep."""

        if not self.is_orbiting:
            return
        self.tracker.tick()
        sweep = self.active_sweep
        if sweep is not None:
            sweep.append(self.tracker.current_position())

        self._log_counter += 1
        if self._log_counter >= self.cfg.log_every_ticks:
            self._log_state()

    def summarize(self, sweep: Sweep) -> SweepSummary:
        dt = self.cfg.dt
        days_per_year = self.cfg.days_per_year
        return SweepSummary(
            area=swept_area_in_au2(sweep.points),
            days=elapsed_days_for_path(sweep.points, dt, days_per_year),
            rate=area_rate(sweep.points, dt, days_per_year),
            closed=sweep.closed,
        )

    def sweep_summaries(self) -> list[SweepSummary]:
        return [self.summarize(sweep) for sweep in self.sweeps]

    def close(self) -> None:
        if self.logger is not None:
            self.logger.close()
            self.logger = None

    def _open_logger(self) -> None:
        self.close()
        if self._logger_factory is None:
            return
        self.logger = self._logger_factory()
        velocity = launch_velocity(self.speed_input, self.angle_deg, self.cfg)
        self.logger.write_meta(
            {
                "speed_input": self.speed_input,
                "angle_deg": self.angle_deg,
                "R0": self.cfg.start_position.tolist(),
                "V0": velocity.tolist(),
                "G": self.cfg.gravitational_constant,
                "M": self.cfg.central_mass,
                "mu": self.cfg.mu,
                "integrator": "iterative_midpoint",
                "dt": self.cfg.dt,
                "iterations": self.cfg.iterations,
                "subdivisions": self.cfg.subdivisions,
                "log_every_ticks": self.cfg.log_every_ticks,
                "code_version": CODE_VERSION,
            }
        )
        self._log_counter = 0

    def _on_tracker_event(self, event: str, orbit: Orbit) -> None:
        if event == "closure":
            self._log_event(
                "closure",
                {
                    "angle_acc": orbit.angular_accumulator,
                    "index_carry_over": orbit.index_carry_over,
                    "path_length": len(orbit.first_orbit_path),
                },
            )
        elif event == "launch":
            self._log_event(
                "launch",
                {
                    "vx": float(orbit.state.velocity[0]),
                    "vy": float(orbit.state.velocity[1]),
                },
            )

    def _log_event(self, event_type: str, details: dict) -> None:
        if self.logger is None:
            return
        self.logger.log_event(self.ticks, event_type, self.tracker.current_position(), details)
        self._log_state()

    def _log_state(self) -> None:
        self._log_counter = 0
        if self.logger is None:
            return
        orbit = self.tracker.orbit
        r = orbit.state.position
        v = orbit.state.velocity
        self.logger.log_ts(
            [
                orbit.ticks,
                orbit.ticks * self.cfg.dt,
                float(r[0]),
                float(r[1]),
                float(v[0]),
                float(v[1]),
                float(np.linalg.norm(r)),
                energy_specific(r, v, self.cfg.mu),
                specific_angular_momentum(r, v),
                orbit.mode.value,
                orbit.angular_accumulator,
            ]
        )


__all__ = ["CODE_VERSION", "SimSession", "SweepSummary"]
