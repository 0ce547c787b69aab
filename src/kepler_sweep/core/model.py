"""Data models for the orbit and sweep state."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np


@dataclass
class PhysicalState:
    """Planet position and velocity in normalised units."""

    position: np.ndarray = field(
        default_factory=lambda: np.zeros(2, dtype=float)
    )
    velocity: np.ndarray = field(
        default_factory=lambda: np.zeros(2, dtype=float)
    )


class OrbitMode(enum.Enum):
    LIVE = "live"
    REPLAY = "replay"


@dataclass
class Orbit:
    """Everything the tracker knows about the current launch.

    ``first_orbit_path`` grows by one point per tick while ``mode`` is
    ``LIVE`` and is frozen once the orbit closes. ``replay_index`` and
    ``replay_subindex`` form a fractional pointer into that path.
    """

    state: PhysicalState
    mode: OrbitMode = OrbitMode.LIVE
    first_orbit_path: list[np.ndarray] = field(default_factory=list)
    angular_accumulator: float = 0.0
    replay_index: int = 0
    replay_subindex: float = 0.0
    index_carry_over: float = 0.0
    ticks: int = 0
    closure_tick: int | None = None

    @classmethod
    def launch(cls, position: np.ndarray, velocity: np.ndarray) -> "Orbit":
        state = PhysicalState(
            position=np.array(position, dtype=float),
            velocity=np.array(velocity, dtype=float),
        )
        return cls(state=state, first_orbit_path=[state.position.copy()])

    @property
    def is_live(self) -> bool:
        return self.mode is OrbitMode.LIVE


@dataclass
class Sweep:
    """Positions sampled from the planet between sweep start and end."""

    start_tick: int
    points: list[np.ndarray] = field(default_factory=list)
    end_tick: int | None = None

    @property
    def closed(self) -> bool:
        return self.end_tick is not None

    def append(self, point: np.ndarray) -> None:
        if self.closed:
            raise ValueError("cannot append to a closed sweep")
        self.points.append(np.array(point, dtype=float))

    def close(self, tick: int) -> None:
        if self.end_tick is None:
            self.end_tick = tick


__all__ = ["Orbit", "OrbitMode", "PhysicalState", "Sweep"]
