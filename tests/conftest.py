import os

import numpy as np
import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from kepler_sweep.core.config import PHYSICS_CFG, PhysicsCfg
from kepler_sweep.core.model import OrbitMode
from kepler_sweep.core.physics import launch_velocity
from kepler_sweep.core.tracker import OrbitTracker


# The default launch closes after a few hundred ticks; keep well clear of that.
MAX_TICKS_TO_CLOSE = 2000


def drive_to_closure(tracker: OrbitTracker, on_tick=None) -> None:
    """Tick ``tracker`` until it switches to replay."""

    for _ in range(MAX_TICKS_TO_CLOSE):
        tracker.tick()
        if on_tick is not None:
            on_tick(tracker)
        if tracker.mode is OrbitMode.REPLAY:
            return
    raise AssertionError("orbit did not close")


@pytest.fixture
def fast_cfg() -> PhysicsCfg:
    """Coarser integration for tests that only need the session plumbing."""

    return PhysicsCfg(subdivisions=4, iterations=3, log_every_ticks=5)


@pytest.fixture(scope="session")
def closed_run():
    """Track the reference launch (25, 30 deg) until the first orbit closes.

    Returns the tracker plus the accumulator and path length recorded after
    every tick.
    """

    velocity = launch_velocity(25, 30, PHYSICS_CFG)
    tracker = OrbitTracker(PHYSICS_CFG)
    tracker.reset(velocity)
    accumulators = [tracker.angular_accumulator]
    path_lengths = [len(tracker.orbit.first_orbit_path)]
    modes = [tracker.mode]

    def record(t: OrbitTracker) -> None:
        accumulators.append(t.angular_accumulator)
        path_lengths.append(len(t.orbit.first_orbit_path))
        modes.append(t.mode)

    drive_to_closure(tracker, record)
    return {
        "tracker": tracker,
        "velocity": velocity,
        "accumulators": np.array(accumulators),
        "path_lengths": path_lengths,
        "modes": modes,
        "closing_position": tracker.orbit.state.position.copy(),
        "closing_velocity": tracker.orbit.state.velocity.copy(),
    }


@pytest.fixture
def replaying_tracker() -> OrbitTracker:
    """Fresh tracker for the reference launch, ticked up to its closure."""

    tracker = OrbitTracker(PHYSICS_CFG)
    tracker.reset(launch_velocity(25, 30, PHYSICS_CFG))
    drive_to_closure(tracker)
    return tracker
