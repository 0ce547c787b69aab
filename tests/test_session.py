import csv
import json
import math

import numpy as np
import pytest

from kepler_sweep.core.config import PHYSICS_CFG, PhysicsCfg
from kepler_sweep.core.logging_utils import RunLogger
from kepler_sweep.core.model import OrbitMode
from kepler_sweep.core.session import SimSession
from kepler_sweep.core.sweep import time_steps_per_day


def test_start_orbit_launches_from_controls(fast_cfg):
    session = SimSession(fast_cfg)
    assert not session.is_orbiting
    session.start_orbit(25, 30)
    assert session.is_orbiting
    assert session.tracker.mode is OrbitMode.LIVE
    np.testing.assert_array_equal(session.tracker.current_position(), [0.0, -1.0])
    session.step()
    assert session.ticks == 1


def test_step_does_nothing_before_launch(fast_cfg):
    session = SimSession(fast_cfg)
    session.step()
    assert session.ticks == 0


def test_sweep_requires_an_orbit(fast_cfg):
    session = SimSession(fast_cfg)
    assert session.start_sweep() is None
    assert session.sweeps == []


def test_sweep_collects_one_point_per_tick(fast_cfg):
    session = SimSession(fast_cfg)
    session.start_orbit(25, 30)
    sweep = session.start_sweep()
    for _ in range(10):
        session.step()
    assert session.end_sweep() is sweep
    assert sweep.closed
    assert len(sweep.points) == 11
    np.testing.assert_array_equal(sweep.points[-1], session.tracker.current_position())
    summary = session.sweep_summaries()[0]
    assert summary.area > 0.0
    assert summary.days == pytest.approx(10 / time_steps_per_day(fast_cfg.dt))
    assert summary.closed


def test_toggle_sweep(fast_cfg):
    session = SimSession(fast_cfg)
    session.start_orbit(25, 30)
    session.toggle_sweep()
    assert session.is_sweeping
    session.toggle_sweep()
    assert not session.is_sweeping
    assert len(session.sweeps) == 1


def test_oldest_sweeps_are_dropped_past_the_limit(fast_cfg):
    session = SimSession(fast_cfg)
    session.start_orbit(25, 30)
    first = None
    for idx in range(fast_cfg.sweep_max + 2):
        sweep = session.start_sweep()
        if idx == 0:
            first = sweep
        session.step()
        session.end_sweep()
    assert len(session.sweeps) == fast_cfg.sweep_max
    assert first not in session.sweeps


def test_clear_sweeps(fast_cfg):
    session = SimSession(fast_cfg)
    session.start_orbit(25, 30)
    session.start_sweep()
    session.step()
    session.clear_sweeps()
    assert session.sweeps == []
    assert not session.is_sweeping
    session.step()
    assert session.sweeps == []


def test_end_orbit_clears_sweeps_and_stops_ticking(fast_cfg):
    session = SimSession(fast_cfg)
    session.start_orbit(25, 30)
    session.start_sweep()
    session.step()
    session.end_orbit()
    assert not session.is_orbiting
    assert not session.is_sweeping
    assert session.sweeps == []
    ticks = session.ticks
    session.step()
    assert session.ticks == ticks


def test_new_orbit_discards_previous_one(fast_cfg):
    session = SimSession(fast_cfg)
    session.start_orbit(25, 30)
    session.start_sweep()
    for _ in range(5):
        session.step()
    session.start_orbit(30, 0)
    assert session.ticks == 0
    assert session.sweeps == []
    assert not session.is_sweeping
    np.testing.assert_allclose(session.tracker.velocity, [1.0, 0.0])


def test_circular_orbit_sweeps_equal_areas_in_equal_times():
    session = SimSession(PHYSICS_CFG)
    session.start_orbit(30, 0)
    for _ in range(2):
        session.start_sweep()
        for _ in range(20):
            session.step()
        session.end_sweep()
        for _ in range(15):
            session.step()
    first, second = session.sweep_summaries()
    assert first.area == pytest.approx(second.area, rel=1e-5)
    assert first.rate == pytest.approx(second.rate, rel=1e-5)


def test_session_writes_run_folder(tmp_path, fast_cfg):
    session = SimSession(fast_cfg, logger_factory=lambda: RunLogger(tmp_path, "demo"))
    session.start_orbit(30, 0)
    session.start_sweep()
    for _ in range(10):
        session.step()
    session.end_sweep()
    for _ in range(1000):
        session.step()
        if session.tracker.mode is OrbitMode.REPLAY:
            break
    session.end_orbit()
    session.close()

    run_dir = tmp_path / "demo"
    meta = json.loads((run_dir / "meta.json").read_text(encoding="utf-8"))
    assert meta["speed_input"] == 30
    assert meta["subdivisions"] == fast_cfg.subdivisions

    with (run_dir / "events.csv").open(newline="") as fh:
        events = list(csv.DictReader(fh))
    types = [row["type"] for row in events]
    assert types == ["launch", "sweep_start", "sweep_end", "closure", "orbit_end"]
    sweep_end = json.loads(events[2]["details"])
    assert sweep_end["points"] == 11
    closure = json.loads(events[3]["details"])
    assert closure["path_length"] == session.tracker.closure_tick + 1

    with (run_dir / "timeseries.csv").open(newline="") as fh:
        rows = list(csv.DictReader(fh))
    assert rows[0]["tick"] == "0"
    assert {row["mode"] for row in rows} == {"live", "replay"}


def test_each_launch_gets_its_own_run(tmp_path, fast_cfg):
    session = SimSession(fast_cfg, logger_factory=lambda: RunLogger(tmp_path, "demo"))
    session.start_orbit(25, 30)
    first = session.logger
    session.start_orbit(30, 0)
    assert first.closed
    assert session.logger.run_dir.name == "demo_1"
    session.close()
    assert session.logger is None


def test_custom_sweep_limit():
    cfg = PhysicsCfg(subdivisions=2, iterations=2, sweep_max=2)
    session = SimSession(cfg)
    session.start_orbit(25, 30)
    for _ in range(4):
        session.start_sweep()
        session.step()
        session.end_sweep()
    assert len(session.sweeps) == 2


def test_summaries_use_the_configured_year_length():
    cfg = PhysicsCfg(subdivisions=2, iterations=2, days_per_year=360.0)
    session = SimSession(cfg)
    session.start_orbit(25, 30)
    session.start_sweep()
    for _ in range(10):
        session.step()
    session.end_sweep()
    summary = session.sweep_summaries()[0]
    assert summary.days == pytest.approx(10 / time_steps_per_day(cfg.dt, 360.0))
    assert summary.days == pytest.approx(10 * 360.0 * cfg.dt / (2 * math.pi))
