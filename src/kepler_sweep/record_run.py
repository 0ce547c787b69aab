"""Run a launch headlessly, taking sweeps on a fixed schedule, and record it."""
from __future__ import annotations

import argparse
from pathlib import Path

from kepler_sweep.core.config import PHYSICS_CFG
from kepler_sweep.core.logging_utils import RunLogger
from kepler_sweep.core.model import OrbitMode
from kepler_sweep.core.physics import eccentricity, launch_velocity
from kepler_sweep.core.session import SimSession
from kepler_sweep.data.launches import PRESET_DISPLAY_ORDER, get_preset


def run_recording(
    session: SimSession,
    speed_input: float,
    angle_deg: float,
    *,
    ticks: int,
    sweep_every: int,
    sweep_length: int,
) -> SimSession:
    """Launch and step ``session`` for ``ticks`` frames.

    A sweep starts every ``sweep_every`` ticks and lasts ``sweep_length``
    ticks, so equal sweeps are directly comparable.
    """

    if ticks < 0:
        raise ValueError("ticks must not be negative")
    if sweep_every > 0 and not 0 < sweep_length <= sweep_every:
        raise ValueError("sweep_length must be in (0, sweep_every]")

    session.start_orbit(speed_input, angle_deg)
    for tick in range(ticks):
        if sweep_every > 0:
            phase = tick % sweep_every
            if phase == 0:
                # A sweep as long as the period ends where the next one starts.
                session.end_sweep()
                session.start_sweep()
            elif phase == sweep_length:
                session.end_sweep()
        session.step()
    session.end_sweep()
    return session


def print_summary(session: SimSession, run_dir: Path | None) -> None:
    tracker = session.tracker
    if run_dir is not None:
        print(f"Run: {run_dir}")
    velocity = launch_velocity(session.speed_input, session.angle_deg, session.cfg)
    e = eccentricity(session.cfg.start_position, velocity, session.cfg.mu)
    print(f" Launch: speed {session.speed_input:g}, angle {session.angle_deg:g} deg, e = {e:.3f}")
    print(f" Ticks: {tracker.ticks}")
    if tracker.mode is OrbitMode.REPLAY:
        orbit = tracker.orbit
        print(
            f" Closed at tick {orbit.closure_tick}"
            f" (path {len(orbit.first_orbit_path)} points, carry-over {orbit.index_carry_over:.4f})"
        )
    else:
        print(" Orbit did not close")
    for idx, summary in enumerate(session.sweep_summaries()):
        print(
            f" Sweep {idx + 1}: area {summary.area:.6f} AU^2,"
            f" {summary.days:.2f} d, rate {summary.rate:.6e} AU^2/d"
        )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Record a headless orbit run with sweeps.")
    parser.add_argument("--preset", choices=PRESET_DISPLAY_ORDER, help="Launch preset")
    parser.add_argument("--speed", type=float, default=None, help="Launch speed (control units)")
    parser.add_argument("--angle", type=float, default=None, help="Launch angle in degrees")
    parser.add_argument("--ticks", type=int, default=1500, help="Frames to simulate")
    parser.add_argument("--sweep-every", type=int, default=150, help="Ticks between sweep starts (0 disables)")
    parser.add_argument("--sweep-length", type=int, default=40, help="Ticks per sweep")
    parser.add_argument("--runs-dir", type=Path, default=Path("data") / "runs")
    parser.add_argument("--run-id", default=None)
    args = parser.parse_args(argv)

    speed = PHYSICS_CFG.default_speed_input
    angle = PHYSICS_CFG.default_angle_deg
    if args.preset:
        preset = get_preset(args.preset)
        speed, angle = preset.speed_input, preset.angle_deg
    if args.speed is not None:
        speed = args.speed
    if args.angle is not None:
        angle = args.angle

    loggers: list[RunLogger] = []

    def make_logger() -> RunLogger:
        logger = RunLogger(args.runs_dir, args.run_id)
        loggers.append(logger)
        return logger

    session = SimSession(PHYSICS_CFG, logger_factory=make_logger)
    try:
        run_recording(
            session,
            speed,
            angle,
            ticks=args.ticks,
            sweep_every=args.sweep_every,
            sweep_length=args.sweep_length,
        )
    except ValueError as exc:
        session.close()
        parser.error(str(exc))
    session.close()
    print_summary(session, loggers[-1].run_dir if loggers else None)


if __name__ == "__main__":
    main()
