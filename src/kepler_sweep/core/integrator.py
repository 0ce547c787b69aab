"""Fixed-step iterative midpoint integrator for a single planet."""
from __future__ import annotations

from .model import PhysicalState
from .physics import gravity_accel


def advance(
    state: PhysicalState,
    mu: float,
    dt: float,
    iterations: int,
) -> PhysicalState:
    """Advance ``state`` by one step of size ``dt``.

    The acceleration is evaluated at a running estimate of the mean position
    over the step, and the estimate is refined a fixed number of times:

        a      = accel(x_mean)
        v_next = v + a * dt
        x_next = x + (v + v_next) / 2 * dt
        x_mean = (x + x_next) / 2

    There is no convergence check; ``iterations`` is a tuning constant.
    """

    if iterations < 1:
        raise ValueError("iterations must be at least 1")

    v_curr = state.velocity
    x_curr = state.position
    x_mean = x_curr.copy()

    for _ in range(iterations):
        a = gravity_accel(x_mean, mu)
        v_next = v_curr + a * dt
        v_mean = (v_curr + v_next) / 2.0
        x_next = x_curr + v_mean * dt
        x_mean = (x_curr + x_next) / 2.0

    return PhysicalState(position=x_next, velocity=v_next)


def advance_subdivided(
    state: PhysicalState,
    mu: float,
    dt: float,
    subdivisions: int,
    iterations: int,
) -> PhysicalState:
    """Split one tick of length ``dt`` into ``subdivisions`` equal steps."""

    if subdivisions < 1:
        raise ValueError("subdivisions must be at least 1")

    sub_dt = dt / subdivisions
    for _ in range(subdivisions):
        state = advance(state, mu, sub_dt, iterations)
    return state


__all__ = ["advance", "advance_subdivided"]
