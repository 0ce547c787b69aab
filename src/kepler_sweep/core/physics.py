"""Vector and two-body helpers for the orbit simulation."""
from __future__ import annotations

import math

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


def angle_between(a: np.ndarray, b: np.ndarray) -> float:
    """Signed angle from ``a`` to ``b`` in ``(-pi, pi]``."""

    cross = float(a[0] * b[1] - a[1] * b[0])
    dot = float(a[0] * b[0] + a[1] * b[1])
    return math.atan2(cross, dot)


def gravity_accel(r: np.ndarray, mu: float) -> np.ndarray:
    """Inverse-square acceleration towards the origin.

    There is deliberately no softening: a position at the origin yields a
    non-finite result.
    """

    rmag2 = float(r[0] * r[0] + r[1] * r[1])
    return -mu * (r / math.sqrt(rmag2)) / rmag2


def specific_angular_momentum(r: np.ndarray, v: np.ndarray) -> float:
    """z-component of ``r x v``."""

    return float(r[0] * v[1] - r[1] * v[0])


def energy_specific(r: np.ndarray, v: np.ndarray, mu: float = PHYSICS_CFG.mu) -> float:
    """Specific orbital energy for position ``r`` and velocity ``v``."""

    rmag = float(np.linalg.norm(r))
    vmag2 = float(v[0] * v[0] + v[1] * v[1])
    return 0.5 * vmag2 - mu / rmag


def eccentricity(r: np.ndarray, v: np.ndarray, mu: float = PHYSICS_CFG.mu) -> float:
    """Return the orbital eccentricity for state ``(r, v)``."""

    r3 = np.array([r[0], r[1], 0.0])
    v3 = np.array([v[0], v[1], 0.0])
    h = np.cross(r3, v3)
    e_vec = np.cross(v3, h) / mu - r3 / np.linalg.norm(r3)
    return float(np.linalg.norm(e_vec[:2]))


def launch_velocity(
    speed_input: float,
    angle_deg: float,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> np.ndarray:
    """Convert launch control values into a physical velocity vector.

    The control speed is divided by ``cfg.velocity_input_scale``; the angle
    is measured counter-clockwise on screen, where y grows downwards.
    """

    speed = float(speed_input) / cfg.velocity_input_scale
    angle = math.radians(float(angle_deg))
    return np.array([speed * math.cos(angle), -speed * math.sin(angle)], dtype=float)


__all__ = [
    "angle_between",
    "clamp",
    "eccentricity",
    "energy_specific",
    "gravity_accel",
    "launch_velocity",
    "specific_angular_momentum",
]
