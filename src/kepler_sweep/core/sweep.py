"""Area and elapsed-time measurements over recorded sweep paths."""
from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .config import PHYSICS_CFG


def _triangle_area(a: float, b: float, c: float) -> float:
    """Heron's formula; near-collinear round-off below zero is clamped."""

    s = 0.5 * (a + b + c)
    product = s * (s - a) * (s - b) * (s - c)
    return math.sqrt(max(product, 0.0))


def swept_area_in_au2(path: Sequence[np.ndarray]) -> float:
    """Area swept by the radius vector along ``path``, in AU^2.

    Each consecutive pair of points forms a triangle with the sun at the
    origin.
    """

    area = 0.0
    for p, q in zip(path[:-1], path[1:]):
        a = math.hypot(float(p[0]), float(p[1]))
        b = math.hypot(float(q[0]), float(q[1]))
        c = math.hypot(float(q[0] - p[0]), float(q[1] - p[1]))
        area += _triangle_area(a, b, c)
    return area


def time_steps_per_day(
    dt: float = PHYSICS_CFG.dt,
    days_per_year: float = PHYSICS_CFG.days_per_year,
) -> float:
    # One year is 2*pi time units when GM = 1 AU^3 / unit^2.
    return (2.0 * math.pi / dt) / days_per_year


def elapsed_days_for_path(
    path: Sequence[np.ndarray],
    dt: float = PHYSICS_CFG.dt,
    days_per_year: float = PHYSICS_CFG.days_per_year,
) -> float:
    if len(path) < 2:
        return 0.0
    return (len(path) - 1) / time_steps_per_day(dt, days_per_year)


def area_rate(
    path: Sequence[np.ndarray],
    dt: float = PHYSICS_CFG.dt,
    days_per_year: float = PHYSICS_CFG.days_per_year,
) -> float:
    """Swept area per day; zero when no time has elapsed."""

    days = elapsed_days_for_path(path, dt, days_per_year)
    if days <= 0.0:
        return 0.0
    return swept_area_in_au2(path) / days


__all__ = [
    "area_rate",
    "elapsed_days_for_path",
    "swept_area_in_au2",
    "time_steps_per_day",
]
