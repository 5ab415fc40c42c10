"""3D vector helpers operating on plain ``(x, y, z)`` tuples.

Conventions: y is up, yaw is measured around the y axis with
``yaw = atan2(x, z)`` so that yaw 0 faces +z.
"""
from __future__ import annotations

import math

from lunar_colony.types import Vec3

UP: Vec3 = (0.0, 1.0, 0.0)
ZERO: Vec3 = (0.0, 0.0, 0.0)


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(v: Vec3, s: float) -> Vec3:
    return (v[0] * s, v[1] * s, v[2] * s)


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(v: Vec3) -> float:
    return math.sqrt(dot(v, v))


def normalize(v: Vec3) -> Vec3:
    mag = length(v)
    if mag == 0.0:
        return v
    return scale(v, 1.0 / mag)


def distance(a: Vec3, b: Vec3) -> float:
    return length(sub(a, b))


def horizontal(v: Vec3) -> Vec3:
    """Project onto the ground plane (drop the y component)."""
    return (v[0], 0.0, v[2])


def horizontal_distance(a: Vec3, b: Vec3) -> float:
    return length(horizontal(sub(a, b)))


def lerp(a: Vec3, b: Vec3, t: float) -> Vec3:
    return (
        a[0] + (b[0] - a[0]) * t,
        a[1] + (b[1] - a[1]) * t,
        a[2] + (b[2] - a[2]) * t,
    )


def with_y(v: Vec3, y: float) -> Vec3:
    return (v[0], y, v[2])


def is_degenerate(v: Vec3 | None) -> bool:
    """True for missing, non-finite or exactly-origin points.

    Navigation queries report failure this way instead of raising.
    """
    if v is None:
        return True
    if not all(math.isfinite(c) for c in v):
        return True
    return v == ZERO


def yaw_of(direction: Vec3) -> float:
    return math.atan2(direction[0], direction[2])


def forward_of(yaw: float) -> Vec3:
    return (math.sin(yaw), 0.0, math.cos(yaw))


def right_of(yaw: float) -> Vec3:
    return (math.cos(yaw), 0.0, -math.sin(yaw))


def slerp_yaw(current: float, target: float, t: float) -> float:
    """Rotate *current* toward *target* by fraction *t* along the shortest arc."""
    delta = (target - current + math.pi) % (2.0 * math.pi) - math.pi
    result = current + delta * t
    return (result + math.pi) % (2.0 * math.pi) - math.pi
