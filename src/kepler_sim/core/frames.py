from __future__ import annotations

import math
from typing import Tuple

Vector3 = Tuple[float, float, float]

ZERO_VECTOR: Vector3 = (0.0, 0.0, 0.0)
X_AXIS: Vector3 = (1.0, 0.0, 0.0)
Z_AXIS: Vector3 = (0.0, 0.0, 1.0)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0],
    )


def scale(v: Vector3, s: float) -> Vector3:
    return (v[0]*s, v[1]*s, v[2]*s)


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]+b[0], a[1]+b[1], a[2]+b[2])


def norm(a: Vector3) -> float:
    return math.sqrt(dot(a, a))


def is_unit_or_zero(v: Vector3, tol: float = 1e-9) -> bool:
    """True if |v| is 1 (within tol) or v is exactly the zero vector."""
    if v == ZERO_VECTOR:
        return True
    return abs(norm(v) - 1.0) <= tol


def perifocal_basis(focus_direction: Vector3, normal: Vector3 = Z_AXIS) -> Tuple[Vector3, Vector3]:
    """
    Unit vectors (p, q) spanning the orbit plane.

    p points from the primary toward perihelion, which is opposite the second
    focus. A zero focus (circular orbit) has no perihelion, so p falls back to
    the X axis projected into the plane. q = normal x p completes the
    right-handed frame in the direction of motion.
    """
    if focus_direction == ZERO_VECTOR:
        ref = X_AXIS if abs(dot(X_AXIS, normal)) < 0.9 else (0.0, 1.0, 0.0)
    else:
        ref = scale(focus_direction, -1.0)

    # Remove any out-of-plane component
    p = add(ref, scale(normal, -dot(ref, normal)))
    p = scale(p, 1.0 / norm(p))
    q = cross(normal, p)
    return p, q


def perifocal_to_host(r_km: float, theta_rad: float, focus_direction: Vector3,
                      normal: Vector3 = Z_AXIS) -> Vector3:
    """
    Position of a body at true anomaly theta and radius r, in the host frame
    centered on the primary.
    """
    p, q = perifocal_basis(focus_direction, normal)
    return add(scale(p, r_km * math.cos(theta_rad)), scale(q, r_km * math.sin(theta_rad)))
