"""Decode capture transforms and map the scan frame onto the plan frame.

Captures use a Y-up frame in metres with column-major 4×4 transforms.
The plan is 2D in centimetres: capture X → plan X, capture Z → plan Y.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from packages.core.types import Point, Vec3

METRES_TO_CM = 100.0


def transform_matrix(t: Sequence[float]) -> np.ndarray:
    """Return the 4×4 matrix for a flattened column-major transform."""
    return np.asarray(t, dtype=np.float64).reshape(4, 4).T


def get_position(t: Sequence[float]) -> Vec3:
    """Translation column of the transform."""
    m = transform_matrix(t)
    return Vec3(x=float(m[0, 3]), y=float(m[1, 3]), z=float(m[2, 3]))


def get_y_rotation(t: Sequence[float]) -> float:
    """Rotation about the vertical (Y) axis, in radians."""
    m = transform_matrix(t)
    return float(np.arctan2(m[0, 2], m[0, 0]))


def get_wall_direction(t: Sequence[float]) -> tuple[float, float]:
    """The record's local X axis projected onto the ground plane (X, Z)."""
    m = transform_matrix(t)
    return float(m[0, 0]), float(m[2, 0])


def to_plan_point(x: float, z: float) -> Point:
    """Convert capture metres on the XZ ground plane to plan centimetres."""
    return Point(x=x * METRES_TO_CM, y=z * METRES_TO_CM)


def to_centimetres(metres: float) -> int:
    return int(round(metres * METRES_TO_CM))
