"""Legacy wall straightening: per-wall angle snapping plus corner merging.

Unlike the orthogonal reconstruction this never rotates the layout: a
wall is snapped only when it is already within a few degrees of an axis,
so intentionally angled walls keep their direction.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from packages.core.types import Wall
from packages.floorplan.context import MIN_WALL_LENGTH, ReconstructionContext
from packages.floorplan.merge import merge_endpoints
from packages.floorplan.orthogonal import DEFAULT_MERGE_DISTANCE, angle_diff

logger = logging.getLogger(__name__)

DEFAULT_ANGLE_TOLERANCE = 5.0  # degrees

_SNAP_ANGLES = (0.0, np.pi / 2, np.pi, -np.pi / 2, -np.pi)


def _snap_angle(angle: float, tolerance: float) -> Optional[float]:
    """Return the axis angle within *tolerance* (radians) of *angle*, if any."""
    return next((a for a in _SNAP_ANGLES if angle_diff(angle, a) < tolerance), None)


def straighten_walls(
    walls: list[Wall],
    angle_tolerance: float = DEFAULT_ANGLE_TOLERANCE,
    merge_distance: float = DEFAULT_MERGE_DISTANCE,
) -> ReconstructionContext:
    """Snap nearly axis-aligned walls onto the axis, then merge corners.

    Each snapped wall is rebuilt from its midpoint and half-length at the
    exact axis angle.  Walls shorter than 1 cm or further than
    *angle_tolerance* degrees from every axis are left as they are.
    """
    ctx = ReconstructionContext.from_walls(walls)
    if ctx.wall_count == 0:
        return ctx

    tol = np.radians(angle_tolerance)
    vec = ctx.vectors()
    lengths = ctx.lengths()
    mids = ctx.midpoints()

    snapped = 0
    for i in range(ctx.wall_count):
        if lengths[i] < MIN_WALL_LENGTH:
            continue
        target = _snap_angle(float(np.arctan2(vec[i, 1], vec[i, 0])), tol)
        if target is None:
            continue
        half = np.array([np.cos(target), np.sin(target)]) * lengths[i] / 2.0
        ctx.points[2 * i] = np.round(mids[i] - half)
        ctx.points[2 * i + 1] = np.round(mids[i] + half)
        snapped += 1

    logger.info("📐 Straightened %d / %d walls (tolerance %.1f°)", snapped, ctx.wall_count, angle_tolerance)

    merge_endpoints(ctx.points, merge_distance)
    ctx.commit()
    return ctx
