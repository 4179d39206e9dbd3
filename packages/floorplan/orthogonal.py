"""Orthogonal reconstruction: turn noisy scanned walls into a rectilinear graph.

The whole layout is first rotated by the dominant wall angle so that
connected corners stay connected.  Corners are then found by clustering
endpoints, solved per axis from the walls that own each axis, and the
result is iterated, snapped and merged until every wall is exactly
horizontal or vertical and every corner is a single point.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from packages.core.types import FurnitureItem, Orientation, Wall
from packages.floorplan.context import ReconstructionContext
from packages.floorplan.merge import cluster_endpoints, merge_endpoints

logger = logging.getLogger(__name__)

DEFAULT_MERGE_DISTANCE = 15.0  # cm
DEFAULT_ITERATIONS = 5
DEFAULT_SNAP_TOLERANCE = 3.0  # cm

_AXES = (0.0, np.pi / 2, np.pi, -np.pi / 2)


def normalize_angle(a: float) -> float:
    """Wrap an angle to ``[-π, π)``."""
    return float((a + np.pi) % (2 * np.pi) - np.pi)


def angle_diff(a: float, b: float) -> float:
    """Smallest absolute difference between two angles."""
    return abs(normalize_angle(a - b))


# ── step 1–2: global rotation ────────────────────────────────────────

def estimate_rotation(ctx: ReconstructionContext) -> float:
    """Return the rotation (radians) that best aligns the walls with the axes.

    Wall angles are multiplied by four so that 0°, 90°, 180° and 270°
    coincide, averaged on the circle weighted by wall length, and divided
    back.  Walls shorter than 1 cm carry no direction and are ignored.
    """
    mask = ctx.valid_mask()
    if not mask.any():
        return 0.0

    vec = ctx.vectors()[mask]
    weights = ctx.lengths()[mask]
    quad = np.arctan2(vec[:, 1], vec[:, 0]) * 4.0
    dominant = float(np.arctan2(
        np.sum(weights * np.sin(quad)),
        np.sum(weights * np.cos(quad)),
    )) / 4.0

    best_axis = min(_AXES, key=lambda a: angle_diff(dominant, a))
    return best_axis - dominant


def apply_rotation(ctx: ReconstructionContext, angle: float) -> None:
    """Rotate all endpoints and furniture about the endpoint centroid."""
    if ctx.wall_count == 0 or angle == 0.0:
        return

    centroid = ctx.points.mean(axis=0)
    c, s = np.cos(angle), np.sin(angle)
    rot = np.array([[c, -s], [s, c]])
    ctx.points[:] = (ctx.points - centroid) @ rot.T + centroid

    degrees = float(np.degrees(angle))
    for item in ctx.furniture:
        p = np.array([item.position.x, item.position.y]) - centroid
        x, y = rot @ p + centroid
        item.position.x, item.position.y = float(x), float(y)
        item.rotation = (item.rotation or 0.0) + degrees


# ── step 3: orientation ──────────────────────────────────────────────

def classify_orientations(ctx: ReconstructionContext) -> list[Optional[Orientation]]:
    """Label each wall horizontal or vertical; degenerate walls get ``None``."""
    vec = ctx.vectors()
    valid = ctx.valid_mask()
    orientations: list[Optional[Orientation]] = []
    for (dx, dy), ok in zip(vec, valid):
        if not ok:
            orientations.append(None)
            continue
        angle = np.arctan2(dy, dx)
        nearest = np.round(angle / (np.pi / 2)) * (np.pi / 2)
        if abs(np.cos(nearest)) > abs(np.sin(nearest)):
            orientations.append(Orientation.HORIZONTAL)
        else:
            orientations.append(Orientation.VERTICAL)
    ctx.orientations = orientations
    return orientations


# ── step 4–6: corner solving ─────────────────────────────────────────

def solve_corners(ctx: ReconstructionContext, clusters: list[np.ndarray]) -> None:
    """Place every corner cluster at the coordinates its walls agree on.

    A vertical wall owns its X and a horizontal wall owns its Y; a
    corner takes the mean owned value per axis, or the mean of its own
    endpoints on an axis no wall owns.
    """
    mids = ctx.midpoints()
    for members in clusters:
        owned_x: list[float] = []
        owned_y: list[float] = []
        for idx in members:
            w = int(idx) // 2
            orient = ctx.orientations[w]
            if orient is Orientation.VERTICAL:
                owned_x.append(mids[w, 0])
            elif orient is Orientation.HORIZONTAL:
                owned_y.append(mids[w, 1])

        x = np.mean(owned_x) if owned_x else ctx.points[members, 0].mean()
        y = np.mean(owned_y) if owned_y else ctx.points[members, 1].mean()
        ctx.points[members] = (np.round(x), np.round(y))


def enforce_axes(ctx: ReconstructionContext) -> None:
    """Force each wall's locked axis to the mean of its two endpoints."""
    for w, orient in enumerate(ctx.orientations):
        if orient is None:
            continue
        axis = 1 if orient is Orientation.HORIZONTAL else 0
        s, e = 2 * w, 2 * w + 1
        value = np.round((ctx.points[s, axis] + ctx.points[e, axis]) / 2.0)
        ctx.points[s, axis] = value
        ctx.points[e, axis] = value


# ── step 8: coordinate snapping ──────────────────────────────────────

def snap_coordinates(ctx: ReconstructionContext, tolerance: float = DEFAULT_SNAP_TOLERANCE) -> int:
    """Snap nearly-collinear walls of one orientation onto a shared line.

    Locked-axis values are sorted and grouped greedily while they stay
    within *tolerance* of the group's first value; every wall in a group
    moves to the group average.  Endpoints of other walls sitting exactly
    on a moved endpoint move with it.  Returns the number of endpoints moved.
    """
    moved = 0
    for orient, axis in ((Orientation.VERTICAL, 0), (Orientation.HORIZONTAL, 1)):
        walls = [w for w, o in enumerate(ctx.orientations) if o is orient]
        if len(walls) < 2:
            continue
        walls.sort(key=lambda w: ctx.points[2 * w, axis])

        groups: list[list[int]] = [[walls[0]]]
        for w in walls[1:]:
            first = ctx.points[2 * groups[-1][0], axis]
            if ctx.points[2 * w, axis] - first <= tolerance:
                groups[-1].append(w)
            else:
                groups.append([w])

        for group in groups:
            if len(group) < 2:
                continue
            target = np.round(np.mean([ctx.points[2 * w, axis] for w in group]))
            for w in group:
                for idx in (2 * w, 2 * w + 1):
                    old = ctx.points[idx].copy()
                    if old[axis] == target:
                        continue
                    same = np.all(ctx.points == old, axis=1)
                    ctx.points[same, axis] = target
                    moved += 1
    return moved


# ── driver ───────────────────────────────────────────────────────────

def enforce_orthogonal(
    walls: list[Wall],
    merge_distance: float = DEFAULT_MERGE_DISTANCE,
    furniture: list[FurnitureItem] | None = None,
    *,
    iterations: int = DEFAULT_ITERATIONS,
    snap_tolerance: float = DEFAULT_SNAP_TOLERANCE,
) -> ReconstructionContext:
    """Make every wall exactly horizontal or vertical, in place.

    Steps:

    1. **Estimate rotation** – dominant wall angle by a 4θ circular mean.
    2. **Rotate** – walls and furniture about the endpoint centroid.
    3. **Classify** – horizontal / vertical per wall.
    4. **Cluster** – endpoints within *merge_distance* form a corner.
    5. **Solve** – corners take the coordinates their walls own.
    6. **Re-align** – each wall's locked axis set to its endpoint mean.
    7. **Iterate** steps 4–6 *iterations* times.
    8. **Snap** – collinear runs within *snap_tolerance* share one line.
    9. **Merge** – remaining near-coincident endpoints are joined.

    Returns the context so callers can inspect orientations.
    """
    ctx = ReconstructionContext.from_walls(walls, furniture)
    if ctx.wall_count == 0:
        return ctx

    rotation = estimate_rotation(ctx)
    apply_rotation(ctx, rotation)
    logger.info("📐 Orthogonal: rotating layout by %.2f°", np.degrees(rotation))

    classify_orientations(ctx)

    for _ in range(iterations):
        clusters = cluster_endpoints(ctx.points, merge_distance)
        solve_corners(ctx, clusters)
        enforce_axes(ctx)

    snapped = snap_coordinates(ctx, snap_tolerance)
    if snapped:
        logger.info("  📏 Snapped %d endpoints onto shared lines", snapped)

    merge_endpoints(ctx.points, merge_distance)

    ctx.commit()
    logger.info("  ✅ Orthogonalised %d walls", ctx.wall_count)
    return ctx
