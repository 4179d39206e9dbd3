"""Checks on a reconstructed floor: axis alignment and near-miss corners."""

from __future__ import annotations

import logging
import math

from packages.core.types import CornerGap, Floor, FloorCheck, MisalignedWall, Wall
from packages.floorplan.context import MIN_WALL_LENGTH

logger = logging.getLogger(__name__)


def wall_axis_deviation(wall: Wall) -> float | None:
    """Degrees between *wall* and the nearest axis, or None if it is degenerate."""
    dx = wall.end.x - wall.start.x
    dy = wall.end.y - wall.start.y
    if math.hypot(dx, dy) < MIN_WALL_LENGTH:
        return None
    angle = math.degrees(math.atan2(dy, dx))
    return abs(angle - round(angle / 90.0) * 90.0)


def find_misaligned_walls(walls: list[Wall], tolerance_deg: float = 0.5) -> list[MisalignedWall]:
    out = []
    for wall in walls:
        dev = wall_axis_deviation(wall)
        if dev is not None and dev >= tolerance_deg:
            out.append(MisalignedWall(wall_id=wall.id, deviation=dev, length=wall.length))
    return out


def find_corner_gaps(
    walls: list[Wall],
    min_gap: float = 0.5,
    max_gap: float = 15.0,
) -> list[CornerGap]:
    """Endpoint pairs that are close but not coincident.

    A gap between *min_gap* and *max_gap* usually means two walls were
    meant to share a corner and the clean-up missed it.
    """
    ends = []
    for w in walls:
        ends.append((w.id, "start", w.start))
        ends.append((w.id, "end", w.end))

    gaps: list[CornerGap] = []
    for i, (wid_a, which_a, pa) in enumerate(ends):
        for wid_b, which_b, pb in ends[i + 1:]:
            d = math.hypot(pa.x - pb.x, pa.y - pb.y)
            if min_gap < d < max_gap:
                gaps.append(CornerGap(
                    wall_a=wid_a, end_a=which_a, wall_b=wid_b, end_b=which_b, distance=d,
                ))
    return gaps


def check_floor(
    floor: Floor,
    *,
    tolerance_deg: float = 0.5,
    max_gap: float = 15.0,
) -> FloorCheck:
    """Summarise how clean a floor's wall graph is."""
    check = FloorCheck(
        wall_count=len(floor.walls),
        misaligned=find_misaligned_walls(floor.walls, tolerance_deg),
        gaps=find_corner_gaps(floor.walls, max_gap=max_gap),
    )
    if check.ok:
        logger.info("✅ All %d walls are orthogonal", check.wall_count)
    else:
        logger.info("❌ %d/%d walls NOT orthogonal", len(check.misaligned), check.wall_count)
    if check.gaps:
        logger.info("⚠️  %d near-miss corner pairs", len(check.gaps))
    return check
