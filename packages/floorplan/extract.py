"""Turn capture records into plan walls, openings, furniture, and room stubs."""

from __future__ import annotations

import logging
import math
from typing import Iterable

from packages.core.types import (
    CaptureRecord,
    CaptureSection,
    Door,
    FurnitureItem,
    Point,
    Room,
    Wall,
    Window,
)
from packages.floorplan.categories import (
    map_door_type,
    map_furniture_catalog_id,
    map_section_label,
    map_window_type,
)
from packages.floorplan.transform import (
    METRES_TO_CM,
    get_position,
    get_wall_direction,
    get_y_rotation,
    to_centimetres,
    to_plan_point,
)

logger = logging.getLogger(__name__)

DEFAULT_WALL_THICKNESS = 15.0  # cm
DEFAULT_WALL_COLOR = "#444444"
DEFAULT_SILL_HEIGHT = 90.0  # cm

MIN_POSITION = 0.01
MAX_POSITION = 0.99


def project_onto_wall(wall: Wall, pt: Point) -> float:
    """Parametric position of the point on *wall* closest to *pt*.

    The result is clamped to ``[0.01, 0.99]`` so an opening never sits
    exactly on a wall end.  A zero-length wall yields ``0.5``.
    """
    dx = wall.end.x - wall.start.x
    dy = wall.end.y - wall.start.y
    len_sq = dx * dx + dy * dy
    if len_sq == 0:
        return 0.5
    t = ((pt.x - wall.start.x) * dx + (pt.y - wall.start.y) * dy) / len_sq
    return max(MIN_POSITION, min(MAX_POSITION, t))


def extract_walls(records: Iterable[CaptureRecord]) -> dict[str, Wall]:
    """Build one plan wall per record, keyed by the record's identifier.

    The wall runs through the record's centre along its local X axis;
    ``dimensions[0]`` is its length and ``dimensions[1]`` its height.
    """
    walls: dict[str, Wall] = {}
    for rec in records:
        pos = get_position(rec.transform)
        center = to_plan_point(pos.x, pos.z)
        dir_x, dir_z = get_wall_direction(rec.transform)
        half = rec.dimensions[0] / 2 * METRES_TO_CM

        walls[rec.identifier] = Wall(
            start=Point(x=center.x - dir_x * half, y=center.y - dir_z * half),
            end=Point(x=center.x + dir_x * half, y=center.y + dir_z * half),
            thickness=DEFAULT_WALL_THICKNESS,
            height=to_centimetres(rec.dimensions[1]),
            color=DEFAULT_WALL_COLOR,
        )
    logger.info("🧱 Extracted %d walls", len(walls))
    return walls


def _parent_wall(rec: CaptureRecord, walls: dict[str, Wall], kind: str) -> Wall | None:
    wall = walls.get(rec.parent_identifier) if rec.parent_identifier else None
    if wall is None:
        logger.debug(
            "Dropping %s %s: parent %r is not an extracted wall",
            kind, rec.identifier, rec.parent_identifier,
        )
    return wall


def _record_point(rec: CaptureRecord) -> Point:
    pos = get_position(rec.transform)
    return to_plan_point(pos.x, pos.z)


def extract_doors(records: Iterable[CaptureRecord], walls: dict[str, Wall]) -> list[Door]:
    """Anchor every door record on its parent wall; orphans are dropped."""
    doors: list[Door] = []
    for rec in records:
        wall = _parent_wall(rec, walls, "door")
        if wall is None:
            continue
        doors.append(Door(
            wall_id=wall.id,
            position=project_onto_wall(wall, _record_point(rec)),
            width=to_centimetres(rec.dimensions[0]),
            height=to_centimetres(rec.dimensions[1]),
            type=map_door_type(rec.category),
        ))
    logger.info("🚪 Placed %d doors", len(doors))
    return doors


def extract_windows(records: Iterable[CaptureRecord], walls: dict[str, Wall]) -> list[Window]:
    windows: list[Window] = []
    for rec in records:
        wall = _parent_wall(rec, walls, "window")
        if wall is None:
            continue
        windows.append(Window(
            wall_id=wall.id,
            position=project_onto_wall(wall, _record_point(rec)),
            width=to_centimetres(rec.dimensions[0]),
            height=to_centimetres(rec.dimensions[1]),
            sill_height=DEFAULT_SILL_HEIGHT,
            type=map_window_type(rec.category),
        ))
    logger.info("🪟 Placed %d windows", len(windows))
    return windows


def place_furniture(
    records: Iterable[CaptureRecord],
    known_identifiers: set[str] | None = None,
) -> list[FurnitureItem]:
    """Map freestanding object records to furniture on the ground plane.

    An object whose ``parent_identifier`` is set but names nothing in
    *known_identifiers* is dropped.
    """
    records = list(records)
    if known_identifiers is None:
        known_identifiers = {rec.identifier for rec in records}

    items: list[FurnitureItem] = []
    for rec in records:
        if rec.parent_identifier and rec.parent_identifier not in known_identifiers:
            logger.debug(
                "Dropping object %s: unknown parent %r", rec.identifier, rec.parent_identifier,
            )
            continue
        items.append(FurnitureItem(
            catalog_id=map_furniture_catalog_id(rec.category, rec.dimensions),
            position=_record_point(rec),
            rotation=math.degrees(get_y_rotation(rec.transform)),
            width=to_centimetres(rec.dimensions[0]),
            depth=to_centimetres(rec.dimensions[2]),
            height=to_centimetres(rec.dimensions[1]),
        ))
    logger.info("🛋️  Placed %d furniture items", len(items))
    return items


def import_sections(sections: Iterable[CaptureSection]) -> list[Room]:
    """Create a named room stub per labelled section.

    Associating walls with rooms needs polygon analysis, so ``walls``
    stays empty and ``area`` zero.
    """
    return [Room(name=map_section_label(s.label), story=s.story) for s in sections]
