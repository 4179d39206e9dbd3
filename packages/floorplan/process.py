"""End-to-end import: capture JSON → cleaned-up floor plan."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from packages.core.types import Capture, Floor, ImportOptions
from packages.floorplan.context import MIN_WALL_LENGTH
from packages.floorplan.extract import (
    extract_doors,
    extract_walls,
    extract_windows,
    import_sections,
    place_furniture,
)
from packages.floorplan.loader import load_capture
from packages.floorplan.orthogonal import enforce_orthogonal
from packages.floorplan.straighten import straighten_walls

logger = logging.getLogger(__name__)


def import_capture(
    data: dict[str, Any] | Capture,
    options: ImportOptions | None = None,
    *,
    source_file: str = "",
) -> Floor:
    """Build a :class:`Floor` from a parsed capture.

    1. Validate the capture (structural errors raise here).
    2. Extract walls, then anchor doors/windows and place furniture
       against the walls as captured.
    3. Clean up the walls: orthogonal reconstruction, or the legacy
       straightening pass.
    4. Add room stubs for labelled sections.
    """
    options = options or ImportOptions()
    capture = data if isinstance(data, Capture) else Capture.model_validate(data)
    logger.info(
        "📥 Capture: %d walls, %d doors, %d windows, %d objects, %d sections",
        len(capture.walls), len(capture.doors), len(capture.windows),
        len(capture.objects), len(capture.sections),
    )

    walls_by_identifier = extract_walls(capture.walls)
    doors = extract_doors(capture.doors, walls_by_identifier)
    windows = extract_windows(capture.windows, walls_by_identifier)
    known = set(walls_by_identifier) | {rec.identifier for rec in capture.objects}
    furniture = place_furniture(capture.objects, known)

    walls = list(walls_by_identifier.values())
    if options.drop_degenerate_walls:
        kept = [w for w in walls if w.length >= MIN_WALL_LENGTH]
        kept_ids = {w.id for w in kept}
        if len(kept) != len(walls):
            logger.info("🗑️  Dropped %d degenerate walls", len(walls) - len(kept))
        walls = kept
        doors = [d for d in doors if d.wall_id in kept_ids]
        windows = [w for w in windows if w.wall_id in kept_ids]

    if options.orthogonal:
        enforce_orthogonal(
            walls,
            options.merge_distance,
            furniture,
            iterations=options.iterations,
            snap_tolerance=options.snap_tolerance,
        )
    elif options.straighten:
        straighten_walls(walls, options.angle_tolerance, options.merge_distance)

    return Floor(
        source_file=source_file,
        walls=walls,
        rooms=import_sections(capture.sections),
        doors=doors,
        windows=windows,
        furniture=furniture,
    )


def import_capture_file(
    input_path: str | Path,
    options: ImportOptions | None = None,
) -> Floor:
    """Load a ``.json`` or ``.zip`` capture and import it."""
    input_path = Path(input_path)
    logger.info("Loading %s …", input_path.name)
    data = load_capture(input_path)
    return import_capture(data, options, source_file=input_path.name)


def import_capture_to_json(
    input_path: str | Path,
    output_path: str | Path | None = None,
    options: ImportOptions | None = None,
) -> str:
    """Import a capture and write the floor to a JSON file.

    Returns the JSON string.
    """
    floor = import_capture_file(input_path, options)
    json_str = floor.model_dump_json(indent=2, by_alias=True)

    if output_path is None:
        output_path = Path(input_path).with_suffix(".floor.json")
    Path(output_path).write_text(json_str)
    logger.info("Wrote floor plan → %s", output_path)
    return json_str
