"""FastAPI application for the floor-plan import service.

Accepts a capture upload (bare ``room.json`` or a zip export), runs the
import pipeline, and serves the resulting floor plan to the editor.
"""

from __future__ import annotations

import io
import json
import logging
import zipfile
from pathlib import Path

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from packages.core.types import Floor, ImportOptions
from packages.floorplan.loader import CaptureNotFoundError, extract_capture_from_zip
from packages.floorplan.orthogonal import enforce_orthogonal
from packages.floorplan.process import import_capture
from packages.floorplan.validate import check_floor

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Floor Plan Import API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # permissive for local development; tighten for production
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── In-memory store (single-floor MVP) ───────────────────────────────
_state: dict = {
    "floor": None,        # Floor or None
    "source_file": None,  # original filename
}


def _floor_response(floor: Floor) -> JSONResponse:
    return JSONResponse(content=json.loads(floor.model_dump_json(by_alias=True)))


def _current_floor() -> Floor:
    if _state["floor"] is None:
        raise HTTPException(404, "No capture imported yet")
    return _state["floor"]


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/import")
async def import_upload(
    file: UploadFile = File(...),
    orthogonal: bool = False,
    straighten: bool = True,
    angle_tolerance: float = 5.0,
    merge_distance: float = 15.0,
):
    """Upload a capture (.json or .zip), import it, and store the floor."""
    if not file.filename:
        raise HTTPException(400, "No filename provided")

    suffix = Path(file.filename).suffix.lower()
    if suffix not in (".json", ".zip"):
        raise HTTPException(400, f"Unsupported format '{suffix}'. Use .json or .zip")

    logger.info(f"📥 Receiving capture: {file.filename} ({suffix})")
    raw = await file.read()

    try:
        if suffix == ".zip":
            data = extract_capture_from_zip(io.BytesIO(raw))
        else:
            data = json.loads(raw.decode("utf-8"))
    except CaptureNotFoundError as e:
        raise HTTPException(400, str(e))
    except (ValueError, UnicodeDecodeError, zipfile.BadZipFile) as e:
        raise HTTPException(400, f"Invalid capture file: {e}")

    options = ImportOptions(
        orthogonal=orthogonal,
        straighten=straighten,
        angle_tolerance=angle_tolerance,
        merge_distance=merge_distance,
    )
    try:
        floor = import_capture(data, options, source_file=file.filename)
    except ValidationError as e:
        raise HTTPException(422, f"Malformed capture: {e.error_count()} error(s)")

    _state["floor"] = floor
    _state["source_file"] = file.filename

    logger.info(f"🎉 Imported {len(floor.walls)} walls from {file.filename}")
    return {
        "filename": file.filename,
        "walls": len(floor.walls),
        "doors": len(floor.doors),
        "windows": len(floor.windows),
        "furniture": len(floor.furniture),
        "rooms": len(floor.rooms),
    }


@app.get("/floor")
def get_floor():
    """Return the imported floor plan JSON."""
    floor = _current_floor()
    logger.info(f"📐 Sending floor with {len(floor.walls)} walls")
    return _floor_response(floor)


@app.post("/orthogonalize")
def orthogonalize(merge_distance: float = 15.0):
    """Run the orthogonal reconstruction on the stored floor, in place."""
    floor = _current_floor()
    logger.info(f"📐 Orthogonalising {len(floor.walls)} walls")
    enforce_orthogonal(floor.walls, merge_distance, floor.furniture)
    return _floor_response(floor)


@app.get("/floor/check")
def get_floor_check(tolerance: float = 0.5):
    """Report misaligned walls and near-miss corners on the stored floor."""
    floor = _current_floor()
    result = check_floor(floor, tolerance_deg=tolerance)
    return JSONResponse(content=json.loads(result.model_dump_json(by_alias=True)))
