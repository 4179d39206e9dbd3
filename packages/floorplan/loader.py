"""Load a capture JSON, either directly or from inside a zip export.

Supported formats
-----------------
* **JSON** – a bare ``room.json`` capture.
* **ZIP** – a scanner export archive containing ``room.json`` somewhere
  inside it.
"""

from __future__ import annotations

import json
import logging
import zipfile
from pathlib import Path
from typing import IO, Any

logger = logging.getLogger(__name__)

CAPTURE_FILENAME = "room.json"


class CaptureNotFoundError(FileNotFoundError):
    """The container holds no capture JSON."""


def load_capture_json(path: str | Path) -> dict[str, Any]:
    """Read and parse a capture JSON file."""
    logger.info("📄 Reading capture JSON %s", Path(path).name)
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def extract_capture_from_zip(
    source: str | Path | IO[bytes],
    filename: str = CAPTURE_FILENAME,
) -> dict[str, Any]:
    """Find *filename* inside a zip archive and return its parsed contents.

    The match is on the end of the member path, so ``Export/room.json``
    is found too.  When several members match, the last one wins.

    Raises ``CaptureNotFoundError`` if no member matches.
    """
    with zipfile.ZipFile(source) as archive:
        members = [
            info for info in archive.infolist()
            if not info.is_dir() and info.filename.endswith(filename)
        ]
        logger.info("📦 Archive has %d entries", len(archive.infolist()))
        if not members:
            raise CaptureNotFoundError(f"No {filename} found in zip file")

        member = members[-1]
        logger.info("📄 Using %s", member.filename)
        with archive.open(member) as fh:
            return json.loads(fh.read().decode("utf-8"))


def load_capture(path: str | Path) -> dict[str, Any]:
    """Auto-detect format and return the raw capture dict.

    Raises ``ValueError`` for unsupported extensions.
    """
    p = Path(path)
    ext = p.suffix.lower()
    if ext == ".json":
        return load_capture_json(p)
    if ext == ".zip":
        return extract_capture_from_zip(p)
    raise ValueError(
        f"Unsupported capture format '{ext}'. Supported: .json, .zip"
    )
