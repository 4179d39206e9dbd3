"""Shared test fixtures – synthetic captures and wall layouts."""

from __future__ import annotations

import math

import numpy as np
import pytest

from packages.core.types import FurnitureItem, Point, Wall
from tests.captures import (
    make_transform,
    opening_record,
    rotated_rectangle,
    wall_record,
    walls_from_corners,
)


@pytest.fixture()
def corner_walls() -> list[Wall]:
    """Two walls meeting at a near-right-angle corner."""
    return [
        Wall(id="a", start=Point(x=0, y=0), end=Point(x=300, y=2), height=250),
        Wall(id="b", start=Point(x=298, y=0), end=Point(x=300, y=200), height=250),
    ]


@pytest.fixture()
def rotated_room_walls() -> list[Wall]:
    """A 400 × 300 cm rectangle rotated 7° from the axes."""
    return walls_from_corners(rotated_rectangle(400, 300, (500, 400), 7.0))


@pytest.fixture()
def noisy_room_walls() -> list[Wall]:
    """A 4° rotated 500 × 350 cm room whose walls don't quite meet.

    Every endpoint carries up to ±4 cm of independent noise, so walls
    that share a physical corner are a few centimetres apart.
    """
    rng = np.random.default_rng(7)
    corners = rotated_rectangle(500, 350, (250, 175), 4.0)
    walls = []
    for i, (sx, sy) in enumerate(corners):
        ex, ey = corners[(i + 1) % len(corners)]
        n = rng.uniform(-4, 4, size=4)
        walls.append(Wall(
            start=Point(x=sx + n[0], y=sy + n[1]),
            end=Point(x=ex + n[2], y=ey + n[3]),
            height=250,
        ))
    return walls


@pytest.fixture()
def sofa() -> FurnitureItem:
    return FurnitureItem(catalog_id="sofa", position=Point(x=600, y=400), rotation=30.0)


@pytest.fixture()
def corner_capture() -> dict:
    """A small capture: two walls, openings (one orphaned), objects, sections."""
    return {
        "version": 2,
        "walls": [
            wall_record("wall-a", (0, 0), (300, 2)),
            wall_record("wall-b", (298, 0), (300, 200)),
        ],
        "doors": [
            opening_record("door-1", (150, 1), "wall-a", {"door": {"isOpen": False}}),
            opening_record("door-orphan", (50, 50), "no-such-wall", "slidingDoor"),
        ],
        "windows": [
            opening_record("window-1", (299, 100), "wall-b", "window", (1.2, 1.0, 0.1)),
        ],
        "objects": [
            {
                "identifier": "obj-sofa",
                "dimensions": [2.0, 0.8, 0.9],
                "transform": make_transform(1.5, 1.0, math.radians(30)),
                "category": {"sofa": {}},
                "parentIdentifier": None,
            },
            {
                "identifier": "obj-lamp",
                "dimensions": [0.3, 1.5, 0.3],
                "transform": make_transform(0.5, 0.5),
                "category": "lamp",
            },
            {
                "identifier": "obj-floating",
                "dimensions": [0.5, 0.5, 0.5],
                "transform": make_transform(1.0, 1.0),
                "category": "storage",
                "parentIdentifier": "ghost",
            },
        ],
        "sections": [
            {"center": [1.5, 0.0, 1.0], "label": "livingRoom", "story": 0},
            {"center": [0.5, 0.0, 0.5], "label": "studio", "story": 1},
        ],
    }
