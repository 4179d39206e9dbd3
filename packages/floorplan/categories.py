"""Map capture category vocabulary onto plan door/window types and catalogue ids.

Unrecognised categories fall back to a generic default; the capture
vocabulary grows over time and an unknown value must never fail an import.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

from packages.core.types import DoorType, WindowType

DEFAULT_CATALOG_ID = "chair"

_DOOR_TYPES: dict[str, DoorType] = {
    "door": DoorType.SINGLE,
    "doubleDoor": DoorType.DOUBLE,
    "french": DoorType.DOUBLE,
    "slidingDoor": DoorType.SLIDING,
    "foldingDoor": DoorType.BIFOLD,
}

_WINDOW_TYPES: dict[str, WindowType] = {
    "slidingWindow": WindowType.SLIDING,
    "bayWindow": WindowType.BAY,
}

# Each entry receives (width_m, height_m) of the object.
_FURNITURE: dict[str, Callable[[float, float], str]] = {
    "sofa": lambda w, h: "sofa" if w > 1.5 else "loveseat",
    "table": lambda w, h: "dining_table" if h > 0.6 else "coffee_table",
    "chair": lambda w, h: "chair",
    "bed": lambda w, h: "bed_queen" if w > 1.4 else "bed_twin",
    "storage": lambda w, h: "storage",
    "toilet": lambda w, h: "toilet",
    "bathtub": lambda w, h: "bathtub",
    "sink": lambda w, h: "sink_b",
    "refrigerator": lambda w, h: "fridge",
    "stove": lambda w, h: "stove",
    "oven": lambda w, h: "oven",
    "dishwasher": lambda w, h: "dishwasher",
    "television": lambda w, h: "television",
    "washerDryer": lambda w, h: "washer_dryer",
    "fireplace": lambda w, h: "fireplace",
    "stairs": lambda w, h: "storage",
}

_SECTION_LABELS: dict[str, str] = {
    "livingRoom": "Living Room",
    "bedroom": "Bedroom",
    "kitchen": "Kitchen",
    "bathroom": "Bathroom",
    "diningRoom": "Dining Room",
    "laundryRoom": "Laundry",
    "office": "Office",
    "hallway": "Hallway",
    "garage": "Garage",
    "closet": "Closet",
    "pantry": "Pantry",
    "entryway": "Entryway",
}


def category_key(category: Any) -> str:
    """Return the discriminating key of a category.

    Categories arrive either as a plain string (``"sofa"``) or as a
    single-key object (``{"door": {"isOpen": true}}``).
    """
    if isinstance(category, str):
        return category
    if isinstance(category, dict) and category:
        return str(next(iter(category)))
    return ""


def map_door_type(category: Any) -> DoorType:
    return _DOOR_TYPES.get(category_key(category), DoorType.SINGLE)


def map_window_type(category: Any) -> WindowType:
    return _WINDOW_TYPES.get(category_key(category), WindowType.STANDARD)


def map_furniture_catalog_id(category: Any, dimensions: Sequence[float]) -> str:
    """Pick a furniture catalogue id, using size to split e.g. sofa/loveseat."""
    rule = _FURNITURE.get(category_key(category))
    if rule is None:
        return DEFAULT_CATALOG_ID
    return rule(dimensions[0], dimensions[1])


def map_section_label(label: str) -> str:
    return _SECTION_LABELS.get(label, label)
