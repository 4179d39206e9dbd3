"""Tests for the orthogonal reconstruction."""

from __future__ import annotations

import math

import numpy as np
import pytest

from packages.core.types import FurnitureItem, Orientation, Point, Wall
from packages.floorplan.context import ReconstructionContext
from packages.floorplan.orthogonal import (
    angle_diff,
    apply_rotation,
    classify_orientations,
    enforce_orthogonal,
    estimate_rotation,
    normalize_angle,
    snap_coordinates,
)
from packages.floorplan.validate import wall_axis_deviation


def _endpoints(walls: list[Wall]) -> np.ndarray:
    return np.array([[p.x, p.y] for w in walls for p in (w.start, w.end)])


def _is_axis_aligned(wall: Wall) -> bool:
    return wall.start.x == wall.end.x or wall.start.y == wall.end.y


class TestAngles:
    def test_normalize_angle(self):
        assert normalize_angle(3 * math.pi / 2) == pytest.approx(-math.pi / 2)
        assert normalize_angle(-math.pi) == pytest.approx(-math.pi)
        assert normalize_angle(0.25) == pytest.approx(0.25)

    def test_angle_diff_wraps(self):
        assert angle_diff(math.radians(179), math.radians(-179)) == pytest.approx(math.radians(2))


class TestEstimateRotation:
    def test_rotated_rectangle(self, rotated_room_walls: list[Wall]):
        ctx = ReconstructionContext.from_walls(rotated_room_walls)
        assert estimate_rotation(ctx) == pytest.approx(-math.radians(7.0), abs=1e-9)

    def test_mixed_orientations_do_not_cancel(self):
        # A horizontal and a vertical wall, both 2° off: plain averaging
        # of 2° and 92° would give 47°.
        walls = [
            Wall(start=Point(x=0, y=0), end=Point(x=math.cos(math.radians(2)) * 100,
                                                   y=math.sin(math.radians(2)) * 100)),
            Wall(start=Point(x=0, y=0), end=Point(x=math.cos(math.radians(92)) * 100,
                                                   y=math.sin(math.radians(92)) * 100)),
        ]
        ctx = ReconstructionContext.from_walls(walls)
        assert estimate_rotation(ctx) == pytest.approx(-math.radians(2.0), abs=1e-9)

    def test_degenerate_walls_ignored(self):
        walls = [
            Wall(start=Point(x=0, y=0), end=Point(x=0.5, y=0.4)),
            Wall(start=Point(x=0, y=0), end=Point(x=100, y=0)),
        ]
        ctx = ReconstructionContext.from_walls(walls)
        assert estimate_rotation(ctx) == pytest.approx(0.0, abs=1e-12)

    def test_no_valid_walls(self):
        ctx = ReconstructionContext.from_walls([Wall(start=Point(x=1, y=1), end=Point(x=1, y=1))])
        assert estimate_rotation(ctx) == 0.0


class TestApplyRotation:
    def test_furniture_rotates_in_lockstep(self, rotated_room_walls: list[Wall], sofa: FurnitureItem):
        ctx = ReconstructionContext.from_walls(rotated_room_walls, [sofa])
        centroid = ctx.points.mean(axis=0)
        before = math.hypot(sofa.position.x - centroid[0], sofa.position.y - centroid[1])

        apply_rotation(ctx, math.radians(-7.0))

        after = math.hypot(sofa.position.x - centroid[0], sofa.position.y - centroid[1])
        assert after == pytest.approx(before)
        assert sofa.rotation == pytest.approx(23.0)
        np.testing.assert_allclose(ctx.points.mean(axis=0), centroid)


class TestClassify:
    def test_orientations(self):
        walls = [
            Wall(start=Point(x=0, y=0), end=Point(x=100, y=3)),
            Wall(start=Point(x=0, y=0), end=Point(x=-2, y=-100)),
            Wall(start=Point(x=5, y=5), end=Point(x=5.2, y=5.1)),
        ]
        ctx = ReconstructionContext.from_walls(walls)
        assert classify_orientations(ctx) == [Orientation.HORIZONTAL, Orientation.VERTICAL, None]


class TestSnapCoordinates:
    def test_collinear_runs_share_a_line(self):
        walls = [
            Wall(start=Point(x=100, y=0), end=Point(x=100, y=100)),
            Wall(start=Point(x=102, y=200), end=Point(x=102, y=300)),
            Wall(start=Point(x=0, y=0), end=Point(x=100, y=0)),
        ]
        ctx = ReconstructionContext.from_walls(walls)
        classify_orientations(ctx)

        snap_coordinates(ctx, tolerance=3.0)
        ctx.commit()

        assert walls[0].start.x == walls[0].end.x == 101
        assert walls[1].start.x == walls[1].end.x == 101
        # the horizontal wall's corner followed the vertical wall
        assert (walls[2].end.x, walls[2].end.y) == (101, 0)
        assert walls[2].start.x == 0

    def test_far_lines_left_alone(self):
        walls = [
            Wall(start=Point(x=100, y=0), end=Point(x=100, y=100)),
            Wall(start=Point(x=110, y=200), end=Point(x=110, y=300)),
        ]
        ctx = ReconstructionContext.from_walls(walls)
        classify_orientations(ctx)
        assert snap_coordinates(ctx, tolerance=3.0) == 0


class TestScenarios:
    def test_near_right_angle_corner(self, corner_walls: list[Wall]):
        a, b = corner_walls
        enforce_orthogonal(corner_walls, merge_distance=15)

        assert (a.end.x, a.end.y) == (b.start.x, b.start.y)
        assert a.start.y == a.end.y
        assert b.start.x == b.end.x
        assert a.end.x == pytest.approx(299, abs=1)
        assert a.end.y == pytest.approx(1, abs=1)

    def test_rotated_rectangle(self, rotated_room_walls: list[Wall]):
        enforce_orthogonal(rotated_room_walls)

        assert all(_is_axis_aligned(w) for w in rotated_room_walls)
        for i, wall in enumerate(rotated_room_walls):
            nxt = rotated_room_walls[(i + 1) % 4]
            assert (wall.end.x, wall.end.y) == (nxt.start.x, nxt.start.y)

        pts = _endpoints(rotated_room_walls)
        size = pts.max(axis=0) - pts.min(axis=0)
        np.testing.assert_allclose(size, [400, 300], atol=2)

    def test_zero_walls(self):
        ctx = enforce_orthogonal([])
        assert ctx.wall_count == 0

    def test_single_wall(self):
        wall = Wall(start=Point(x=0, y=0), end=Point(x=100, y=10))
        enforce_orthogonal([wall])
        assert wall.start.y == wall.end.y
        assert wall.length == pytest.approx(math.hypot(100, 10), abs=1)

    def test_degenerate_wall_survives(self, rotated_room_walls: list[Wall]):
        corner = rotated_room_walls[0].start
        stub = Wall(start=Point(x=corner.x, y=corner.y), end=Point(x=corner.x + 0.4, y=corner.y + 0.3))
        walls = rotated_room_walls + [stub]

        enforce_orthogonal(walls)

        assert len(walls) == 5
        assert all(_is_axis_aligned(w) for w in walls[:4])
        assert stub.length < 1

    def test_furniture_follows_rotation(self, rotated_room_walls: list[Wall], sofa: FurnitureItem):
        enforce_orthogonal(rotated_room_walls, furniture=[sofa])
        assert sofa.rotation == pytest.approx(23.0)


class TestProperties:
    def test_axis_alignment(self, noisy_room_walls: list[Wall]):
        enforce_orthogonal(noisy_room_walls)
        for wall in noisy_room_walls:
            dev = wall_axis_deviation(wall)
            assert dev is None or dev < 0.5

    def test_corner_preservation(self, noisy_room_walls: list[Wall]):
        before = _endpoints(noisy_room_walls)
        close = [
            (i, j)
            for i in range(len(before))
            for j in range(i + 1, len(before))
            if np.linalg.norm(before[i] - before[j]) <= 15
        ]
        assert len(close) == 4  # one pair per room corner

        enforce_orthogonal(noisy_room_walls, merge_distance=15)

        after = _endpoints(noisy_room_walls)
        for i, j in close:
            assert np.linalg.norm(after[i] - after[j]) == 0

    def test_non_explosion(self, noisy_room_walls: list[Wall]):
        before = _endpoints(noisy_room_walls)
        enforce_orthogonal(noisy_room_walls)
        after = _endpoints(noisy_room_walls)

        size_before = before.max(axis=0) - before.min(axis=0)
        size_after = after.max(axis=0) - after.min(axis=0)
        assert np.all(size_after <= size_before * 1.5)

        center_before = (before.max(axis=0) + before.min(axis=0)) / 2
        center_after = (after.max(axis=0) + after.min(axis=0)) / 2
        assert np.linalg.norm(center_after - center_before) < 0.1 * size_before.max()

    def test_idempotent(self, noisy_room_walls: list[Wall]):
        enforce_orthogonal(noisy_room_walls)
        first = _endpoints(noisy_room_walls)
        enforce_orthogonal(noisy_room_walls)
        second = _endpoints(noisy_room_walls)
        assert np.abs(second - first).max() <= 1.0
