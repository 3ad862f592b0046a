"""Circular layout placement."""
import math

import pytest

from gstore.document import Vertex
from render.layout import CANVAS_HEIGHT, CANVAS_WIDTH, RADIUS, circle_angles, circular_layout


def _vertices(*names):
    return [Vertex(name=n) for n in names]


def test_empty_vertex_list_gives_empty_layout():
    assert circular_layout([]) == []
    assert len(circle_angles(0)) == 0


def test_one_position_per_vertex_on_the_circle():
    for n in (1, 2, 3, 7, 25):
        positioned = circular_layout(_vertices(*[f"v{i}" for i in range(n)]))
        assert len(positioned) == n
        for pv in positioned:
            dist = math.hypot(pv.x - CANVAS_WIDTH / 2, pv.y - CANVAS_HEIGHT / 2)
            assert dist == pytest.approx(RADIUS)


def test_angles_increase_with_input_order():
    positioned = circular_layout(_vertices("a", "b", "c", "d", "e"))
    angles = [
        math.atan2(pv.y - CANVAS_HEIGHT / 2, pv.x - CANVAS_WIDTH / 2) % (2 * math.pi)
        for pv in positioned
    ]
    assert angles[0] == pytest.approx(0.0, abs=1e-9)
    assert all(b > a for a, b in zip(angles, angles[1:]))
    assert angles[-1] < 2 * math.pi


def test_four_vertices_land_on_compass_points():
    positioned = circular_layout(_vertices("E", "S", "W", "N"))
    coords = [(pv.x, pv.y) for pv in positioned]
    expected = [(300, 200), (200, 300), (100, 200), (200, 100)]
    for got, want in zip(coords, expected):
        assert got == pytest.approx(want, abs=1e-9)


def test_names_and_order_are_kept():
    positioned = circular_layout(_vertices("B", "A", "B"))
    assert [pv.name for pv in positioned] == ["B", "A", "B"]


def test_custom_canvas_and_radius():
    positioned = circular_layout(_vertices("a", "b"), width=200, height=100, radius=10)
    assert (positioned[0].x, positioned[0].y) == pytest.approx((110, 50))
    assert (positioned[1].x, positioned[1].y) == pytest.approx((90, 50))
