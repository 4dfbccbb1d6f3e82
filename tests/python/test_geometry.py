from __future__ import annotations

import math

from pygame.math import Vector2
from pytest import approx

from albiome.sim.utils.geometry import (
    axis_aligned_square,
    is_point_inside_polygon,
    is_point_inside_rect,
    rotate_point,
)

UNIT_SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def test_unit_square_inside_and_outside():
    assert is_point_inside_polygon((0.5, 0.5), UNIT_SQUARE)
    assert not is_point_inside_polygon((2.0, 2.0), UNIT_SQUARE)
    assert not is_point_inside_polygon((-0.1, 0.5), UNIT_SQUARE)


def test_vertices_and_edges_give_a_boolean():
    for vertex in UNIT_SQUARE:
        assert isinstance(is_point_inside_polygon(vertex, UNIT_SQUARE), bool)
    assert isinstance(is_point_inside_polygon((0.5, 0.0), UNIT_SQUARE), bool)


def test_degenerate_polygons_do_not_raise():
    flat = [(0.0, 1.0), (1.0, 1.0), (2.0, 1.0), (3.0, 1.0)]
    assert not is_point_inside_polygon((1.5, 1.0), flat)
    collapsed = [(2.0, 2.0)] * 4
    assert not is_point_inside_polygon((2.0, 2.0), collapsed)
    assert not is_point_inside_polygon((0.0, 0.0), [])


def test_concave_polygon_notch_is_outside():
    u_shape = [(0, 0), (3, 0), (3, 3), (2, 3), (2, 1), (1, 1), (1, 3), (0, 3)]
    assert is_point_inside_polygon((0.5, 2.5), u_shape)
    assert not is_point_inside_polygon((1.5, 2.5), u_shape)


def test_accepts_vector2_vertices():
    square = [Vector2(p) for p in UNIT_SQUARE]
    assert is_point_inside_polygon(Vector2(0.25, 0.75), square)


def test_rotate_point_quarter_turn_about_origin():
    rotated = rotate_point((2.0, 1.0), (1.0, 1.0), math.pi / 2)
    assert rotated.x == approx(1.0)
    assert rotated.y == approx(2.0)


def test_rotate_point_full_turn_returns_start():
    rotated = rotate_point((5.0, -3.0), (1.0, 2.0), 2 * math.pi)
    assert rotated.x == approx(5.0)
    assert rotated.y == approx(-3.0)


def test_point_inside_rect_is_inclusive():
    assert is_point_inside_rect((0.0, 0.0), 0.0, 0.0, 10.0, 5.0)
    assert is_point_inside_rect((10.0, 5.0), 0.0, 0.0, 10.0, 5.0)
    assert not is_point_inside_rect((10.1, 5.0), 0.0, 0.0, 10.0, 5.0)


def test_axis_aligned_square_vertex_order():
    square = axis_aligned_square((10.0, 20.0), 2.0)
    assert [(p.x, p.y) for p in square] == [(8.0, 18.0), (8.0, 22.0), (12.0, 22.0), (12.0, 18.0)]
