from __future__ import annotations

import math
from typing import Sequence

from pygame.math import Vector2

PointLike = Sequence[float]


def is_point_inside_rect(point: PointLike, left: float, top: float, width: float, height: float) -> bool:
    x, y = point[0], point[1]
    return left <= x <= left + width and top <= y <= top + height


def is_point_inside_polygon(point: PointLike, vertices: Sequence[PointLike]) -> bool:
    """Crossing-number test: cast a ray towards +x and count edge crossings.

    Edges are taken in order with the last vertex wrapping to the first. An
    edge whose endpoints share a y coordinate never straddles the ray, so the
    division below is never reached for it.
    """
    x, y = point[0], point[1]
    inside = False
    count = len(vertices)
    j = count - 1
    for i in range(count):
        xi, yi = vertices[i][0], vertices[i][1]
        xj, yj = vertices[j][0], vertices[j][1]
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def rotate_point(point: PointLike, origin: PointLike, angle: float) -> Vector2:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    dx = point[0] - origin[0]
    dy = point[1] - origin[1]
    return Vector2(cos_a * dx - sin_a * dy + origin[0], sin_a * dx + cos_a * dy + origin[1])


def axis_aligned_square(center: PointLike, half_size: float) -> list[Vector2]:
    cx, cy = center[0], center[1]
    return [
        Vector2(cx - half_size, cy - half_size),
        Vector2(cx - half_size, cy + half_size),
        Vector2(cx + half_size, cy + half_size),
        Vector2(cx + half_size, cy - half_size),
    ]


def is_finite_point(point: PointLike) -> bool:
    return len(point) == 2 and math.isfinite(point[0]) and math.isfinite(point[1])
