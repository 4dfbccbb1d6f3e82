from __future__ import annotations

import math
from typing import TYPE_CHECKING, List

from pygame.math import Vector2

from ..types.behavior import Behavior
from ..utils.geometry import axis_aligned_square

if TYPE_CHECKING:
    from ...render.canvas import BiomeCanvas
    from ..core.entity import Entity

TYPE_COUNT = 20
LARGE_TYPE_THRESHOLD = 10

_LIGHT_TRAIL = (0, 255, 0)
_DARK_TRAIL = (50, 0, 0)


def derive_type(random_seed: float) -> int:
    """Visual class in [0, 19], fixed by the birth seed (round half up)."""
    raw = min(TYPE_COUNT - 1, int(math.floor(random_seed * 20.5 + 0.5)) - 1)
    return max(0, raw)


def derive_size_factor(autotroph_type: int) -> float:
    if autotroph_type < LARGE_TYPE_THRESHOLD:
        return 1.0
    return 0.02 * autotroph_type


def advance(entity: "Entity") -> None:
    body = entity.body
    body.angle += body.random_seed * body.config.drift_rate
    entity.position.x += math.cos(body.angle) * body.speed
    entity.position.y += math.sin(body.angle) * body.speed


def bounding_shape(entity: "Entity") -> List[Vector2]:
    body = entity.body
    return axis_aligned_square(entity.position, body.config.body_size / 2 * body.size_factor)


def draw(entity: "Entity", canvas: "BiomeCanvas") -> None:
    body = entity.body
    config = body.config
    rng = entity.rng

    spot_x = rng.next_range(-config.trail_spot_range, config.trail_spot_range) * math.sin(entity.step)
    spot_y = rng.next_range(-config.trail_spot_range, config.trail_spot_range) * math.cos(entity.step)
    trail = _LIGHT_TRAIL if body.type < LARGE_TYPE_THRESHOLD else _DARK_TRAIL
    canvas.set_trail_pixel(entity.position.x + spot_x, entity.position.y + spot_y, (*trail, config.trail_alpha))

    size = config.body_size * body.size_factor
    sprite = canvas.sprites.diatom(body.type)
    if sprite is not None:
        canvas.draw_sprite(sprite, entity.position, body.angle, (size, size))
    elif entity.bounding_shape:
        canvas.draw_polygon(entity.bounding_shape, entity.fill_color, entity.stroke_color)


BEHAVIOR = Behavior(advance=advance, bounding_shape=bounding_shape, draw=draw)
