from __future__ import annotations

import math
from typing import TYPE_CHECKING, List

from pygame.math import Vector2

from ...config import MOTION_COMMAND_SIZE, SENSE_VECTOR_SIZE
from ...errors import InvalidConfiguration
from ..ann.network import Network
from ..types.behavior import Behavior
from ..utils.geometry import rotate_point

if TYPE_CHECKING:
    from ...render.canvas import BiomeCanvas
    from ..core.entity import Entity

# Body half-thickness relative to half the body length.
THICKNESS_RATIO = 0.75 / 2
SLOW_SPEED_RATIO = 0.1


def validate_network(network: Network) -> None:
    if network.input_size != SENSE_VECTOR_SIZE or network.output_size != MOTION_COMMAND_SIZE:
        raise InvalidConfiguration(
            f"Heterotroph network must map {SENSE_VECTOR_SIZE} senses to {MOTION_COMMAND_SIZE} "
            f"commands, got {network.input_size} -> {network.output_size}"
        )


def sense(entity: "Entity") -> List[float]:
    rng = entity.rng
    return [entity.body.energy, rng.next_signed(), rng.next_signed(), rng.next_signed()]


def advance(entity: "Entity") -> None:
    body = entity.body
    config = body.config
    speed_factor, angle_factor = body.network.predict(sense(entity))

    body.angle += config.rotation_scale * config.max_rot_speed * angle_factor
    body.speed = config.max_speed * speed_factor
    entity.position.x += math.cos(body.angle) * body.speed
    entity.position.y += math.sin(body.angle) * body.speed
    body.energy -= config.energy_cost * abs(body.speed)

    if entity.step % config.animation_interval == 0 and abs(body.speed) > config.max_speed * SLOW_SPEED_RATIO:
        body.animation_frame = (body.animation_frame + 1) % config.animation_frames


def bounding_shape(entity: "Entity") -> List[Vector2]:
    body = entity.body
    length = body.config.body_size
    half_thickness = length / 2 * THICKNESS_RATIO
    origin = entity.position
    corners = (
        (origin.x - length, origin.y - half_thickness),
        (origin.x, origin.y - half_thickness),
        (origin.x, origin.y + half_thickness),
        (origin.x - length, origin.y + half_thickness),
    )
    return [rotate_point(corner, origin, body.angle) for corner in corners]


def sprite_variant(entity: "Entity") -> int:
    return 1 if entity.body.random_seed > 0.5 else 2


def draw(entity: "Entity", canvas: "BiomeCanvas") -> None:
    body = entity.body
    length = body.config.body_size
    sprite = canvas.sprites.infusoria_frame(sprite_variant(entity), body.animation_frame)
    if sprite is not None:
        wobble = 10 * math.sin(entity.step / 20 * body.random_seed)
        drawn_length = length + wobble
        # The body trails behind the position along the heading.
        center = rotate_point((entity.position.x - drawn_length / 2, entity.position.y), entity.position, body.angle)
        canvas.draw_sprite(sprite, center, body.angle, (drawn_length, length))
        return
    if entity.bounding_shape:
        canvas.draw_polygon(entity.bounding_shape, entity.fill_color, entity.stroke_color)
        canvas.draw_circle(entity.position, length / 2 * THICKNESS_RATIO / 2, entity.stroke_color, None)


BEHAVIOR = Behavior(advance=advance, bounding_shape=bounding_shape, draw=draw)
