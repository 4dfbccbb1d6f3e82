from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, NamedTuple

from pygame.math import Vector2

if TYPE_CHECKING:
    from ...render.canvas import BiomeCanvas
    from ..core.entity import Entity


class Behavior(NamedTuple):
    advance: Callable[["Entity"], None]
    bounding_shape: Callable[["Entity"], List[Vector2]]
    draw: Callable[["Entity", "BiomeCanvas"], None]
