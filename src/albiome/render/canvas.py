from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import pygame

from ..config import CanvasConfig, Color
from .sprites import SpriteBank

RGBA = Tuple[int, int, int, int]

SELECTION_COLOR: RGBA = (0x00, 0xFF, 0x00, 0x40)


class BiomeCanvas:
    """Drawing surface for the biome plus a persistent trail buffer.

    ``surface`` is redrawn from scratch every tick. ``trail`` keeps the faint
    pixels entities leave behind and is composited onto ``surface`` before
    the fresh draws of each tick.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background: Color = (0x63, 0x64, 0x63),
        trail_blend_alpha: int = 128,
        sprites: Optional[SpriteBank] = None,
    ):
        self._width = int(width)
        self._height = int(height)
        self._background = pygame.Color(*background)
        self._trail_blend_alpha = trail_blend_alpha
        self.surface = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        self.trail = pygame.Surface((self._width, self._height), pygame.SRCALPHA)
        self.trail.fill((0, 0, 0, 0))
        self.sprites = sprites or SpriteBank.empty()

    @classmethod
    def from_config(cls, config: CanvasConfig, sprites: Optional[SpriteBank] = None) -> "BiomeCanvas":
        if sprites is None and config.sprites_dir:
            sprites = SpriteBank.from_directory(config.sprites_dir)
        return cls(
            config.width,
            config.height,
            background=config.background,
            trail_blend_alpha=config.trail_blend_alpha,
            sprites=sprites,
        )

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def clear(self) -> None:
        self.surface.fill(self._background)

    def clear_trail(self) -> None:
        self.trail.fill((0, 0, 0, 0))

    def composite_trail(self, opaque: bool) -> None:
        self.trail.set_alpha(255 if opaque else self._trail_blend_alpha)
        self.surface.blit(self.trail, (0, 0))
        self.trail.set_alpha(None)

    def set_trail_pixel(self, x: float, y: float, rgba: RGBA) -> bool:
        """Paint one trail pixel; coordinates off the buffer are ignored."""
        if not (math.isfinite(x) and math.isfinite(y)):
            return False
        px = int(math.floor(x + 0.5))
        py = int(math.floor(y + 0.5))
        if not (0 <= px < self._width and 0 <= py < self._height):
            return False
        self.trail.set_at((px, py), rgba)
        return True

    def get_trail_pixel(self, x: int, y: int) -> RGBA:
        return tuple(self.trail.get_at((int(x), int(y))))  # type: ignore[return-value]

    def get_pixel(self, x: int, y: int) -> RGBA:
        return tuple(self.surface.get_at((int(x), int(y))))  # type: ignore[return-value]

    def draw_circle(
        self,
        center: Sequence[float],
        radius: float,
        fill: Sequence[int] = (0xFF, 0x00, 0x00),
        stroke: Optional[Sequence[int]] = (0xFF, 0x00, 0x00),
    ) -> None:
        position = (center[0], center[1])
        pygame.draw.circle(self.surface, fill, position, radius)
        if stroke is not None:
            pygame.draw.circle(self.surface, stroke, position, radius, width=1)

    def draw_polygon(
        self,
        points: Sequence[Sequence[float]],
        fill: Sequence[int],
        stroke: Optional[Sequence[int]] = None,
    ) -> None:
        if len(points) < 3:
            return
        vertices = [(p[0], p[1]) for p in points]
        pygame.draw.polygon(self.surface, fill, vertices)
        if stroke is not None:
            pygame.draw.polygon(self.surface, stroke, vertices, width=1)

    def draw_outline(self, points: Sequence[Sequence[float]], color: Sequence[int] = SELECTION_COLOR) -> None:
        if len(points) < 2:
            return
        vertices = [(p[0], p[1]) for p in points]
        if len(color) == 4 and color[3] < 255:
            # pygame.draw writes alpha verbatim, so blend through a layer around the shape.
            left = int(math.floor(min(v[0] for v in vertices))) - 1
            top = int(math.floor(min(v[1] for v in vertices))) - 1
            right = int(math.ceil(max(v[0] for v in vertices))) + 2
            bottom = int(math.ceil(max(v[1] for v in vertices))) + 2
            layer = pygame.Surface((right - left, bottom - top), pygame.SRCALPHA)
            local = [(x - left, y - top) for x, y in vertices]
            pygame.draw.lines(layer, color, True, local)
            self.surface.blit(layer, (left, top))
        else:
            pygame.draw.lines(self.surface, color, True, vertices)

    def draw_line(self, start: Sequence[float], end: Sequence[float], color: Sequence[int]) -> None:
        pygame.draw.line(self.surface, color, (start[0], start[1]), (end[0], end[1]))

    def draw_sprite(
        self,
        image: pygame.Surface,
        center: Sequence[float],
        angle: float,
        size: Tuple[float, float],
    ) -> None:
        """Blit ``image`` scaled to ``size`` and rotated by ``angle`` radians about ``center``."""
        width = max(1, int(round(size[0])))
        height = max(1, int(round(size[1])))
        scaled = pygame.transform.scale(image, (width, height))
        rotated = pygame.transform.rotate(scaled, -math.degrees(angle))
        rect = rotated.get_rect(center=(int(round(center[0])), int(round(center[1]))))
        self.surface.blit(rotated, rect)
