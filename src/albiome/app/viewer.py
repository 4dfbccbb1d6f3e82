from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import Optional, Sequence, Tuple

import pygame

from ..config import SimulationConfig
from ..logging_utils import configure_logging
from ..render.canvas import BiomeCanvas
from ..sim.core.world import World

logger = logging.getLogger("albiome.viewer")

WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 800
SELECT_BUTTON = 1
PAN_BUTTON = 2
ZOOM_STEP = 0.1
MIN_SCALE = 0.1
MAX_SCALE = 5.0


class BiomeViewer:
    """pygame window hosting one world.

    Left click selects, middle drag pans and the wheel zooms around the
    cursor. ``camera_offset`` is the canvas point shown at the window's top
    left corner and ``scale`` is screen pixels per canvas pixel.
    """

    def __init__(self, config: SimulationConfig, window_size: Tuple[int, int] = (WINDOW_WIDTH, WINDOW_HEIGHT)):
        pygame.init()
        pygame.display.set_caption("ALBiome")
        self.screen = pygame.display.set_mode(window_size)
        self.clock = pygame.time.Clock()
        self.config = config
        self.world = World(config, BiomeCanvas.from_config(config.canvas))
        self.window_size = window_size
        self.scale = 1.0
        spawn_x, spawn_y = config.resolved_spawn_point
        self.camera_offset = pygame.Vector2(spawn_x - window_size[0] / 2, spawn_y - window_size[1] / 2)
        self.is_panning = False
        self.pan_start_mouse = pygame.Vector2()
        self.pan_start_camera = pygame.Vector2()
        self.running = True

    def screen_to_canvas(self, position: Sequence[float]) -> pygame.Vector2:
        return pygame.Vector2(position[0], position[1]) / self.scale + self.camera_offset

    def zoom(self, steps: float, anchor: Sequence[float]) -> bool:
        """Change scale by one step in the direction of ``steps``, keeping ``anchor`` fixed on screen."""
        direction = max(-1.0, min(1.0, float(steps)))
        new_scale = self.scale + direction * ZOOM_STEP
        if not MIN_SCALE < new_scale < MAX_SCALE:
            return False
        pinned = self.screen_to_canvas(anchor)
        self.scale = new_scale
        self.camera_offset = pinned - pygame.Vector2(anchor[0], anchor[1]) / new_scale
        return True

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.type == pygame.MOUSEWHEEL:
            if event.y:
                self.zoom(event.y, pygame.mouse.get_pos())
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == PAN_BUTTON:
            self.is_panning = True
            self.pan_start_mouse = pygame.Vector2(event.pos)
            self.pan_start_camera = pygame.Vector2(self.camera_offset)
        elif event.type == pygame.MOUSEBUTTONUP and event.button == PAN_BUTTON:
            self.is_panning = False
        elif event.type == pygame.MOUSEBUTTONUP and event.button == SELECT_BUTTON:
            self.world.register_click(self.screen_to_canvas(event.pos))
        elif event.type == pygame.MOUSEMOTION and self.is_panning:
            drag = pygame.Vector2(event.pos) - self.pan_start_mouse
            self.camera_offset = self.pan_start_camera - drag / self.scale

    def _blit_view(self) -> None:
        surface = self.world.canvas.surface
        offset = self.camera_offset
        visible = pygame.Rect(
            math.floor(offset.x),
            math.floor(offset.y),
            math.ceil(self.window_size[0] / self.scale) + 1,
            math.ceil(self.window_size[1] / self.scale) + 1,
        ).clip(surface.get_rect())
        if visible.width == 0 or visible.height == 0:
            return
        region = surface.subsurface(visible)
        if self.scale != 1.0:
            size = (max(1, round(visible.width * self.scale)), max(1, round(visible.height * self.scale)))
            region = pygame.transform.smoothscale(region, size)
        self.screen.blit(region, ((visible.x - offset.x) * self.scale, (visible.y - offset.y) * self.scale))

    def frame(self) -> None:
        for event in pygame.event.get():
            self.handle_event(event)
        self.world.advance_one_tick()
        self.screen.fill(self.config.canvas.background)
        self._blit_view()
        pygame.display.flip()
        self.clock.tick(self.config.fps)

    def run(self, max_frames: Optional[int] = None) -> None:
        frames = 0
        try:
            while self.running and (max_frames is None or frames < max_frames):
                self.frame()
                frames += 1
        finally:
            pygame.quit()
        logger.info("Viewer closed after %d frames", frames)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Interactive biome viewer")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--sprites", type=Path, default=None, help="Directory holding diatom/ and infusoria_frames/")
    args = parser.parse_args(argv)

    config = SimulationConfig.from_yaml(args.config) if args.config else SimulationConfig()
    if args.seed is not None:
        config.seed = args.seed
    if args.sprites is not None:
        config.canvas.sprites_dir = str(args.sprites)
    configure_logging(config.log_level)
    BiomeViewer(config).run()


if __name__ == "__main__":
    main()
