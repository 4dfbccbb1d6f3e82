from __future__ import annotations

import logging
from time import perf_counter
from typing import List, Optional, Sequence

from pygame.math import Vector2

from ...config import SimulationConfig
from ...errors import InvalidConfiguration
from ...render.canvas import BiomeCanvas
from ...rng import SimulationRng
from ..systems import metrics as metrics_system
from ..types.metrics import TickMetrics
from ..types.snapshot import Snapshot, SnapshotMetadata, SnapshotWorld
from ..utils.geometry import is_finite_point
from .entity import Entity, create_autotroph, create_heterotroph

logger = logging.getLogger("albiome.simulation")

SPAWN_MARKER_RADIUS = 2


class World:
    """Owns the biome population and advances it one tick at a time.

    The host calls :meth:`advance_one_tick` from its frame callback and
    :meth:`register_click` from its input handling; nothing else crosses
    the tick boundary.
    """

    def __init__(self, config: SimulationConfig, canvas: BiomeCanvas, rng: Optional[SimulationRng] = None):
        self._config = config
        self._canvas = canvas
        self._rng = rng or SimulationRng(config.seed)
        self._entities: List[Entity] = []
        self._pending_click: Optional[Vector2] = None
        self._tick = 0
        self._metrics: Optional[TickMetrics] = None
        self._bootstrap_population()

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def canvas(self) -> BiomeCanvas:
        return self._canvas

    @property
    def entities(self) -> List[Entity]:
        return self._entities

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def metrics(self) -> Optional[TickMetrics]:
        return self._metrics

    @property
    def pending_click(self) -> Optional[Vector2]:
        return self._pending_click

    @property
    def selected_entity(self) -> Optional[Entity]:
        for entity in self._entities:
            if entity.selected:
                return entity
        return None

    def reset(self) -> None:
        self._entities.clear()
        self._pending_click = None
        self._tick = 0
        self._metrics = None
        self._rng.reset()
        self._canvas.clear_trail()
        self._canvas.clear()
        self._bootstrap_population()

    def register_click(self, point: Sequence[float]) -> None:
        try:
            finite = is_finite_point(point)
        except TypeError as exc:
            raise InvalidConfiguration(f"Click point must be an (x, y) pair, got {point!r}") from exc
        if not finite:
            raise InvalidConfiguration(f"Click point must be a finite (x, y) pair, got {point!r}")
        self._pending_click = Vector2(float(point[0]), float(point[1]))

    def advance_one_tick(self) -> TickMetrics:
        start = perf_counter()
        canvas = self._canvas
        canvas.clear()
        canvas.composite_trail(opaque=self._tick % self._config.canvas.trail_composite_interval == 0)

        click = self._pending_click
        had_click = click is not None
        if had_click:
            for entity in self._entities:
                entity.set_selected(False)

        selected: Optional[Entity] = None
        for entity in self._entities:
            entity.update()
            if click is not None and entity.check_intersection(click):
                entity.set_selected(True)
                selected = entity
                click = None
                self._pending_click = None

        for entity in self._entities:
            entity.draw(canvas)
        if self._config.show_spawn_marker:
            canvas.draw_circle(self._config.resolved_spawn_point, SPAWN_MARKER_RADIUS)

        if had_click:
            if selected is not None:
                logger.debug("Click selected %s %s at tick %d", selected.kind.value, selected.id, self._tick)
            else:
                logger.debug("Click at tick %d hit no entity", self._tick)
        self._pending_click = None

        duration_ms = (perf_counter() - start) * 1000.0
        resolved = selected is not None
        self._metrics = metrics_system.create_metrics(
            self._tick,
            self._entities,
            selected if resolved else self.selected_entity,
            resolved,
            duration_ms,
        )
        self._tick += 1
        return self._metrics

    def snapshot(self) -> Snapshot:
        spawn_x, spawn_y = self._config.resolved_spawn_point
        return Snapshot(
            tick=self._tick,
            metrics=self._metrics,
            entities=[entity.to_dict() for entity in self._entities],
            world=SnapshotWorld(
                width=self._canvas.width,
                height=self._canvas.height,
                spawn_x=spawn_x,
                spawn_y=spawn_y,
            ),
            metadata=SnapshotMetadata(
                fps=self._config.fps,
                seed=self._config.seed,
                config_version=self._config.config_version,
            ),
        )

    def _bootstrap_population(self) -> None:
        spawn = self._config.resolved_spawn_point
        hetero = self._config.heterotroph
        auto = self._config.autotroph
        for _ in range(hetero.count):
            self._entities.append(create_heterotroph(spawn, hetero, self._rng))
        for _ in range(auto.count):
            self._entities.append(create_autotroph(spawn, auto, self._rng))
        logger.info(
            "Spawned %d heterotrophs and %d autotrophs around (%.1f, %.1f)",
            hetero.count,
            auto.count,
            spawn[0],
            spawn[1],
        )
