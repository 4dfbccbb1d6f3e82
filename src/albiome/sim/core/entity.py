from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Union

from pygame.math import Vector2

from ...config import AutotrophConfig, Color, HeterotrophConfig
from ...errors import InvalidConfiguration
from ...rng import SimulationRng
from ..ann.network import Network
from ..systems import autotroph as autotroph_system
from ..systems import heterotroph as heterotroph_system
from ..types.behavior import Behavior
from ..utils.geometry import is_point_inside_polygon

if TYPE_CHECKING:
    from ...render.canvas import BiomeCanvas

DEFAULT_FILL_COLOR: Color = (0xFF, 0xFF, 0xFF)
DEFAULT_STROKE_COLOR: Color = (0x10, 0x10, 0x10)


class EntityKind(str, Enum):
    AUTOTROPH = "autotroph"
    HETEROTROPH = "heterotroph"


@dataclass(slots=True)
class AutotrophBody:
    config: AutotrophConfig
    random_seed: float
    angle: float
    speed: float
    type: int
    size_factor: float


@dataclass(slots=True)
class HeterotrophBody:
    config: HeterotrophConfig
    random_seed: float
    network: Network
    energy: float = 1.0
    angle: float = 0.0
    speed: float = 0.0
    animation_frame: int = 0


Body = Union[AutotrophBody, HeterotrophBody]

_BEHAVIORS: Dict[EntityKind, Behavior] = {
    EntityKind.AUTOTROPH: autotroph_system.BEHAVIOR,
    EntityKind.HETEROTROPH: heterotroph_system.BEHAVIOR,
}


def coerce_position(value: Any) -> Vector2:
    if value is None:
        raise InvalidConfiguration("Entity position is required")
    try:
        if len(value) != 2:
            raise InvalidConfiguration(f"Entity position must be an (x, y) pair, got {value!r}")
        x = float(value[0])
        y = float(value[1])
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"Entity position must be an (x, y) pair of numbers, got {value!r}") from exc
    if not (math.isfinite(x) and math.isfinite(y)):
        raise InvalidConfiguration(f"Entity position must be finite, got ({x}, {y})")
    return Vector2(x, y)


@dataclass(slots=True)
class Entity:
    kind: EntityKind
    position: Vector2
    body: Body
    rng: SimulationRng
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    step: int = 0
    bounding_shape: List[Vector2] = field(default_factory=list)
    selected: bool = False
    fill_color: Color = DEFAULT_FILL_COLOR
    stroke_color: Color = DEFAULT_STROKE_COLOR

    def __post_init__(self) -> None:
        self.position = coerce_position(self.position)
        expected = AutotrophBody if self.kind is EntityKind.AUTOTROPH else HeterotrophBody
        if not isinstance(self.body, expected):
            raise InvalidConfiguration(f"{self.kind.value} entity needs a {expected.__name__}")

    @property
    def angle(self) -> float:
        return self.body.angle

    @property
    def speed(self) -> float:
        return self.body.speed

    @property
    def energy(self) -> Optional[float]:
        if isinstance(self.body, HeterotrophBody):
            return self.body.energy
        return None

    def update(self) -> None:
        behavior = _BEHAVIORS[self.kind]
        self.step += 1
        behavior.advance(self)
        self.bounding_shape = behavior.bounding_shape(self)

    def check_intersection(self, point: Sequence[float]) -> bool:
        # An entity that was never updated has no shape to hit.
        if not self.bounding_shape:
            return False
        return is_point_inside_polygon(point, self.bounding_shape)

    def set_selected(self, selected: bool) -> None:
        self.selected = bool(selected)

    def draw(self, canvas: "BiomeCanvas") -> None:
        _BEHAVIORS[self.kind].draw(self, canvas)
        if self.selected and self.bounding_shape:
            canvas.draw_outline(self.bounding_shape)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "step": self.step,
            "x": self.position.x,
            "y": self.position.y,
            "angle": self.body.angle,
            "speed": self.body.speed,
            "selected": self.selected,
            "bounding_shape": [[p.x, p.y] for p in self.bounding_shape],
        }
        if isinstance(self.body, HeterotrophBody):
            payload["energy"] = self.body.energy
            payload["animation_frame"] = self.body.animation_frame
        else:
            payload["type"] = self.body.type
            payload["size_factor"] = self.body.size_factor
        return payload


def create_autotroph(
    position: Sequence[float],
    config: AutotrophConfig,
    rng: SimulationRng,
    fill_color: Optional[Color] = None,
    stroke_color: Optional[Color] = None,
) -> Entity:
    origin = coerce_position(position)
    random_seed = max(config.min_random_seed, rng.next_float())
    autotroph_type = autotroph_system.derive_type(random_seed)
    body = AutotrophBody(
        config=config,
        random_seed=random_seed,
        angle=rng.next_angle(),
        speed=config.max_initial_speed * rng.next_float(),
        type=autotroph_type,
        size_factor=autotroph_system.derive_size_factor(autotroph_type),
    )
    origin.x += rng.next_offset(config.spawn_spread)
    origin.y += rng.next_offset(config.spawn_spread)
    return Entity(
        kind=EntityKind.AUTOTROPH,
        position=origin,
        body=body,
        rng=rng,
        fill_color=fill_color or config.fill_color,
        stroke_color=stroke_color or config.stroke_color,
    )


def create_heterotroph(
    position: Sequence[float],
    config: HeterotrophConfig,
    rng: SimulationRng,
    network: Optional[Network] = None,
    fill_color: Optional[Color] = None,
    stroke_color: Optional[Color] = None,
) -> Entity:
    origin = coerce_position(position)
    if network is None:
        network = Network(config.network_layers, rng=rng)
    heterotroph_system.validate_network(network)
    body = HeterotrophBody(
        config=config,
        random_seed=max(config.min_random_seed, rng.next_float()),
        network=network,
        energy=config.initial_energy,
        angle=rng.next_angle(),
    )
    origin.x += rng.next_offset(config.spawn_spread)
    origin.y += rng.next_offset(config.spawn_spread)
    return Entity(
        kind=EntityKind.HETEROTROPH,
        position=origin,
        body=body,
        rng=rng,
        fill_color=fill_color or config.fill_color,
        stroke_color=stroke_color or config.stroke_color,
    )
