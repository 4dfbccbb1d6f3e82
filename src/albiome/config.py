from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, List, Optional, Tuple

import yaml

from .errors import InvalidConfiguration

Color = Tuple[int, int, int]

SENSE_VECTOR_SIZE = 4
MOTION_COMMAND_SIZE = 2


@dataclass
class AutotrophConfig:
    count: int = 100
    spawn_spread: float = 1000.0
    max_initial_speed: float = 0.1
    min_random_seed: float = 0.25
    drift_rate: float = 0.005
    body_size: float = 32.0
    trail_spot_range: float = 100.0
    trail_alpha: int = 40
    fill_color: Color = (0x2E, 0x8B, 0x57)
    stroke_color: Color = (0x10, 0x10, 0x10)


@dataclass
class HeterotrophConfig:
    count: int = 10
    spawn_spread: float = 500.0
    min_random_seed: float = 0.25
    initial_energy: float = 1.0
    energy_cost: float = 0.001
    max_speed: float = 1.0
    max_rot_speed: float = 1.0
    rotation_scale: float = 0.01
    body_size: float = 150.0
    network_layers: List[int] = field(default_factory=lambda: [SENSE_VECTOR_SIZE, 2, MOTION_COMMAND_SIZE])
    animation_frames: int = 8
    animation_interval: int = 4
    fill_color: Color = (0xFF, 0xFF, 0xFF)
    stroke_color: Color = (0x10, 0x10, 0x10)


@dataclass
class CanvasConfig:
    width: int = 2000
    height: int = 2000
    background: Color = (0x63, 0x64, 0x63)
    trail_composite_interval: int = 60
    trail_blend_alpha: int = 128
    sprites_dir: Optional[str] = None


@dataclass
class SimulationConfig:
    seed: Optional[int] = None
    spawn_point: Optional[Tuple[float, float]] = None
    fps: int = 60
    show_spawn_marker: bool = True
    log_level: str = "INFO"
    config_version: str = "v1"
    autotroph: AutotrophConfig = field(default_factory=AutotrophConfig)
    heterotroph: HeterotrophConfig = field(default_factory=HeterotrophConfig)
    canvas: CanvasConfig = field(default_factory=CanvasConfig)

    def __post_init__(self) -> None:
        validate_config(self)

    @property
    def resolved_spawn_point(self) -> Tuple[float, float]:
        if self.spawn_point is not None:
            return self.spawn_point
        return (self.canvas.width / 2, self.canvas.height / 2)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text())
        return load_config(data or {})


def _color(value: Any, name: str) -> Color:
    if isinstance(value, str):
        text = value.lstrip("#")
        if len(text) != 6:
            raise InvalidConfiguration(f"{name} must be a #rrggbb string, got {value!r}")
        try:
            return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError as exc:
            raise InvalidConfiguration(f"{name} must be a #rrggbb string, got {value!r}") from exc
    if isinstance(value, (tuple, list)) and len(value) == 3:
        channels = tuple(int(channel) for channel in value)
        if all(0 <= channel <= 255 for channel in channels):
            return channels  # type: ignore[return-value]
    raise InvalidConfiguration(f"{name} must be an RGB triple or #rrggbb string, got {value!r}")


def _build(cls: type, raw: Any, section: str) -> Any:
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise InvalidConfiguration(f"{section} section must be a mapping, got {type(raw).__name__}")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise InvalidConfiguration(f"Unknown {section} keys: {', '.join(unknown)}")
    values = dict(raw)
    for key in ("fill_color", "stroke_color", "background"):
        if key in values:
            values[key] = _color(values[key], f"{section}.{key}")
    return cls(**values)


def load_config(raw: dict) -> SimulationConfig:
    if not isinstance(raw, dict):
        raise InvalidConfiguration("Configuration root must be a mapping")
    nested = {"autotroph", "heterotroph", "canvas"}
    known = {f.name for f in fields(SimulationConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise InvalidConfiguration(f"Unknown configuration keys: {', '.join(unknown)}")

    autotroph = _build(AutotrophConfig, raw.get("autotroph"), "autotroph")
    heterotroph = _build(HeterotrophConfig, raw.get("heterotroph"), "heterotroph")
    canvas = _build(CanvasConfig, raw.get("canvas"), "canvas")
    sim_values = {k: v for k, v in raw.items() if k not in nested}
    spawn = sim_values.get("spawn_point")
    if spawn is not None:
        if not isinstance(spawn, (tuple, list)) or len(spawn) != 2:
            raise InvalidConfiguration(f"spawn_point must be a pair of numbers, got {spawn!r}")
        sim_values["spawn_point"] = (float(spawn[0]), float(spawn[1]))
    return SimulationConfig(autotroph=autotroph, heterotroph=heterotroph, canvas=canvas, **sim_values)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_config(config: SimulationConfig) -> None:
    auto = config.autotroph
    hetero = config.heterotroph
    canvas = config.canvas

    for name, value in (("autotroph.count", auto.count), ("heterotroph.count", hetero.count)):
        if not _is_int(value) or value < 0:
            raise InvalidConfiguration(f"{name} must be a non-negative integer, got {value!r}")
    for name, value in (
        ("canvas.width", canvas.width),
        ("canvas.height", canvas.height),
        ("fps", config.fps),
        ("canvas.trail_composite_interval", canvas.trail_composite_interval),
        ("heterotroph.animation_frames", hetero.animation_frames),
        ("heterotroph.animation_interval", hetero.animation_interval),
    ):
        if not _is_int(value) or value <= 0:
            raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
    for name, value in (
        ("autotroph.body_size", auto.body_size),
        ("heterotroph.body_size", hetero.body_size),
    ):
        if not _is_real(value) or value <= 0:
            raise InvalidConfiguration(f"{name} must be positive, got {value!r}")
    for name, value in (
        ("autotroph.spawn_spread", auto.spawn_spread),
        ("autotroph.max_initial_speed", auto.max_initial_speed),
        ("heterotroph.spawn_spread", hetero.spawn_spread),
        ("heterotroph.energy_cost", hetero.energy_cost),
        ("heterotroph.max_speed", hetero.max_speed),
        ("heterotroph.max_rot_speed", hetero.max_rot_speed),
    ):
        if not _is_real(value) or value < 0:
            raise InvalidConfiguration(f"{name} must be finite and non-negative, got {value!r}")
    for name, value in (("canvas.trail_blend_alpha", canvas.trail_blend_alpha), ("autotroph.trail_alpha", auto.trail_alpha)):
        if not _is_int(value) or not 0 <= value <= 255:
            raise InvalidConfiguration(f"{name} must be an integer in [0, 255], got {value!r}")

    layers = hetero.network_layers
    if not isinstance(layers, (list, tuple)) or len(layers) < 2 or any(not _is_int(size) or size < 1 for size in layers):
        raise InvalidConfiguration(f"heterotroph.network_layers must list at least two positive integers, got {layers!r}")
    if layers[0] != SENSE_VECTOR_SIZE or layers[-1] != MOTION_COMMAND_SIZE:
        raise InvalidConfiguration(
            f"heterotroph.network_layers must start with {SENSE_VECTOR_SIZE} inputs and end with "
            f"{MOTION_COMMAND_SIZE} outputs, got {layers!r}"
        )

    if config.spawn_point is not None:
        if len(config.spawn_point) != 2 or not all(math.isfinite(v) for v in config.spawn_point):
            raise InvalidConfiguration(f"spawn_point must be a finite pair, got {config.spawn_point!r}")
