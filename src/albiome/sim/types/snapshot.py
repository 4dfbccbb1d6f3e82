from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .metrics import TickMetrics


@dataclass(slots=True)
class Snapshot:
    tick: int
    metrics: Optional[TickMetrics]
    entities: List[Dict[str, Any]]
    world: "SnapshotWorld"
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotWorld:
    width: int
    height: int
    spawn_x: float
    spawn_y: float


@dataclass(slots=True)
class SnapshotMetadata:
    fps: int
    seed: Optional[int]
    config_version: str
