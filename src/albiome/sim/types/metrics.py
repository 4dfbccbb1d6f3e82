from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class TickMetrics:
    tick: int
    population: int
    heterotrophs: int
    autotrophs: int
    average_energy: float
    min_energy: float
    selected_id: Optional[str] = None
    click_resolved: bool = False
    tick_duration_ms: float = 0.0
