from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from ..types.metrics import TickMetrics

if TYPE_CHECKING:
    from ..core.entity import Entity


def create_metrics(
    tick: int,
    entities: Sequence["Entity"],
    selected: Optional["Entity"],
    click_resolved: bool,
    duration_ms: float,
) -> TickMetrics:
    energies = [entity.energy for entity in entities if entity.energy is not None]
    heterotrophs = len(energies)
    return TickMetrics(
        tick=tick,
        population=len(entities),
        heterotrophs=heterotrophs,
        autotrophs=len(entities) - heterotrophs,
        average_energy=sum(energies) / heterotrophs if heterotrophs else 0.0,
        min_energy=min(energies) if energies else 0.0,
        selected_id=selected.id if selected is not None else None,
        click_resolved=click_resolved,
        tick_duration_ms=duration_ms,
    )
