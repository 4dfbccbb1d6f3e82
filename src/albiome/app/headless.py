from __future__ import annotations

import argparse
import csv
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import SimulationConfig
from ..logging_utils import configure_logging
from ..render.canvas import BiomeCanvas
from ..sim.core.world import World
from ..sim.types.metrics import TickMetrics

logger = logging.getLogger("albiome.headless")

_HEADER = [
    "tick",
    "population",
    "heterotrophs",
    "autotrophs",
    "avg_energy",
    "min_energy",
    "selected",
    "tick_ms",
]

ScheduledClick = Tuple[int, float, float]
_STAT_KEYS = ("min", "max", "avg", "p50", "p90", "p99")


def _format_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.population,
        metrics.heterotrophs,
        metrics.autotrophs,
        f"{metrics.average_energy:.6f}",
        f"{metrics.min_energy:.6f}",
        metrics.selected_id or "",
        f"{tick_ms:.3f}",
    ]


def _summary_stats(values: Sequence[float]) -> Dict[str, float]:
    if not values:
        return dict.fromkeys(_STAT_KEYS, 0.0)
    series = np.asarray(values, dtype=np.float64)
    p50, p90, p99 = np.percentile(series, [50, 90, 99])
    return {
        "min": float(series.min()),
        "max": float(series.max()),
        "avg": float(series.mean()),
        "p50": float(p50),
        "p90": float(p90),
        "p99": float(p99),
    }


def run_headless(
    steps: int,
    seed: Optional[int],
    log_path: Optional[Path],
    deterministic_log: bool = False,
    config_path: Optional[Path] = None,
    summary_path: Optional[Path] = None,
    clicks: Sequence[ScheduledClick] = (),
) -> World:
    config = SimulationConfig.from_yaml(config_path) if config_path else SimulationConfig()
    if seed is not None:
        config.seed = seed
    canvas = BiomeCanvas.from_config(config.canvas)
    world = World(config, canvas)

    clicks_by_tick: Dict[int, List[Tuple[float, float]]] = {}
    for tick, x, y in clicks:
        clicks_by_tick.setdefault(int(tick), []).append((x, y))

    writer = None
    csv_file = None
    if log_path:
        csv_file = Path(log_path).open("w", newline="")
        writer = csv.writer(csv_file)
        writer.writerow(_HEADER)

    tick_ms_series: list[float] = []
    energy_series: list[float] = []
    selections: list[dict[str, object]] = []

    logger.info("Running %d headless ticks (seed=%s)", steps, config.seed)
    try:
        for tick in range(steps):
            for point in clicks_by_tick.get(tick, []):
                world.register_click(point)
            metrics = world.advance_one_tick()
            tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
            tick_ms_series.append(tick_ms)
            energy_series.append(metrics.average_energy)
            if metrics.click_resolved:
                selections.append({"tick": metrics.tick, "id": metrics.selected_id})
            if writer:
                writer.writerow(_format_row(metrics, tick_ms))
    finally:
        if csv_file:
            csv_file.close()

    if summary_path:
        summary = {
            "steps": steps,
            "seed": config.seed,
            "deterministic_log": deterministic_log,
            "population": len(world.entities),
            "tick_ms": _summary_stats(tick_ms_series),
            "average_energy": _summary_stats(energy_series),
            "selections": selections,
        }
        Path(summary_path).write_text(json.dumps(summary, indent=2))
    logger.info("Headless run finished after %d ticks", world.tick)
    return world


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Headless biome simulation")
    parser.add_argument("--steps", type=int, default=600)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write metrics")
    parser.add_argument("--summary", type=Path, default=None, help="Optional JSON file with run summary.")
    parser.add_argument(
        "--click",
        nargs=3,
        type=float,
        action="append",
        default=[],
        metavar=("TICK", "X", "Y"),
        help="Register a click at canvas point (X, Y) before the given tick. May repeat.",
    )
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write tick_ms as 0.000 so logs of seeded runs can be diffed.",
    )
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    run_headless(
        args.steps,
        args.seed,
        args.log,
        deterministic_log=args.deterministic_log,
        config_path=args.config,
        summary_path=args.summary,
        clicks=[(int(tick), x, y) for tick, x, y in args.click],
    )


if __name__ == "__main__":
    main()
