import csv
import json

import pytest

from albiome.app.headless import main, run_headless

SMALL_CONFIG = """\
show_spawn_marker: false
canvas:
  width: 400
  height: 400
heterotroph:
  count: 2
  spawn_spread: 0
  body_size: 60
autotroph:
  count: 3
  spawn_spread: 0
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "small.yaml"
    path.write_text(SMALL_CONFIG)
    return path


def _read_csv(path):
    with path.open(newline="") as handle:
        return list(csv.reader(handle))


def test_headless_log_header_and_rows(tmp_path, config_path):
    log_path = tmp_path / "run.csv"
    world = run_headless(steps=3, seed=1, log_path=log_path, deterministic_log=True, config_path=config_path)

    rows = _read_csv(log_path)
    assert rows[0] == [
        "tick",
        "population",
        "heterotrophs",
        "autotrophs",
        "avg_energy",
        "min_energy",
        "selected",
        "tick_ms",
    ]
    assert len(rows) == 4
    assert [row[0] for row in rows[1:]] == ["0", "1", "2"]
    assert all(row[1:4] == ["5", "2", "3"] for row in rows[1:])
    assert all(row[-1] == "0.000" for row in rows[1:])
    assert world.tick == 3


def test_seeded_deterministic_logs_are_identical(tmp_path, config_path):
    first = tmp_path / "a.csv"
    second = tmp_path / "b.csv"
    run_headless(steps=20, seed=7, log_path=first, deterministic_log=True, config_path=config_path)
    run_headless(steps=20, seed=7, log_path=second, deterministic_log=True, config_path=config_path)
    assert first.read_text() == second.read_text()


def test_scheduled_click_selects_entity(tmp_path, config_path):
    log_path = tmp_path / "click.csv"
    summary_path = tmp_path / "summary.json"
    world = run_headless(
        steps=3,
        seed=3,
        log_path=log_path,
        deterministic_log=True,
        config_path=config_path,
        summary_path=summary_path,
        clicks=[(1, 200.0, 200.0)],
    )

    selected = world.selected_entity
    assert selected is not None
    rows = _read_csv(log_path)
    assert rows[1][6] == ""
    assert rows[2][6] == selected.id
    assert rows[3][6] == selected.id

    payload = json.loads(summary_path.read_text())
    assert payload["selections"] == [{"tick": 1, "id": selected.id}]


def test_headless_summary_output(tmp_path, config_path):
    summary_path = tmp_path / "summary.json"
    run_headless(
        steps=4,
        seed=3,
        log_path=None,
        deterministic_log=True,
        config_path=config_path,
        summary_path=summary_path,
    )
    payload = json.loads(summary_path.read_text())
    assert payload["steps"] == 4
    assert payload["seed"] == 3
    assert payload["population"] == 5
    assert payload["tick_ms"]["max"] == 0.0
    assert set(payload["average_energy"]) == {"min", "max", "avg", "p50", "p90", "p99"}
    assert payload["average_energy"]["max"] <= 1.0


def test_main_parses_clicks(tmp_path, config_path):
    log_path = tmp_path / "cli.csv"
    main(
        [
            "--steps",
            "2",
            "--seed",
            "4",
            "--config",
            str(config_path),
            "--log",
            str(log_path),
            "--deterministic-log",
            "--click",
            "0",
            "200",
            "200",
        ]
    )
    rows = _read_csv(log_path)
    assert len(rows) == 3
    assert rows[1][6] != ""
