from __future__ import annotations

import pytest
from pygame.math import Vector2

from albiome.config import AutotrophConfig, HeterotrophConfig
from albiome.errors import InvalidConfiguration
from albiome.render.canvas import BiomeCanvas
from albiome.rng import SimulationRng
from albiome.sim.core.entity import (
    AutotrophBody,
    Entity,
    EntityKind,
    create_autotroph,
    create_heterotroph,
)


def _still_autotroph(position=(50.0, 50.0)) -> Entity:
    return Entity(
        kind=EntityKind.AUTOTROPH,
        position=position,
        body=AutotrophBody(
            config=AutotrophConfig(),
            random_seed=0.5,
            angle=0.0,
            speed=0.0,
            type=9,
            size_factor=1.0,
        ),
        rng=SimulationRng(1),
    )


@pytest.mark.parametrize(
    "position",
    [None, (float("nan"), 1.0), (1.0, float("inf")), (1.0,), (1.0, 2.0, 3.0), ("a", 1.0), 5],
)
def test_construction_rejects_unusable_positions(position):
    with pytest.raises(InvalidConfiguration):
        create_autotroph(position, AutotrophConfig(), SimulationRng(1))
    with pytest.raises(InvalidConfiguration):
        create_heterotroph(position, HeterotrophConfig(), SimulationRng(1))


def test_kind_and_body_must_agree():
    with pytest.raises(InvalidConfiguration):
        Entity(
            kind=EntityKind.HETEROTROPH,
            position=(0.0, 0.0),
            body=_still_autotroph().body,
            rng=SimulationRng(1),
        )


def test_new_entities_start_unselected_with_step_zero_and_unique_ids():
    rng = SimulationRng(4)
    entities = [create_autotroph((0.0, 0.0), AutotrophConfig(), rng) for _ in range(5)]
    entities += [create_heterotroph((0.0, 0.0), HeterotrophConfig(), rng) for _ in range(5)]

    assert len({entity.id for entity in entities}) == len(entities)
    assert all(entity.step == 0 for entity in entities)
    assert not any(entity.selected for entity in entities)
    assert all(entity.bounding_shape == [] for entity in entities)


def test_intersection_before_first_update_is_false():
    entity = _still_autotroph()
    assert not entity.check_intersection((50.0, 50.0))


def test_update_advances_step_and_refreshes_shape():
    entity = _still_autotroph()
    entity.update()
    assert entity.step == 1
    assert len(entity.bounding_shape) == 4
    assert entity.check_intersection((50.0, 50.0))
    assert not entity.check_intersection((80.0, 80.0))

    entity.position = Vector2(200.0, 200.0)
    entity.update()
    assert entity.step == 2
    assert entity.check_intersection((200.0, 200.0))
    assert not entity.check_intersection((50.0, 50.0))


def test_set_selected_is_a_plain_setter():
    entity = _still_autotroph()
    entity.set_selected(True)
    assert entity.selected
    entity.set_selected(False)
    assert not entity.selected


def test_colors_come_from_config_or_override():
    config = AutotrophConfig(fill_color=(1, 2, 3), stroke_color=(4, 5, 6))
    default = create_autotroph((0.0, 0.0), config, SimulationRng(1))
    custom = create_autotroph((0.0, 0.0), config, SimulationRng(1), fill_color=(9, 9, 9))
    assert default.fill_color == (1, 2, 3)
    assert default.stroke_color == (4, 5, 6)
    assert custom.fill_color == (9, 9, 9)


def test_selected_entity_draws_its_outline():
    canvas = BiomeCanvas(100, 100, background=(0, 0, 0))
    entity = _still_autotroph()
    entity.update()

    canvas.clear()
    entity.draw(canvas)
    unselected = canvas.get_pixel(34, 50)

    entity.set_selected(True)
    canvas.clear()
    entity.draw(canvas)
    selected = canvas.get_pixel(34, 50)

    assert selected[1] > unselected[1]


def test_to_dict_reports_kind_specific_fields():
    rng = SimulationRng(2)
    autotroph = create_autotroph((0.0, 0.0), AutotrophConfig(), rng)
    heterotroph = create_heterotroph((0.0, 0.0), HeterotrophConfig(), rng)
    heterotroph.update()

    auto_payload = autotroph.to_dict()
    hetero_payload = heterotroph.to_dict()

    assert auto_payload["kind"] == "autotroph"
    assert "type" in auto_payload and "energy" not in auto_payload
    assert hetero_payload["kind"] == "heterotroph"
    assert hetero_payload["energy"] == heterotroph.energy
    assert len(hetero_payload["bounding_shape"]) == 4
