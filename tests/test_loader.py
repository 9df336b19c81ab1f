"""Tests for world definition loading."""

import json
from pathlib import Path

import pytest

from realms.engine.loader import (
    UnknownPackError,
    WorldDefinitionError,
    available_packs,
    load_pack,
    load_world_definition,
    parse_world_definition,
)
from realms.engine.world import WorldDefinition, build_world


def _minimal(**overrides) -> dict:
    data = {
        "currencyName": "Shells",
        "startRoom": "beach",
        "welcomeMessage": "Hello.",
        "rooms": [
            {"id": "beach", "name": "Beach", "description": "Sand.",
             "exits": {"north": "dunes"}},
            {"id": "dunes", "name": "Dunes", "description": "More sand.",
             "exits": {"south": "beach"},
             "items": [{"name": "Shell", "type": "treasure", "value": 3}],
             "enemies": [{"name": "Crab", "level": 1, "hp": 10, "damage": 2,
                          "xpReward": 5, "goldReward": 1}]},
        ],
    }
    data.update(overrides)
    return data


def test_loads_rooms(definition: WorldDefinition):
    """The fantasy pack defines the town and the forest."""
    ids = [room.id for room in definition.rooms]
    assert ids[0] == "town_square"
    assert "cave_entrance" in ids
    assert definition.start_room == "town_square"
    assert definition.currency_name == "Gold"


def test_respawn_room(definition: WorldDefinition):
    assert definition.respawn_room_id == "town_square"


def test_respawn_defaults_to_start():
    definition = parse_world_definition(_minimal())
    assert definition.respawn_room_id == "beach"


def test_parses_items_and_enemies():
    definition = parse_world_definition(_minimal())
    dunes = definition.rooms[1]
    assert dunes.items[0].name == "Shell"
    assert dunes.items[0].effect is None
    assert dunes.enemies[0].xp_reward == 5
    assert dict(dunes.exits) == {"south": "beach"}


def test_missing_rooms_rejected():
    data = _minimal()
    del data["rooms"]
    with pytest.raises(WorldDefinitionError, match="rooms"):
        parse_world_definition(data)


@pytest.mark.parametrize(
    "rooms",
    [
        [],
        "beach",
        [{"name": "No id"}],
        [{"id": "beach", "exits": {"up": "beach"}}],
        [{"id": "beach", "exits": {"north": "nowhere"}}],
        [{"id": "beach"}, {"id": "beach"}],
        [{"id": "beach", "enemies": [{"name": "Crab"}]}],
    ],
)
def test_malformed_rooms_rejected(rooms):
    with pytest.raises(WorldDefinitionError):
        parse_world_definition(_minimal(rooms=rooms))


def test_unknown_start_room_rejected():
    with pytest.raises(WorldDefinitionError, match="start room"):
        parse_world_definition(_minimal(startRoom="lighthouse"))


def test_unknown_respawn_room_rejected():
    with pytest.raises(WorldDefinitionError, match="respawn room"):
        parse_world_definition(_minimal(respawnRoom="lighthouse"))


def test_load_world_definition_from_file(tmp_path: Path):
    path = tmp_path / "beach.json"
    path.write_text(json.dumps(_minimal()))
    definition = load_world_definition(path)
    assert definition.currency_name == "Shells"


def test_available_packs():
    ids = {pack.id for pack in available_packs()}
    assert {"fantasy", "cyberpunk"} <= ids


def test_unknown_pack():
    with pytest.raises(UnknownPackError):
        load_pack("westerns")


def test_build_world_is_independent(definition: WorldDefinition):
    """Two worlds from one definition never share mutable rooms or enemies."""
    first = build_world(definition)
    second = build_world(definition)

    first.rooms["market"].items.clear()
    first.rooms["forest_path"].enemies[0].hp = 1

    assert second.rooms["market"].items[0].name == "Apple"
    assert second.rooms["forest_path"].enemies[0].hp == 30
    assert definition.rooms[1].items[0].name == "Apple"
