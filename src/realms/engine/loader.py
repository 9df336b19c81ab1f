"""Load world definitions from content-pack JSON files.

A content pack looks like::

    {
      "id": "fantasy", "name": "Shadow Realms", "description": "...",
      "currencyName": "Gold", "startRoom": "town_square",
      "welcomeMessage": "...", "respawnRoom": "town_square",
      "rooms": [
        {"id": "market", "name": "Marketplace", "description": "...",
         "exits": {"south": "town_square"},
         "items": [{"name": "Apple", "type": "food", "effect": "heal", "value": 5}],
         "enemies": [{"name": "Wolf", "level": 1, "hp": 30, "damage": 8,
                      "xpReward": 20, "goldReward": 5}]}
      ]
    }

``respawnRoom`` is optional and falls back to ``startRoom``.
"""

import json
from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from .world import DIRECTIONS, EnemyTemplate, Item, RoomTemplate, WorldDefinition

PACKAGE_DATA = "realms.data"
DEFAULT_PACK = "fantasy"


class WorldDefinitionError(ValueError):
    """Raised when a world definition is malformed."""


class UnknownPackError(LookupError):
    """Raised when a content pack id has no bundled definition."""


@dataclass(frozen=True)
class PackInfo:
    id: str
    name: str
    description: str


def _require(data: dict, key: str, where: str):
    if key not in data:
        raise WorldDefinitionError(f"{where}: missing '{key}'")
    return data[key]


def _parse_item(data: dict, where: str) -> Item:
    if not isinstance(data, dict) or "name" not in data:
        raise WorldDefinitionError(f"{where}: item needs a name")
    return Item.from_dict(data)


def _parse_enemy(data: dict, where: str) -> EnemyTemplate:
    if not isinstance(data, dict):
        raise WorldDefinitionError(f"{where}: enemy must be an object")
    try:
        return EnemyTemplate(
            name=data["name"],
            level=int(data["level"]),
            hp=int(data["hp"]),
            damage=int(data["damage"]),
            xp_reward=int(data.get("xpReward", 0)),
            gold_reward=int(data.get("goldReward", 0)),
        )
    except KeyError as e:
        raise WorldDefinitionError(f"{where}: enemy missing {e}") from e


def _parse_room(data: dict, index: int) -> RoomTemplate:
    if not isinstance(data, dict):
        raise WorldDefinitionError(f"rooms[{index}]: room must be an object")
    room_id = _require(data, "id", f"rooms[{index}]")
    where = f"room '{room_id}'"

    exits = data.get("exits", {})
    for direction in exits:
        if direction not in DIRECTIONS:
            raise WorldDefinitionError(f"{where}: unknown exit direction '{direction}'")

    return RoomTemplate(
        id=room_id,
        name=data.get("name", room_id),
        description=data.get("description", ""),
        exits=tuple(exits.items()),
        items=tuple(_parse_item(i, where) for i in data.get("items", [])),
        enemies=tuple(_parse_enemy(e, where) for e in data.get("enemies", [])),
    )


def _check_references(definition: WorldDefinition) -> None:
    """Every exit, the start room and the respawn room must name a real room."""
    room_ids = {room.id for room in definition.rooms}
    for room in definition.rooms:
        for direction, target in room.exits:
            if target not in room_ids:
                raise WorldDefinitionError(
                    f"room '{room.id}': exit {direction} leads to "
                    f"unknown room '{target}'"
                )
    if definition.start_room not in room_ids:
        raise WorldDefinitionError(f"unknown start room '{definition.start_room}'")
    if definition.respawn_room_id not in room_ids:
        raise WorldDefinitionError(
            f"unknown respawn room '{definition.respawn_room_id}'"
        )


def parse_world_definition(data: dict) -> WorldDefinition:
    """Validate raw JSON data and build an immutable WorldDefinition."""
    if not isinstance(data, dict):
        raise WorldDefinitionError("world definition must be an object")
    raw_rooms = data.get("rooms")
    if raw_rooms is None:
        raise WorldDefinitionError("world definition is missing 'rooms'")
    if not isinstance(raw_rooms, list) or not raw_rooms:
        raise WorldDefinitionError("'rooms' must be a non-empty list")

    rooms = tuple(_parse_room(r, i) for i, r in enumerate(raw_rooms))
    seen: set[str] = set()
    for room in rooms:
        if room.id in seen:
            raise WorldDefinitionError(f"duplicate room id '{room.id}'")
        seen.add(room.id)

    definition = WorldDefinition(
        currency_name=data.get("currencyName", "Gold"),
        start_room=data.get("startRoom", rooms[0].id),
        welcome_message=data.get("welcomeMessage", ""),
        rooms=rooms,
        respawn_room=data.get("respawnRoom", ""),
        pack_id=data.get("id", ""),
        pack_name=data.get("name", ""),
        description=data.get("description", ""),
    )
    _check_references(definition)
    return definition


def load_world_definition(path: Path) -> WorldDefinition:
    """Read and parse a world definition JSON file."""
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    return parse_world_definition(data)


def _pack_path(pack_id: str):
    return resources.files(PACKAGE_DATA).joinpath(f"{pack_id}.json")


def available_packs() -> list[PackInfo]:
    """List the content packs bundled with the package."""
    packs = []
    for entry in sorted(resources.files(PACKAGE_DATA).iterdir(), key=lambda p: p.name):
        if not entry.name.endswith(".json"):
            continue
        data = json.loads(entry.read_text(encoding="utf-8"))
        pack_id = data.get("id", entry.name.removesuffix(".json"))
        packs.append(
            PackInfo(
                id=pack_id,
                name=data.get("name", pack_id),
                description=data.get("description", ""),
            )
        )
    return packs


def load_pack(pack_id: str) -> WorldDefinition:
    """Load a bundled content pack by id."""
    path = _pack_path(pack_id)
    if not path.is_file():
        raise UnknownPackError(pack_id)
    return parse_world_definition(json.loads(path.read_text(encoding="utf-8")))
