"""Data structures for the game world.

Templates (``WorldDefinition`` and friends) are immutable and shared by every
session loaded from the same content pack. ``build_world`` turns a definition
into live ``Room``/``Enemy`` objects that a single session is free to mutate.
"""

import math
import random
from dataclasses import dataclass, field

DIRECTIONS = ("north", "south", "east", "west")


@dataclass(frozen=True)
class Item:
    """An item that can lie in a room or sit in the player's inventory."""

    name: str
    type: str
    effect: str | None = None
    value: int | None = None
    damage: int | None = None

    def to_dict(self) -> dict:
        data: dict = {"name": self.name, "type": self.type}
        if self.effect is not None:
            data["effect"] = self.effect
        if self.value is not None:
            data["value"] = self.value
        if self.damage is not None:
            data["damage"] = self.damage
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        return cls(
            name=data["name"],
            type=data.get("type", "misc"),
            effect=data.get("effect"),
            value=data.get("value"),
            damage=data.get("damage"),
        )


@dataclass(frozen=True)
class EnemyTemplate:
    name: str
    level: int
    hp: int
    damage: int
    xp_reward: int
    gold_reward: int


@dataclass
class Enemy:
    """A live enemy. ``max_hp`` is fixed at spawn, ``hp`` drops in combat."""

    name: str
    level: int
    hp: int
    max_hp: int
    damage: int
    xp_reward: int
    gold_reward: int

    @classmethod
    def spawn(cls, template: EnemyTemplate) -> "Enemy":
        return cls(
            name=template.name,
            level=template.level,
            hp=template.hp,
            max_hp=template.hp,
            damage=template.damage,
            xp_reward=template.xp_reward,
            gold_reward=template.gold_reward,
        )

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    def take_damage(self, amount: int) -> bool:
        """Apply damage (floored at 0) and return True if it was lethal."""
        self.hp = max(0, self.hp - amount)
        return self.hp <= 0

    def roll_attack(self, rng: random.Random) -> int:
        """floor(damage * U) with U drawn uniformly from [0.8, 1.2)."""
        return max(0, math.floor(self.damage * (0.8 + rng.random() * 0.4)))


@dataclass(frozen=True)
class RoomTemplate:
    id: str
    name: str
    description: str
    exits: tuple[tuple[str, str], ...] = ()
    items: tuple[Item, ...] = ()
    enemies: tuple[EnemyTemplate, ...] = ()


@dataclass(frozen=True)
class WorldDefinition:
    """An immutable world template, as supplied by a content pack."""

    currency_name: str
    start_room: str
    welcome_message: str
    rooms: tuple[RoomTemplate, ...]
    respawn_room: str = ""
    pack_id: str = ""
    pack_name: str = ""
    description: str = ""

    @property
    def respawn_room_id(self) -> str:
        return self.respawn_room or self.start_room


@dataclass
class Room:
    """A location in the game world."""

    id: str
    name: str
    description: str
    exits: dict[str, str] = field(default_factory=dict)
    items: list[Item] = field(default_factory=list)
    enemies: list[Enemy] = field(default_factory=list)

    @classmethod
    def from_template(cls, template: RoomTemplate) -> "Room":
        return cls(
            id=template.id,
            name=template.name,
            description=template.description,
            exits=dict(template.exits),
            items=list(template.items),
            enemies=[Enemy.spawn(e) for e in template.enemies],
        )

    def exit_directions(self) -> list[str]:
        return list(self.exits)

    def find_item(self, text: str) -> Item | None:
        """First item whose name contains ``text`` (case-insensitive)."""
        needle = text.lower()
        for item in self.items:
            if needle in item.name.lower():
                return item
        return None


@dataclass
class World:
    """Live rooms for one game session."""

    definition: WorldDefinition
    rooms: dict[str, Room] = field(default_factory=dict)

    @property
    def currency_name(self) -> str:
        return self.definition.currency_name

    @property
    def start_room(self) -> str:
        return self.definition.start_room

    @property
    def respawn_room(self) -> str:
        return self.definition.respawn_room_id

    @property
    def welcome_message(self) -> str:
        return self.definition.welcome_message

    def get_room(self, room_id: str) -> Room | None:
        return self.rooms.get(room_id)


def build_world(definition: WorldDefinition) -> World:
    """Instantiate fresh rooms and enemies from a definition."""
    world = World(definition=definition)
    for template in definition.rooms:
        world.rooms[template.id] = Room.from_template(template)
    return world
