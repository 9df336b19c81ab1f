"""The player character: stats, inventory and progression rules."""

import math
from dataclasses import dataclass, field

from .world import Item

INVENTORY_CAPACITY = 20
STAT_NAMES = ("str", "dex", "int", "wis")
EQUIPMENT_SLOTS = ("weapon", "armor", "accessory")


def _default_stats() -> dict[str, int]:
    return dict.fromkeys(STAT_NAMES, 10)


def _default_equipment() -> dict[str, Item | None]:
    return dict.fromkeys(EQUIPMENT_SLOTS)


@dataclass(frozen=True)
class PlayerSnapshot:
    """Read-only copy of the player handed to the presentation layer."""

    name: str
    level: int
    hp: int
    max_hp: int
    mp: int
    max_mp: int
    xp: int
    xp_to_level: int
    gold: int
    stats: tuple[tuple[str, int], ...]
    inventory: tuple[Item, ...]

    def stat(self, name: str) -> int:
        return dict(self.stats)[name]


@dataclass
class Player:
    name: str = "Adventurer"
    level: int = 1
    hp: int = 100
    max_hp: int = 100
    mp: int = 50
    max_mp: int = 50
    xp: int = 0
    xp_to_level: int = 100
    gold: int = 0
    stats: dict[str, int] = field(default_factory=_default_stats)
    inventory: list[Item] = field(default_factory=list)
    # Not consumed by any rule yet.
    equipment: dict[str, Item | None] = field(default_factory=_default_equipment)

    def take_damage(self, amount: int) -> bool:
        """Apply damage (floored at 0) and return True if it was lethal."""
        self.hp = max(0, self.hp - amount)
        return self.hp <= 0

    def heal(self, amount: int) -> int:
        """Heal up to max HP and return the HP actually restored."""
        before = self.hp
        self.hp = min(self.max_hp, self.hp + amount)
        return self.hp - before

    def restore_mp(self, amount: int) -> int:
        before = self.mp
        self.mp = min(self.max_mp, self.mp + amount)
        return self.mp - before

    def restore(self) -> None:
        self.hp = self.max_hp
        self.mp = self.max_mp

    def gain_xp(self, amount: int) -> bool:
        """Add xp; levels up at most once per call. Returns True on level-up."""
        self.xp += amount
        if self.xp >= self.xp_to_level:
            self.level_up()
            return True
        return False

    def level_up(self) -> None:
        self.level += 1
        self.xp = 0
        self.xp_to_level = math.floor(self.xp_to_level * 1.5)
        self.max_hp += 20
        self.max_mp += 10
        self.restore()
        for stat in self.stats:
            self.stats[stat] += 2

    @property
    def inventory_full(self) -> bool:
        return len(self.inventory) >= INVENTORY_CAPACITY

    def add_item(self, item: Item) -> bool:
        if self.inventory_full:
            return False
        self.inventory.append(item)
        return True

    def remove_item(self, name: str) -> Item | None:
        """Remove the first item whose name equals ``name`` (case-insensitive)."""
        wanted = name.lower()
        for index, item in enumerate(self.inventory):
            if item.name.lower() == wanted:
                return self.inventory.pop(index)
        return None

    def find_item(self, text: str) -> Item | None:
        """First inventory item whose name contains ``text`` (case-insensitive)."""
        needle = text.lower()
        for item in self.inventory:
            if needle in item.name.lower():
                return item
        return None

    def snapshot(self) -> PlayerSnapshot:
        return PlayerSnapshot(
            name=self.name,
            level=self.level,
            hp=self.hp,
            max_hp=self.max_hp,
            mp=self.mp,
            max_mp=self.max_mp,
            xp=self.xp,
            xp_to_level=self.xp_to_level,
            gold=self.gold,
            stats=tuple(self.stats.items()),
            inventory=tuple(self.inventory),
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "level": self.level,
            "hp": self.hp,
            "maxHp": self.max_hp,
            "mp": self.mp,
            "maxMp": self.max_mp,
            "xp": self.xp,
            "xpToLevel": self.xp_to_level,
            "gold": self.gold,
            "stats": dict(self.stats),
            "inventory": [item.to_dict() for item in self.inventory],
            "equipment": {
                slot: item.to_dict() if item else None
                for slot, item in self.equipment.items()
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        """Rebuild a player from ``to_dict`` output.

        Raises KeyError/TypeError/ValueError on malformed data; callers that
        read untrusted input wrap these.
        """
        stats = _default_stats()
        stats.update({k: int(v) for k, v in data["stats"].items()})
        equipment = _default_equipment()
        for slot, item in (data.get("equipment") or {}).items():
            if slot in equipment:
                equipment[slot] = Item.from_dict(item) if item else None
        return cls(
            name=str(data["name"]),
            level=int(data["level"]),
            hp=int(data["hp"]),
            max_hp=int(data["maxHp"]),
            mp=int(data["mp"]),
            max_mp=int(data["maxMp"]),
            xp=int(data["xp"]),
            xp_to_level=int(data["xpToLevel"]),
            gold=int(data["gold"]),
            stats=stats,
            inventory=[Item.from_dict(i) for i in data["inventory"]],
            equipment=equipment,
        )
