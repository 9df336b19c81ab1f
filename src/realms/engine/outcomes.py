"""Structured results of interpreting one command.

Every handler returns exactly one of these. They hold immutable snapshots so
a presentation layer can render them after the session has moved on.
"""

from dataclasses import dataclass

from .player import PlayerSnapshot
from .world import Enemy, Item, Room


@dataclass(frozen=True)
class EnemyView:
    name: str
    level: int
    hp: int
    max_hp: int

    @classmethod
    def of(cls, enemy: Enemy) -> "EnemyView":
        return cls(enemy.name, enemy.level, enemy.hp, enemy.max_hp)


@dataclass(frozen=True)
class RoomView:
    id: str
    name: str
    description: str
    exits: tuple[str, ...]
    items: tuple[Item, ...]
    enemies: tuple[EnemyView, ...]

    @classmethod
    def of(cls, room: Room) -> "RoomView":
        return cls(
            id=room.id,
            name=room.name,
            description=room.description,
            exits=tuple(room.exit_directions()),
            items=tuple(room.items),
            enemies=tuple(EnemyView.of(e) for e in room.enemies),
        )


@dataclass(frozen=True)
class MoveOutcome:
    room: RoomView


@dataclass(frozen=True)
class LookOutcome:
    room: RoomView
    items: tuple[Item, ...]
    exits: tuple[str, ...]


@dataclass(frozen=True)
class ExamineOutcome:
    text: str


@dataclass(frozen=True)
class SuccessOutcome:
    text: str


@dataclass(frozen=True)
class ErrorOutcome:
    text: str


@dataclass(frozen=True)
class InventoryOutcome:
    items: tuple[Item, ...]


@dataclass(frozen=True)
class StatsOutcome:
    player: PlayerSnapshot


@dataclass(frozen=True)
class CombatOutcome:
    text: str
    enemy: EnemyView
    victory: bool = False
    defeat: bool = False


@dataclass(frozen=True)
class HelpOutcome:
    text: str


@dataclass(frozen=True)
class ClearOutcome:
    pass


@dataclass(frozen=True)
class QuitOutcome:
    text: str


Outcome = (
    MoveOutcome
    | LookOutcome
    | ExamineOutcome
    | SuccessOutcome
    | ErrorOutcome
    | InventoryOutcome
    | StatsOutcome
    | CombatOutcome
    | HelpOutcome
    | ClearOutcome
    | QuitOutcome
)
