"""Mutable per-player game state.

A GameSession bundles everything one command may touch: the live world,
the player, the single combat session and the clock. Handlers receive it
explicitly; there are no module-level game objects.
"""

import random
from dataclasses import dataclass, field

from .combat import CombatSession
from .persistence import DEFAULT_SLOT, MemoryStore, SaveStore
from .player import Player
from .world import Room, World

START_DAY = 1
START_HOUR = 8


@dataclass
class GameClock:
    day: int = START_DAY
    hour: int = START_HOUR

    def to_dict(self) -> dict[str, int]:
        return {"day": self.day, "hour": self.hour}


@dataclass
class GameSession:
    """All mutable state for one player's game."""

    world: World
    player: Player = field(default_factory=Player)
    combat: CombatSession = field(default_factory=CombatSession)
    clock: GameClock = field(default_factory=GameClock)
    current_room_id: str = ""
    rng: random.Random = field(default_factory=random.Random)
    store: SaveStore = field(default_factory=MemoryStore)
    slot: str = DEFAULT_SLOT

    def __post_init__(self) -> None:
        if not self.current_room_id:
            self.current_room_id = self.world.start_room

    @property
    def current_room(self) -> Room:
        return self.world.rooms[self.current_room_id]

    def relocate(self, room_id: str) -> Room:
        self.current_room_id = room_id
        return self.current_room


def new_game_session(
    world: World,
    player_name: str = "Adventurer",
    rng: random.Random | None = None,
    store: SaveStore | None = None,
    slot: str = DEFAULT_SLOT,
) -> GameSession:
    """Create a fresh session positioned in the world's start room."""
    return GameSession(
        world=world,
        player=Player(name=player_name),
        current_room_id=world.start_room,
        rng=rng or random.Random(),
        store=store if store is not None else MemoryStore(),
        slot=slot,
    )
