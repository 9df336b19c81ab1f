"""Save records: a versioned schema for player + location + clock.

Records are stored as zlib-compressed JSON under a slot name. Only the
player, the current room id and the clock are saved; rooms are rebuilt from
the content pack.
"""

import json
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from ..logging import get_logger
from .player import INVENTORY_CAPACITY, Player

if TYPE_CHECKING:
    from .state import GameSession

logger = get_logger(__name__)

SAVE_VERSION = 1
DEFAULT_SLOT = "mudSave"


class SaveFormatError(ValueError):
    """Raised when a stored save record cannot be decoded or validated."""


@dataclass(frozen=True)
class SaveRecord:
    player: dict
    room_id: str
    day: int
    hour: int
    version: int = SAVE_VERSION

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "player": self.player,
            "roomId": self.room_id,
            "clock": {"day": self.day, "hour": self.hour},
        }


class SaveStore(Protocol):
    def read(self, slot: str) -> bytes | None: ...

    def write(self, slot: str, blob: bytes) -> None: ...


@dataclass
class MemoryStore:
    """Keeps save blobs in a dict. Used by tests and the terminal client."""

    blobs: dict[str, bytes] = field(default_factory=dict)

    def read(self, slot: str) -> bytes | None:
        return self.blobs.get(slot)

    def write(self, slot: str, blob: bytes) -> None:
        self.blobs[slot] = blob


@dataclass
class FileStore:
    """One ``<slot>.sav`` file per slot in a directory."""

    directory: Path

    def _path(self, slot: str) -> Path:
        return self.directory / f"{slot}.sav"

    def read(self, slot: str) -> bytes | None:
        path = self._path(slot)
        if not path.exists():
            return None
        return path.read_bytes()

    def write(self, slot: str, blob: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(slot)
        tmp = path.with_suffix(".tmp")
        tmp.write_bytes(blob)
        tmp.replace(path)


def encode_record(record: SaveRecord) -> bytes:
    return zlib.compress(json.dumps(record.to_dict()).encode("utf-8"))


def _migrate_unversioned(data: dict) -> dict:
    """Convert a legacy ``{player, currentRoom, time}`` save to version 1.

    Legacy saves hold the player as a JSON string in camelCase and may carry
    runtime-only fields; those are simply ignored by ``Player.from_dict``.
    """
    player = data.get("player")
    if isinstance(player, str):
        try:
            player = json.loads(player)
        except json.JSONDecodeError as e:
            raise SaveFormatError(f"legacy player field is not JSON: {e}") from e
    return {
        "version": 1,
        "player": player,
        "roomId": data.get("currentRoom"),
        "clock": data.get("time") or {},
    }


_MIGRATIONS = {None: _migrate_unversioned}


def _check_player(player: Player) -> None:
    if not 0 <= player.hp <= player.max_hp:
        raise SaveFormatError(f"hp {player.hp} outside 0..{player.max_hp}")
    if not 0 <= player.mp <= player.max_mp:
        raise SaveFormatError(f"mp {player.mp} outside 0..{player.max_mp}")
    if len(player.inventory) > INVENTORY_CAPACITY:
        raise SaveFormatError(
            f"inventory holds {len(player.inventory)} items, "
            f"more than {INVENTORY_CAPACITY}"
        )


def _validate(data: dict) -> SaveRecord:
    player = data.get("player")
    room_id = data.get("roomId")
    clock = data.get("clock")
    if not isinstance(player, dict):
        raise SaveFormatError("save record has no player")
    if not isinstance(room_id, str) or not room_id:
        raise SaveFormatError("save record has no room id")
    if not isinstance(clock, dict):
        raise SaveFormatError("save record has no clock")
    try:
        restored = Player.from_dict(player)
        day = int(clock.get("day", 1))
        hour = int(clock.get("hour", 8))
    except (KeyError, TypeError, ValueError) as e:
        raise SaveFormatError(f"invalid save record: {e!r}") from e
    _check_player(restored)
    return SaveRecord(player=player, room_id=room_id, day=day, hour=hour)


def decode_record(blob: bytes) -> SaveRecord:
    """Decode, migrate and validate a stored save blob."""
    try:
        raw = zlib.decompress(blob)
    except zlib.error:
        # Older saves were stored as plain JSON.
        raw = blob
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SaveFormatError(f"save record is not JSON: {e}") from e
    if not isinstance(data, dict):
        raise SaveFormatError("save record must be an object")

    version = data.get("version")
    while version != SAVE_VERSION:
        migrate = _MIGRATIONS.get(version)
        if migrate is None:
            raise SaveFormatError(f"unsupported save version {version!r}")
        data = migrate(data)
        version = data.get("version")

    return _validate(data)


def snapshot_record(game: "GameSession") -> SaveRecord:
    return SaveRecord(
        player=game.player.to_dict(),
        room_id=game.current_room_id,
        day=game.clock.day,
        hour=game.clock.hour,
    )


def save_game(game: "GameSession") -> SaveRecord:
    """Overwrite the session's save slot with the current state."""
    record = snapshot_record(game)
    game.store.write(game.slot, encode_record(record))
    logger.info(
        "game_saved",
        slot=game.slot,
        room=record.room_id,
        level=game.player.level,
    )
    return record


def apply_record(game: "GameSession", record: SaveRecord) -> None:
    """Replace the in-memory player, clock and location with a record."""
    game.player = Player.from_dict(record.player)
    game.clock.day = record.day
    game.clock.hour = record.hour
    game.combat.end()
    if record.room_id in game.world.rooms:
        game.relocate(record.room_id)
    else:
        logger.warning(
            "save_room_missing",
            room=record.room_id,
            fallback=game.world.start_room,
        )
        game.relocate(game.world.start_room)


def load_game(game: "GameSession") -> bool:
    """Restore the session from its save slot.

    Returns False when there is no saved game. A record that fails to decode
    raises SaveFormatError.
    """
    blob = game.store.read(game.slot)
    if blob is None:
        return False
    apply_record(game, decode_record(blob))
    logger.info("game_loaded", slot=game.slot, room=game.current_room_id)
    return True
