"""Session layer bridging the game engine and the database."""

import datetime as dt
import random
import threading

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from .engine.commands import handle_command
from .engine.outcomes import Outcome
from .engine.persistence import SaveFormatError, decode_record, load_game
from .engine.state import GameSession, new_game_session
from .engine.world import WorldDefinition, build_world
from .logging import get_logger
from .models import Player, SavedGame
from .users import get_or_create_player, set_content_pack

logger = get_logger(__name__)


class DatabaseStore:
    """SaveStore keeping one SavedGame row per (player, slot)."""

    def __init__(self, engine: Engine, player_id: int, content_pack: str):
        self.engine = engine
        self.player_id = player_id
        self.content_pack = content_pack

    def _find(self, db_session: Session, slot: str) -> SavedGame | None:
        statement = select(SavedGame).where(
            SavedGame.player_id == self.player_id, SavedGame.slot == slot
        )
        return db_session.exec(statement).first()

    def read(self, slot: str) -> bytes | None:
        with Session(self.engine) as db_session:
            saved_game = self._find(db_session, slot)
            return saved_game.record_blob if saved_game else None

    def write(self, slot: str, blob: bytes) -> None:
        record = decode_record(blob)
        now = dt.datetime.now(dt.UTC)
        with Session(self.engine) as db_session:
            saved_game = self._find(db_session, slot)
            if saved_game is None:
                saved_game = SavedGame(
                    player_id=self.player_id,
                    slot=slot,
                    record_blob=blob,
                    started_at=now,
                )
            saved_game.record_blob = blob
            saved_game.content_pack = self.content_pack
            saved_game.version = record.version
            saved_game.room_id = record.room_id
            saved_game.level = int(record.player.get("level", 1))
            saved_game.day = record.day
            saved_game.hour = record.hour
            saved_game.last_played = now
            db_session.add(saved_game)
            db_session.commit()

    def delete(self, slot: str) -> None:
        with Session(self.engine) as db_session:
            saved_game = self._find(db_session, slot)
            if saved_game is not None:
                db_session.delete(saved_game)
                db_session.commit()


class RealmsSession:
    """Wraps a Player row + in-memory GameSession for one certificate."""

    def __init__(
        self,
        engine: Engine,
        player: Player,
        definition: WorldDefinition,
        slot: str,
        rng: random.Random | None = None,
    ):
        self.engine = engine
        self.player = player
        self.definition = definition
        self.slot = slot
        self.rng = rng
        self.lock = threading.Lock()
        self.resumed = False
        self.game = self._fresh_game()

    @property
    def fingerprint(self) -> str:
        return self.player.fingerprint

    def _fresh_game(self) -> GameSession:
        store = DatabaseStore(self.engine, self.player.id, self.definition.pack_id)
        return new_game_session(
            build_world(self.definition),
            rng=self.rng,
            store=store,
            slot=self.slot,
        )

    def resume(self) -> bool:
        """Restore the saved game if there is one; start fresh on a bad record."""
        try:
            self.resumed = load_game(self.game)
        except SaveFormatError as e:
            logger.warning(
                "saved_game_unreadable", fingerprint=self.fingerprint, error=str(e)
            )
            self.game = self._fresh_game()
            self.resumed = False
        if self.resumed:
            logger.debug("game_resumed", fingerprint=self.fingerprint)
        else:
            logger.info("new_game_started", fingerprint=self.fingerprint)
        return self.resumed

    def process_command(self, raw_input: str) -> Outcome | None:
        """Run one command. Commands for the same player never interleave."""
        with self.lock:
            outcome = handle_command(self.game, raw_input)
        logger.debug(
            "command_processed",
            fingerprint=self.fingerprint,
            command=raw_input.strip().split(" ", 1)[0] if raw_input.strip() else "",
            outcome=type(outcome).__name__,
        )
        return outcome

    def reset(self) -> None:
        """Reset to a fresh game and delete the saved one."""
        with self.lock:
            self.game.store.delete(self.slot)
            self.game = self._fresh_game()
            self.resumed = False
        logger.info("game_reset", fingerprint=self.fingerprint)

    def switch_pack(self, definition: WorldDefinition) -> None:
        """Start over in another content pack. The old save is kept."""
        with self.lock:
            self.definition = definition
            self.game = self._fresh_game()
            self.resumed = False


class SessionRegistry:
    """Live game sessions keyed by certificate fingerprint."""

    def __init__(
        self,
        engine: Engine,
        packs: dict[str, WorldDefinition],
        default_pack: str,
        slot: str,
    ):
        self.engine = engine
        self.packs = packs
        self.default_pack = default_pack
        self.slot = slot
        self._sessions: dict[str, RealmsSession] = {}
        self._lock = threading.Lock()

    def _definition_for(self, pack_id: str) -> WorldDefinition:
        return self.packs.get(pack_id) or self.packs[self.default_pack]

    def get_or_create(self, fingerprint: str) -> RealmsSession:
        with self._lock:
            session = self._sessions.get(fingerprint)
            if session is not None:
                return session

            with Session(self.engine) as db_session:
                player = get_or_create_player(
                    db_session, fingerprint, self.default_pack
                )
            session = RealmsSession(
                self.engine,
                player,
                self._definition_for(player.content_pack),
                self.slot,
            )
            session.resume()
            self._sessions[fingerprint] = session
            return session

    def switch_pack(self, fingerprint: str, pack_id: str) -> RealmsSession:
        session = self.get_or_create(fingerprint)
        definition = self.packs[pack_id]
        with Session(self.engine) as db_session:
            player = db_session.get(Player, session.player.id)
            set_content_pack(db_session, player, pack_id)
            db_session.refresh(player)
            session.player = player
        session.switch_pack(definition)
        return session
