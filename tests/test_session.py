"""Tests for database-backed game sessions."""

import random

from sqlmodel import Session, select

from realms.engine.commands import handle_command
from realms.engine.loader import load_pack
from realms.engine.persistence import SaveRecord, encode_record
from realms.engine.player import Player as GamePlayer
from realms.engine.world import WorldDefinition
from realms.models import Player, SavedGame
from realms.session import DatabaseStore, RealmsSession, SessionRegistry


def _record(room_id: str = "market", level: int = 1) -> bytes:
    player = GamePlayer(level=level).to_dict()
    return encode_record(SaveRecord(player=player, room_id=room_id, day=2, hour=6))


def test_store_read_missing(db_engine, test_player: Player):
    store = DatabaseStore(db_engine, test_player.id, "fantasy")
    assert store.read("mudSave") is None


def test_store_write_and_read(db_engine, test_player: Player):
    store = DatabaseStore(db_engine, test_player.id, "fantasy")
    blob = _record()
    store.write("mudSave", blob)
    assert store.read("mudSave") == blob


def test_store_overwrites_one_row(db_engine, db_session: Session, test_player: Player):
    store = DatabaseStore(db_engine, test_player.id, "fantasy")
    store.write("mudSave", _record("market"))
    store.write("mudSave", _record("temple", level=4))

    rows = db_session.exec(select(SavedGame)).all()
    assert len(rows) == 1
    assert rows[0].room_id == "temple"
    assert rows[0].level == 4
    assert rows[0].day == 2
    assert rows[0].content_pack == "fantasy"


def test_store_slots_are_separate(db_engine, test_player: Player):
    store = DatabaseStore(db_engine, test_player.id, "fantasy")
    store.write("one", _record("market"))
    store.write("two", _record("temple"))
    store.delete("one")
    assert store.read("one") is None
    assert store.read("two") is not None


def test_fresh_session(db_engine, test_player: Player, definition: WorldDefinition):
    session = RealmsSession(db_engine, test_player, definition, "mudSave")
    assert session.resume() is False
    assert session.game.current_room_id == "town_square"


def test_session_resumes_saved_game(
    db_engine, test_player: Player, definition: WorldDefinition
):
    first = RealmsSession(db_engine, test_player, definition, "mudSave")
    first.process_command("north")
    first.process_command("take apple")
    first.process_command("save")

    second = RealmsSession(db_engine, test_player, definition, "mudSave")
    assert second.resume() is True
    assert second.game.current_room_id == "market"
    assert [i.name for i in second.game.player.inventory] == ["Apple"]


def test_unreadable_save_starts_fresh(
    db_engine, db_session: Session, test_player: Player, definition: WorldDefinition
):
    db_session.add(
        SavedGame(player_id=test_player.id, slot="mudSave", record_blob=b"junk")
    )
    db_session.commit()

    session = RealmsSession(db_engine, test_player, definition, "mudSave")
    assert session.resume() is False
    assert session.game.current_room_id == "town_square"


def test_sessions_have_separate_worlds(
    db_engine, test_player: Player, definition: WorldDefinition
):
    """Taking an item in one session leaves other sessions' rooms alone."""
    first = RealmsSession(db_engine, test_player, definition, "mudSave")
    second = RealmsSession(db_engine, test_player, definition, "mudSave")
    handle_command(first.game, "north")
    handle_command(first.game, "take apple")
    assert second.game.world.rooms["market"].items[0].name == "Apple"


def test_reset_deletes_save(
    db_engine, test_player: Player, definition: WorldDefinition
):
    session = RealmsSession(
        db_engine, test_player, definition, "mudSave", rng=random.Random(1)
    )
    session.process_command("north")
    session.process_command("save")

    session.reset()

    assert session.game.current_room_id == "town_square"
    assert session.game.store.read("mudSave") is None


def test_blank_command(db_engine, test_player: Player, definition: WorldDefinition):
    session = RealmsSession(db_engine, test_player, definition, "mudSave")
    assert session.process_command("  ") is None


def _registry(db_engine) -> SessionRegistry:
    packs = {"fantasy": load_pack("fantasy"), "cyberpunk": load_pack("cyberpunk")}
    return SessionRegistry(db_engine, packs, "fantasy", "mudSave")


def test_registry_reuses_sessions(db_engine):
    registry = _registry(db_engine)
    first = registry.get_or_create("fp-1")
    assert registry.get_or_create("fp-1") is first
    assert registry.get_or_create("fp-2") is not first


def test_registry_creates_player_row(db_engine, db_session: Session):
    _registry(db_engine).get_or_create("fp-new")
    player = db_session.exec(select(Player).where(Player.fingerprint == "fp-new")).one()
    assert player.content_pack == "fantasy"


def test_registry_switch_pack(db_engine, db_session: Session):
    registry = _registry(db_engine)
    registry.get_or_create("fp-1")

    session = registry.switch_pack("fp-1", "cyberpunk")

    assert session.game.world.currency_name == "Eddies"
    assert session.game.current_room_id == "apartment"
    player = db_session.exec(select(Player).where(Player.fingerprint == "fp-1")).one()
    assert player.content_pack == "cyberpunk"


def test_registry_remembers_pack(db_engine):
    _registry(db_engine).switch_pack("fp-1", "cyberpunk")
    session = _registry(db_engine).get_or_create("fp-1")
    assert session.definition.pack_id == "cyberpunk"
