"""Shared test fixtures for Shadow Realms."""

import random
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from realms.app import create_app
from realms.config import Config
from realms.engine.loader import load_pack
from realms.engine.persistence import MemoryStore
from realms.engine.state import GameSession, new_game_session
from realms.engine.world import World, WorldDefinition, build_world
from realms.models import Player


@pytest.fixture
def definition() -> WorldDefinition:
    return load_pack("fantasy")


@pytest.fixture
def world(definition: WorldDefinition) -> World:
    return build_world(definition)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def game(world: World, store: MemoryStore) -> GameSession:
    return new_game_session(world, rng=random.Random(42), store=store)


@pytest.fixture
def db_engine(tmp_path: Path):
    db_url = f"sqlite:///{tmp_path}/test.db"
    engine = create_engine(db_url)
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine):
    with Session(db_engine) as session:
        yield session


@pytest.fixture
def test_player(db_session: Session) -> Player:
    player = Player(fingerprint="test-fingerprint-abc123")
    db_session.add(player)
    db_session.commit()
    db_session.refresh(player)
    return player


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    return Config(database_url=f"sqlite:///{tmp_path}/test.db")


@pytest.fixture
def app(test_config: Config):
    return create_app(test_config)


@pytest.fixture
def client(app):
    from xitzin.testing import test_app

    with test_app(app) as client:
        yield client


@pytest.fixture
def auth_client(client):
    return client.with_certificate("test-fingerprint-abc123")
