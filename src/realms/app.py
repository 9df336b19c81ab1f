"""Xitzin application factory for Shadow Realms."""

from pathlib import Path

from sqlmodel import SQLModel, create_engine
from xitzin import Xitzin

from .config import Config
from .engine.loader import available_packs, load_pack
from .logging import get_logger
from .session import SessionRegistry

logger = get_logger(__name__)


def load_packs() -> dict:
    """Load every bundled content pack, keyed by pack id."""
    return {info.id: load_pack(info.id) for info in available_packs()}


def create_app(config: Config | None = None) -> Xitzin:
    """Create and configure the Xitzin application."""
    config = config or Config.from_env()

    templates_dir = Path(__file__).parent / "templates"

    app = Xitzin(
        title="Shadow Realms",
        version="0.1.0",
        templates_dir=templates_dir,
    )

    engine = create_engine(config.database_url)
    app.state.engine = engine
    app.state.config = config

    @app.on_startup
    async def startup():
        """Initialize database and load content packs."""
        SQLModel.metadata.create_all(engine)
        logger.debug("database_setup_complete")

        packs = load_packs()
        if config.content_pack not in packs:
            raise ValueError(f"unknown content pack '{config.content_pack}'")
        app.state.packs = packs
        app.state.sessions = SessionRegistry(
            engine, packs, config.content_pack, config.save_slot
        )
        for pack_id, definition in packs.items():
            logger.info("world_loaded", pack=pack_id, rooms=len(definition.rooms))
        logger.info("startup_complete", default_pack=config.content_pack)

    from .routes import home, play

    home.register_routes(app)
    play.register_routes(app)

    return app
