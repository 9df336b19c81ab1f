"""User management utilities."""

import datetime as dt

from sqlmodel import Session, select

from .logging import get_logger
from .models import Player

logger = get_logger(__name__)


def get_or_create_player(
    session: Session, fingerprint: str, content_pack: str
) -> Player:
    """Get existing player or create one from a certificate fingerprint.

    New players start in ``content_pack``; returning players keep theirs.
    """
    statement = select(Player).where(Player.fingerprint == fingerprint)
    player = session.exec(statement).first()

    if player:
        player.last_seen = dt.datetime.now(dt.UTC)
        logger.debug("player_accessed", fingerprint=fingerprint)
    else:
        player = Player(fingerprint=fingerprint, content_pack=content_pack)
        session.add(player)
        logger.info(
            "player_created", fingerprint=fingerprint, content_pack=content_pack
        )

    session.commit()
    session.refresh(player)
    return player


def set_content_pack(session: Session, player: Player, content_pack: str) -> None:
    player.content_pack = content_pack
    session.add(player)
    session.commit()
    logger.info(
        "content_pack_changed",
        fingerprint=player.fingerprint,
        content_pack=content_pack,
    )
