"""Terminal client: one line of input per turn."""

import sys
from collections.abc import Callable
from typing import TextIO

from .config import Config
from .engine.commands import handle_command
from .engine.loader import load_pack
from .engine.outcomes import ClearOutcome, QuitOutcome
from .engine.persistence import FileStore, SaveFormatError, load_game
from .engine.state import GameSession, new_game_session
from .engine.world import build_world
from .logging import configure_logging, get_logger
from .render import render_outcome

logger = get_logger(__name__)

CLEAR_SCREEN = "\033[2J\033[H"


def run(
    game: GameSession,
    read_line: Callable[[str], str] = input,
    out: TextIO = sys.stdout,
) -> None:
    """Read commands until ``quit`` or end of input."""
    currency = game.world.currency_name
    print(game.world.welcome_message, file=out)
    print("Type 'help' for a list of commands.", file=out)
    print(file=out)
    for line in render_outcome(handle_command(game, "look"), currency):
        print(line, file=out)

    while True:
        try:
            raw = read_line("> ")
        except EOFError:
            break
        outcome = handle_command(game, raw)
        if isinstance(outcome, ClearOutcome):
            out.write(CLEAR_SCREEN)
            continue
        for line in render_outcome(outcome, currency):
            print(line, file=out)
        if isinstance(outcome, QuitOutcome):
            break


def main() -> None:
    config = Config.from_env()
    configure_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        json_logs=config.json_logs,
        hash_fingerprints=config.hash_fingerprints,
    )
    pack = sys.argv[1] if len(sys.argv) > 1 else config.content_pack
    world = build_world(load_pack(pack))
    game = new_game_session(
        world, store=FileStore(config.save_dir), slot=config.save_slot
    )
    try:
        if load_game(game):
            print("Saved game loaded!")
    except SaveFormatError as e:
        logger.warning("saved_game_unreadable", error=str(e))
    run(game)
