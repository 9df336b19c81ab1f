"""Command parsing and dispatch.

handle_command(game, raw_input) -> Outcome | None is the main entry point.
Input is normalized, parsed into a Command of a fixed CommandKind, then
matched to a handler. Handlers mutate the session in place and return an
Outcome; failures are ErrorOutcomes, never exceptions.
"""

import enum
from dataclasses import dataclass

from ..logging import get_logger
from .normalizer import normalize
from .outcomes import (
    ClearOutcome,
    CombatOutcome,
    ErrorOutcome,
    ExamineOutcome,
    HelpOutcome,
    InventoryOutcome,
    LookOutcome,
    MoveOutcome,
    Outcome,
    QuitOutcome,
    RoomView,
    StatsOutcome,
    SuccessOutcome,
)
from .persistence import SaveFormatError, load_game, save_game
from .state import GameSession
from .world import DIRECTIONS, Enemy, Room

logger = get_logger(__name__)

REST_HP = 20
REST_MP = 10


class CommandKind(enum.Enum):
    MOVE = "move"
    LOOK = "look"
    EXAMINE = "examine"
    INVENTORY = "inventory"
    TAKE = "take"
    DROP = "drop"
    STATS = "stats"
    USE = "use"
    REST = "rest"
    ATTACK = "attack"
    FLEE = "flee"
    HELP = "help"
    SAVE = "save"
    LOAD = "load"
    CLEAR = "clear"
    QUIT = "quit"
    UNKNOWN = "unknown"


KEYWORDS: dict[str, CommandKind] = {
    **dict.fromkeys(DIRECTIONS, CommandKind.MOVE),
    **dict.fromkeys(("n", "s", "e", "w", "go"), CommandKind.MOVE),
    **dict.fromkeys(("look", "l"), CommandKind.LOOK),
    **dict.fromkeys(("examine", "ex"), CommandKind.EXAMINE),
    **dict.fromkeys(("inventory", "inv", "i"), CommandKind.INVENTORY),
    **dict.fromkeys(("take", "get"), CommandKind.TAKE),
    "drop": CommandKind.DROP,
    **dict.fromkeys(("stats", "status"), CommandKind.STATS),
    "use": CommandKind.USE,
    "rest": CommandKind.REST,
    **dict.fromkeys(("attack", "fight"), CommandKind.ATTACK),
    **dict.fromkeys(("flee", "run"), CommandKind.FLEE),
    "help": CommandKind.HELP,
    "save": CommandKind.SAVE,
    "load": CommandKind.LOAD,
    "clear": CommandKind.CLEAR,
    **dict.fromkeys(("quit", "exit"), CommandKind.QUIT),
}

_SHORT_DIRECTIONS = {"n": "north", "s": "south", "e": "east", "w": "west"}

HELP_TEXT = """\
Available Commands:
─────────────────────────────────
Movement:  north (n), south (s), east (e), west (w)
           You can also say "go north", "walk south", etc.

Observe:   look (l), examine <item>

Items:     inventory (i), take/get <item>, drop <item>, use <item>

Character: stats, rest

Combat:    attack/fight - Engage or continue fighting an enemy
           flee/run - Escape from combat

System:    help, save, load, clear

Tips:
- Some areas have enemies - be prepared to fight!
- Use items to heal during or after combat
- Rest to recover health and mana
- Natural language supported: try "grab apple" or "walk north\""""


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    keyword: str
    args: str = ""
    # First word as typed, before synonyms are applied.
    word: str = ""


def parse_command(raw_input: str) -> Command | None:
    """Turn raw player text into a Command, or None for blank input."""
    if not raw_input or not raw_input.strip():
        return None
    words = normalize(raw_input).split()
    keyword = words[0]
    args = " ".join(words[1:])
    word = raw_input.split()[0].lower()
    return Command(KEYWORDS.get(keyword, CommandKind.UNKNOWN), keyword, args, word)


def _direction_for(command: Command) -> str | None:
    """Resolve the direction of a MOVE command, or None when ``go`` lacks one."""
    if command.keyword == "go":
        target = command.args.split()[0] if command.args else ""
        target = _SHORT_DIRECTIONS.get(target, target)
        return target if target in DIRECTIONS else None
    return _SHORT_DIRECTIONS.get(command.keyword, command.keyword)


def _cmd_move(game: GameSession, direction: str) -> Outcome:
    room = game.current_room
    target = room.exits.get(direction)
    if target is None or target not in game.world.rooms:
        return ErrorOutcome("You cannot go that way.")
    new_room = game.relocate(target)
    logger.debug("player_moved", direction=direction, room=new_room.id)
    return MoveOutcome(room=RoomView.of(new_room))


def _cmd_go(game: GameSession, command: Command) -> Outcome:
    """Handle MOVE, including ``go <direction>``.

    ``run`` normalizes to ``go``; a bare ``run``, or a bare ``go`` in the
    middle of a fight, is treated as fleeing.
    """
    direction = _direction_for(command)
    if direction is not None:
        return _cmd_move(game, direction)
    if not command.args and (game.combat.in_combat or command.word == "run"):
        return game.combat.flee()
    if not command.args:
        return ErrorOutcome("Go where?")
    return ErrorOutcome("You cannot go that way.")


def _cmd_look(game: GameSession, args: str) -> Outcome:
    # "examine" normalizes to "look", so "look <thing>" examines.
    if args:
        return _cmd_examine(game, args)
    room = game.current_room
    view = RoomView.of(room)
    return LookOutcome(room=view, items=view.items, exits=view.exits)


def _cmd_examine(game: GameSession, args: str) -> Outcome:
    if not args:
        return ErrorOutcome("Examine what?")
    item = game.current_room.find_item(args)
    if item is None:
        return ErrorOutcome(f"You don't see any {args} here.")
    text = f"{item.name}: A {item.type}"
    if item.effect:
        text += f" that can {item.effect}"
    return ExamineOutcome(text=text + ".")


def _cmd_inventory(game: GameSession) -> Outcome:
    return InventoryOutcome(items=tuple(game.player.inventory))


def _cmd_take(game: GameSession, args: str) -> Outcome:
    if not args:
        return ErrorOutcome("Take what?")
    room = game.current_room
    item = room.find_item(args)
    if item is None:
        return ErrorOutcome(f"You don't see any {args} here.")

    index = room.items.index(item)
    room.items.pop(index)
    if not game.player.add_item(item):
        # Put it back where it was.
        room.items.insert(index, item)
        return ErrorOutcome("Your inventory is full.")
    logger.debug("item_taken", item=item.name, room=room.id)
    return SuccessOutcome(f"You take the {item.name}.")


def _cmd_drop(game: GameSession, args: str) -> Outcome:
    if not args:
        return ErrorOutcome("Drop what?")
    item = game.player.remove_item(args)
    if item is None:
        return ErrorOutcome(f"You don't have any {args}.")
    game.current_room.items.append(item)
    logger.debug("item_dropped", item=item.name, room=game.current_room_id)
    return SuccessOutcome(f"You drop the {item.name}.")


def _cmd_stats(game: GameSession) -> Outcome:
    return StatsOutcome(player=game.player.snapshot())


def _cmd_use(game: GameSession, args: str) -> Outcome:
    if not args:
        return ErrorOutcome("Use what?")
    player = game.player
    item = player.find_item(args)
    if item is None:
        return ErrorOutcome(f"You don't have any {args}.")
    if item.effect != "heal":
        return ErrorOutcome(f"You're not sure how to use the {item.name}.")

    healed = player.heal(item.value or 0)
    player.remove_item(item.name)
    return SuccessOutcome(f"You use the {item.name} and restore {healed} HP!")


def _cmd_rest(game: GameSession) -> Outcome:
    game.player.heal(REST_HP)
    game.player.restore_mp(REST_MP)
    return SuccessOutcome("You rest for a moment, recovering some health and mana.")


def _cmd_attack(game: GameSession) -> Outcome:
    combat = game.combat
    if combat.in_combat:
        enemy = combat.enemy
        # The player may have walked away mid-fight; the enemy lives where
        # the fight started.
        room = game.world.get_room(combat.room_id or game.current_room_id)
        outcome = combat.attack_step(game)
        if isinstance(outcome, CombatOutcome) and outcome.victory and room is not None:
            _remove_enemy(room, enemy)
        return outcome

    room = game.current_room
    if room.enemies:
        return combat.engage(room.enemies[0], room_id=room.id)
    return ErrorOutcome("There is nothing to fight here.")


def _remove_enemy(room: Room, enemy: Enemy) -> None:
    for index, candidate in enumerate(room.enemies):
        if candidate is enemy:
            del room.enemies[index]
            return


def _cmd_save(game: GameSession) -> Outcome:
    save_game(game)
    return SuccessOutcome("Game saved successfully!")


def _cmd_load(game: GameSession) -> Outcome:
    try:
        loaded = load_game(game)
    except SaveFormatError as e:
        logger.warning("save_unreadable", slot=game.slot, error=str(e))
        return ErrorOutcome("Your saved game could not be read.")
    if not loaded:
        return ErrorOutcome("There is no saved game.")
    return SuccessOutcome("Saved game loaded!")


def dispatch(game: GameSession, command: Command) -> Outcome:
    """Run a parsed command against the session."""
    match command.kind:
        case CommandKind.MOVE:
            return _cmd_go(game, command)
        case CommandKind.LOOK:
            return _cmd_look(game, command.args)
        case CommandKind.EXAMINE:
            return _cmd_examine(game, command.args)
        case CommandKind.INVENTORY:
            return _cmd_inventory(game)
        case CommandKind.TAKE:
            return _cmd_take(game, command.args)
        case CommandKind.DROP:
            return _cmd_drop(game, command.args)
        case CommandKind.STATS:
            return _cmd_stats(game)
        case CommandKind.USE:
            return _cmd_use(game, command.args)
        case CommandKind.REST:
            return _cmd_rest(game)
        case CommandKind.ATTACK:
            return _cmd_attack(game)
        case CommandKind.FLEE:
            return game.combat.flee()
        case CommandKind.HELP:
            return HelpOutcome(text=HELP_TEXT)
        case CommandKind.SAVE:
            return _cmd_save(game)
        case CommandKind.LOAD:
            return _cmd_load(game)
        case CommandKind.CLEAR:
            return ClearOutcome()
        case CommandKind.QUIT:
            return QuitOutcome(text="Farewell, adventurer.")
        case CommandKind.UNKNOWN:
            return ErrorOutcome(
                f"Unknown command: {command.keyword}. "
                "Type 'help' for available commands."
            )


def handle_command(game: GameSession, raw_input: str) -> Outcome | None:
    """Process one line of player input and return its Outcome."""
    command = parse_command(raw_input)
    if command is None:
        return None
    return dispatch(game, command)
