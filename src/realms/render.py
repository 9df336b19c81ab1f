"""Turn engine outcomes into lines of text for the Gemini and terminal clients."""

from .engine.outcomes import (
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
from .engine.player import PlayerSnapshot
from .engine.world import Item, World


def render_room(room: RoomView) -> list[str]:
    lines = [room.name, room.description]
    if room.enemies:
        enemies = ", ".join(f"{e.name} (Level {e.level})" for e in room.enemies)
        lines.append(f"Enemies here: {enemies}")
    if room.items:
        lines.append(f"Items here: {', '.join(i.name for i in room.items)}")
    if room.exits:
        lines.append(f"Exits: {', '.join(room.exits)}")
    return lines


def render_inventory(items: tuple[Item, ...]) -> list[str]:
    if not items:
        return ["Your inventory is empty."]
    return ["Inventory:", *(f"  - {item.name}" for item in items)]


def render_stats(player: PlayerSnapshot, currency_name: str = "Gold") -> list[str]:
    return [
        f"{player.name} - Level {player.level}",
        f"HP: {player.hp}/{player.max_hp}  MP: {player.mp}/{player.max_mp}",
        f"XP: {player.xp}/{player.xp_to_level}",
        "  ".join(f"{name.upper()}: {value}" for name, value in player.stats),
        f"{currency_name}: {player.gold}",
    ]


def render_outcome(outcome: Outcome | None, currency_name: str = "Gold") -> list[str]:
    """Render an outcome as text lines. ``None`` and ``clear`` render nothing."""
    match outcome:
        case None | ClearOutcome():
            return []
        case MoveOutcome(room=room):
            return [f"You travel to {room.name}.", "", *render_room(room)]
        case LookOutcome(room=room):
            return render_room(room)
        case InventoryOutcome(items=items):
            return render_inventory(items)
        case StatsOutcome(player=player):
            return render_stats(player, currency_name)
        case CombatOutcome(text=text):
            return text.splitlines()
        case (
            ExamineOutcome(text=text)
            | SuccessOutcome(text=text)
            | ErrorOutcome(text=text)
            | HelpOutcome(text=text)
            | QuitOutcome(text=text)
        ):
            return text.splitlines()
    raise TypeError(f"unhandled outcome {outcome!r}")


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 2] + ".."


def render_map(world: World, room_id: str) -> str:
    """A small compass map of the current room and its neighbours."""
    room = world.rooms[room_id]

    def neighbour(direction: str):
        target = room.exits.get(direction)
        return world.rooms.get(target) if target else None

    north, south = neighbour("north"), neighbour("south")
    east, west = neighbour("east"), neighbour("west")

    lines = []
    if north:
        lines.append(f"       [{_truncate(north.name, 12)}]")
        lines.append("              |")
    west_text = f"[{_truncate(west.name, 10)}]" if west else " " * 14
    east_text = f"[{_truncate(east.name, 10)}]" if east else ""
    if west and east:
        connector = "--[@]--"
    elif west:
        connector = "--[@]  "
    elif east:
        connector = "  [@]--"
    else:
        connector = "  [@]  "
    lines.append(west_text + connector + east_text)
    if south:
        lines.append("              |")
        lines.append(f"       [{_truncate(south.name, 12)}]")
    return "\n".join(lines)
