"""Gameplay routes."""

from xitzin import Redirect, Request, Xitzin
from xitzin.auth import get_identity, require_certificate

from ..engine.loader import available_packs
from ..engine.outcomes import RoomView
from ..render import render_map, render_outcome, render_stats
from ..session import RealmsSession


def _game_session(request: Request) -> RealmsSession:
    """Look up (or start) the live game for the request's certificate."""
    identity = get_identity(request)
    return request.app.state.sessions.get_or_create(identity.fingerprint)


def _render_play(app: Xitzin, session: RealmsSession, lines: list[str] | None = None):
    """Render the main play view."""
    game = session.game
    room = game.current_room
    return app.template(
        "play.gmi",
        pack_name=session.definition.pack_name,
        welcome=game.world.welcome_message,
        room=RoomView.of(room),
        map=render_map(game.world, room.id),
        stats=render_stats(game.player.snapshot(), game.world.currency_name),
        in_combat=game.combat.in_combat,
        enemy=game.combat.enemy,
        message="\n".join(lines or []),
    )


def _run(app: Xitzin, request: Request, raw_input: str):
    session = _game_session(request)
    outcome = session.process_command(raw_input)
    lines = render_outcome(outcome, session.game.world.currency_name)
    return _render_play(app, session, lines)


def _register_action_routes(app: Xitzin) -> None:
    """Register command and movement routes."""

    @app.gemini("/play", name="play")
    @require_certificate
    def play(request: Request):
        """Main game view."""
        session = _game_session(request)
        lines = []
        if session.resumed:
            lines.append("Saved game loaded!")
            session.resumed = False
        return _render_play(app, session, lines)

    @app.gemini("/go/{direction}", name="go")
    @require_certificate
    def go(request: Request, direction: str):
        """Movement via clickable link."""
        return _run(app, request, f"go {direction}")

    @app.input("/cmd", prompt="What do you want to do?", name="cmd")
    @require_certificate
    def cmd(request: Request, query: str):
        """Freeform command entry."""
        return _run(app, request, query)

    @app.gemini("/look", name="look")
    @require_certificate
    def look(request: Request):
        return _run(app, request, "look")

    @app.gemini("/attack", name="attack")
    @require_certificate
    def attack(request: Request):
        return _run(app, request, "attack")

    @app.gemini("/flee", name="flee")
    @require_certificate
    def flee(request: Request):
        return _run(app, request, "flee")

    @app.gemini("/rest", name="rest")
    @require_certificate
    def rest(request: Request):
        return _run(app, request, "rest")


def _register_info_routes(app: Xitzin) -> None:
    """Register inventory, stats, saving and content-pack routes."""

    @app.gemini("/inventory", name="inventory")
    @require_certificate
    def inventory(request: Request):
        return _run(app, request, "inventory")

    @app.gemini("/stats", name="stats")
    @require_certificate
    def stats(request: Request):
        return _run(app, request, "stats")

    @app.gemini("/save", name="save")
    @require_certificate
    def save(request: Request):
        return _run(app, request, "save")

    @app.gemini("/load", name="load")
    @require_certificate
    def load(request: Request):
        return _run(app, request, "load")

    @app.gemini("/packs", name="packs")
    def packs(request: Request):
        return app.template("packs.gmi", packs=available_packs())

    @app.gemini("/pack/{pack_id}", name="pack")
    @require_certificate
    def pack(request: Request, pack_id: str):
        """Start a fresh game in another content pack."""
        if pack_id not in request.app.state.packs:
            return app.template(
                "packs.gmi",
                packs=available_packs(),
                message=f"There is no content pack called '{pack_id}'.",
            )
        identity = get_identity(request)
        session = request.app.state.sessions.switch_pack(identity.fingerprint, pack_id)
        return _render_play(app, session, [session.game.world.welcome_message])

    @app.input(
        "/new",
        prompt="Are you sure you want to start over? Type YES to confirm:",
        name="new_game",
    )
    @require_certificate
    def new_game(request: Request, query: str):
        """Reset game with confirmation."""
        if query.strip().upper() != "YES":
            return Redirect("/play")
        session = _game_session(request)
        session.reset()
        return _render_play(app, session, ["A new adventure begins!"])


def register_routes(app: Xitzin) -> None:
    """Register gameplay routes."""
    _register_action_routes(app)
    _register_info_routes(app)
