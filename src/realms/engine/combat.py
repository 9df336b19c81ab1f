"""Turn-based combat between the player and one enemy.

There are two states. Idle: no enemy bound. Engaged: bound to a live enemy.
``engage`` moves Idle -> Engaged; ``attack_step`` either keeps the fight
going or ends it in victory/defeat; ``flee`` always returns to Idle.

The resolver never edits rooms. Removing a beaten enemy from its room is up
to the caller, which sees ``victory=True`` on the outcome.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..logging import get_logger
from .outcomes import CombatOutcome, EnemyView, ErrorOutcome, SuccessOutcome
from .world import Enemy

if TYPE_CHECKING:
    from .state import GameSession

logger = get_logger(__name__)

NOT_IN_COMBAT = "You are not in combat!"


def damage_roll(base: float, rng) -> int:
    """floor(base * U) with U drawn uniformly from [0.8, 1.2)."""
    return max(0, math.floor(base * (0.8 + rng.random() * 0.4)))


def player_attack_base(strength: int, level: int) -> int:
    return strength * 2 + level * 3


@dataclass
class CombatSession:
    enemy: Enemy | None = None
    in_combat: bool = False
    room_id: str | None = None

    def engage(self, enemy: Enemy, room_id: str | None = None) -> CombatOutcome:
        """Bind to ``enemy``; ``room_id`` is the room whose enemy list holds it."""
        self.enemy = enemy
        self.in_combat = True
        self.room_id = room_id
        logger.debug("combat_engaged", enemy=enemy.name, level=enemy.level)
        return CombatOutcome(
            text=(
                f"A {enemy.name} (Level {enemy.level}) appears!\n"
                f"   HP: {enemy.hp}/{enemy.max_hp}"
            ),
            enemy=EnemyView.of(enemy),
        )

    def end(self) -> None:
        self.enemy = None
        self.in_combat = False
        self.room_id = None

    def flee(self) -> SuccessOutcome | ErrorOutcome:
        if not self.in_combat:
            return ErrorOutcome(NOT_IN_COMBAT)
        logger.debug("combat_fled", enemy=self.enemy.name if self.enemy else None)
        self.end()
        return SuccessOutcome("You flee from combat!")

    def attack_step(self, game: "GameSession") -> CombatOutcome | ErrorOutcome:
        """One exchange: the player strikes, then a surviving enemy hits back."""
        enemy = self.enemy
        if not self.in_combat or enemy is None:
            return ErrorOutcome(NOT_IN_COMBAT)

        player = game.player
        damage = damage_roll(
            player_attack_base(player.stats["str"], player.level), game.rng
        )
        enemy.take_damage(damage)
        lines = [f"You strike the {enemy.name} for {damage} damage!"]

        if enemy.is_dead:
            return self._victory(game, enemy, lines)

        counter = enemy.roll_attack(game.rng)
        player_dead = player.take_damage(counter)
        lines.append(f"   {enemy.name} HP: {enemy.hp}/{enemy.max_hp}")
        lines.append("")
        lines.append(f"The {enemy.name} attacks you for {counter} damage!")
        lines.append(f"   Your HP: {player.hp}/{player.max_hp}")

        if player_dead:
            return self._defeat(game, enemy, lines)

        return CombatOutcome(text="\n".join(lines), enemy=EnemyView.of(enemy))

    def _victory(
        self, game: "GameSession", enemy: Enemy, lines: list[str]
    ) -> CombatOutcome:
        player = game.player
        leveled = player.gain_xp(enemy.xp_reward)
        player.gold += enemy.gold_reward
        self.end()

        lines.append("")
        lines.append(f"The {enemy.name} is defeated!")
        lines.append(
            f"   +{enemy.xp_reward} XP, +{enemy.gold_reward} {game.world.currency_name}"
        )
        if leveled:
            lines.append("")
            lines.append(f"LEVEL UP! You are now level {player.level}!")
            logger.info("level_up", level=player.level)
        logger.info(
            "enemy_defeated",
            enemy=enemy.name,
            xp=enemy.xp_reward,
            gold=enemy.gold_reward,
        )
        return CombatOutcome(
            text="\n".join(lines), enemy=EnemyView.of(enemy), victory=True
        )

    def _defeat(
        self, game: "GameSession", enemy: Enemy, lines: list[str]
    ) -> CombatOutcome:
        game.player.restore()
        self.end()
        game.relocate(game.world.respawn_room)

        lines.append("")
        lines.append("You have been defeated! Respawning...")
        logger.info(
            "player_defeated", enemy=enemy.name, respawn_room=game.current_room_id
        )
        return CombatOutcome(
            text="\n".join(lines), enemy=EnemyView.of(enemy), defeat=True
        )
