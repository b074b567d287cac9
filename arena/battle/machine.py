"""Turn-based 1v1 battle state machine.

``start_battle`` and ``attack`` are pure transitions over ``BattleState``;
the only impure input is the RNG handed to ``attack``. ``BattleStateMachine``
is a thin owner of one battle's state and RNG for callers that prefer an
object to thread through (CLI, tests, auto simulations).
"""
from __future__ import annotations
import random
from dataclasses import replace
from typing import List, Optional

from .mechanics import UniformSource, compute_damage
from .models import BattleState, CreatureStats, LogCategory, LogEntry, Outcome, Side, Turn, validate_creature
from arena.core.errors import InvalidTurnError
from arena.core.logging import logger

_ATTACK_CATEGORY = {Side.PLAYER: LogCategory.PLAYER_ATTACK, Side.OPPONENT: LogCategory.OPPONENT_ATTACK}
_NOTE_CATEGORIES = {LogCategory.SYSTEM, LogCategory.INFO, LogCategory.ERROR}
# Mutually immune pairs never finish; auto play gives up after this many rounds
MAX_AUTO_ROUNDS = 500

def start_battle(player: CreatureStats, opponent: CreatureStats) -> BattleState:
    """Fresh battle state; raises MalformedCreatureRecord for an unusable creature."""
    validate_creature(player)
    validate_creature(opponent)
    logger.debug("BattleStarted", player=player.name, opponent=opponent.name)
    return BattleState(player=player, opponent=opponent, player_hp=player.hp, opponent_hp=opponent.hp)

def attack(state: BattleState, by_turn: Side | Turn, rng: UniformSource) -> BattleState:
    """Resolve one attack by ``by_turn`` and return the resulting state.

    Raises InvalidTurnError (leaving ``state`` untouched) when it is not
    ``by_turn``'s turn or the battle is already over.
    """
    if state.turn is Turn.FINISHED or by_turn != state.turn.value:
        raise InvalidTurnError(state.turn.value, str(getattr(by_turn, "value", by_turn)))
    side = Side(state.turn.value)

    attacker = state.creature(side)
    defender_side = side.other
    defender = state.creature(defender_side)
    roll = compute_damage(attacker, defender, rng)
    remaining = max(0, state.hp(defender_side) - roll.damage)

    entry = LogEntry(
        category=_ATTACK_CATEGORY[side],
        message=f"{attacker.display_name} attacks {defender.display_name}!",
        attacker=side,
        defender_name=defender.display_name,
        damage=roll.damage,
        effectiveness=roll.effectiveness,
        multiplier=roll.multiplier,
        defender_hp=remaining,
    )
    logger.debug("AttackResolved", attacker=side.value, damage=roll.damage,
                 multiplier=roll.multiplier, defender_hp=remaining)
    nxt = state.with_hp(defender_side, remaining).appended(entry)

    if remaining > 0:
        return replace(nxt, turn=Turn.of(defender_side))

    category = LogCategory.VICTORY if side is Side.PLAYER else LogCategory.DEFEAT
    closing = LogEntry(category, f"{defender.display_name} fainted! {attacker.display_name} wins!")
    logger.debug("BattleFinished", winner=side.value, log_len=len(nxt.log) + 1)
    return replace(nxt.appended(closing), turn=Turn.FINISHED, outcome=Outcome.won_by(side))

def note(state: BattleState, category: LogCategory, message: str) -> BattleState:
    """Append a presentation-side message (system/info/error) to the log."""
    if category not in _NOTE_CATEGORIES:
        raise ValueError(f"Category {category.value!r} is reserved for battle transitions")
    return state.appended(LogEntry(category, message))

class BattleStateMachine:
    def __init__(self, player: CreatureStats, opponent: CreatureStats, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.state = start_battle(player, opponent)

    @property
    def turn(self) -> Turn:
        return self.state.turn

    @property
    def outcome(self) -> Outcome:
        return self.state.outcome

    @property
    def log(self):
        return self.state.log

    def is_over(self) -> bool:
        return self.state.is_finished

    def attack(self, by_turn: Side | Turn) -> BattleState:
        self.state = attack(self.state, by_turn, self.rng)
        return self.state

    def opponent_turn(self) -> BattleState:
        return self.attack(Side.OPPONENT)

    def play_round(self) -> List[LogEntry]:
        """Player attacks, then the opponent answers if still standing.

        Returns the log entries produced by this round.
        """
        before = len(self.state.log)
        self.attack(Side.PLAYER)
        if self.state.turn is Turn.OPPONENT:
            self.opponent_turn()
        return list(self.state.log[before:])

    def run_auto(self, max_rounds: int = MAX_AUTO_ROUNDS) -> Outcome:
        rounds = 0
        while not self.is_over() and rounds < max_rounds:
            self.play_round()
            rounds += 1
        return self.state.outcome

    def note(self, category: LogCategory, message: str) -> BattleState:
        self.state = note(self.state, category, message)
        return self.state

    def rematch(self, opponent: Optional[CreatureStats] = None) -> "BattleStateMachine":
        """Fresh machine for the same player; the current one should be dropped."""
        return BattleStateMachine(self.state.player, opponent or self.state.opponent, self.rng)

__all__ = ["start_battle", "attack", "note", "BattleStateMachine", "MAX_AUTO_ROUNDS"]
