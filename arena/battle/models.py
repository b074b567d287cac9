"""Battle value types: creatures, sides, log entries and the battle state.

Everything here is immutable. Transitions in ``arena.battle.machine`` build
new ``BattleState`` values instead of mutating old ones.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple

from .effectiveness import Effectiveness
from arena.core.errors import MalformedCreatureRecord

CRITICAL_STATS = ("hp", "attack", "defense")
PERIPHERAL_STAT_DEFAULT = 1
MAX_TYPES = 2

@dataclass(frozen=True)
class CreatureStats:
    id: int
    name: str
    types: Tuple[str, ...]
    base_stats: Mapping[str, int] = field(hash=False)
    sprite_url: Optional[str] = None

    def __post_init__(self):
        # Snapshot so a caller's dict cannot change stats mid-battle
        object.__setattr__(self, "base_stats", MappingProxyType(dict(self.base_stats)))
        object.__setattr__(self, "types", tuple(self.types))

    @property
    def hp(self) -> int:
        return self.base_stats["hp"]

    @property
    def attack(self) -> int:
        return self.base_stats["attack"]

    @property
    def defense(self) -> int:
        return self.base_stats["defense"]

    def stat(self, name: str) -> int:
        """Base stat lookup; unlisted peripheral stats read as 1."""
        if name in CRITICAL_STATS:
            return self.base_stats[name]
        return self.base_stats.get(name, PERIPHERAL_STAT_DEFAULT)

    @property
    def display_name(self) -> str:
        return self.name.replace("-", " ").title()

def validate_creature(creature: CreatureStats) -> CreatureStats:
    """Fail fast on a creature that cannot take part in a battle.

    Critical stats must be present positive integers and there must be
    one or two types. Returns the creature unchanged.
    """
    for name in CRITICAL_STATS:
        if name not in creature.base_stats:
            raise MalformedCreatureRecord(name, f"required stat missing for '{creature.name}'")
        value = creature.base_stats[name]
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedCreatureRecord(name, f"base value must be an integer, got {value!r}")
        if value <= 0:
            raise MalformedCreatureRecord(name, f"must be positive, got {value}")
    if not 1 <= len(creature.types) <= MAX_TYPES:
        raise MalformedCreatureRecord("types", f"expected 1 to {MAX_TYPES} types, got {len(creature.types)}")
    return creature

class Side(str, Enum):
    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER

class Turn(str, Enum):
    PLAYER = "player"
    OPPONENT = "opponent"
    FINISHED = "finished"

    @classmethod
    def of(cls, side: Side) -> "Turn":
        return cls(side.value)

class Outcome(str, Enum):
    NONE = "none"
    PLAYER_WON = "playerWon"
    OPPONENT_WON = "opponentWon"

    @classmethod
    def won_by(cls, side: Side) -> "Outcome":
        return cls.PLAYER_WON if side is Side.PLAYER else cls.OPPONENT_WON

class LogCategory(str, Enum):
    SYSTEM = "system"
    PLAYER_ATTACK = "playerAttack"
    OPPONENT_ATTACK = "opponentAttack"
    PLAYER_DAMAGE = "playerDamage"
    OPPONENT_DAMAGE = "opponentDamage"
    VICTORY = "victory"
    DEFEAT = "defeat"
    INFO = "info"
    ERROR = "error"

_EFFECTIVENESS_TEXT = {
    Effectiveness.SUPER_EFFECTIVE: "It's super effective!",
    Effectiveness.NOT_VERY_EFFECTIVE: "It's not very effective...",
    Effectiveness.NO_EFFECT: "It had no effect!",
}

@dataclass(frozen=True)
class LogEntry:
    category: LogCategory
    message: str
    attacker: Optional[Side] = None
    defender_name: Optional[str] = None
    damage: Optional[int] = None
    effectiveness: Optional[Effectiveness] = None
    multiplier: Optional[float] = None
    defender_hp: Optional[int] = None

    @property
    def is_attack(self) -> bool:
        return self.attacker is not None

    def reveal(self) -> Iterator[Tuple[LogCategory, str]]:
        """Staged lines for a presentation layer that wants to pace the reveal."""
        yield self.category, self.message
        if not self.is_attack:
            return
        if self.effectiveness in _EFFECTIVENESS_TEXT:
            yield LogCategory.INFO, _EFFECTIVENESS_TEXT[self.effectiveness]
        if self.damage:
            took = LogCategory.OPPONENT_DAMAGE if self.attacker is Side.PLAYER else LogCategory.PLAYER_DAMAGE
            yield took, f"{self.defender_name} took {self.damage} damage."

@dataclass(frozen=True)
class BattleState:
    player: CreatureStats
    opponent: CreatureStats
    player_hp: int
    opponent_hp: int
    turn: Turn = Turn.PLAYER
    outcome: Outcome = Outcome.NONE
    log: Tuple[LogEntry, ...] = field(default_factory=tuple)

    # --- read-only projections for rendering ---
    def creature(self, side: Side) -> CreatureStats:
        return self.player if side is Side.PLAYER else self.opponent

    def hp(self, side: Side) -> int:
        return self.player_hp if side is Side.PLAYER else self.opponent_hp

    def max_hp(self, side: Side) -> int:
        return self.creature(side).hp

    def hp_ratio(self, side: Side) -> float:
        return self.hp(side) / self.max_hp(side)

    @property
    def is_finished(self) -> bool:
        return self.turn is Turn.FINISHED

    @property
    def winner(self) -> Optional[Side]:
        if self.outcome is Outcome.PLAYER_WON:
            return Side.PLAYER
        if self.outcome is Outcome.OPPONENT_WON:
            return Side.OPPONENT
        return None

    def with_hp(self, side: Side, value: int) -> "BattleState":
        if side is Side.PLAYER:
            return replace(self, player_hp=value)
        return replace(self, opponent_hp=value)

    def appended(self, *entries: LogEntry) -> "BattleState":
        return replace(self, log=self.log + entries)

__all__ = [
    "CreatureStats", "Side", "Turn", "Outcome", "LogCategory", "LogEntry", "BattleState",
    "CRITICAL_STATS", "PERIPHERAL_STAT_DEFAULT", "MAX_TYPES", "validate_creature",
]
