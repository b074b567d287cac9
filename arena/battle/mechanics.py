from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Protocol

from .effectiveness import Effectiveness, multiplier as type_multiplier
from .models import CreatureStats

# Every creature fights as if it were level 50 using a 60 power move
LEVEL = 50
MOVE_POWER = 60
RANDOM_MIN = 0.85
RANDOM_MAX = 1.0
# Largest float below RANDOM_MAX; keeps the roll inside [0.85, 1.0)
RANDOM_CEIL = math.nextafter(RANDOM_MAX, 0.0)

class UniformSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...

@dataclass(frozen=True)
class DamageRoll:
    base: int
    multiplier: float
    random_factor: float
    damage: int

    @property
    def effectiveness(self) -> Effectiveness:
        return Effectiveness.from_multiplier(self.multiplier)

def base_damage(attack: int, defense: int) -> int:
    return math.floor(((2 * LEVEL / 5 + 2) * attack * MOVE_POWER / defense / 50) + 2)

def roll_damage(base: int, mult: float, random_factor: float) -> int:
    if mult == 0:
        return 0
    return max(1, math.floor(base * mult * random_factor))

def draw_random_factor(rng: UniformSource) -> float:
    return min(rng.uniform(RANDOM_MIN, RANDOM_MAX), RANDOM_CEIL)

def compute_damage(attacker: CreatureStats, defender: CreatureStats, rng: UniformSource) -> DamageRoll:
    base = base_damage(attacker.attack, defender.defense)
    mult = type_multiplier(attacker.types, defender.types)
    rand = draw_random_factor(rng)
    return DamageRoll(base=base, multiplier=mult, random_factor=rand, damage=roll_damage(base, mult, rand))

__all__ = ["DamageRoll", "base_damage", "roll_damage", "compute_damage", "draw_random_factor", "LEVEL", "MOVE_POWER"]
