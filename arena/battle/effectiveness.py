"""Type chart and effectiveness multiplier.

The chart is keyed by attacking element. Each entry lists the defending
elements it hits for double damage, half damage, or not at all; anything
unlisted is neutral. Unknown tags on either side are neutral too.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

@dataclass(frozen=True)
class TypeRelations:
    super_effective: frozenset[str] = frozenset()
    not_very_effective: frozenset[str] = frozenset()
    no_effect: frozenset[str] = frozenset()

def _rel(strong: str = "", weak: str = "", immune: str = "") -> TypeRelations:
    return TypeRelations(frozenset(strong.split()), frozenset(weak.split()), frozenset(immune.split()))

TYPE_CHART: Mapping[str, TypeRelations] = MappingProxyType({
    "normal":   _rel(weak="rock steel", immune="ghost"),
    "fire":     _rel("grass ice bug steel", "fire water rock dragon"),
    "water":    _rel("fire ground rock", "water grass dragon"),
    "grass":    _rel("water ground rock", "fire grass poison flying bug dragon steel"),
    "electric": _rel("water flying", "electric grass dragon", "ground"),
    "ice":      _rel("grass ground flying dragon", "fire water ice steel"),
    "fighting": _rel("normal ice rock dark steel", "poison flying psychic bug fairy", "ghost"),
    "poison":   _rel("grass fairy", "poison ground rock ghost", "steel"),
    "ground":   _rel("fire electric poison rock steel", "grass bug", "flying"),
    "flying":   _rel("grass fighting bug", "electric rock steel"),
    "psychic":  _rel("fighting poison", "psychic steel", "dark"),
    "bug":      _rel("grass psychic dark", "fire fighting poison flying ghost steel fairy"),
    "rock":     _rel("fire ice flying bug", "fighting ground steel"),
    "ghost":    _rel("psychic ghost", "dark", "normal"),
    "dragon":   _rel("dragon", "steel", "fairy"),
    "dark":     _rel("psychic ghost", "fighting dark fairy"),
    "steel":    _rel("ice rock fairy", "fire water electric steel"),
    "fairy":    _rel("fighting dragon dark", "fire poison steel"),
})

class Effectiveness(str, Enum):
    SUPER_EFFECTIVE = "super_effective"
    NOT_VERY_EFFECTIVE = "not_very_effective"
    NO_EFFECT = "no_effect"
    NEUTRAL = "neutral"

    @classmethod
    def from_multiplier(cls, mult: float) -> "Effectiveness":
        if mult == 0:
            return cls.NO_EFFECT
        if mult > 1:
            return cls.SUPER_EFFECTIVE
        if mult < 1:
            return cls.NOT_VERY_EFFECTIVE
        return cls.NEUTRAL

def multiplier(attacker_types: Iterable[str], defender_types: Iterable[str],
               chart: Mapping[str, TypeRelations] = TYPE_CHART) -> float:
    """Compound modifier of every attacker type against every defender type.

    Any immunity returns 0.0 at once, whatever has been accumulated so far.
    """
    defenders = [t.lower() for t in defender_types]
    mult = 1.0
    for atk in attacker_types:
        rel = chart.get(atk.lower())
        if rel is None:
            continue
        for d in defenders:
            if d in rel.no_effect:
                return 0.0
            if d in rel.super_effective:
                mult *= 2.0
            elif d in rel.not_very_effective:
                mult *= 0.5
    return mult

def classify(attacker_types: Iterable[str], defender_types: Iterable[str]) -> Effectiveness:
    return Effectiveness.from_multiplier(multiplier(attacker_types, defender_types))

__all__ = ["TYPE_CHART", "TypeRelations", "Effectiveness", "multiplier", "classify"]
