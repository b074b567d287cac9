"""Conversion between external creature records and ``CreatureStats``.

Two input shapes are accepted:

Normalized (what the catalog stores)::

    {"id": 4, "name": "charmander", "spriteUrl": "...",
     "stats": [{"statName": "hp", "baseValue": 39}, ...],
     "types": [{"typeName": "fire"}]}

Raw PokeAPI ``/pokemon/{id}`` payload::

    {"id": 4, "name": "charmander", "sprites": {"front_default": "..."},
     "stats": [{"base_stat": 39, "stat": {"name": "hp"}}, ...],
     "types": [{"slot": 1, "type": {"name": "fire"}}]}

Critical stats (hp/attack/defense) are never defaulted: a record missing one
raises MalformedCreatureRecord.
"""
from __future__ import annotations
from typing import Any, Dict, List, Mapping

from arena.battle.models import CreatureStats, validate_creature
from arena.core.errors import MalformedCreatureRecord

def _stat_pair(entry: Mapping[str, Any]) -> tuple[str, Any]:
    if "statName" in entry:
        return str(entry["statName"]).lower(), entry.get("baseValue")
    stat = entry.get("stat")
    if isinstance(stat, Mapping) and "name" in stat:
        return str(stat["name"]).lower(), entry.get("base_stat")
    raise MalformedCreatureRecord("stats", f"unrecognized stat entry {dict(entry)!r}")

def _type_name(entry: Any) -> str:
    if isinstance(entry, str):
        return entry.lower()
    if isinstance(entry, Mapping):
        if "typeName" in entry:
            return str(entry["typeName"]).lower()
        t = entry.get("type")
        if isinstance(t, Mapping) and "name" in t:
            return str(t["name"]).lower()
    raise MalformedCreatureRecord("types", f"unrecognized type entry {entry!r}")

def _parse_stats(raw: Any) -> Dict[str, int]:
    if not isinstance(raw, list):
        raise MalformedCreatureRecord("stats", "expected a list of stat entries")
    stats: Dict[str, int] = {}
    for entry in raw:
        if not isinstance(entry, Mapping):
            raise MalformedCreatureRecord("stats", f"unrecognized stat entry {entry!r}")
        name, value = _stat_pair(entry)
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedCreatureRecord(name, f"base value must be an integer, got {value!r}")
        stats[name] = value
    return stats

def _parse_types(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, list):
        raise MalformedCreatureRecord("types", "expected a list of type entries")
    # PokeAPI lists carry a slot number; keep primary type first
    if all(isinstance(e, Mapping) and "slot" in e for e in raw):
        raw = sorted(raw, key=lambda e: e["slot"])
    return tuple(_type_name(e) for e in raw)

def creature_from_record(record: Mapping[str, Any]) -> CreatureStats:
    if not isinstance(record, Mapping):
        raise MalformedCreatureRecord("record", f"expected a mapping, got {type(record).__name__}")
    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        raise MalformedCreatureRecord("name", "required field missing")
    try:
        cid = int(record["id"])
    except (KeyError, TypeError, ValueError):
        raise MalformedCreatureRecord("id", f"missing or non-integer id {record.get('id')!r}") from None
    sprite = record.get("spriteUrl")
    if sprite is None and isinstance(record.get("sprites"), Mapping):
        sprite = record["sprites"].get("front_default")
    return validate_creature(CreatureStats(
        id=cid,
        name=name.strip().lower(),
        types=_parse_types(record.get("types")),
        base_stats=_parse_stats(record.get("stats")),
        sprite_url=sprite,
    ))

def creature_to_record(creature: CreatureStats) -> Dict[str, Any]:
    stats: List[Dict[str, Any]] = [{"statName": k, "baseValue": v} for k, v in creature.base_stats.items()]
    return {
        "id": creature.id,
        "name": creature.name,
        "spriteUrl": creature.sprite_url,
        "stats": stats,
        "types": [{"typeName": t} for t in creature.types],
    }

__all__ = ["creature_from_record", "creature_to_record"]
