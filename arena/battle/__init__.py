"""
Battle package.
- effectiveness.py (type chart, multiplier, effectiveness tiers)
- models.py (CreatureStats, BattleState, log entries)
- mechanics.py (fixed-level damage formula)
- machine.py (turn transitions, BattleStateMachine)
"""
from .effectiveness import TYPE_CHART, Effectiveness, multiplier
from .models import BattleState, CreatureStats, LogCategory, LogEntry, Outcome, Side, Turn
from .machine import BattleStateMachine, attack, note, start_battle

__all__ = [
    "TYPE_CHART", "Effectiveness", "multiplier",
    "BattleState", "CreatureStats", "LogCategory", "LogEntry", "Outcome", "Side", "Turn",
    "BattleStateMachine", "attack", "note", "start_battle",
]
