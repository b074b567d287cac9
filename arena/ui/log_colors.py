"""Battle log category colors and ANSI helpers.

Maps each log category tag to a colorama foreground so a terminal driver
can style entries the way the web UI styled them with CSS classes.
"""
from __future__ import annotations
from typing import Dict
import re

from colorama import Fore, Style

from arena.battle.models import LogCategory, LogEntry

CATEGORY_COLORS: Dict[LogCategory, str] = {
    LogCategory.SYSTEM: Fore.WHITE,
    LogCategory.PLAYER_ATTACK: Fore.CYAN,
    LogCategory.OPPONENT_ATTACK: Fore.MAGENTA,
    LogCategory.PLAYER_DAMAGE: Fore.RED,
    LogCategory.OPPONENT_DAMAGE: Fore.YELLOW,
    LogCategory.VICTORY: Fore.GREEN + Style.BRIGHT,
    LogCategory.DEFEAT: Fore.RED + Style.BRIGHT,
    LogCategory.INFO: Fore.BLUE,
    LogCategory.ERROR: Fore.RED,
}

RESET = Style.RESET_ALL

def style_line(category: LogCategory, text: str) -> str:
    code = CATEGORY_COLORS.get(category, "")
    if not code:
        return text
    return f"{code}{text}{RESET}"

def style_entry(entry: LogEntry) -> str:
    return "\n".join(style_line(cat, text) for cat, text in entry.reveal())

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*m")

def strip_ansi(s: str) -> str:
    return ANSI_ESCAPE_RE.sub('', s)

__all__ = ['CATEGORY_COLORS', 'style_line', 'style_entry', 'strip_ansi']
