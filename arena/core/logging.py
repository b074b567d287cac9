"""
Lightweight logger used across the project.
Level colors come from colorama; pass ``color=False`` for plain output.
"""
from __future__ import annotations
import sys
from datetime import datetime, timezone
from typing import Literal, Any

from colorama import Fore, Style, just_fix_windows_console

Level = Literal["DEBUG","INFO","WARN","ERROR"]

just_fix_windows_console()
COLORS = {
    "DEBUG": Fore.BLUE,
    "INFO": Fore.GREEN,
    "WARN": Fore.YELLOW,
    "ERROR": Fore.RED
}
RESET = Style.RESET_ALL

class Logger:
    _order = {"DEBUG":10,"INFO":20,"WARN":30,"ERROR":40}
    def __init__(self, level: Level = "INFO", stream=None, color: bool = True):
        self.threshold = self._order[level]
        self.stream = stream
        self.color = color

    def set_level(self, level: Level):
        self.threshold = self._order.get(level, 20)

    def enabled(self, lvl: Level) -> bool:
        return self._order[lvl] >= self.threshold

    def _emit(self, lvl: Level, msg: str, **extra: Any):
        if not self.enabled(lvl):
            return
        ts = datetime.now(timezone.utc).isoformat(timespec="seconds")
        extras = ""
        if extra:
            kv = " ".join(f"{k}={v}" for k,v in extra.items())
            extras = " " + kv
        color, reset = (COLORS[lvl], RESET) if self.color else ("", "")
        out = self.stream or sys.stdout
        out.write(f"{color}{ts} [{lvl}] {msg}{extras}{reset}\n")

    def debug(self, msg: str, **kw): self._emit("DEBUG", msg, **kw)
    def info(self, msg: str, **kw): self._emit("INFO", msg, **kw)
    def warn(self, msg: str, **kw): self._emit("WARN", msg, **kw)
    def error(self, msg: str, **kw): self._emit("ERROR", msg, **kw)

logger = Logger("INFO")
