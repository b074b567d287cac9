from __future__ import annotations
import json, os, random
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, List, Optional
from arena.core.logging import logger

SETTINGS_FILENAME = ".arena_settings.json"
LOG_LEVELS = {"DEBUG","INFO","WARN","ERROR"}

@dataclass
class SettingsData:
    log_level: str = "INFO"             # DEBUG / INFO / WARN / ERROR
    catalog_path: Optional[str] = None  # None -> bundled catalog
    roster_size: int = 12               # creatures offered to the player
    opponent_pool: int = 151            # random opponents drawn from ids 1..pool
    seed: Optional[int] = None          # fixed seed for reproducible battles

    def normalize(self):
        if self.log_level not in LOG_LEVELS:
            self.log_level = "INFO"
        if not isinstance(self.roster_size, int) or self.roster_size < 1:
            self.roster_size = 12
        if not isinstance(self.opponent_pool, int) or self.opponent_pool < 1:
            self.opponent_pool = 151
        if self.seed is not None and not isinstance(self.seed, int):
            self.seed = None
        if self.catalog_path is not None and not isinstance(self.catalog_path, str):
            self.catalog_path = None

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = path or cls._resolve_path()
        if path.exists():
            try:
                raw = json.loads(path.read_text(encoding="utf-8"))
                # Backfill missing fields (migration safe)
                field_names = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in field_names})
                data.normalize()
                logger.debug("SettingsLoaded", path=str(path))
                return cls(data, path)
            except (OSError, ValueError, TypeError, AttributeError) as e:
                logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
        data = SettingsData()
        data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2))
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", error=str(e))

    def update(self, **changes):
        for k, v in changes.items():
            if not hasattr(self.data, k):
                raise AttributeError(f"Unknown setting '{k}'")
            setattr(self.data, k, v)
        self.data.normalize()
        self.apply()
        self._notify()

    def apply(self):
        logger.set_level(self.data.log_level)  # type: ignore[arg-type]

    def catalog_file(self) -> Optional[Path]:
        return Path(self.data.catalog_path).expanduser() if self.data.catalog_path else None

    def make_rng(self) -> random.Random:
        return random.Random(self.data.seed)

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)
