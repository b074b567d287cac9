"""File-backed creature catalog.

Stands in for the remote catalog: a JSON list of normalized creature records
(see ``arena.data.records``). Lookups fail with CreatureFetchError and are
never retried here; callers decide whether to offer a retry.
"""
from __future__ import annotations
import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from arena.battle.models import CreatureStats
from arena.core.errors import CreatureFetchError, MalformedCreatureRecord
from arena.core.logging import logger
from arena.core.paths import CATALOG_FILE
from .records import creature_from_record

DEFAULT_ROSTER_SIZE = 12
DEFAULT_OPPONENT_POOL = 151

@dataclass(frozen=True)
class CatalogEntry:
    id: int
    name: str
    ref: str

class CreatureCatalog:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else CATALOG_FILE
        self._records: Optional[Dict[int, Dict[str, Any]]] = None

    def _load(self) -> Dict[int, Dict[str, Any]]:
        if self._records is not None:
            return self._records
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warn("CatalogLoadFailed", path=str(self.path), error=str(e))
            raise CreatureFetchError(str(self.path), f"catalog unreadable: {e}") from e
        if not isinstance(raw, list):
            raise CreatureFetchError(str(self.path), "catalog must be a JSON list of records")
        records: Dict[int, Dict[str, Any]] = {}
        for rec in raw:
            try:
                records[int(rec["id"])] = rec
            except (KeyError, TypeError, ValueError):
                logger.warn("CatalogEntrySkipped", path=str(self.path), entry=repr(rec)[:60])
        self._records = records
        logger.debug("CatalogLoaded", path=str(self.path), count=len(records))
        return records

    def ids(self) -> List[int]:
        return sorted(self._load())

    def list_creatures(self, limit: int = DEFAULT_ROSTER_SIZE) -> List[CatalogEntry]:
        records = self._load()
        out: List[CatalogEntry] = []
        for cid in sorted(records)[:max(0, limit)]:
            name = str(records[cid].get("name", "")).lower()
            out.append(CatalogEntry(id=cid, name=name, ref=str(cid)))
        return out

    def _resolve_id(self, ref: int | str) -> int:
        records = self._load()
        if isinstance(ref, int) or (isinstance(ref, str) and ref.strip().isdigit()):
            cid = int(ref)
            if cid in records:
                return cid
            raise CreatureFetchError(ref, f"unknown creature id {cid}")
        name = str(ref).strip().lower()
        if not name:
            raise CreatureFetchError(ref, "empty creature reference")
        for cid, rec in records.items():
            if str(rec.get("name", "")).lower() == name:
                return cid
        raise CreatureFetchError(ref, f"unknown creature name '{ref}'")

    def get_creature(self, ref: int | str) -> CreatureStats:
        cid = self._resolve_id(ref)
        try:
            return creature_from_record(self._records[cid])  # type: ignore[index]
        except MalformedCreatureRecord as e:
            logger.warn("MalformedCreatureRecord", ref=ref, field=e.field, detail=e.detail)
            raise

    def random_opponent(self, rng: Optional[random.Random] = None,
                        pool: int = DEFAULT_OPPONENT_POOL) -> CreatureStats:
        """Uniformly random creature with id in 1..pool."""
        rng = rng or random.Random()
        candidates = [cid for cid in self.ids() if 1 <= cid <= pool]
        if not candidates:
            raise CreatureFetchError(f"1..{pool}", "no creatures available in opponent pool")
        return self.get_creature(rng.choice(candidates))

__all__ = ["CatalogEntry", "CreatureCatalog", "DEFAULT_ROSTER_SIZE", "DEFAULT_OPPONENT_POOL"]
