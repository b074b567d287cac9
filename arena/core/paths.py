"""
Centralized path helpers (works with the current flat layout).
"""
from __future__ import annotations
from pathlib import Path

# This file lives at arena/core/paths.py
PACKAGE = Path(__file__).resolve().parents[1]   # the 'arena' package directory
DATA = PACKAGE / "data"
CATALOG_FILE = DATA / "creatures.json"
