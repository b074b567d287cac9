"""
Error classes for clearer exception sources.
"""
from __future__ import annotations

class ArenaError(Exception):
    pass

class InvalidTurnError(ArenaError):
    def __init__(self, expected: str, attempted: str):
        super().__init__(f"Attack by '{attempted}' rejected: current turn is '{expected}'")
        self.expected = expected
        self.attempted = attempted

class CreatureFetchError(ArenaError):
    def __init__(self, ref: object, detail: str):
        super().__init__(f"Failed to fetch creature {ref!r}: {detail}")
        self.ref = ref
        self.detail = detail

class MalformedCreatureRecord(ArenaError):
    def __init__(self, field: str, detail: str):
        super().__init__(f"Malformed creature record ({field}): {detail}")
        self.field = field
        self.detail = detail
