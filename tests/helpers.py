"""Shared test helpers."""

from datetime import datetime, timedelta

# 2024-01-01 is a Monday
MONDAY = datetime(2024, 1, 1, 9, 0)

ROSTER = [
    {"user_id": "A", "user_name": "Alice", "credits": 5},
    {"user_id": "B", "user_name": "Ben", "credits": 2},
    {"user_id": "C", "user_name": "Chloe", "credits": 1},
]


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = MONDAY):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 0, **kwargs):
        self.now += timedelta(days=days, **kwargs)
