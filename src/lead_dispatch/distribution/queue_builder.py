"""Daily assignment queue construction.

Each representative gets a number of slots equal to their credits, moved
up or down by whole units of carried deficit. Slots are grouped by the
representative's nominal credits, shuffled inside each group, then dealt
out round-robin from the highest-credit group down so heavy hitters come
up more often without starving anyone at the tail.
"""

import logging
import math
import random
from collections import Counter
from datetime import date, datetime
from typing import Dict, List, Optional, Union

from ..core.errors import ConfigurationError
from ..core.weeks import date_key
from .models import WeeklyParticipation, DailyQueueItem

logger = logging.getLogger(__name__)


def calculate_slots(credits: int, deficit: float = 0) -> int:
    """Slots for one day given nominal credits and the carried deficit."""
    if deficit > 0:
        # Under-served: +1 slot per whole lead owed
        return credits + math.floor(deficit)
    if deficit < 0:
        # Over-served: -1 slot per whole lead of surplus, never below 1
        return max(1, credits + math.ceil(deficit))
    return credits


def shuffle_by_credits(
    entries: List[WeeklyParticipation],
    rng: random.Random,
) -> List[WeeklyParticipation]:
    """Shuffle within equal-credit groups and interleave groups high to low."""
    groups: Dict[int, List[WeeklyParticipation]] = {}
    for entry in entries:
        groups.setdefault(entry.credits, []).append(entry)

    # Sorted keys so a seeded rng always shuffles groups in the same order
    credit_values = sorted(groups, reverse=True)
    for credits in credit_values:
        rng.shuffle(groups[credits])

    ordered: List[WeeklyParticipation] = []
    depth = max((len(g) for g in groups.values()), default=0)
    for i in range(depth):
        for credits in credit_values:
            group = groups[credits]
            if i < len(group):
                ordered.append(group[i])

    return ordered


def build_daily_queue(
    participations: List[WeeklyParticipation],
    deficit_by_user: Optional[Dict[str, float]] = None,
    day: Union[date, datetime, None] = None,
    rng: Optional[random.Random] = None,
) -> List[DailyQueueItem]:
    """Build a fresh queue for ``day``.

    Users missing from ``deficit_by_user`` get no adjustment. The result is
    a new list; nothing is merged with any previous queue.
    """
    if not participations:
        raise ConfigurationError("no participants to build a queue from")

    deficit_by_user = deficit_by_user or {}
    rng = rng or random.Random()
    day_key = date_key(day or datetime.now())

    expanded: List[WeeklyParticipation] = []
    for p in participations:
        slots = calculate_slots(p.credits, deficit_by_user.get(p.user_id, 0))
        logger.debug(
            f"{p.user_name}: {p.credits} credits, "
            f"deficit {deficit_by_user.get(p.user_id, 0):.2f} -> {slots} slots"
        )
        expanded.extend([p] * slots)

    slot_counts = Counter(p.user_id for p in expanded)
    ordered = shuffle_by_credits(expanded, rng)

    queue = [
        DailyQueueItem(
            id=f"queue-{p.user_id}-{position}",
            date=day_key,
            user_id=p.user_id,
            user_name=p.user_name,
            position=position,
            credits=p.credits,
            slots_in_queue=slot_counts[p.user_id],
        )
        for position, p in enumerate(ordered)
    ]

    logger.info(f"Built queue for {day_key}: {len(queue)} slots, {len(slot_counts)} participants")
    return queue


def slot_counts(queue: List[DailyQueueItem]) -> Dict[str, int]:
    """Number of queue slots held by each user."""
    return dict(Counter(item.user_id for item in queue))
