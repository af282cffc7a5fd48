"""Drive a scheduler through a simulated week."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, List, Optional, Sequence

from ..core.weeks import week_dates
from .models import DailyDeficit
from .participation import ParticipantEntry
from .queue_builder import slot_counts
from .scheduler import LeadScheduler

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LEADS = [16, 12, 20, 8, 24, 15, 10]

DEFAULT_PARTICIPANTS = [
    {"user_id": "1", "user_name": "Alice Morgan", "credits": 5},
    {"user_id": "2", "user_name": "Ben Carter", "credits": 2},
    {"user_id": "3", "user_name": "Chloe Diaz", "credits": 1},
]


@dataclass
class SimulatedDay:
    """What happened on one simulated day."""
    day: date
    queue_slots: Dict[str, int]
    queue_preview: List[str]
    leads_assigned: Dict[str, int]
    deficits: List[DailyDeficit] = field(default_factory=list)

    @property
    def total_leads(self) -> int:
        return sum(self.leads_assigned.values())


@dataclass
class SimulationResult:
    """Outcome of a simulated week."""
    days: List[SimulatedDay]
    weekly_counts: Dict[str, int]
    report: str

    @property
    def total_leads(self) -> int:
        return sum(self.weekly_counts.values())


def simulate_week(
    scheduler: LeadScheduler,
    participants: Optional[Sequence[ParticipantEntry]] = None,
    daily_lead_counts: Optional[Sequence[int]] = None,
    week_of: Optional[date] = None,
    preview_length: int = 10,
) -> SimulationResult:
    """Run queue build, dispatch and deficit calculation for each day.

    The scheduler's clock is pinned to noon of each simulated day and put
    back when the run ends, even on error.
    """
    participants = list(participants or DEFAULT_PARTICIPANTS)
    daily_lead_counts = list(daily_lead_counts or DEFAULT_DAILY_LEADS)
    if len(daily_lead_counts) > 7:
        raise ValueError("a week has at most 7 days of leads")
    if any(count < 0 for count in daily_lead_counts):
        raise ValueError("daily lead counts cannot be negative")

    dates = week_dates(week_of or scheduler.clock())
    monday = dates[0]
    original_clock = scheduler.clock
    days: List[SimulatedDay] = []

    try:
        scheduler.clock = lambda: datetime.combine(monday, time(12, 0))
        scheduler.initialize_weekly_participation(participants, week_of=monday)
        names = {p.user_id: p.user_name for p in scheduler.get_active_participants()}

        for offset, (current, lead_count) in enumerate(zip(dates, daily_lead_counts)):
            scheduler.clock = lambda current=current: datetime.combine(current, time(12, 0))

            queue = scheduler.build_daily_queue(current)
            received: Counter = Counter()
            for i in range(lead_count):
                result = scheduler.assign_lead(f"lead-day{offset + 1}-{i + 1}")
                received[result.user_id] += 1

            deficits = scheduler.calculate_daily_deficit(current)
            days.append(SimulatedDay(
                day=current,
                queue_slots=slot_counts(queue),
                queue_preview=[item.user_name for item in queue[:preview_length]],
                leads_assigned={user_id: received.get(user_id, 0) for user_id in names},
                deficits=deficits,
            ))
            logger.debug(f"Simulated {current.isoformat()}: {lead_count} leads")

        return SimulationResult(
            days=days,
            weekly_counts=scheduler.assignment_counts(),
            report=scheduler.generate_weekly_report(),
        )
    finally:
        scheduler.clock = original_clock
