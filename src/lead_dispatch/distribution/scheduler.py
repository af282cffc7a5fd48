"""Lead distribution scheduler.

Ties the weekly cohort, the daily queue, the assignment log and the
deficit history together. The host builds one scheduler and routes every
operation through it; callers are expected to serialize access.

Typical day::

    scheduler.build_daily_queue()          # morning
    scheduler.assign_lead("lead-123")      # per incoming lead
    scheduler.calculate_daily_deficit()    # end of day
"""

import logging
import random
from collections import Counter
from datetime import date, datetime
from typing import Callable, Dict, Iterable, List, Optional, Union, Any

from ..core.errors import ConfigurationError
from ..core.weeks import date_key, week_start as start_of_week
from .deficits import DeficitTracker, count_user_leads, count_total_leads
from .dispatcher import AssignmentDispatcher
from .models import (
    WeeklyParticipation,
    DailyQueueItem,
    DailyDeficit,
    LeadAssignment,
    AssignmentResult,
)
from .participation import ParticipationRegistry, ParticipantEntry
from .queue_builder import build_daily_queue

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


class LeadScheduler:
    """Fair, credit-weighted lead distribution for one team."""

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.rng = rng or random.Random(seed)
        self.clock = clock
        self.registry = ParticipationRegistry()
        self.dispatcher = AssignmentDispatcher(clock=self._now)
        self.tracker = DeficitTracker()

    def _now(self) -> datetime:
        # Indirection so a swapped clock reaches the dispatcher too
        return self.clock()

    def _today(self) -> date:
        return self._now().date()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def initialize_weekly_participation(
        self,
        entries: Iterable[ParticipantEntry],
        week_of: Optional[DateLike] = None,
    ) -> List[WeeklyParticipation]:
        """Start a new week for ``entries``.

        Drops the current queue and all carried deficits. The assignment
        log is kept; earlier weeks simply stop counting.
        """
        participations = self.registry.initialize(entries, week_of or self._today())
        self.dispatcher.clear_queue()
        self.tracker.clear()
        return participations

    def build_daily_queue(
        self,
        day: Optional[DateLike] = None,
        participations: Optional[List[WeeklyParticipation]] = None,
        deficit_by_user: Optional[Dict[str, float]] = None,
    ) -> List[DailyQueueItem]:
        """Build and install the queue for ``day`` (default today).

        Without explicit deficits the newest snapshot computed before
        ``day`` in the cohort's week is used.
        """
        day = day or self._today()
        if participations is None:
            participations = self.registry.require()
        if deficit_by_user is None:
            week_start = participations[0].week_start if participations else None
            deficit_by_user = self.tracker.latest_before(day, week_start) if week_start else {}

        queue = build_daily_queue(participations, deficit_by_user, day, self.rng)
        self.dispatcher.replace_queue(queue)
        return list(queue)

    def assign_lead(self, lead_id: str) -> AssignmentResult:
        """Dispatch one lead to whoever is at the head of today's queue."""
        week_start = self.registry.week_start
        if week_start is None:
            week_start = date_key(start_of_week(self._today()))
        return self.dispatcher.assign_lead(lead_id, week_start)

    def calculate_daily_deficit(self, day: Optional[DateLike] = None) -> List[DailyDeficit]:
        """Compute and store each participant's deficit for ``day``."""
        day = day or self._today()
        participations = self.registry.require(day)
        return self.tracker.calculate(participations, self.dispatcher.assignments, day)

    def generate_weekly_report(self) -> str:
        """Report on the current cohort's week so far."""
        from ..reporting.weekly_report import generate_weekly_report

        participations = self.registry.require()
        return generate_weekly_report(participations, self.assignment_counts())

    def reset(self):
        """Forget everything."""
        self.registry.clear()
        self.dispatcher = AssignmentDispatcher(clock=self._now)
        self.tracker.clear()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def get_active_participants(self) -> List[WeeklyParticipation]:
        return self.registry.participants()

    def get_today_queue(self) -> List[DailyQueueItem]:
        return [DailyQueueItem(**item.to_dict()) for item in self.dispatcher.queue]

    def get_assignments(self) -> List[LeadAssignment]:
        return list(self.dispatcher.assignments)

    def get_deficits(self, day: Optional[DateLike] = None) -> List[DailyDeficit]:
        if day is None:
            return list(self.tracker.deficits)
        return self.tracker.for_date(day)

    def get_user_leads_in_week(self, user_id: str, week_start: str, end_date: str) -> int:
        return count_user_leads(self.dispatcher.assignments, user_id, week_start, end_date)

    def get_total_leads_in_week(self, week_start: str, end_date: str) -> int:
        return count_total_leads(self.dispatcher.assignments, week_start, end_date)

    def assignment_counts(self, week_start: Optional[str] = None) -> Dict[str, int]:
        """Leads per user for ``week_start`` (default the cohort's week)."""
        week_start = week_start or self.registry.week_start
        return dict(Counter(
            a.user_id for a in self.dispatcher.assignments if a.week_start == week_start
        ))

    def get_current_state(self) -> Dict[str, List]:
        return {
            "participations": self.get_active_participants(),
            "queue": self.get_today_queue(),
            "assignments": self.get_assignments(),
            "deficits": self.get_deficits(),
        }

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data snapshot of all four collections."""
        return {
            "participations": [p.to_dict() for p in self.registry.participants()],
            "queue": [item.to_dict() for item in self.dispatcher.queue],
            "assignments": [a.to_dict() for a in self.dispatcher.assignments],
            "deficits": [d.to_dict() for d in self.tracker.deficits],
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> 'LeadScheduler':
        """Rebuild a scheduler from ``to_dict`` output."""
        scheduler = cls(seed=seed, rng=rng, clock=clock)
        try:
            scheduler.registry = ParticipationRegistry([
                WeeklyParticipation.from_dict(p) for p in data.get("participations", [])
            ])
            scheduler.dispatcher = AssignmentDispatcher(
                clock=scheduler._now,
                queue=[DailyQueueItem.from_dict(q) for q in data.get("queue", [])],
                assignments=[LeadAssignment.from_dict(a) for a in data.get("assignments", [])],
            )
            scheduler.tracker = DeficitTracker([
                DailyDeficit.from_dict(d) for d in data.get("deficits", [])
            ])
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid scheduler snapshot: {e}") from e
        return scheduler
