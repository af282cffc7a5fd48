"""Day-over-day deficit tracking."""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Union

from ..core.weeks import date_key, parse_date_key
from .models import WeeklyParticipation, LeadAssignment, DailyDeficit

logger = logging.getLogger(__name__)


def count_user_leads(
    assignments: List[LeadAssignment],
    user_id: str,
    week_start: str,
    end_date: str,
) -> int:
    """Leads ``user_id`` received in the week up to and including ``end_date``."""
    return sum(
        1 for a in assignments
        if a.user_id == user_id and a.week_start == week_start and a.date <= end_date
    )


def count_total_leads(
    assignments: List[LeadAssignment],
    week_start: str,
    end_date: str,
) -> int:
    """All leads dispatched in the week up to and including ``end_date``."""
    return sum(1 for a in assignments if a.week_start == week_start and a.date <= end_date)


class DeficitTracker:
    """Compare each representative's actual leads with their fair share."""

    def __init__(self, deficits: Optional[List[DailyDeficit]] = None):
        self.deficits: List[DailyDeficit] = list(deficits or [])

    def for_date(self, day: Union[date, datetime, str]) -> List[DailyDeficit]:
        key = day if isinstance(day, str) else date_key(day)
        return [d for d in self.deficits if d.date == key]

    def cumulative_for(self, user_id: str, day: Union[date, datetime, str]) -> float:
        key = day if isinstance(day, str) else date_key(day)
        for d in self.deficits:
            if d.user_id == user_id and d.date == key:
                return d.cumulative_deficit
        return 0.0

    def latest_before(self, day: Union[date, datetime], week_start: str) -> Dict[str, float]:
        """Cumulative deficits from the newest snapshot dated before ``day`` in the week."""
        key = date_key(day)
        earlier = [d.date for d in self.deficits if week_start <= d.date < key]
        if not earlier:
            return {}
        newest = max(earlier)
        return {d.user_id: d.cumulative_deficit for d in self.deficits if d.date == newest}

    def calculate(
        self,
        participations: List[WeeklyParticipation],
        assignments: List[LeadAssignment],
        day: Union[date, datetime],
    ) -> List[DailyDeficit]:
        """Compute and store one row per participant for ``day``.

        Recomputing a date replaces that date's rows instead of adding to
        them, so the cumulative value never double counts.
        """
        day_key = date_key(day)
        yesterday_key = date_key(parse_date_key(day_key) - timedelta(days=1))
        week_start = participations[0].week_start

        total_leads = count_total_leads(assignments, week_start, day_key)

        rows = []
        for p in participations:
            actual = count_user_leads(assignments, p.user_id, week_start, day_key)
            target = p.target_share * total_leads
            deficit = target - actual
            cumulative = self.cumulative_for(p.user_id, yesterday_key) + deficit

            logger.debug(
                f"{p.user_name} on {day_key}: target {target:.2f}, actual {actual}, "
                f"deficit {deficit:.2f}, cumulative {cumulative:.2f}"
            )
            rows.append(DailyDeficit(
                user_id=p.user_id,
                user_name=p.user_name,
                date=day_key,
                target_leads=target,
                actual_leads=actual,
                deficit=deficit,
                cumulative_deficit=cumulative,
            ))

        self.deficits = [d for d in self.deficits if d.date != day_key] + rows
        return list(rows)

    def clear(self):
        self.deficits = []
