"""Weekly participation registry."""

import logging
from datetime import date, datetime
from numbers import Integral
from typing import Dict, List, Iterable, Optional, Union, Tuple, Any

from ..core.errors import ConfigurationError
from ..core.weeks import week_start, week_end, date_key
from .models import WeeklyParticipation

logger = logging.getLogger(__name__)

ParticipantEntry = Union[Dict[str, Any], Tuple[str, str, int]]


def _normalize_entry(entry: ParticipantEntry) -> Tuple[str, str, int]:
    """Accept a dict with user_id/user_name/credits or a 3-tuple."""
    if isinstance(entry, dict):
        try:
            user_id = entry["user_id"]
            credits = entry["credits"]
        except KeyError as e:
            raise ConfigurationError(f"participant entry missing {e.args[0]}") from e
        user_name = entry.get("user_name") or str(user_id)
    else:
        try:
            user_id, user_name, credits = entry
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid participant entry: {entry!r}") from e

    # bool is an Integral too
    if isinstance(credits, bool) or not isinstance(credits, Integral) or credits <= 0:
        raise ConfigurationError(f"non-positive credits for {user_id}: {credits!r}")

    return str(user_id), str(user_name), int(credits)


def build_participations(
    entries: Iterable[ParticipantEntry],
    week_of: Union[date, datetime],
) -> List[WeeklyParticipation]:
    """Validate a roster and derive each member's share of the cohort total."""
    normalized = [_normalize_entry(e) for e in entries]
    if not normalized:
        raise ConfigurationError("no participants")

    seen = set()
    for user_id, _, _ in normalized:
        if user_id in seen:
            raise ConfigurationError(f"duplicate participant: {user_id}")
        seen.add(user_id)

    total_credits = sum(credits for _, _, credits in normalized)
    start = date_key(week_start(week_of))
    end = date_key(week_end(week_of))

    return [
        WeeklyParticipation(
            id=f"participation-{user_id}",
            user_id=user_id,
            user_name=user_name,
            week_start=start,
            week_end=end,
            credits=credits,
            total_credits=total_credits,
            target_share=credits / total_credits,
        )
        for user_id, user_name, credits in normalized
    ]


class ParticipationRegistry:
    """Holds the current week's cohort.

    The cohort is only ever replaced wholesale: credits cannot change
    mid-week without re-initializing everyone, since every target share
    depends on the group total.
    """

    def __init__(self, participations: Optional[List[WeeklyParticipation]] = None):
        self._participations: List[WeeklyParticipation] = list(participations or [])

    def initialize(
        self,
        entries: Iterable[ParticipantEntry],
        week_of: Union[date, datetime],
    ) -> List[WeeklyParticipation]:
        """Start a new week. Nothing changes if the roster is invalid."""
        participations = build_participations(entries, week_of)
        self._participations = participations

        logger.info(
            f"Initialized week {participations[0].week_start} with "
            f"{len(participations)} participants, {participations[0].total_credits} credits"
        )
        return list(participations)

    @property
    def is_initialized(self) -> bool:
        return bool(self._participations)

    @property
    def week_start(self) -> Optional[str]:
        return self._participations[0].week_start if self._participations else None

    @property
    def week_end(self) -> Optional[str]:
        return self._participations[0].week_end if self._participations else None

    def participants(self) -> List[WeeklyParticipation]:
        return list(self._participations)

    def covers(self, day: Union[date, datetime]) -> bool:
        """Whether ``day`` falls inside the cohort's week."""
        return self.is_initialized and date_key(week_start(day)) == self.week_start

    def require(self, day: Optional[Union[date, datetime]] = None) -> List[WeeklyParticipation]:
        """Return the cohort, or raise if none covers ``day``."""
        if not self._participations:
            raise ConfigurationError("weekly participation has not been initialized")
        if day is not None and not self.covers(day):
            raise ConfigurationError(
                f"no participation for the week of {date_key(day)} "
                f"(current week starts {self.week_start})"
            )
        return list(self._participations)

    def clear(self):
        self._participations = []
