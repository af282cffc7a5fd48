"""Real-time lead dispatch from the daily queue."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional

from ..core.errors import QueueEmptyError
from ..core.weeks import date_key
from .models import DailyQueueItem, LeadAssignment, AssignmentResult

logger = logging.getLogger(__name__)


class AssignmentDispatcher:
    """Serve leads from the head of today's queue.

    The queue circulates: whoever receives a lead goes to the back of the
    line instead of leaving it, so the day's rotation repeats for as many
    leads as arrive.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        queue: Optional[List[DailyQueueItem]] = None,
        assignments: Optional[List[LeadAssignment]] = None,
    ):
        self.clock = clock
        self.queue: List[DailyQueueItem] = list(queue or [])
        self.assignments: List[LeadAssignment] = list(assignments or [])

    @property
    def queue_date(self) -> Optional[str]:
        return self.queue[0].date if self.queue else None

    def replace_queue(self, queue: List[DailyQueueItem]):
        """Swap in a freshly built queue."""
        self.queue = list(queue)

    def clear_queue(self):
        self.queue = []

    def assign_lead(self, lead_id: str, week_start: str) -> AssignmentResult:
        """Give ``lead_id`` to the head of the queue and rotate them to the tail."""
        now = self.clock()
        today = date_key(now)

        if not self.queue:
            raise QueueEmptyError("no queue has been built; build today's queue first")
        if self.queue_date != today:
            raise QueueEmptyError(
                f"queue was built for {self.queue_date}, not {today}; build today's queue first"
            )

        head = self.queue[0]
        assignment = LeadAssignment(
            lead_id=lead_id,
            user_id=head.user_id,
            assigned_at=now,
            week_start=week_start,
            date=today,
        )

        rotated = self.queue[1:] + [head]
        rotated = [replace(item, position=index) for index, item in enumerate(rotated)]

        # Commit both together
        self.assignments.append(assignment)
        self.queue = rotated

        logger.info(f"Assigned lead {lead_id} to {head.user_name}")
        return AssignmentResult(user_id=head.user_id, user_name=head.user_name)
