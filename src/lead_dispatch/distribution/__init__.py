"""Credit-weighted lead distribution with daily deficit correction."""

from .models import (
    WeeklyParticipation,
    DailyQueueItem,
    DailyDeficit,
    LeadAssignment,
    AssignmentResult,
)
from .participation import ParticipationRegistry, build_participations
from .queue_builder import build_daily_queue, calculate_slots, shuffle_by_credits
from .dispatcher import AssignmentDispatcher
from .deficits import DeficitTracker
from .scheduler import LeadScheduler
from .simulation import simulate_week, SimulationResult, SimulatedDay

__all__ = [
    "WeeklyParticipation",
    "DailyQueueItem",
    "DailyDeficit",
    "LeadAssignment",
    "AssignmentResult",
    "ParticipationRegistry",
    "build_participations",
    "build_daily_queue",
    "calculate_slots",
    "shuffle_by_credits",
    "AssignmentDispatcher",
    "DeficitTracker",
    "LeadScheduler",
    "simulate_week",
    "SimulationResult",
    "SimulatedDay",
]
