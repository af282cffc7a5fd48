"""JSON snapshot storage for the scheduler."""

from .state_store import SchedulerStateStore

__all__ = ["SchedulerStateStore"]
