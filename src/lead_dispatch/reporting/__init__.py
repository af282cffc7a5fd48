"""Weekly distribution reporting."""

from .weekly_report import (
    DistributionStatus,
    ParticipantSummary,
    summarize_week,
    generate_weekly_report,
)

__all__ = [
    'DistributionStatus',
    'ParticipantSummary',
    'summarize_week',
    'generate_weekly_report',
]
