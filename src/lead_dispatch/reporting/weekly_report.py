"""Weekly lead distribution report."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from ..distribution.models import WeeklyParticipation

# Float noise below this counts as on target
TOLERANCE = 1e-9


class DistributionStatus(Enum):
    """How a representative's received leads compare to their target."""
    UNDER = "under"
    OVER = "over"
    ON_TARGET = "on_target"


@dataclass
class ParticipantSummary:
    """One representative's line in the weekly report."""
    user_id: str
    user_name: str
    credits: int
    target_share: float
    target_leads: float
    actual_leads: int
    accuracy: float  # percent
    status: DistributionStatus

    @property
    def gap(self) -> float:
        return self.target_leads - self.actual_leads


def summarize_week(
    participations: List[WeeklyParticipation],
    assignment_counts: Dict[str, int],
) -> List[ParticipantSummary]:
    """Per-participant figures behind the report."""
    total_leads = sum(assignment_counts.values())

    summaries = []
    for p in participations:
        actual = assignment_counts.get(p.user_id, 0)
        target = p.target_share * total_leads
        gap = target - actual
        accuracy = actual / target * 100 if target > 0 else 0.0

        if gap > TOLERANCE:
            status = DistributionStatus.UNDER
        elif gap < -TOLERANCE:
            status = DistributionStatus.OVER
        else:
            status = DistributionStatus.ON_TARGET

        summaries.append(ParticipantSummary(
            user_id=p.user_id,
            user_name=p.user_name,
            credits=p.credits,
            target_share=p.target_share,
            target_leads=target,
            actual_leads=actual,
            accuracy=accuracy,
            status=status,
        ))

    return summaries


def _status_text(summary: ParticipantSummary) -> str:
    if summary.status == DistributionStatus.UNDER:
        return f"UNDER by {summary.gap:.1f}"
    if summary.status == DistributionStatus.OVER:
        return f"OVER by {abs(summary.gap):.1f}"
    return "ON TARGET"


def generate_weekly_report(
    participations: List[WeeklyParticipation],
    assignment_counts: Dict[str, int],
) -> str:
    """Plain text weekly summary. Same inputs always give the same text."""
    total_leads = sum(assignment_counts.values())

    lines = [
        "=" * 60,
        "WEEKLY LEAD DISTRIBUTION REPORT",
    ]
    if participations:
        lines.append(f"Week: {participations[0].week_start} to {participations[0].week_end}")
    lines.extend([
        "=" * 60,
        "",
    ])

    for summary in summarize_week(participations, assignment_counts):
        lines.extend([
            summary.user_name,
            f"  Credits: {summary.credits} ({summary.target_share * 100:.1f}%)",
            f"  Target: {summary.target_leads:.1f} leads",
            f"  Received: {summary.actual_leads} leads",
            f"  Accuracy: {summary.accuracy:.1f}%",
            f"  Status: {_status_text(summary)}",
            "",
        ])

    lines.extend([
        "-" * 60,
        f"Total: {total_leads} leads distributed",
    ])

    return "\n".join(lines)
