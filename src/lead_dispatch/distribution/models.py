"""Data models for weekly lead distribution."""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Dict, Any


@dataclass(frozen=True)
class WeeklyParticipation:
    """A representative's credit entitlement for one week."""

    id: str
    user_id: str
    user_name: str
    week_start: str  # YYYY-MM-DD (Monday)
    week_end: str  # YYYY-MM-DD (Sunday)
    credits: int
    total_credits: int
    target_share: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WeeklyParticipation':
        """Create from dictionary."""
        return cls(**data)


@dataclass
class DailyQueueItem:
    """One slot in a day's assignment queue."""

    id: str
    date: str
    user_id: str
    user_name: str
    position: int
    credits: int
    slots_in_queue: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DailyQueueItem':
        """Create from dictionary."""
        return cls(**data)


@dataclass(frozen=True)
class DailyDeficit:
    """Gap between a representative's fair and actual lead count on a date."""

    user_id: str
    user_name: str
    date: str
    target_leads: float
    actual_leads: int
    deficit: float
    cumulative_deficit: float

    @property
    def is_under_served(self) -> bool:
        return self.deficit > 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DailyDeficit':
        """Create from dictionary."""
        return cls(**data)


@dataclass(frozen=True)
class LeadAssignment:
    """Append-only record of a dispatched lead."""

    lead_id: str
    user_id: str
    assigned_at: datetime
    week_start: str
    date: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data['assigned_at'] = self.assigned_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LeadAssignment':
        """Create from dictionary."""
        data = dict(data)
        data['assigned_at'] = datetime.fromisoformat(data['assigned_at'])
        return cls(**data)


@dataclass(frozen=True)
class AssignmentResult:
    """Who received a dispatched lead."""

    user_id: str
    user_name: str
