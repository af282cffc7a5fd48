"""Persist scheduler state between CLI runs."""

import json
import logging
import random
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, List, Dict, Any

from ..core.config import DEFAULT_HOME
from ..core.errors import ConfigurationError
from ..distribution.scheduler import LeadScheduler

logger = logging.getLogger(__name__)


def trim_assignments(
    assignments: List[Dict[str, Any]],
    current_week: Optional[str],
    limit: int,
) -> List[Dict[str, Any]]:
    """Drop the oldest records from earlier weeks until ``limit`` is met.

    Records from ``current_week`` are always kept, even past the limit,
    since the week's deficits are counted from them.
    """
    if limit <= 0 or len(assignments) <= limit:
        return assignments

    current = [a for a in assignments if current_week and a["week_start"] >= current_week]
    earlier = [a for a in assignments if not (current_week and a["week_start"] >= current_week)]
    room = max(0, limit - len(current))
    return (earlier[-room:] if room else []) + current


class SchedulerStateStore:
    """Load and save a ``LeadScheduler`` as a JSON file."""

    def __init__(self, data_path: Optional[Path] = None, history_limit: int = 10000):
        """Initialize state store."""
        self.data_path = Path(data_path) if data_path else DEFAULT_HOME / "state.json"
        self.history_limit = history_limit

    @property
    def backup_path(self) -> Path:
        return self.data_path.with_name(self.data_path.name + ".bak")

    def load(
        self,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> LeadScheduler:
        """Load the saved scheduler, or a fresh one if nothing usable is on disk.

        An unreadable file is moved to ``backup_path`` so the next save
        cannot overwrite it.
        """
        if self.data_path.exists():
            try:
                with open(self.data_path, 'r') as f:
                    data = json.load(f)
                return LeadScheduler.from_dict(data, seed=seed, rng=rng, clock=clock)
            except (OSError, ValueError, ConfigurationError) as e:
                logger.error(f"Error loading scheduler state: {e}")
                self.data_path.replace(self.backup_path)
                logger.error(f"Moved unreadable state to {self.backup_path}")

        return LeadScheduler(seed=seed, rng=rng, clock=clock)

    def save(self, scheduler: LeadScheduler):
        """Save scheduler state to file."""
        self.data_path.parent.mkdir(parents=True, exist_ok=True)

        data = scheduler.to_dict()
        data["assignments"] = trim_assignments(
            data["assignments"], scheduler.registry.week_start, self.history_limit
        )
        data["updated_at"] = datetime.now().isoformat()

        with open(self.data_path, 'w') as f:
            json.dump(data, f, indent=2)

    def clear(self) -> bool:
        """Delete the saved state."""
        if self.data_path.exists():
            self.data_path.unlink()
            return True
        return False
