"""Dispatch configuration with file persistence and environment overrides."""

import json
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / ".lead-dispatch"


@dataclass
class DispatchConfig:
    """Settings for the scheduler and its CLI."""

    # Random seed for queue shuffling (None = real entropy)
    seed: Optional[int] = None

    # Where the CLI keeps the scheduler snapshot between runs
    state_path: Path = field(default_factory=lambda: DEFAULT_HOME / "state.json")

    # Snapshot keeps at most this many assignment records
    assignment_history_limit: int = 10000

    # How many queue entries the CLI previews
    queue_preview_length: int = 10

    updated_at: datetime = field(default_factory=datetime.now)

    def apply_env(self) -> "DispatchConfig":
        """Apply LEAD_DISPATCH_* environment overrides in place."""
        seed = os.getenv("LEAD_DISPATCH_SEED")
        if seed:
            self.seed = int(seed)
        state_path = os.getenv("LEAD_DISPATCH_STATE_PATH")
        if state_path:
            self.state_path = Path(state_path)
        return self


class DispatchConfigManager:
    """Load, update and persist the dispatch configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager."""
        self.config_path = config_path or DEFAULT_HOME / "config.json"
        self.config = self._load_config().apply_env()

    def _load_config(self) -> DispatchConfig:
        """Load configuration from file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                    config = DispatchConfig(
                        seed=data.get("seed"),
                        assignment_history_limit=data.get("assignment_history_limit", 10000),
                        queue_preview_length=data.get("queue_preview_length", 10),
                    )
                    if data.get("state_path"):
                        config.state_path = Path(data["state_path"])
                    if data.get("updated_at"):
                        config.updated_at = datetime.fromisoformat(data["updated_at"])
                    return config
            except (OSError, ValueError) as e:
                logger.error(f"Error loading dispatch config: {e}")

        return DispatchConfig()

    def save_config(self):
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "seed": self.config.seed,
            "state_path": str(self.config.state_path),
            "assignment_history_limit": self.config.assignment_history_limit,
            "queue_preview_length": self.config.queue_preview_length,
            "updated_at": self.config.updated_at.isoformat(),
        }
        with open(self.config_path, 'w') as f:
            json.dump(data, f, indent=2)

    def update(self, **changes: Any) -> DispatchConfig:
        """Update known settings and persist them."""
        for key, value in changes.items():
            if not hasattr(self.config, key) or key == "updated_at":
                raise AttributeError(f"Unknown dispatch setting: {key}")
            if key == "state_path":
                value = Path(value)
            setattr(self.config, key, value)
        self.config.updated_at = datetime.now()
        self.save_config()
        return self.config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.config.seed,
            "state_path": str(self.config.state_path),
            "assignment_history_limit": self.config.assignment_history_limit,
            "queue_preview_length": self.config.queue_preview_length,
        }
