"""Tests for dispatch configuration."""

import tempfile
from pathlib import Path

import pytest

from lead_dispatch.core.config import DispatchConfig, DispatchConfigManager


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("LEAD_DISPATCH_SEED", raising=False)
    monkeypatch.delenv("LEAD_DISPATCH_STATE_PATH", raising=False)


class TestDispatchConfigManager:
    """Tests for DispatchConfigManager."""

    def test_defaults(self, temp_data_dir):
        manager = DispatchConfigManager(temp_data_dir / "config.json")

        assert manager.config.seed is None
        assert manager.config.assignment_history_limit == 10000
        assert manager.config.queue_preview_length == 10
        assert manager.config.state_path.name == "state.json"

    def test_update_persists(self, temp_data_dir):
        path = temp_data_dir / "config.json"
        DispatchConfigManager(path).update(seed=42, state_path=str(temp_data_dir / "s.json"))

        reloaded = DispatchConfigManager(path)

        assert reloaded.config.seed == 42
        assert reloaded.config.state_path == temp_data_dir / "s.json"

    def test_unknown_setting(self, temp_data_dir):
        with pytest.raises(AttributeError):
            DispatchConfigManager(temp_data_dir / "config.json").update(colour="blue")

    def test_corrupt_file_uses_defaults(self, temp_data_dir):
        path = temp_data_dir / "config.json"
        path.write_text("[[[")

        assert DispatchConfigManager(path).config.queue_preview_length == 10

    def test_environment_overrides(self, temp_data_dir, monkeypatch):
        monkeypatch.setenv("LEAD_DISPATCH_SEED", "7")
        monkeypatch.setenv("LEAD_DISPATCH_STATE_PATH", str(temp_data_dir / "env.json"))

        config = DispatchConfigManager(temp_data_dir / "config.json").config

        assert config.seed == 7
        assert config.state_path == temp_data_dir / "env.json"

    def test_apply_env_without_overrides(self):
        config = DispatchConfig(seed=3)
        assert config.apply_env().seed == 3
