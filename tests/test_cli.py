"""Tests for the leaddispatch command line."""

import json

import pytest
from click.testing import CliRunner

from lead_dispatch.cli.main import cli
from lead_dispatch.core import config as config_module


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CLI runner with settings kept out of the real home directory."""
    monkeypatch.setattr(config_module, "DEFAULT_HOME", tmp_path / "home")
    monkeypatch.delenv("LEAD_DISPATCH_SEED", raising=False)
    monkeypatch.delenv("LEAD_DISPATCH_STATE_PATH", raising=False)
    return CliRunner()


@pytest.fixture
def state(tmp_path):
    return str(tmp_path / "state.json")


def init_week(runner, state):
    return runner.invoke(cli, ["init", "-r", "A:Alice:5", "-r", "B:Ben:2", "-r", "C:Chloe:1", "--state", state])


class TestCli:
    """Tests for the daily CLI cycle."""

    def test_init(self, runner, state):
        result = init_week(runner, state)

        assert result.exit_code == 0, result.output
        assert "Alice" in result.output
        assert "62.5%" in result.output

    def test_init_rejects_bad_credits(self, runner, state):
        result = runner.invoke(cli, ["init", "-r", "A:Alice:0", "--state", state])

        assert result.exit_code == 1
        assert "non-positive credits" in result.output

    def test_init_rejects_malformed_rep(self, runner, state):
        result = runner.invoke(cli, ["init", "-r", "Alice", "--state", state])
        assert result.exit_code == 2

    def test_init_from_roster_file(self, runner, state, tmp_path):
        roster = tmp_path / "roster.csv"
        roster.write_text("user_id,user_name,credits\nA,Alice,3\nB,Ben,1\n")

        result = runner.invoke(cli, ["init", "--file", str(roster), "--state", state])

        assert result.exit_code == 0, result.output
        assert "75.0%" in result.output

    def test_init_from_json_roster(self, runner, state, tmp_path):
        roster = tmp_path / "roster.json"
        roster.write_text(json.dumps([{"user_id": "A", "user_name": "Alice", "credits": 2}]))

        result = runner.invoke(cli, ["init", "--file", str(roster), "--state", state])

        assert result.exit_code == 0, result.output
        assert "100.0%" in result.output

    def test_assign_before_queue(self, runner, state):
        init_week(runner, state)

        result = runner.invoke(cli, ["assign", "lead-1", "--state", state])

        assert result.exit_code == 1
        assert "build today's queue" in result.output

    def test_daily_cycle(self, runner, state):
        init_week(runner, state)

        queue = runner.invoke(cli, ["queue", "--state", state])
        assert queue.exit_code == 0, queue.output
        assert "8 slots" in queue.output

        assign = runner.invoke(cli, ["assign", "lead-1", "lead-2", "lead-3", "--state", state])
        assert assign.exit_code == 0, assign.output
        assert "lead-1 → Alice" in assign.output
        assert "lead-2 → Ben" in assign.output
        assert "lead-3 → Chloe" in assign.output

        close = runner.invoke(cli, ["close-day", "--state", state])
        assert close.exit_code == 0, close.output
        assert "Deficits for" in close.output

        report = runner.invoke(cli, ["report", "--state", state])
        assert report.exit_code == 0, report.output
        assert "WEEKLY LEAD DISTRIBUTION REPORT" in report.output
        assert "Total: 3 leads distributed" in report.output

        with open(state) as f:
            assert len(json.load(f)["assignments"]) == 3

    def test_report_to_file(self, runner, state, tmp_path):
        init_week(runner, state)
        output = tmp_path / "report.txt"

        result = runner.invoke(cli, ["report", "--output", str(output), "--state", state])

        assert result.exit_code == 0, result.output
        assert output.read_text().startswith("=" * 60)

    def test_report_without_week(self, runner, state):
        result = runner.invoke(cli, ["report", "--state", state])
        assert result.exit_code == 1

    def test_status(self, runner, state):
        assert "No active week" in runner.invoke(cli, ["status", "--state", state]).output

        init_week(runner, state)
        result = runner.invoke(cli, ["status", "--state", state])

        assert result.exit_code == 0, result.output
        assert "Chloe" in result.output

    def test_simulate(self, runner):
        result = runner.invoke(cli, ["simulate", "--seed", "3"])

        assert result.exit_code == 0, result.output
        assert "Total: 105 leads distributed" in result.output

    def test_simulate_bad_leads(self, runner):
        result = runner.invoke(cli, ["simulate", "--leads", "1,x"])
        assert result.exit_code == 2

    def test_config_show_and_set(self, runner, tmp_path):
        result = runner.invoke(cli, ["config", "set", "--seed", "11"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "home" / "config.json").exists()

        shown = runner.invoke(cli, ["config", "show"])
        assert "seed: 11" in shown.output

    def test_queue_preview_zero(self, runner, state):
        init_week(runner, state)

        result = runner.invoke(cli, ["queue", "-n", "0", "--state", state])

        assert result.exit_code == 0, result.output
        assert "8 slots" in result.output
        assert " → " not in result.output

    def test_seeded_queue_varies_by_day(self, runner, state):
        runner.invoke(cli, ["config", "set", "--seed", "7"])
        reps = [arg for i in range(8) for arg in ("-r", f"U{i}:Rep {i}:1")]
        runner.invoke(cli, ["init", *reps, "--week-of", "2024-01-01", "--state", state])

        def queue_order(day):
            result = runner.invoke(cli, ["queue", "--date", day, "--state", state])
            assert result.exit_code == 0, result.output
            with open(state) as f:
                return [item["user_id"] for item in json.load(f)["queue"]]

        monday = queue_order("2024-01-01")
        tuesday = queue_order("2024-01-02")

        assert tuesday != monday
        assert queue_order("2024-01-01") == monday
