"""Tests for the weekly participation registry."""

import pytest

from lead_dispatch.core.errors import ConfigurationError
from lead_dispatch.distribution.participation import ParticipationRegistry, build_participations

from helpers import MONDAY, ROSTER


class TestBuildParticipations:
    """Tests for roster validation and share calculation."""

    def test_scenario_shares(self):
        participations = build_participations(ROSTER, MONDAY)

        shares = {p.user_id: p.target_share for p in participations}
        assert shares == {"A": 0.625, "B": 0.25, "C": 0.125}
        assert all(p.total_credits == 8 for p in participations)

    @pytest.mark.parametrize("credits", [[1], [3, 7, 11, 13], [1, 1, 1], [2, 3, 5, 7, 11, 13, 17, 19]])
    def test_shares_sum_to_one(self, credits):
        entries = [{"user_id": str(i), "user_name": f"Rep {i}", "credits": c} for i, c in enumerate(credits)]
        participations = build_participations(entries, MONDAY)
        assert abs(sum(p.target_share for p in participations) - 1.0) <= 1e-9

    def test_week_keys(self):
        participations = build_participations(ROSTER, MONDAY.replace(day=4))
        assert participations[0].week_start == "2024-01-01"
        assert participations[0].week_end == "2024-01-07"
        assert participations[0].id == "participation-A"

    def test_tuple_entries(self):
        participations = build_participations([("x", "Xavier", 3), ("y", "Yara", 1)], MONDAY)
        assert [p.user_name for p in participations] == ["Xavier", "Yara"]
        assert participations[0].target_share == 0.75

    def test_missing_name_falls_back_to_id(self):
        participations = build_participations([{"user_id": 42, "credits": 1}], MONDAY)
        assert participations[0].user_id == "42"
        assert participations[0].user_name == "42"

    def test_empty_roster(self):
        with pytest.raises(ConfigurationError, match="no participants"):
            build_participations([], MONDAY)

    @pytest.mark.parametrize("credits", [0, -3, 2.5, True, "4", None])
    def test_invalid_credits(self, credits):
        with pytest.raises(ConfigurationError, match="non-positive credits"):
            build_participations([{"user_id": "A", "user_name": "Alice", "credits": credits}], MONDAY)

    def test_duplicate_user(self):
        roster = ROSTER + [{"user_id": "A", "user_name": "Alice again", "credits": 1}]
        with pytest.raises(ConfigurationError, match="duplicate"):
            build_participations(roster, MONDAY)

    def test_missing_credits(self):
        with pytest.raises(ConfigurationError, match="credits"):
            build_participations([{"user_id": "A"}], MONDAY)


class TestParticipationRegistry:
    """Tests for ParticipationRegistry."""

    def test_initialize_and_read(self):
        registry = ParticipationRegistry()
        assert registry.is_initialized is False

        registry.initialize(ROSTER, MONDAY)

        assert registry.is_initialized
        assert registry.week_start == "2024-01-01"
        assert {p.user_id: p.credits for p in registry.participants()} == {"A": 5, "B": 2, "C": 1}
        assert registry.participants() == registry.participants()

    def test_reinitialize_replaces_cohort(self):
        registry = ParticipationRegistry()
        registry.initialize(ROSTER, MONDAY)
        registry.initialize([{"user_id": "Z", "user_name": "Zed", "credits": 4}], MONDAY)

        assert [p.user_id for p in registry.participants()] == ["Z"]
        assert registry.participants()[0].target_share == 1.0

    def test_invalid_roster_keeps_previous_cohort(self):
        registry = ParticipationRegistry()
        registry.initialize(ROSTER, MONDAY)

        with pytest.raises(ConfigurationError):
            registry.initialize([{"user_id": "Z", "user_name": "Zed", "credits": 0}], MONDAY)

        assert len(registry.participants()) == 3

    def test_require(self):
        registry = ParticipationRegistry()
        with pytest.raises(ConfigurationError, match="not been initialized"):
            registry.require()

        registry.initialize(ROSTER, MONDAY)
        assert len(registry.require(MONDAY.replace(day=7))) == 3

        with pytest.raises(ConfigurationError, match="no participation for the week"):
            registry.require(MONDAY.replace(day=8))

    def test_returned_list_is_a_copy(self):
        registry = ParticipationRegistry()
        registry.initialize(ROSTER, MONDAY)
        registry.participants().clear()
        assert len(registry.participants()) == 3
