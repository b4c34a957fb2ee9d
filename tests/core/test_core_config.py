"""
Tests for core.config — reservation rules and the ban ladder.
"""

from datetime import timedelta

import pytest

from core.config.rules import (
    BanLadder,
    ReservationRules,
    rules_from_mapping,
    rules_to_mapping,
)


# ── Defaults ─────────────────────────────────────────────────

class TestReservationRulesDefaults:
    def test_windows(self):
        rules = ReservationRules()
        assert rules.check_in_before == timedelta(minutes=10)
        assert rules.check_in_after == timedelta(minutes=10)
        assert rules.cancel_cutoff == timedelta(minutes=30)
        assert rules.max_duration == timedelta(hours=2)

    def test_late_check_in_disabled_by_default(self):
        rules = ReservationRules()
        assert rules.late_check_in_grace == timedelta(0)
        assert rules.late_check_in_enabled is False

    def test_no_show_cancels_by_default(self):
        assert ReservationRules().no_show_cancels_reservation is True

    def test_ladder_defaults(self):
        ladder = ReservationRules().ban_ladder
        assert ladder.strikes_per_ban == 3
        assert ladder.ban_duration == timedelta(days=7)
        assert ladder.bans_before_permanent == 3
        assert ladder.lates_per_no_show == 3

    def test_frozen_immutability(self):
        rules = ReservationRules()
        with pytest.raises(AttributeError):
            rules.cancel_cutoff = timedelta(0)


# ── Validation ───────────────────────────────────────────────

class TestValidation:
    def test_negative_window_rejected(self):
        with pytest.raises(ValueError, match="check_in_before"):
            ReservationRules(check_in_before=timedelta(minutes=-1))

    def test_zero_max_duration_rejected(self):
        with pytest.raises(ValueError, match="max_duration"):
            ReservationRules(max_duration=timedelta(0))

    def test_write_attempts_must_be_positive(self):
        with pytest.raises(ValueError, match="max_write_attempts"):
            ReservationRules(max_write_attempts=0)

    def test_ladder_rejects_zero_strikes(self):
        with pytest.raises(ValueError, match="strikes_per_ban"):
            BanLadder(strikes_per_ban=0)

    def test_ladder_rejects_bool_counts(self):
        with pytest.raises(ValueError):
            BanLadder(lates_per_no_show=True)


# ── Settings mapping ─────────────────────────────────────────

class TestRulesFromMapping:
    def test_empty_mapping_gives_defaults(self):
        assert rules_from_mapping(None) == ReservationRules()
        assert rules_from_mapping({}) == ReservationRules()

    def test_minutes_and_days_are_converted(self):
        rules = rules_from_mapping({
            "CANCEL_CUTOFF_MINUTES": 45,
            "LATE_CHECK_IN_GRACE_MINUTES": 20,
            "BAN_LADDER": {"BAN_DURATION_DAYS": 14, "STRIKES_PER_BAN": 2},
        })
        assert rules.cancel_cutoff == timedelta(minutes=45)
        assert rules.late_check_in_enabled is True
        assert rules.ban_ladder.ban_duration == timedelta(days=14)
        assert rules.ban_ladder.strikes_per_ban == 2
        assert rules.ban_ladder.bans_before_permanent == 3

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="CANCEL_MINUTES"):
            rules_from_mapping({"CANCEL_MINUTES": 30})

    def test_unknown_ladder_key_rejected(self):
        with pytest.raises(ValueError, match="STRIKES"):
            rules_from_mapping({"BAN_LADDER": {"STRIKES": 3}})

    def test_non_numeric_minutes_rejected(self):
        with pytest.raises(ValueError, match="number of minutes"):
            rules_from_mapping({"CHECK_IN_BEFORE_MINUTES": "ten"})

    def test_mapping_inverse(self):
        rules = rules_from_mapping({"NO_SHOW_CANCELS_RESERVATION": False})
        mapping = rules_to_mapping(rules)
        assert mapping["NO_SHOW_CANCELS_RESERVATION"] is False
        assert mapping["CHECK_IN_BEFORE_MINUTES"] == 10
        assert mapping["BAN_LADDER"]["BAN_DURATION_DAYS"] == 7
        assert rules_from_mapping(mapping) == rules
