"""
Roombook Command Layer — Tests
==============================
Rejection taxonomy and the ACCEPTED/REJECTED outcome contract.

Scenarios:
1. Every rejection carries a known code, a message and a policy name
2. REJECTED without a reason is impossible (no silent rejections)
3. ACCEPTED with a reason is impossible
4. Outcomes are immutable
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.commands.outcomes import ActionOutcome, OutcomeStatus
from core.commands.rejection import (
    ReasonCode,
    RejectionReason,
    already_banned,
    invalid_transition,
    not_found,
    permission_denied,
    policy_violation,
)

NOW = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)


# ══════════════════════════════════════════════════════════════
# REJECTION REASONS
# ══════════════════════════════════════════════════════════════

class TestRejectionReason:
    def test_valid_reason(self):
        reason = RejectionReason(
            code=ReasonCode.POLICY_VIOLATION,
            message="too late",
            policy_name="cancellation_cutoff",
        )
        assert reason.to_dict() == {
            "code": "POLICY_VIOLATION",
            "message": "too late",
            "policy_name": "cancellation_cutoff",
        }

    def test_unknown_code_rejected(self):
        with pytest.raises(ValueError, match="not valid"):
            RejectionReason(code="TEAPOT", message="x", policy_name="p")

    @pytest.mark.parametrize("field", ["message", "policy_name"])
    def test_empty_fields_rejected(self, field):
        kwargs = {"code": ReasonCode.NOT_FOUND, "message": "m", "policy_name": "p"}
        kwargs[field] = ""
        with pytest.raises(ValueError, match=field):
            RejectionReason(**kwargs)

    def test_frozen(self):
        reason = not_found("missing")
        with pytest.raises(AttributeError):
            reason.code = ReasonCode.PERMISSION_DENIED

    def test_helpers_map_to_codes(self):
        assert not_found("m").code == ReasonCode.NOT_FOUND
        assert not_found("m").policy_name == "reservation_must_exist"
        assert permission_denied("m", "p").code == ReasonCode.PERMISSION_DENIED
        assert policy_violation("m", "p").code == ReasonCode.POLICY_VIOLATION
        assert invalid_transition("m", "p").code == ReasonCode.INVALID_TRANSITION
        assert already_banned("m").code == ReasonCode.ALREADY_BANNED

    def test_closed_code_set(self):
        assert ReasonCode.ALL == {
            "NOT_FOUND", "PERMISSION_DENIED", "POLICY_VIOLATION",
            "INVALID_TRANSITION", "ALREADY_BANNED",
        }


# ══════════════════════════════════════════════════════════════
# OUTCOMES
# ══════════════════════════════════════════════════════════════

class TestActionOutcome:
    def test_accepted(self):
        outcome = ActionOutcome.accepted("check_in", NOW, reservation="snapshot")
        assert outcome.is_accepted
        assert not outcome.is_rejected
        assert outcome.reason is None
        assert outcome.reason_code is None
        assert outcome.reservation == "snapshot"
        assert outcome.events == ()

    def test_rejected(self):
        reason = invalid_transition("already checked in", "check_in_once")
        outcome = ActionOutcome.rejected("check_in", NOW, reason)
        assert outcome.is_rejected
        assert outcome.reason_code == ReasonCode.INVALID_TRANSITION

    def test_rejected_requires_reason(self):
        with pytest.raises(ValueError, match="No silent rejections"):
            ActionOutcome(
                action="cancel",
                status=OutcomeStatus.REJECTED,
                reason=None,
                occurred_at=NOW,
            )

    def test_accepted_must_not_carry_reason(self):
        with pytest.raises(ValueError, match="must NOT include"):
            ActionOutcome(
                action="cancel",
                status=OutcomeStatus.ACCEPTED,
                reason=not_found("m"),
                occurred_at=NOW,
            )

    def test_status_must_be_enum(self):
        with pytest.raises(ValueError, match="OutcomeStatus"):
            ActionOutcome(action="cancel", status="ACCEPTED", reason=None, occurred_at=NOW)

    def test_events_are_tupled(self):
        outcome = ActionOutcome.accepted("approve", NOW, events=["e1", "e2"])
        assert outcome.events == ("e1", "e2")

    def test_frozen(self):
        outcome = ActionOutcome.accepted("approve", NOW)
        with pytest.raises(AttributeError):
            outcome.status = OutcomeStatus.REJECTED
