"""
Roombook Command Layer — Public API
===================================
Rejection taxonomy and action outcomes shared by every engine.
"""

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

__all__ = [
    "ActionOutcome",
    "OutcomeStatus",
    "ReasonCode",
    "RejectionReason",
    "not_found",
    "permission_denied",
    "policy_violation",
    "invalid_transition",
    "already_banned",
]
