"""
Roombook Command Layer — Rejection Model
========================================
Structured rejection reasons for denied reservation actions.

Every rejection must be:
- Deterministic (same input → same rejection)
- Machine-readable (code)
- Traceable to the check that failed (policy_name)

The core classifies failures; it never formats them for end users.
"""

from __future__ import annotations

from dataclasses import dataclass


# ══════════════════════════════════════════════════════════════
# REJECTION REASON (frozen explanation structure)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RejectionReason:
    """
    Structured reason for a rejected action.

    Fields:
        code:        One of ReasonCode (e.g. 'POLICY_VIOLATION').
        message:     Developer-facing explanation.
        policy_name: Name of the check that caused rejection
                     (e.g. 'check_in_window').
    """

    code: str
    message: str
    policy_name: str

    def __post_init__(self):
        if not self.code or not isinstance(self.code, str):
            raise ValueError("code must be a non-empty string.")

        if self.code not in ReasonCode.ALL:
            raise ValueError(
                f"code '{self.code}' not valid. "
                f"Must be one of: {sorted(ReasonCode.ALL)}"
            )

        if not self.message or not isinstance(self.message, str):
            raise ValueError("message must be a non-empty string.")

        if not self.policy_name or not isinstance(self.policy_name, str):
            raise ValueError("policy_name must be a non-empty string.")

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "policy_name": self.policy_name,
        }


# ══════════════════════════════════════════════════════════════
# STANDARD REJECTION CODES
# ══════════════════════════════════════════════════════════════

class ReasonCode:
    """Closed set of rejection kinds returned to callers."""

    NOT_FOUND = "NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    POLICY_VIOLATION = "POLICY_VIOLATION"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    ALREADY_BANNED = "ALREADY_BANNED"

    ALL = frozenset({
        NOT_FOUND,
        PERMISSION_DENIED,
        POLICY_VIOLATION,
        INVALID_TRANSITION,
        ALREADY_BANNED,
    })


def not_found(message: str, policy_name: str = "reservation_must_exist") -> RejectionReason:
    return RejectionReason(ReasonCode.NOT_FOUND, message, policy_name)


def permission_denied(message: str, policy_name: str) -> RejectionReason:
    return RejectionReason(ReasonCode.PERMISSION_DENIED, message, policy_name)


def policy_violation(message: str, policy_name: str) -> RejectionReason:
    return RejectionReason(ReasonCode.POLICY_VIOLATION, message, policy_name)


def invalid_transition(message: str, policy_name: str) -> RejectionReason:
    return RejectionReason(ReasonCode.INVALID_TRANSITION, message, policy_name)


def already_banned(message: str, policy_name: str = "reservation_ban") -> RejectionReason:
    return RejectionReason(ReasonCode.ALREADY_BANNED, message, policy_name)
