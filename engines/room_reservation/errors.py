"""
Roombook Room Reservation Engine — Errors
=========================================
Engine-internal errors, NOT business rejections.
Business rejections flow through RejectionReason → ActionOutcome.
"""

from __future__ import annotations


class ReservationEngineError(Exception):
    """Base error for reservation engine operations."""
    pass


class StaleWriteError(ReservationEngineError):
    """A compare-and-swap write lost against a newer stored version."""

    def __init__(self, entity: str, key: str, expected_version: int):
        self.entity = entity
        self.key = key
        self.expected_version = expected_version
        super().__init__(
            f"{entity} '{key}' changed since version {expected_version} was read."
        )


class SlotUnavailableError(ReservationEngineError):
    """Storage refused a reservation overlapping an active one in the same room."""

    def __init__(self, room_id: str):
        self.room_id = room_id
        super().__init__(
            f"room '{room_id}' already has an active reservation in that slot."
        )


class InvalidTransitionError(ReservationEngineError):
    """Raised by the state machine when asked to apply an illegal transition."""

    def __init__(self, action: str, message: str, policy_name: str):
        self.action = action
        self.policy_name = policy_name
        super().__init__(message)
