"""
Roombook Core Config — Public API
=================================
Reservation policy knobs (windows, cut-offs, ban ladder).
Doctrine: No hardcoded thresholds in engine logic.
"""

from core.config.rules import (
    BanLadder,
    ReservationRules,
    rules_from_mapping,
    rules_to_mapping,
)

__all__ = [
    "BanLadder",
    "ReservationRules",
    "rules_from_mapping",
    "rules_to_mapping",
]
