"""
Roombook Core Time — Public API
===============================
Explicit clock protocol and temporal helpers.
Doctrine: NO datetime.now() in policy logic.
"""

from core.time.clock import Clock, FixedClock, SystemClock
from core.time.temporal import TimeWindow, half_open_overlap, require_aware

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "TimeWindow",
    "half_open_overlap",
    "require_aware",
]
