"""
Roombook Core Config — Reservation Rules
========================================
Doctrine: No hardcoded windows or thresholds in policy logic.
Check-in windows, cut-offs and the ban ladder are data, loaded once
at process start and passed into the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import timedelta
from typing import Any, Mapping


# ══════════════════════════════════════════════════════════════
# BAN LADDER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BanLadder:
    """
    Escalation from no-shows to bans.

    Every `strikes_per_ban` no-shows issue one ban. The ban lasts
    `ban_duration`, unless it is ban number `bans_before_permanent`,
    which is permanent. `lates_per_no_show` late check-ins count as
    one no-show.
    """

    strikes_per_ban: int = 3
    ban_duration: timedelta = timedelta(days=7)
    bans_before_permanent: int = 3
    lates_per_no_show: int = 3

    def __post_init__(self) -> None:
        for name in ("strikes_per_ban", "bans_before_permanent", "lates_per_no_show"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ValueError(f"{name} must be a positive integer.")
        if not isinstance(self.ban_duration, timedelta) or self.ban_duration <= timedelta(0):
            raise ValueError("ban_duration must be a positive timedelta.")


# ══════════════════════════════════════════════════════════════
# RESERVATION RULES
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ReservationRules:
    check_in_before: timedelta = timedelta(minutes=10)
    check_in_after: timedelta = timedelta(minutes=10)
    late_check_in_grace: timedelta = timedelta(0)
    cancel_cutoff: timedelta = timedelta(minutes=30)
    auto_no_show_after: timedelta = timedelta(minutes=30)
    max_duration: timedelta = timedelta(hours=2)
    no_show_cancels_reservation: bool = True
    max_write_attempts: int = 2
    ban_ladder: BanLadder = field(default_factory=BanLadder)

    def __post_init__(self) -> None:
        for name in ("check_in_before", "check_in_after", "late_check_in_grace",
                     "cancel_cutoff", "auto_no_show_after"):
            value = getattr(self, name)
            if not isinstance(value, timedelta) or value < timedelta(0):
                raise ValueError(f"{name} must be a non-negative timedelta.")

        if not isinstance(self.max_duration, timedelta) or self.max_duration <= timedelta(0):
            raise ValueError("max_duration must be a positive timedelta.")

        if not isinstance(self.no_show_cancels_reservation, bool):
            raise ValueError("no_show_cancels_reservation must be a bool.")

        if (not isinstance(self.max_write_attempts, int)
                or isinstance(self.max_write_attempts, bool)
                or self.max_write_attempts < 1):
            raise ValueError("max_write_attempts must be a positive integer.")

        if not isinstance(self.ban_ladder, BanLadder):
            raise ValueError("ban_ladder must be a BanLadder.")

    @property
    def late_check_in_enabled(self) -> bool:
        return self.late_check_in_grace > timedelta(0)


# ══════════════════════════════════════════════════════════════
# LOADING FROM PLAIN SETTINGS
# ══════════════════════════════════════════════════════════════

# settings key → (field name, unit)
_MINUTES = "minutes"
_DAYS = "days"

_RULE_KEYS: dict[str, tuple[str, str | None]] = {
    "CHECK_IN_BEFORE_MINUTES": ("check_in_before", _MINUTES),
    "CHECK_IN_AFTER_MINUTES": ("check_in_after", _MINUTES),
    "LATE_CHECK_IN_GRACE_MINUTES": ("late_check_in_grace", _MINUTES),
    "CANCEL_CUTOFF_MINUTES": ("cancel_cutoff", _MINUTES),
    "AUTO_NO_SHOW_AFTER_MINUTES": ("auto_no_show_after", _MINUTES),
    "MAX_DURATION_MINUTES": ("max_duration", _MINUTES),
    "NO_SHOW_CANCELS_RESERVATION": ("no_show_cancels_reservation", None),
    "MAX_WRITE_ATTEMPTS": ("max_write_attempts", None),
}

_LADDER_KEYS: dict[str, tuple[str, str | None]] = {
    "STRIKES_PER_BAN": ("strikes_per_ban", None),
    "BAN_DURATION_DAYS": ("ban_duration", _DAYS),
    "BANS_BEFORE_PERMANENT": ("bans_before_permanent", None),
    "LATES_PER_NO_SHOW": ("lates_per_no_show", None),
}


def _convert(key: str, value: Any, unit: str | None) -> Any:
    if unit is None:
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number of {unit}.")
    return timedelta(**{unit: value})


def _collect(mapping: Mapping[str, Any], keys: dict[str, tuple[str, str | None]]) -> dict:
    kwargs = {}
    for key, value in mapping.items():
        name, unit = keys[key]
        kwargs[name] = _convert(key, value, unit)
    return kwargs


def rules_from_mapping(mapping: Mapping[str, Any] | None) -> ReservationRules:
    """
    Build ReservationRules from a settings-style mapping.

    Example:
        rules_from_mapping({
            "CANCEL_CUTOFF_MINUTES": 30,
            "BAN_LADDER": {"STRIKES_PER_BAN": 3, "BAN_DURATION_DAYS": 7},
        })
    """
    if not mapping:
        return ReservationRules()

    allowed = set(_RULE_KEYS) | {"BAN_LADDER"}
    unknown = sorted(set(mapping) - allowed)
    if unknown:
        raise ValueError(f"Unknown reservation rule keys: {unknown}")

    top = {k: v for k, v in mapping.items() if k != "BAN_LADDER"}
    kwargs = _collect(top, _RULE_KEYS)

    ladder = mapping.get("BAN_LADDER")
    if ladder:
        unknown_ladder = sorted(set(ladder) - set(_LADDER_KEYS))
        if unknown_ladder:
            raise ValueError(f"Unknown ban ladder keys: {unknown_ladder}")
        kwargs["ban_ladder"] = BanLadder(**_collect(ladder, _LADDER_KEYS))

    return ReservationRules(**kwargs)


def rules_to_mapping(rules: ReservationRules) -> dict[str, Any]:
    """Inverse of rules_from_mapping, for diagnostics and admin display."""
    def _plain(value: Any, unit: str | None) -> Any:
        if unit is None:
            return value
        return value / timedelta(**{unit: 1})

    out: dict[str, Any] = {}
    by_field = {name: (key, unit) for key, (name, unit) in _RULE_KEYS.items()}
    for f in fields(rules):
        if f.name == "ban_ladder":
            continue
        key, unit = by_field[f.name]
        out[key] = _plain(getattr(rules, f.name), unit)

    ladder_by_field = {name: (key, unit) for key, (name, unit) in _LADDER_KEYS.items()}
    out["BAN_LADDER"] = {
        ladder_by_field[f.name][0]: _plain(
            getattr(rules.ban_ladder, f.name), ladder_by_field[f.name][1]
        )
        for f in fields(rules.ban_ladder)
    }
    return out
