"""Input checks run before any search.

Validators return `(ok, message)` tuples so callers can report the first
problem without handling exceptions.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .subjects import DAYS, TURNS, PlannerLimits, Preferences, Subject


def validate_subjects(subjects: Sequence[Subject]) -> Tuple[bool, str]:
    names = set()
    for s in subjects:
        name = str(s.name or "").strip()
        if not name:
            return False, "Subject name cannot be empty"
        if name in names:
            return False, f"Subject {name!r} is listed more than once"
        names.add(name)

        if s.option_count() == 0:
            return False, f"Subject {name!r} has no availability"
        for day, opts in s.availability.items():
            if day not in DAYS:
                return False, f"Subject {name!r} uses unknown day {day!r}"
            for o in opts or ():
                if o.turn not in TURNS:
                    return False, f"Subject {name!r} uses unknown turn {o.turn!r} on {day}"
    return True, ""


def validate_preferences(preferences: Preferences) -> Tuple[bool, str]:
    try:
        max_per_day = int(preferences.max_subjects_per_day)
    except (TypeError, ValueError):
        return False, "Max subjects per day must be a whole number"
    if max_per_day < 1:
        return False, "Max subjects per day must be >= 1"

    for slot in preferences.blocked_slots:
        if not isinstance(slot, tuple) or len(slot) != 2:
            return False, f"Blocked slot {slot!r} must be a (day, turn) pair"
        day, turn = slot
        if day not in DAYS or turn not in TURNS:
            return False, f"Blocked slot {day}/{turn} is not a known day/turn"
    return True, ""


def validate_limits(limits: PlannerLimits, output_limit: Optional[int] = None) -> Tuple[bool, str]:
    for field_name, val in [
        ("max_subjects", limits.max_subjects),
        ("batch_size", limits.batch_size),
        ("max_combinations", limits.max_combinations),
    ]:
        if int(val) < 1:
            return False, f"{field_name} must be >= 1"
    if output_limit is not None and int(output_limit) < 1:
        return False, "Output limit must be >= 1"
    return True, ""


def validate_request(
    subjects: Sequence[Subject],
    preferences: Preferences,
    limits: PlannerLimits,
    output_limit: Optional[int] = None,
) -> Tuple[bool, str]:
    """Run every input check; the first failure wins."""

    for ok, msg in (
        validate_preferences(preferences),
        validate_limits(limits, output_limit),
        validate_subjects(subjects),
    ):
        if not ok:
            return ok, msg
    return True, ""
