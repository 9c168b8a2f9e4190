"""Feasibility checks for a candidate timetable.

Hard constraints (any failure rejects the candidate)
----------------------------------------------------
- blocked_slot: nothing may be placed on a (day, turn) the student blocked
- slot_collision: two subjects cannot share the same (day, turn)
- day_load: at most `max_subjects_per_day` subjects per day
- single_campus: optional, all physical sessions of a day on one campus
  (virtual sessions are exempt)
- sandwich: unless allowed, no day with morning and evening but a free afternoon
- priority_missing: every priority subject must be placed

Every check is a pure predicate over the same candidate, so they can run in
any order.
"""

from __future__ import annotations

from typing import Callable, Dict, FrozenSet, Iterable, List, Set, Tuple

from .subjects import Preferences, Timetable


def _blocked_ok(timetable: Timetable, preferences: Preferences, priority: FrozenSet[str]) -> bool:
    blocked = preferences.blocked_slots
    if not blocked:
        return True
    return all(p.slot not in blocked for p in timetable.values())


def _collision_ok(timetable: Timetable, preferences: Preferences, priority: FrozenSet[str]) -> bool:
    used: Set[Tuple[str, str]] = set()
    for p in timetable.values():
        if p.slot in used:
            return False
        used.add(p.slot)
    return True


def _day_load_ok(timetable: Timetable, preferences: Preferences, priority: FrozenSet[str]) -> bool:
    per_day: Dict[str, int] = {}
    for p in timetable.values():
        per_day[p.day] = per_day.get(p.day, 0) + 1
    return all(c <= preferences.max_subjects_per_day for c in per_day.values())


def _single_campus_ok(timetable: Timetable, preferences: Preferences, priority: FrozenSet[str]) -> bool:
    if not preferences.single_campus_per_day:
        return True
    campus_by_day: Dict[str, str] = {}
    for p in timetable.values():
        # unknown campus cannot conflict
        if p.is_virtual or not p.campus:
            continue
        seen = campus_by_day.setdefault(p.day, p.campus)
        if seen != p.campus:
            return False
    return True


def _sandwich_ok(timetable: Timetable, preferences: Preferences, priority: FrozenSet[str]) -> bool:
    if preferences.allow_sandwich:
        return True
    turns_by_day: Dict[str, Set[str]] = {}
    for p in timetable.values():
        turns_by_day.setdefault(p.day, set()).add(p.turn)
    for turns in turns_by_day.values():
        if "morning" in turns and "evening" in turns and "afternoon" not in turns:
            return False
    return True


def _priority_ok(timetable: Timetable, preferences: Preferences, priority: FrozenSet[str]) -> bool:
    return all(name in timetable for name in priority)


Check = Callable[[Timetable, Preferences, FrozenSet[str]], bool]

CHECKS: Tuple[Tuple[str, Check], ...] = (
    ("blocked_slot", _blocked_ok),
    ("slot_collision", _collision_ok),
    ("day_load", _day_load_ok),
    ("single_campus", _single_campus_ok),
    ("sandwich", _sandwich_ok),
    ("priority_missing", _priority_ok),
)


def is_valid(timetable: Timetable, preferences: Preferences, priority_subjects: Iterable[str] = ()) -> bool:
    """Return True if the candidate satisfies every hard constraint."""

    priority = frozenset(priority_subjects)
    return all(check(timetable, preferences, priority) for _name, check in CHECKS)


def find_violations(
    timetable: Timetable,
    preferences: Preferences,
    priority_subjects: Iterable[str] = (),
) -> List[str]:
    """Names of all failing checks (empty list => valid)."""

    priority = frozenset(priority_subjects)
    return [name for name, check in CHECKS if not check(timetable, preferences, priority)]
