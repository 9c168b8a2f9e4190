"""Data model for the weekly course combiner.

A student lists the subjects they want to attend. Each subject offers one or
more weekly slot options (day, turn, campus). The planner picks exactly one
option per included subject so that the resulting timetable respects the
student's preferences.

Turns
-----
The day is split into three fixed bands: morning, afternoon and evening.
Sessions never span more than one turn.

Campus tags
-----------
Every option carries a campus tag. The tag ``"V"`` marks a virtual session:
it still occupies its turn but is ignored by the single-campus-per-day rule.
An empty tag means the physical campus is unknown.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import json
from typing import Any, Dict, FrozenSet, Iterator, List, Mapping, Optional, Tuple


DAYS: Tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
TURNS: Tuple[str, ...] = ("morning", "afternoon", "evening")
VIRTUAL_CAMPUS = "V"

_DAY_INDEX = {d: i for i, d in enumerate(DAYS)}
_TURN_INDEX = {t: i for i, t in enumerate(TURNS)}


def normalize_day(value: str) -> str:
    """Return the canonical day name (case-insensitive, accepts 3-letter prefixes)."""

    raw = str(value or "").strip().lower()
    for d in DAYS:
        if raw == d.lower() or (len(raw) >= 3 and d.lower().startswith(raw)):
            return d
    raise ValueError(f"Unknown day: {value!r}")


def normalize_turn(value: str) -> str:
    raw = str(value or "").strip().lower()
    if raw in _TURN_INDEX:
        return raw
    raise ValueError(f"Unknown turn: {value!r}")


def day_index(day: str) -> int:
    return _DAY_INDEX[day]


def turn_index(turn: str) -> int:
    return _TURN_INDEX[turn]


# ----------------------------
# Data models
# ----------------------------


@dataclass(frozen=True)
class SlotOption:
    turn: str
    campus: str = ""

    @property
    def is_virtual(self) -> bool:
        return self.campus == VIRTUAL_CAMPUS


@dataclass(frozen=True)
class Placement:
    """The option chosen for one subject in a timetable."""

    day: str
    turn: str
    campus: str = ""

    @property
    def is_virtual(self) -> bool:
        return self.campus == VIRTUAL_CAMPUS

    @property
    def slot(self) -> Tuple[str, str]:
        return (self.day, self.turn)


# subject name -> placement
Timetable = Dict[str, Placement]


@dataclass(frozen=True)
class Subject:
    name: str
    # availability: {"Monday": (SlotOption("morning", "M"), ...), ...}
    availability: Mapping[str, Tuple[SlotOption, ...]] = field(default_factory=dict)
    priority: bool = False
    hidden: bool = False

    def option_count(self) -> int:
        return sum(len(opts or ()) for opts in self.availability.values())

    def options(self, *, prefer_virtual: bool = False) -> List[Placement]:
        """All ways to attend this subject, in day order then turn order.

        Options sharing a turn keep their listed order. With `prefer_virtual`,
        virtual options of a day are tried before physical ones.
        """

        out: List[Placement] = []
        for day in DAYS:
            opts = list(self.availability.get(day) or ())
            if prefer_virtual:
                opts.sort(key=lambda o: (0 if o.is_virtual else 1, turn_index(o.turn)))
            else:
                opts.sort(key=lambda o: turn_index(o.turn))
            out.extend(Placement(day=day, turn=o.turn, campus=o.campus) for o in opts)
        return out

    def with_flags(self, *, hidden: Optional[bool] = None, priority: Optional[bool] = None) -> "Subject":
        return replace(
            self,
            hidden=self.hidden if hidden is None else bool(hidden),
            priority=self.priority if priority is None else bool(priority),
        )


@dataclass(frozen=True)
class Preferences:
    max_subjects_per_day: int = 2
    allow_sandwich: bool = False
    # {(day, turn), ...} where nothing may be scheduled
    blocked_slots: FrozenSet[Tuple[str, str]] = frozenset()
    single_campus_per_day: bool = False
    # explore virtual options first; never affects validity
    prefer_virtual: bool = False


@dataclass(frozen=True)
class PlannerLimits:
    """Hard limits that keep the exponential search affordable.

    Attributes:
        max_subjects: Safety ceiling on subjects considered per call.
        batch_size: Default output cap of one generation call.
        max_combinations: Absolute output cap applied to every search call.
    """

    max_subjects: int = 7
    batch_size: int = 50
    max_combinations: int = 500


# -------------------------------------------------
# Conversion helpers
# -------------------------------------------------


def build_subject(
    name: str,
    slots: Mapping[str, Any],
    *,
    priority: bool = False,
    hidden: bool = False,
) -> Subject:
    """Convenience constructor.

    `slots` maps a day to a list of turns or `(turn, campus)` pairs, e.g.
    ``{"Mon": ["morning", ("evening", "V")]}``.
    """

    availability: Dict[str, Tuple[SlotOption, ...]] = {}
    for day, entries in slots.items():
        opts: List[SlotOption] = []
        for e in entries or ():
            if isinstance(e, SlotOption):
                opts.append(SlotOption(turn=normalize_turn(e.turn), campus=e.campus))
            elif isinstance(e, str):
                opts.append(SlotOption(turn=normalize_turn(e)))
            else:
                turn, campus = e
                opts.append(SlotOption(turn=normalize_turn(turn), campus=str(campus or "")))
        availability[normalize_day(day)] = tuple(opts)
    return Subject(name=str(name), availability=availability, priority=bool(priority), hidden=bool(hidden))


def subject_to_dict(subject: Subject) -> Dict[str, Any]:
    return {
        "name": subject.name,
        "availability": {
            day: [{"turn": o.turn, "campus": o.campus} for o in opts]
            for day, opts in subject.availability.items()
            if opts
        },
        "priority": bool(subject.priority),
        "hidden": bool(subject.hidden),
    }


_FLAG_VALUES = {"true": True, "1": True, "yes": True, "false": False, "0": False, "no": False, "": False}


def _parse_flag(value: Any, field: str) -> bool:
    """Strict boolean: real bools, 0/1 or true/false/yes/no text; anything else is rejected."""

    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text not in _FLAG_VALUES:
        raise ValueError(f"{field} must be true or false, got {value!r}")
    return _FLAG_VALUES[text]


def subject_from_dict(raw: Mapping[str, Any]) -> Subject:
    """Build a Subject from its dict form.

    Accepts option entries as `{"turn": ..., "campus": ...}`, as plain turn
    strings, or with the legacy `isVirtual` flag instead of a campus tag.
    """

    availability: Dict[str, Tuple[SlotOption, ...]] = {}
    for day, entries in (raw.get("availability") or {}).items():
        opts: List[SlotOption] = []
        for e in entries or ():
            if isinstance(e, str):
                opts.append(SlotOption(turn=normalize_turn(e)))
                continue
            campus = str(e.get("campus") or "")
            if not campus and _parse_flag(e.get("isVirtual"), "isVirtual"):
                campus = VIRTUAL_CAMPUS
            opts.append(SlotOption(turn=normalize_turn(e["turn"]), campus=campus))
        availability[normalize_day(day)] = tuple(opts)

    return Subject(
        name=str(raw["name"]),
        availability=availability,
        priority=_parse_flag(raw.get("priority"), "priority"),
        hidden=_parse_flag(raw.get("hidden"), "hidden"),
    )


def preferences_to_dict(preferences: Preferences) -> Dict[str, Any]:
    blocked = sorted(preferences.blocked_slots, key=lambda s: (day_index(s[0]), turn_index(s[1])))
    return {
        "max_subjects_per_day": int(preferences.max_subjects_per_day),
        "allow_sandwich": bool(preferences.allow_sandwich),
        "blocked_slots": [{"day": d, "turn": t} for d, t in blocked],
        "single_campus_per_day": bool(preferences.single_campus_per_day),
        "prefer_virtual": bool(preferences.prefer_virtual),
    }


def preferences_from_dict(raw: Mapping[str, Any]) -> Preferences:
    blocked = frozenset(
        (normalize_day(b["day"]), normalize_turn(b["turn"])) for b in (raw.get("blocked_slots") or [])
    )
    return Preferences(
        max_subjects_per_day=int(raw.get("max_subjects_per_day", 2)),
        allow_sandwich=_parse_flag(raw.get("allow_sandwich"), "allow_sandwich"),
        blocked_slots=blocked,
        single_campus_per_day=_parse_flag(raw.get("single_campus_per_day"), "single_campus_per_day"),
        prefer_virtual=_parse_flag(raw.get("prefer_virtual"), "prefer_virtual"),
    )


def timetable_to_dict(timetable: Timetable) -> Dict[str, Dict[str, str]]:
    return {name: {"day": p.day, "turn": p.turn, "campus": p.campus} for name, p in timetable.items()}


def iter_placements(timetable: Timetable) -> Iterator[Tuple[str, Placement]]:
    """Placements sorted by day, turn, then subject name."""

    return iter(
        sorted(timetable.items(), key=lambda kv: (day_index(kv[1].day), turn_index(kv[1].turn), kv[0]))
    )


def load_subjects_from_json(path: str) -> Tuple[List[Subject], Preferences]:
    """Load subjects (and optional preferences) from a JSON file."""

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    subjects = [subject_from_dict(s) for s in raw["subjects"]]
    preferences = preferences_from_dict(raw.get("preferences") or {})
    return subjects, preferences
