"""Removal of duplicate timetables.

Two timetables are the same when they place the same subjects on the same
(day, turn, campus). The comparison uses a canonical string key so results
from different search passes can be merged.
"""

from __future__ import annotations

from typing import Iterable, List, Set

from .subjects import Timetable


ENTRY_SEPARATOR = "|"
FIELD_SEPARATOR = ":"


def _escape(text: str) -> str:
    # separators inside names must not merge two entries into one key
    return (
        str(text)
        .replace("\\", "\\\\")
        .replace(FIELD_SEPARATOR, "\\" + FIELD_SEPARATOR)
        .replace(ENTRY_SEPARATOR, "\\" + ENTRY_SEPARATOR)
    )


def canonical_key(timetable: Timetable) -> str:
    """`name:day:turn:campus` entries sorted by subject name, joined by `|`.

    Separator characters inside names and campus tags are backslash-escaped.
    """

    return ENTRY_SEPARATOR.join(
        FIELD_SEPARATOR.join(_escape(v) for v in (name, p.day, p.turn, p.campus))
        for name, p in sorted(timetable.items(), key=lambda kv: kv[0])
    )


def dedupe_timetables(timetables: Iterable[Timetable]) -> List[Timetable]:
    seen: Set[str] = set()
    out: List[Timetable] = []
    for t in timetables:
        key = canonical_key(t)
        if key in seen:
            continue
        seen.add(key)
        out.append(t)
    return out


def merge_timetables(*batches: Iterable[Timetable]) -> List[Timetable]:
    """Concatenate result batches, keeping the first copy of each timetable."""

    return dedupe_timetables(t for batch in batches for t in batch)
