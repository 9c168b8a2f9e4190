"""Validation helpers for Streamlit forms."""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Sequence, Tuple


_CAMPUS_RE = re.compile(r"^[A-Za-z0-9]{1,3}$")


def require_non_empty(value: str, field: str) -> Tuple[bool, str]:
    if not value or not value.strip():
        return False, f"{field} cannot be empty"
    return True, ""


def validate_subject_name(value: str, existing: Iterable[str], field: str = "Subject name") -> Tuple[bool, str]:
    ok, msg = require_non_empty(value, field)
    if not ok:
        return ok, msg
    if len(value.strip()) > 80:
        return False, f"{field} must be at most 80 characters"
    if value.strip() in {str(e).strip() for e in existing}:
        return False, f"{field} {value.strip()!r} already exists"
    return True, ""


def validate_positive_int(value: int, field: str, min_value: int = 1, max_value: int | None = None) -> Tuple[bool, str]:
    if value is None:
        return False, f"{field} is required"
    if value < min_value:
        return False, f"{field} must be >= {min_value}"
    if max_value is not None and value > max_value:
        return False, f"{field} must be <= {max_value}"
    return True, ""


def validate_campus_code(value: str, field: str = "Campus") -> Tuple[bool, str]:
    """Campus cells are empty (unknown campus) or 1-3 letters/digits."""

    v = str(value or "").strip()
    if not v:
        return True, ""
    if not _CAMPUS_RE.match(v):
        return False, f"{field} must be 1-3 letters/digits (use V for virtual)"
    return True, ""


def validate_slot_grid(grid: Mapping[Tuple[str, str], Sequence[str]]) -> Tuple[bool, str]:
    """A subject entry needs at least one offered (day, turn) cell.

    `grid` maps (day, turn) to the campus tags offered there (empty = not offered).
    """

    if not any(grid.values()):
        return False, "Select at least one day/turn where the subject is offered"
    for (day, turn), campuses in grid.items():
        for campus in campuses:
            ok, msg = validate_campus_code(campus, field=f"Campus for {day} {turn}")
            if not ok:
                return ok, msg
    return True, ""
