"""Timetables page.

Combines the selected subjects into weekly timetables.

Outputs:
- timetable options (grid view, one at a time)
- the largest number of subjects that fit together
- Excel / ZIP / PNG downloads and a share link
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import streamlit as st

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planner import (
    DAYS,
    TURNS,
    MaximumResult,
    PlannerLimits,
    Preferences,
    find_maximum_combination,
    generate_schedules,
)
from ui import state
from ui.utils.schedule_cache import cached_run, compute_input_hash
from ui.utils.validators import validate_positive_int
from utils.share_codes import build_share_url, encode_share_code
from utils.timetable_export import (
    ImageExportOptions,
    df_to_png_bytes,
    timetable_grid_df,
    timetables_workbook_bytes,
    timetables_zip_bytes,
)


def _slot_label(day: str, turn: str) -> str:
    return f"{day} / {turn}"


def _all_slot_labels() -> List[str]:
    return [_slot_label(d, t) for d in DAYS for t in TURNS]


def _preferences_from_form(
    *,
    max_subjects_per_day: int,
    allow_sandwich: bool,
    blocked_labels: Iterable[str],
    single_campus_per_day: bool,
    prefer_virtual: bool,
) -> Preferences:
    blocked = set()
    for label in blocked_labels:
        day, _, turn = str(label).partition(" / ")
        if day in DAYS and turn in TURNS:
            blocked.add((day, turn))
    return Preferences(
        max_subjects_per_day=int(max_subjects_per_day),
        allow_sandwich=bool(allow_sandwich),
        blocked_slots=frozenset(blocked),
        single_campus_per_day=bool(single_campus_per_day),
        prefer_virtual=bool(prefer_virtual),
    )


def _maximum_notice(best: MaximumResult) -> Optional[Tuple[str, str]]:
    """(streamlit level, text) to show instead of the result, or None when subjects fit."""

    if best.status == "rejected":
        return "error", f"Cannot combine these subjects: {best.error}"
    if best.status == "empty":
        return "info", "No subjects to combine. Select some on the Subjects page or include unselected ones."
    if best.status == "no_feasible":
        return "info", "Not even one subject fits with these preferences."
    return None


def _preferences_form(current: Preferences) -> Preferences:
    st.subheader("Preferences")
    c1, c2, c3, c4 = st.columns(4)
    max_per_day = c1.number_input(
        "Max subjects per day",
        min_value=1,
        max_value=len(TURNS),
        value=min(max(1, int(current.max_subjects_per_day)), len(TURNS)),
    )
    allow_sandwich = c2.checkbox(
        "Allow sandwich days",
        value=bool(current.allow_sandwich),
        help="A sandwich day has morning and evening classes with a free afternoon.",
    )
    single_campus = c3.checkbox(
        "One campus per day",
        value=bool(current.single_campus_per_day),
        help="Virtual classes do not count.",
    )
    prefer_virtual = c4.checkbox(
        "Prefer virtual",
        value=bool(current.prefer_virtual),
        help="Virtual options are explored first, so they show up first in the results.",
    )
    current_blocked = [_slot_label(d, t) for d in DAYS for t in TURNS if (d, t) in current.blocked_slots]
    blocked = st.multiselect("Blocked turns", options=_all_slot_labels(), default=current_blocked)

    ok, msg = validate_positive_int(int(max_per_day), "Max subjects per day", max_value=len(TURNS))
    if not ok:
        st.error(msg)
        st.stop()

    return _preferences_from_form(
        max_subjects_per_day=int(max_per_day),
        allow_sandwich=allow_sandwich,
        blocked_labels=blocked,
        single_campus_per_day=single_campus,
        prefer_virtual=prefer_virtual,
    )


def main() -> None:
    st.title("Timetables")

    subjects = state.get_subjects()
    if not subjects:
        st.info("No subjects yet. Add or import subjects first.")
        return

    preferences = _preferences_form(state.get_preferences())
    state.set_preferences(preferences)

    limits = PlannerLimits()
    limit = st.slider("Max timetables to show", min_value=1, max_value=limits.max_combinations, value=limits.batch_size)

    cache = state.get_run_cache()
    key = compute_input_hash(subjects=subjects, preferences=preferences, limits=limits, run_settings={"limit": limit})
    result = cached_run(cache, f"gen:{key}", lambda: generate_schedules(subjects, preferences, limit, limits=limits))

    for w in result.warnings:
        st.warning(w)

    if result.status == "rejected":
        st.error(f"Cannot combine these subjects: {result.error}")
        return
    if result.status == "empty":
        st.info("No subjects are selected. Select some on the Subjects page.")
        return

    st.divider()
    if result.status == "no_feasible":
        st.warning("No combination satisfies these preferences.")
    else:
        st.subheader(f"{len(result.timetables)} timetable option(s)")
        idx = st.number_input("Option", min_value=1, max_value=len(result.timetables), value=1) - 1
        grid = timetable_grid_df(result.timetables[int(idx)], blocked_slots=preferences.blocked_slots)
        st.dataframe(grid, hide_index=True, use_container_width=True)

        c1, c2, c3 = st.columns(3)
        c1.download_button(
            "Excel (all options)",
            data=timetables_workbook_bytes(result.timetables, blocked_slots=preferences.blocked_slots),
            file_name="timetables.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        c2.download_button(
            "ZIP (all outputs)",
            data=timetables_zip_bytes(result.timetables, blocked_slots=preferences.blocked_slots),
            file_name="timetables.zip",
            mime="application/zip",
        )
        c3.download_button(
            "PNG (this option)",
            data=df_to_png_bytes(grid, options=ImageExportOptions(title=f"Option {int(idx) + 1}")),
            file_name=f"option_{int(idx) + 1}.png",
            mime="image/png",
        )

    st.divider()
    st.subheader("Most subjects together")
    include_hidden = st.checkbox("Consider every subject, including unselected ones", value=False)
    max_key = f"max:{key}:{int(include_hidden)}"
    best = cached_run(
        cache,
        max_key,
        lambda: find_maximum_combination(subjects, preferences, limits=limits, include_hidden=include_hidden),
    )
    notice = _maximum_notice(best)
    if notice is not None:
        level, text = notice
        getattr(st, level)(text)
    else:
        st.metric("Max subjects", best.max_count)
        st.write("Example: " + ", ".join(best.subject_names_used))
        st.caption(f"{len(best.timetables)} timetable(s) of this size found.")

    st.divider()
    st.subheader("Share")
    code = encode_share_code(subjects, preferences)
    base_url = st.text_input("App URL", value="http://localhost:8501/")
    st.code(build_share_url(base_url, code), language=None)


if __name__ == "__main__":
    main()
