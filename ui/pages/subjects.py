"""Subjects page.

Add subjects by hand through a day x turn grid, choose which subjects take
part in the combination (hidden / selected) and mark priority subjects.

Grid cells:
- empty: not offered
- campus tags separated by commas, e.g. "M" or "M,R" ("V" = virtual)
- "*": offered, campus unknown
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd
import streamlit as st

# Ensure project root is on PYTHONPATH when Streamlit runs pages
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planner.subjects import DAYS, TURNS, SlotOption, Subject
from ui import state
from ui.utils.validators import validate_slot_grid, validate_subject_name


UNKNOWN_CAMPUS_MARK = "*"

Grid = Dict[Tuple[str, str], Tuple[str, ...]]


def _grid_df_from_subject(subject: Optional[Subject]) -> pd.DataFrame:
    """Editable (days x turns) table for a subject (empty for a new subject)."""

    rows = []
    for day in DAYS:
        opts = list((subject.availability.get(day) if subject else None) or ())
        row = {"DAY": day}
        for turn in TURNS:
            tags = [o.campus or UNKNOWN_CAMPUS_MARK for o in opts if o.turn == turn]
            row[turn] = ",".join(tags)
        rows.append(row)
    return pd.DataFrame(rows, columns=["DAY"] + list(TURNS))


def _grid_from_df(df: pd.DataFrame) -> Grid:
    grid: Grid = {}
    for _, row in df.iterrows():
        day = str(row["DAY"])
        for turn in TURNS:
            raw = row.get(turn)
            cell = "" if raw is None or pd.isna(raw) else str(raw)
            tags = [t.strip() for t in cell.split(",") if t.strip()]
            grid[(day, turn)] = tuple("" if t == UNKNOWN_CAMPUS_MARK else t.upper() for t in tags)
    return grid


def _subject_from_grid(name: str, grid: Grid, *, priority: bool = False, hidden: bool = False) -> Subject:
    availability: Dict[str, Tuple[SlotOption, ...]] = {}
    for day in DAYS:
        opts: List[SlotOption] = []
        for turn in TURNS:
            for campus in grid.get((day, turn), ()):
                option = SlotOption(turn=turn, campus=campus)
                if option not in opts:
                    opts.append(option)
        if opts:
            availability[day] = tuple(opts)
    return Subject(name=name.strip(), availability=availability, priority=bool(priority), hidden=bool(hidden))


def _subjects_overview_df(subjects: List[Subject]) -> pd.DataFrame:
    rows = []
    for s in subjects:
        rows.append(
            {
                "subject": s.name,
                "selected": not s.hidden,
                "priority": bool(s.priority),
                "options": s.option_count(),
                "days": ", ".join(d for d in DAYS if s.availability.get(d)),
            }
        )
    return pd.DataFrame(rows, columns=["subject", "selected", "priority", "options", "days"])


def main() -> None:
    st.title("Subjects")

    subjects = state.get_subjects()

    tab_add, tab_view = st.tabs(["Add / Update", "Select / Delete"])

    with tab_add:
        options = ["(New subject)"] + [s.name for s in subjects]
        edit_name = st.selectbox("Select subject", options=options)
        initial = None
        if edit_name != "(New subject)":
            initial = next((s for s in subjects if s.name == edit_name), None)

        with st.form("subject_form"):
            name = st.text_input(
                "Subject name",
                value=(initial.name if initial else ""),
                disabled=bool(initial),
                help="Names identify subjects; delete + re-add to rename.",
            )
            st.caption("Type campus tags in the cells where the subject is offered (V = virtual, * = unknown campus).")
            edited = st.data_editor(
                _grid_df_from_subject(initial),
                disabled=["DAY"],
                hide_index=True,
                use_container_width=True,
                key=f"grid_{edit_name}",
            )
            c1, c2 = st.columns(2)
            priority = c1.checkbox("Priority (must be in every timetable)", value=bool(initial.priority) if initial else False)
            selected = c2.checkbox("Selected for combining", value=(not initial.hidden) if initial else True)
            submitted = st.form_submit_button("Save", type="primary")

        if submitted:
            subject_name = initial.name if initial else name
            existing = [] if initial else [s.name for s in subjects]
            grid = _grid_from_df(edited)
            for ok, msg in (validate_subject_name(subject_name, existing), validate_slot_grid(grid)):
                if not ok:
                    st.error(msg)
                    st.stop()

            state.upsert_subject(_subject_from_grid(subject_name, grid, priority=priority, hidden=not selected))
            st.success("Subject saved.")

    with tab_view:
        if not subjects:
            st.info("No subjects yet. Import the catalog on the Dashboard or add one by hand.")
            return

        overview = st.data_editor(
            _subjects_overview_df(subjects),
            disabled=["subject", "options", "days"],
            hide_index=True,
            use_container_width=True,
            key="subjects_overview",
        )
        if st.button("Apply selection"):
            for _, row in overview.iterrows():
                state.set_flags(str(row["subject"]), hidden=not bool(row["selected"]), priority=bool(row["priority"]))
            st.rerun()

        st.divider()
        st.subheader("Delete subject")
        name = st.selectbox("Subject", options=[s.name for s in subjects])
        if st.button("Delete", type="primary"):
            state.delete_subject(name)
            st.success(f"Deleted {name}")
            st.rerun()


if __name__ == "__main__":
    main()
