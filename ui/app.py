"""Main Streamlit app entrypoint.

Run:
    streamlit run ui/app.py

"""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# Ensure project root is on PYTHONPATH when Streamlit runs this file
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ui import state
from utils.catalog_import import load_catalog_csv, subjects_to_catalog_csv
from utils.share_codes import decode_share_code


def _inject_css() -> None:
    st.markdown(
        """
        <style>
        .block-container { padding-top: 1.2rem; }
        div[data-testid="stMetric"] { background: #0b1220; border: 1px solid rgba(255,255,255,0.08); padding: 12px; border-radius: 12px; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _load_shared_state_from_url() -> None:
    """Apply `?data=<share code>` once per session."""

    if st.session_state.get("share_code_applied"):
        return
    code = st.query_params.get("data")
    if not code:
        return
    st.session_state["share_code_applied"] = True

    shared = decode_share_code(code)
    if shared is None:
        st.warning("The shared link could not be read; starting with an empty list.")
        return
    state.set_subjects(shared.subjects)
    state.set_preferences(shared.preferences)
    st.success(f"Loaded {len(shared.subjects)} subjects from the shared link.")


def main() -> None:
    st.set_page_config(
        page_title="Course Combiner",
        page_icon="🗓️",
        layout="wide",
    )
    _inject_css()

    st.sidebar.title("Course Combiner")
    st.sidebar.caption("Weekly timetables from course sections")

    _load_shared_state_from_url()

    subjects = state.get_subjects()

    st.title("Dashboard")
    st.write(
        "Import the course catalog or add subjects by hand on the Subjects page, "
        "then open Timetables to combine them."
    )

    c1, c2, c3 = st.columns(3)
    c1.metric("Subjects", len(subjects))
    c2.metric("Selected", sum(1 for s in subjects if not s.hidden))
    c3.metric("Priority", sum(1 for s in subjects if s.priority and not s.hidden))

    st.divider()
    st.subheader("Import catalog (CSV)")
    upload = st.file_uploader("Course catalog", type=["csv"])
    if upload is not None and st.button("Import", type="primary"):
        result = load_catalog_csv(upload, hidden=True)
        added = state.merge_imported(result.subjects)
        st.success(f"Imported {added} new subjects ({result.skipped_rows} rows skipped).")
        for w in result.warnings:
            st.warning(w)

    st.subheader("Paste a share code")
    with st.form("share_code_form"):
        code = st.text_input("Share code")
        submitted = st.form_submit_button("Load")
    if submitted:
        shared = decode_share_code(code)
        if shared is None:
            st.error("That share code is not valid.")
        else:
            state.set_subjects(shared.subjects)
            state.set_preferences(shared.preferences)
            st.success(f"Loaded {len(shared.subjects)} subjects.")

    if subjects:
        st.download_button(
            "Download subjects as catalog CSV",
            data=subjects_to_catalog_csv(subjects).encode("utf-8"),
            file_name="subjects.csv",
            mime="text/csv",
        )


if __name__ == "__main__":
    main()
