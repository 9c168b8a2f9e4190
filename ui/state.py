"""Session state for the Streamlit app.

The app keeps the subject list and preferences in `st.session_state`; there
is no database. Helpers accept an explicit mapping so they can be used (and
tested) without a running Streamlit session.
"""

from __future__ import annotations

from typing import List, MutableMapping, Optional

from planner.subjects import Preferences, Subject


SUBJECTS_KEY = "planner_subjects"
PREFERENCES_KEY = "planner_preferences"
CACHE_KEY = "planner_run_cache"


def _session(state: Optional[MutableMapping] = None) -> MutableMapping:
    if state is not None:
        return state
    import streamlit as st

    return st.session_state


def get_subjects(state: Optional[MutableMapping] = None) -> List[Subject]:
    return list(_session(state).get(SUBJECTS_KEY) or [])


def set_subjects(subjects: List[Subject], state: Optional[MutableMapping] = None) -> None:
    _session(state)[SUBJECTS_KEY] = list(subjects)


def get_preferences(state: Optional[MutableMapping] = None) -> Preferences:
    return _session(state).get(PREFERENCES_KEY) or Preferences()


def set_preferences(preferences: Preferences, state: Optional[MutableMapping] = None) -> None:
    _session(state)[PREFERENCES_KEY] = preferences


def get_run_cache(state: Optional[MutableMapping] = None) -> MutableMapping:
    return _session(state).setdefault(CACHE_KEY, {})


def upsert_subject(subject: Subject, state: Optional[MutableMapping] = None) -> None:
    """Replace the subject with the same name in place, or append it."""

    subjects = get_subjects(state)
    for i, s in enumerate(subjects):
        if s.name == subject.name:
            subjects[i] = subject
            break
    else:
        subjects.append(subject)
    set_subjects(subjects, state)


def delete_subject(name: str, state: Optional[MutableMapping] = None) -> None:
    set_subjects([s for s in get_subjects(state) if s.name != name], state)


def merge_imported(imported: List[Subject], state: Optional[MutableMapping] = None) -> int:
    """Add imported subjects whose names are new; return how many were added."""

    subjects = get_subjects(state)
    names = {s.name for s in subjects}
    added = [s for s in imported if s.name not in names]
    set_subjects(subjects + added, state)
    return len(added)


def set_flags(
    name: str,
    *,
    hidden: Optional[bool] = None,
    priority: Optional[bool] = None,
    state: Optional[MutableMapping] = None,
) -> None:
    set_subjects(
        [s.with_flags(hidden=hidden, priority=priority) if s.name == name else s for s in get_subjects(state)],
        state,
    )
