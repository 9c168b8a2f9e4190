import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planner import (
    Placement,
    Preferences,
    SlotOption,
    build_subject,
    load_subjects_from_json,
    preferences_from_dict,
    preferences_to_dict,
    subject_from_dict,
    subject_to_dict,
    timetable_to_dict,
)
from planner.subjects import normalize_day, normalize_turn


def test_normalize_day_accepts_prefixes_and_case():
    assert normalize_day("mon") == "Monday"
    assert normalize_day("THU") == "Thursday"
    assert normalize_day("Friday") == "Friday"
    with pytest.raises(ValueError):
        normalize_day("Sunday")
    with pytest.raises(ValueError):
        normalize_day("t")


def test_normalize_turn_rejects_unknown_band():
    assert normalize_turn(" Evening ") == "evening"
    with pytest.raises(ValueError):
        normalize_turn("night")


def test_options_follow_day_then_turn_order():
    subject = build_subject(
        "A",
        {
            "Wed": ["morning"],
            "Mon": [("evening", "V"), ("morning", "M"), ("morning", "R")],
        },
    )

    assert subject.options() == [
        Placement("Monday", "morning", "M"),
        Placement("Monday", "morning", "R"),
        Placement("Monday", "evening", "V"),
        Placement("Wednesday", "morning", ""),
    ]
    assert subject.option_count() == 4


def test_with_flags_returns_a_copy():
    subject = build_subject("A", {"Mon": ["morning"]}, hidden=True)

    shown = subject.with_flags(hidden=False, priority=True)

    assert subject.hidden is True and subject.priority is False
    assert shown.hidden is False and shown.priority is True
    assert shown.availability == subject.availability


def test_subject_dict_round_trip_and_legacy_virtual_flag():
    subject = build_subject("A", {"Tue": [("afternoon", "M"), ("evening", "V")]}, priority=True)
    assert subject_from_dict(subject_to_dict(subject)) == subject

    legacy = subject_from_dict({"name": "B", "availability": {"Monday": [{"turn": "morning", "isVirtual": True}]}})
    assert legacy.availability["Monday"] == (SlotOption("morning", "V"),)


def test_subject_from_dict_rejects_unknown_turn():
    with pytest.raises(ValueError):
        subject_from_dict({"name": "A", "availability": {"Monday": ["noon"]}})


def test_preferences_dict_round_trip():
    prefs = Preferences(
        max_subjects_per_day=3,
        allow_sandwich=True,
        blocked_slots=frozenset({("Friday", "evening"), ("Monday", "morning")}),
        single_campus_per_day=True,
        prefer_virtual=True,
    )

    raw = preferences_to_dict(prefs)

    assert raw["blocked_slots"] == [{"day": "Monday", "turn": "morning"}, {"day": "Friday", "turn": "evening"}]
    assert preferences_from_dict(raw) == prefs
    assert preferences_from_dict({}) == Preferences()


def test_timetable_to_dict():
    assert timetable_to_dict({"A": Placement("Monday", "morning", "V")}) == {
        "A": {"day": "Monday", "turn": "morning", "campus": "V"}
    }


def test_load_subjects_from_json(tmp_path):
    path = tmp_path / "subjects.json"
    path.write_text(
        json.dumps({"subjects": [{"name": "A", "availability": {"Mon": ["morning"]}, "hidden": True}]}),
        encoding="utf-8",
    )

    subjects, prefs = load_subjects_from_json(str(path))

    assert [s.name for s in subjects] == ["A"]
    assert subjects[0].hidden is True
    assert prefs == Preferences()


def test_sample_file_loads():
    subjects, prefs = load_subjects_from_json(str(ROOT / "data" / "sample_subjects.json"))

    assert len(subjects) == 5
    assert [s.name for s in subjects if s.priority] == ["Algebra"]
    assert [s.name for s in subjects if s.hidden] == ["Statistics"]
    assert prefs.blocked_slots == frozenset({("Friday", "morning")})
    assert prefs.single_campus_per_day is True


def test_flags_from_text_are_parsed_strictly():
    raw = {"name": "A", "availability": {"Monday": ["morning"]}, "priority": "false", "hidden": "True"}

    subject = subject_from_dict(raw)
    assert subject.priority is False
    assert subject.hidden is True

    assert preferences_from_dict({"allow_sandwich": "no", "prefer_virtual": 1}) == Preferences(prefer_virtual=True)

    with pytest.raises(ValueError):
        subject_from_dict(dict(raw, priority="maybe"))
