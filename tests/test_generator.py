import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planner import (
    Placement,
    PlannerLimits,
    Preferences,
    Subject,
    build_subject,
    generate_schedules,
    is_valid,
    load_subjects_from_json,
)


PREFS = Preferences(max_subjects_per_day=2)


def test_scenario_a_same_turn_collision_gives_no_timetable():
    subjects = [
        build_subject("A", {"Monday": ["morning"]}),
        build_subject("B", {"Monday": ["morning"]}),
    ]

    result = generate_schedules(subjects, PREFS)

    assert result.timetables == []
    assert result.status == "no_feasible"
    assert result.error is None


def test_scenario_b_single_combination():
    subjects = [
        build_subject("A", {"Monday": ["morning"]}),
        build_subject("B", {"Monday": ["afternoon"]}),
    ]

    result = generate_schedules(subjects, PREFS)

    assert result.status == "ok"
    assert result.timetables == [
        {"A": Placement("Monday", "morning"), "B": Placement("Monday", "afternoon")},
    ]


def test_scenario_c_sandwich_day_is_excluded():
    subjects = [
        build_subject("A", {"Monday": ["morning", "evening"]}),
        build_subject("B", {"Monday": ["morning", "evening"]}),
    ]

    assert generate_schedules(subjects, Preferences(allow_sandwich=False)).timetables == []

    allowed = generate_schedules(subjects, Preferences(allow_sandwich=True)).timetables
    assert allowed == [
        {"A": Placement("Monday", "morning"), "B": Placement("Monday", "evening")},
        {"A": Placement("Monday", "evening"), "B": Placement("Monday", "morning")},
    ]


def test_scenario_d_priority_subject_is_always_kept():
    subjects = [
        build_subject("A", {"Tuesday": ["afternoon"]}, priority=True),
        build_subject("B", {"Tuesday": ["afternoon"]}),
    ]

    # both requested: they collide, so no full timetable exists
    assert generate_schedules(subjects, PREFS).timetables == []

    partial = generate_schedules(subjects, PREFS, allow_partial=True)
    assert partial.timetables == [{"A": Placement("Tuesday", "afternoon")}]


def test_unplaceable_priority_subject_gives_nothing_even_when_partial():
    subjects = [
        build_subject("A", {"Monday": ["morning"]}, priority=True),
        build_subject("B", {"Tuesday": ["morning"]}),
    ]
    prefs = Preferences(blocked_slots=frozenset({("Monday", "morning")}))

    assert generate_schedules(subjects, prefs, allow_partial=True).timetables == []


def test_partial_mode_never_returns_empty_timetable_and_keeps_priorities():
    subjects = [
        build_subject("A", {"Monday": ["morning"], "Tuesday": ["morning"]}, priority=True),
        build_subject("B", {"Monday": ["morning"]}),
        build_subject("C", {"Wednesday": ["evening"]}),
    ]

    result = generate_schedules(subjects, PREFS, allow_partial=True)

    assert result.timetables
    assert all(t for t in result.timetables)
    assert all("A" in t for t in result.timetables)
    assert {"A": Placement("Tuesday", "morning"), "B": Placement("Monday", "morning"), "C": Placement("Wednesday", "evening")} in result.timetables


def test_every_result_is_valid_and_output_is_deterministic():
    subjects = [
        build_subject("A", {"Monday": ["morning", "afternoon"], "Tuesday": [("evening", "V")]}),
        build_subject("B", {"Monday": [("afternoon", "M")], "Wednesday": ["morning"]}, priority=True),
        build_subject("C", {"Tuesday": ["morning", "afternoon"], "Monday": ["evening"]}),
    ]
    prefs = Preferences(max_subjects_per_day=2, allow_sandwich=False)

    first = generate_schedules(subjects, prefs, limit=100)
    second = generate_schedules(subjects, prefs, limit=100)

    assert first.timetables
    assert first.timetables == second.timetables
    for t in first.timetables:
        assert is_valid(t, prefs, ["B"])
        assert set(t) == {"A", "B", "C"}


def test_output_cap_and_absolute_cap():
    subjects = [
        build_subject("A", {"Monday": ["morning"], "Tuesday": ["morning"], "Wednesday": ["morning"]}),
        build_subject("B", {"Thursday": ["morning", "afternoon", "evening"]}),
    ]

    # 3 x 3 = 9 valid timetables in total
    assert len(generate_schedules(subjects, PREFS, limit=50).timetables) == 9

    capped = generate_schedules(subjects, PREFS, limit=2)
    assert capped.timetables == [
        {"A": Placement("Monday", "morning"), "B": Placement("Thursday", "morning")},
        {"A": Placement("Monday", "morning"), "B": Placement("Thursday", "afternoon")},
    ]
    assert capped.metrics["hit_limit"] == 1.0

    clamped = generate_schedules(subjects, PREFS, limit=50, limits=PlannerLimits(max_combinations=4))
    assert len(clamped.timetables) == 4

    default_batch = generate_schedules(subjects, PREFS, limits=PlannerLimits(batch_size=5))
    assert len(default_batch.timetables) == 5


def test_hidden_subjects_are_left_out():
    subjects = [
        build_subject("A", {"Monday": ["morning"]}),
        build_subject("B", {"Monday": ["morning"]}, hidden=True),
    ]

    result = generate_schedules(subjects, PREFS)

    assert result.timetables == [{"A": Placement("Monday", "morning")}]
    assert result.subjects_considered == ["A"]


def test_no_visible_subjects_returns_empty_result():
    result = generate_schedules([build_subject("A", {"Monday": ["morning"]}, hidden=True)], PREFS)

    assert result.timetables == []
    assert result.status == "empty"


def test_too_many_subjects_are_truncated_with_warning(caplog):
    subjects = [build_subject(f"S{i}", {"Monday": ["morning"], "Tuesday": ["evening"]}) for i in range(3)]

    with caplog.at_level(logging.WARNING, logger="planner.generator"):
        result = generate_schedules(subjects, PREFS, limits=PlannerLimits(max_subjects=2))

    assert result.truncated is True
    assert result.subjects_considered == ["S0", "S1"]
    assert result.warnings and "Too many subjects" in result.warnings[0]
    assert "Too many subjects" in caplog.text
    assert result.timetables == [
        {"S0": Placement("Monday", "morning"), "S1": Placement("Tuesday", "evening")},
        {"S0": Placement("Tuesday", "evening"), "S1": Placement("Monday", "morning")},
    ]


def test_malformed_input_is_rejected_not_raised():
    ok_subject = build_subject("A", {"Monday": ["morning"]})

    no_availability = generate_schedules([ok_subject, Subject(name="B", availability={})], PREFS)
    assert no_availability.status == "rejected"
    assert "'B'" in no_availability.error
    assert no_availability.timetables == []

    bad_bound = generate_schedules([ok_subject], Preferences(max_subjects_per_day=0))
    assert bad_bound.status == "rejected"

    duplicate = generate_schedules([ok_subject, ok_subject], PREFS)
    assert duplicate.status == "rejected"

    bad_limit = generate_schedules([ok_subject], PREFS, limit=0)
    assert bad_limit.status == "rejected"

    bad_blocked = generate_schedules([ok_subject], Preferences(blocked_slots=frozenset({("Sunday", "morning")})))
    assert bad_blocked.status == "rejected"


def test_single_campus_and_blocked_slots_shape_the_result():
    subjects = [
        build_subject("A", {"Monday": [("morning", "M")]}),
        build_subject("B", {"Monday": [("afternoon", "R")], "Tuesday": [("afternoon", "R"), ("morning", "R")]}),
    ]
    prefs = Preferences(single_campus_per_day=True, blocked_slots=frozenset({("Tuesday", "morning")}))

    result = generate_schedules(subjects, prefs)

    assert result.timetables == [{"A": Placement("Monday", "morning", "M"), "B": Placement("Tuesday", "afternoon", "R")}]


def test_prefer_virtual_changes_exploration_order_only():
    subject = build_subject("A", {"Monday": [("morning", "M"), ("evening", "V")]})

    plain = generate_schedules([subject], Preferences()).timetables
    virtual_first = generate_schedules([subject], Preferences(prefer_virtual=True)).timetables

    assert plain == [{"A": Placement("Monday", "morning", "M")}, {"A": Placement("Monday", "evening", "V")}]
    assert virtual_first == list(reversed(plain))


def test_sample_problem():
    subjects, prefs = load_subjects_from_json(str(ROOT / "data" / "sample_subjects.json"))

    result = generate_schedules(subjects, prefs)

    assert result.status == "ok"
    assert len(result.timetables) == 4
    for t in result.timetables:
        assert "Statistics" not in t
        assert t["Programming"] == Placement("Tuesday", "evening", "V")
        assert is_valid(t, prefs, ["Algebra"])
