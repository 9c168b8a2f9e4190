"""Weekly course combiner: data model, constraint checks and generators."""

from .subjects import (
	DAYS,
	TURNS,
	VIRTUAL_CAMPUS,
	Placement,
	PlannerLimits,
	Preferences,
	SlotOption,
	Subject,
	Timetable,
	build_subject,
	load_subjects_from_json,
	preferences_from_dict,
	preferences_to_dict,
	subject_from_dict,
	subject_to_dict,
	timetable_to_dict,
)

from .constraints import find_violations, is_valid
from .dedupe import canonical_key, dedupe_timetables, merge_timetables
from .generator import (
	GenerationResult,
	MaximumResult,
	find_maximum_combination,
	generate_schedules,
)

__all__ = [
	"DAYS",
	"TURNS",
	"VIRTUAL_CAMPUS",
	"Placement",
	"PlannerLimits",
	"Preferences",
	"SlotOption",
	"Subject",
	"Timetable",
	"build_subject",
	"load_subjects_from_json",
	"preferences_from_dict",
	"preferences_to_dict",
	"subject_from_dict",
	"subject_to_dict",
	"timetable_to_dict",
	"find_violations",
	"is_valid",
	"canonical_key",
	"dedupe_timetables",
	"merge_timetables",
	"GenerationResult",
	"MaximumResult",
	"find_maximum_combination",
	"generate_schedules",
]
