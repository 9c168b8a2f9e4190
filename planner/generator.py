"""Timetable generation.

Two searches share the same constraint checks:

- `generate_schedules` enumerates timetables that place every visible subject
  (or, with `allow_partial`, any non-empty subset), up to an output cap.
- `find_maximum_combination` looks for the largest number of subjects that fit
  together, trying target sizes from the safety ceiling downwards, and returns
  every timetable of the first size that works.

Both are deterministic: the same subjects (in the same order) and preferences
always give the same timetables in the same order.

Problems are reported through the result objects, never raised:
- too many subjects: search runs on the first `max_subjects`, `truncated` is set
- nothing fits: empty `timetables`, status "no_feasible"
- malformed input: status "rejected", `error` holds the reason
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from search import SearchConfig, SearchResult, enumerate_assignments

from .constraints import is_valid
from .dedupe import dedupe_timetables
from .subjects import Placement, PlannerLimits, Preferences, Subject, Timetable
from .validation import validate_request


logger = logging.getLogger(__name__)


STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_NO_FEASIBLE = "no_feasible"
STATUS_REJECTED = "rejected"


@dataclass
class GenerationResult:
    timetables: List[Timetable] = field(default_factory=list)
    subjects_considered: List[str] = field(default_factory=list)
    truncated: bool = False
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def status(self) -> str:
        if self.error:
            return STATUS_REJECTED
        if not self.subjects_considered:
            return STATUS_EMPTY
        return STATUS_OK if self.timetables else STATUS_NO_FEASIBLE


@dataclass
class MaximumResult:
    max_count: int = 0
    timetables: List[Timetable] = field(default_factory=list)
    subject_names_used: List[str] = field(default_factory=list)
    subjects_considered: List[str] = field(default_factory=list)
    truncated: bool = False
    warnings: List[str] = field(default_factory=list)
    error: Optional[str] = None
    metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def status(self) -> str:
        if self.error:
            return STATUS_REJECTED
        if not self.subjects_considered:
            return STATUS_EMPTY
        return STATUS_OK if self.max_count > 0 else STATUS_NO_FEASIBLE


# ----------------------------
# Helpers
# ----------------------------


def _apply_ceiling(subjects: Sequence[Subject], limits: PlannerLimits) -> Tuple[List[Subject], List[str]]:
    """Keep the first `max_subjects` subjects; return them plus any warning."""

    pool = list(subjects)
    if len(pool) <= limits.max_subjects:
        return pool, []

    msg = (
        f"Too many subjects ({len(pool)}): only the first {limits.max_subjects} were combined, "
        "results are truncated."
    )
    logger.warning(msg)
    return pool[: limits.max_subjects], [msg]


def _search_items(subjects: Sequence[Subject], preferences: Preferences) -> List[Tuple[str, List[Placement]]]:
    return [(s.name, s.options(prefer_virtual=preferences.prefer_virtual)) for s in subjects]


def _run_search(
    subjects: Sequence[Subject],
    preferences: Preferences,
    config: SearchConfig,
) -> SearchResult[Placement]:
    priority = [s.name for s in subjects if s.priority]
    priority_set = frozenset(priority)

    def accept(candidate: Timetable) -> bool:
        # a timetable must place at least one subject
        if not candidate:
            return False
        return is_valid(candidate, preferences, priority_set)

    return enumerate_assignments(
        _search_items(subjects, preferences),
        accept,
        required=priority,
        config=config,
    )


def _search_metrics(result: SearchResult[Placement]) -> Dict[str, float]:
    return {
        "nodes_visited": float(result.nodes_visited),
        "candidates_checked": float(result.candidates_checked),
        "hit_limit": float(result.hit_limit),
    }


# ----------------------------
# Public API
# ----------------------------


def generate_schedules(
    subjects: Sequence[Subject],
    preferences: Preferences = Preferences(),
    limit: Optional[int] = None,
    *,
    limits: PlannerLimits = PlannerLimits(),
    allow_partial: bool = False,
) -> GenerationResult:
    """Enumerate valid timetables for the visible subjects.

    Args:
        limit: Output cap for this call (defaults to `limits.batch_size`,
            never above `limits.max_combinations`).
        allow_partial: Also explore leaving subjects out; then a timetable may
            place any non-empty subset that keeps every priority subject.

    Returns:
        GenerationResult; check `status` before using `timetables`.
    """

    visible = [s for s in subjects if not s.hidden]

    ok, msg = validate_request(visible, preferences, limits, limit)
    if not ok:
        return GenerationResult(error=msg)

    if not visible:
        return GenerationResult()

    pool, warnings = _apply_ceiling(visible, limits)
    cap = min(int(limit or limits.batch_size), limits.max_combinations)

    found = _run_search(pool, preferences, SearchConfig(limit=cap, allow_skip=bool(allow_partial)))
    timetables = dedupe_timetables(found.solutions)

    metrics = _search_metrics(found)
    metrics["subjects_considered"] = float(len(pool))
    metrics["timetables"] = float(len(timetables))
    logger.debug("generate_schedules: %s", metrics)

    return GenerationResult(
        timetables=timetables,
        subjects_considered=[s.name for s in pool],
        truncated=bool(warnings),
        warnings=warnings,
        metrics=metrics,
    )


def find_maximum_combination(
    subjects: Sequence[Subject],
    preferences: Preferences = Preferences(),
    *,
    limits: PlannerLimits = PlannerLimits(),
    include_hidden: bool = False,
) -> MaximumResult:
    """Find the largest number of subjects that can be taken together.

    Target sizes are tried from `min(max_subjects, #subjects)` down to 1; the
    first size with at least one valid timetable wins. `subject_names_used`
    lists the subjects of the first timetable; other timetables of the same
    size may use a different subset.

    With `include_hidden`, hidden subjects take part as well.
    """

    pool_all = list(subjects) if include_hidden else [s for s in subjects if not s.hidden]

    ok, msg = validate_request(pool_all, preferences, limits)
    if not ok:
        return MaximumResult(error=msg)

    if not pool_all:
        return MaximumResult()

    pool, warnings = _apply_ceiling(pool_all, limits)
    considered = [s.name for s in pool]

    totals = {"nodes_visited": 0.0, "candidates_checked": 0.0, "passes": 0.0}
    for target in range(min(limits.max_subjects, len(pool)), 0, -1):
        found = _run_search(
            pool,
            preferences,
            SearchConfig(limit=limits.max_combinations, target_size=target, allow_skip=True),
        )
        totals["nodes_visited"] += found.nodes_visited
        totals["candidates_checked"] += found.candidates_checked
        totals["passes"] += 1

        timetables = dedupe_timetables(found.solutions)
        if timetables:
            totals["timetables"] = float(len(timetables))
            logger.debug("find_maximum_combination: size %d fits, %s", target, totals)
            return MaximumResult(
                max_count=target,
                timetables=timetables,
                subject_names_used=list(timetables[0].keys()),
                subjects_considered=considered,
                truncated=bool(warnings),
                warnings=warnings,
                metrics=totals,
            )

    totals["timetables"] = 0.0
    logger.debug("find_maximum_combination: nothing fits, %s", totals)
    return MaximumResult(
        subjects_considered=considered,
        truncated=bool(warnings),
        warnings=warnings,
        metrics=totals,
    )
