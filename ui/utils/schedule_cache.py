from __future__ import annotations

import hashlib
import json
from typing import Any, Callable, Dict, MutableMapping, Optional, Sequence

from planner.subjects import PlannerLimits, Preferences, Subject, preferences_to_dict, subject_to_dict


MAX_CACHED_RUNS = 16


def _stable_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_input_hash(
    *,
    subjects: Sequence[Subject],
    preferences: Preferences,
    limits: PlannerLimits = PlannerLimits(),
    run_settings: Optional[Dict[str, Any]] = None,
) -> str:
    """Compute a stable hash for one planner run.

    Same subjects (in the same order) + same preferences + same run parameters
    => same hash. Subject order matters because it drives the search order.
    """

    payload: Dict[str, Any] = {
        "subjects": [subject_to_dict(s) for s in subjects],
        "preferences": preferences_to_dict(preferences),
        "limits": {
            "max_subjects": int(limits.max_subjects),
            "batch_size": int(limits.batch_size),
            "max_combinations": int(limits.max_combinations),
        },
        "run_settings": run_settings or {},
    }
    return hashlib.sha256(_stable_json(payload).encode("utf-8")).hexdigest()


def cached_run(store: MutableMapping[str, Any], key: str, compute: Callable[[], Any]) -> Any:
    """Return `store[key]`, computing and remembering it on a miss.

    The planner is deterministic, so a hit is always identical to a fresh run.
    Oldest entries are evicted beyond MAX_CACHED_RUNS.
    """

    if key in store:
        return store[key]

    value = compute()
    store[key] = value
    while len(store) > MAX_CACHED_RUNS:
        del store[next(iter(store))]
    return value
