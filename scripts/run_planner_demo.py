"""Demo runner: combine the sample subjects into weekly timetables.

Usage:
    python scripts/run_planner_demo.py [subjects.json | catalog.csv]

"""

from __future__ import annotations

import logging
from pathlib import Path
import sys

# Ensure project root is on PYTHONPATH when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planner import (
    Preferences,
    find_maximum_combination,
    generate_schedules,
    load_subjects_from_json,
)
from utils.catalog_import import load_catalog_csv
from utils.timetable_export import df_to_markdown, timetable_grid_df


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    path = Path(sys.argv[1]) if len(sys.argv) > 1 else ROOT / "data" / "sample_subjects.json"

    if path.suffix.lower() == ".csv":
        imported = load_catalog_csv(str(path), hidden=False)
        for w in imported.warnings:
            logging.warning(w)
        subjects, preferences = imported.subjects, Preferences()
    else:
        subjects, preferences = load_subjects_from_json(str(path))

    result = generate_schedules(subjects, preferences)
    if result.status == "rejected":
        raise SystemExit(f"Input rejected: {result.error}")

    print(f"\n=== {len(result.timetables)} timetable option(s) ===")
    for i, t in enumerate(result.timetables[:3], start=1):
        print(f"\nOption {i}")
        print(df_to_markdown(timetable_grid_df(t, blocked_slots=preferences.blocked_slots)))

    best = find_maximum_combination(subjects, preferences)
    print("\n=== Most subjects together ===")
    print(f"max_count: {best.max_count}")
    print(f"example: {', '.join(best.subject_names_used)}")

    print("\n=== Metrics ===")
    for k, v in result.metrics.items():
        print(f"{k}: {v}")


if __name__ == "__main__":
    main()
