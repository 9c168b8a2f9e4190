"""Course catalog CSV import.

The catalog lists one weekly meeting per row:

    code, subject, campus, id, modality, language, turn, year,
    MON, TUE, WED, THU, FRI, SAT, SUN, schedule, dates, type

Columns are read by position (header names vary between catalog exports).
Rows of the same subject are merged into one availability map.

Rules
-----
- intensive courses (modality INTENSIVO / INTENSIVE) are skipped
- virtual rows (modality VIRTUAL) get the campus tag "V" and replace physical
  options of the same subject on the same day and turn
- the turn comes from the start time in `schedule`; if it cannot be parsed,
  the row's turn label is used; if that fails too, the row is skipped
- only Monday to Friday are imported
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, IO, List, Optional, Tuple, Union

import pandas as pd

from planner.subjects import DAYS, VIRTUAL_CAMPUS, SlotOption, Subject, turn_index


CATALOG_COLUMNS = [
    "code",
    "name",
    "campus",
    "section_id",
    "modality",
    "language",
    "turn",
    "year",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
    "schedule",
    "dates",
    "type",
]

CATALOG_HEADER = [
    "Código",
    "Materia",
    "Sede",
    "ID",
    "Modalidad",
    "Idioma",
    "Turno",
    "Año",
    "LUNES",
    "MARTES",
    "MIERCOLES",
    "JUEVES",
    "VIERNES",
    "SABADO",
    "DOMINGO",
    "Horario",
    "Fechas",
    "Tipo",
]

_WEEKDAY_COLUMNS = ["monday", "tuesday", "wednesday", "thursday", "friday"]

INTENSIVE_MODALITIES = {"INTENSIVO", "INTENSIVE"}
VIRTUAL_MODALITIES = {"VIRTUAL"}

_TRUE_VALUES = {"true", "1", "x", "yes", "si", "sí"}

_TURN_LABELS = {
    "MAÑANA": "morning",
    "MANANA": "morning",
    "MORNING": "morning",
    "TARDE": "afternoon",
    "AFTERNOON": "afternoon",
    "NOCHE": "evening",
    "EVENING": "evening",
    "NIGHT": "evening",
}

# Known campus names -> tag. Anything else falls back to its first letter.
CAMPUS_CODES = {
    "VIRTUAL": VIRTUAL_CAMPUS,
    "MONSERRAT": "M",
    "RECOLETA": "R",
    "BELGRANO": "B",
    "PINAMAR": "P",
}

# first clock time in the schedule cell, e.g. "18:30 22:30" or "8.00-12.00"
_CLOCK_RE = re.compile(r"^\s*(\d{1,2})(?:[:.h](\d{2}))?")


@dataclass
class CatalogImport:
    subjects: List[Subject] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    skipped_rows: int = 0


def parse_bool(value) -> bool:
    return str(value or "").strip().lower() in _TRUE_VALUES


def classify_turn(schedule: str, turn_label: str = "") -> Optional[str]:
    """Turn of a meeting: before 12h morning, before 18h afternoon, else evening.

    Falls back to the textual turn label when the clock time is unreadable.
    Returns None when neither can be understood.
    """

    m = _CLOCK_RE.match(str(schedule or ""))
    if m:
        hour = int(m.group(1))
        if 0 <= hour <= 23:
            if hour < 12:
                return "morning"
            if hour < 18:
                return "afternoon"
            return "evening"

    label = str(turn_label or "").strip().upper()
    return _TURN_LABELS.get(label)


def campus_code(campus: str, modality: str = "") -> str:
    """Short campus tag for a catalog row.

    Physical campuses never get the virtual tag: a name starting with "V"
    becomes "VI".
    """

    if str(modality or "").strip().upper() in VIRTUAL_MODALITIES:
        return VIRTUAL_CAMPUS

    name = str(campus or "").strip().upper()
    if not name:
        return ""
    if name in CAMPUS_CODES:
        return CAMPUS_CODES[name]

    letters = [c for c in name if c.isalnum()]
    if not letters:
        return ""
    code = letters[0]
    if code == VIRTUAL_CAMPUS:
        code = "".join(letters[:2])
    return code


def _add_option(options: List[SlotOption], new: SlotOption) -> None:
    """Merge one option into a day's option list (virtual wins per turn)."""

    same_turn = [o for o in options if o.turn == new.turn]
    if new.is_virtual:
        if any(o.is_virtual for o in same_turn):
            return
        options[:] = [o for o in options if o.turn != new.turn]
        options.append(new)
        return
    if any(o.is_virtual for o in same_turn):
        return
    if new not in options:
        options.append(new)


# encodings tried in order; latin-1 decodes any byte sequence
_CATALOG_ENCODINGS = ("utf-8", "latin-1")


def _read_catalog_frame(source: Union[str, Path, IO[str], IO[bytes]]) -> Tuple[pd.DataFrame, List[str]]:
    """Read the raw catalog table; problems come back as warnings, never raised."""

    empty = pd.DataFrame(columns=CATALOG_COLUMNS)
    for encoding in _CATALOG_ENCODINGS:
        if hasattr(source, "seek"):
            source.seek(0)
        try:
            df = pd.read_csv(
                source,
                header=None,
                skiprows=1,
                names=CATALOG_COLUMNS,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
                index_col=False,
                on_bad_lines="skip",
                encoding=encoding,
            )
        except pd.errors.EmptyDataError:
            return empty, []
        except UnicodeDecodeError:
            continue
        except pd.errors.ParserError as exc:
            return empty, [f"Catalog could not be read: {exc}"]

        warnings = [] if encoding == _CATALOG_ENCODINGS[0] else [f"Catalog is not UTF-8; it was read as {encoding}"]
        return df.fillna(""), warnings

    return empty, ["Catalog could not be decoded"]


def load_catalog_csv(source: Union[str, Path, IO[str], IO[bytes]], *, hidden: bool = True) -> CatalogImport:
    """Parse a catalog CSV into subjects.

    Args:
        source: File path or file-like object.
        hidden: Flag given to every imported subject (imports start hidden so
            the student picks which ones to combine).
    """

    df, read_warnings = _read_catalog_frame(source)
    out = CatalogImport(warnings=read_warnings)

    merged: Dict[str, Dict[str, List[SlotOption]]] = {}
    for idx, row in df.iterrows():
        name = str(row["name"]).strip()
        schedule = str(row["schedule"]).strip()
        if not name or not schedule:
            out.skipped_rows += 1
            continue

        modality = str(row["modality"]).strip().upper()
        if modality in INTENSIVE_MODALITIES:
            out.skipped_rows += 1
            continue

        turn = classify_turn(schedule, str(row["turn"]))
        if turn is None:
            out.skipped_rows += 1
            out.warnings.append(f"Row {int(idx) + 2}: could not tell the turn of {name!r} from {schedule!r}")
            continue

        option = SlotOption(turn=turn, campus=campus_code(str(row["campus"]), modality))
        availability = merged.setdefault(name, {})
        for day, col in zip(DAYS, _WEEKDAY_COLUMNS):
            if parse_bool(row[col]):
                _add_option(availability.setdefault(day, []), option)

    for name, availability in merged.items():
        days = {d: tuple(opts) for d, opts in availability.items() if opts}
        if not days:
            out.warnings.append(f"{name!r} has no weekday meetings and was not imported")
            continue
        out.subjects.append(Subject(name=name, availability=days, hidden=bool(hidden)))

    return out


def load_catalog_text(content: str, *, hidden: bool = True) -> CatalogImport:
    return load_catalog_csv(io.StringIO(content), hidden=hidden)


# representative clock times used when writing subjects back to a catalog
_TURN_SCHEDULES = {
    "morning": "08:00 12:00",
    "afternoon": "14:00 18:00",
    "evening": "19:00 23:00",
}


def subjects_to_catalog_df(subjects: List[Subject]) -> pd.DataFrame:
    """One catalog row per subject/turn/campus, flagged on every day it applies."""

    rows = []
    for s in subjects:
        # (turn, campus) -> set of days
        groups: Dict[Tuple[str, str], set[str]] = {}
        for day, opts in s.availability.items():
            for o in opts or ():
                groups.setdefault((o.turn, o.campus), set()).add(day)

        for (turn, campus), days in sorted(groups.items(), key=lambda kv: (turn_index(kv[0][0]), kv[0][1])):
            virtual = campus == VIRTUAL_CAMPUS
            row = {
                "code": "",
                "name": s.name,
                "campus": "" if virtual else campus,
                "section_id": "",
                "modality": "VIRTUAL" if virtual else "SEMANAL",
                "language": "",
                "turn": turn.upper(),
                "year": "",
            }
            for day, col in zip(DAYS, _WEEKDAY_COLUMNS):
                row[col] = "true" if day in days else "false"
            row["saturday"] = "false"
            row["sunday"] = "false"
            row["schedule"] = _TURN_SCHEDULES[turn]
            row["dates"] = ""
            row["type"] = ""
            rows.append(row)

    df = pd.DataFrame(rows, columns=CATALOG_COLUMNS)
    df.columns = CATALOG_HEADER
    return df


def subjects_to_catalog_csv(subjects: List[Subject]) -> str:
    return subjects_to_catalog_df(subjects).to_csv(index=False)

