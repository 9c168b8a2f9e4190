from __future__ import annotations

import io
import zipfile
from dataclasses import dataclass
from typing import List, Optional, Sequence

import pandas as pd

from planner.subjects import DAYS, TURNS, Timetable, iter_placements


TURN_LABELS = {"morning": "Morning", "afternoon": "Afternoon", "evening": "Evening"}


def placement_label(name: str, campus: str) -> str:
    """Cell text for a placed subject, e.g. 'Algebra (M)'."""

    return f"{name} ({campus})" if campus else name


def timetable_grid_df(timetable: Timetable, *, blocked_slots=frozenset(), blocked_label: str = "BLOCKED") -> pd.DataFrame:
    """Convert one timetable into a (days x turns) spreadsheet-style DataFrame.

    Blocked slots left empty are marked with `blocked_label`.
    """

    table = [["" for _ in TURNS] for _ in DAYS]
    for d_idx, day in enumerate(DAYS):
        for t_idx, turn in enumerate(TURNS):
            if (day, turn) in blocked_slots:
                table[d_idx][t_idx] = blocked_label

    for name, p in iter_placements(timetable):
        table[DAYS.index(p.day)][TURNS.index(p.turn)] = placement_label(name, p.campus)

    df = pd.DataFrame(table, columns=[TURN_LABELS[t] for t in TURNS])
    df.insert(0, "DAY", list(DAYS))
    return df


def timetables_summary_df(timetables: Sequence[Timetable]) -> pd.DataFrame:
    """Long format: one row per (option, subject)."""

    rows = []
    for i, t in enumerate(timetables, start=1):
        for name, p in iter_placements(t):
            rows.append(
                {
                    "option": i,
                    "subject": name,
                    "day": p.day,
                    "turn": p.turn,
                    "campus": p.campus,
                    "virtual": bool(p.is_virtual),
                }
            )
    return pd.DataFrame(rows, columns=["option", "subject", "day", "turn", "campus", "virtual"])


def _safe_sheet_name(name: str) -> str:
    """Excel sheet names: max 31 chars, cannot contain: `: \\ / ? * [ ]`."""

    bad = [":", "\\", "/", "?", "*", "[", "]"]
    out = str(name or "Sheet")
    for b in bad:
        out = out.replace(b, "-")
    out = out.strip() or "Sheet"
    return out[:31]


def timetables_workbook_bytes(
    timetables: Sequence[Timetable],
    *,
    blocked_slots=frozenset(),
    title: Optional[str] = None,
) -> bytes:
    """Excel workbook: a summary sheet plus one grid sheet per timetable option."""

    out = io.BytesIO()
    summary = timetables_summary_df(timetables)

    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        start = 0
        if title:
            pd.DataFrame([[title]], columns=["Title"]).to_excel(
                writer, sheet_name=_safe_sheet_name("Summary"), index=False
            )
            start = 3
        summary.to_excel(writer, sheet_name=_safe_sheet_name("Summary"), index=False, startrow=start)

        for i, t in enumerate(timetables, start=1):
            df = timetable_grid_df(t, blocked_slots=blocked_slots)
            df.to_excel(writer, sheet_name=_safe_sheet_name(f"Option {i}"), index=False)

    return out.getvalue()


def timetables_zip_bytes(timetables: Sequence[Timetable], *, blocked_slots=frozenset()) -> bytes:
    """ZIP with the workbook, the summary CSV and one CSV + Markdown grid per option."""

    wb = timetables_workbook_bytes(timetables, blocked_slots=blocked_slots)
    summary = timetables_summary_df(timetables)

    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as z:
        z.writestr("timetables.xlsx", wb)
        z.writestr("tables/summary.csv", summary.to_csv(index=False).encode("utf-8"))
        for i, t in enumerate(timetables, start=1):
            df = timetable_grid_df(t, blocked_slots=blocked_slots)
            z.writestr(f"options/option_{i}.csv", df.to_csv(index=False).encode("utf-8"))
            z.writestr(f"options/option_{i}.md", df_to_markdown(df).encode("utf-8"))

    return buf.getvalue()


@dataclass(frozen=True)
class ImageExportOptions:
    title: Optional[str] = None
    font_size: int = 10
    cell_height: float = 0.45
    cell_width: float = 1.8


def df_to_markdown(df: pd.DataFrame) -> str:
    """Convert DataFrame to a GitHub-flavored Markdown table."""

    # pandas to_markdown needs tabulate; keep this dependency-free.
    cols = list(df.columns)
    rows: List[List[str]] = df.astype(str).values.tolist()

    def esc(s: str) -> str:
        return str(s).replace("\n", " ").replace("|", "\\|")

    header = "| " + " | ".join(esc(c) for c in cols) + " |"
    sep = "| " + " | ".join(["---"] * len(cols)) + " |"
    body = ["| " + " | ".join(esc(v) for v in r) + " |" for r in rows]
    return "\n".join([header, sep] + body) + "\n"


def df_to_png_bytes(df: pd.DataFrame, *, options: ImageExportOptions = ImageExportOptions()) -> bytes:
    """Render a timetable grid as a PNG image (bytes) with matplotlib's table artist."""

    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    nrows, ncols = df.shape

    fig_w = max(6.0, float(options.cell_width) * (ncols + 1))
    fig_h = max(2.0, float(options.cell_height) * (nrows + 2))

    fig, ax = plt.subplots(figsize=(fig_w, fig_h))
    ax.axis("off")

    if options.title:
        ax.set_title(options.title, fontsize=options.font_size + 2, pad=12)

    tbl = ax.table(
        cellText=df.values,
        colLabels=list(df.columns),
        cellLoc="center",
        loc="center",
    )

    tbl.auto_set_font_size(False)
    tbl.set_fontsize(options.font_size)
    tbl.scale(1.0, 1.4)

    for (r, c), cell in tbl.get_celld().items():
        cell.set_linewidth(0.6)
        if r == 0 or c == 0:
            cell.set_facecolor("#f0f2f6")
            cell.set_text_props(weight="bold")
        elif cell.get_text().get_text() == "BLOCKED":
            cell.set_facecolor("#fde2e2")

    buf = io.BytesIO()
    fig.tight_layout()
    fig.savefig(buf, format="png", dpi=200, bbox_inches="tight")
    plt.close(fig)
    return buf.getvalue()
