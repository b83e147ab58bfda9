from __future__ import annotations
import streamlit as st
import pandas as pd
from urllib.request import urlopen

from typing import Iterable, Mapping

from seating.models import DEFAULT_GRID_COLS, DEFAULT_GRID_ROWS, Assignment, Layout, Person, Rule
from seating.presets import default_layout
from seating.utils import _clean_opt, first_name, split_members

STUDENT_COLUMNS = ["id", "name", "color"]
RULE_COLUMNS = ["id", "kind", "members", "description"]

# ----------------- Session & CSV helpers -----------------

def layout_to_df(layout: Layout) -> pd.DataFrame:
    return pd.DataFrame(
        [{"id": p.id, "x": p.x, "y": p.y, "rotation": p.rotation} for p in layout.positions],
        columns=["id", "x", "y", "rotation"],
    )

def roster_to_df(roster: list[Person]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"id": p.id, "name": p.name, "color": p.display_color} for p in roster],
        columns=STUDENT_COLUMNS,
    )

def rules_to_df(rules: list[Rule]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"id": r.id, "kind": r.kind.value, "members": " & ".join(r.member_ids), "description": r.description}
            for r in rules
        ],
        columns=RULE_COLUMNS,
    )

def ensure_session_keys() -> None:
    """Create all session_state keys used by the app if missing."""
    defaults = [
        ("desks",       layout_to_df(default_layout())),
        ("students",    pd.DataFrame(columns=STUDENT_COLUMNS)),
        ("rules",       pd.DataFrame(columns=RULE_COLUMNS)),
        ("assigned",    pd.DataFrame()),
        ("unplaced",    pd.DataFrame()),
        ("assign_meta", {}),
        ("log_lines",   []),
        ("seed",        0),
        ("fixed_seed",  False),
        ("grid_rows",   DEFAULT_GRID_ROWS),
        ("grid_cols",   DEFAULT_GRID_COLS),
    ]
    for k, v in defaults:
        if k not in st.session_state:
            st.session_state[k] = v

def effective(state: Mapping, key: str) -> pd.DataFrame:
    """The table as last edited in its data_editor, else the stored one."""
    edited = state.get(f"{key}_edited")
    return edited if edited is not None else state.get(key, pd.DataFrame())

def replace_table(key: str, df: pd.DataFrame) -> None:
    """Store a new base table and reset its editor so the edits start over."""
    st.session_state[key] = df
    for k in (f"{key}_edited", f"{key}_editor"):
        if k in st.session_state:
            del st.session_state[k]

def assignment_inputs(state: Mapping) -> dict:
    """Keyword arguments for assign_seats built from the current session."""
    seed = None
    if state.get("fixed_seed"):
        seed = int(state.get("seed", 0) or 0)
    return {
        "desks_df": effective(state, "desks"),
        "students_df": effective(state, "students"),
        "rules_df": effective(state, "rules"),
        "seed": seed,
        "grid_rows": int(state.get("grid_rows") or DEFAULT_GRID_ROWS),
        "grid_cols": int(state.get("grid_cols") or DEFAULT_GRID_COLS),
    }

def roster_from_table(df: pd.DataFrame) -> list[Person]:
    """People from an editor table; half-filled rows (no id or name) are skipped."""
    if df is None or df.empty:
        return []
    out = []
    for _, r in df.iterrows():
        pid, name = _clean_opt(r.get("id")), _clean_opt(r.get("name"))
        if pid and name:
            out.append(Person(id=pid, name=name, display_color=_clean_opt(r.get("color")) or "#888888"))
    return out

def session_roster() -> list[Person]:
    return roster_from_table(effective(st.session_state, "students"))

def drop_rules_naming(rules_df: pd.DataFrame, removed: Iterable[Person]) -> pd.DataFrame:
    """Drop rules whose members mention a removed student (by id or by name)."""
    if rules_df is None or rules_df.empty:
        return rules_df
    gone = set()
    for p in removed:
        gone.add(p.id.lower())
        gone.add(p.name.strip().lower())
    if not gone:
        return rules_df
    keep = rules_df["members"].map(
        lambda cell: not any(m.lower() in gone for m in split_members(cell))
    )
    return rules_df[keep].reset_index(drop=True)

def _peek_start(src, size: int = 1024) -> bytes:
    """Return up to ``size`` bytes from the start of ``src`` without consuming it."""
    try:
        if hasattr(src, "read") and hasattr(src, "seek") and hasattr(src, "tell"):
            pos = src.tell()
            data = src.read(size)
            src.seek(pos)
            return data
        if isinstance(src, str):
            if src.startswith(("http://", "https://")):
                with urlopen(src) as resp:
                    return resp.read(size)
            with open(src, "rb") as fh:
                return fh.read(size)
    except OSError:
        pass
    return b""


def read_csv(src):
    """Read CSV from an uploaded file or a URL.

    Uses UTF‑8‑SIG decoding and avoids converting empty cells to ``"nan"``.
    ``src`` may be a file-like object (e.g. ``BytesIO``) or a string/URL.
    Detects common delimiters and rejects HTML responses.
    """
    start = _peek_start(src)
    if b"<html" in start.lower():
        raise ValueError("The provided source returned HTML, not CSV. Check the URL or file.")
    try:
        return pd.read_csv(
            src,
            encoding="utf-8-sig",
            keep_default_na=False,
            na_filter=False,
            sep=None,
            engine="python",
        )
    except pd.errors.ParserError as exc:
        raise ValueError(
            "Could not parse CSV. The file may be invalid or use an unexpected delimiter."
        ) from exc
    except UnicodeDecodeError:
        # some exports omit the BOM and are not UTF-8
        if hasattr(src, "seek"):
            src.seek(0)
        try:
            return pd.read_csv(
                src,
                encoding="latin-1",
                keep_default_na=False,
                na_filter=False,
                sep=None,
                engine="python",
            )
        except pd.errors.ParserError as exc:
            raise ValueError(
                "Could not parse CSV. The file may be invalid or use an unexpected delimiter."
            ) from exc

# ----------------- DataFrame helpers -----------------

def chart_grid_df(assignment: Assignment, roster: list[Person]) -> pd.DataFrame:
    """
    Rows = y (front first), columns = x. Cells hold first names,
    '·' for an empty desk and '' where there is no desk.
    """
    if assignment is None or not assignment.entries:
        return pd.DataFrame()
    names = {p.id: first_name(p.name) for p in roster}
    xs = sorted({e.x for e in assignment.entries})
    ys = sorted({e.y for e in assignment.entries})
    grid = pd.DataFrame("", index=ys, columns=xs)
    for e in assignment.entries:
        label = names.get(e.person_id, e.person_id) if e.person_id else "·"
        current = grid.at[e.y, e.x]
        grid.at[e.y, e.x] = f"{current} / {label}" if current else label
    grid.index.name = "row"
    return grid

def highlight_status(row):
    """
    Row-level highlight for diagnostics:
      - green for satisfied rules
      - red   for violated rules
      - no color when the rule was not evaluated
    """
    status = str(row.get("status", "")).strip()
    if status == "satisfied":
        color = "background-color: #e6ffed"
    elif status == "violated":
        color = "background-color: #ffe6e6"
    else:
        return [""] * len(row)
    return [color] * len(row)

__all__ = [
    "ensure_session_keys",
    "session_roster",
    "effective",
    "replace_table",
    "assignment_inputs",
    "roster_from_table",
    "drop_rules_naming",
    "read_csv",
    "layout_to_df",
    "roster_to_df",
    "rules_to_df",
    "chart_grid_df",
    "highlight_status",
]
