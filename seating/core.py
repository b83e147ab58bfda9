from __future__ import annotations
import math
import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .models import (
    DEFAULT_GRID_COLS, DEFAULT_GRID_ROWS,
    Assignment, AssignmentEntry, Layout, Person, Position, Rule, RuleKind,
)
from .roster import color_for, make_rule
from .solver import solve
from .utils import _clean_opt, split_members
from .validate import verify

def _first_col(df: pd.DataFrame, *candidates: str) -> Optional[str]:
    for c in candidates:
        if c in df.columns:
            return c
    return None

def _as_grid_int(v, col: str, row_no: int) -> int:
    s = _clean_opt(v)
    try:
        f = float(s)
    except ValueError:
        raise ValueError(f"Row {row_no}: '{col}' must be a whole number, got {v!r}.") from None
    if not math.isfinite(f):
        raise ValueError(f"Row {row_no}: '{col}' must be a finite whole number, got {v!r}.")
    if f != int(f) or f < 0:
        raise ValueError(f"Row {row_no}: '{col}' must be a non-negative whole number, got {v!r}.")
    return int(f)

# -----------------------------------------------------------------------------
# DataFrame -> models
# -----------------------------------------------------------------------------
def layout_from_df(
    desks_df: pd.DataFrame,
    grid_rows: Optional[int] = None,
    grid_cols: Optional[int] = None,
) -> Layout:
    """
    Columns: x, y (required), id (optional, default desk-<i>), rotation (optional degrees).
    Raises ValueError on missing columns, bad coordinates or duplicate ids.
    """
    df = pd.DataFrame() if desks_df is None else desks_df.fillna("")
    if df.empty:
        return Layout((), grid_rows or DEFAULT_GRID_ROWS, grid_cols or DEFAULT_GRID_COLS)
    for col in ("x", "y"):
        if col not in df.columns:
            raise ValueError(f"Missing '{col}' column in desks CSV.")
    id_col = _first_col(df, "id", "desk", "desk_id")
    rot_col = _first_col(df, "rotation", "rotate")

    positions: List[Position] = []
    seen = set()
    for i, (_, r) in enumerate(df.iterrows()):
        pid = _clean_opt(r.get(id_col, "")) if id_col else ""
        pid = pid or f"desk-{i}"
        if pid in seen:
            raise ValueError(f"Duplicate desk id '{pid}'.")
        seen.add(pid)
        rotation = _as_grid_int(r[rot_col], rot_col, i + 1) if rot_col and _clean_opt(r[rot_col]) else 0
        positions.append(Position(
            id=pid,
            x=_as_grid_int(r["x"], "x", i + 1),
            y=_as_grid_int(r["y"], "y", i + 1),
            rotation=rotation % 360,
        ))

    # grid must at least cover every desk
    need_rows = max(p.y for p in positions) + 1
    need_cols = max(p.x for p in positions) + 1
    return Layout(
        positions,
        max(grid_rows or DEFAULT_GRID_ROWS, need_rows),
        max(grid_cols or DEFAULT_GRID_COLS, need_cols),
    )

def roster_from_df(students_df: pd.DataFrame) -> List[Person]:
    """Columns: name or full_name (required), id, color (optional). Blank names dropped."""
    df = pd.DataFrame() if students_df is None else students_df.fillna("")
    if df.empty:
        return []
    name_col = _first_col(df, "name", "full_name", "student")
    if name_col is None:
        raise ValueError("Missing 'name' (or 'full_name') column in students CSV.")
    id_col = _first_col(df, "id", "student_id")
    color_col = _first_col(df, "color", "display_color")

    roster: List[Person] = []
    seen = set()
    for i, (_, r) in enumerate(df.iterrows()):
        name = _clean_opt(r[name_col])
        if not name:
            continue
        pid = (_clean_opt(r.get(id_col, "")) if id_col else "") or f"student-{i + 1}"
        if pid in seen:
            raise ValueError(f"Duplicate student id '{pid}'.")
        seen.add(pid)
        color = (_clean_opt(r.get(color_col, "")) if color_col else "") or color_for(len(roster))
        roster.append(Person(id=pid, name=name, display_color=color))
    return roster

def _resolve_member(token: str, roster: Sequence[Person]) -> Optional[str]:
    for p in roster:
        if p.id == token:
            return p.id
    low = token.lower()
    for p in roster:
        if p.name.strip().lower() == low:
            return p.id
    return None

def rules_from_df(rules_df: pd.DataFrame, roster: Sequence[Person]) -> List[Rule]:
    """
    Columns: kind (or type), members (or students; ids or names joined by & ; , |),
    description and id optional. Raises ValueError naming the bad row.
    """
    df = pd.DataFrame() if rules_df is None else rules_df.fillna("")
    if df.empty:
        return []
    kind_col = _first_col(df, "kind", "type", "rule")
    members_col = _first_col(df, "members", "students", "member_ids")
    if kind_col is None:
        raise ValueError("Missing 'kind' (or 'type') column in rules CSV.")
    if members_col is None:
        raise ValueError("Missing 'members' (or 'students') column in rules CSV.")
    desc_col = _first_col(df, "description")
    id_col = _first_col(df, "id", "rule_id")

    rules: List[Rule] = []
    for i, (_, r) in enumerate(df.iterrows()):
        row_no = i + 1
        if not _clean_opt(r[kind_col]) and not _clean_opt(r[members_col]):
            continue
        try:
            kind = RuleKind.parse(r[kind_col])
        except ValueError as exc:
            raise ValueError(f"Rule row {row_no}: {exc}") from None

        member_ids = []
        for token in split_members(r[members_col]):
            pid = _resolve_member(token, roster)
            if pid is None:
                raise ValueError(f"Rule row {row_no}: unknown student '{token}'.")
            member_ids.append(pid)

        try:
            rules.append(make_rule(
                kind,
                member_ids,
                roster,
                rule_id=(_clean_opt(r.get(id_col, "")) if id_col else "") or f"rule-{row_no}",
                description=_clean_opt(r.get(desc_col, "")) if desc_col else None,
            ))
        except ValueError as exc:
            raise ValueError(f"Rule row {row_no}: {exc}") from None
    return rules

# -----------------------------------------------------------------------------
# Models -> DataFrame
# -----------------------------------------------------------------------------
ASSIGNED_COLUMNS = ["desk", "x", "y", "student_id", "student", "color"]

def assignment_to_df(assignment: Assignment, roster: Sequence[Person] = ()) -> pd.DataFrame:
    by_id: Dict[str, Person] = {p.id: p for p in roster}
    rows = []
    for e in assignment.entries:
        person = by_id.get(e.person_id) if e.person_id else None
        rows.append({
            "desk": e.position_id,
            "x": e.x,
            "y": e.y,
            "student_id": e.person_id or "",
            "student": person.name if person else "",
            "color": person.display_color if person else "",
        })
    return pd.DataFrame(rows, columns=ASSIGNED_COLUMNS)

def unplaced_to_df(assignment: Assignment, roster: Sequence[Person]) -> pd.DataFrame:
    placed = set(assignment.placed_ids())
    rows = [{"id": p.id, "name": p.name, "color": p.display_color} for p in roster if p.id not in placed]
    return pd.DataFrame(rows, columns=["id", "name", "color"])

# -----------------------------------------------------------------------------
# Manual override
# -----------------------------------------------------------------------------
def swap_seats(assignment: Assignment, position_a: str, position_b: str) -> Assignment:
    """Exchange the occupants of two desks (either may be empty). Returns a new Assignment."""
    ids = {e.position_id for e in assignment.entries}
    for pid in (position_a, position_b):
        if pid not in ids:
            raise KeyError(f"Unknown desk id '{pid}'.")
    a_person = assignment.person_at(position_a)
    b_person = assignment.person_at(position_b)
    out = []
    for e in assignment.entries:
        if e.position_id == position_a:
            e = AssignmentEntry(e.position_id, b_person, e.x, e.y)
        elif e.position_id == position_b:
            e = AssignmentEntry(e.position_id, a_person, e.x, e.y)
        out.append(e)
    return Assignment(out)

# -----------------------------------------------------------------------------
# Public API: assign_seats
# -----------------------------------------------------------------------------
def assign_seats(
    desks_df: pd.DataFrame,
    students_df: pd.DataFrame,
    rules_df: Optional[pd.DataFrame] = None,
    *,
    seed: Optional[int] = None,
    log_func: Optional[Callable[[str], None]] = print,
    grid_rows: Optional[int] = None,
    grid_cols: Optional[int] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame, Dict]:
    """
    Returns:
        assigned_df: one row per desk [desk, x, y, student_id, student, color]
        unplaced_df: students without a desk [id, name, color]
        meta: assignment, report, layout, roster, rules, seed
    """
    log = (lambda m: None) if log_func is None else log_func

    layout = layout_from_df(desks_df, grid_rows, grid_cols)
    roster = roster_from_df(students_df)
    if not roster:
        raise ValueError("No students to place. Add at least one student first.")
    rules = rules_from_df(rules_df, roster)

    if seed is None:
        seed = random.randrange(2**31)
    assignment = solve(layout, roster, rules, random.Random(seed), log_func=log)
    report = verify(rules, assignment)

    for desc in report.satisfied:
        log(f"✅ {desc}")
    for desc in report.violated:
        log(f"⚠️ {desc}")
    log(f"ℹ️ seed={seed}: {len(report.satisfied)} rule(s) satisfied, {len(report.violated)} violated.")

    meta = {
        "assignment": assignment,
        "report": report,
        "layout": layout,
        "roster": roster,
        "rules": rules,
        "seed": seed,
    }
    return assignment_to_df(assignment, roster), unplaced_to_df(assignment, roster), meta
