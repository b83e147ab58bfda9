from __future__ import annotations

import pandas as pd
import pytest

from seating.core import (
    ASSIGNED_COLUMNS,
    assign_seats,
    layout_from_df,
    roster_from_df,
    rules_from_df,
    swap_seats,
)
from seating.models import Person, RuleKind
from seating.roster import COLORS
from tests.fixtures import seated

DESKS = pd.DataFrame({"id": ["a", "b", "c", "d"], "x": [0, 1, 0, 1], "y": [0, 0, 1, 1]})
STUDENTS = pd.DataFrame({"id": ["s1", "s2", "s3"], "name": ["Ann Lee", "Bob Ray", "Cy Fox"]})


# -----------------------------------------------------------------------------
# layout_from_df
# -----------------------------------------------------------------------------
def test_layout_from_df_reads_ids_and_coordinates():
    layout = layout_from_df(DESKS)
    assert [p.id for p in layout.positions] == ["a", "b", "c", "d"]
    assert layout.get("d").x == 1 and layout.get("d").y == 1
    assert (layout.grid_rows, layout.grid_cols) == (8, 12)


def test_layout_from_df_defaults_ids_and_stretches_grid():
    df = pd.DataFrame({"x": [0, 14], "y": ["2", 9.0]})
    layout = layout_from_df(df, grid_rows=4)
    assert [p.id for p in layout.positions] == ["desk-0", "desk-1"]
    assert layout.positions[1].y == 9
    assert layout.grid_rows == 10
    assert layout.grid_cols == 15


def test_layout_from_df_empty():
    assert len(layout_from_df(pd.DataFrame())) == 0
    assert len(layout_from_df(None)) == 0


@pytest.mark.parametrize("df, msg", [
    (pd.DataFrame({"x": [1]}), "Missing 'y' column"),
    (pd.DataFrame({"x": ["left"], "y": [0]}), "must be a whole number"),
    (pd.DataFrame({"x": [1.5], "y": [0]}), "non-negative whole number"),
    (pd.DataFrame({"x": [-1], "y": [0]}), "non-negative whole number"),
    (pd.DataFrame({"id": ["a", "a"], "x": [0, 1], "y": [0, 0]}), "Duplicate desk id"),
    (pd.DataFrame({"id": ["a"], "x": ["inf"], "y": [0]}), "finite whole number"),
    (pd.DataFrame({"id": ["a"], "x": [0], "y": ["1e400"]}), "finite whole number"),
    (pd.DataFrame({"id": ["a"], "x": [float("inf")], "y": [0]}), "finite whole number"),
    (pd.DataFrame({"id": ["a"], "x": [0], "y": [float("-inf")]}), "finite whole number"),
    (pd.DataFrame({"x": [0], "y": [0], "rotation": ["sideways"]}), "'rotation' must be a whole number"),
])
def test_layout_from_df_rejects_bad_input(df, msg):
    with pytest.raises(ValueError, match=msg):
        layout_from_df(df)


def test_layout_from_df_reads_optional_rotation():
    df = pd.DataFrame({"id": ["a", "b", "c"], "x": [0, 1, 2], "y": [0, 0, 0], "rotation": [90, "", 450]})
    layout = layout_from_df(df)
    assert [p.rotation for p in layout.positions] == [90, 0, 90]
    assert layout_from_df(DESKS).get("a").rotation == 0


# -----------------------------------------------------------------------------
# roster_from_df
# -----------------------------------------------------------------------------
def test_roster_from_df_defaults():
    df = pd.DataFrame({"full_name": ["Ann", "", "Cy"]})
    roster = roster_from_df(df)
    assert [(p.id, p.name) for p in roster] == [("student-1", "Ann"), ("student-3", "Cy")]
    assert [p.display_color for p in roster] == COLORS[:2]


def test_roster_from_df_keeps_given_colours():
    df = pd.DataFrame({"name": ["Ann"], "id": ["x"], "color": ["#000000"]})
    assert roster_from_df(df) == [Person("x", "Ann", "#000000")]


def test_roster_from_df_errors():
    with pytest.raises(ValueError, match="Missing 'name'"):
        roster_from_df(pd.DataFrame({"surname": ["Lee"]}))
    with pytest.raises(ValueError, match="Duplicate student id"):
        roster_from_df(pd.DataFrame({"id": ["a", "a"], "name": ["A", "B"]}))


# -----------------------------------------------------------------------------
# rules_from_df
# -----------------------------------------------------------------------------
def test_rules_from_df_resolves_names_and_ids():
    roster = roster_from_df(STUDENTS)
    df = pd.DataFrame({
        "type": ["Keep Apart", "front_row", ""],
        "members": ["ann lee & s2", "Cy Fox", ""],
    })
    rules = rules_from_df(df, roster)
    assert len(rules) == 2
    assert rules[0].kind is RuleKind.KEEP_APART
    assert rules[0].member_ids == ("s1", "s2")
    assert rules[0].id == "rule-1"
    assert rules[0].description == "Keep Apart: Ann Lee & Bob Ray"
    assert rules[1].member_ids == ("s3",)


def test_rules_from_df_keeps_given_description():
    roster = roster_from_df(STUDENTS)
    df = pd.DataFrame({"kind": ["back-row"], "members": ["s1"], "description": ["Ann needs the back"]})
    assert rules_from_df(df, roster)[0].description == "Ann needs the back"


@pytest.mark.parametrize("kind, members, msg", [
    ("sit-by-window", "s1", "Rule row 1: Unknown rule kind"),
    ("keep-apart", "s1 & Zed", "Rule row 1: unknown student 'Zed'"),
    ("keep-together", "s1", "Rule row 1: Keep Together: select at least two students"),
    ("front-row", "", "Rule row 1: Front Row: select at least one student"),
])
def test_rules_from_df_errors(kind, members, msg):
    roster = roster_from_df(STUDENTS)
    with pytest.raises(ValueError, match=msg):
        rules_from_df(pd.DataFrame({"kind": [kind], "members": [members]}), roster)


def test_rules_from_df_missing_columns():
    with pytest.raises(ValueError, match="Missing 'members'"):
        rules_from_df(pd.DataFrame({"kind": ["keep-apart"]}), [])
    assert rules_from_df(None, []) == []


# -----------------------------------------------------------------------------
# assign_seats
# -----------------------------------------------------------------------------
def test_assign_seats_returns_frames_and_meta():
    rules = pd.DataFrame({"kind": ["keep-apart"], "members": ["s1 & s2"]})
    logs = []
    assigned, unplaced, meta = assign_seats(DESKS, STUDENTS, rules, seed=7, log_func=logs.append)

    assert list(assigned.columns) == ASSIGNED_COLUMNS
    assert len(assigned) == 4
    assert (assigned["student_id"] != "").sum() == 3
    assert unplaced.empty
    assert meta["seed"] == 7
    # 2x2 grid: the pair can never be more than 2 apart
    assert meta["report"].violated == ["Keep Apart: Ann Lee & Bob Ray"]
    assert any(m.startswith("⚠️ Keep Apart") for m in logs)
    assert logs[-1].startswith("ℹ️ seed=7")


def test_assign_seats_is_reproducible_for_a_seed():
    first, _, _ = assign_seats(DESKS, STUDENTS, seed=123, log_func=None)
    second, _, _ = assign_seats(DESKS, STUDENTS, seed=123, log_func=None)
    pd.testing.assert_frame_equal(first, second)


def test_assign_seats_picks_and_reports_a_seed():
    _, _, meta = assign_seats(DESKS, STUDENTS, log_func=None)
    assert isinstance(meta["seed"], int)


def test_assign_seats_reports_students_without_desks():
    desks = pd.DataFrame({"x": [0], "y": [0]})
    assigned, unplaced, meta = assign_seats(desks, STUDENTS, seed=1, log_func=None)
    assert assigned["student"].ne("").sum() == 1
    assert len(unplaced) == 2
    assert set(unplaced.columns) == {"id", "name", "color"}


def test_assign_seats_requires_students():
    with pytest.raises(ValueError, match="No students"):
        assign_seats(DESKS, pd.DataFrame({"name": []}), log_func=None)


# -----------------------------------------------------------------------------
# swap_seats
# -----------------------------------------------------------------------------
def test_swap_seats_exchanges_occupants():
    a = seated(("A", 0, 0), (None, 1, 0), ("B", 2, 0))
    swapped = swap_seats(a, "p0", "p1")
    assert swapped.person_at("p0") is None
    assert swapped.person_at("p1") == "A"
    assert swapped.person_at("p2") == "B"
    assert a.person_at("p0") == "A"


def test_swap_seats_unknown_desk():
    with pytest.raises(KeyError, match="Unknown desk id"):
        swap_seats(seated(("A", 0, 0)), "p0", "nowhere")
