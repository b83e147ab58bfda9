import streamlit as st
import pandas as pd

from seating.core import layout_from_df, roster_from_df
from seating.models import RuleKind
from seating.presets import PRESET_LAYOUTS, get_preset, rotate_desk
from seating.roster import SAMPLE_NAMES, build_roster, make_rule, parse_names
from .helpers import (
    RULE_COLUMNS, STUDENT_COLUMNS,
    drop_rules_naming, effective, layout_to_df, read_csv, replace_table,
    roster_from_table, roster_to_df, rules_to_df, session_roster,
)

def _load_into(key: str, src, label: str) -> bool:
    """Load an uploaded CSV once per file; reruns with the same upload are no-ops."""
    token = getattr(src, "file_id", None) or getattr(src, "name", str(src))
    if st.session_state.get(f"_last_{key}_upload") == token:
        return False
    st.session_state[f"_last_{key}_upload"] = token
    try:
        replace_table(key, read_csv(src))
        st.session_state["assigned"] = pd.DataFrame()
        return True
    except ValueError as e:
        st.error(f"Failed to load {label} CSV: {e}")
        return False

# ---------- Layout ------------------------------------------------------------
def render_layout_inputs():
    st.markdown("### 🪑 Classroom Layout")
    c1, c2 = st.columns([2, 1])
    with c1:
        preset = st.selectbox("Preset layout", list(PRESET_LAYOUTS), key="preset_name")
    with c2:
        st.write("")
        if st.button("Apply preset"):
            replace_table("desks", layout_to_df(get_preset(preset)))
            st.session_state["assigned"] = pd.DataFrame()

    g1, g2 = st.columns(2)
    with g1:
        st.slider("Columns", min_value=6, max_value=16, key="grid_cols")
    with g2:
        st.slider("Rows", min_value=4, max_value=12, key="grid_rows")

    desks_file = st.file_uploader("Desks CSV (id, x, y, optional rotation)", type="csv", key="desks_file")
    if desks_file:
        _load_into("desks", desks_file, "desks")

    try:
        layout = layout_from_df(
            effective(st.session_state, "desks"),
            st.session_state["grid_rows"],
            st.session_state["grid_cols"],
        )
    except ValueError as e:
        st.error(f"❌ {e}")
        layout = None

    if layout is not None and len(layout):
        r1, r2 = st.columns([2, 1])
        with r1:
            desk_id = st.selectbox("Desk", [p.id for p in layout.positions], key="rotate_desk_id")
        with r2:
            st.write("")
            if st.button("↻ Rotate desk"):
                layout = rotate_desk(layout, desk_id)
                replace_table("desks", layout_to_df(layout))

    st.session_state["desks_edited"] = st.data_editor(
        st.session_state["desks"],
        num_rows="dynamic",
        use_container_width=True,
        key="desks_editor",
    )
    if layout is not None:
        st.caption(f"{len(layout)} desks on a {layout.grid_rows}×{layout.grid_cols} grid.")

# ---------- Students ----------------------------------------------------------
def _prune_rules_for(before, after) -> None:
    """Drop rules that name students deleted in the editor."""
    kept = {p.id for p in after}
    removed = [p for p in before if p.id not in kept]
    if not removed:
        return
    rules = effective(st.session_state, "rules")
    pruned = drop_rules_naming(rules, removed)
    if len(pruned) != len(rules):
        replace_table("rules", pruned)
        st.info(f"Removed {len(rules) - len(pruned)} rule(s) naming deleted students.")

def render_student_inputs():
    st.markdown("### 👩‍🎓 Students")
    students_file = st.file_uploader("Students CSV (name, optional id/color)", type="csv", key="students_file")
    if students_file and _load_into("students", students_file, "students"):
        try:
            replace_table("students", roster_to_df(roster_from_df(st.session_state["students"])))
        except ValueError as e:
            st.error(f"❌ {e}")
            replace_table("students", pd.DataFrame(columns=STUDENT_COLUMNS))

    bulk = st.text_area("Add students (one name per line)", key="bulk_names", height=100)
    c1, c2, c3 = st.columns(3)
    with c1:
        if st.button("➕ Add names") and bulk.strip():
            replace_table("students", roster_to_df(build_roster(parse_names(bulk), session_roster())))
            st.session_state["assigned"] = pd.DataFrame()
    with c2:
        if st.button(f"Add {len(SAMPLE_NAMES)} sample students"):
            replace_table("students", roster_to_df(build_roster(SAMPLE_NAMES, session_roster())))
            st.session_state["assigned"] = pd.DataFrame()
    with c3:
        if st.button("🗑️ Clear students"):
            replace_table("students", pd.DataFrame(columns=STUDENT_COLUMNS))
            replace_table("rules", pd.DataFrame(columns=RULE_COLUMNS))
            st.session_state["assigned"] = pd.DataFrame()

    if st.session_state["students"].empty:
        return
    st.caption("Edit names inline; select rows and press Delete to remove students.")
    before = roster_from_table(st.session_state["students"])
    edited = st.data_editor(
        st.session_state["students"],
        num_rows="dynamic",
        use_container_width=True,
        hide_index=True,
        key="students_editor",
    )
    st.session_state["students_edited"] = edited
    _prune_rules_for(before, roster_from_table(edited))

# ---------- Rules -------------------------------------------------------------
def render_rule_inputs():
    st.markdown("### 🛡️ Seating Rules")
    rules_file = st.file_uploader("Rules CSV (kind, members, description)", type="csv", key="rules_file")
    if rules_file:
        _load_into("rules", rules_file, "rules")

    roster = session_roster()
    if not roster:
        st.info("Add students before creating rules.")
    else:
        c1, c2 = st.columns([1, 2])
        with c1:
            kind = st.selectbox("Rule", list(RuleKind), format_func=lambda k: k.label, key="rule_kind")
        with c2:
            picked = st.multiselect(
                "Students",
                [p.id for p in roster],
                format_func=lambda pid: next((p.name for p in roster if p.id == pid), pid),
                key="rule_members",
            )
        if st.button("➕ Add rule"):
            try:
                existing = effective(st.session_state, "rules")
                rule = make_rule(kind, picked, roster, rule_id=f"rule-{len(existing) + 1}")
                replace_table("rules", pd.concat([existing, rules_to_df([rule])], ignore_index=True))
            except ValueError as e:
                st.warning(str(e))

    if st.session_state["rules"].empty:
        return
    st.caption("Select rows and press Delete to remove single rules.")
    st.session_state["rules_edited"] = st.data_editor(
        st.session_state["rules"],
        num_rows="dynamic",
        use_container_width=True,
        hide_index=True,
        key="rules_editor",
    )
    if st.button("🗑️ Clear rules"):
        replace_table("rules", pd.DataFrame(columns=RULE_COLUMNS))
        st.rerun()

def render_uploads():
    tab_layout, tab_students, tab_rules = st.tabs(["Layout", "Students", "Rules"])
    with tab_layout:
        render_layout_inputs()
    with tab_students:
        render_student_inputs()
    with tab_rules:
        render_rule_inputs()
