from __future__ import annotations
import streamlit as st
import pandas as pd
from datetime import datetime as dt

from .helpers import chart_grid_df, effective, highlight_status
from .runner import run_assignment
from seating import assignment_to_df, explain_compliance, seating_chart_html, swap_seats, verify


def _meta() -> dict:
    return st.session_state.get("assign_meta") or {}

def _replace_assignment(assignment) -> None:
    """Store a manually edited assignment and refresh the derived report/table."""
    meta = dict(_meta())
    meta["assignment"] = assignment
    meta["report"] = verify(meta.get("rules", []), assignment)
    st.session_state["assign_meta"] = meta
    st.session_state["assigned"] = assignment_to_df(assignment, meta.get("roster", []))


# ---------- Generate button ---------------------------------------------------
def render_generate_button():
    students = effective(st.session_state, "students")
    rules = effective(st.session_state, "rules")
    desks = effective(st.session_state, "desks")
    st.markdown("---")
    c1, c2, c3 = st.columns([2, 1, 1])
    with c1:
        st.caption(
            f"{len(students)} students, {len(rules)} rules, {len(desks)} desks"
        )
    with c2:
        fixed = st.toggle("Fix seed", key="fixed_seed", help="Reuse the same seed to reproduce a chart.")
        if fixed:
            st.session_state["seed"] = int(
                st.number_input("Seed", min_value=0, step=1, value=int(st.session_state.get("seed", 0)))
            )
    with c3:
        label = "🔁 Regenerate" if not st.session_state["assigned"].empty else "✨ Generate Seating Chart"
        if st.button(label, disabled=students.empty, type="primary"):
            try:
                run_assignment()
            except ValueError as e:
                st.error(f"❌ {e}")


# ---------- Chart -------------------------------------------------------------
def render_chart():
    meta = _meta()
    assignment = meta.get("assignment")
    if assignment is None or st.session_state["assigned"].empty:
        return

    st.markdown("## 🗺️ Seating Chart")
    st.caption(f"Seed {meta.get('seed')} · front of classroom is the top row")
    grid = chart_grid_df(assignment, meta.get("roster", []))
    st.dataframe(grid, use_container_width=True)

    if not st.session_state["unplaced"].empty:
        st.warning(f"⚠️ {len(st.session_state['unplaced'])} student(s) have no desk: not enough desks.")
        st.dataframe(st.session_state["unplaced"], use_container_width=True, hide_index=True)

    c1, c2 = st.columns(2)
    with c1:
        html_str = seating_chart_html(assignment, meta.get("roster", []), meta.get("layout"))
        st.download_button(
            "📥 Download printable HTML",
            data=html_str.encode("utf-8"),
            file_name=f"seating_chart_{dt.now().strftime('%Y-%m-%d')}.html",
            mime="text/html",
        )
    with c2:
        csv = st.session_state["assigned"].to_csv(index=False).encode("utf-8-sig")
        st.download_button("📥 Download Assignment CSV", csv, "seating_assignment.csv", "text/csv")


# ---------- Compliance --------------------------------------------------------
def render_compliance():
    report = _meta().get("report")
    if report is None or report.total == 0:
        return
    st.markdown("---")
    st.markdown("## 🛡️ Rule Compliance")
    col1, col2 = st.columns(2)
    with col1:
        st.subheader(f"✅ Satisfied ({len(report.satisfied)})")
        for desc in report.satisfied:
            st.write(f"• {desc}")
    with col2:
        st.subheader(f"⚠️ Violated ({len(report.violated)})")
        if not report.violated:
            st.success("All rules satisfied.")
        for desc in report.violated:
            st.write(f"• {desc}")


# ---------- Diagnostics -------------------------------------------------------
def render_diagnostics():
    meta = _meta()
    if meta.get("assignment") is None or not meta.get("rules"):
        return
    st.markdown("---")
    with st.expander("🔎 Rule diagnostics", expanded=False):
        diag = explain_compliance(meta["rules"], meta["assignment"], meta.get("roster", []))
        st.write(diag.style.apply(highlight_status, axis=1))
        st.download_button(
            "📥 Download rule report",
            diag.to_csv(index=False).encode("utf-8-sig"),
            file_name="rule_compliance_report.csv",
            mime="text/csv",
        )


# ---------- Manual override ---------------------------------------------------
def render_manual_override():
    meta = _meta()
    assignment = meta.get("assignment")
    if assignment is None or not assignment.entries:
        return

    st.markdown("---")
    with st.expander("🛠️ Swap two desks (with re-check)", expanded=False):
        names = {p.id: p.name for p in meta.get("roster", [])}
        labels = {
            e.position_id: f"{e.position_id} ({e.x},{e.y}) — {names.get(e.person_id, 'empty') if e.person_id else 'empty'}"
            for e in assignment.entries
        }
        desk_ids = list(labels)
        c1, c2 = st.columns(2)
        with c1:
            a = st.selectbox("Desk A", desk_ids, format_func=labels.get, key="swap_a")
        with c2:
            b = st.selectbox("Desk B", desk_ids, format_func=labels.get, key="swap_b", index=min(1, len(desk_ids) - 1))

        if st.button("Apply swap"):
            before = meta.get("report")
            _replace_assignment(swap_seats(assignment, a, b))
            after = st.session_state["assign_meta"]["report"]
            st.session_state["log_lines"].append(f"[manual] swapped {a} <-> {b}")
            if before is not None and len(after.violated) > len(before.violated):
                st.warning(f"Swap applied, but violations rose from {len(before.violated)} to {len(after.violated)}.")
            else:
                st.success(f"✅ Swap applied. {len(after.violated)} rule(s) violated.")
            for desc in after.violated:
                st.write(f"• {desc}")


# ---------- Logs --------------------------------------------------------------
def render_logs():
    if not st.session_state.get("log_lines"):
        return
    st.markdown("---")
    st.markdown("### 🐞 Assignment Log")

    n = st.slider("Show last N lines", min_value=20, max_value=1000, value=200, step=20)
    tail = st.session_state["log_lines"][-n:]
    st.text_area("Log (compact)", value="\n".join(tail), height=200, label_visibility="collapsed")

    log_bytes = "\n".join(st.session_state["log_lines"]).encode("utf-8-sig")
    st.download_button("📥 Download Log", log_bytes, file_name="seating.log", mime="text/plain")
