# ui/runner.py
from __future__ import annotations
import streamlit as st
import pandas as pd

from seating.core import assign_seats
from .helpers import assignment_inputs

def _log(msg: str) -> None:
    st.session_state.setdefault("log_lines", []).append(msg)

def run_assignment(seed: int | None = None):
    # 1) read data (edited tables, grid size, pinned seed when "Fix seed" is on)
    inputs = assignment_inputs(st.session_state)
    students = inputs["students_df"]
    if students is None or students.empty:
        raise ValueError("No students to place. Add at least one student first.")
    if seed is not None:
        inputs["seed"] = seed

    _log("—" * 40)
    assigned_df, unplaced_df, meta = assign_seats(log_func=_log, **inputs)

    # 2) guarantee DataFrames
    assigned_df = assigned_df.copy() if isinstance(assigned_df, pd.DataFrame) else pd.DataFrame()
    unplaced_df = unplaced_df.copy() if isinstance(unplaced_df, pd.DataFrame) else pd.DataFrame()

    # 3) STORE in session under stable keys that pages expect
    st.session_state["assigned"]    = assigned_df
    st.session_state["unplaced"]    = unplaced_df
    st.session_state["assign_meta"] = meta or {}
    st.session_state["seed"]        = meta.get("seed", inputs["seed"] or 0)

    return assigned_df, unplaced_df, meta
