import streamlit as st
import sys
from pathlib import Path

# Make sure we can import local packages when running from /pages
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ui.helpers import ensure_session_keys
from ui.sections import render_chart, render_compliance, render_diagnostics

st.set_page_config(page_title="Seating Chart (full page)", layout="wide")
st.title("🗺️ Seating Chart")

ensure_session_keys()

if st.session_state.get("assigned") is None or st.session_state["assigned"].empty:
    st.info("No seating chart yet. Go to Home, add students, and generate one.")
else:
    render_chart()
    render_compliance()
    render_diagnostics()
