import streamlit as st

# --- Ensure local packages (ui/, seating/) are importable ---------------------
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# -----------------------------------------------------------------------------

from ui.helpers import ensure_session_keys
from ui.upload import render_uploads
from ui.sections import (
    render_generate_button,
    render_chart,
    render_compliance,
    render_diagnostics,
    render_manual_override,
    render_logs,
)

st.set_page_config(
    page_title="Seating Chart",
    layout="wide",
    initial_sidebar_state="collapsed",
)

st.title("🪑 Seating Chart Generator")
st.caption("Design your classroom layout, add students and rules, then generate a seating chart.")

# init session keys
ensure_session_keys()

# Layout / students / rules editors
render_uploads()

# Generate / regenerate
render_generate_button()

# Sections
render_chart()
render_compliance()
render_diagnostics()
render_manual_override()
render_logs()
