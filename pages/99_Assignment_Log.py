import streamlit as st
import sys
from pathlib import Path

# Make sure we can import local packages when running from /pages
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ui.helpers import ensure_session_keys

st.set_page_config(page_title="Seating Log", layout="wide")
st.title("🐞 Seating Log")

ensure_session_keys()

meta = st.session_state.get("assign_meta") or {}
report = meta.get("report")
if report is not None:
    c1, c2, c3 = st.columns(3)
    c1.metric("Seed", meta.get("seed", "—"))
    c2.metric("Rules satisfied", len(report.satisfied))
    c3.metric("Rules violated", len(report.violated))

lines = st.session_state.get("log_lines", [])
if not lines:
    st.info("Nothing logged yet. Generate a seating chart on the Home page.")
else:
    show = st.radio(
        "Show",
        ["Everything", "Rule outcomes", "Violations only"],
        horizontal=True,
    )
    if show == "Rule outcomes":
        lines_shown = [m for m in lines if m.startswith(("✅", "⚠️", "ℹ️"))]
    elif show == "Violations only":
        lines_shown = [m for m in lines if m.startswith("⚠️")]
    else:
        lines_shown = lines

    if not lines_shown:
        st.success("No matching lines.")
    else:
        st.code("\n".join(lines_shown[-500:]), language=None)

    st.download_button(
        "📥 Download seating.log",
        "\n".join(lines).encode("utf-8-sig"),
        file_name="seating.log",
        mime="text/plain",
    )
