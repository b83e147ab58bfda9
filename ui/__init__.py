# ui/__init__.py
from .helpers import ensure_session_keys
from .runner import run_assignment
__all__ = ["ensure_session_keys", "run_assignment"]
