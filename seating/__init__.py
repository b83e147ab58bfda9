# seating/__init__.py
from .models import (
    Assignment, AssignmentEntry, ComplianceReport, Layout, Person, Position, Rule, RuleKind,
)
from .solver import solve
from .validate import verify
from .core import assign_seats, swap_seats, layout_from_df, roster_from_df, rules_from_df, assignment_to_df
from .diagnostics import explain_compliance
from .export import seating_chart_html
__all__ = [
    "Assignment", "AssignmentEntry", "ComplianceReport", "Layout", "Person", "Position", "Rule", "RuleKind",
    "solve", "verify",
    "assign_seats", "swap_seats", "layout_from_df", "roster_from_df", "rules_from_df", "assignment_to_df",
    "explain_compliance", "seating_chart_html",
]
