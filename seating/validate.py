from __future__ import annotations
from itertools import combinations
from typing import Callable, Dict, List, Optional, Sequence

from .models import Assignment, AssignmentEntry, ComplianceReport, Rule, RuleKind
from .utils import entry_distance, row_bounds

APART_MIN_DISTANCE = 2    # pairs at d <= 2 violate keep-apart
TOGETHER_MAX_DISTANCE = 3  # pairs at d > 3 violate keep-together

def _placed_entries(rule: Rule, assignment: Assignment) -> List[AssignmentEntry]:
    out = []
    for pid in rule.member_ids:
        e = assignment.entry_for(pid)
        if e is not None:
            out.append(e)
    return out

def _check_apart(rule: Rule, assignment: Assignment) -> Optional[bool]:
    for a, b in combinations(_placed_entries(rule, assignment), 2):
        if entry_distance(a, b) <= APART_MIN_DISTANCE:
            return False
    return True

def _check_together(rule: Rule, assignment: Assignment) -> Optional[bool]:
    for a, b in combinations(_placed_entries(rule, assignment), 2):
        if entry_distance(a, b) > TOGETHER_MAX_DISTANCE:
            return False
    return True

def _check_row(rule: Rule, assignment: Assignment, front: bool) -> Optional[bool]:
    member = rule.first_member
    entry = assignment.entry_for(member) if member else None
    if entry is None:
        return None  # not placed: neither satisfied nor violated
    min_y, max_y = row_bounds(e.y for e in assignment.entries)
    return entry.y == (min_y if front else max_y)

_CHECKS: Dict[RuleKind, Callable[[Rule, Assignment], Optional[bool]]] = {
    RuleKind.KEEP_APART: _check_apart,
    RuleKind.KEEP_TOGETHER: _check_together,
    RuleKind.FRONT_ROW: lambda r, a: _check_row(r, a, front=True),
    RuleKind.BACK_ROW: lambda r, a: _check_row(r, a, front=False),
}

def check_rule(rule: Rule, assignment: Assignment) -> Optional[bool]:
    """True = satisfied, False = violated, None = not evaluated."""
    return _CHECKS[rule.kind](rule, assignment)

def verify(rules: Sequence[Rule], assignment: Assignment) -> ComplianceReport:
    """
    Partition rules into satisfied / violated descriptions, in input order.
    Row rules whose member is unplaced appear in neither list.
    """
    report = ComplianceReport()
    for rule in rules or []:
        outcome = check_rule(rule, assignment)
        if outcome is None:
            continue
        (report.satisfied if outcome else report.violated).append(rule.description)
    return report
