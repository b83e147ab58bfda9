# seating/diagnostics.py

from __future__ import annotations
from itertools import combinations
from typing import List, Sequence

import pandas as pd

from .models import Assignment, Person, Rule, RuleKind
from .roster import name_of
from .utils import entry_distance, row_bounds
from .validate import APART_MIN_DISTANCE, TOGETHER_MAX_DISTANCE, check_rule

DIAGNOSTIC_COLUMNS = ["rule", "kind", "members", "placed", "closest", "farthest", "status", "reason"]

def _label(pid: str, roster: Sequence[Person]) -> str:
    return name_of(pid, roster) if roster else pid

def _pair_rows(rule: Rule, assignment: Assignment):
    placed = [(m, assignment.entry_for(m)) for m in rule.member_ids]
    placed = [(m, e) for m, e in placed if e is not None]
    pairs = [
        (entry_distance(ea, eb), ma, mb)
        for (ma, ea), (mb, eb) in combinations(placed, 2)
    ]
    return placed, pairs

def explain_compliance(
    rules: Sequence[Rule],
    assignment: Assignment,
    roster: Sequence[Person] = (),
) -> pd.DataFrame:
    """One row per rule explaining why it is satisfied, violated or not evaluated."""
    results: List[dict] = []
    bounds = row_bounds(e.y for e in assignment.entries)

    for rule in rules or []:
        outcome = check_rule(rule, assignment)
        status = "not evaluated" if outcome is None else ("satisfied" if outcome else "violated")
        row = {
            "rule": rule.description,
            "kind": rule.kind.value,
            "members": ", ".join(_label(m, roster) for m in rule.member_ids),
            "placed": 0,
            "closest": None,
            "farthest": None,
            "status": status,
            "reason": "",
        }

        if rule.kind.is_pairwise:
            placed, pairs = _pair_rows(rule, assignment)
            row["placed"] = len(placed)
            if pairs:
                row["closest"] = min(p[0] for p in pairs)
                row["farthest"] = max(p[0] for p in pairs)
            if len(placed) < 2:
                row["reason"] = "fewer than two members seated; nothing to compare."
            elif rule.kind is RuleKind.KEEP_APART:
                d, a, b = min(pairs)
                if outcome:
                    row["reason"] = f"closest pair is {d} apart (> {APART_MIN_DISTANCE})."
                else:
                    row["reason"] = (f"{_label(a, roster)} and {_label(b, roster)} are {d} apart "
                                     f"(must be > {APART_MIN_DISTANCE}).")
            else:
                d, a, b = max(pairs)
                if outcome:
                    row["reason"] = f"farthest pair is {d} apart (<= {TOGETHER_MAX_DISTANCE})."
                else:
                    row["reason"] = (f"{_label(a, roster)} and {_label(b, roster)} are {d} apart "
                                     f"(must be <= {TOGETHER_MAX_DISTANCE}).")
        else:
            member = rule.first_member
            entry = assignment.entry_for(member) if member else None
            front = rule.kind is RuleKind.FRONT_ROW
            if entry is None:
                row["reason"] = "student is not seated." if member else "rule has no members."
            else:
                row["placed"] = 1
                target = bounds[0] if front else bounds[1]
                where = "front" if front else "back"
                if outcome:
                    row["reason"] = f"seated at {entry.position_id} in the {where} row (y={target})."
                else:
                    row["reason"] = f"seated at {entry.position_id} (y={entry.y}); {where} row is y={target}."

        results.append(row)

    return pd.DataFrame(results, columns=DIAGNOSTIC_COLUMNS)
