from __future__ import annotations
from typing import Iterable, List, Optional, Sequence

from .models import Person, Rule, RuleKind

COLORS = [
    "#1ee876",  # green
    "#3b82f6",  # blue
    "#f59e0b",  # amber
    "#ef4444",  # red
    "#8b5cf6",  # purple
    "#ec4899",  # pink
    "#06b6d4",  # cyan
    "#84cc16",  # lime
]

SAMPLE_NAMES = [
    "Emma Wilson", "Liam Johnson", "Olivia Brown", "Noah Davis",
    "Ava Martinez", "William Garcia", "Sophia Rodriguez", "James Miller",
    "Isabella Wilson", "Benjamin Moore", "Mia Taylor", "Lucas Anderson",
]

def color_for(index: int) -> str:
    return COLORS[index % len(COLORS)]

def parse_names(text: str) -> List[str]:
    """Bulk input: one name per line, blanks ignored."""
    return [n.strip() for n in str(text or "").splitlines() if n.strip()]

def _next_id_number(existing: Sequence[Person]) -> int:
    nums = []
    for p in existing:
        tail = str(p.id).rsplit("-", 1)[-1]
        if tail.isdigit():
            nums.append(int(tail))
    return max(nums, default=len(existing)) + 1 if existing else 1

def build_roster(names: Iterable[str], existing: Sequence[Person] = ()) -> List[Person]:
    """
    Append people for `names` after `existing`.
    Ids continue as student-<n>; colours continue round the palette.
    """
    out = list(existing)
    n = _next_id_number(existing)
    for name in names:
        name = str(name).strip()
        if not name:
            continue
        out.append(Person(id=f"student-{n}", name=name, display_color=color_for(len(out))))
        n += 1
    return out

def name_of(person_id: str, roster: Sequence[Person]) -> str:
    for p in roster:
        if p.id == person_id:
            return p.name
    return "Unknown"

def describe_rule(kind: RuleKind, member_ids: Sequence[str], roster: Sequence[Person]) -> str:
    names = " & ".join(name_of(m, roster) for m in member_ids)
    return f"{kind.label}: {names}"

def make_rule(
    kind,
    member_ids: Sequence[str],
    roster: Sequence[Person],
    rule_id: Optional[str] = None,
    description: Optional[str] = None,
) -> Rule:
    """Build a rule the way the rule editor does, enforcing the member count."""
    kind = RuleKind.parse(kind)
    members = list(dict.fromkeys(m for m in member_ids if m))
    if not members:
        raise ValueError(f"{kind.label}: select at least one student.")
    if kind.is_pairwise and len(members) < 2:
        raise ValueError(f"{kind.label}: select at least two students.")
    return Rule(
        id=rule_id or f"rule-{kind.value}-{'-'.join(members)}",
        kind=kind,
        member_ids=tuple(members),
        description=description or describe_rule(kind, members, roster),
    )
