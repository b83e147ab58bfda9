"""Small hand-built layouts and rosters shared by the tests."""

from __future__ import annotations

from seating.models import Assignment, AssignmentEntry, Layout, Person, Position, Rule, RuleKind


def people(*names: str) -> list[Person]:
    return [Person(id=n, name=n) for n in names]


def row_layout(n: int, y: int = 0) -> Layout:
    """n desks side by side: (0,y) .. (n-1,y)."""
    return Layout([Position(id=f"p{x}", x=x, y=y) for x in range(n)])


def square_layout() -> Layout:
    """2x2 grid: a(0,0) b(1,0) c(0,1) d(1,1)."""
    return Layout([
        Position("a", 0, 0),
        Position("b", 1, 0),
        Position("c", 0, 1),
        Position("d", 1, 1),
    ])


def rule(kind: RuleKind, *members: str, desc: str | None = None) -> Rule:
    return Rule(
        id=f"{kind.value}:{'-'.join(members)}",
        kind=kind,
        member_ids=tuple(members),
        description=desc or f"{kind.label}: {' & '.join(members)}",
    )


def seated(*cells) -> Assignment:
    """seated(("A", 0, 0), (None, 1, 0)) -> Assignment with ids p0, p1, ..."""
    return Assignment(
        AssignmentEntry(position_id=f"p{i}", person_id=pid, x=x, y=y)
        for i, (pid, x, y) in enumerate(cells)
    )
