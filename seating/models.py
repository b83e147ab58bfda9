# seating/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

DEFAULT_GRID_ROWS = 8
DEFAULT_GRID_COLS = 12

# -----------------------------------------------------------------------------
# Rule kinds
# -----------------------------------------------------------------------------
class RuleKind(str, Enum):
    KEEP_APART = "keep-apart"
    KEEP_TOGETHER = "keep-together"
    FRONT_ROW = "front-row"
    BACK_ROW = "back-row"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]

    @property
    def is_pairwise(self) -> bool:
        """Pairwise kinds need at least two members; row kinds use one."""
        return self in (RuleKind.KEEP_APART, RuleKind.KEEP_TOGETHER)

    @classmethod
    def parse(cls, value) -> "RuleKind":
        """Accept 'keep-apart', 'KEEP_APART' or 'Keep Apart' style spellings."""
        if isinstance(value, cls):
            return value
        s = str(value or "").strip().lower().replace("_", "-").replace(" ", "-")
        for kind in cls:
            if s == kind.value:
                return kind
        raise ValueError(f"Unknown rule kind: {value!r}")


_KIND_LABELS = {
    RuleKind.KEEP_APART: "Keep Apart",
    RuleKind.KEEP_TOGETHER: "Keep Together",
    RuleKind.FRONT_ROW: "Front Row",
    RuleKind.BACK_ROW: "Back Row",
}

# -----------------------------------------------------------------------------
# Inputs
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Position:
    """A desk on the integer grid. x/y are cells, not pixels; rotation is cosmetic (degrees)."""
    id: str
    x: int
    y: int
    rotation: int = 0


@dataclass(frozen=True)
class Layout:
    positions: Tuple[Position, ...] = ()
    grid_rows: int = DEFAULT_GRID_ROWS
    grid_cols: int = DEFAULT_GRID_COLS

    def __post_init__(self):
        object.__setattr__(self, "positions", tuple(self.positions))

    def __len__(self) -> int:
        return len(self.positions)

    def get(self, position_id: str) -> Optional[Position]:
        for p in self.positions:
            if p.id == position_id:
                return p
        return None


@dataclass(frozen=True)
class Person:
    id: str
    name: str
    display_color: str = "#888888"


@dataclass(frozen=True)
class Rule:
    id: str
    kind: RuleKind
    member_ids: Tuple[str, ...]
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "kind", RuleKind.parse(self.kind))
        # ordered set: keep first occurrence of each id
        object.__setattr__(self, "member_ids", tuple(dict.fromkeys(self.member_ids)))

    @property
    def first_member(self) -> Optional[str]:
        return self.member_ids[0] if self.member_ids else None


# -----------------------------------------------------------------------------
# Outputs
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class AssignmentEntry:
    position_id: str
    person_id: Optional[str]
    x: int
    y: int

    @property
    def is_filled(self) -> bool:
        return self.person_id is not None


@dataclass(frozen=True)
class Assignment:
    """One entry per layout position, in reading order."""
    entries: Tuple[AssignmentEntry, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def person_at(self, position_id: str) -> Optional[str]:
        for e in self.entries:
            if e.position_id == position_id:
                return e.person_id
        return None

    def entry_for(self, person_id: str) -> Optional[AssignmentEntry]:
        for e in self.entries:
            if e.person_id is not None and e.person_id == person_id:
                return e
        return None

    def placed_ids(self) -> List[str]:
        return [e.person_id for e in self.entries if e.person_id is not None]

    @property
    def filled_count(self) -> int:
        return sum(1 for e in self.entries if e.is_filled)

    def to_records(self) -> List[Dict]:
        return [
            {"position_id": e.position_id, "person_id": e.person_id, "x": e.x, "y": e.y}
            for e in self.entries
        ]


@dataclass
class ComplianceReport:
    satisfied: List[str] = field(default_factory=list)
    violated: List[str] = field(default_factory=list)

    @property
    def all_satisfied(self) -> bool:
        return not self.violated

    @property
    def total(self) -> int:
        return len(self.satisfied) + len(self.violated)

    def to_dict(self) -> Dict[str, List[str]]:
        return {"satisfied": list(self.satisfied), "violated": list(self.violated)}
