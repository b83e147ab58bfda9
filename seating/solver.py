# seating/solver.py

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Set

from .models import Assignment, AssignmentEntry, Layout, Person, Position, Rule, RuleKind
from .utils import manhattan, reading_order, row_bounds

# -----------------------------------------------------------------------------
# Scoring constants (free-placement pass)
# -----------------------------------------------------------------------------
BASE_SCORE = 100
APART_NEAR_DISTANCE = 2     # d <= this is "too close" for keep-apart mates
APART_PENALTY_STEP = 30     # penalty = (3 - d) * step
APART_REWARD_CAP = 10       # reward = min(d, cap) beyond the near distance
TOGETHER_PAIR_DISTANCE = 2  # consecutive desks this close count as a pair

# -----------------------------------------------------------------------------
# Placement state
# -----------------------------------------------------------------------------
@dataclass
class PlacementState:
    """Bindings accumulated across the passes. Once bound, never revisited."""
    order: List[Position]
    roster_ids: Set[str]
    position_to_person: Dict[str, str] = field(default_factory=dict)
    placed: Dict[str, str] = field(default_factory=dict)  # person -> position

    @classmethod
    def start(cls, layout: Layout, roster: Sequence[Person]) -> "PlacementState":
        return cls(order=reading_order(layout.positions), roster_ids={p.id for p in roster})

    def is_free(self, position: Position) -> bool:
        return position.id not in self.position_to_person

    def is_placed(self, person_id: str) -> bool:
        return person_id in self.placed

    def can_place(self, person_id: Optional[str]) -> bool:
        return bool(person_id) and person_id in self.roster_ids and not self.is_placed(person_id)

    def bind(self, position: Position, person_id: str) -> None:
        self.position_to_person[position.id] = person_id
        self.placed[person_id] = position.id

    def free_positions(self) -> List[Position]:
        return [p for p in self.order if self.is_free(p)]

    def position_of(self, person_id: str) -> Optional[Position]:
        pid = self.placed.get(person_id)
        if pid is None:
            return None
        for p in self.order:
            if p.id == pid:
                return p
        return None

# -----------------------------------------------------------------------------
# Pass 1: front / back row affinity
# -----------------------------------------------------------------------------
def place_row_rules(state: PlacementState, rules: Sequence[Rule], log: Callable[[str], None]) -> None:
    bounds = row_bounds(p.y for p in state.order)
    if bounds is None:
        return
    min_y, max_y = bounds
    front = [p for p in state.order if p.y == min_y]
    back = [p for p in state.order if p.y == max_y]

    for rule in rules:
        if rule.kind is RuleKind.FRONT_ROW:
            row, where = front, "front"
        elif rule.kind is RuleKind.BACK_ROW:
            row, where = back, "back"
        else:
            continue
        member = rule.first_member
        if member is None:
            continue
        if member not in state.roster_ids:
            log(f"[rows] {rule.description or rule.id}: '{member}' is not on the roster, skipped.")
            continue
        if state.is_placed(member):
            continue
        desk = next((p for p in row if state.is_free(p)), None)
        if desk is None:
            log(f"[rows] {rule.description or rule.id}: no free {where}-row desk, deferred.")
            continue
        state.bind(desk, member)
        log(f"[rows] {member} -> {desk.id} ({where} row)")

# -----------------------------------------------------------------------------
# Pass 2: keep-together pairs
# -----------------------------------------------------------------------------
def place_together_rules(state: PlacementState, rules: Sequence[Rule], log: Callable[[str], None]) -> None:
    for rule in rules:
        if rule.kind is not RuleKind.KEEP_TOGETHER:
            continue
        waiting = [m for m in rule.member_ids if state.can_place(m)]
        if len(waiting) < 2:
            continue

        bound = False
        for d1, d2 in zip(state.order, state.order[1:]):
            if not (state.is_free(d1) and state.is_free(d2)):
                continue
            if manhattan(d1.x, d1.y, d2.x, d2.y) <= TOGETHER_PAIR_DISTANCE:
                state.bind(d1, waiting[0])
                state.bind(d2, waiting[1])
                log(f"[together] {waiting[0]} -> {d1.id}, {waiting[1]} -> {d2.id}")
                bound = True
                break
        if not bound:
            log(f"[together] {rule.description or rule.id}: no free adjacent pair.")

# -----------------------------------------------------------------------------
# Pass 3: separation-aware free placement
# -----------------------------------------------------------------------------
def score_position(
    state: PlacementState,
    position: Position,
    person_id: str,
    apart_rules: Sequence[Rule],
) -> int:
    """Higher is better. Starts at BASE_SCORE; placed keep-apart mates pull it down when close."""
    score = BASE_SCORE
    for rule in apart_rules:
        if person_id not in rule.member_ids:
            continue
        for other_id in rule.member_ids:
            if other_id == person_id:
                continue
            other = state.position_of(other_id)
            if other is None:
                continue
            d = manhattan(position.x, position.y, other.x, other.y)
            if d <= APART_NEAR_DISTANCE:
                score -= (APART_NEAR_DISTANCE + 1 - d) * APART_PENALTY_STEP
            else:
                score += min(d, APART_REWARD_CAP)
    return score


def place_remaining(
    state: PlacementState,
    roster: Sequence[Person],
    rules: Sequence[Rule],
    rng: random.Random,
    log: Callable[[str], None],
) -> List[str]:
    """Returns the ids left unplaced (no free desk remained)."""
    apart_rules = [r for r in rules if r.kind is RuleKind.KEEP_APART]
    queue = [p.id for p in roster]
    rng.shuffle(queue)

    unplaced: List[str] = []
    for person_id in queue:
        if state.is_placed(person_id):
            continue
        best: Optional[Position] = None
        best_score: Optional[int] = None
        for desk in state.order:
            if not state.is_free(desk):
                continue
            sc = score_position(state, desk, person_id, apart_rules)
            if best_score is None or sc > best_score:
                best, best_score = desk, sc
        if best is None:
            unplaced.append(person_id)
            continue
        state.bind(best, person_id)
        log(f"[free] {person_id} -> {best.id} (score={best_score})")
    return unplaced

# -----------------------------------------------------------------------------
# Pass 4: materialization
# -----------------------------------------------------------------------------
def materialize(state: PlacementState) -> Assignment:
    return Assignment(
        AssignmentEntry(
            position_id=p.id,
            person_id=state.position_to_person.get(p.id),
            x=p.x,
            y=p.y,
        )
        for p in state.order
    )

# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def solve(
    layout: Layout,
    roster: Sequence[Person],
    rules: Sequence[Rule],
    rng: Optional[random.Random] = None,
    *,
    log_func: Optional[Callable[[str], None]] = None,
) -> Assignment:
    """
    Greedy, non-backtracking seat assignment.
      1) front/back row rules
      2) keep-together pairs on consecutive reading-order desks
      3) everyone else, shuffled, at the best-scoring free desk (keep-apart aware)
      4) one entry per desk
    Never raises for unsatisfiable rules or a shortage of desks.
    """
    log = (lambda m: None) if log_func is None else log_func
    rng = random.Random() if rng is None else rng
    rules = list(rules or [])
    roster = list(roster or [])

    state = PlacementState.start(layout, roster)
    log(f"Solving: {len(roster)} people, {len(state.order)} desks, {len(rules)} rules")

    if state.order and roster:
        place_row_rules(state, rules, log)
        place_together_rules(state, rules, log)
        unplaced = place_remaining(state, roster, rules, rng, log)
        if unplaced:
            log(f"{len(unplaced)} people left unplaced: not enough desks.")
    elif roster:
        log(f"No desks in layout; {len(roster)} people left unplaced.")

    assignment = materialize(state)
    log(f"Placed {assignment.filled_count}/{len(roster)}; {len(assignment) - assignment.filled_count} desks empty")
    return assignment
