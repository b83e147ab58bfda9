from __future__ import annotations

import pytest

from seating.models import Assignment, RuleKind
from seating.validate import check_rule, verify
from tests.fixtures import rule, seated


@pytest.mark.parametrize("x, ok", [(0, False), (1, False), (2, False), (3, True), (7, True)])
def test_keep_apart_threshold(x, ok):
    a = seated(("A", 0, 0), ("B", x, 0))
    assert check_rule(rule(RuleKind.KEEP_APART, "A", "B"), a) is ok


@pytest.mark.parametrize("x, ok", [(1, True), (2, True), (3, True), (4, False)])
def test_keep_together_threshold(x, ok):
    a = seated(("A", 0, 0), ("B", x, 0))
    assert check_rule(rule(RuleKind.KEEP_TOGETHER, "A", "B"), a) is ok


def test_pairwise_checks_every_pair_of_placed_members():
    a = seated(("A", 0, 0), ("B", 5, 0), ("C", 6, 0))
    assert check_rule(rule(RuleKind.KEEP_APART, "A", "B", "C"), a) is False
    assert check_rule(rule(RuleKind.KEEP_TOGETHER, "B", "C", "A"), a) is False
    assert check_rule(rule(RuleKind.KEEP_TOGETHER, "B", "C"), a) is True


def test_pairwise_ignores_unplaced_members():
    a = seated(("A", 0, 0), (None, 1, 0))
    assert check_rule(rule(RuleKind.KEEP_APART, "A", "ghost"), a) is True
    assert check_rule(rule(RuleKind.KEEP_TOGETHER, "ghost", "other"), a) is True


def test_row_rules_use_assignment_extent():
    a = seated(("A", 0, 1), ("B", 0, 4), (None, 3, 2))
    assert check_rule(rule(RuleKind.FRONT_ROW, "A"), a) is True
    assert check_rule(rule(RuleKind.BACK_ROW, "B"), a) is True
    assert check_rule(rule(RuleKind.BACK_ROW, "A"), a) is False


def test_row_rules_only_look_at_first_member():
    a = seated(("A", 0, 1), ("B", 0, 4))
    assert check_rule(rule(RuleKind.BACK_ROW, "A", "B"), a) is False


def test_single_row_satisfies_front_and_back():
    a = seated(("A", 0, 0), ("B", 1, 0))
    assert check_rule(rule(RuleKind.FRONT_ROW, "A"), a) is True
    assert check_rule(rule(RuleKind.BACK_ROW, "B"), a) is True


def test_row_rule_with_unplaced_member_is_not_evaluated():
    a = seated(("A", 0, 0))
    assert check_rule(rule(RuleKind.FRONT_ROW, "ghost"), a) is None
    assert check_rule(rule(RuleKind.FRONT_ROW), a) is None


def test_verify_partitions_descriptions_in_input_order():
    a = seated(("A", 0, 0), ("B", 1, 0), ("C", 5, 2))
    rules = [
        rule(RuleKind.KEEP_APART, "A", "B", desc="apart AB"),
        rule(RuleKind.KEEP_TOGETHER, "A", "B", desc="together AB"),
        rule(RuleKind.FRONT_ROW, "ghost", desc="front ghost"),
        rule(RuleKind.BACK_ROW, "C", desc="back C"),
        rule(RuleKind.KEEP_APART, "A", "C", desc="apart AC"),
    ]
    report = verify(rules, a)
    assert report.satisfied == ["together AB", "back C", "apart AC"]
    assert report.violated == ["apart AB"]
    assert not report.all_satisfied
    assert report.total == 4


def test_verify_empty():
    report = verify([], Assignment())
    assert report.satisfied == [] and report.violated == []
    assert report.all_satisfied
