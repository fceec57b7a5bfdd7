"""
Tests for kelly.py — single-bet Kelly, reserve rate and optimal-set selection.

Run with: pytest tests/test_kelly.py -v
"""

import math

import pytest

from edgestake.core.kelly import (
    EMPTY_RESERVE_RATE,
    independent_fractions,
    kelly_fraction,
    optimal_fractions,
    rank_by_expectation,
    reserve_rate,
    reserve_rate_fraction,
    resize_fractions,
    select_optimal_set,
)
from edgestake.core.price import PricedEdge


def _edge(label, prob, decimal_odds, index=0):
    return PricedEdge(index=index, label=label, probability=prob, decimal_odds=decimal_odds)


@pytest.fixture
def horses():
    """One race: chalk 3/5, stalk 7/2, dark 30/1, glue 100/1."""
    return [
        _edge("chalk", 0.75, 1.6, 0),
        _edge("stalk", 0.20, 4.5, 1),
        _edge("dark", 0.04, 31.0, 2),
        _edge("glue", 0.01, 101.0, 3),
    ]


class TestKellyFraction:

    def test_decent_edge(self):
        # 0.55 at -110
        assert kelly_fraction(0.55, 1 + 100 / 110) == pytest.approx(0.055)

    def test_no_edge_is_negative(self):
        assert kelly_fraction(0.50, 1 + 100 / 110) < 0

    def test_no_payout(self):
        assert kelly_fraction(1.0, 0.0) == 0.0
        assert kelly_fraction(1.0, 1.0) == 0.0


class TestReserveRate:

    def test_empty_set(self):
        assert reserve_rate([]) == EMPTY_RESERVE_RATE == 1.0

    def test_partial_set(self, horses):
        chalk, _, dark, _ = horses
        expected = (1 - 0.79) / (1 - 1 / 1.6 - 1 / 31.0)
        assert reserve_rate([dark, chalk]) == pytest.approx(expected)

    def test_full_race_is_zero(self, horses):
        assert reserve_rate(horses) == pytest.approx(0.0, abs=1e-12)

    def test_non_positive_denominator(self):
        assert reserve_rate([_edge("a", 0.6, 1.5), _edge("b", 0.6, 1.5)]) == math.inf

    def test_fraction_with_no_payout(self):
        assert reserve_rate_fraction(0.5, 0.3, 0.0) == 0.0


class TestSelection:

    def test_rank_is_descending_by_expectation(self, horses):
        ranked = rank_by_expectation(horses)
        assert [e.label for e in ranked] == ["dark", "chalk", "glue", "stalk"]

    def test_rank_is_stable_for_ties(self):
        tied = [_edge("first", 0.5, 2.2, 0), _edge("second", 0.5, 2.2, 1)]
        assert [e.label for e in rank_by_expectation(tied)] == ["first", "second"]

    def test_negative_ev_edge_joins_the_set(self, horses):
        chosen = select_optimal_set(rank_by_expectation(horses))
        assert [e.label for e in chosen] == ["dark", "chalk", "glue", "stalk"]

    def test_cutoff_is_hard(self):
        # b fails the reserve rate of {a} (0.8), so c is never examined even
        # though its expectation of 1.0 would beat it.
        ranked = [
            _edge("a", 0.60, 2.0, 0),
            _edge("b", 0.10, 1.05, 1),
            _edge("c", 0.25, 4.0, 2),
        ]
        chosen = select_optimal_set(ranked)
        assert [e.label for e in chosen] == ["a"]

    def test_nothing_positive(self):
        assert select_optimal_set([_edge("x", 0.5, 1.9)]) == []

    def test_selection_is_a_prefix(self, horses):
        ranked = rank_by_expectation(horses[:1] + horses[2:])
        chosen = select_optimal_set(ranked)
        assert chosen == ranked[: len(chosen)]


class TestFractions:

    def test_single_member_uses_classical_formula(self):
        edge = _edge("solo", 0.55, 1 + 100 / 110)
        [(chosen, fraction)] = optimal_fractions([edge])
        assert chosen is edge
        assert fraction == pytest.approx(0.055)

    def test_full_race_fractions_equal_probabilities(self, horses):
        fractions = dict((e.label, f) for e, f in optimal_fractions(rank_by_expectation(horses)))
        assert fractions["chalk"] == pytest.approx(0.75)
        assert fractions["stalk"] == pytest.approx(0.20)
        assert fractions["dark"] == pytest.approx(0.04)
        assert fractions["glue"] == pytest.approx(0.01)

    def test_independent_sizes_each_edge_alone(self):
        edges = [_edge("1", 0.47, 2.50, 0), _edge("13", 0.204, 3.30, 1)]
        fractions = [f for _, f in independent_fractions(edges)]
        assert fractions[0] == pytest.approx(0.11667, abs=1e-5)
        assert fractions[1] < 0


class TestResizeFractions:

    def test_drops_non_positive(self):
        assert resize_fractions([("a", 0.3), ("b", -0.1), ("c", 0.0), ("d", 0.2)]) == [
            ("a", 0.3), ("d", 0.2),
        ]

    def test_rescales_over_commitment(self):
        resized = resize_fractions([("a", 0.9), ("b", 0.6)])
        assert [label for label, _ in resized] == ["a", "b"]
        assert resized[0][1] == pytest.approx(0.6)
        assert resized[1][1] == pytest.approx(0.4)
        assert sum(f for _, f in resized) == pytest.approx(1.0)

    def test_leaves_under_commitment_alone(self):
        assert resize_fractions([("a", 0.3), ("b", 0.2)]) == [("a", 0.3), ("b", 0.2)]

    def test_empty(self):
        assert resize_fractions([]) == []
