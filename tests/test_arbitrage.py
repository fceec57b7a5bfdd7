"""
Tests for arbitrage.py

Run with: pytest tests/test_arbitrage.py -v
"""

import pytest

from edgestake.core.config import StakingOptions
from edgestake.core.errors import NoArbitrage
from edgestake.core.price import Edge, Price
from edgestake.services.arbitrage import arb, arb_exists, implied_probability_sum


def _pairs(plan):
    return [(t.label, t.amount) for t in plan.sizes]


class TestNoArbitrage:

    def test_single_outcome(self):
        with pytest.raises(NoArbitrage, match="No arbitrage exists for these events."):
            arb([Edge("lions", Price.prob(0.85), Price.us("-110"))])

    def test_standard_prices(self):
        edges = [
            Edge("lions", Price.prob(0.85), Price.us("-110")),
            Edge("bears", Price.prob(0.15), Price.us("-110")),
        ]
        assert not arb_exists(edges)
        with pytest.raises(NoArbitrage):
            arb(edges)

    def test_independent_events(self):
        edges = [
            Edge("lions", Price.prob(0.85), Price.us("-107")),
            Edge("bears", Price.prob(0.15), Price.us("+110")),
        ]
        with pytest.raises(NoArbitrage):
            arb(edges, StakingOptions(independent=True))

    def test_book_of_exactly_one(self):
        edges = [
            Edge("heads", Price.prob(0.5), Price.eu(2.0)),
            Edge("tails", Price.prob(0.5), Price.eu(2.0)),
        ]
        assert implied_probability_sum(edges) == pytest.approx(1.0)
        with pytest.raises(NoArbitrage):
            arb(edges)


class TestArbitrage:

    def test_small_profit_on_small_arbitrage(self):
        edges = [
            Edge("lions", Price.prob(0.85), Price.us("-107")),
            Edge("bears", Price.prob(0.15), Price.us("+110")),
        ]
        plan = arb(edges)

        assert _pairs(plan) == [("lions", 51.69), ("bears", 47.62)]
        assert plan.profit == 0.69

    def test_three_way(self):
        edges = [
            Edge("nadal", Price.prob(0.50), Price.us("-161")),
            Edge("murray", Price.prob(0.25), Price.us("+350")),
            Edge("becker", Price.prob(0.01), Price.us("+632")),
        ]
        plan = arb(edges)

        assert _pairs(plan) == [("nadal", 61.69), ("murray", 22.22), ("becker", 13.66)]
        assert plan.profit == 2.43

    def test_fair_prices_are_ignored(self):
        edges = [
            Edge("lions", Price.prob(0.01), Price.us("-107")),
            Edge("bears", Price.prob(0.01), Price.us("+110")),
        ]
        assert _pairs(arb(edges)) == [("lions", 51.69), ("bears", 47.62)]

    def test_every_outcome_pays_about_the_same(self):
        edges = [
            Edge("nadal", Price.prob(0.50), Price.us("-161")),
            Edge("murray", Price.prob(0.25), Price.us("+350")),
            Edge("becker", Price.prob(0.01), Price.us("+632")),
        ]
        plan = arb(edges, StakingOptions(bankroll=1_000))
        payouts = [
            stake.amount * odds
            for stake, odds in zip(plan.sizes, (1 + 100 / 161, 4.5, 7.32))
        ]
        assert max(payouts) - min(payouts) < 0.05
        assert plan.total_staked < 1_000

    def test_full_outlay_stakes_whole_bankroll(self):
        edges = [
            Edge("lions", Price.prob(0.85), Price.us("-107")),
            Edge("bears", Price.prob(0.15), Price.us("+110")),
        ]
        plan = arb(edges, full_outlay=True)

        assert plan.total_staked == pytest.approx(100.0, abs=0.02)
        assert plan.profit == pytest.approx(0.69, abs=0.02)

    def test_two_way_at_larger_bankroll(self):
        edges = [
            Edge("lions", Price.prob(0.85), Price.us("-107")),
            Edge("bears", Price.prob(0.15), Price.us("+110")),
        ]
        plan = arb(edges, StakingOptions(bankroll=1_000))

        assert _pairs(plan) == [("lions", 516.91), ("bears", 476.19)]
        assert plan.total_staked < 1_000
        assert plan.profit > 0
        lions_pays = plan.sizes[0].amount * (1 + 100 / 107)
        bears_pays = plan.sizes[1].amount * 2.1
        assert lions_pays == pytest.approx(bears_pays, abs=0.02)

    def test_repeat_calls_agree(self):
        edges = [
            Edge("nadal", Price.prob(0.50), Price.us("-161")),
            Edge("murray", Price.prob(0.25), Price.us("+350")),
            Edge("becker", Price.prob(0.01), Price.us("+632")),
        ]
        assert arb(edges) == arb(edges)
