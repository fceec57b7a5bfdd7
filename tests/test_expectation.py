"""
Tests for expectation.py

Run with: pytest tests/test_expectation.py -v
"""

import pytest

from edgestake.core.config import StakingOptions
from edgestake.core.odds_math import OddsConversionError
from edgestake.core.price import Edge, Price
from edgestake.services.expectation import ev, expectation

NEG_EV = Edge("no edge", Price.prob("0.50"), Price.us(-110))
POS_EV = Edge("small edge", Price.prob("0.55"), Price.us(-110))


class TestExpectation:

    def test_difference_from_bankroll_is_expected_win(self):
        result = ev([NEG_EV, POS_EV])

        assert [t.label for t in result] == ["no edge", "small edge"]
        assert result[0].amount == pytest.approx(95.45454545454545)
        assert result[1].amount == pytest.approx(105.00)

    def test_not_rounded(self):
        assert ev([NEG_EV])[0].amount != round(ev([NEG_EV])[0].amount, 2)

    def test_bankroll_is_the_multiplier(self):
        [result] = ev([POS_EV], StakingOptions(bankroll=1_000))
        assert result.amount == pytest.approx(1050.0)

    def test_single_edge_helper(self):
        assert expectation(POS_EV) == pytest.approx(1.05)

    def test_empty(self):
        assert ev([]) == []

    def test_conversion_errors_propagate(self):
        with pytest.raises(OddsConversionError):
            ev([Edge("bad", Price.prob(1.5), Price.us(-110))])

    def test_repeat_calls_agree(self):
        assert ev([NEG_EV, POS_EV]) == ev([NEG_EV, POS_EV])
