"""
Tests for odds_math.py — format conversion and money rounding.

Run with: pytest tests/test_odds_math.py -v
"""

import numpy as np
import pytest

from edgestake.core.odds_math import (
    OddsConversionError,
    american_to_decimal,
    decimal_to_american,
    decimal_to_indonesian,
    decimal_to_malaysian,
    decimal_to_probability,
    fractional_to_decimal,
    hongkong_to_decimal,
    indonesian_to_decimal,
    malaysian_to_decimal,
    parse_decimal,
    probability_to_decimal,
    round_money,
    to_number,
)


class TestToNumber:

    def test_accepts_numbers_and_numeric_strings(self):
        assert to_number(0.55, "probability") == 0.55
        assert to_number(" 0.55 ", "probability") == 0.55
        assert to_number("+120", "moneyline") == 120.0

    def test_rejects_garbage(self):
        with pytest.raises(OddsConversionError):
            to_number("abc", "decimal")

    def test_rejects_booleans(self):
        with pytest.raises(OddsConversionError):
            to_number(True, "decimal")

    def test_rejects_non_finite(self):
        with pytest.raises(OddsConversionError):
            to_number(float("nan"), "decimal")
        with pytest.raises(OddsConversionError):
            to_number("inf", "decimal")


class TestProbability:

    def test_fair_odds(self):
        assert probability_to_decimal(0.50) == pytest.approx(2.0)
        assert probability_to_decimal("0.25") == pytest.approx(4.0)

    def test_zero_probability_pays_nothing(self):
        assert probability_to_decimal(0) == 0.0
        assert decimal_to_probability(0.0) == 0.0

    def test_out_of_range(self):
        with pytest.raises(OddsConversionError):
            probability_to_decimal(1.2)
        with pytest.raises(OddsConversionError):
            probability_to_decimal(-0.1)


class TestMoneyline:

    def test_positive(self):
        assert american_to_decimal(150) == pytest.approx(2.5)
        assert american_to_decimal("+110") == pytest.approx(2.1)

    def test_negative(self):
        assert american_to_decimal(-110) == pytest.approx(1.909, abs=0.001)
        assert american_to_decimal("-200") == pytest.approx(1.5)

    def test_even_money(self):
        assert american_to_decimal("EVEN") == 2.0
        assert american_to_decimal("ev") == 2.0

    def test_magnitude_below_100_rejected(self):
        with pytest.raises(OddsConversionError):
            american_to_decimal(-50)

    def test_back_to_moneyline(self):
        assert decimal_to_american(2.5) == pytest.approx(150.0)
        assert decimal_to_american(1.5) == pytest.approx(-200.0)

    def test_certain_price_has_no_moneyline(self):
        with pytest.raises(OddsConversionError):
            decimal_to_american(1.0)


class TestFractional:

    def test_ratio(self):
        assert fractional_to_decimal("3/5") == pytest.approx(1.6)
        assert fractional_to_decimal("100/1") == pytest.approx(101.0)

    def test_bare_number_is_over_one(self):
        assert fractional_to_decimal(4) == pytest.approx(5.0)

    def test_evens(self):
        assert fractional_to_decimal("evens") == 2.0

    def test_zero_denominator(self):
        with pytest.raises(OddsConversionError):
            fractional_to_decimal("3/0")

    def test_negative_rejected(self):
        with pytest.raises(OddsConversionError):
            fractional_to_decimal("-3/5")


class TestAsianFormats:

    def test_hong_kong(self):
        assert hongkong_to_decimal(0.8) == pytest.approx(1.8)
        with pytest.raises(OddsConversionError):
            hongkong_to_decimal(-0.5)

    def test_indonesian(self):
        assert indonesian_to_decimal(1.5) == pytest.approx(2.5)
        assert indonesian_to_decimal(-2.0) == pytest.approx(1.5)
        with pytest.raises(OddsConversionError):
            indonesian_to_decimal(0.5)
        assert decimal_to_indonesian(1.5) == pytest.approx(-2.0)
        assert decimal_to_indonesian(2.5) == pytest.approx(1.5)

    def test_malaysian(self):
        assert malaysian_to_decimal(0.5) == pytest.approx(1.5)
        assert malaysian_to_decimal(-0.5) == pytest.approx(3.0)
        with pytest.raises(OddsConversionError):
            malaysian_to_decimal(1.5)
        assert decimal_to_malaysian(3.0) == pytest.approx(-0.5)
        assert decimal_to_malaysian(1.5) == pytest.approx(0.5)


class TestDecimal:

    def test_zero_and_above_one_accepted(self):
        assert parse_decimal(0) == 0.0
        assert parse_decimal("2.25") == 2.25

    def test_between_zero_and_one_rejected(self):
        with pytest.raises(OddsConversionError):
            parse_decimal(0.5)


class TestRoundMoney:

    def test_half_up(self):
        assert round_money(0.125) == 0.13
        assert round_money(2.675) == 2.68

    def test_negative_half_away_from_zero(self):
        assert round_money(-2.345) == -2.35

    def test_ordinary_values(self):
        assert round_money(5.4999) == 5.5
        assert round_money(90.909090909) == 90.91

    def test_numpy_scalars(self):
        assert round_money(np.float64(0.125)) == 0.13
        assert round_money(np.float64(-2.345)) == -2.35
        assert type(round_money(np.float64(5.4999))) is float
