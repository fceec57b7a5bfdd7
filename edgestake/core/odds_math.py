"""Fundamental odds mathematics — the single source of truth.

Every function here is **pure**: no I/O, no logging, no side effects.
Import from this module; never reimplement conversions locally in services.

The two pillars exposed are:

1. **Odds conversion** — every supported format ↔ decimal odds, with
   decimal odds as the hub.  Probability is simply ``1 / decimal``.
2. **Money rounding** — half-up rounding to the cent, applied only at the
   last step of a money-producing calculation.

Design decisions
----------------
* Decimal odds are the hub because they are the quantity the staking maths
  multiplies by.  Routing a fractional ``"3/5"`` through probability first
  would only add floating-point noise.
* A decimal price of ``0`` means "no payout is possible" and maps to a
  probability of ``0`` (and back).  It is the only decimal value below 1.0
  that is accepted.
* Every format accepts strings as well as numbers (``"+120"``, ``"0.55"``,
  ``"4/1"``, ``"evens"``) because prices usually arrive as text.

Run tests with::

    pytest tests/test_odds_math.py -v
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

# ---------------------------------------------------------------------------
# Module-level constants
# ---------------------------------------------------------------------------

#: Moneyline magnitude floor.  ``|odds| < 100`` is not a representable
#: American price.
_MIN_MONEYLINE_MAGNITUDE: Final[int] = 100

#: Strings accepted as an even-money price in the moneyline and fractional
#: formats.
_EVEN_MONEY: Final[frozenset[str]] = frozenset({"even", "evens", "ev", "evs"})

#: Quantum used by :func:`round_money`.
_CENT: Final[Decimal] = Decimal("0.01")


class OddsConversionError(ValueError):
    """A price could not be interpreted in the requested format."""


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def to_number(value: int | float | str, fmt: str) -> float:
    """Read a numeric price component, accepting numbers or numeric strings."""
    if isinstance(value, bool):
        raise OddsConversionError(f"{fmt} price must be numeric, got {value!r}.")
    try:
        number = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except ValueError:
        raise OddsConversionError(
            f"Cannot read {value!r} as a {fmt} price."
        ) from None
    if not math.isfinite(number):
        raise OddsConversionError(f"{fmt} price must be finite, got {value!r}.")
    return number


def is_even_money(value: int | float | str) -> bool:
    return isinstance(value, str) and value.strip().lower() in _EVEN_MONEY


# ---------------------------------------------------------------------------
# Into decimal odds
# ---------------------------------------------------------------------------


def probability_to_decimal(prob: int | float | str) -> float:
    """Convert a win probability to fair decimal odds.

    Examples::

        probability_to_decimal(0.50) → 2.0
        probability_to_decimal(0.25) → 4.0
        probability_to_decimal(0)    → 0.0   (no payout possible)

    Raises:
        OddsConversionError: If the probability is outside ``[0, 1]``.
    """
    p = to_number(prob, "probability")
    if not (0.0 <= p <= 1.0):
        raise OddsConversionError(f"Probability must be in [0, 1], got {prob!r}.")
    if p == 0.0:
        return 0.0
    return 1.0 / p


def american_to_decimal(american: int | float | str) -> float:
    """Convert American (moneyline) odds to decimal (European) format.

    Decimal odds represent the total payout per unit staked, **including**
    the return of the stake itself.  Examples::

        american_to_decimal(-110)    → 1.9091   (risk 110 to win 100)
        american_to_decimal("+150")  → 2.5000   (risk 100 to win 150)
        american_to_decimal("EVEN")  → 2.0000

    Raises:
        OddsConversionError: If ``|american| < 100``, which is not a
            representable moneyline value.
    """
    if is_even_money(american):
        return 2.0
    ml = to_number(american, "moneyline")
    if abs(ml) < _MIN_MONEYLINE_MAGNITUDE:
        raise OddsConversionError(
            f"Invalid moneyline {american!r}: magnitude must be ≥ 100."
        )
    if ml > 0:
        return ml / 100.0 + 1.0
    # Negative: risk |ml| to win 100
    return 100.0 / abs(ml) + 1.0


def fractional_to_decimal(fractional: int | float | str) -> float:
    """Convert traditional (fractional) odds to decimal.

    ``"n/d"`` pays ``n`` profit per ``d`` staked.  A bare number is read as
    ``n/1``.  Examples::

        fractional_to_decimal("3/5")   → 1.6
        fractional_to_decimal("100/1") → 101.0
        fractional_to_decimal(4)       → 5.0
    """
    if is_even_money(fractional):
        return 2.0
    if isinstance(fractional, str) and "/" in fractional:
        num_s, _, den_s = fractional.partition("/")
        num = to_number(num_s, "fractional")
        den = to_number(den_s, "fractional")
        if den <= 0.0:
            raise OddsConversionError(
                f"Fractional odds {fractional!r} need a positive denominator."
            )
        ratio = num / den
    else:
        ratio = to_number(fractional, "fractional")
    if ratio < 0.0:
        raise OddsConversionError(f"Fractional odds {fractional!r} cannot be negative.")
    return 1.0 + ratio


def hongkong_to_decimal(hk: int | float | str) -> float:
    """Hong Kong odds are the net profit per unit: ``decimal = 1 + hk``."""
    value = to_number(hk, "Hong Kong")
    if value < 0.0:
        raise OddsConversionError(f"Hong Kong odds {hk!r} cannot be negative.")
    return 1.0 + value


def indonesian_to_decimal(indo: int | float | str) -> float:
    """Indonesian odds are moneyline divided by 100."""
    value = to_number(indo, "Indonesian")
    if value >= 1.0:
        return 1.0 + value
    if value <= -1.0:
        return 1.0 - 1.0 / value
    raise OddsConversionError(
        f"Invalid Indonesian odds {indo!r}: magnitude must be ≥ 1."
    )


def malaysian_to_decimal(malay: int | float | str) -> float:
    """Malaysian odds: favourites in ``(0, 1]``, underdogs in ``[-1, 0)``."""
    value = to_number(malay, "Malaysian")
    if 0.0 < value <= 1.0:
        return 1.0 + value
    if -1.0 <= value < 0.0:
        return 1.0 - 1.0 / value
    raise OddsConversionError(
        f"Invalid Malaysian odds {malay!r}: must be in [-1, 0) or (0, 1]."
    )


def parse_decimal(decimal_odds: int | float | str) -> float:
    """Validate a decimal price.  ``0`` (no payout) or ``≥ 1.0``."""
    d = to_number(decimal_odds, "decimal")
    if d != 0.0 and d < 1.0:
        raise OddsConversionError(
            f"Decimal odds {decimal_odds!r} must be 0 or ≥ 1.0."
        )
    return d


# ---------------------------------------------------------------------------
# Out of decimal odds
# ---------------------------------------------------------------------------


def decimal_to_probability(decimal_odds: float) -> float:
    """Implied probability of a decimal price (vig-inclusive).

    Examples::

        decimal_to_probability(1.9091) → 0.5238
        decimal_to_probability(0.0)    → 0.0    (no payout possible)
    """
    if decimal_odds == 0.0:
        return 0.0
    return 1.0 / decimal_odds


def decimal_to_american(decimal_odds: float) -> float:
    """Convert decimal odds to moneyline.

    Values ≥ 2.0 are returned as positive (underdog); values < 2.0 as
    negative (favourite).

    Raises:
        OddsConversionError: If ``decimal_odds ≤ 1.0``; no moneyline pays
            nothing.
    """
    if decimal_odds <= 1.0:
        raise OddsConversionError(
            f"Decimal odds {decimal_odds!r} have no moneyline equivalent."
        )
    if decimal_odds >= 2.0:
        return (decimal_odds - 1.0) * 100.0
    return -100.0 / (decimal_odds - 1.0)


def decimal_to_fractional(decimal_odds: float) -> float:
    """Net profit ratio ``n/d`` as a number (``3/5`` → ``0.6``)."""
    if decimal_odds < 1.0:
        raise OddsConversionError(
            f"Decimal odds {decimal_odds!r} have no fractional equivalent."
        )
    return decimal_odds - 1.0


def decimal_to_indonesian(decimal_odds: float) -> float:
    if decimal_odds <= 1.0:
        raise OddsConversionError(
            f"Decimal odds {decimal_odds!r} have no Indonesian equivalent."
        )
    if decimal_odds >= 2.0:
        return decimal_odds - 1.0
    return -1.0 / (decimal_odds - 1.0)


def decimal_to_malaysian(decimal_odds: float) -> float:
    if decimal_odds <= 1.0:
        raise OddsConversionError(
            f"Decimal odds {decimal_odds!r} have no Malaysian equivalent."
        )
    if decimal_odds <= 2.0:
        return decimal_odds - 1.0
    return -1.0 / (decimal_odds - 1.0)


# ---------------------------------------------------------------------------
# Money rounding
# ---------------------------------------------------------------------------


def round_money(amount: float) -> float:
    """Round to the cent, halves away from zero.

    Python's built-in :func:`round` uses banker's rounding on the binary
    value, so ``round(0.125, 2)`` gives ``0.12``.  Currency amounts round
    half-up on the shortest decimal representation instead::

        round_money(0.125)   → 0.13
        round_money(5.4999)  → 5.5
        round_money(-2.345)  → -2.35
    """
    # float() first: numpy scalars repr as "np.float64(...)".
    return float(Decimal(repr(float(amount))).quantize(_CENT, rounding=ROUND_HALF_UP))
