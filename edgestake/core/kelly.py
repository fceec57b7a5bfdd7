"""Kelly criterion sizing — the single source of truth for stake fractions.

All functions here are **pure**: no I/O, no converter calls, no logging.
They operate on :class:`~edgestake.core.price.PricedEdge` values whose
prices have already been normalised.

The sizing contexts covered:

1. :func:`kelly_fraction` — classical Kelly for a single win/loss bet.
2. :func:`select_optimal_set` + :func:`reserve_rate` — the greedy
   optimal-subset selection for simultaneous, mutually exclusive outcomes
   (one race, one winner).
3. :func:`optimal_fractions` / :func:`independent_fractions` — the two
   fraction engines, both finished by :func:`resize_fractions`.

Design decisions
----------------
* **Sort, then fold.**  Selection is a stable sort by expectation followed by
  a fold that carries the included set and stops at the first candidate that
  fails to beat the reserve rate.  Later, lower-expectation edges are never
  examined: the cutoff is hard, not a per-edge filter.
* **Full Kelly.**  Fractions are not divided down.  Callers that want
  fractional Kelly scale the bankroll they pass in.
* **Independent events are approximated.**  Sizing each independent edge
  with the single-bet formula ignores that simultaneous bets share one
  bankroll, so it over-allocates versus the joint-growth optimum (Whitrow
  2007).  The exact answer needs a constrained multivariate optimisation
  and is not attempted here.

Run tests with::

    pytest tests/test_kelly.py -v
"""

from __future__ import annotations

import math
from typing import Final, Sequence, TypeVar

from edgestake.core.price import PricedEdge

T = TypeVar("T")

#: Reserve rate of the empty set: the first edge must merely be positive EV.
EMPTY_RESERVE_RATE: Final[float] = 1.0


# ---------------------------------------------------------------------------
# Single-bet Kelly
# ---------------------------------------------------------------------------


def kelly_fraction(win_prob: float, decimal_odds: float) -> float:
    """Full Kelly fraction for a simple win/loss outcome.

    The Kelly criterion maximises ``E[log(wealth)]``.  For a bet paying
    ``decimal_odds`` per unit (stake included) with win probability ``p``
    the closed-form solution (Kelly 1956) is::

        f*  =  (p · d − 1) / (d − 1)                              (1)

    The result may be negative; callers discard non-positive fractions.

    Examples::

        kelly_fraction(0.55, 1.9091)  →  0.055   (-110)
        kelly_fraction(0.55, 1.8333)  →  0.010   (-120)
        kelly_fraction(1.00, 0.0)     →  0.0     (no payout possible)

    Returns:
        ``f*``, or ``0.0`` when ``decimal_odds ≤ 1`` and no profit can be
        made whatever happens.
    """
    if decimal_odds <= 1.0:
        return 0.0
    return (win_prob * decimal_odds - 1.0) / (decimal_odds - 1.0)


# ---------------------------------------------------------------------------
# Optimal set for mutually exclusive outcomes
# ---------------------------------------------------------------------------


def reserve_rate(included: Sequence[PricedEdge]) -> float:
    """The "reserve rate" a new edge's expectation must beat to join the set.

    For an included set ``S`` of mutually exclusive outcomes::

        R(S)  =  (1 − Σ p_i) / (1 − Σ 1/d_i)                      (2)

    with ``R(∅) = 1``.  ``R`` is the growth rate the bettor gets on money
    held back; an edge whose ``p · d`` does not exceed it is better left
    unbet (Smoczynski & Tomkins 2010).

    When the fair probabilities of the set sum to at most one, every edge
    admitted by :func:`select_optimal_set` keeps the denominator positive.
    Inputs that break this (probabilities summing above one) yield
    ``math.inf``, which admits nothing further.
    """
    if not included:
        return EMPTY_RESERVE_RATE
    probs = sum(e.probability for e in included)
    payoffs = sum(1.0 / e.decimal_odds for e in included)
    denominator = 1.0 - payoffs
    if denominator <= 0.0:
        return math.inf
    return (1.0 - probs) / denominator


def rank_by_expectation(priced: Sequence[PricedEdge]) -> list[PricedEdge]:
    """Stable sort, highest single-unit expectation first.

    Ties keep their input order (``sorted`` with ``reverse=True`` is stable).
    """
    return sorted(priced, key=lambda e: e.expectation, reverse=True)


def select_optimal_set(ranked: Sequence[PricedEdge]) -> list[PricedEdge]:
    """Greedily choose which of the ranked edges to bet.

    Args:
        ranked: Edges in descending expectation order, as produced by
            :func:`rank_by_expectation`.

    Returns:
        The included set, in ranked order.  Always a prefix of ``ranked``.
    """
    included: list[PricedEdge] = []
    for candidate in ranked:
        if candidate.expectation <= reserve_rate(included):
            break
        included.append(candidate)
    return included


def reserve_rate_fraction(rate: float, win_prob: float, decimal_odds: float) -> float:
    """Fraction for one member of a multi-edge optimal set: ``p − R/d``."""
    if decimal_odds == 0.0:
        return 0.0
    return win_prob - rate / decimal_odds


def optimal_fractions(ranked: Sequence[PricedEdge]) -> list[tuple[PricedEdge, float]]:
    """Select the optimal set and size each member.

    A set of one is sized with the classical formula (1); larger sets use
    the reserve rate of the whole set (2).  The output is *not* yet
    filtered or rescaled; see :func:`resize_fractions`.

    Examples (fair prob @ offered, win-market on one race)::

        dark .04 @ 30/1, chalk .75 @ 3/5, glue .01 @ 100/1, stalk .20 @ 7/2
        → R = 0 and every fraction equals its fair probability.
    """
    included = select_optimal_set(ranked)
    if len(included) == 1:
        only = included[0]
        return [(only, kelly_fraction(only.probability, only.decimal_odds))]
    rate = reserve_rate(included)
    return [
        (e, reserve_rate_fraction(rate, e.probability, e.decimal_odds))
        for e in included
    ]


def independent_fractions(priced: Sequence[PricedEdge]) -> list[tuple[PricedEdge, float]]:
    """Size each independent edge on its own with formula (1).

    This is the naive approximation for simultaneous independent events;
    see the module docstring.
    """
    return [(e, kelly_fraction(e.probability, e.decimal_odds)) for e in priced]


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def resize_fractions(fractions: Sequence[tuple[T, float]]) -> list[tuple[T, float]]:
    """Drop non-positive fractions and cap the total commitment at 1.

    If the surviving fractions sum to more than one they are scaled
    proportionally so they sum to exactly one; the bankroll is never
    over-committed.  Order is preserved.

    Examples::

        [(a, 0.3), (b, -0.1), (c, 0.2)]  →  [(a, 0.3), (c, 0.2)]
        [(a, 0.9), (b, 0.6)]             →  [(a, 0.6), (b, 0.4)]
    """
    positive = [(item, f) for item, f in fractions if f > 0.0]
    total = sum(f for _, f in positive)
    if total > 1.0:
        return [(item, f / total) for item, f in positive]
    return positive
