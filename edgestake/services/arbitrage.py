"""
Arbitrage detection and sizing across mutually exclusive outcomes.

An arbitrage exists when the offered prices on every outcome of one event
imply probabilities summing to less than one.  Staking each outcome in
proportion to its implied probability then pays the same amount whichever
outcome occurs, locking in the difference as profit.

The payouts may not all be exactly equal because each stake is rounded to
the cent; that can move the realised profit by a cent or two.
"""

import logging
from typing import List, Optional

from edgestake.core.config import StakingOptions
from edgestake.core.errors import NoArbitrage
from edgestake.core.odds_math import round_money
from edgestake.core.price import (
    DEFAULT_CONVERTER,
    ArbitragePlan,
    Edge,
    PriceConverter,
    TaggedAmount,
)

logger = logging.getLogger(__name__)


def implied_probability_sum(edges: List[Edge], converter: PriceConverter = DEFAULT_CONVERTER) -> float:
    """Sum of the offered prices' implied probabilities (the book's overround)."""
    return sum(converter.probability(edge.offered) for edge in edges)


def arb_exists(edges: List[Edge], converter: PriceConverter = DEFAULT_CONVERTER) -> bool:
    """True when two or more outcomes are offered at a combined book under 100%."""
    return len(edges) > 1 and implied_probability_sum(edges, converter) < 1.0


def arb(
    edges: List[Edge],
    options: Optional[StakingOptions] = None,
    *,
    converter: Optional[PriceConverter] = None,
    full_outlay: bool = False,
) -> ArbitragePlan:
    """
    Determine how much to bet on each of a set of mutually exclusive
    outcomes in an arbitrage situation.

    Only the offered price of each edge matters; fair prices are ignored.

    Args:
        edges: One edge per mutually exclusive outcome.
        options: ``bankroll`` bounds the outlay.  ``independent`` must be
            false: independent events cannot be arbitraged against each
            other.
        converter: Price converter for the offered prices.
        full_outlay: By default every outcome is sized to pay back the
            bankroll, so the total staked is the bankroll less the locked-in
            profit; the smaller the arbitrage, the closer the outlay gets to
            the bankroll.  With ``full_outlay=True`` the target payout is
            ``bankroll / S`` (``S`` the implied-probability sum) and the
            stakes consume the whole bankroll.

    Returns:
        :class:`ArbitragePlan` with a stake per outcome (input order) and
        the profit, both rounded to the cent.

    Raises:
        NoArbitrage: Fewer than two outcomes, ``independent=True``, or the
            implied probabilities sum to one or more.
    """
    options = options or StakingOptions()
    converter = converter or DEFAULT_CONVERTER

    if options.independent or len(edges) < 2:
        raise NoArbitrage()

    book = implied_probability_sum(edges, converter)
    if book >= 1.0:
        logger.debug("No arbitrage: implied probabilities sum to %.4f", book)
        raise NoArbitrage()

    target_payout = options.bankroll / book if full_outlay else options.bankroll
    sizes = [
        TaggedAmount(edge.label, round_money(target_payout / converter.decimal(edge.offered)))
        for edge in edges
    ]
    profit = round_money(target_payout - sum(s.amount for s in sizes))

    logger.info(
        "Arbitrage across %d outcomes: book=%.4f, outlay=%.2f, profit=%.2f",
        len(edges), book, sum(s.amount for s in sizes), profit,
    )
    return ArbitragePlan(sizes=sizes, profit=profit)
