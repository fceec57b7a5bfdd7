"""
Kelly stake sizing for one or more simultaneous advantage situations.

Two paths, chosen by ``StakingOptions.independent``:

    1. Mutually exclusive outcomes (default, or a single edge) — rank by
       expectation, greedily pick the optimal set against the reserve rate,
       and size each member against the whole set.
    2. Independent events (more than one edge) — size each edge on its own
       with the single-bet formula.  A documented approximation that
       over-allocates relative to the true joint optimum.

Both paths drop non-positive fractions, rescale so the bankroll is never
over-committed, and round each stake to the cent.
"""

import logging
from typing import List, Optional, Tuple

from edgestake.core import kelly as kelly_math
from edgestake.core.config import StakingOptions
from edgestake.core.errors import NoPositiveEdge
from edgestake.core.odds_math import round_money
from edgestake.core.price import (
    DEFAULT_CONVERTER,
    Edge,
    PriceConverter,
    PricedEdge,
    TaggedAmount,
    price_edges,
)

logger = logging.getLogger(__name__)


def kelly_fractions(
    priced: List[PricedEdge],
    independent: bool = False,
) -> List[Tuple[PricedEdge, float]]:
    """
    Bankroll fractions for already-priced edges, in processing order.

    The mutually exclusive path returns the optimal set in expectation
    order; the independent path keeps input order.

    Raises:
        NoPositiveEdge: When nothing survives selection and filtering.
    """
    if not independent or len(priced) == 1:
        ranked = kelly_math.rank_by_expectation(priced)
        raw = kelly_math.optimal_fractions(ranked)
        logger.debug(
            "Optimal set: %d of %d edges (%s)",
            len(raw), len(priced), ", ".join(e.label for e, _ in raw),
        )
    else:
        raw = kelly_math.independent_fractions(priced)

    fractions = kelly_math.resize_fractions(raw)
    if not fractions:
        raise NoPositiveEdge()
    return fractions


def stake_plan(
    priced: List[PricedEdge],
    options: StakingOptions,
) -> List[Tuple[PricedEdge, float]]:
    """Kelly fractions scaled to the bankroll and rounded to the cent."""
    return [
        (edge, round_money(fraction * options.bankroll))
        for edge, fraction in kelly_fractions(priced, options.independent)
    ]


def kelly(
    edges: List[Edge],
    options: Optional[StakingOptions] = None,
    *,
    converter: Optional[PriceConverter] = None,
) -> List[TaggedAmount]:
    """
    Determine the amount to stake on advantage situations with the Kelly
    criterion.

    Args:
        edges: Simultaneous edges.
        options: Bankroll and independence flag.
        converter: Price converter for the edges' fair and offered prices.

    Returns:
        Amounts to wager on each selected edge.  For mutually exclusive
        outcomes the list is in expectation order, not input order.

    Raises:
        NoPositiveEdge: No edge is worth staking.
    """
    options = options or StakingOptions()
    converter = converter or DEFAULT_CONVERTER

    priced = price_edges(edges, converter)
    plan = stake_plan(priced, options)

    logger.info(
        "Kelly sizing: %d of %d edges staked, %.2f of %.2f bankroll committed",
        len(plan), len(edges), sum(amount for _, amount in plan), options.bankroll,
    )
    return [TaggedAmount(edge.label, amount) for edge, amount in plan]
