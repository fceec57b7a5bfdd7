"""
Mathematical expectation of a list of supposed edges.

A losing proposition has an EV below the supplied bankroll; the difference
from the bankroll is the expected win (or loss) of staking all of it.
"""

import logging
from typing import List, Optional

from edgestake.core.config import StakingOptions
from edgestake.core.price import DEFAULT_CONVERTER, Edge, PriceConverter, TaggedAmount

logger = logging.getLogger(__name__)


def expectation(edge: Edge, multiplier: float = 1.0, converter: PriceConverter = DEFAULT_CONVERTER) -> float:
    """``multiplier × fair probability × offered decimal odds`` for one edge."""
    return multiplier * converter.probability(edge.fair) * converter.decimal(edge.offered)


def ev(
    edges: List[Edge],
    options: Optional[StakingOptions] = None,
    *,
    converter: Optional[PriceConverter] = None,
) -> List[TaggedAmount]:
    """
    Expected return of staking the whole bankroll on each edge.

    Args:
        edges: Edges to evaluate.  Output follows this order.
        options: Only ``bankroll`` is used, as the multiplier.
        converter: Price converter; the default understands every
            :class:`~edgestake.core.price.PriceFormat`.

    Returns:
        One :class:`TaggedAmount` per edge, unrounded.
    """
    options = options or StakingOptions()
    converter = converter or DEFAULT_CONVERTER

    results = [
        TaggedAmount(edge.label, expectation(edge, options.bankroll, converter))
        for edge in edges
    ]
    logger.debug("Computed expectation for %d edges (bankroll=%.2f)", len(results), options.bankroll)
    return results
