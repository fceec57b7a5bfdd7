"""
edgestake — stake sizing for advantage betting situations.

Calculates how much to risk on one or more edges with the Kelly criterion,
sizes riskless arbitrages across mutually exclusive outcomes, and checks a
staking plan by Monte Carlo simulation.

Example::

    from edgestake import Edge, Price, StakingOptions, kelly

    edges = [
        Edge("chalk", Price.prob(0.75), Price.uk("3/5")),
        Edge("dark", Price.prob(0.04), Price.uk("30/1")),
    ]
    kelly(edges, StakingOptions(bankroll=1_000))
"""

from edgestake.core.config import SimulationSettings, StakingOptions
from edgestake.core.errors import NoArbitrage, NoPositiveEdge, StakingError
from edgestake.core.odds_math import OddsConversionError
from edgestake.core.price import (
    ArbitragePlan,
    Edge,
    OddsConverter,
    Price,
    PriceConverter,
    PriceFormat,
    TaggedAmount,
)
from edgestake.services.arbitrage import arb
from edgestake.services.expectation import ev
from edgestake.services.outcome_dist import OutcomeDistribution, edge_distribution, sample_outcome
from edgestake.services.simulation import SimulationResult, run_simulation, sim_win
from edgestake.services.staking import kelly

__version__ = "0.6.0"

__all__ = [
    "ArbitragePlan",
    "Edge",
    "NoArbitrage",
    "NoPositiveEdge",
    "OddsConversionError",
    "OddsConverter",
    "OutcomeDistribution",
    "Price",
    "PriceConverter",
    "PriceFormat",
    "SimulationResult",
    "SimulationSettings",
    "StakingError",
    "StakingOptions",
    "TaggedAmount",
    "arb",
    "edge_distribution",
    "ev",
    "kelly",
    "run_simulation",
    "sample_outcome",
    "sim_win",
]
