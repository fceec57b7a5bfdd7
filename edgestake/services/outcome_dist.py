"""
Joint outcome distribution over a set of simultaneous edges.

Enumerates every way the edges can resolve and turns the list into a
cumulative distribution function (CDF) that the Monte Carlo sampler can
invert with a single uniform draw:

    independent=False  →  n buckets, exactly one edge wins
    independent=True   →  2^n buckets, each edge an independent Bernoulli

Each bucket holds a *payoff vector* (decimal odds for the edges that win in
that bucket, 0 for the rest) and the cumulative probability up to and
including it.

Cost
----
The independent table has ``2^n`` rows of ``n`` payoffs, so both time and
memory are ``O(n · 2^n)``.  Builders refuse more than ``max_edges`` edges
(default 20, about a million rows) rather than exhausting memory.

Probabilities come straight from the caller's estimates, so the total mass
need not be exactly one.  Missing mass is left uncovered and the sampler
treats a draw beyond the last bucket as a guaranteed loss;
:meth:`OutcomeDistribution.normalized` rescales instead.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from edgestake.core.config import DEFAULT_MAX_INDEPENDENT_EDGES
from edgestake.core.price import DEFAULT_CONVERTER, Edge, PriceConverter, PricedEdge, price_edges

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Distribution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OutcomeBucket:
    """One CDF entry."""

    payoff_vector: Tuple[float, ...]
    cumulative_probability: float


@dataclass(frozen=True, eq=False)
class OutcomeDistribution:
    """
    Discretised joint outcome space as a CDF.

    Attributes:
        payoffs: ``(buckets, edges)`` array of per-unit payouts.
        cumulative: ``(buckets,)`` running probability total, in
            enumeration order.
    """

    payoffs: np.ndarray
    cumulative: np.ndarray

    def __len__(self) -> int:
        return int(self.cumulative.shape[0])

    def __iter__(self) -> Iterator[OutcomeBucket]:
        for row, cum in zip(self.payoffs, self.cumulative):
            yield OutcomeBucket(tuple(float(x) for x in row), float(cum))

    def __getitem__(self, i: int) -> OutcomeBucket:
        return OutcomeBucket(
            tuple(float(x) for x in self.payoffs[i]), float(self.cumulative[i])
        )

    @property
    def n_edges(self) -> int:
        return int(self.payoffs.shape[1])

    @property
    def total_mass(self) -> float:
        """Probability covered by the buckets (the last cumulative value)."""
        return float(self.cumulative[-1]) if len(self) else 0.0

    @property
    def loss_vector(self) -> Tuple[float, ...]:
        """All-zero payoff vector returned when a draw falls past the last bucket."""
        return (0.0,) * self.n_edges

    def normalized(self) -> "OutcomeDistribution":
        """Copy rescaled so the final cumulative probability is exactly 1."""
        mass = self.total_mass
        if mass <= 0.0:
            return self
        cumulative = self.cumulative / mass
        cumulative[-1] = 1.0
        return OutcomeDistribution(payoffs=self.payoffs, cumulative=cumulative)

    def bucket_index(self, u: np.ndarray) -> np.ndarray:
        """
        Index of the first bucket whose cumulative probability is ≥ ``u``.

        Draws past the last bucket return ``len(self)``, the position of the
        implicit guaranteed-loss bucket.
        """
        return np.searchsorted(self.cumulative, u, side="left")

    def returns(self, stakes: np.ndarray) -> np.ndarray:
        """
        Gross return of each bucket for the given stake vector, with a
        trailing 0.0 for the guaranteed-loss bucket.
        """
        return np.append(self.payoffs @ stakes, 0.0)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def _to_cdf(payoffs: np.ndarray, probs: np.ndarray) -> OutcomeDistribution:
    return OutcomeDistribution(payoffs=payoffs, cumulative=np.cumsum(probs))


def independent_outcomes(odds: np.ndarray, probs: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Every win/loss combination of independent edges.

    Row ``m`` is the bitmask ``m``: edge ``i`` wins when bit ``i`` is set.
    """
    n = odds.shape[0]
    masks = np.arange(2 ** n, dtype=np.int64)
    wins = ((masks[:, None] >> np.arange(n)) & 1).astype(bool)
    payoffs = np.where(wins, odds, 0.0)
    joint = np.prod(np.where(wins, probs, 1.0 - probs), axis=1)
    return payoffs, joint


def exclusive_outcomes(odds: np.ndarray, probs: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Exactly one edge wins: outcome ``k`` pays only at position ``k``."""
    return np.diag(odds), probs.copy()


def distribution_from_priced(
    priced: List[PricedEdge],
    independent: bool,
    max_edges: int = DEFAULT_MAX_INDEPENDENT_EDGES,
) -> OutcomeDistribution:
    """Build the CDF from edges whose prices are already normalised."""
    odds = np.array([e.decimal_odds for e in priced], dtype=float)
    probs = np.array([e.probability for e in priced], dtype=float)

    if independent:
        if len(priced) > max_edges:
            raise ValueError(
                f"Independent outcome table needs 2^{len(priced)} rows; "
                f"refusing more than {max_edges} edges."
            )
        payoffs, joint = independent_outcomes(odds, probs)
    else:
        payoffs, joint = exclusive_outcomes(odds, probs)

    dist = _to_cdf(payoffs, joint)
    logger.debug(
        "Built %s outcome table: %d buckets over %d edges, mass=%.6f",
        "independent" if independent else "exclusive", len(dist), len(priced), dist.total_mass,
    )
    return dist


def edge_distribution(
    edges: List[Edge],
    independent: bool = False,
    *,
    converter: Optional[PriceConverter] = None,
    max_edges: int = DEFAULT_MAX_INDEPENDENT_EDGES,
) -> OutcomeDistribution:
    """
    Joint outcome CDF for ``edges``.

    Args:
        edges: Simultaneous edges; payoff vectors follow this order.
        independent: Enumerate all ``2^n`` combinations (``O(2^n)``) instead
            of ``n`` mutually exclusive outcomes.
        converter: Price converter.
        max_edges: Refuse independent tables with more edges than this.

    Raises:
        ValueError: ``independent`` with more than ``max_edges`` edges.
    """
    priced = price_edges(edges, converter or DEFAULT_CONVERTER)
    return distribution_from_priced(priced, independent, max_edges)


# ---------------------------------------------------------------------------
# Sampling
# ---------------------------------------------------------------------------

def sample_outcome(
    cdf: OutcomeDistribution,
    uniform: Optional[Callable[[], float]] = None,
) -> Tuple[float, ...]:
    """
    Draw one payoff vector by inverting the CDF.

    Args:
        cdf: Distribution to sample.
        uniform: Zero-argument source of variates in ``[0, 1)``.  Defaults
            to a freshly seeded numpy generator.

    Returns:
        The payoff vector of the first bucket whose cumulative probability
        is ≥ the draw, or the all-zero loss vector if the draw lands in
        uncovered probability mass.
    """
    if uniform is None:
        uniform = np.random.default_rng().random
    u = float(uniform())
    idx = int(cdf.bucket_index(np.asarray(u)))
    if idx >= len(cdf):
        return cdf.loss_vector
    return cdf[idx].payoff_vector
