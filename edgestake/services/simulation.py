"""
Monte Carlo validation of a Kelly staking plan.

Stakes a set of simultaneous edges exactly as :func:`~edgestake.services.staking.kelly`
recommends, then repeatedly resolves the edges by sampling the joint outcome
CDF and averages what comes back.  Subtracting the amount staked gives the
expected net win of running the plan once, which converges on the true
expectation as the number of trials grows.

Usage::

    result = run_simulation(edges, iterations=10_000, seed=7)
    print(result.net_win, result.confidence_interval())

Concurrency
-----------
Trials are independent, so ``workers > 1`` splits them across a thread
pool.  Every worker owns a generator spawned from one ``SeedSequence`` (or
from the caller's generator), so workers never share random state and a
seeded run is reproducible for a fixed worker count.  Draws are made in
chunks to bound memory for very large iteration counts.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from scipy.stats import norm

from edgestake.core import kelly as kelly_math
from edgestake.core.config import DEFAULT_ITERATIONS, SimulationSettings, StakingOptions
from edgestake.core.odds_math import round_money
from edgestake.core.price import DEFAULT_CONVERTER, Edge, PriceConverter, TaggedAmount, price_edges
from edgestake.services.outcome_dist import OutcomeDistribution, distribution_from_priced
from edgestake.services.staking import stake_plan

logger = logging.getLogger(__name__)

# Trials drawn per numpy call inside a worker.
_CHUNK_SIZE = 250_000


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SimulationResult:
    """
    Outcome of simulating a staking plan.

    Attributes:
        stakes: Kelly stakes, in expectation order.
        total_staked: Sum of ``stakes``.
        mean_return: Average gross amount returned per trial.
        return_std: Sample standard deviation of the per-trial return.
        iterations: Number of trials.
        net_win: ``mean_return − total_staked`` rounded to the cent.
    """

    stakes: List[TaggedAmount] = field(default_factory=list)
    total_staked: float = 0.0
    mean_return: float = 0.0
    return_std: float = 0.0
    iterations: int = 0
    net_win: float = 0.0

    def confidence_interval(self, level: float = 0.95) -> Tuple[float, float]:
        """Normal-approximation interval on the (unrounded) net win."""
        if not (0.0 < level < 1.0):
            raise ValueError(f"level must be in (0, 1), got {level!r}.")
        centre = self.mean_return - self.total_staked
        if self.iterations < 2:
            return centre, centre
        half_width = norm.ppf(0.5 + level / 2.0) * self.return_std / np.sqrt(self.iterations)
        return float(centre - half_width), float(centre + half_width)


# ---------------------------------------------------------------------------
# Sampling workers
# ---------------------------------------------------------------------------

def _sample_totals(
    cdf: OutcomeDistribution,
    bucket_returns: np.ndarray,
    iterations: int,
    rng: np.random.Generator,
) -> Tuple[float, float]:
    """Sum and sum of squares of ``iterations`` sampled per-trial returns."""
    total = 0.0
    total_sq = 0.0
    remaining = iterations
    while remaining > 0:
        size = min(remaining, _CHUNK_SIZE)
        draws = bucket_returns[cdf.bucket_index(rng.random(size))]
        total += float(draws.sum())
        total_sq += float(np.square(draws).sum())
        remaining -= size
    return total, total_sq


def _split(iterations: int, workers: int) -> List[int]:
    base, extra = divmod(iterations, workers)
    return [base + (1 if i < extra else 0) for i in range(workers)]


def _worker_rngs(
    workers: int,
    rng: Optional[np.random.Generator],
    seed: Optional[int],
) -> List[np.random.Generator]:
    if rng is not None:
        return [rng] if workers == 1 else list(rng.spawn(workers))
    if workers == 1:
        return [np.random.default_rng(seed)]
    return [np.random.default_rng(s) for s in np.random.SeedSequence(seed).spawn(workers)]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def run_simulation(
    edges: List[Edge],
    iterations: int = DEFAULT_ITERATIONS,
    options: Optional[StakingOptions] = None,
    *,
    converter: Optional[PriceConverter] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    workers: int = 1,
    settings: Optional[SimulationSettings] = None,
) -> SimulationResult:
    """
    Simulate a repeated edge situation staked according to Kelly.

    Args:
        edges: Simultaneous edges.
        iterations: Number of trials (≥ 1).
        options: Bankroll and independence flag, shared with ``kelly``.
        converter: Price converter.
        rng: Generator supplying the uniform draws.  Overrides ``seed``.
        seed: Seed for a fresh generator when ``rng`` is not given.
        workers: Threads to spread the trials over.
        settings: Supplies ``max_independent_edges`` and ``renormalize``;
            explicit ``iterations``/``seed``/``workers`` arguments win.

    Raises:
        NoPositiveEdge: Kelly would not stake anything; nothing is simulated.
        ValueError: ``iterations`` or ``workers`` below 1, or too many
            independent edges for the outcome table.
    """
    options = options or StakingOptions()
    converter = converter or DEFAULT_CONVERTER
    settings = settings or SimulationSettings()
    if iterations < 1:
        raise ValueError(f"iterations must be ≥ 1, got {iterations!r}.")
    if workers < 1:
        raise ValueError(f"workers must be ≥ 1, got {workers!r}.")
    if seed is None:
        seed = settings.seed

    ranked = kelly_math.rank_by_expectation(price_edges(edges, converter))
    plan = stake_plan(ranked, options)

    cdf = distribution_from_priced(ranked, options.independent, settings.max_independent_edges)
    if settings.renormalize:
        cdf = cdf.normalized()

    # Stake vector aligned with the ranked edges; unstaked edges carry 0.
    position = {edge.index: i for i, edge in enumerate(ranked)}
    stakes = np.zeros(len(ranked))
    for edge, amount in plan:
        stakes[position[edge.index]] = amount
    bucket_returns = cdf.returns(stakes)

    chunks = _split(iterations, workers)
    rngs = _worker_rngs(workers, rng, seed)
    if workers == 1:
        partials = [_sample_totals(cdf, bucket_returns, iterations, rngs[0])]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            partials = list(pool.map(
                lambda job: _sample_totals(cdf, bucket_returns, job[0], job[1]),
                zip(chunks, rngs),
            ))

    total = sum(p[0] for p in partials)
    total_sq = sum(p[1] for p in partials)
    mean_return = total / iterations
    variance = 0.0
    if iterations > 1:
        variance = max(0.0, (total_sq - iterations * mean_return ** 2) / (iterations - 1))

    total_staked = float(stakes.sum())
    result = SimulationResult(
        stakes=[TaggedAmount(edge.label, amount) for edge, amount in plan],
        total_staked=total_staked,
        mean_return=mean_return,
        return_std=float(np.sqrt(variance)),
        iterations=iterations,
        net_win=round_money(mean_return - total_staked),
    )
    logger.info(
        "Simulated %d trials over %d edges (%d workers): staked %.2f, net %.2f",
        iterations, len(edges), workers, total_staked, result.net_win,
    )
    return result


def sim_win(
    edges: List[Edge],
    iterations: int = DEFAULT_ITERATIONS,
    options: Optional[StakingOptions] = None,
    *,
    converter: Optional[PriceConverter] = None,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    workers: int = 1,
    settings: Optional[SimulationSettings] = None,
) -> float:
    """
    Average amount won per run of the Kelly plan, net of stakes.

    See :func:`run_simulation` for the arguments.
    """
    return run_simulation(
        edges,
        iterations,
        options,
        converter=converter,
        rng=rng,
        seed=seed,
        workers=workers,
        settings=settings,
    ).net_win
