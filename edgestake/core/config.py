"""Staking and simulation configuration.

Every tunable lives in one of two frozen dataclasses:

* :class:`StakingOptions` — what the caller passes to ``ev``, ``kelly``,
  ``arb`` and ``sim_win``: the bankroll and whether simultaneous edges are
  independent events or mutually exclusive outcomes.
* :class:`SimulationSettings` — Monte Carlo knobs (iteration count, worker
  threads, the ``2^n`` enumeration cap, renormalisation, seed).

Both carry defensible defaults and a :meth:`from_env` named constructor
reading ``EDGESTAKE_*`` environment variables.  Environment files are loaded
by the entry point (:mod:`edgestake.cli`), never here.

Typical usage::

    from edgestake.core.config import StakingOptions

    opts = StakingOptions(bankroll=1_000)

    # Override a single field:
    from dataclasses import replace
    independent_opts = replace(opts, independent=True)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

#: Bankroll used when the caller supplies none.
DEFAULT_BANKROLL: Final[float] = 100.0

#: Monte Carlo trials run by ``sim_win`` when the caller supplies none.
DEFAULT_ITERATIONS: Final[int] = 100

#: Largest edge count for which the independent-mode outcome table
#: (``2^n`` rows) is built.  2^20 rows is about a million buckets.
DEFAULT_MAX_INDEPENDENT_EDGES: Final[int] = 20

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


@dataclass(frozen=True)
class StakingOptions:
    """Optional parameters shared by every staking calculator.

    Attributes:
        bankroll: Total amount available for wagering.  Must be ≥ 0.
        independent: ``True`` when simultaneous edges are independent
            events (several may win at once); ``False`` (default) when they
            are mutually exclusive outcomes of one event.
    """

    bankroll: float = DEFAULT_BANKROLL
    independent: bool = False

    def __post_init__(self) -> None:
        if self.bankroll < 0:
            raise ValueError(f"bankroll must be ≥ 0, got {self.bankroll!r}.")

    @classmethod
    def from_env(cls) -> StakingOptions:
        """Build options from ``EDGESTAKE_BANKROLL`` / ``EDGESTAKE_INDEPENDENT``."""
        return cls(
            bankroll=float(os.getenv("EDGESTAKE_BANKROLL", str(DEFAULT_BANKROLL))),
            independent=_env_flag("EDGESTAKE_INDEPENDENT"),
        )


@dataclass(frozen=True)
class SimulationSettings:
    """Monte Carlo configuration.

    Attributes:
        iterations: Number of simulated trials.  Must be ≥ 1.
        workers: Threads to split the trials across.  Each gets its own
            independently seeded generator.  Must be ≥ 1.
        max_independent_edges: Cap on ``n`` for the ``O(2^n)``
            independent-mode outcome table.
        renormalize: Rescale the outcome CDF to total mass 1 before
            sampling.  Off by default: missing mass is sampled as a
            guaranteed loss.
        seed: Seed for reproducible runs; ``None`` draws fresh entropy.
    """

    iterations: int = DEFAULT_ITERATIONS
    workers: int = 1
    max_independent_edges: int = DEFAULT_MAX_INDEPENDENT_EDGES
    renormalize: bool = False
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ValueError(f"iterations must be ≥ 1, got {self.iterations!r}.")
        if self.workers < 1:
            raise ValueError(f"workers must be ≥ 1, got {self.workers!r}.")
        if self.max_independent_edges < 0:
            raise ValueError(
                f"max_independent_edges must be ≥ 0, got {self.max_independent_edges!r}."
            )

    @classmethod
    def from_env(cls) -> SimulationSettings:
        seed = os.getenv("EDGESTAKE_SIM_SEED", "").strip()
        return cls(
            iterations=int(os.getenv("EDGESTAKE_SIM_ITERATIONS", str(DEFAULT_ITERATIONS))),
            workers=int(os.getenv("EDGESTAKE_SIM_WORKERS", "1")),
            max_independent_edges=int(
                os.getenv("EDGESTAKE_MAX_INDEPENDENT_EDGES", str(DEFAULT_MAX_INDEPENDENT_EDGES))
            ),
            renormalize=_env_flag("EDGESTAKE_SIM_RENORMALIZE"),
            seed=int(seed) if seed else None,
        )
