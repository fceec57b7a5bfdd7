"""Engine outcomes surfaced to callers as exceptions.

Price-reading failures are *not* defined here: they come from the injected
converter (:class:`~edgestake.core.odds_math.OddsConversionError` for the
default one) and propagate untouched.
"""

from __future__ import annotations


class StakingError(Exception):
    """Base class for situations where the engine has nothing to recommend."""


class NoPositiveEdge(StakingError):
    """Kelly selection found no edge worth staking."""

    def __init__(self, message: str = "No suitable positive expectation edges found.") -> None:
        super().__init__(message)


class NoArbitrage(StakingError):
    """The offered prices do not guarantee a profit."""

    def __init__(self, message: str = "No arbitrage exists for these events.") -> None:
        super().__init__(message)
