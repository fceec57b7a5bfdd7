"""
Pydantic request schemas for the edgestake command line.

Prices usually arrive as loosely typed JSON (``"+120"``, ``0.55``,
``"4/1"``).  Validating the document up front means a bad format tag or a
negative bankroll is reported before any staking maths runs, and the engine
itself only ever sees :class:`~edgestake.core.price.Edge` values.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from edgestake.core.config import DEFAULT_BANKROLL, DEFAULT_ITERATIONS, StakingOptions
from edgestake.core.price import Edge, Price, PriceFormat


# ---------------------------------------------------------------------------
# Prices and edges
# ---------------------------------------------------------------------------

class PriceIn(BaseModel):
    """A price as it appears in a request document."""

    format: PriceFormat = Field(..., description='Format tag, e.g. "us", "uk" or "prob"')
    value: Union[int, float, str] = Field(..., description='e.g. -110, "4/1", 0.55')

    @field_validator("format", mode="before")
    @classmethod
    def parse_format(cls, v: object) -> PriceFormat:
        return PriceFormat.parse(v)

    @field_validator("value", mode="before")
    @classmethod
    def reject_booleans(cls, v: object) -> object:
        if isinstance(v, bool):
            raise ValueError("price value must be a number or a string")
        return v

    def to_price(self) -> Price:
        return Price(self.format, self.value)


class EdgeIn(BaseModel):
    """One supposed edge: our fair price against the offered price."""

    label: str = Field(..., min_length=1, max_length=120)
    fair: PriceIn
    offered: PriceIn

    def to_edge(self) -> Edge:
        return Edge(self.label, self.fair.to_price(), self.offered.to_price())


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class StakingRequest(BaseModel):
    """
    Document accepted by every ``edgestake`` sub-command.

    ``iterations``, ``seed`` and ``workers`` are only read by ``sim``.
    """

    edges: list[EdgeIn] = Field(..., min_length=1)
    bankroll: float = Field(DEFAULT_BANKROLL, ge=0, description="Amount available to wager")
    independent: bool = Field(False, description="True = edges are independent events")
    iterations: int = Field(DEFAULT_ITERATIONS, gt=0, description="Monte Carlo trials")
    seed: Optional[int] = Field(None, description="Seed for a reproducible simulation")
    workers: int = Field(1, ge=1, description="Simulation worker threads")

    model_config = {
        "json_schema_extra": {
            "example": {
                "edges": [
                    {"label": "chalk", "fair": {"format": "prob", "value": 0.75},
                     "offered": {"format": "uk", "value": "3/5"}},
                    {"label": "dark", "fair": {"format": "prob", "value": 0.04},
                     "offered": {"format": "uk", "value": "30/1"}},
                ],
                "bankroll": 1000.0,
                "independent": False,
            }
        }
    }

    def to_edges(self) -> list[Edge]:
        return [edge.to_edge() for edge in self.edges]

    def options(self) -> StakingOptions:
        return StakingOptions(bankroll=self.bankroll, independent=self.independent)
