"""Price and edge data types plus the injectable price-converter contract.

The staking engine never parses odds itself.  Every service accepts a
:class:`PriceConverter` and asks it for exactly two things: the fair win
probability of an edge and the decimal payout of its offered price.  This
enables:

* **Unit testing** — inject a fake converter that returns fixed numbers
  without touching any odds-format parsing.
* **Format extension** — support an exotic house format by subclassing
  :class:`PriceConverter` without modifying the engine.

Design choices
--------------
* :class:`PriceConverter` is an abstract base class rather than a
  ``typing.Protocol`` so that converter authors inherit the helper methods
  (:meth:`~PriceConverter.probability`, :meth:`~PriceConverter.decimal`)
  and only implement :meth:`~PriceConverter.convert`.
* :class:`Price`, :class:`Edge` and :class:`TaggedAmount` are frozen so a
  list of them can be shared between ``kelly``, ``arb`` and ``sim_win``
  calls without defensive copies.

Run tests with::

    pytest tests/test_price.py -v
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator

from edgestake.core import odds_math


# ---------------------------------------------------------------------------
# Price formats
# ---------------------------------------------------------------------------


class PriceFormat(str, Enum):
    """Supported ways of quoting a price."""

    PROBABILITY = "prob"
    MONEYLINE = "us"
    DECIMAL = "eu"
    FRACTIONAL = "uk"
    HONG_KONG = "hk"
    INDONESIAN = "id"
    MALAYSIAN = "my"

    @classmethod
    def parse(cls, fmt: PriceFormat | str) -> PriceFormat:
        """Accept an enum member, its tag (``"us"``) or its name (``"moneyline"``)."""
        if isinstance(fmt, PriceFormat):
            return fmt
        key = str(fmt).strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise ValueError(
            f"Unknown price format {fmt!r}; expected one of "
            f"{', '.join(m.value for m in cls)}."
        )


# ---------------------------------------------------------------------------
# Data transfer objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Price:
    """A single tagged price value.

    Examples::

        Price.prob(0.50)
        Price.us("+120")
        Price.eu(2.25)
        Price.uk("4/1")
    """

    format: PriceFormat
    value: float | int | str

    def __post_init__(self) -> None:
        object.__setattr__(self, "format", PriceFormat.parse(self.format))

    @classmethod
    def prob(cls, value: float | str) -> Price:
        return cls(PriceFormat.PROBABILITY, value)

    @classmethod
    def us(cls, value: float | int | str) -> Price:
        return cls(PriceFormat.MONEYLINE, value)

    @classmethod
    def eu(cls, value: float | str) -> Price:
        return cls(PriceFormat.DECIMAL, value)

    @classmethod
    def uk(cls, value: float | int | str) -> Price:
        return cls(PriceFormat.FRACTIONAL, value)

    @classmethod
    def hk(cls, value: float | str) -> Price:
        return cls(PriceFormat.HONG_KONG, value)

    @classmethod
    def id(cls, value: float | str) -> Price:
        return cls(PriceFormat.INDONESIAN, value)

    @classmethod
    def my(cls, value: float | str) -> Price:
        return cls(PriceFormat.MALAYSIAN, value)

    def __str__(self) -> str:
        return f"{self.format.value}:{self.value}"


@dataclass(frozen=True, slots=True)
class Edge:
    """A supposed advantage wagering situation.

    Attributes:
        label: Edge description, carried through to every result.
        fair: The estimate of the fair (actual) odds of winning.
        offered: The odds offered by the counter-party to the wager.
    """

    label: str
    fair: Price
    offered: Price


@dataclass(frozen=True, slots=True)
class TaggedAmount:
    """A number tagged with its edge label to make collating results easier.

    Unpacks like a pair::

        label, amount = TaggedAmount("chalk", 75.0)
    """

    label: str
    amount: float

    def __iter__(self) -> Iterator[str | float]:
        yield self.label
        yield self.amount


@dataclass(frozen=True, slots=True)
class ArbitragePlan:
    """Stakes on each mutually exclusive outcome and the locked-in profit."""

    sizes: list[TaggedAmount] = field(default_factory=list)
    profit: float = 0.0

    @property
    def total_staked(self) -> float:
        return sum(s.amount for s in self.sizes)


# ---------------------------------------------------------------------------
# Converter contract
# ---------------------------------------------------------------------------


class PriceConverter(ABC):
    """Contract every price converter must satisfy.

    Implementations must be pure: the same ``(value, from, to)`` always
    yields the same number and nothing is mutated.  Errors for prices that
    cannot be read are raised as-is; the staking engine does not catch them.
    """

    @abstractmethod
    def convert(
        self,
        value: float | int | str,
        from_format: PriceFormat,
        to_format: PriceFormat,
    ) -> float:
        """Convert ``value`` quoted in ``from_format`` into ``to_format``."""

    def probability(self, price: Price) -> float:
        """Probability implied by ``price`` (fair or vig-inclusive)."""
        return self.convert(price.value, price.format, PriceFormat.PROBABILITY)

    def decimal(self, price: Price) -> float:
        """Decimal payout multiplier of ``price``."""
        return self.convert(price.value, price.format, PriceFormat.DECIMAL)


_TO_DECIMAL: dict[PriceFormat, Callable[[float | int | str], float]] = {
    PriceFormat.PROBABILITY: odds_math.probability_to_decimal,
    PriceFormat.MONEYLINE: odds_math.american_to_decimal,
    PriceFormat.DECIMAL: odds_math.parse_decimal,
    PriceFormat.FRACTIONAL: odds_math.fractional_to_decimal,
    PriceFormat.HONG_KONG: odds_math.hongkong_to_decimal,
    PriceFormat.INDONESIAN: odds_math.indonesian_to_decimal,
    PriceFormat.MALAYSIAN: odds_math.malaysian_to_decimal,
}

_FROM_DECIMAL: dict[PriceFormat, Callable[[float], float]] = {
    PriceFormat.PROBABILITY: odds_math.decimal_to_probability,
    PriceFormat.MONEYLINE: odds_math.decimal_to_american,
    PriceFormat.DECIMAL: float,
    PriceFormat.FRACTIONAL: odds_math.decimal_to_fractional,
    PriceFormat.HONG_KONG: odds_math.decimal_to_fractional,
    PriceFormat.INDONESIAN: odds_math.decimal_to_indonesian,
    PriceFormat.MALAYSIAN: odds_math.decimal_to_malaysian,
}


class OddsConverter(PriceConverter):
    """Default converter routing every format through decimal odds.

    Converting a format to itself returns the parsed number, so
    ``convert(0.55, "prob", "prob")`` is exactly ``0.55``.
    """

    def convert(
        self,
        value: float | int | str,
        from_format: PriceFormat | str,
        to_format: PriceFormat | str,
    ) -> float:
        try:
            src = PriceFormat.parse(from_format)
            dst = PriceFormat.parse(to_format)
        except ValueError as exc:
            raise odds_math.OddsConversionError(str(exc)) from None

        # Always parse through the hub so invalid values fail the same way.
        decimal_odds = _TO_DECIMAL[src](value)
        if dst is PriceFormat.DECIMAL:
            return decimal_odds
        if src is dst and not isinstance(value, str):
            return float(value)
        if (
            src is dst
            and src is not PriceFormat.FRACTIONAL
            and not odds_math.is_even_money(value)
        ):
            return odds_math.to_number(value, src.name.lower())
        return _FROM_DECIMAL[dst](decimal_odds)


#: Shared stateless converter used when callers do not inject one.
DEFAULT_CONVERTER: PriceConverter = OddsConverter()


# ---------------------------------------------------------------------------
# Normalised edges
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PricedEdge:
    """An :class:`Edge` with both prices already normalised to numbers.

    Attributes:
        index: Position of the edge in the caller's input list.
        label: The edge description.
        probability: Fair win probability, from ``edge.fair``.
        decimal_odds: Payout multiplier per unit staked, from ``edge.offered``.
    """

    index: int
    label: str
    probability: float
    decimal_odds: float

    @property
    def expectation(self) -> float:
        """Expected return per unit staked (``> 1`` means positive EV)."""
        return self.probability * self.decimal_odds


def price_edges(edges: list[Edge], converter: PriceConverter) -> list[PricedEdge]:
    """Normalise every edge once, keeping input order and positions."""
    return [
        PricedEdge(
            index=i,
            label=edge.label,
            probability=converter.probability(edge.fair),
            decimal_odds=converter.decimal(edge.offered),
        )
        for i, edge in enumerate(edges)
    ]
