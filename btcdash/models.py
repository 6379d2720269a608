from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping


@dataclass(frozen=True)
class AssetSpec:
    symbol: str
    display_name: str
    color: str
    ticker: str


@dataclass(frozen=True)
class PricePoint:
    date: str
    timestamp: int
    price: float


@dataclass(frozen=True)
class ReturnPoint:
    date: str
    timestamp: int
    return_percent: float
    price: float
    sma_return_percent: float | None = None


@dataclass(frozen=True)
class PriceSeries:
    """Raw chronological prices for one instrument, as fetched."""

    symbol: str
    display_name: str
    color: str
    data: tuple[PricePoint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", tuple(self.data))


@dataclass(frozen=True)
class AssetSeries:
    symbol: str
    display_name: str
    color: str
    returns: tuple[ReturnPoint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "returns", tuple(self.returns))

    @property
    def last_return(self) -> float:
        return self.returns[-1].return_percent if self.returns else 0.0

    @property
    def has_sma(self) -> bool:
        return any(p.sma_return_percent is not None for p in self.returns)


@dataclass(frozen=True)
class CorrelationPair:
    symbol_a: str
    symbol_b: str
    correlation: float
    variance_contribution: float
    variance_a: float
    variance_b: float
    name_a: str = ""
    name_b: str = ""
    color_a: str = ""
    color_b: str = ""
    observations: int = 0


@dataclass(frozen=True)
class ChartRow:
    """One merged chart row: every asset's values on a single calendar date.

    The per-asset mappings are read-only views, so a built row cannot be changed.
    """

    date: str
    timestamp: int
    returns: Mapping[str, float] = field(default_factory=dict)
    prices: Mapping[str, float] = field(default_factory=dict)
    sma: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("returns", "prices", "sma"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    def __hash__(self) -> int:
        return hash(
            (
                self.date,
                self.timestamp,
                tuple(self.returns.items()),
                tuple(self.prices.items()),
                tuple(self.sma.items()),
            )
        )

    def to_record(self) -> dict[str, str | int | float]:
        rec: dict[str, str | int | float] = {"date": self.date, "timestamp": self.timestamp}
        rec.update(self.returns)
        rec.update({f"{sym}_price": v for sym, v in self.prices.items()})
        rec.update({f"{sym}_sma": v for sym, v in self.sma.items()})
        return rec


def symbols_of(series: Iterable[AssetSeries]) -> list[str]:
    return [s.symbol for s in series]
