from __future__ import annotations

import logging
from dataclasses import replace
from typing import Mapping, Sequence

import numpy as np
import pandas as pd

from .models import AssetSeries, PricePoint, PriceSeries, ReturnPoint


logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0


def _rebase_value(value: float, base_factor: float) -> float:
    return ((1.0 + value / 100.0) / base_factor - 1.0) * 100.0


def calculate_returns(prices: Sequence[PricePoint], start_index: int = 0) -> list[ReturnPoint]:
    """Percent change of every price relative to the price at ``start_index``."""
    if not prices:
        return []
    if not 0 <= start_index < len(prices):
        raise IndexError(f"start_index {start_index} out of range for {len(prices)} prices")

    start_price = float(prices[start_index].price)
    return [
        ReturnPoint(
            date=p.date,
            timestamp=p.timestamp,
            return_percent=(float(p.price) - start_price) / start_price * 100.0,
            price=float(p.price),
        )
        for p in prices
    ]


def apply_fees(returns: Sequence[ReturnPoint], yearly_fee_percent: float) -> list[ReturnPoint]:
    """Deduct a yearly fee that compounds daily from the first point.

    Every index counts as one calendar day, whatever the sampling interval
    of the series.
    """
    if not returns or yearly_fee_percent == 0:
        return list(returns)

    daily_rate = float(yearly_fee_percent) / 100.0 / DAYS_PER_YEAR
    multipliers = np.power(1.0 - daily_rate, np.arange(len(returns), dtype=float))

    out: list[ReturnPoint] = []
    for p, m in zip(returns, multipliers):
        gross = 1.0 + p.return_percent / 100.0
        out.append(replace(p, return_percent=(gross * float(m) - 1.0) * 100.0))
    return out


def calculate_sma(returns: Sequence[ReturnPoint], window: int) -> list[ReturnPoint]:
    if window < 1:
        raise ValueError("window must be >= 1.")
    if not returns:
        return []

    r = pd.Series([p.return_percent for p in returns], dtype=float)
    sma = r.rolling(window=int(window), min_periods=int(window)).mean()

    return [
        replace(p, sma_return_percent=None if pd.isna(v) else float(v))
        for p, v in zip(returns, sma.to_numpy())
    ]


def rebase_returns(returns: Sequence[ReturnPoint], rebase_index: int) -> list[ReturnPoint]:
    if not returns:
        return []
    if not 0 <= rebase_index < len(returns):
        raise IndexError(f"rebase_index {rebase_index} out of range for {len(returns)} points")

    base_factor = 1.0 + returns[rebase_index].return_percent / 100.0

    out: list[ReturnPoint] = []
    for p in returns:
        sma = p.sma_return_percent
        out.append(
            replace(
                p,
                return_percent=_rebase_value(p.return_percent, base_factor),
                sma_return_percent=None if sma is None else _rebase_value(sma, base_factor),
            )
        )
    return out


def warmup_size(length: int, window: int) -> int:
    return max(0, min(int(window), int(length) - 1))


def trim_warmup(returns: Sequence[ReturnPoint], window: int) -> list[ReturnPoint]:
    """SMA over the full series, rebase at the end of the warm-up, drop the warm-up."""
    if not returns:
        return []

    with_sma = calculate_sma(returns, window)
    start = warmup_size(len(with_sma), window)
    rebased = rebase_returns(with_sma, start)
    return rebased[start:]


def process_asset(series: PriceSeries, yearly_fee_percent: float = 0.0, sma_window: int = 0) -> AssetSeries:
    raw = calculate_returns(series.data)
    adjusted = apply_fees(raw, yearly_fee_percent)
    visible = trim_warmup(adjusted, sma_window) if sma_window > 0 else adjusted
    return AssetSeries(
        symbol=series.symbol,
        display_name=series.display_name,
        color=series.color,
        returns=tuple(visible),
    )


def process_portfolio_returns(
    assets: Sequence[PriceSeries],
    fees: Mapping[str, float] | None = None,
    sma_window: int = 0,
) -> list[AssetSeries]:
    fees = fees or {}
    out: list[AssetSeries] = []
    for a in assets:
        fee = float(fees.get(a.symbol) or 0.0)
        processed = process_asset(a, fee, sma_window)
        logger.debug(
            "processed %s: %d prices -> %d points (fee=%.2f%%, sma=%d)",
            a.symbol,
            len(a.data),
            len(processed.returns),
            fee,
            sma_window,
        )
        out.append(processed)
    return out


def drop_warmup_prices(series: PriceSeries, visible_size: int) -> PriceSeries:
    if visible_size <= 0 or len(series.data) <= visible_size:
        return series
    return replace(series, data=series.data[-int(visible_size):])


def format_return_percent(value: float) -> str:
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def format_price(value: float) -> str:
    if value >= 1000:
        return f"${value:,.2f}"
    return f"${value:.2f}"
