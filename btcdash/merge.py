from __future__ import annotations

from typing import Sequence

import pandas as pd

from .models import AssetSeries, ChartRow, symbols_of


def merge_returns_for_chart(series: Sequence[AssetSeries]) -> list[ChartRow]:
    """Join every asset's points by calendar date into chart rows.

    Only dates on which all assets have a point are kept, so assets that
    trade on different calendars (crypto vs. equities) never leave gaps.
    """
    if not series:
        return []

    returns_by_date: dict[str, dict[str, float]] = {}
    prices_by_date: dict[str, dict[str, float]] = {}
    sma_by_date: dict[str, dict[str, float]] = {}
    ts_by_date: dict[str, int] = {}

    for asset in series:
        for p in asset.returns:
            if p.date not in returns_by_date:
                returns_by_date[p.date] = {}
                prices_by_date[p.date] = {}
                sma_by_date[p.date] = {}
                ts_by_date[p.date] = p.timestamp
            returns_by_date[p.date][asset.symbol] = round(p.return_percent, 2)
            prices_by_date[p.date][asset.symbol] = p.price
            if p.sma_return_percent is not None:
                sma_by_date[p.date][asset.symbol] = round(p.sma_return_percent, 2)

    symbols = symbols_of(series)
    dates = sorted(returns_by_date, key=lambda d: ts_by_date[d])

    return [
        ChartRow(
            date=d,
            timestamp=ts_by_date[d],
            returns=dict(returns_by_date[d]),
            prices=dict(prices_by_date[d]),
            sma=dict(sma_by_date[d]),
        )
        for d in dates
        if all(sym in returns_by_date[d] for sym in symbols)
    ]


def chart_frame(rows: Sequence[ChartRow]) -> pd.DataFrame:
    if not rows:
        return pd.DataFrame(columns=["date", "timestamp"])

    df = pd.DataFrame([r.to_record() for r in rows])
    df.index = pd.to_datetime(df["timestamp"], unit="ms")
    df.index.name = "datetime"
    return df
