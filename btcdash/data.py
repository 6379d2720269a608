from __future__ import annotations

import datetime as dt
import logging
from typing import Sequence

import pandas as pd
import streamlit as st
import yfinance as yf

from .config import PORTFOLIO_ASSETS, RangeConfig, get_range_config
from .models import AssetSpec, PricePoint, PriceSeries


logger = logging.getLogger(__name__)


class MarketDataError(RuntimeError):
    pass


def _close_series(df: pd.DataFrame) -> pd.Series:
    close = df["Close"]
    # single-ticker downloads still come back with a (field, ticker) column MultiIndex
    if isinstance(close, pd.DataFrame):
        close = close.iloc[:, 0]

    close = close.loc[~close.index.duplicated(keep="last")].sort_index()
    close = pd.to_numeric(close, errors="coerce").dropna().astype(float)
    return close[close > 0]


def _lookback_start(cfg: RangeConfig, today: dt.date | None = None) -> dt.date:
    today = today or dt.date.today()
    if cfg.interval == "1wk":
        return today - dt.timedelta(weeks=cfg.output_size + 4)
    # trading days are roughly 5 of every 7 calendar days
    return today - dt.timedelta(days=int(cfg.output_size * 7 / 5) + 45)


def series_to_points(s: pd.Series) -> list[PricePoint]:
    points: list[PricePoint] = []
    for ts, price in s.items():
        stamp = pd.Timestamp(ts)
        if stamp.tzinfo is not None:
            stamp = stamp.tz_convert("UTC").tz_localize(None)
        points.append(
            PricePoint(
                date=stamp.strftime("%Y-%m-%d"),
                timestamp=int(stamp.value // 1_000_000),
                price=float(price),
            )
        )
    return points


def fetch_price_points(ticker: str, range_key: str | None = None) -> list[PricePoint]:
    cfg = get_range_config(range_key)
    start = _lookback_start(cfg)

    logger.info("Fetching %s (%s, interval=%s, %d points)", ticker, cfg.key, cfg.interval, cfg.output_size)
    df = yf.download(
        ticker,
        start=start.isoformat(),
        interval=cfg.interval,
        auto_adjust=True,
        progress=False,
        actions=False,
        threads=False,
    )
    if df is None or len(df) == 0:
        raise MarketDataError(f"No price data returned for {ticker}")

    s = _close_series(df)
    if s.empty:
        raise MarketDataError(f"No usable closing prices for {ticker}")

    return series_to_points(s.iloc[-cfg.output_size :])


def get_portfolio_data(
    range_key: str | None = None,
    assets: Sequence[AssetSpec] | None = None,
) -> list[PriceSeries]:
    specs = list(assets) if assets is not None else PORTFOLIO_ASSETS
    out: list[PriceSeries] = []
    for spec in specs:
        points = fetch_price_points(spec.ticker, range_key)
        out.append(PriceSeries(spec.symbol, spec.display_name, spec.color, tuple(points)))
    return out


@st.cache_data(show_spinner=False)
def cached_price_points(ticker: str, range_key: str) -> list[PricePoint]:
    return fetch_price_points(ticker, range_key)


def load_portfolio_data(range_key: str, assets: Sequence[AssetSpec]) -> list[PriceSeries]:
    """Like get_portfolio_data, but each ticker is downloaded once per range until the cache is cleared."""
    return [
        PriceSeries(spec.symbol, spec.display_name, spec.color, tuple(cached_price_points(spec.ticker, range_key)))
        for spec in assets
    ]
