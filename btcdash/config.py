from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass

from .models import AssetSpec


SMA_DAYS = int(os.getenv("BTCDASH_SMA_DAYS", "150"))
DEFAULT_RANGE = os.getenv("BTCDASH_DEFAULT_RANGE", "1Y")
LOG_LEVEL = os.getenv("BTCDASH_LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class RangeConfig:
    key: str
    interval: str
    visible_size: int
    sma_window: int

    @property
    def output_size(self) -> int:
        # warm-up points are fetched on top of the visible range
        return self.visible_size + self.sma_window


_WEEKLY_SMA = math.ceil(SMA_DAYS / 7)

RANGE_CONFIG: dict[str, RangeConfig] = {
    "1W": RangeConfig("1W", "1d", 7, SMA_DAYS),
    "1M": RangeConfig("1M", "1d", 22, SMA_DAYS),
    "3M": RangeConfig("3M", "1d", 66, SMA_DAYS),
    "6M": RangeConfig("6M", "1d", 130, SMA_DAYS),
    "1Y": RangeConfig("1Y", "1d", 252, SMA_DAYS),
    "5Y": RangeConfig("5Y", "1wk", 260, _WEEKLY_SMA),
}


def get_range_config(key: str | None) -> RangeConfig:
    return RANGE_CONFIG.get(key or "", RANGE_CONFIG["1Y"])


PORTFOLIO_ASSETS: list[AssetSpec] = [
    AssetSpec("BTC/USD", "Bitcoin", "#F7931A", "BTC-USD"),
    AssetSpec("MSTR", "MicroStrategy", "#D9232E", "MSTR"),
    AssetSpec("GBTC", "Grayscale BTC Trust", "#6B21A8", "GBTC"),
    AssetSpec("BTC", "Grayscale BTC Mini ETF", "#9333EA", "BTC"),
    AssetSpec("QQQ", "QQQ (Nasdaq)", "#8B5CF6", "QQQ"),
    AssetSpec("SPY", "S&P 500", "#3B82F6", "SPY"),
    AssetSpec("AAPL", "Apple", "#A2AAAD", "AAPL"),
    AssetSpec("MSFT", "Microsoft", "#00A4EF", "MSFT"),
    AssetSpec("AMZN", "Amazon", "#FF9900", "AMZN"),
    AssetSpec("GOOGL", "Alphabet", "#4285F4", "GOOGL"),
    AssetSpec("META", "Meta", "#0668E1", "META"),
    AssetSpec("NVDA", "Nvidia", "#76B900", "NVDA"),
    AssetSpec("TSLA", "Tesla", "#E31937", "TSLA"),
    AssetSpec("GLD", "Gold (GLD)", "#FFD700", "GLD"),
]

DEFAULT_SELECTION = ["BTC/USD", "QQQ", "SPY", "AMZN"]

DEFAULT_FEES: dict[str, float] = {symbol: 0.0 for symbol in DEFAULT_SELECTION}


def asset_by_symbol(symbol: str) -> AssetSpec | None:
    for spec in PORTFOLIO_ASSETS:
        if spec.symbol == symbol:
            return spec
    return None


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
