import datetime as dt

import pytest

from btcdash.models import AssetSeries, PricePoint, PriceSeries
from btcdash.returns import calculate_returns


def make_points(prices, start="2024-01-01", step_days=1, skip_weekends=False):
    day = dt.date.fromisoformat(start)
    points = []
    for price in prices:
        while skip_weekends and day.weekday() >= 5:
            day += dt.timedelta(days=1)
        stamp = dt.datetime(day.year, day.month, day.day, tzinfo=dt.timezone.utc)
        points.append(PricePoint(day.isoformat(), int(stamp.timestamp() * 1000), float(price)))
        day += dt.timedelta(days=step_days)
    return points


def make_asset(symbol, prices, **kwargs):
    return AssetSeries(symbol, symbol.title(), "#000000", calculate_returns(make_points(prices, **kwargs)))


@pytest.fixture
def btc_prices():
    return make_points([100, 110, 121])


@pytest.fixture
def amzn_prices():
    return make_points([50, 49, 53])


@pytest.fixture
def btc_series(btc_prices):
    return PriceSeries("BTC", "Bitcoin", "#F7931A", btc_prices)


@pytest.fixture
def amzn_series(amzn_prices):
    return PriceSeries("AMZN", "Amazon", "#FF9900", amzn_prices)
