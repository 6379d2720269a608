import datetime as dt

import numpy as np
import pandas as pd
import pytest

from btcdash import data
from btcdash.config import get_range_config
from btcdash.data import MarketDataError, fetch_price_points, get_portfolio_data, series_to_points
from btcdash.models import AssetSpec


def _frame(n, start="2024-01-01", multi_ticker=None, tz=None):
    idx = pd.date_range(start, periods=n, freq="D", tz=tz)
    close = np.linspace(100.0, 100.0 + n - 1, n)
    if multi_ticker:
        cols = pd.MultiIndex.from_tuples([("Close", multi_ticker), ("Open", multi_ticker)])
        return pd.DataFrame(np.column_stack([close, close - 1]), index=idx, columns=cols)
    return pd.DataFrame({"Close": close, "Open": close - 1}, index=idx)


@pytest.fixture
def fake_download(monkeypatch):
    calls = []

    def install(frame):
        def _download(ticker, **kwargs):
            calls.append((ticker, kwargs))
            return frame

        monkeypatch.setattr(data.yf, "download", _download)
        return calls

    return install


def test_series_to_points_epoch_millis():
    s = pd.Series([1.5, 2.5], index=pd.to_datetime(["2024-01-01", "2024-01-02"]))
    points = series_to_points(s)

    assert [p.date for p in points] == ["2024-01-01", "2024-01-02"]
    assert points[0].timestamp == 1704067200000
    assert points[1].timestamp - points[0].timestamp == 86_400_000
    assert points[1].price == 2.5


def test_series_to_points_timezone_aware_index():
    s = pd.Series([1.0], index=pd.date_range("2024-03-04", periods=1, tz="America/New_York"))
    [point] = series_to_points(s)
    assert point.date == "2024-03-04"


def test_fetch_keeps_last_output_size_points(fake_download):
    calls = fake_download(_frame(300))
    cfg = get_range_config("1W")

    points = fetch_price_points("BTC-USD", "1W")

    assert len(points) == cfg.output_size
    assert points[-1].price == pytest.approx(399.0)
    assert [p.timestamp for p in points] == sorted(p.timestamp for p in points)
    ticker, kwargs = calls[0]
    assert ticker == "BTC-USD"
    assert kwargs["interval"] == "1d"
    assert kwargs["auto_adjust"] is True


def test_fetch_handles_multiindex_columns(fake_download):
    fake_download(_frame(5, multi_ticker="SPY"))
    points = fetch_price_points("SPY", "1M")
    assert [p.price for p in points] == [100.0, 101.0, 102.0, 103.0, 104.0]


def test_fetch_weekly_range_uses_weekly_interval(fake_download):
    calls = fake_download(_frame(10))
    fetch_price_points("QQQ", "5Y")
    assert calls[0][1]["interval"] == "1wk"


def test_fetch_empty_raises(fake_download):
    fake_download(pd.DataFrame())
    with pytest.raises(MarketDataError):
        fetch_price_points("NOPE", "1Y")


def test_fetch_drops_missing_and_non_positive_prices(fake_download):
    frame = _frame(4)
    frame.loc[frame.index[1], "Close"] = np.nan
    frame.loc[frame.index[2], "Close"] = 0.0
    fake_download(frame)

    points = fetch_price_points("X", "1Y")
    assert [p.price for p in points] == [100.0, 103.0]


def test_get_portfolio_data(fake_download):
    calls = fake_download(_frame(20))
    specs = [
        AssetSpec("BTC/USD", "Bitcoin", "#F7931A", "BTC-USD"),
        AssetSpec("AMZN", "Amazon", "#FF9900", "AMZN"),
    ]

    result = get_portfolio_data("1M", specs)

    assert [s.symbol for s in result] == ["BTC/USD", "AMZN"]
    assert [c[0] for c in calls] == ["BTC-USD", "AMZN"]
    assert result[0].display_name == "Bitcoin"
    assert len(result[1].data) == 20


def test_lookback_covers_output_size_in_trading_days():
    today = dt.date(2025, 6, 30)
    daily = get_range_config("1Y")
    weekly = get_range_config("5Y")

    # weekdays minus roughly ten exchange holidays a year must still fill the window
    weekdays = len(pd.bdate_range(data._lookback_start(daily, today), today))
    assert weekdays - 15 >= daily.output_size
    assert (today - data._lookback_start(weekly, today)).days >= weekly.output_size * 7


def test_fetch_duplicate_dates_keep_last(fake_download):
    frame = _frame(3)
    frame.index = pd.DatetimeIndex([frame.index[0], frame.index[1], frame.index[1]])
    fake_download(frame)

    points = fetch_price_points("X", "1M")
    assert [p.price for p in points] == [100.0, 102.0]


@pytest.fixture
def empty_cache():
    data.cached_price_points.clear()
    yield
    data.cached_price_points.clear()


def test_load_portfolio_data_downloads_each_ticker_once(fake_download, empty_cache):
    calls = fake_download(_frame(20))
    btc = AssetSpec("BTC/USD", "Bitcoin", "#F7931A", "BTC-USD")
    amzn = AssetSpec("AMZN", "Amazon", "#FF9900", "AMZN")
    gld = AssetSpec("GLD", "Gold", "#D4AF37", "GLD")

    data.load_portfolio_data("1M", [btc, amzn])
    data.load_portfolio_data("1M", [btc])
    result = data.load_portfolio_data("1M", [btc, amzn, gld])

    assert [c[0] for c in calls] == ["BTC-USD", "AMZN", "GLD"]
    assert [s.symbol for s in result] == ["BTC/USD", "AMZN", "GLD"]
    assert len(result[2].data) == 20


def test_load_portfolio_data_refetches_after_clear(fake_download, empty_cache):
    calls = fake_download(_frame(20))
    btc = AssetSpec("BTC/USD", "Bitcoin", "#F7931A", "BTC-USD")

    data.load_portfolio_data("1M", [btc])
    data.load_portfolio_data("1Y", [btc])
    data.cached_price_points.clear()
    data.load_portfolio_data("1M", [btc])

    assert [(c[0], c[1]["interval"]) for c in calls] == [("BTC-USD", "1d")] * 3
