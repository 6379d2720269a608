import pytest

from btcdash.merge import chart_frame, merge_returns_for_chart
from btcdash.models import AssetSeries
from btcdash.returns import calculate_sma, process_portfolio_returns
from conftest import make_asset


def test_merge_two_assets_on_shared_dates(btc_series, amzn_series):
    series = process_portfolio_returns([btc_series, amzn_series])
    rows = merge_returns_for_chart(series)

    assert len(rows) == 3
    for row in rows:
        rec = row.to_record()
        for key in ("date", "timestamp", "BTC", "BTC_price", "AMZN", "AMZN_price"):
            assert key in rec
        assert "BTC_sma" not in rec

    assert [r.returns["BTC"] for r in rows] == [0.0, 10.0, 21.0]
    assert [r.returns["AMZN"] for r in rows] == [0.0, -2.0, 6.0]
    assert rows[2].prices == {"BTC": 121.0, "AMZN": 53.0}


def test_merge_empty():
    assert merge_returns_for_chart([]) == []


def test_merge_keeps_only_common_calendar_dates():
    # continuous crypto calendar vs weekday-only equity calendar
    crypto = make_asset("btc", [100 + i for i in range(14)], start="2024-01-01")
    equity = make_asset("spy", [400 + i for i in range(10)], start="2024-01-01", skip_weekends=True)

    rows = merge_returns_for_chart([crypto, equity])
    crypto_dates = {p.date for p in crypto.returns}
    equity_dates = {p.date for p in equity.returns}

    assert len(rows) == 10
    for row in rows:
        assert row.date in crypto_dates
        assert row.date in equity_dates
    assert "2024-01-06" not in [r.date for r in rows]


def test_merge_sorted_by_timestamp():
    a = make_asset("a", [1, 2, 3, 4])
    shuffled = AssetSeries("b", "B", "#fff", tuple(reversed(make_asset("b", [5, 6, 7, 8]).returns)))

    rows = merge_returns_for_chart([shuffled, a])
    stamps = [r.timestamp for r in rows]
    assert stamps == sorted(stamps)


def test_merge_rounds_returns_and_sma():
    asset = make_asset("x", [3, 4, 5])
    with_sma = AssetSeries("x", "X", "#fff", calculate_sma(asset.returns, 2))

    rows = merge_returns_for_chart([with_sma])

    assert rows[1].returns["x"] == pytest.approx(33.33)
    assert rows[1].prices["x"] == 4.0
    assert "x" not in rows[0].sma
    assert rows[1].sma["x"] == pytest.approx(16.67)
    assert rows[2].to_record()["x_sma"] == pytest.approx(50.0)


def test_merge_asset_without_points_yields_nothing(btc_series):
    [btc] = process_portfolio_returns([btc_series])
    assert merge_returns_for_chart([btc, AssetSeries("E", "Empty", "#000")]) == []


def test_chart_frame_columns(btc_series, amzn_series):
    rows = merge_returns_for_chart(process_portfolio_returns([btc_series, amzn_series]))
    df = chart_frame(rows)

    assert list(df["date"]) == [r.date for r in rows]
    assert {"BTC", "BTC_price", "AMZN", "AMZN_price"} <= set(df.columns)
    assert df.index.is_monotonic_increasing


def test_chart_frame_empty():
    assert chart_frame([]).empty


def test_chart_rows_are_read_only(btc_series, amzn_series):
    rows = merge_returns_for_chart(process_portfolio_returns([btc_series, amzn_series]))

    with pytest.raises(TypeError):
        rows[0].returns["BTC"] = 99.0
    with pytest.raises(TypeError):
        rows[0].prices["BTC"] = 1.0
    assert rows[0].returns["BTC"] == 0.0
    assert hash(rows[0]) == hash(merge_returns_for_chart(process_portfolio_returns([btc_series, amzn_series]))[0])
