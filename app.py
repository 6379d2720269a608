from __future__ import annotations

import logging
import traceback

import streamlit as st

from btcdash.config import (
    DEFAULT_FEES,
    DEFAULT_RANGE,
    DEFAULT_SELECTION,
    PORTFOLIO_ASSETS,
    RANGE_CONFIG,
    asset_by_symbol,
    configure_logging,
    get_range_config,
)
from btcdash.data import MarketDataError, cached_price_points, load_portfolio_data
from btcdash.models import PriceSeries
from btcdash.returns import drop_warmup_prices, process_portfolio_returns
from btcdash.ui import inject_global_css, page_header

from sections.compare import render_compare, render_fee_inputs
from sections.correlation_matrix import render_correlation_matrix


configure_logging()
logger = logging.getLogger("btcdash.app")

st.set_page_config(page_title="BTC Compare Dashboard", layout="wide")
inject_global_css()


def _load_prices(range_key: str, symbols: list[str]) -> list[PriceSeries]:
    specs = [spec for spec in (asset_by_symbol(s) for s in symbols) if spec is not None]
    with st.spinner("Downloading data..."):
        return load_portfolio_data(range_key, specs)


page_header(
    "Portfolio Comparison",
    "Compare Bitcoin against equities and ETFs with custom yearly fee adjustments.",
)

c1, c2, c3 = st.columns([3, 1, 1], vertical_alignment="bottom")
with c1:
    range_keys = list(RANGE_CONFIG.keys())
    range_key = st.radio(
        "Range",
        options=range_keys,
        index=range_keys.index(get_range_config(DEFAULT_RANGE).key),
        horizontal=True,
        key="range",
    )
with c2:
    show_sma = st.toggle("Show SMA", value=True, key="show_sma")
with c3:
    if st.button("Refresh", width="stretch"):
        cached_price_points.clear()

labels = {spec.symbol: spec.display_name for spec in PORTFOLIO_ASSETS}
selected = st.multiselect(
    "Assets",
    options=list(labels.keys()),
    default=DEFAULT_SELECTION,
    format_func=lambda s: labels.get(s, s),
    key="assets",
)

if not selected:
    st.warning("Select at least one asset.")
    st.stop()

cfg = get_range_config(range_key)
fees = render_fee_inputs([asset_by_symbol(s) for s in selected], DEFAULT_FEES)

try:
    try:
        prices = _load_prices(cfg.key, selected)
    except MarketDataError as e:
        logger.warning("Market data unavailable: %s", e)
        st.error(str(e))
        if st.button("Try again"):
            cached_price_points.clear()
            st.rerun()
        st.stop()

    if show_sma:
        series = process_portfolio_returns(prices, fees, sma_window=cfg.sma_window)
    else:
        visible = [drop_warmup_prices(p, cfg.visible_size) for p in prices]
        series = process_portfolio_returns(visible, fees)

    tabs = st.tabs(["Compare", "Correlation"])

    with tabs[0]:
        render_compare(series, fees, cfg)

    with tabs[1]:
        render_correlation_matrix(series)

except Exception as e:
    logger.exception("Dashboard error")
    st.error(f"Dashboard error: {type(e).__name__}: {e}")
    st.code("".join(traceback.format_exc()))
