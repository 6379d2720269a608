from __future__ import annotations

import pandas as pd
import streamlit as st

from btcdash.charts import make_returns_chart
from btcdash.config import RangeConfig
from btcdash.merge import merge_returns_for_chart
from btcdash.models import AssetSeries, AssetSpec
from btcdash.returns import format_price
from btcdash.ui import apply_plotly_style, panel, render_table_report, return_card, section_header


def render_fee_inputs(assets: list[AssetSpec], defaults: dict[str, float]) -> dict[str, float]:
    fees: dict[str, float] = {}
    with panel("Yearly fees (%)"):
        cols = st.columns(4)
        for i, spec in enumerate(assets):
            with cols[i % 4]:
                fees[spec.symbol] = float(
                    st.number_input(
                        spec.display_name,
                        min_value=0.0,
                        max_value=100.0,
                        value=float(defaults.get(spec.symbol, 0.0)),
                        step=0.01,
                        format="%.2f",
                        key=f"fee_{spec.symbol}",
                    )
                )
    return fees


def _last_prices_table(series: list[AssetSeries]) -> pd.DataFrame:
    rows = []
    for s in series:
        if not s.returns:
            continue
        first, last = s.returns[0], s.returns[-1]
        rows.append(
            {
                "Asset": s.display_name,
                "From": first.date,
                "To": last.date,
                "Last price": format_price(last.price),
                "Return": last.return_percent,
            }
        )
    return pd.DataFrame(rows)


def render_compare(series: list[AssetSeries], fees: dict[str, float], cfg: RangeConfig) -> None:
    section_header(
        "Portfolio comparison",
        f"Returns over {cfg.key} net of yearly fees, on dates every selected asset traded.",
    )

    rows = merge_returns_for_chart(series)
    if not rows:
        st.info("No common dates across the selected assets.")
        return

    fig = make_returns_chart(series, rows)
    apply_plotly_style(fig)
    st.plotly_chart(fig, width="stretch")

    if any(s.has_sma for s in series):
        st.caption(f"Dashed lines: {cfg.sma_window}-point simple moving average of returns.")

    cols = st.columns(4)
    for i, s in enumerate(series):
        with cols[i % 4]:
            return_card(s.display_name, s.last_return, f"Fee: {fees.get(s.symbol, 0.0):g}% / year", s.color)

    table = _last_prices_table(series)
    if not table.empty:
        section_header("Summary")
        render_table_report(table, formats={"Return": "{:+.2f}%"}, numeric_cols=["Last price", "Return"])

    st.download_button(
        "Download chart data (CSV)",
        data=pd.DataFrame([r.to_record() for r in rows]).to_csv(index=False).encode("utf-8"),
        file_name=f"returns_{cfg.key}.csv",
        mime="text/csv",
        key="compare_export",
    )
