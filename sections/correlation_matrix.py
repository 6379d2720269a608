from __future__ import annotations

import streamlit as st

from btcdash.charts import make_correlation_heatmap
from btcdash.correlation import calculate_correlations, correlation_matrix, pairs_frame
from btcdash.models import AssetSeries
from btcdash.ui import apply_plotly_style, render_table_report, section_header


def render_correlation_matrix(series: list[AssetSeries]) -> None:
    section_header(
        "Correlation",
        "Pearson correlation of daily returns on common trading days, with an equal-weight variance breakdown.",
    )

    if len(series) < 2:
        st.info("Select at least 2 assets.")
        return

    pairs = calculate_correlations(series)
    if not pairs or pairs[0].observations < 2:
        st.warning("Not enough common trading days to compute correlations.")
        return

    corr = correlation_matrix(series, pairs)
    labels = {s.symbol: s.display_name for s in series}
    fig = make_correlation_heatmap(corr, labels=labels, title="Correlation matrix (daily returns)")
    apply_plotly_style(fig)
    st.plotly_chart(fig, width="stretch")

    st.download_button(
        "Download matrix (CSV)",
        data=corr.to_csv().encode("utf-8"),
        file_name="correlation_matrix.csv",
        mime="text/csv",
        key="corr_export_matrix",
    )

    st.divider()

    df = pairs_frame(pairs)
    render_table_report(
        df,
        formats={
            "Correlation": "{:.2f}",
            "Pair variance (%)": "{:.1f}%",
            "A variance (%)": "{:.1f}%",
            "B variance (%)": "{:.1f}%",
        },
    )
    st.download_button(
        "Download pairs (CSV)",
        data=df.to_csv(index=False).encode("utf-8"),
        file_name="correlation_pairs.csv",
        mime="text/csv",
        key="corr_export_pairs",
    )
    st.caption(
        f"{pairs[0].observations} common days. Variance shares assume every selected asset held at weight 1/{len(series)}."
    )
