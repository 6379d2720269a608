from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .merge import chart_frame
from .models import AssetSeries, ChartRow


def make_returns_chart(
    series: Sequence[AssetSeries],
    rows: Sequence[ChartRow],
    title: str = "Return since start of range (%)",
    height: int = 450,
) -> go.Figure:
    fig = go.Figure()
    df = chart_frame(rows)
    if df.empty:
        fig.update_layout(title=title, height=height)
        return fig

    for asset in series:
        sym = asset.symbol
        if sym not in df.columns:
            continue
        price_col = f"{sym}_price"
        fig.add_trace(
            go.Scatter(
                x=df.index,
                y=df[sym],
                mode="lines",
                name=asset.display_name,
                line=dict(width=2, color=asset.color),
                customdata=df[[price_col]].to_numpy() if price_col in df.columns else None,
                hovertemplate=(
                    f"<b>{asset.display_name}</b> $%{{customdata[0]:,.2f}} (%{{y:+.2f}}%)<extra></extra>"
                    if price_col in df.columns
                    else f"<b>{asset.display_name}</b> %{{y:+.2f}}%<extra></extra>"
                ),
            )
        )
        sma_col = f"{sym}_sma"
        if sma_col in df.columns:
            fig.add_trace(
                go.Scatter(
                    x=df.index,
                    y=df[sma_col],
                    mode="lines",
                    name=f"{asset.display_name} SMA",
                    line=dict(width=1.2, color=asset.color, dash="dash"),
                    opacity=0.6,
                    showlegend=False,
                    hoverinfo="skip",
                )
            )

    fig.add_hline(y=0.0, line=dict(color="#9CA3AF", width=1, dash="dot"))
    fig.update_layout(
        title=title,
        height=height,
        margin=dict(l=10, r=10, t=40, b=10),
        yaxis=dict(ticksuffix="%"),
    )
    return fig


def make_correlation_heatmap(corr: pd.DataFrame, labels: dict[str, str] | None = None, title: str = "") -> go.Figure:
    names = [labels.get(c, c) for c in corr.columns] if labels else list(corr.columns)
    z = corr.to_numpy(dtype=float)
    texts = np.vectorize(lambda x: "—" if not np.isfinite(x) else f"{x:.2f}")(z) if z.size else z

    fig = go.Figure(
        data=go.Heatmap(
            z=z,
            x=names,
            y=names,
            zmin=-1.0,
            zmax=1.0,
            colorscale=[[0.0, "#b2182b"], [0.5, "#ffffff"], [1.0, "#1a9641"]],
            colorbar=dict(title="Correlation", tickformat=".2f"),
            text=texts,
            texttemplate="%{text}",
            xgap=2,
            ygap=2,
            hovertemplate="A: %{y}<br>B: %{x}<br>Correlation: %{z:.2f}<extra></extra>",
        )
    )
    fig.update_layout(
        title=title,
        xaxis=dict(tickangle=45, constrain="domain"),
        yaxis=dict(autorange="reversed", scaleanchor="x", scaleratio=1),
        margin=dict(l=10, r=10, t=50, b=10),
        height=max(420, 52 * len(names)),
    )
    return fig
