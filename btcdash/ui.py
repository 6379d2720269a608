from __future__ import annotations

import html
from contextlib import contextmanager
from typing import Any, Iterator

import pandas as pd
import streamlit as st

from .plotly_theme import register_theme
from .returns import format_return_percent

TEMPLATE = register_theme()

UI = {
    "primary": "#F7931A",
    "text": "#111827",
    "muted": "#6B7280",
    "bg": "#F5F5F4",
    "panel": "#FFFFFF",
    "border": "#E5E7EB",
    "shadow": "rgba(15,23,42,0.08)",
    "success": "#16A34A",
    "danger": "#DC2626",
}


def inject_global_css() -> None:
    st.markdown(
        f"""
<style>
.stApp {{ background: {UI["bg"]}; }}
.block-container {{ padding-top: 0.8rem !important; padding-bottom: 2rem !important; }}

.ui-page-title {{
  font-size: 34px;
  font-weight: 850;
  letter-spacing: -0.02em;
  color: {UI["text"]};
  margin: 0 0 4px 0;
}}
.ui-page-subtitle {{ font-size: 15px; color: {UI["muted"]}; margin: 0 0 16px 0; }}

.ui-section-title {{ font-size: 18px; font-weight: 800; color: {UI["text"]}; margin: 14px 0 4px 0; }}
.ui-section-subtitle {{ font-size: 13px; color: {UI["muted"]}; margin: 0 0 10px 0; }}
.ui-accent {{
  display: inline-block;
  width: 10px;
  height: 10px;
  border-radius: 50%;
  background: {UI["primary"]};
  margin-right: 10px;
}}

.ui-panel {{
  background: {UI["panel"]};
  border: 1px solid {UI["border"]};
  border-radius: 14px;
  padding: 14px 16px;
  margin: 12px 0;
}}
.ui-panel-title {{ font-size: 14px; font-weight: 700; color: {UI["text"]}; margin: 0 0 8px 0; }}

.ui-kpi {{
  background: {UI["panel"]};
  border: 1px solid {UI["border"]};
  border-radius: 14px;
  padding: 12px 14px;
  box-shadow: 0 10px 24px {UI["shadow"]};
}}
.ui-kpi-label {{ font-size: 13px; font-weight: 700; color: {UI["text"]}; }}
.ui-kpi-comment {{ font-size: 12px; color: {UI["muted"]}; }}
.ui-kpi-value {{ font-size: 20px; font-weight: 800; }}
.ui-pos {{ color: {UI["success"]}; }}
.ui-neg {{ color: {UI["danger"]}; }}

table.ui-report {{ border-collapse: collapse; font-size: 13px; white-space: nowrap; margin: 8px 0 16px 0; }}
table.ui-report thead th {{
  text-align: left;
  color: {UI["muted"]};
  padding: 8px 12px;
  border-bottom: 1px solid {UI["border"]};
}}
table.ui-report tbody td {{ padding: 8px 12px; border-bottom: 1px solid {UI["border"]}; }}
table.ui-report td.num {{ text-align: right; font-variant-numeric: tabular-nums; }}
</style>
        """,
        unsafe_allow_html=True,
    )


def page_header(title: str, subtitle: str | None = None) -> None:
    st.markdown(f"<div class='ui-page-title'>{html.escape(title)}</div>", unsafe_allow_html=True)
    if subtitle:
        st.markdown(f"<div class='ui-page-subtitle'>{html.escape(subtitle)}</div>", unsafe_allow_html=True)


def section_header(title: str, subtitle: str | None = None) -> None:
    st.markdown(
        f"<div class='ui-section-title'><span class='ui-accent'></span>{html.escape(title)}</div>",
        unsafe_allow_html=True,
    )
    if subtitle:
        st.markdown(f"<div class='ui-section-subtitle'>{html.escape(subtitle)}</div>", unsafe_allow_html=True)


@contextmanager
def panel(title: str | None = None) -> Iterator[None]:
    head = f"<div class='ui-panel-title'>{html.escape(title)}</div>" if title else ""
    st.markdown(f"<div class='ui-panel'>{head}", unsafe_allow_html=True)
    try:
        yield
    finally:
        st.markdown("</div>", unsafe_allow_html=True)


def return_card(label: str, value: float, comment: str, color: str) -> None:
    cls = "ui-pos" if value >= 0 else "ui-neg"
    st.markdown(
        f"""
<div class="ui-kpi" style="border-left: 4px solid {html.escape(color)};">
  <div class="ui-kpi-label">{html.escape(label)}</div>
  <div class="ui-kpi-comment">{html.escape(comment)}</div>
  <div class="ui-kpi-value {cls}">{format_return_percent(value)}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def render_table_report(
    df: pd.DataFrame,
    *,
    formats: dict[str, str] | None = None,
    numeric_cols: list[str] | None = None,
) -> None:
    _df = df.copy()
    if formats:
        for col, fmt in formats.items():
            if col in _df.columns:
                _df[col] = _df[col].map(lambda x: fmt.format(x) if pd.notna(x) else "")

    if numeric_cols is None:
        numeric_cols = [c for c in df.columns if pd.api.types.is_numeric_dtype(df[c])]

    cols = list(_df.columns)
    thead = "<thead><tr>" + "".join(f"<th>{html.escape(str(c))}</th>" for c in cols) + "</tr></thead>"
    body = []
    for _, row in _df.iterrows():
        tds = []
        for c in cols:
            v = row[c]
            cls = "num" if c in numeric_cols else ""
            tds.append(f"<td class='{cls}'>{html.escape('' if pd.isna(v) else str(v))}</td>")
        body.append("<tr>" + "".join(tds) + "</tr>")

    st.markdown(
        f"<table class='ui-report'>{thead}<tbody>{''.join(body)}</tbody></table>",
        unsafe_allow_html=True,
    )


def apply_plotly_style(fig: Any) -> None:
    fig.update_layout(
        template=TEMPLATE,
        hovermode="x unified",
        hoverlabel=dict(bgcolor="white", bordercolor=UI["primary"], font=dict(color=UI["text"], size=13)),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0.0),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
