from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from .models import AssetSeries, CorrelationPair, ReturnPoint


logger = logging.getLogger(__name__)


def daily_returns(returns: Sequence[ReturnPoint]) -> pd.Series:
    """Day-over-day fractional returns, keyed by the later point's date."""
    dates: list[str] = []
    values: list[float] = []
    for prev, curr in zip(returns, returns[1:]):
        prev_factor = 1.0 + prev.return_percent / 100.0
        curr_factor = 1.0 + curr.return_percent / 100.0
        dates.append(curr.date)
        values.append(curr_factor / prev_factor - 1.0 if prev_factor > 0 else 0.0)

    s = pd.Series(values, index=pd.Index(dates, dtype=object), dtype=float)
    return s[~s.index.duplicated(keep="last")]


def std_dev(x: np.ndarray) -> float:
    x = np.asarray(x, dtype=float)
    if x.size == 0:
        return 0.0
    return float(np.sqrt(np.mean((x - x.mean()) ** 2)))


def pearson_correlation(x: np.ndarray, y: np.ndarray) -> float:
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.size == 0 or x.size != y.size:
        return 0.0

    dx = x - x.mean()
    dy = y - y.mean()
    denom = float(np.sqrt(np.sum(dx**2) * np.sum(dy**2)))
    if denom == 0:
        return 0.0
    return float(np.clip(np.sum(dx * dy) / denom, -1.0, 1.0))


def align_daily_returns(series: Sequence[AssetSeries]) -> pd.DataFrame:
    cols = [daily_returns(a.returns) for a in series]
    if not cols:
        return pd.DataFrame()
    aligned = pd.concat(cols, axis=1, join="inner")
    aligned.columns = list(range(len(cols)))
    return aligned


def calculate_correlations(series: Sequence[AssetSeries]) -> list[CorrelationPair]:
    """Pairwise correlations of daily returns with equal-weight variance attribution.

    Contributions are expressed as a percentage of the variance of a portfolio
    holding every asset at weight 1/n: ``w**2 * var`` for each asset and
    ``2 * w**2 * cov`` for each pair. They are left as raw values when the total
    variance is zero.
    """
    n = len(series)
    if n < 2:
        return []

    w = 1.0 / n
    aligned = align_daily_returns(series)
    n_obs = int(aligned.shape[0])
    if n_obs < 2:
        logger.warning("Only %d common dates across %d assets for correlation", n_obs, n)

    vectors = [aligned[i].to_numpy(dtype=float) for i in range(n)]
    stds = [std_dev(v) for v in vectors]

    asset_var = [w * w * sd * sd for sd in stds]
    total = float(sum(asset_var))

    raw: list[tuple[int, int, float, float]] = []
    for i in range(n):
        for j in range(i + 1, n):
            corr = pearson_correlation(vectors[i], vectors[j])
            pair_var = 2.0 * w * w * corr * stds[i] * stds[j]
            total += pair_var
            raw.append((i, j, corr, pair_var))

    scale = 100.0 / total if total > 0 else 1.0
    if total <= 0:
        logger.debug("Total portfolio variance is zero, contributions left unnormalized")

    pairs: list[CorrelationPair] = []
    for i, j, corr, pair_var in raw:
        a, b = series[i], series[j]
        pairs.append(
            CorrelationPair(
                symbol_a=a.symbol,
                symbol_b=b.symbol,
                correlation=corr,
                variance_contribution=pair_var * scale,
                variance_a=asset_var[i] * scale,
                variance_b=asset_var[j] * scale,
                name_a=a.display_name,
                name_b=b.display_name,
                color_a=a.color,
                color_b=b.color,
                observations=n_obs,
            )
        )

    pairs.sort(key=lambda p: abs(p.correlation), reverse=True)
    return pairs


def correlation_matrix(series: Sequence[AssetSeries], pairs: Sequence[CorrelationPair] | None = None) -> pd.DataFrame:
    symbols = [a.symbol for a in series]
    if not symbols:
        return pd.DataFrame()
    if pairs is None:
        pairs = calculate_correlations(series)

    m = pd.DataFrame(np.eye(len(symbols)), index=symbols, columns=symbols, dtype=float)
    for p in pairs:
        m.loc[p.symbol_a, p.symbol_b] = p.correlation
        m.loc[p.symbol_b, p.symbol_a] = p.correlation
    return m


def pairs_frame(pairs: Sequence[CorrelationPair]) -> pd.DataFrame:
    rows = [
        {
            "Asset A": p.name_a or p.symbol_a,
            "Asset B": p.name_b or p.symbol_b,
            "Correlation": p.correlation,
            "Pair variance (%)": p.variance_contribution,
            "A variance (%)": p.variance_a,
            "B variance (%)": p.variance_b,
            "Days": p.observations,
        }
        for p in pairs
    ]
    return pd.DataFrame(rows)
