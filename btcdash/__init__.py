# btcdash/__init__.py
from .models import AssetSeries, ChartRow, CorrelationPair, PricePoint, PriceSeries, ReturnPoint
from .returns import (
    calculate_returns,
    apply_fees,
    calculate_sma,
    rebase_returns,
    trim_warmup,
    process_portfolio_returns,
    format_return_percent,
)
from .merge import merge_returns_for_chart, chart_frame
from .correlation import calculate_correlations, correlation_matrix
