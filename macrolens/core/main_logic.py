from dataclasses import dataclass

import pandas as pd
from ddtrace import tracer

from analysis.models import CorrelationResult, Pillar, Transform, Trend
from core.data_processing import align_series, empty_series, to_aligned_points
from core.statistics import pearson, pct_change

# Number of most recent samples in each trend window
TREND_WINDOW = 60
# Change in absolute correlation needed to call a trend
TREND_THRESHOLD = 0.1


@dataclass(frozen=True)
class CorrelationPair:
    id: str
    name: str
    description: str
    pillar: Pillar
    series_a: str
    series_b: str
    transform: Transform = Transform.RAW


# Keys refer to the series bundle built in analysis.lib.correlations
CORRELATION_PAIRS: list[CorrelationPair] = [
    # Rates
    CorrelationPair("US10Y_DXY", "US 10Y vs DXY", "Tightening Liquidity Check", Pillar.RATES, "us10y", "dxy", Transform.PCT),
    CorrelationPair("US2Y_FED", "US 2Y vs Fed Funds", "Policy Divergence", Pillar.RATES, "us2y", "fed_funds"),
    CorrelationPair("2S10S_VIX", "2s10s vs VIX", "Recession Risk to Fear", Pillar.RATES, "spread_2s10s", "vix"),
    CorrelationPair("REAL_GOLD", "Real Yield vs Gold", "Valuation Pressure", Pillar.RATES, "real_yield", "gold"),
    # Inflation
    CorrelationPair("BRENT_TIPS", "Brent vs TIPS Breakeven", "Energy Pass-through", Pillar.INFLATION, "brent", "tips"),
    CorrelationPair("BRENT_DXY", "Brent vs DXY", "Global Tightening Stress", Pillar.INFLATION, "brent", "dxy"),
    CorrelationPair("CRB_PMI", "CRB Index vs Global PMI", "Demand Pull check", Pillar.INFLATION, "crb", "global_pmi"),
    # Growth
    CorrelationPair("GLOBAL_COPPER", "Global Growth (CLI) vs Copper", "Industrial Confirmation", Pillar.GROWTH, "global_pmi", "copper"),
    CorrelationPair("CHINA_COPPER", "China Growth (CLI) vs Copper", "China Demand check", Pillar.GROWTH, "china_pmi", "copper"),
    CorrelationPair("US_DXY", "US Growth (CLI) vs DXY", "US Exceptionalism", Pillar.GROWTH, "us_pmi", "dxy"),
    # Risk
    CorrelationPair("VIX_HY", "VIX vs HY Spread", "Equity vs Credit Fear", Pillar.RISK, "vix", "hy_spread"),
    CorrelationPair("MOVE_VIX", "MOVE vs VIX", "Bond leads Equity Stress", Pillar.RISK, "move", "vix"),
    # Public id and name predate the switch of the carry leg to USD/INR
    CorrelationPair("USDJPY_VIX", "USDJPY vs VIX", "Carry Trade Unwind", Pillar.RISK, "usdinr", "vix"),
]


def calculate_trend(aligned: pd.DataFrame) -> tuple[float, Trend]:
    """
    Correlation of the latest window and whether it is gaining or losing strength.

    With TREND_WINDOW samples or fewer the whole sample is correlated and the
    trend is Stable. Otherwise the last window is compared with the window
    right before it.
    """
    n = len(aligned.index)
    if n <= TREND_WINDOW:
        return pearson(aligned["X"], aligned["Y"]), Trend.STABLE

    current = aligned.iloc[-TREND_WINDOW:]
    prior = aligned.iloc[-2 * TREND_WINDOW : -TREND_WINDOW]

    r_current = pearson(current["X"], current["Y"])
    r_prior = pearson(prior["X"], prior["Y"])

    diff = abs(r_current) - abs(r_prior)
    if diff > TREND_THRESHOLD:
        return r_current, Trend.STRENGTHENING
    if diff < -TREND_THRESHOLD:
        return r_current, Trend.WEAKENING
    return r_current, Trend.STABLE


@tracer.wrap("main_logic.add_correlation")
def add_correlation(
    id: str,
    name: str,
    description: str,
    pillar: Pillar,
    series_a: pd.DataFrame,
    series_b: pd.DataFrame,
    transform: Transform = Transform.RAW,
) -> CorrelationResult:
    if transform == Transform.PCT:
        series_a = pct_change(series_a)
        series_b = pct_change(series_b)

    aligned = align_series(series_a, series_b)
    correlation, trend = calculate_trend(aligned)

    return CorrelationResult(
        id=id,
        name=name,
        correlation=correlation,
        trend=trend,
        series=to_aligned_points(aligned),
        description=description,
        pillar=pillar,
    )


@tracer.wrap("main_logic.calculate_correlations")
def calculate_correlations(
    dfs: dict[str, pd.DataFrame],
    pairs: list[CorrelationPair] | None = None,
) -> list[CorrelationResult]:
    if pairs is None:
        pairs = CORRELATION_PAIRS

    results: list[CorrelationResult] = []
    for pair in pairs:
        results.append(
            add_correlation(
                pair.id,
                pair.name,
                pair.description,
                pair.pillar,
                dfs.get(pair.series_a, empty_series()),
                dfs.get(pair.series_b, empty_series()),
                pair.transform,
            )
        )

    return results
