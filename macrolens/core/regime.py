"""
Liquidity vs. stress regime scoring.

Five series are z-scored over the dates they all share. Dollar strength, real
yields and bond volatility make up the liquidity score; the USD/INR rate and
equity volatility make up the stress score. Each date gets one of four labels.
"""

import pandas as pd
from ddtrace import tracer

from analysis.models import Regime, RegimePoint
from core.data_processing import transform_data_base
from core.statistics import z_score

REGIME_THRESHOLD = 1.0

LIQUIDITY_COMPONENTS = ("dxy", "real_yield", "move")
STRESS_COMPONENTS = ("usdinr", "vix")


def classify_regime(liquidity_score: float, stress_score: float) -> Regime:
    # High stress on its own stays NEUTRAL
    if liquidity_score < -REGIME_THRESHOLD and stress_score < -REGIME_THRESHOLD:
        return Regime.RISK_ON
    if liquidity_score > REGIME_THRESHOLD and stress_score > REGIME_THRESHOLD:
        return Regime.CRISIS
    if liquidity_score > REGIME_THRESHOLD:
        return Regime.DEFENSIVE
    return Regime.NEUTRAL


def merge_components(components: dict[str, pd.DataFrame]) -> pd.DataFrame:
    """One column per component, one row per date on which every component has a value."""
    columns = {
        name: transform_data_base(df).set_index("Date")["Value"]
        for name, df in components.items()
    }
    merged = pd.concat(columns, axis=1, join="inner")
    return merged.dropna().sort_index()


@tracer.wrap("regime.build_regime")
def build_regime(
    dxy: pd.DataFrame,
    real_yield: pd.DataFrame,
    move: pd.DataFrame,
    usdinr: pd.DataFrame,
    vix: pd.DataFrame,
) -> list[RegimePoint]:
    merged = merge_components(
        {
            "dxy": dxy,
            "real_yield": real_yield,
            "move": move,
            "usdinr": usdinr,
            "vix": vix,
        }
    )
    if merged.empty:
        return []

    scores = {name: z_score(merged[name].to_numpy()) for name in merged.columns}
    liquidity = sum(scores[name] for name in LIQUIDITY_COMPONENTS)
    stress = sum(scores[name] for name in STRESS_COMPONENTS)

    points: list[RegimePoint] = []
    for i, date in enumerate(merged.index):
        points.append(
            RegimePoint(
                date=date.strftime("%Y-%m-%d"),
                liquidity_score=float(liquidity[i]),
                stress_score=float(stress[i]),
                regime=classify_regime(liquidity[i], stress[i]),
            )
        )

    return points
