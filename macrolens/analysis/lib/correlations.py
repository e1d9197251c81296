import logging
from datetime import date, timedelta

import pandas as pd
from django.conf import settings

from analysis.lib.fetch import (
    FRED_SERIES,
    MARKET_SYMBOLS,
    MarketDataClient,
    SeriesRequest,
    Source,
)
from analysis.models import CorrelationPayload, DataPoint
from core.data_processing import spread, to_frame
from core.main_logic import calculate_correlations
from core.regime import build_regime

logger = logging.getLogger(__name__)

# Number of regime points sent back for the matrix chart
REGIME_MATRIX_POINTS = 60

CORRELATION_INPUTS: dict[str, SeriesRequest] = {
    "us10y": SeriesRequest(Source.FRED, FRED_SERIES["US_10Y"]),
    "us2y": SeriesRequest(Source.FRED, FRED_SERIES["US_2Y"]),
    "fed_funds": SeriesRequest(Source.FRED, FRED_SERIES["FED_FUNDS"]),
    "fred_dxy": SeriesRequest(Source.FRED, FRED_SERIES["DXY"]),
    "hy_spread": SeriesRequest(Source.FRED, FRED_SERIES["HY_SPREAD"]),
    "tips": SeriesRequest(Source.FRED, FRED_SERIES["TIPS_BREAKEVEN"]),
    "global_pmi": SeriesRequest(Source.FRED, FRED_SERIES["GLOBAL_PMI"]),
    "us_pmi": SeriesRequest(Source.FRED, FRED_SERIES["US_PMI"]),
    "china_pmi": SeriesRequest(Source.FRED, FRED_SERIES["CHINA_PMI"]),
    "brent": SeriesRequest(Source.YAHOO, MARKET_SYMBOLS["BRENT_OIL"]),
    "gold": SeriesRequest(Source.YAHOO, MARKET_SYMBOLS["GOLD"]),
    "copper": SeriesRequest(Source.YAHOO, MARKET_SYMBOLS["COPPER"]),
    "crb": SeriesRequest(Source.YAHOO, MARKET_SYMBOLS["CRB_INDEX"]),
    "vix": SeriesRequest(Source.YAHOO, MARKET_SYMBOLS["VIX"]),
    "move": SeriesRequest(Source.YAHOO, MARKET_SYMBOLS["MOVE_INDEX"]),
    "usdinr": SeriesRequest(Source.YAHOO, MARKET_SYMBOLS["USDINR"]),
    "yahoo_dxy": SeriesRequest(Source.YAHOO, MARKET_SYMBOLS["DXY"]),
}


def select_dollar_index(
    yahoo_dxy: list[DataPoint], fred_dxy: list[DataPoint]
) -> list[DataPoint]:
    """Use the longer of the two dollar index histories, FRED on a tie."""
    if len(yahoo_dxy) > len(fred_dxy):
        return yahoo_dxy
    if fred_dxy:
        return fred_dxy
    return yahoo_dxy


def build_series_bundle(raw: dict[str, list[DataPoint]]) -> dict[str, pd.DataFrame]:
    """Dataframes for every correlation input, including the derived spreads."""
    dfs = {
        key: to_frame(raw.get(key, []))
        for key in CORRELATION_INPUTS
        if key not in ("yahoo_dxy", "fred_dxy")
    }
    dfs["dxy"] = to_frame(
        select_dollar_index(raw.get("yahoo_dxy", []), raw.get("fred_dxy", []))
    )
    dfs["spread_2s10s"] = spread(dfs["us10y"], dfs["us2y"])
    dfs["real_yield"] = spread(dfs["us10y"], dfs["tips"])
    return dfs


def build_correlation_payload(raw: dict[str, list[DataPoint]]) -> CorrelationPayload:
    dfs = build_series_bundle(raw)

    correlations = calculate_correlations(dfs)
    regime = build_regime(
        dxy=dfs["dxy"],
        real_yield=dfs["real_yield"],
        move=dfs["move"],
        usdinr=dfs["usdinr"],
        vix=dfs["vix"],
    )
    logger.info(
        "Computed %d correlations and %d regime points", len(correlations), len(regime)
    )

    return CorrelationPayload(
        success=True,
        correlations=correlations,
        regime_matrix=regime[-REGIME_MATRIX_POINTS:],
    )


def generate_correlations(
    client: MarketDataClient, today: date | None = None
) -> CorrelationPayload:
    today = today or date.today()
    observation_start = today - timedelta(days=settings.HISTORY_LOOKBACK_DAYS)

    raw = client.fetch_bundle(CORRELATION_INPUTS, observation_start=observation_start)
    return build_correlation_payload(raw)
