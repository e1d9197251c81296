import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from enum import Enum

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter

from adapters.fred import FredAdapter
from adapters.yahoo import YahooAdapter
from analysis.models import DataPoint

logger = logging.getLogger(__name__)

FRED_SERIES = {
    # Rates
    "US_10Y": "DGS10",
    "US_2Y": "DGS2",
    "FED_FUNDS": "FEDFUNDS",
    "DXY": "DTWEXBGS",
    # Inflation
    "TIPS_BREAKEVEN": "T10YIE",
    # Risk
    "HY_SPREAD": "BAMLH0A0HYM2",
    # Growth, OECD composite leading indicators (amplitude adjusted)
    "GLOBAL_PMI": "G7LOLITOAASTSAM",
    "US_PMI": "USALOLITOAASTSAM",
    "CHINA_PMI": "CHNLOLITOAASTSAM",
    "EU_PMI": "EA19LOLITOAASTSAM",
}

MARKET_SYMBOLS = {
    "BRENT_OIL": "BZ=F",
    "GOLD": "GC=F",
    "COPPER": "HG=F",
    # Invesco DB Commodity Index Tracking Fund as a CRB proxy
    "CRB_INDEX": "DBC",
    "VIX": "^VIX",
    "USDJPY": "USDJPY=X",
    "USDINR": "INR=X",
    "MOVE_INDEX": "^MOVE",
    "DXY": "DX-Y.NYB",
}


class Source(str, Enum):
    FRED = "FRED"
    YAHOO = "YAHOO"


@dataclass(frozen=True)
class SeriesRequest:
    source: Source
    symbol: str


def resolve_symbol(symbol: str) -> SeriesRequest | None:
    """Map an identifier from the frontend to the provider that serves it."""
    if symbol in FRED_SERIES.values():
        return SeriesRequest(Source.FRED, symbol)

    if symbol in MARKET_SYMBOLS:
        return SeriesRequest(Source.YAHOO, MARKET_SYMBOLS[symbol])
    if symbol in MARKET_SYMBOLS.values():
        return SeriesRequest(Source.YAHOO, symbol)

    # Looks like a raw Yahoo symbol, e.g. ^NSEI or EURUSD=X
    if "^" in symbol or "=" in symbol:
        return SeriesRequest(Source.YAHOO, symbol)

    return None


def pooled_session(pool_size: int) -> requests.Session:
    """A session whose connection pool has room for every worker thread."""
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class MarketDataClient:
    """
    Fetches many series at once from FRED and Yahoo.

    Use it as a context manager so the adapters' HTTP sessions are closed once
    the request is done.
    """

    def __init__(
        self,
        fred: FredAdapter | None = None,
        yahoo: YahooAdapter | None = None,
        max_workers: int | None = None,
    ):
        self.max_workers = max_workers or settings.UPSTREAM_MAX_WORKERS
        self.fred = (
            fred if fred is not None else FredAdapter(session=pooled_session(self.max_workers))
        )
        self.yahoo = (
            yahoo if yahoo is not None else YahooAdapter(session=pooled_session(self.max_workers))
        )

    def __enter__(self) -> "MarketDataClient":
        return self

    def __exit__(self, *_) -> None:
        self.close()

    def close(self) -> None:
        self.fred.close()
        self.yahoo.close()

    def fetch(
        self, request: SeriesRequest, observation_start: date | None = None
    ) -> list[DataPoint]:
        if request.source == Source.FRED:
            return self.fred.fetch_history(request.symbol, observation_start)
        return self.yahoo.fetch_history(request.symbol)

    def fetch_bundle(
        self,
        series_requests: dict[str, SeriesRequest],
        observation_start: date | None = None,
    ) -> dict[str, list[DataPoint]]:
        """
        Fetch every requested series concurrently.

        Returns once all fetches are done. A fetch that fails comes back as an
        empty list; slow upstreams are bounded by the adapters' HTTP timeout.
        """
        if not series_requests:
            return {}

        bundle: dict[str, list[DataPoint]] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {
                key: executor.submit(self.fetch, request, observation_start)
                for key, request in series_requests.items()
            }
            for key, future in futures.items():
                try:
                    bundle[key] = future.result()
                except Exception as e:
                    logger.warning("Failed to fetch %s: %s", key, e)
                    bundle[key] = []

        failed = [key for key, points in bundle.items() if not points]
        if failed:
            logger.warning("Empty series: %s", ", ".join(failed))
        logger.info("Fetched %d/%d series", len(bundle) - len(failed), len(bundle))
        return bundle
