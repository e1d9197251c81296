import logging
from datetime import datetime

import pytz
import requests
from django.conf import settings
from django.core.cache import cache

from analysis.models import DataPoint

logger = logging.getLogger(__name__)

BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"
# Yahoo rejects requests without a browser user agent
HEADERS = {"User-Agent": "Mozilla/5.0"}


def parse_chart(data: dict) -> list[DataPoint]:
    """Daily closes from a chart API response. Sessions without a close are skipped."""
    results = (data.get("chart") or {}).get("result") or []
    if not results:
        return []

    result = results[0]
    timestamps = result.get("timestamp") or []
    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    closes = (quotes[0] or {}).get("close") or []

    points = []
    for timestamp, close in zip(timestamps, closes):
        if close is None:
            continue
        day = datetime.fromtimestamp(timestamp, tz=pytz.utc).strftime("%Y-%m-%d")
        points.append(DataPoint(date=day, value=close))
    return points


class YahooAdapter:
    def __init__(
        self,
        session: requests.Session | None = None,
        history_range: str | None = None,
        timeout: float | None = None,
    ):
        self.session = session if session is not None else requests.Session()
        self.history_range = history_range or settings.YAHOO_HISTORY_RANGE
        self.timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS

    def close(self) -> None:
        self.session.close()

    def fetch_history(self, symbol: str) -> list[DataPoint]:
        """Daily closing prices for a symbol, or [] on any failure."""
        cache_key = f"yahoo:{symbol}:{self.history_range}"
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        url = f"{BASE_URL}/{symbol}"
        params = {"interval": "1d", "range": self.history_range}
        try:
            response = self.session.get(
                url, params=params, headers=HEADERS, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Yahoo history error for %s: %s", symbol, e)
            return []

        if not isinstance(data, dict):
            logger.warning("Unexpected Yahoo response for %s", symbol)
            return []

        points = parse_chart(data)
        if not points:
            logger.warning("No data found for symbol %s", symbol)
            return []

        cache.set(cache_key, points, settings.UPSTREAM_CACHE_SECONDS)
        return points
