import logging
import math
from datetime import date

import requests
from django.conf import settings
from django.core.cache import cache

from analysis.models import DataPoint

logger = logging.getLogger(__name__)

BASE_URL = "https://api.stlouisfed.org/fred/series/observations"
# FRED reports a missing observation as a single dot
MISSING_VALUE = "."


def parse_observation_value(raw: str | None) -> float | None:
    """Parse a FRED observation value, returning None when there is no observation."""
    if raw is None or raw == MISSING_VALUE:
        return None

    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None

    if not math.isfinite(value):
        return None
    return value


class FredAdapter:
    def __init__(
        self,
        api_key: str | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.FRED_API_KEY
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else settings.UPSTREAM_TIMEOUT_SECONDS

    def close(self) -> None:
        self.session.close()

    def fetch_history(
        self, series_id: str, observation_start: date | None = None
    ) -> list[DataPoint]:
        """Observations for a FRED series in ascending date order, or [] on any failure."""
        if not self.api_key:
            logger.warning("FRED_API_KEY is not set, skipping series %s", series_id)
            return []

        cache_key = f"fred:{series_id}:{observation_start}"
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        params = {
            "series_id": series_id,
            "api_key": self.api_key,
            "file_type": "json",
            "sort_order": "asc",
        }
        if observation_start is not None:
            params["observation_start"] = observation_start.isoformat()

        try:
            response = self.session.get(BASE_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("FRED history error for %s: %s", series_id, e)
            return []

        if not isinstance(data, dict):
            logger.warning("Unexpected FRED response for %s", series_id)
            return []

        if error := data.get("error_code"):
            # Rate limited or bad request, the series is treated as missing
            logger.warning("FRED error %s for %s: %s", error, series_id, data.get("error_message"))
            return []

        observations = data.get("observations")
        if observations is None:
            logger.warning("No data found for series %s", series_id)
            return []

        points = []
        for observation in observations:
            value = parse_observation_value(observation.get("value"))
            if value is None:
                continue
            points.append(DataPoint(date=observation["date"], value=value))

        cache.set(cache_key, points, settings.UPSTREAM_CACHE_SECONDS)
        return points
