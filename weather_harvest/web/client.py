from __future__ import annotations

import logging
import os

import requests

from ..errors import FetchFailedError
from ..models.config_models import SourceConfig
from ..models.resume_point import MonthQuery

logger = logging.getLogger(__name__)

"""HTTP client for the monthly history pages.

One GET per month. No retry adapter is mounted: a failed month aborts the run
and the next invocation starts again from the dataset's last stored date.
"""

__all__ = [
    "DEFAULT_USER_AGENT",
    "MonthPageClient",
    "build_session",
]

DEFAULT_USER_AGENT = "weather-harvest/0.1 (+https://freemeteo.ro) requests"


def build_session() -> requests.Session:
    """Create a requests session with a proper User-Agent."""
    session = requests.Session()
    ua = os.getenv("WEATHER_HARVEST_USER_AGENT", DEFAULT_USER_AGENT)
    session.headers.update({"User-Agent": ua})
    return session


class MonthPageClient:
    """Fetches the raw history page of one month."""

    def __init__(self, source: SourceConfig, session: requests.Session | None = None) -> None:
        self.source = source
        self.session = session if session is not None else build_session()

    def month_params(self, query: MonthQuery) -> dict[str, str]:
        return {
            "gid": self.source.gid,
            "station": self.source.station,
            "month": str(query.month),
            "year": f"{query.year:04d}",
            "language": self.source.language,
            "country": self.source.country,
        }

    def fetch_month(self, query: MonthQuery) -> bytes:
        """GET the page for `query` and return the body bytes.

        Raises:
            FetchFailedError: On transport errors and non-2xx responses
        """
        params = self.month_params(query)
        logger.debug(f"GET {self.source.url} params={params}")
        try:
            resp = self.session.get(self.source.url, params=params, timeout=self.source.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FetchFailedError(query, e) from e
        return resp.content

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> MonthPageClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
