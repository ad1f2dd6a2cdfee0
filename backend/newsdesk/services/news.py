"""NewsAPI client for headlines and keyword search."""

import logging
import os
from typing import Any

import httpx

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "https://newsapi.org/v2"
_HEADLINES_COUNTRY = "us"
_TIMEOUT_SECONDS = 15


class NewsClient:
    """Fetches articles from NewsAPI.

    Without a query it returns US top headlines; with one it searches all
    articles, newest first when *from_date* is given.
    """

    def fetch(self, query: str | None = None, from_date: str | None = None) -> dict[str, Any]:
        """Return the NewsAPI payload, or ``{"articles": []}`` if the upstream call fails.

        Raises ValueError if NEWS_API_KEY is missing.
        """
        api_key = os.environ.get("NEWS_API_KEY", "").strip()
        if not api_key:
            raise ValueError("NEWS_API_KEY environment variable is not set")
        base_url = os.environ.get("NEWS_API_BASE_URL", "").strip() or _DEFAULT_BASE_URL

        params: dict[str, str] = {"apiKey": api_key}
        if query:
            endpoint = f"{base_url.rstrip('/')}/everything"
            params["q"] = query
            if from_date:
                params["from"] = from_date
                params["sortBy"] = "publishedAt"
        else:
            endpoint = f"{base_url.rstrip('/')}/top-headlines"
            params["country"] = _HEADLINES_COUNTRY

        try:
            response = httpx.get(endpoint, params=params, timeout=_TIMEOUT_SECONDS)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("news fetch failed for query=%r", query)
            return {"articles": []}

        if not isinstance(payload, dict):
            return {"articles": []}
        payload.setdefault("articles", [])
        logger.info("fetched %d article(s) for query=%r", len(payload["articles"]), query)
        return payload
