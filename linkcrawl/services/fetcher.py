from __future__ import annotations

import logging
from typing import Protocol

from linkcrawl.domain.http_response import HttpResponse
from linkcrawl.exceptions import PageFetchFailure
from linkcrawl.services.retry import retry_request

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Fetch a URL and return a normalized HTTP-like response.

    This is intentionally small so tests can swap in an in-memory fake.
    """

    def fetch(self, url: str) -> HttpResponse: ...


class HttpServiceFetcher:
    def __init__(self, http_service):
        self._http_service = http_service

    def fetch(self, url: str) -> HttpResponse:
        return self._http_service.fetch(url)


class RetryingFetcher:
    """Fetcher that retries a failing fetch and returns only the page text.

    Once every attempt failed the last error is raised as a
    `PageFetchFailure`, whatever the underlying fetcher raised.
    """

    def __init__(self, fetcher: Fetcher, max_retry: int = 2):
        self._fetcher = fetcher
        self.max_retry = int(max_retry)
        self._fetch = retry_request(fetcher.fetch, self.max_retry)

    def fetch_text(self, url: str) -> str:
        try:
            response = self._fetch(url)
        except PageFetchFailure:
            raise
        except Exception as e:
            raise PageFetchFailure(url, e) from e
        return response.text
