import logging
from typing import Callable

import requests

from linkcrawl.domain.http_response import HttpResponse
from linkcrawl.exceptions import PageFetchFailure

logger = logging.getLogger(__name__)


class HttpService:
    """
    HTTP client wrapper for fetching web pages.

    Requires http_client callable for dependency injection.
    This enables easy testing without patching and allows swapping HTTP libraries.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str) -> HttpResponse:
        """Fetch URL and return response with status code, body text, and Content-Type."""
        headers = {"User-Agent": self.user_agent}
        try:
            resp = self.http_client(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise PageFetchFailure(url, e) from e

        # Extract Content-Type if response has headers; let real exceptions bubble up.
        ct = None
        if hasattr(resp, 'headers'):
            ct = resp.headers.get('Content-Type')

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.warning("Non-success status for %s: %s", url, resp.status_code)

        return HttpResponse(resp.status_code, resp.text, ct)
