import threading
import time
from collections import Counter

import pytest

from linkcrawl.domain.http_response import HttpResponse


def page(*hrefs):
    return "<html><body>" + "".join(f'<a href="{h}">{h}</a>' for h in hrefs) + "</body></html>"


class FakeSite:
    """In-memory fetcher: maps URLs to HTML and records every fetch.

    Unknown URLs raise ConnectionError, as does every URL in `failing`.
    `delay` makes each fetch sleep so concurrent fetches overlap.
    """

    def __init__(self, pages, failing=(), delay=0.0):
        self.pages = dict(pages)
        self.failing = set(failing)
        self.delay = delay
        self.calls = []
        self.attempts = Counter()
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def fetch(self, url):
        with self._lock:
            self.calls.append(url)
            self.attempts[url] += 1
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if url in self.failing or url not in self.pages:
                raise ConnectionError(f"cannot reach {url}")
            return HttpResponse(200, self.pages[url], "text/html")
        finally:
            with self._lock:
                self.active -= 1

    @property
    def fetched(self):
        return set(self.calls)


@pytest.fixture
def make_site():
    return FakeSite


@pytest.fixture
def html():
    return page
