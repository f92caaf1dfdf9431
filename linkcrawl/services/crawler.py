from typing import Any, Mapping, Optional, Union

import requests

from linkcrawl import config as env
from linkcrawl.domain.crawl_config import CrawlConfig
from linkcrawl.domain.crawl_result import CrawlResult
from linkcrawl.services.crawl_scheduler import CrawlScheduler
from linkcrawl.services.fetcher import Fetcher, HttpServiceFetcher, RetryingFetcher
from linkcrawl.services.hook_adapter import UserHooks
from linkcrawl.services.http_service import HttpService
from linkcrawl.services.page_extractor import PageExtractor


def _as_config(options: Union[CrawlConfig, Mapping[str, Any]]) -> CrawlConfig:
    if isinstance(options, CrawlConfig):
        return options
    if options is None:
        raise ValueError("config is required for crawl")
    return CrawlConfig.from_options(options)


class Crawler:
    """Entry point tying a `CrawlConfig` to its collaborators.

    `fetcher` is anything with `fetch(url) -> HttpResponse`; it gets wrapped
    with retries. When omitted a requests-backed `HttpService` is used.
    """

    def __init__(
        self,
        options: Union[CrawlConfig, Mapping[str, Any]],
        fetcher: Optional[Fetcher] = None,
        page_extractor: Optional[PageExtractor] = None,
        executor_factory=None,
    ):
        self.config = _as_config(options)
        if fetcher is None:
            fetcher = HttpServiceFetcher(
                HttpService(env.USER_AGENT, http_client=requests.get, timeout=env.HTTP_TIMEOUT)
            )
        self.fetcher = RetryingFetcher(fetcher, max_retry=self.config.fetch_max_retry)
        self.page_extractor = page_extractor or PageExtractor()
        self.executor_factory = executor_factory
        self.scheduler: Optional[CrawlScheduler] = None

    def init(self) -> CrawlResult:
        """Crawl from the seed URL and return once the crawl is complete."""
        self.scheduler = CrawlScheduler(
            self.config,
            self.fetcher,
            page_extractor=self.page_extractor,
            hooks=UserHooks.from_config(self.config),
            executor_factory=self.executor_factory,
        )
        return self.scheduler.run()

    @property
    def links_visited(self) -> int:
        if self.scheduler is None:
            return 0
        return len(self.scheduler.visited)

    @staticmethod
    def launch(options: Union[CrawlConfig, Mapping[str, Any]], **kwargs) -> CrawlResult:
        """Build a crawler for `options` and run it to completion."""
        return Crawler(options, **kwargs).init()


def launch(options: Union[CrawlConfig, Mapping[str, Any]], **kwargs) -> CrawlResult:
    return Crawler.launch(options, **kwargs)
