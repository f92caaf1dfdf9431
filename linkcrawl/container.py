"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from linkcrawl import config as env
from linkcrawl.services.crawl_config_parser import CrawlConfigFileStore, CrawlConfigParser
from linkcrawl.services.crawler import Crawler
from linkcrawl.services.fetcher import HttpServiceFetcher
from linkcrawl.services.http_service import HttpService
from linkcrawl.services.page_extractor import PageExtractor


# Environment variables used by the container (read via `linkcrawl.config` helpers).
#
# USER_AGENT (str, default: "linkcrawl/0.1")
#   User-Agent header for outbound HTTP requests.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for each outbound HTTP request (each retry gets the full timeout).
#
# FETCH_MAX_RETRY (int, default: 2)
#   Retries after a failed fetch before the link is abandoned. Used by run.py
#   when the crawl file does not set `fetch_max_retry` itself.
ENV = {
    "USER_AGENT": env.get_str_env("USER_AGENT", "linkcrawl/0.1"),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 10),
    "FETCH_MAX_RETRY": env.get_int_env("FETCH_MAX_RETRY", 2),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for linkcrawl."""

    # Configuration
    config = providers.Configuration(default=ENV)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int)
    )

    page_fetcher = providers.Singleton(
        HttpServiceFetcher,
        http_service=http_service,
    )

    page_extractor = providers.Singleton(
        PageExtractor
    )

    config_parser = providers.Singleton(
        CrawlConfigParser
    )

    config_file_store = providers.Singleton(
        CrawlConfigFileStore
    )

    # One crawler per crawl; call with the crawl options.
    crawler = providers.Factory(
        Crawler,
        fetcher=page_fetcher,
        page_extractor=page_extractor,
    )
