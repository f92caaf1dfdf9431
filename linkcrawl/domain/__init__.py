"""Domain objects for linkcrawl - explicit re-exports to satisfy linters."""
from .crawl_config import CrawlConfig as CrawlConfig
from .crawl_result import CrawlResult as CrawlResult
from .http_response import HttpResponse as HttpResponse
from .link_queue import PendingLinks as PendingLinks
from .pull_outcome import PageSuccess as PageSuccess
from .pull_outcome import PullOutcome as PullOutcome
from .visited_tracker import VisitedTracker as VisitedTracker

__all__ = [
    "CrawlConfig",
    "CrawlResult",
    "HttpResponse",
    "PendingLinks",
    "PageSuccess",
    "PullOutcome",
    "VisitedTracker",
]
