"""Crawl result data model."""
from datetime import datetime
from typing import NamedTuple


class CrawlResult(NamedTuple):
    """Result of a crawl operation, produced once when the crawl completes."""
    started_at: datetime
    """UTC time at which the crawl was launched"""

    finished_at: datetime
    """UTC time at which the crawl resolved"""

    links_visited: int
    """Number of links pulled for fetching, the seed included"""
