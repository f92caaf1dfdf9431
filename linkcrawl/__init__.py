"""
Configurable web crawler: follows links from a seed URL up to a depth and
request budget, with optional hooks to filter links and evaluate pages.
"""
from linkcrawl.domain.crawl_config import CrawlConfig
from linkcrawl.domain.crawl_result import CrawlResult
from linkcrawl.services.crawler import Crawler, launch

__version__ = "0.1.0"
__all__ = ["launch", "Crawler", "CrawlConfig", "CrawlResult"]
