import logging

from linkcrawl.domain.crawl_config import CrawlConfig
from linkcrawl.domain.link_queue import PendingLinks
from linkcrawl.domain.visited_tracker import VisitedTracker
from linkcrawl.services.url_classifier import is_crawlable, origin_of

logger = logging.getLogger(__name__)


class AdmissionPolicy:
    """Encapsulates the enqueue rules for discovered links: syntax, depth, origin and duplicates.

    Separates filter decisions from the scheduler's pull loop. The
    pre_request hook is not part of the policy; the scheduler calls it once
    for each link the policy lets through.
    """

    def __init__(self, config: CrawlConfig, host_origin: str):
        self.config = config
        self.host_origin = host_origin

    def should_skip_due_to_syntax(self, url: str) -> bool:
        if not is_crawlable(url):
            logger.debug("Skipping (not crawlable) %r", url)
            return True
        return False

    def should_skip_due_to_depth(self, url: str, depth: int) -> bool:
        """Check if URL should be skipped due to max depth reached."""
        if depth > self.config.max_depth:
            logger.debug("Skipping (max depth %s reached) %s at depth %s", self.config.max_depth, url, depth)
            return True
        return False

    def should_skip_due_to_origin(self, url: str) -> bool:
        """Check if URL leaves the seed's origin while same_origin is enabled."""
        if not self.config.same_origin:
            return False
        if origin_of(url) != self.host_origin:
            logger.debug("Skipping (external) %s -> not same origin as %s", url, self.host_origin)
            return True
        return False

    def should_skip_due_to_duplicate(self, url: str, pending: PendingLinks, visited: VisitedTracker) -> bool:
        """Check if URL is already pending or visited while strict duplicate skipping is on."""
        if not self.config.skip_strict_duplicates:
            return False
        if url in pending or visited.is_visited(url):
            logger.debug("Skipping (already collected) %s", url)
            return True
        return False

    def admits(self, url: str, depth: int, pending: PendingLinks, visited: VisitedTracker) -> bool:
        """True when `url` passes every filter for insertion at `depth`."""
        if self.should_skip_due_to_syntax(url):
            return False
        if self.should_skip_due_to_depth(url, depth):
            return False
        if self.should_skip_due_to_origin(url):
            return False
        if self.should_skip_due_to_duplicate(url, pending, visited):
            return False
        return True
