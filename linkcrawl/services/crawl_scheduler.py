import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, Optional, Tuple

from linkcrawl.domain.crawl_config import CrawlConfig
from linkcrawl.domain.crawl_result import CrawlResult
from linkcrawl.domain.link_queue import PendingLinks
from linkcrawl.domain.pull_outcome import PullOutcome
from linkcrawl.domain.visited_tracker import VisitedTracker
from linkcrawl.exceptions import InvalidSeedUrl, RecoverableCrawlError, SchedulerFailure
from linkcrawl.services.admission_policy import AdmissionPolicy
from linkcrawl.services.hook_adapter import UserHooks
from linkcrawl.services.page_extractor import PageExtractor
from linkcrawl.services.url_classifier import is_crawlable, origin_of

logger = logging.getLogger(__name__)


def _default_executor_factory(max_workers: int) -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="linkcrawl")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CrawlScheduler:
    """Runs one crawl: owns the pending/visited sets and the pool of in-flight pulls.

    Only the thread calling `run` mutates `pending`, `visited` and
    `in_flight`. Worker threads fetch, parse, evaluate and extract, and hand
    a `PullOutcome` back through their future; on_success delivery and link
    admission happen back on the scheduler thread.

    A scheduler instance is good for a single `run`.
    """

    def __init__(
        self,
        config: CrawlConfig,
        fetcher,
        page_extractor: Optional[PageExtractor] = None,
        hooks: Optional[UserHooks] = None,
        executor_factory: Optional[Callable[[int], ThreadPoolExecutor]] = None,
    ):
        self.config = config
        self.fetcher = fetcher
        self.page_extractor = page_extractor or PageExtractor()
        self.hooks = hooks or UserHooks.from_config(config)
        self.executor_factory = executor_factory or _default_executor_factory

        self.pending = PendingLinks()
        self.visited = VisitedTracker()
        self.in_flight: Dict[Future, Tuple[str, int]] = {}
        self.host_origin: Optional[str] = None
        self.policy: Optional[AdmissionPolicy] = None
        self.budget_reached = False

    def run(self) -> CrawlResult:
        """Crawl from the configured seed until nothing is left to pull.

        Raises InvalidSeedUrl before any fetch when the seed is unusable, and
        SchedulerFailure once in-flight pulls have drained when an unexpected
        error escaped a pull.
        """
        started_at = utc_now()
        self.host_origin = self._derive_host_origin(self.config.url)
        self.policy = AdmissionPolicy(self.config, self.host_origin)
        logger.info(
            "Starting crawl of %s (max_depth=%s, max_request=%s, parallel=%s)",
            self.config.url, self.config.max_depth, self.config.max_request, self.config.parallel,
        )

        if self._crawl_seed():
            self._pull_until_done()

        finished_at = utc_now()
        logger.info("Crawl of %s finished: %s links visited", self.config.url, len(self.visited))
        return CrawlResult(started_at=started_at, finished_at=finished_at, links_visited=len(self.visited))

    def _derive_host_origin(self, url) -> str:
        if not is_crawlable(url):
            raise InvalidSeedUrl(url)
        origin = origin_of(url)
        if not origin:
            raise InvalidSeedUrl(url)
        return origin

    def _crawl_seed(self) -> bool:
        """Fetch the seed page and queue its links. Returns False when the crawl is over.

        The seed is evaluated but never handed to on_success.
        """
        if self.config.budget_exhausted(0):
            logger.info("Request budget is %s; nothing to crawl", self.config.max_request)
            self.budget_reached = True
            return False

        seed = self.hooks.pre_request(self.config.url)
        if seed is False:
            logger.info("Seed %s rejected by pre_request", self.config.url)
            return False

        try:
            outcome = self._pull(seed, 0)
        except Exception as e:
            logger.error("Unexpected error while processing seed %s", seed, exc_info=True)
            raise SchedulerFailure(seed, e) from e

        if not outcome.succeeded:
            return False
        if not outcome.links:
            logger.info("No links found on seed %s", seed)
            return False

        self.visited.mark(seed)
        self._enqueue(outcome.links, 1)
        return len(self.pending) > 0

    def _pull_until_done(self) -> None:
        failure: Optional[Tuple[str, Exception]] = None
        with self.executor_factory(self.config.parallel) as executor:
            while True:
                if failure is None:
                    self._fill_slots(executor)
                if not self.in_flight:
                    break
                done, _ = wait(list(self.in_flight), return_when=FIRST_COMPLETED)
                for future in done:
                    url, _depth = self.in_flight.pop(future)
                    try:
                        outcome = future.result()
                    except Exception as e:
                        logger.error("Unexpected error while processing %s", url, exc_info=True)
                        if failure is None:
                            failure = (url, e)
                        continue
                    self._complete(outcome, admit_links=failure is None)

        if failure is not None:
            url, error = failure
            raise SchedulerFailure(url, error) from error

    def _fill_slots(self, executor) -> None:
        while len(self.in_flight) < self.config.parallel and len(self.pending) > 0:
            if self.config.budget_exhausted(len(self.visited)):
                if not self.budget_reached:
                    logger.info("Request budget of %s reached; no new pulls", self.config.max_request)
                self.budget_reached = True
                return
            url, depth = self.pending.pop()
            self.visited.mark(url)
            future = executor.submit(self._pull, url, depth)
            self.in_flight[future] = (url, depth)

    def _pull(self, url: str, depth: int) -> PullOutcome:
        """Fetch, parse, evaluate and extract one page. Runs on a worker thread."""
        try:
            text = self.fetcher.fetch_text(url)
            document = self.page_extractor.parse(text, url)
            result = self.hooks.evaluate_page(document, url)
            links = self.page_extractor.extract_links(document, url)
        except RecoverableCrawlError as e:
            logger.warning("Abandoning %s: %s", url, e)
            return PullOutcome(url=url, depth=depth, error=e)
        logger.debug("Pulled %s at depth %s: %s links", url, depth, len(links))
        return PullOutcome(url=url, depth=depth, links=links, result=result)

    def _complete(self, outcome: PullOutcome, admit_links: bool = True) -> None:
        if not outcome.succeeded:
            return
        self.hooks.on_success(outcome.url, outcome.result)
        if admit_links:
            self._enqueue(outcome.links, outcome.depth + 1)

    def _enqueue(self, links: Iterable[str], depth: int) -> None:
        for link in links:
            if not self.policy.admits(link, depth, self.pending, self.visited):
                continue
            decision = self.hooks.pre_request(link)
            if decision is False:
                logger.debug("Skipping (pre_request) %s", link)
                continue
            if decision != link and self.policy.should_skip_due_to_duplicate(decision, self.pending, self.visited):
                continue
            self.pending.add(decision, depth)
