from typing import Any, NamedTuple, Optional, Tuple

from linkcrawl.exceptions import RecoverableCrawlError


class PullOutcome(NamedTuple):
    """What a single pull produced for the scheduler.

    `error` is set when the pull hit a recoverable failure; in that case
    `links` is empty and `result` is None.
    """
    url: str
    depth: int
    links: Tuple[str, ...] = ()
    result: Any = None
    error: Optional[RecoverableCrawlError] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class PageSuccess(NamedTuple):
    """Payload handed to the on_success hook."""
    url: str
    result: Any = None
