import functools
import logging
from typing import Callable, TypeVar

from tenacity import Retrying, before_sleep_log, stop_after_attempt

logger = logging.getLogger(__name__)

T = TypeVar("T")


def retry_request(request: Callable[..., T], max_retry: int = 2) -> Callable[..., T]:
    """Wrap `request` so a failing call is retried up to `max_retry` times.

    The wrapped callable makes one initial attempt plus at most `max_retry`
    retries with the same arguments, and re-raises the last error when every
    attempt fails.
    """
    if max_retry < 0:
        raise ValueError(f"max_retry must be >= 0, got {max_retry!r}")

    @functools.wraps(request)
    def wrapper(*args, **kwargs):
        # fetches run on several worker threads, so each call gets its own retry state
        retryer = Retrying(
            reraise=True,
            stop=stop_after_attempt(max_retry + 1),
            before_sleep=before_sleep_log(logger, logging.DEBUG),
        )
        return retryer(request, *args, **kwargs)

    return wrapper
