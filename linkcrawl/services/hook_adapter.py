import logging
from typing import Any, Callable, Optional, Union

from linkcrawl.domain.pull_outcome import PageSuccess
from linkcrawl.exceptions import HookDefect, PageEvaluationError

logger = logging.getLogger(__name__)


class UserHooks:
    """Calls the optional user hooks so that a hook defect never aborts a crawl.

    - `pre_request` failures fall back to the original URL
    - `evaluate_page` failures become a `PageEvaluationError` for that page only
    - `on_success` failures are logged and dropped
    """

    def __init__(
        self,
        pre_request: Optional[Callable[[str], Any]] = None,
        evaluate_page: Optional[Callable[[Any], Any]] = None,
        on_success: Optional[Callable[[PageSuccess], Any]] = None,
    ):
        self._pre_request = pre_request
        self._evaluate_page = evaluate_page
        self._on_success = on_success

    @classmethod
    def from_config(cls, config) -> "UserHooks":
        return cls(
            pre_request=config.pre_request,
            evaluate_page=config.evaluate_page,
            on_success=config.on_success,
        )

    def pre_request(self, url: str) -> Union[str, bool]:
        """Return the URL to request, possibly rewritten, or False to skip it."""
        if self._pre_request is None:
            return url
        try:
            decision = self._pre_request(url)
        except Exception as e:
            self._report(HookDefect("pre_request", f"raised {e!r} for {url}", e))
            return url
        if decision is False or isinstance(decision, str):
            return decision
        self._report(HookDefect("pre_request", f"must return a str or False, got {decision!r} for {url}"))
        return url

    def evaluate_page(self, document, url: str = "") -> Any:
        """Run the evaluate_page hook on a parsed page; None when absent."""
        if self._evaluate_page is None:
            return None
        try:
            return self._evaluate_page(document)
        except Exception as e:
            raise PageEvaluationError(url, e) from e

    def on_success(self, url: str, result: Any = None) -> None:
        if self._on_success is None:
            return
        try:
            self._on_success(PageSuccess(url=url, result=result))
        except Exception as e:
            self._report(HookDefect("on_success", f"raised {e!r} for {url}", e))

    def _report(self, defect: HookDefect) -> None:
        logger.error("Please try/catch your %s function: %s", defect.hook_name, defect.reason, exc_info=defect.original)
