"""Custom exceptions for linkcrawl.

Errors are split in two families. A `RecoverableCrawlError` only affects the
link being processed: it is logged and the crawl goes on. A `FatalCrawlError`
ends the whole crawl and reaches the caller of `CrawlScheduler.run`.
"""


class RecoverableCrawlError(Exception):
    """Failure local to a single link or hook call."""


class FatalCrawlError(Exception):
    """Failure that aborts the whole crawl."""


class HookDefect(RecoverableCrawlError):
    """Raised when a user hook raises or returns an unsupported value."""

    def __init__(self, hook_name: str, reason: str, original: Exception = None):
        self.hook_name = hook_name
        self.reason = reason
        self.original = original
        super().__init__(f"{hook_name} hook defect: {reason}")


class PageFetchFailure(RecoverableCrawlError):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class PageParseFailure(RecoverableCrawlError):
    """Raised when fetched page text cannot be parsed as HTML."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"Could not parse page {url}: {original}")


class PageEvaluationError(RecoverableCrawlError):
    """Raised when the evaluate_page hook fails for a page."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"evaluate_page failed for {url}: {original}")


class InvalidSeedUrl(FatalCrawlError):
    """Raised when the seed URL is not an absolute URL with an origin."""

    def __init__(self, url):
        self.url = url
        super().__init__(f"URL provided is not valid: {url!r}")


class SchedulerFailure(FatalCrawlError):
    """Raised when an unexpected error escapes a pull; the crawl is aborted."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"Crawl aborted while processing {url}: {original}")
