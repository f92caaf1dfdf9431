from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Mapping, Optional

DEFAULT_MAX_REQUEST = -1
DEFAULT_MAX_DEPTH = 3
DEFAULT_PARALLEL = 5
DEFAULT_FETCH_MAX_RETRY = 2

# camelCase option names accepted by `CrawlConfig.from_options`
OPTION_ALIASES = {
    "maxRequest": "max_request",
    "skipStrictDuplicates": "skip_strict_duplicates",
    "sameOrigin": "same_origin",
    "maxDepth": "max_depth",
    "preRequest": "pre_request",
    "evaluatePage": "evaluate_page",
    "onSuccess": "on_success",
    "fetchMaxRetry": "fetch_max_retry",
}

# smallest accepted value per integer option; max_request -1 means unbounded
INT_MINIMUMS = {
    "max_request": -1,
    "max_depth": 0,
    "parallel": 1,
    "fetch_max_retry": 0,
}


@dataclass(frozen=True)
class CrawlConfig:
    """Immutable snapshot of the options of one crawl.

    Hooks are optional callables; `None` means the hook is absent.
    """

    url: str
    max_request: int = DEFAULT_MAX_REQUEST
    skip_strict_duplicates: bool = True
    same_origin: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH
    parallel: int = DEFAULT_PARALLEL
    pre_request: Optional[Callable[[str], Any]] = None
    evaluate_page: Optional[Callable[[Any], Any]] = None
    on_success: Optional[Callable[[Any], Any]] = None
    fetch_max_retry: int = DEFAULT_FETCH_MAX_RETRY

    def __post_init__(self):
        for name, minimum in INT_MINIMUMS.items():
            value = getattr(self, name)
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < minimum:
                raise ValueError(f"{name} must be >= {minimum}, got {value!r}")
        for name in ("skip_strict_duplicates", "same_origin"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValueError(f"{name} must be true or false, got {value!r}")
        for name in ("pre_request", "evaluate_page", "on_success"):
            hook = getattr(self, name)
            if hook is not None and not callable(hook):
                raise ValueError(f"{name} must be callable or None")

    @property
    def unbounded(self) -> bool:
        """True when no request budget applies."""
        return self.max_request == -1

    def budget_exhausted(self, visited_count: int) -> bool:
        if self.unbounded:
            return False
        return visited_count >= self.max_request

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "CrawlConfig":
        """Build a config from a mapping of option names.

        Both the camelCase names (`maxRequest`, `sameOrigin`, ...) and the
        snake_case field names are accepted. Unknown keys raise ValueError.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in dict(options).items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown crawl option: {key!r}")
            kwargs[name] = value
        if not kwargs.get("url"):
            raise ValueError("url is required")
        return cls(**kwargs)
