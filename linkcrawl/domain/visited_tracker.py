from typing import Iterator, Set


class VisitedTracker:
    """
    Tracks which URLs have been pulled for fetching during a crawl.

    A URL is marked when it is pulled, not when its fetch completes, so a
    link that is still in flight is already considered visited. The size of
    the tracker is what the request budget is measured against, so nothing
    is ever evicted.
    """

    def __init__(self):
        self._visited: Set[str] = set()

    def mark(self, url: str) -> None:
        """Mark a URL as visited."""
        self._visited.add(url)

    def is_visited(self, url: str) -> bool:
        """Check if a URL has been visited."""
        return url in self._visited

    def __contains__(self, url: object) -> bool:
        return url in self._visited

    def __len__(self) -> int:
        return len(self._visited)

    def __iter__(self) -> Iterator[str]:
        return iter(self._visited)
