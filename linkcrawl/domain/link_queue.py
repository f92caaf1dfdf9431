from collections import OrderedDict
from typing import Iterator, Tuple


class PendingLinks:
    """
    Links accepted for crawling but not fetched yet, with their depth.

    Insertion order is pull order. Adding a URL that is already pending
    updates its depth and keeps its place in the queue.
    """

    def __init__(self):
        self._links: "OrderedDict[str, int]" = OrderedDict()

    def add(self, url: str, depth: int) -> None:
        """Queue `url` at `depth`."""
        self._links[url] = int(depth)

    def pop(self) -> Tuple[str, int]:
        """Remove and return the oldest pending `(url, depth)` pair.

        Raises KeyError when nothing is pending.
        """
        if not self._links:
            raise KeyError("pop from empty PendingLinks")
        return self._links.popitem(last=False)

    def depth_of(self, url: str) -> int:
        return self._links[url]

    def __contains__(self, url: object) -> bool:
        return url in self._links

    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[str]:
        return iter(self._links)

    def __repr__(self):
        return f"<PendingLinks size={len(self._links)}>"
