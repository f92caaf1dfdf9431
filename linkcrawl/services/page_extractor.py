import logging
from typing import Tuple, Union

from bs4 import BeautifulSoup

from linkcrawl.exceptions import PageParseFailure
from linkcrawl.services.url_classifier import is_crawlable, resolve_absolute

logger = logging.getLogger(__name__)


class PageExtractor:
    """Parses fetched pages and collects the links they point to."""

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser

    def parse(self, page_text: str, page_url: str = "") -> BeautifulSoup:
        """Parse `page_text` into a document the evaluate_page hook can query."""
        try:
            return BeautifulSoup(page_text, self.parser)
        except Exception as e:
            raise PageParseFailure(page_url, e) from e

    def extract_links(self, page: Union[str, BeautifulSoup], page_url: str) -> Tuple[str, ...]:
        """Return the absolute, crawlable links of `page` in document order.

        `page` is either raw page text or an already parsed document. Anchors
        without href count as an empty href and are dropped by the crawlable
        check. A page that cannot be parsed yields no links.
        """
        try:
            soup = page if isinstance(page, BeautifulSoup) else self.parse(page, page_url)
            links = []
            for a in soup.find_all("a"):
                href = a.get("href") or ""
                if isinstance(href, list):
                    href = " ".join(href)
                links.append(resolve_absolute(href, page_url))
        except Exception:
            logger.exception("Something wrong happened with this url: %s", page_url)
            return ()
        # dict keeps first-seen order while dropping duplicates
        return tuple(dict.fromkeys(link for link in links if is_crawlable(link)))
