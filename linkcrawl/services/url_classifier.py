import logging
import re
from typing import Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

# Loose syntactic check, not a liveness check.
CRAWLABLE_URL = re.compile(
    r"^(ftp|http|https)://(\w+:?\w*@)?(\S+)(:[0-9]+)?(/|/([\w#!:.?+=&%@!\-/]))?"
)

DEFAULT_PORTS = {"http": 80, "https": 443, "ftp": 21}


def is_crawlable(value) -> bool:
    """Return True when `value` looks like an ftp/http/https URL."""
    if not isinstance(value, str):
        return False
    return CRAWLABLE_URL.match(value) is not None


def origin_of(url: str) -> Optional[str]:
    """Return the `scheme://host[:port]` origin of `url`.

    Default ports are dropped and scheme/host are lowercased. Returns None
    when the URL has no scheme or host, or carries an invalid port.
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        logger.debug("Could not derive origin of %r", url)
        return None
    scheme = (parts.scheme or "").lower()
    host = (parts.hostname or "").lower()
    if not scheme or not host:
        return None
    if ":" in host:
        host = f"[{host}]"
    if port is None or DEFAULT_PORTS.get(scheme) == port:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def resolve_absolute(href: str, base_url: str) -> str:
    """Resolve a protocol-relative or root-relative `href` against `base_url`.

    - `//host/path` takes the scheme of `base_url`
    - `/path` takes the origin of `base_url`
    - anything else is returned unchanged and left for `is_crawlable` to judge
    """
    if href.startswith("//"):
        scheme = urlsplit(base_url).scheme
        return f"{scheme}:{href}" if scheme else href
    if href.startswith("/"):
        origin = origin_of(base_url)
        return f"{origin}{href}" if origin else href
    return href
