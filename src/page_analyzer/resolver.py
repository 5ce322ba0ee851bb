"""Resolve hyperlink targets and classify them as internal or external."""

import logging
import re
from typing import Iterable, List, Optional
from urllib.parse import urljoin, urlsplit

from page_analyzer.constants import NETWORK_SCHEMES
from page_analyzer.exceptions import MalformedHref
from page_analyzer.models import ResolvedLink

logger = logging.getLogger(__name__)

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_href(href: str, base_url: str) -> str:
    """Resolve an href against a base address.

    Args:
        href: Raw href attribute value
        base_url: Absolute address relative references resolve against

    Returns:
        The absolute address

    Raises:
        MalformedHref: If the reference is empty, unparseable, or does not
            point at an http(s) host
    """
    href = href.strip()
    if not href:
        raise MalformedHref(href, "empty reference")
    if _CONTROL_CHARS.search(href):
        raise MalformedHref(href, "control character in reference")
    if _BAD_PERCENT_ESCAPE.search(href):
        raise MalformedHref(href, "invalid percent-escape")

    try:
        urlsplit(href)
        address = urljoin(base_url, href)
        parts = urlsplit(address)
        # Port is parsed lazily, so touch it to surface bad values
        _ = parts.port
    except ValueError as e:
        raise MalformedHref(href, str(e)) from e

    if parts.scheme.lower() not in NETWORK_SCHEMES:
        raise MalformedHref(href, f"non-network scheme {parts.scheme!r}")
    if not parts.hostname:
        raise MalformedHref(href, "missing host")

    return address


def resolve(href: str, base_url: str) -> Optional[str]:
    """Resolve an href, returning None when it should be skipped."""
    try:
        return parse_href(href, base_url)
    except MalformedHref as e:
        logger.debug(f"Skipping href {e}")
        return None


def host_of(url: str) -> str:
    """Lowercased host of an absolute address ('' if none)."""
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def is_internal(address: str, base_host: str) -> bool:
    """Whether an address lives on the base host or one of its subdomains.

    Plain string suffix match on the host: punycode, default ports and IP
    literals get no special treatment.
    """
    host = host_of(address)
    base_host = base_host.lower()
    if not host or not base_host:
        return False
    return host == base_host or host.endswith("." + base_host)


def classify_links(hrefs: Iterable[str], base_url: str, base_host: str) -> List[ResolvedLink]:
    """Resolve and classify hrefs, keeping discovery order.

    Unresolvable hrefs are dropped. Duplicates are kept; each occurrence
    is its own link.

    Args:
        hrefs: Raw href values in document order
        base_url: Address relative references resolve against
        base_host: Host of the analyzed page

    Returns:
        List of ResolvedLink with consecutive discovery indexes
    """
    links: List[ResolvedLink] = []
    for href in hrefs:
        address = resolve(href, base_url)
        if address is None:
            continue
        links.append(ResolvedLink(
            index=len(links),
            address=address,
            is_internal=is_internal(address, base_host),
        ))
    return links
