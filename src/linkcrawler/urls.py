"""
URL normalization and link extraction.
"""
from __future__ import annotations

from typing import List, Optional
from urllib.parse import urldefrag, urljoin, urlparse, urlunparse

from bs4 import BeautifulSoup, SoupStrainer

# SoupStrainer to parse only <a> tags with an href (faster link extraction)
LINK_STRAINER = SoupStrainer("a", href=True)


def normalize_url(href: str, base: str) -> Optional[str]:
    """
    Turn an href found on page `base` into a canonical absolute URL.

    - Resolves relative, root-relative and ../ references against base
    - Drops fragments (#...)
    - Normalizes scheme/host case
    - Removes default ports (:80, :443)
    - Keeps querystrings (they matter for uniqueness)

    Returns None for empty or pure-fragment hrefs and for anything without
    a host (mailto:, javascript:, tel: ...).
    """
    href = (href or "").strip()
    # "" and "#..." would resolve to base itself; self-links are not recorded
    if not href or href.startswith("#"):
        return None

    try:
        joined, _ = urldefrag(urljoin(base, href))
        parsed = urlparse(joined)
        hostname = parsed.hostname
        port = parsed.port
    except ValueError:
        # Malformed IPv6 literal or non-numeric port
        return None

    if not hostname:
        return None

    scheme = parsed.scheme.lower()
    if (scheme == "http" and port == 80) or (scheme == "https" and port == 443):
        port = None

    netloc = hostname.lower()
    if ":" in netloc:
        netloc = f"[{netloc}]"
    if port is not None:
        netloc = f"{netloc}:{port}"
    if parsed.username is not None:
        userinfo = parsed.username
        if parsed.password is not None:
            userinfo = f"{userinfo}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    return urlunparse((
        scheme,
        netloc,
        parsed.path or "/",
        parsed.params,
        parsed.query,
        "",  # No fragment
    ))


def is_absolute_url(url: str) -> bool:
    """Check that url already is a canonical absolute URL."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
        parsed.port  # raises ValueError for a non-numeric port
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.hostname)


def extract_links(base: str, body: str) -> List[str]:
    """Return canonical URLs of all <a href> targets in body, in document order."""
    soup = BeautifulSoup(body, "lxml", parse_only=LINK_STRAINER)
    links = []
    for anchor in soup.find_all("a", href=True):
        target = normalize_url(anchor["href"], base)
        if target:
            links.append(target)
    return links
