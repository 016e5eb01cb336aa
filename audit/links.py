"""
Reciprocal link detection.

A member page passes when it links to both of its ring redirect pages.
Plain anchors are checked first; pages that navigate through JavaScript
are caught by looking at onclick handlers on buttons, then images.
"""

import logging

from bs4 import BeautifulSoup


logger = logging.getLogger(__name__)


def expected_links(base_url: str, slug: str, next_text: str, prev_text: str) -> tuple[str, str]:
    """Build the (next, previous) URLs a member page must link to."""
    base = base_url.rstrip('/')
    return f"{base}/{slug}/{next_text}", f"{base}/{slug}/{prev_text}"


def _match_onclick(soup: BeautifulSoup, tag_name: str, next_link: str, prev_link: str,
                   next_found: bool, prev_found: bool) -> tuple[bool, bool]:
    for tag in soup.find_all(tag_name, onclick=True):
        onclick = tag.get('onclick') or ''
        logger.debug("Checking %s onclick: %s", tag_name, onclick)
        if next_link in onclick:
            next_found = True
        elif prev_link in onclick:
            prev_found = True
    return next_found, prev_found


def find_webring_links(html: str, next_link: str, prev_link: str) -> tuple[bool, bool]:
    """
    Look for the next/previous links in a page.

    Search order: <a href> (exact match, trailing slashes ignored), then
    <button onclick>, then <img onclick> (substring match). Later tag
    families are only searched while a link is still missing.

    Args:
        html: Raw page HTML
        next_link: Expected "next" URL
        prev_link: Expected "previous" URL

    Returns:
        Tuple of (next_found, prev_found)
    """
    soup = BeautifulSoup(html, 'lxml')

    next_found = False
    prev_found = False

    for anchor in soup.find_all('a', href=True):
        href = anchor['href']
        if isinstance(href, list):
            href = ' '.join(href)
        logger.debug("Comparing link href: %s", href)
        href = href.rstrip('/')
        if href == next_link:
            next_found = True
        elif href == prev_link:
            prev_found = True

    if not (next_found and prev_found):
        next_found, prev_found = _match_onclick(
            soup, 'button', next_link, prev_link, next_found, prev_found
        )

    if not (next_found and prev_found):
        next_found, prev_found = _match_onclick(
            soup, 'img', next_link, prev_link, next_found, prev_found
        )

    return next_found, prev_found


def failure_reason(next_found: bool, prev_found: bool) -> str | None:
    """Describe which links are missing, or None if both are present."""
    reason = ''
    if not next_found:
        reason += 'Missing next link. '
    if not prev_found:
        reason += 'Missing previous link. '
    return reason or None
