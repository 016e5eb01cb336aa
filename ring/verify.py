"""
Offline checks over a website list.

Rules run per record, in list order, and the first violation wins:
URL shape, then slug uniqueness, then URL uniqueness.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from .sites import Website


logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r'^(http|https)://[^\s/$.?#].[^\s]*$')


class VerificationError(ValueError):
    """Raised when a website list breaks a structural or uniqueness rule."""
    pass


def is_valid_url(url: str) -> bool:
    """Check that url looks like an absolute http(s) URL."""
    return bool(URL_PATTERN.match(url or ''))


def verify_websites(websites: Iterable[Website]) -> None:
    """
    Check every website for a usable URL and for duplicate slugs/URLs.

    Args:
        websites: Site records in input order

    Raises:
        VerificationError: on the first offending record
    """
    slugs: set[str] = set()
    urls: set[str] = set()

    for website in websites:
        if not is_valid_url(website.url):
            raise VerificationError(
                f"Unrecognized URL format: {website.url} - {website.slug}"
            )
        if website.slug in slugs:
            raise VerificationError(
                f"Duplicate website slug found: {website.slug} - {website.owner or ''}"
            )
        slugs.add(website.slug)
        if website.url in urls:
            raise VerificationError(
                f"Duplicate website URL found: {website.url} - {website.owner or ''}"
            )
        urls.add(website.url)

    logger.debug("Verified %d website entries", len(urls))


def verify_unique_slugs(websites: Iterable[Website]) -> None:
    """
    Check slug uniqueness only.

    Used after slugs have been derived from URLs, where two records can
    end up with the same slug.

    Raises:
        VerificationError: on the first duplicate slug
    """
    seen: set[str] = set()
    for website in websites:
        if website.slug in seen:
            raise VerificationError(
                f"Duplicate website slug found: {website.slug} - {website.owner or ''}"
            )
        seen.add(website.slug)
