"""
Ring sequencing: shuffle, assign slugs, link neighbours.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Iterable

from .sites import Website, WebringSite, WebringSiteList


logger = logging.getLogger(__name__)


def derive_slug(url: str) -> str:
    """Derive a slug from a URL by dropping every non-alphanumeric character."""
    return ''.join(ch for ch in url if ch.isalnum())


def assign_slugs(websites: list[Website], no_slug: bool = False) -> None:
    """
    Fill in slugs in place, in current list order.

    With no_slug, every slug becomes its 1-based position. Otherwise only
    empty slugs are filled, derived from the URL. Derived slugs are not
    deduplicated here.
    """
    for index, website in enumerate(websites):
        if no_slug:
            website.slug = str(index + 1)
        elif not website.slug:
            website.slug = derive_slug(website.url)


def link_sequence(websites: list[Website]) -> list[WebringSite]:
    """Wrap websites in ring entries with circular next/previous indices."""
    count = len(websites)
    return [
        WebringSite(
            website=website,
            next=(index + 1) % count,
            previous=(index - 1 + count) % count,
        )
        for index, website in enumerate(websites)
    ]


def build_webring_sequence(
    websites: Iterable[Website],
    shuffle: bool = False,
    no_slug: bool = False,
    rng: random.Random | None = None,
) -> WebringSiteList:
    """
    Turn a list of websites into the ordered ring.

    Args:
        websites: Site records (copied, never modified in place)
        shuffle: Randomize the order before linking
        no_slug: Replace every slug with its 1-based position
        rng: Random source for shuffling (a fresh OS-seeded one if None)

    Returns:
        WebringSiteList whose entries form a single cycle in list order
    """
    ordered = [replace(website) for website in websites]

    if shuffle:
        logger.info("Shuffling website sequence...")
        if rng is None:
            rng = random.Random()
        rng.shuffle(ordered)

    assign_slugs(ordered, no_slug=no_slug)

    return WebringSiteList(sites=link_sequence(ordered))
