"""
Webring model and sequencing.

Primary interface:
    from ring import Website, verify_websites, build_webring_sequence

    verify_websites(websites)
    webring = build_webring_sequence(websites, shuffle=True)

    # webring.sites[i].next / .previous index into webring.sites
"""

from .sites import Website, WebringSite, WebringSiteList
from .verify import VerificationError, verify_websites, verify_unique_slugs, is_valid_url
from .sequence import build_webring_sequence, derive_slug


__all__ = [
    'Website',
    'WebringSite',
    'WebringSiteList',
    'VerificationError',
    'verify_websites',
    'verify_unique_slugs',
    'is_valid_url',
    'build_webring_sequence',
    'derive_slug',
]
