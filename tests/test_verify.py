"""
Tests for ring/verify.py.
"""

import sys
from pathlib import Path

# Ensure project root on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest

from ring.sites import Website
from ring.verify import VerificationError, is_valid_url, verify_websites, verify_unique_slugs


def _site(slug: str, url: str, owner: str | None = None) -> Website:
    return Website(slug=slug, url=url, owner=owner)


# ---------------------------------------------------------------------------
# URL shape
# ---------------------------------------------------------------------------

class TestUrlShape:

    @pytest.mark.parametrize("url", [
        "https://a.tld",
        "http://a.tld/",
        "https://sub.a.tld/~user/page?x=1#top",
        "http://localhost:8080/",
    ])
    def test_accepts_absolute_http_urls(self, url):
        assert is_valid_url(url)

    @pytest.mark.parametrize("url", [
        "",
        "a.tld",
        "ftp://a.tld",
        "https://",
        "https:// a.tld",
        "https://a.tld/has space",
        "//a.tld",
    ])
    def test_rejects_other_shapes(self, url):
        assert not is_valid_url(url)

    def test_bad_url_names_url_and_slug(self):
        with pytest.raises(VerificationError) as exc_info:
            verify_websites([_site("a", "https://a.tld"), _site("b", "not-a-url")])
        message = str(exc_info.value)
        assert "Unrecognized URL format" in message
        assert "not-a-url" in message
        assert "b" in message


# ---------------------------------------------------------------------------
# Uniqueness
# ---------------------------------------------------------------------------

class TestUniqueness:

    def test_valid_list_passes(self):
        verify_websites([
            _site("a", "https://a.tld"),
            _site("b", "https://b.tld"),
            _site("c", "https://c.tld"),
        ])

    def test_empty_list_passes(self):
        verify_websites([])

    def test_duplicate_slug_names_slug_and_owner(self):
        sites = [
            _site("a", "https://a.tld"),
            _site("a", "https://other.tld", owner="Second Owner"),
        ]
        with pytest.raises(VerificationError, match="Duplicate website slug found: a - Second Owner"):
            verify_websites(sites)

    def test_duplicate_url(self):
        sites = [
            _site("a", "https://a.tld", owner="First"),
            _site("b", "https://a.tld", owner="Second"),
        ]
        with pytest.raises(VerificationError, match="Duplicate website URL found: https://a.tld - Second"):
            verify_websites(sites)

    def test_first_violation_in_list_order_wins(self):
        sites = [
            _site("a", "https://a.tld"),
            _site("b", "https://a.tld"),  # duplicate URL first
            _site("a", "https://c.tld"),  # duplicate slug later
        ]
        with pytest.raises(VerificationError, match="Duplicate website URL"):
            verify_websites(sites)

    def test_url_check_precedes_slug_check_within_record(self):
        sites = [_site("a", "https://a.tld"), _site("a", "bogus")]
        with pytest.raises(VerificationError, match="Unrecognized URL format"):
            verify_websites(sites)

    def test_two_empty_slugs_are_duplicates(self):
        sites = [_site("", "https://a.tld"), _site("", "https://b.tld")]
        with pytest.raises(VerificationError, match="Duplicate website slug"):
            verify_websites(sites)

    def test_missing_owner_renders_empty(self):
        sites = [_site("a", "https://a.tld"), _site("a", "https://b.tld")]
        with pytest.raises(VerificationError, match=r"found: a - $"):
            verify_websites(sites)


class TestVerifyUniqueSlugs:

    def test_detects_collision(self):
        with pytest.raises(VerificationError, match="httpsacom"):
            verify_unique_slugs([_site("httpsacom", "https://a.com"), _site("httpsacom", "https://a-com")])

    def test_ignores_duplicate_urls(self):
        verify_unique_slugs([_site("a", "https://a.tld"), _site("b", "https://a.tld")])
