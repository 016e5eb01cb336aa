"""
Configuration and outcome types for the link audit.
"""

from dataclasses import dataclass
from typing import Literal

from ring.sites import Website


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/90.0.4430.212 Safari/537.36"
)

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"

REQUEST_TIMEOUT = 30.0
MAX_REDIRECTS = 5


@dataclass
class AuditConfig:
    """Configuration for auditing member sites."""

    # Expected link layout: {base_url}/{slug}/{next_url_text|prev_url_text}
    base_url: str = 'https://example.com'
    next_url_text: str = 'next'
    prev_url_text: str = 'previous'

    # Retry policy
    retries_max: int = 2  # total attempts per site, >= 1
    retries_delay_ms: int = 100  # wait between attempts

    # HTTP client
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT
    timeout: float = REQUEST_TIMEOUT
    max_redirects: int = MAX_REDIRECTS

    # Concurrency (None = one worker per site)
    max_workers: int | None = None


AuditStatus = Literal['passed', 'failed', 'fetch_error']


@dataclass
class AuditOutcome:
    """Result of auditing a single site."""

    website: Website
    status: AuditStatus
    reason: str | None = None
    attempts: int = 0

    @property
    def passed(self) -> bool:
        return self.status == 'passed'
