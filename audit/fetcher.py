"""
HTTP fetch layer for the audit: a shared session plus a bounded retry loop.
"""

import logging
import time
from typing import Callable

import requests
from requests.adapters import HTTPAdapter

from .config import AuditConfig


logger = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 10
CHUNK_SIZE = 16 * 1024


class FetchError(Exception):
    """Raised when a page could not be fetched within the retry budget."""

    def __init__(self, url: str, attempts: int, last_error: Exception | None = None):
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        message = f"Failed to fetch URL {url} after {attempts} attempts"
        if last_error is not None:
            message += f": {last_error}"
        super().__init__(message)


def build_session(config: AuditConfig, pool_size: int | None = None) -> requests.Session:
    """
    Build the HTTP session shared by every audit task.

    Carries the configured User-Agent and Accept headers and the
    redirect limit. The connection pool holds pool_size connections per
    host (default: config.max_workers, else 10) so that concurrent
    workers do not queue on it. The timeout is applied per request.
    """
    session = requests.Session()
    session.headers.update({
        'User-Agent': config.user_agent,
        'Accept': config.accept,
    })
    session.max_redirects = config.max_redirects
    adapter = HTTPAdapter(pool_maxsize=pool_size or config.max_workers or DEFAULT_POOL_SIZE)
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    return session


def _read_body(resp: requests.Response, deadline: float, clock: Callable[[], float]) -> str:
    # The socket timeout only bounds each read; a server trickling bytes
    # is cut off here once the whole request has run past the deadline.
    chunks = []
    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
        if clock() > deadline:
            raise requests.Timeout(f"Response body not received before the deadline ({resp.url})")
        chunks.append(chunk)
    body = b''.join(chunks)
    try:
        return body.decode(resp.encoding or 'utf-8', errors='replace')
    except LookupError:
        return body.decode('utf-8', errors='replace')


def fetch_html(
    session: requests.Session,
    url: str,
    config: AuditConfig,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> tuple[str, int]:
    """
    Fetch a page body, retrying on transport errors.

    config.timeout bounds each attempt as a whole (connect, redirects and
    body), not just each socket read.

    Args:
        session: Shared HTTP session
        url: URL to fetch
        config: Audit configuration (retry count, delay, timeout)
        sleep: Delay function, injectable for tests
        clock: Monotonic clock, injectable for tests

    Returns:
        Tuple of (html, attempts used)

    Raises:
        FetchError: when every attempt failed
    """
    max_attempts = max(1, config.retries_max)
    delay = config.retries_delay_ms / 1000.0
    last_error: Exception | None = None

    for attempt in range(1, max_attempts + 1):
        deadline = clock() + config.timeout
        try:
            resp = session.get(url, timeout=config.timeout, allow_redirects=True, stream=True)
            try:
                return _read_body(resp, deadline, clock), attempt
            finally:
                resp.close()
        except requests.RequestException as exc:
            last_error = exc
            logger.warning("Failed to fetch %s on attempt %d: %s", url, attempt, exc)

        if attempt < max_attempts:
            sleep(delay)

    raise FetchError(url, max_attempts, last_error)
