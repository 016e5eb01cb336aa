"""
Concurrent webring link audit.

Primary interface:
    from audit import audit_links, AuditConfig

    passing, outcomes = audit_links(websites, AuditConfig(base_url="https://ring.example"))

    # passing: websites whose live page links to both
    #          {base_url}/{slug}/next and {base_url}/{slug}/previous
    # outcomes: one AuditOutcome per site, in completion order
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace

import requests
from tqdm import tqdm

from ring.sites import Website

from .config import AuditConfig, AuditOutcome
from .fetcher import FetchError, build_session, fetch_html
from .links import expected_links, find_webring_links, failure_reason


__all__ = [
    'audit_links',
    'audit_website',
    'AuditConfig',
    'AuditOutcome',
    'FetchError',
    'build_session',
    'fetch_html',
    'find_webring_links',
]


logger = logging.getLogger(__name__)


def audit_website(
    session: requests.Session,
    website: Website,
    config: AuditConfig,
) -> AuditOutcome:
    """
    Fetch one member page and check it for both ring links.

    Never raises for network or parse problems; those become a
    'fetch_error' outcome.

    Args:
        session: Shared HTTP session
        website: Site to audit (not modified)
        config: Audit configuration

    Returns:
        AuditOutcome for this site
    """
    try:
        html, attempts = fetch_html(session, website.url, config)
    except FetchError as exc:
        return AuditOutcome(website=website, status='fetch_error', reason=str(exc), attempts=exc.attempts)

    next_link, prev_link = expected_links(
        config.base_url, website.slug, config.next_url_text, config.prev_url_text
    )

    try:
        next_found, prev_found = find_webring_links(html, next_link, prev_link)
    except Exception as exc:
        return AuditOutcome(
            website=website,
            status='fetch_error',
            reason=f"Failed to parse HTML from {website.url}: {exc}",
            attempts=attempts,
        )

    reason = failure_reason(next_found, prev_found)
    if reason:
        return AuditOutcome(website=website, status='failed', reason=reason, attempts=attempts)
    return AuditOutcome(website=website, status='passed', attempts=attempts)


def _log_outcome(outcome: AuditOutcome) -> None:
    if outcome.passed:
        logger.debug("Site passed audit: %s", outcome.website.url)
    elif outcome.status == 'failed':
        logger.warning("Site failed audit: %s | REASON: %s", outcome.website.url, outcome.reason)
    else:
        logger.error("Error during site audit: %s | %s", outcome.website.url, outcome.reason)


def audit_links(
    websites: list[Website],
    config: AuditConfig | None = None,
    session: requests.Session | None = None,
    progress: bool = False,
) -> tuple[list[Website], list[AuditOutcome]]:
    """
    Audit every website concurrently.

    Every site gets its own task straight away; results are gathered in
    completion order, so the passing list does not follow input order.
    One site failing never affects the others.

    Args:
        websites: Sites to audit
        config: Audit configuration (uses defaults if None)
        session: HTTP session to share (built from config if None)
        progress: Show a progress bar while tasks complete

    Returns:
        Tuple of (passing websites, all outcomes)
    """
    if config is None:
        config = AuditConfig()
    if not websites:
        return [], []

    owns_session = session is None
    workers = config.max_workers or len(websites)
    if session is None:
        session = build_session(config, pool_size=workers)

    passing: list[Website] = []
    outcomes: list[AuditOutcome] = []

    try:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(audit_website, session, replace(website), config): website
                for website in websites
            }
            with tqdm(total=len(futures), desc="Audit", unit="site", disable=not progress) as pbar:
                for future in as_completed(futures):
                    try:
                        outcome = future.result()
                    except Exception as exc:
                        outcome = AuditOutcome(
                            website=futures[future], status='fetch_error', reason=str(exc)
                        )
                    _log_outcome(outcome)
                    outcomes.append(outcome)
                    if outcome.passed:
                        passing.append(outcome.website)
                    pbar.update(1)
    finally:
        if owns_session:
            session.close()

    return passing, outcomes
