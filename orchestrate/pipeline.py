"""
Webring build pipeline.

verify -> audit (optional) -> sequence -> render (unless dry run)
"""

from __future__ import annotations

import logging
import random

import requests

from audit import audit_links
from ring.sequence import build_webring_sequence
from ring.sites import Website, WebringSiteList
from ring.verify import verify_websites, verify_unique_slugs

from .config import AppSettings
from .lists import parse_website_list
from .render import HtmlGenerator, copy_asset_files


logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Raised when the run cannot produce a ring."""
    pass


def build_webring(
    websites: list[Website],
    settings: AppSettings,
    session: requests.Session | None = None,
    rng: random.Random | None = None,
) -> WebringSiteList:
    """
    Validate, audit and sequence a list of websites.

    Args:
        websites: Site records from the loader
        settings: Run settings (verification, audit and ring options)
        session: HTTP session for the audit (built on demand if None)
        rng: Random source for shuffling

    Returns:
        WebringSiteList ready for rendering

    Raises:
        VerificationError: if verification is on and a record is invalid
        PipelineError: if no site is left after the audit
    """
    if not settings.skip_verify:
        logger.info("Verifying sites...")
        verify_websites(websites)
        logger.info("All site entries verified.")

    failed: list[Website] = []
    if settings.audit:
        logger.info("Auditing sites for webring links...")
        passing, outcomes = audit_links(
            websites,
            settings.audit_config(),
            session=session,
            progress=settings.progress,
        )
        failed = [outcome.website for outcome in outcomes if not outcome.passed]
        logger.info(
            "Audit complete. Detected links on %d out of %d sites.",
            len(passing),
            len(websites),
        )
        websites = passing

    if not websites:
        raise PipelineError("No valid sites passed the audit.")

    webring = build_webring_sequence(
        websites,
        shuffle=settings.shuffle,
        no_slug=settings.no_slug,
        rng=rng,
    )
    webring.failed_sites = failed

    if not settings.skip_verify:
        verify_unique_slugs(entry.website for entry in webring.sites)

    return webring


def render_webring(webring: WebringSiteList, settings: AppSettings) -> None:
    """Write every output file for a finished ring."""
    logger.info("Generating webring HTML...")
    generator = HtmlGenerator(settings.path_templates)
    generator.generate_content(webring, settings)
    copy_asset_files(settings.path_assets, settings.path_output)
    logger.info("Finished generating webring HTML.")


def generate_webring_files(settings: AppSettings) -> WebringSiteList:
    """
    Load the configured site lists and build the webring.

    Output files are written unless settings.dry_run is set.
    """
    websites = parse_website_list(settings)
    logger.info("Loaded %d websites", len(websites))

    webring = build_webring(websites, settings)

    if settings.dry_run:
        logger.info("Dry run: skipping file generation.")
    else:
        render_webring(webring, settings)

    return webring
