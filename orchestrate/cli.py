#!/usr/bin/env python3
"""
Command-line entry point: build a static webring from a list of sites.

Usage:
    ringfairy -l websites.json                  # verify, sequence, render
    ringfairy -l websites.json --audit -v       # also check member pages for ring links
    ringfairy -l a.json -l b.csv --shuffle      # merge lists, random order
    ringfairy --config ring.yaml --dry-run      # settings from file, write nothing
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from jinja2 import TemplateError

from ring.verify import VerificationError

from .config import AppSettings, ConfigError, apply_config, load_config_file, settings_from_args
from .lists import SiteListError
from .pipeline import PipelineError, generate_webring_files
from .render import RenderError


LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    # Every option defaults to None so that unset options can be filled from
    # the config file and then from AppSettings defaults.
    parser = argparse.ArgumentParser(
        prog="ringfairy",
        description="Generate the static files of a webring from a list of member sites",
    )
    parser.add_argument("-l", "--list", dest="filepath_list", action="append", metavar="FILE",
                        help="Website list (JSON/TOML/CSV/YAML file or URL); repeatable")
    parser.add_argument("--json", dest="json_lists", action="append", metavar="JSON",
                        help="Inline JSON website list; repeatable")
    parser.add_argument("--toml", dest="toml_lists", action="append", metavar="TOML",
                        help="Inline TOML website list; repeatable")
    parser.add_argument("-o", "--output", dest="path_output", help="Output directory")
    parser.add_argument("-a", "--assets", dest="path_assets", help="Directory of static files to copy")
    parser.add_argument("-t", "--templates", dest="path_templates", help="Template directory")
    parser.add_argument("--redirect-template", dest="filename_template_redirect",
                        help="Template used for every next/previous redirect page")
    parser.add_argument("-b", "--base-url", dest="base_url", help="Public URL the ring is served from")
    parser.add_argument("--ring-name", dest="ring_name", help="Ring name (also the OPML file name)")
    parser.add_argument("--ring-description", dest="ring_description", help="Ring description")
    parser.add_argument("--ring-owner", dest="ring_owner", help="Ring owner name")
    parser.add_argument("--ring-owner-site", dest="ring_owner_site", help="Ring owner website")
    parser.add_argument("--next-url-text", dest="next_url_text", help="Path segment for 'next' links")
    parser.add_argument("--prev-url-text", dest="prev_url_text", help="Path segment for 'previous' links")
    parser.add_argument("-c", "--config", help="Path to JSON/YAML/TOML settings file")
    parser.add_argument("--shuffle", action="store_true", default=None, help="Randomize the ring order")
    parser.add_argument("--no-slug", dest="no_slug", action="store_true", default=None,
                        help="Use sequential numbers instead of slugs")
    parser.add_argument("--skip-verification", dest="skip_verify", action="store_true", default=None,
                        help="Skip URL format and duplicate checks (not recommended)")
    parser.add_argument("--audit", action="store_true", default=None,
                        help="Drop sites whose pages do not link back to the ring")
    parser.add_argument("--audit-retries-max", dest="audit_retries_max", type=int,
                        help="Fetch attempts per site during the audit (default: 2)")
    parser.add_argument("--audit-retries-delay", dest="audit_retries_delay", type=int, metavar="MS",
                        help="Delay between fetch attempts in milliseconds (default: 100)")
    parser.add_argument("--audit-max-workers", dest="audit_max_workers", type=int,
                        help="Cap on concurrent audit requests (default: one per site)")
    parser.add_argument("--user-agent", dest="client_user_agent", help="User-Agent for audit requests")
    parser.add_argument("--accept", dest="client_header", help="Accept header for audit requests")
    parser.add_argument("--progress", action="store_true", default=None,
                        help="Show a progress bar during the audit")
    parser.add_argument("--dry-run", dest="dry_run", action="store_true", default=None,
                        help="Run every check without writing any files")
    parser.add_argument("--log-level", dest="log_level", help="Log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="More log output (-v info, -vv debug)")
    return parser


def resolve_settings(argv: list[str] | None = None) -> AppSettings:
    """Parse arguments, merge the config file, and return validated settings."""
    args = build_parser().parse_args(argv)
    provided_flags = {key for key, value in vars(args).items() if value is not None}

    if args.config:
        args = apply_config(args, load_config_file(args.config), provided_flags)

    if args.verbose:
        args.log_level = "INFO" if args.verbose == 1 else "DEBUG"

    return settings_from_args(args)


def main(argv: list[str] | None = None) -> int:
    try:
        settings = resolve_settings(argv)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(level=settings.log_level_number, format=LOG_FORMAT)
    logging.getLogger(__name__).info("Starting with settings: %s", settings)

    start = time.monotonic()
    try:
        webring = generate_webring_files(settings)
    except (VerificationError, SiteListError, PipelineError, RenderError, TemplateError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    elapsed_ms = (time.monotonic() - start) * 1000
    print(f"Webring: {len(webring)} sites", end="")
    if webring.failed_sites:
        print(f" ({len(webring.failed_sites)} failed the audit)", end="")
    if settings.dry_run:
        print(" [dry run, nothing written]", end="")
    else:
        print(f" -> {settings.path_output}", end="")
    print(f" in {elapsed_ms:.0f} ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
