"""
Site-list loading.

Lists can come from local files, remote URLs, or inline JSON/TOML strings.
Every source is normalized to a flat list of Website records.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import tomllib
from pathlib import Path
from urllib.parse import urlparse

import requests
import yaml

from ring.sites import Website

from .config import AppSettings


logger = logging.getLogger(__name__)

DOWNLOAD_TIMEOUT = 30


class SiteListError(ValueError):
    """Raised when a site list cannot be read or parsed."""
    pass


def get_extension_from_path(path: str) -> str | None:
    """Return the lowercase final extension of path ('archive.tar.gz' -> 'gz')."""
    if path.startswith(("http://", "https://")):
        path = urlparse(path).path
    suffix = Path(path).suffix
    return suffix[1:].lower() if suffix else None


def acquire_file_data(path_or_url: str) -> str:
    """Read a local file, or download it when given an http(s) URL."""
    if path_or_url.startswith(("http://", "https://")):
        try:
            resp = requests.get(path_or_url, timeout=DOWNLOAD_TIMEOUT)
        except requests.RequestException as exc:
            raise SiteListError(f"Failed to fetch file over network: {exc}") from exc
        if not resp.ok:
            raise SiteListError(f"Failed to fetch file over network: {resp.status_code}")
        return resp.text

    if not path_or_url:
        raise SiteListError("Empty site list path")
    try:
        return Path(path_or_url).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SiteListError(f"Could not read site list {path_or_url}: {exc}") from exc


def _records_from_document(data, source: str) -> list[dict]:
    # Accept a bare list, or a mapping holding the list under "websites"
    # (or under its only key, which is how a TOML array of tables parses)
    if isinstance(data, dict):
        if "websites" in data:
            data = data["websites"]
        elif len(data) == 1:
            data = next(iter(data.values()))
    if not isinstance(data, list):
        raise SiteListError(f"Site list {source} must be a list of websites")
    return data


def _to_websites(records: list, source: str) -> list[Website]:
    websites = []
    for record in records:
        try:
            websites.append(Website.from_dict(record))
        except ValueError as exc:
            raise SiteListError(f"Invalid entry in {source}: {exc}") from exc
    return websites


def parse_json_websites(text: str, source: str = "JSON literal") -> list[Website]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SiteListError(f"Failed to parse JSON {source}: {exc}") from exc
    return _to_websites(_records_from_document(data, source), source)


def parse_toml_websites(text: str, source: str = "TOML literal") -> list[Website]:
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise SiteListError(f"Failed to parse TOML {source}: {exc}") from exc
    return _to_websites(_records_from_document(data, source), source)


def parse_yaml_websites(text: str, source: str = "YAML document") -> list[Website]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SiteListError(f"Failed to parse YAML {source}: {exc}") from exc
    if data is None:
        return []
    return _to_websites(_records_from_document(data, source), source)


def parse_csv_websites(text: str, source: str = "CSV document") -> list[Website]:
    reader = csv.DictReader(io.StringIO(text))
    try:
        rows = [dict(row) for row in reader]
    except csv.Error as exc:
        raise SiteListError(f"Failed to parse CSV row in {source}: {exc}") from exc
    return _to_websites(rows, source)


PARSERS = {
    "json": parse_json_websites,
    "toml": parse_toml_websites,
    "csv": parse_csv_websites,
    "yaml": parse_yaml_websites,
    "yml": parse_yaml_websites,
}


def load_website_file(path_or_url: str) -> list[Website]:
    """Load one site list file, choosing the parser by extension (JSON if none)."""
    ext = get_extension_from_path(path_or_url) or "json"
    parser = PARSERS.get(ext)
    if parser is None:
        raise SiteListError(f"Unsupported file format '{ext}' ({path_or_url})")
    websites = parser(acquire_file_data(path_or_url), f"file '{path_or_url}'")
    logger.info("Loaded %d websites from %s", len(websites), path_or_url)
    return websites


def parse_website_list(settings: AppSettings) -> list[Website]:
    """
    Load every configured site source and concatenate them.

    Order: inline JSON literals, inline TOML literals, then each file or
    URL in settings.filepath_list.
    """
    websites: list[Website] = []
    for literal in settings.json_lists:
        websites.extend(parse_json_websites(literal))
    for literal in settings.toml_lists:
        websites.extend(parse_toml_websites(literal))
    for path in settings.filepath_list:
        websites.extend(load_website_file(path))
    return websites
