"""
Tests for orchestrate/lists.py (site-list loading).
"""

import json
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

# Ensure project root on path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
import requests

from orchestrate.config import AppSettings
from orchestrate.lists import (
    SiteListError,
    acquire_file_data,
    get_extension_from_path,
    load_website_file,
    parse_csv_websites,
    parse_json_websites,
    parse_toml_websites,
    parse_website_list,
    parse_yaml_websites,
)


# =============================================================================
# Extensions and file access
# =============================================================================

class TestGetExtension:

    def test_simple(self):
        assert get_extension_from_path("file.txt") == "txt"

    def test_no_extension(self):
        assert get_extension_from_path("file") is None

    def test_multiple_dots(self):
        assert get_extension_from_path("archive.tar.gz") == "gz"

    def test_uppercase(self):
        assert get_extension_from_path("Sites.JSON") == "json"

    def test_url_query_ignored(self):
        assert get_extension_from_path("https://host.tld/list.toml?raw=1") == "toml"


class TestAcquireFileData:

    def test_nonexistent_file(self):
        with pytest.raises(SiteListError):
            acquire_file_data("/path/to/a/nonexistent/file.txt")

    def test_empty_path(self):
        with pytest.raises(SiteListError):
            acquire_file_data("")

    def test_reads_local_file(self, tmp_path):
        path = tmp_path / "x.json"
        path.write_text("[]", encoding="utf-8")
        assert acquire_file_data(str(path)) == "[]"

    def test_downloads_url(self):
        resp = MagicMock(ok=True, status_code=200, text="[]")
        with patch("orchestrate.lists.requests.get", return_value=resp) as get:
            assert acquire_file_data("https://host.tld/sites.json") == "[]"
        assert get.call_args.args == ("https://host.tld/sites.json",)

    def test_download_http_error(self):
        resp = MagicMock(ok=False, status_code=404, text="")
        with patch("orchestrate.lists.requests.get", return_value=resp):
            with pytest.raises(SiteListError, match="404"):
                acquire_file_data("https://host.tld/sites.json")

    def test_download_transport_error(self):
        with patch("orchestrate.lists.requests.get", side_effect=requests.ConnectionError("down")):
            with pytest.raises(SiteListError, match="Failed to fetch"):
                acquire_file_data("http://")


# =============================================================================
# Formats
# =============================================================================

class TestFormats:

    def test_json_list(self):
        sites = parse_json_websites(json.dumps([
            {"slug": "a", "url": "https://a.tld", "owner": "Ann", "extra": "ignored"},
            {"url": "https://b.tld"},
        ]))
        assert [(s.slug, s.url, s.owner) for s in sites] == [
            ("a", "https://a.tld", "Ann"),
            ("", "https://b.tld", None),
        ]

    def test_json_mapping_with_websites_key(self):
        sites = parse_json_websites('{"websites": [{"slug": "a", "url": "https://a.tld"}]}')
        assert sites[0].slug == "a"

    def test_json_invalid(self):
        with pytest.raises(SiteListError, match="Failed to parse JSON"):
            parse_json_websites("[{")

    def test_json_not_a_list(self):
        with pytest.raises(SiteListError, match="must be a list"):
            parse_json_websites('"just a string"')

    def test_missing_url(self):
        with pytest.raises(SiteListError, match="missing a url"):
            parse_json_websites('[{"slug": "a"}]')

    def test_toml_array_of_tables(self):
        text = (
            '[[websites]]\nslug = "a"\nurl = "https://a.tld"\nrss = "https://a.tld/rss"\n\n'
            '[[websites]]\nslug = "b"\nurl = "https://b.tld"\n'
        )
        sites = parse_toml_websites(text)
        assert [s.slug for s in sites] == ["a", "b"]
        assert sites[0].rss == "https://a.tld/rss"

    def test_toml_invalid(self):
        with pytest.raises(SiteListError, match="Failed to parse TOML"):
            parse_toml_websites("[[websites]\nslug=")

    def test_csv_with_blank_columns(self):
        text = "slug,name,about,url,rss,owner\na,Alpha,,https://a.tld,,Ann\nb,,,https://b.tld,,\n"
        sites = parse_csv_websites(text)
        assert [s.slug for s in sites] == ["a", "b"]
        assert sites[0].name == "Alpha"
        assert sites[0].about is None
        assert sites[1].owner is None

    def test_yaml(self):
        text = "- slug: a\n  url: https://a.tld\n- slug: b\n  url: https://b.tld\n"
        assert [s.slug for s in parse_yaml_websites(text)] == ["a", "b"]

    def test_yaml_empty_document(self):
        assert parse_yaml_websites("") == []


# =============================================================================
# Files and merged sources
# =============================================================================

class TestLoadWebsiteFile:

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "sites.xml"
        path.write_text("<sites/>", encoding="utf-8")
        with pytest.raises(SiteListError, match="Unsupported file format 'xml'"):
            load_website_file(str(path))

    def test_no_extension_defaults_to_json(self, tmp_path):
        path = tmp_path / "sites"
        path.write_text('[{"slug": "a", "url": "https://a.tld"}]', encoding="utf-8")
        assert load_website_file(str(path))[0].slug == "a"


class TestParseWebsiteList:

    def test_merges_literals_then_files(self, tmp_path):
        csv_path = tmp_path / "more.csv"
        csv_path.write_text("slug,url\nd,https://d.tld\n", encoding="utf-8")
        settings = AppSettings(
            json_lists=['[{"slug": "a", "url": "https://a.tld"}]'],
            toml_lists=['[[websites]]\nslug = "b"\nurl = "https://b.tld"\n'],
            filepath_list=[str(csv_path)],
        )

        sites = parse_website_list(settings)

        assert [s.slug for s in sites] == ["a", "b", "d"]

    def test_no_sources(self):
        assert parse_website_list(AppSettings(filepath_list=[])) == []
