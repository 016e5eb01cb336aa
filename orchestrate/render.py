"""
Static output for a finished webring.

Writes one redirect page per ring direction for every member, renders the
remaining templates (index pages and the like) with the shared ring
context, and writes an OPML feed list.
"""

from __future__ import annotations

import logging
import random
import shutil
import xml.etree.ElementTree as ET
from datetime import datetime
from html import escape
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from ring.sites import WebringSite, WebringSiteList

from .config import AppSettings
from .owner import format_owner


logger = logging.getLogger(__name__)


class RenderError(ValueError):
    """Raised when a ring cannot be written safely to the output directory."""
    pass


def check_output_slug(slug: str) -> str:
    """Return slug if it names a single directory under the output root."""
    if not slug or slug in (".", "..") or "/" in slug or "\\" in slug or "\x00" in slug:
        raise RenderError(f"Slug {slug!r} cannot be used as an output directory name")
    return slug


def _rss_link(rss: str | None) -> str:
    if not rss:
        return ""
    return f' <a href="{escape(rss)}" target="_blank">[rss]</a>'


def build_sites_table_html(sites: list[WebringSite]) -> str:
    """Render the member list as an HTML table."""
    rows = [
        "<table>",
        "<thead>",
        "<tr>",
        '<th scope="col">#</th>',
        '<th scope="col">Name</th>',
        '<th scope="col">URL</th>',
        '<th scope="col">About</th>',
        '<th scope="col">Owner</th>',
        "</tr>",
        "</thead>",
        "<tbody>",
    ]
    for index, entry in enumerate(sites):
        site = entry.website
        url = escape(site.url)
        rows.extend([
            "<tr>",
            f"<td>{index + 1}</td>",
            f"<td>{escape(site.slug)}</td>",
            f'<td><a href="{url}" target="_blank">{url}</a>{_rss_link(site.rss)}</td>',
            f"<td>{escape(site.about or '')}</td>",
            f"<td>{format_owner(site.owner) if site.owner else ''}</td>",
            "</tr>",
        ])
    rows.extend(["</tbody>", "</table>"])
    return "\n".join(rows) + "\n"


def build_sites_grid_html(sites: list[WebringSite]) -> str:
    """Render the member list as CSS-grid cards."""
    parts = ['<section class="cards">']
    for entry in sites:
        site = entry.website
        url = escape(site.url)
        owner = format_owner(site.owner) if site.owner else ""
        parts.extend([
            '<article class="card">',
            f'<div class="card-name">{owner} <span class="card-slug">({escape(site.slug)})</span></div>',
            '<div class="card-content">',
            f'<div class="card-link"><a href="{url}" target="_blank">{url}</a>&nbsp;{_rss_link(site.rss)}</div>',
            f'<div class="card-text">{escape(site.about or "")}</div>',
            "</div>",
            "</article>",
        ])
    parts.append("</section>")
    return "\n".join(parts)


def build_context(
    webring: WebringSiteList,
    settings: AppSettings,
    rng: random.Random | None = None,
) -> dict:
    """Template variables shared by every non-redirect page."""
    rng = rng or random.Random()
    featured = rng.choice(webring.sites).website if webring.sites else None

    return {
        "table_of_sites": Markup(build_sites_table_html(webring.sites)),
        "grid_of_sites": Markup(build_sites_grid_html(webring.sites)),
        "base_url": settings.base_url,
        "ring_name": settings.ring_name,
        "ring_description": settings.ring_description,
        "ring_owner": settings.ring_owner,
        "ring_owner_site": settings.ring_owner_site,
        "number_of_sites": len(webring.sites),
        "featured_site_name": (featured.name or featured.url) if featured else "",
        "featured_site_description": (featured.about or "") if featured else "",
        "featured_site_url": featured.url if featured else "",
        "current_time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "opml": f"./{settings.ring_name}.opml",
        "sites": [entry.to_dict() for entry in webring.sites],
        "failed_sites": [site.to_dict() for site in webring.failed_sites],
    }


class HtmlGenerator:
    """Renders webring pages from a directory of Jinja2 templates."""

    def __init__(self, template_path: str | Path):
        self.template_path = Path(template_path)
        if not self.template_path.is_dir():
            raise FileNotFoundError(f"Template directory not found: {self.template_path}")
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_path)),
            autoescape=select_autoescape(),
        )

    def write_content(self, file_path: Path, content: str) -> None:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        logger.info("Generated HTML file %s", file_path)

    def generate_content(self, webring: WebringSiteList, settings: AppSettings) -> None:
        """Write redirect pages, custom templates and the OPML file."""
        for entry in webring.sites:
            check_output_slug(entry.website.slug)

        output = Path(settings.path_output)
        output.mkdir(parents=True, exist_ok=True)

        context = build_context(webring, settings)
        for entry in webring.sites:
            self.generate_site(entry, webring, settings, context)

        self.generate_custom_templates(settings, context)
        generate_opml(webring, settings)

    def generate_site(
        self,
        entry: WebringSite,
        webring: WebringSiteList,
        settings: AppSettings,
        context: dict | None = None,
    ) -> None:
        """Write {slug}/{next}/index.html and {slug}/{previous}/index.html for one member."""
        site_path = Path(settings.path_output) / check_output_slug(entry.website.slug)
        template = self.env.get_template(settings.filename_template_redirect)

        for url_text, target in (
            (settings.next_url_text, webring.next_site(entry)),
            (settings.prev_url_text, webring.previous_site(entry)),
        ):
            content = template.render(**(context or {}), url=target.url, website=entry.website.to_dict())
            self.write_content(site_path / url_text / "index.html", content)

    def generate_custom_templates(self, settings: AppSettings, context: dict) -> None:
        """Render every template except the redirect one into the output root."""
        output = Path(settings.path_output)
        for template_name in self.env.list_templates():
            if template_name == settings.filename_template_redirect:
                continue
            content = self.env.get_template(template_name).render(**context)
            self.write_content(output / template_name, content)


def build_opml(webring: WebringSiteList, settings: AppSettings) -> ET.ElementTree:
    """Build an OPML 2.0 document listing every member RSS feed."""
    root = ET.Element("opml", version="2.0")
    head = ET.SubElement(root, "head")
    ET.SubElement(head, "title").text = settings.ring_description
    ET.SubElement(head, "ownerName").text = settings.ring_owner
    ET.SubElement(head, "ownerId").text = settings.ring_owner_site
    body = ET.SubElement(root, "body")

    for entry in webring.sites:
        site = entry.website
        if site.owner and site.rss:
            ET.SubElement(
                body,
                "outline",
                text=site.owner,
                title=site.owner,
                type="rss",
                xmlUrl=site.rss,
            )
    return ET.ElementTree(root)


def generate_opml(webring: WebringSiteList, settings: AppSettings) -> Path:
    """Write {path_output}/{ring_name}.opml and return its path."""
    output = Path(settings.path_output)
    output.mkdir(parents=True, exist_ok=True)
    opml_path = output / f"{settings.ring_name}.opml"
    tree = build_opml(webring, settings)
    ET.indent(tree)
    tree.write(opml_path, encoding="utf-8", xml_declaration=True)
    logger.info("OPML file generated: %s", opml_path)
    return opml_path


def copy_asset_files(source_dir: str | Path, output_dir: str | Path) -> int:
    """Copy the regular files of source_dir into output_dir. Returns the count copied."""
    source = Path(source_dir)
    if not source.is_dir():
        logger.info("No assets directory at %s, skipping", source)
        return 0

    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)
    copied = 0
    for entry in source.iterdir():
        if entry.is_file():
            shutil.copy2(entry, output / entry.name)
            copied += 1
    logger.info("Copied %d asset files to %s", copied, output)
    return copied
