"""
Orchestration for webring builds: settings, site-list loading, the
verify/audit/sequence pipeline, and static output.
"""

from .config import (
    AppSettings,
    ConfigError,
    load_config_file,
    apply_config,
    settings_from_args,
)
from .lists import (
    SiteListError,
    parse_website_list,
    load_website_file,
    acquire_file_data,
    get_extension_from_path,
)
from .pipeline import (
    PipelineError,
    build_webring,
    render_webring,
    generate_webring_files,
)
from .render import (
    HtmlGenerator,
    RenderError,
    build_sites_table_html,
    build_sites_grid_html,
    generate_opml,
    copy_asset_files,
)
from .owner import format_owner

__all__ = [
    "AppSettings",
    "ConfigError",
    "load_config_file",
    "apply_config",
    "settings_from_args",
    "SiteListError",
    "parse_website_list",
    "load_website_file",
    "acquire_file_data",
    "get_extension_from_path",
    "PipelineError",
    "build_webring",
    "render_webring",
    "generate_webring_files",
    "HtmlGenerator",
    "RenderError",
    "build_sites_table_html",
    "build_sites_grid_html",
    "generate_opml",
    "copy_asset_files",
    "format_owner",
]
