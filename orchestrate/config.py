"""
Settings for a webring build, and loading/merging of config files.

Precedence: command line > config file > defaults.
"""

from __future__ import annotations

import argparse
import json
import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from audit.config import AuditConfig, DEFAULT_ACCEPT, DEFAULT_USER_AGENT


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(ValueError):
    """Raised for unreadable config files or invalid settings."""
    pass


@dataclass
class AppSettings:
    """Everything a webring build needs to know."""

    # Inputs
    filepath_list: list[str] = field(default_factory=lambda: ["./websites.json"])
    json_lists: list[str] = field(default_factory=list)
    toml_lists: list[str] = field(default_factory=list)

    # Output
    path_output: str = "./webring"
    path_assets: str = "./assets"
    path_templates: str = "./templates"
    filename_template_redirect: str = "redirect.html"

    # Ring metadata
    base_url: str = "https://example.com"
    ring_name: str = "webring"
    ring_description: str = "A webring"
    ring_owner: str = ""
    ring_owner_site: str = ""
    next_url_text: str = "next"
    prev_url_text: str = "previous"

    # Ring options
    shuffle: bool = False
    no_slug: bool = False
    skip_verify: bool = False
    dry_run: bool = False

    # Audit
    audit: bool = False
    audit_retries_max: int = 2
    audit_retries_delay: int = 100  # ms
    audit_max_workers: int | None = None
    client_user_agent: str = DEFAULT_USER_AGENT
    client_header: str = DEFAULT_ACCEPT

    # Console
    log_level: str = "WARNING"
    progress: bool = False

    def _check_types(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            expected = f.type
            if expected.endswith(" | None"):
                if value is None:
                    continue
                expected = expected[: -len(" | None")]
            if expected == "list[str]":
                ok = isinstance(value, list) and all(isinstance(item, str) for item in value)
            elif expected == "int":
                ok = isinstance(value, int) and not isinstance(value, bool)
            elif expected == "bool":
                ok = isinstance(value, bool)
            else:
                ok = isinstance(value, str)
            if not ok:
                raise ConfigError(f"{f.name} must be {expected}, got {type(value).__name__} ({value!r})")

    def validate(self) -> "AppSettings":
        self._check_types()
        if self.audit_retries_max < 1:
            raise ConfigError(f"audit_retries_max must be at least 1 (got {self.audit_retries_max})")
        if self.audit_retries_delay < 0:
            raise ConfigError(f"audit_retries_delay must not be negative (got {self.audit_retries_delay})")
        if self.audit_max_workers is not None and self.audit_max_workers < 1:
            raise ConfigError(f"audit_max_workers must be at least 1 (got {self.audit_max_workers})")
        if not self.next_url_text or not self.prev_url_text:
            raise ConfigError("next_url_text and prev_url_text must not be empty")
        if self.next_url_text == self.prev_url_text:
            raise ConfigError("next_url_text and prev_url_text must differ")
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level}")
        return self

    def audit_config(self) -> AuditConfig:
        """Build the audit configuration from these settings."""
        return AuditConfig(
            base_url=self.base_url,
            next_url_text=self.next_url_text,
            prev_url_text=self.prev_url_text,
            retries_max=self.audit_retries_max,
            retries_delay_ms=self.audit_retries_delay,
            user_agent=self.client_user_agent,
            accept=self.client_header,
            max_workers=self.audit_max_workers,
        )

    @property
    def log_level_number(self) -> int:
        return getattr(logging, str(self.log_level).upper())


SETTING_NAMES = frozenset(f.name for f in fields(AppSettings))


def load_config_file(path: str) -> dict:
    """Load a settings file from JSON, YAML or TOML."""
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")

    # Handle empty files (e.g., /dev/null) gracefully
    try:
        content = p.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc
    if not content:
        return {}

    suffix = p.suffix.lower()
    try:
        if suffix in (".yaml", ".yml"):
            result = yaml.safe_load(content)
        elif suffix == ".toml":
            result = tomllib.loads(content)
        else:
            result = json.loads(content)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not parse config file {path}: {exc}") from exc

    if not result:
        return {}
    if not isinstance(result, dict):
        raise ConfigError(f"Config file {path} must contain a mapping of settings")
    return result


# Config-file keys that differ from the setting names
CONFIG_ALIASES = {
    "list": "filepath_list",
    "lists": "filepath_list",
    "output": "path_output",
    "assets": "path_assets",
    "templates": "path_templates",
    "skip_verification": "skip_verify",
    "verbosity": "log_level",
    "user_agent": "client_user_agent",
    "accept": "client_header",
}


LIST_SETTINGS = frozenset({"filepath_list", "json_lists", "toml_lists"})


def apply_config(
    args: argparse.Namespace,
    cfg: dict,
    provided_flags: set[str],
) -> argparse.Namespace:
    """Apply config file values to args, respecting CLI overrides."""
    if not cfg:
        return args

    applied_keys = getattr(args, "_config_keys", set())
    for key, value in cfg.items():
        arg_key = CONFIG_ALIASES.get(key, key)
        if arg_key not in SETTING_NAMES:
            continue
        if arg_key in provided_flags:
            continue
        if arg_key in LIST_SETTINGS and isinstance(value, str):
            value = [value]
        setattr(args, arg_key, value)
        applied_keys.add(arg_key)

    setattr(args, "_config_keys", applied_keys)
    return args


def settings_from_args(args: argparse.Namespace) -> AppSettings:
    """Build validated settings from a (config-merged) argparse namespace."""
    values = {
        name: value
        for name, value in vars(args).items()
        if name in SETTING_NAMES and value is not None
    }
    return AppSettings(**values).validate()
