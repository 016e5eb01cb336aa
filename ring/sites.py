"""
Site records and ring entries.

A Website is one member of the ring as it appears in the input list.
WebringSite wraps a Website with the indices of its neighbours in the
final sequence.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, asdict


@dataclass
class Website:
    """One member site, as loaded from a site list."""

    url: str
    slug: str = ''
    name: str | None = None
    about: str | None = None
    rss: str | None = None
    owner: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> 'Website':
        """
        Build a Website from a loosely-typed mapping (JSON/TOML/CSV/YAML row).

        Unknown keys are ignored. Empty strings in optional columns (as
        produced by CSV readers) become None.

        Raises:
            ValueError: if the record has no url
        """
        if not isinstance(data, dict):
            raise ValueError(f"Website entry must be a mapping, got {type(data).__name__}")

        url = data.get('url')
        if not url:
            raise ValueError(f"Website entry is missing a url: {data!r}")

        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values['url'] = str(url)
        values['slug'] = str(values.get('slug') or '')
        for key in ('name', 'about', 'rss', 'owner'):
            value = values.get(key)
            values[key] = str(value) if value not in (None, '') else None
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class WebringSite:
    """A Website plus the indices of its next/previous neighbours."""

    website: Website
    next: int
    previous: int

    def to_dict(self) -> dict:
        return {
            'website': self.website.to_dict(),
            'next': self.next,
            'previous': self.previous,
        }


@dataclass
class WebringSiteList:
    """The final ring, plus any sites dropped by the audit."""

    sites: list[WebringSite] = field(default_factory=list)
    failed_sites: list[Website] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.sites)

    def __iter__(self):
        return iter(self.sites)

    def __getitem__(self, index: int) -> WebringSite:
        return self.sites[index]

    def next_site(self, entry: WebringSite) -> Website:
        return self.sites[entry.next].website

    def previous_site(self, entry: WebringSite) -> Website:
        return self.sites[entry.previous].website
