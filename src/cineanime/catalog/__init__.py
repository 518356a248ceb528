"""Movie catalog — data models.

Persisted JSON uses camelCase keys (``theaterReleaseDate``, ``lastSourceDate``,
``publishedDate``); attributes are snake_case.
"""

from dataclasses import dataclass, field


@dataclass
class Source:
    """An article cited by a catalog record."""

    url: str
    title: str = ""
    description: str = ""
    published_date: str = ""  # ISO datetime

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "title": self.title,
            "description": self.description,
            "publishedDate": self.published_date,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "Source":
        return cls(
            url=raw["url"],
            title=raw.get("title") or "",
            description=raw.get("description") or "",
            published_date=raw.get("publishedDate") or "",
        )


@dataclass
class CandidateMention:
    """A movie mention returned by the LLM for one article."""

    title: str
    theater_release_date: str | None = None  # YYYY-MM-DD
    theater_end_date: str | None = None

    def to_dict(self) -> dict:
        data = {"title": self.title}
        if self.theater_release_date:
            data["theaterReleaseDate"] = self.theater_release_date
        if self.theater_end_date:
            data["theaterEndDate"] = self.theater_end_date
        return data


@dataclass
class MovieRecord:
    """One known film."""

    slug: str
    title: str
    aliases: set[str] = field(default_factory=set)
    theater_release_date: str | None = None
    theater_end_date: str | None = None
    last_source_date: str | None = None
    sources: list[Source] = field(default_factory=list)
    tmdb_id: int | None = None
    poster: str | None = None  # site-relative, e.g. "images/<slug>.jpg"

    def has_source(self, url: str) -> bool:
        return any(s.url == url for s in self.sources)

    def to_dict(self) -> dict:
        data = {
            "slug": self.slug,
            "title": self.title,
            "aliases": sorted(self.aliases),
            "theaterReleaseDate": self.theater_release_date,
            "theaterEndDate": self.theater_end_date,
            "lastSourceDate": self.last_source_date,
            "sources": [s.to_dict() for s in self.sources],
        }
        if self.tmdb_id is not None:
            data["tmdbId"] = self.tmdb_id
        if self.poster:
            data["poster"] = self.poster
        return data

    @classmethod
    def from_dict(cls, raw: dict) -> "MovieRecord":
        return cls(
            slug=raw["slug"],
            title=raw["title"],
            aliases=set(raw.get("aliases") or []),
            theater_release_date=raw.get("theaterReleaseDate"),
            theater_end_date=raw.get("theaterEndDate"),
            last_source_date=raw.get("lastSourceDate"),
            sources=[Source.from_dict(s) for s in raw.get("sources") or []],
            tmdb_id=raw.get("tmdbId"),
            poster=raw.get("poster"),
        )


@dataclass
class FeedSource:
    """A polled feed and its last-seen update watermark."""

    name: str
    url: str
    last_update_date: str | None = None  # ISO datetime

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "url": self.url,
            "lastUpdateDate": self.last_update_date,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "FeedSource":
        return cls(
            name=raw["name"],
            url=raw["url"],
            last_update_date=raw.get("lastUpdateDate"),
        )
