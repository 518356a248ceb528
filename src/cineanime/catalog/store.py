"""JSON persistence for the movie catalog and the polled feed sources.

Both files are whole-document rewrites: the document is written to a
sibling temp file and renamed over the original.
"""

import json
import logging
import os
from collections.abc import Iterator
from pathlib import Path

from cineanime.catalog import FeedSource, MovieRecord

logger = logging.getLogger(__name__)

CATALOG_FILENAME = "movies.json"
SOURCES_FILENAME = "sources.json"


class CatalogError(ValueError):
    """Persisted catalog or source list is malformed."""


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(
        json.dumps(data, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    os.replace(tmp, path)


def _read_json_array(path: Path) -> list:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise CatalogError(f"{path}: expected a JSON array")
    return raw


class Catalog:
    """In-memory movie catalog keyed by slug."""

    def __init__(self, records=(), path: Path | None = None) -> None:
        self.path = path
        self._records: dict[str, MovieRecord] = {}
        for record in records:
            self._records[record.slug] = record

    @classmethod
    def load(cls, path: Path) -> "Catalog":
        """Load from JSON. Returns an empty catalog if the file doesn't exist.

        Raises CatalogError when a record is missing required fields or
        when slugs/aliases collide between records.
        """
        path = Path(path)
        if not path.exists():
            logger.info("No catalog at %s, starting empty", path)
            return cls(path=path)

        records = []
        for i, raw in enumerate(_read_json_array(path)):
            try:
                records.append(MovieRecord.from_dict(raw))
            except (KeyError, TypeError, AttributeError) as e:
                raise CatalogError(f"{path}: invalid movie at index {i}: {e!r}") from e

        catalog = cls(path=path)
        owners: dict[str, str] = {}
        for record in records:
            for key in (record.slug, *sorted(record.aliases)):
                owner = owners.get(key)
                if owner is not None and owner != record.slug:
                    raise CatalogError(
                        f"{path}: {key!r} of {record.slug!r} collides with {owner!r}"
                    )
                owners[key] = record.slug
            catalog.put(record)

        logger.info("Loaded %d movies from %s", len(catalog), path)
        return catalog

    def save(self, path: Path | None = None) -> None:
        target = Path(path or self.path)
        _write_json(target, [r.to_dict() for r in self])

    def get(self, slug: str) -> MovieRecord | None:
        return self._records.get(slug)

    def find(self, slug: str) -> MovieRecord | None:
        """Find a record by its own slug, then by alias (linear scan)."""
        record = self._records.get(slug)
        if record is not None:
            return record
        for candidate in self._records.values():
            if slug in candidate.aliases:
                return candidate
        return None

    def put(self, record: MovieRecord) -> None:
        self._records[record.slug] = record

    def __contains__(self, slug: str) -> bool:
        return slug in self._records

    def __iter__(self) -> Iterator[MovieRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


class FeedSourceList:
    """The polled feeds, persisted with their update watermarks."""

    def __init__(self, sources=(), path: Path | None = None) -> None:
        self.path = path
        self.sources: list[FeedSource] = list(sources)

    @classmethod
    def load(cls, path: Path, seed_url: str = "") -> "FeedSourceList":
        """Load from JSON.

        If the file doesn't exist and ``seed_url`` is given, starts with a
        single ``google-alert`` source pointing at it.
        """
        path = Path(path)
        if not path.exists():
            if seed_url:
                logger.info("No source list at %s, seeding from GOOGLE_ALERT_RSS", path)
                return cls([FeedSource(name="google-alert", url=seed_url)], path=path)
            return cls(path=path)

        sources = []
        for i, raw in enumerate(_read_json_array(path)):
            try:
                sources.append(FeedSource.from_dict(raw))
            except (KeyError, TypeError, AttributeError) as e:
                raise CatalogError(f"{path}: invalid source at index {i}: {e!r}") from e
        return cls(sources, path=path)

    def save(self, path: Path | None = None) -> None:
        target = Path(path or self.path)
        _write_json(target, [s.to_dict() for s in self.sources])

    def __iter__(self) -> Iterator[FeedSource]:
        return iter(self.sources)

    def __len__(self) -> int:
        return len(self.sources)
