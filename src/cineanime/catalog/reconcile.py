"""Merge extracted movie mentions into the catalog.

A mention is matched to an existing record by slug, then by alias. The
record is only touched when the citing article is strictly newer than the
record's ``last_source_date``; title and theater dates are first-write-wins,
and a source URL is never listed twice.
"""

import logging

from cineanime.catalog import CandidateMention, MovieRecord, Source
from cineanime.catalog.slug import slugify
from cineanime.catalog.store import Catalog
from cineanime.dates import parse_datetime

logger = logging.getLogger(__name__)


def _is_stale(record: MovieRecord, published_date: str) -> bool:
    last = parse_datetime(record.last_source_date)
    if last is None:
        return False
    published = parse_datetime(published_date)
    if published is None:
        return True
    return last >= published


def reconcile(
    mention: CandidateMention,
    from_article: Source,
    catalog: Catalog,
) -> MovieRecord | None:
    """Apply one mention from one article to the catalog, in place.

    Returns the created/updated record, or None when the mention was
    ignored (empty title or stale source).
    """
    movie_slug = slugify(mention.title)
    if not movie_slug:
        logger.warning("Ignoring mention with empty slug: %r", mention.title)
        return None

    existing = catalog.find(movie_slug)
    final_slug = existing.slug if existing else movie_slug

    if existing and _is_stale(existing, from_article.published_date):
        logger.info(
            "Skipping %s: source %s (%s) not newer than %s",
            final_slug,
            from_article.url,
            from_article.published_date,
            existing.last_source_date,
        )
        return None

    sources = list(existing.sources) if existing else []
    if not any(s.url == from_article.url for s in sources):
        sources.append(
            Source(
                url=from_article.url,
                title=from_article.title,
                description=from_article.description,
                published_date=from_article.published_date,
            )
        )

    record = MovieRecord(
        slug=final_slug,
        title=existing.title if existing and existing.title else mention.title,
        aliases=set(existing.aliases) if existing else set(),
        theater_release_date=(
            existing.theater_release_date
            if existing and existing.theater_release_date
            else mention.theater_release_date
        ),
        theater_end_date=(
            existing.theater_end_date
            if existing and existing.theater_end_date
            else mention.theater_end_date
        ),
        last_source_date=from_article.published_date,
        sources=sources,
        tmdb_id=existing.tmdb_id if existing else None,
        poster=existing.poster if existing else None,
    )
    catalog.put(record)

    logger.info(
        "%s %s (%s → %s) from %s",
        "Updated" if existing else "Added",
        final_slug,
        record.theater_release_date or "?",
        record.theater_end_date or "?",
        from_article.url,
    )
    return record
