"""Walk the configured feeds and feed their articles to the catalog.

Sources, items and mentions are processed one at a time in list order.
The catalog and the source watermark are saved after each source, so a
failure later in the run only loses the source being processed.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from cineanime.catalog import FeedSource, Source
from cineanime.catalog.reconcile import reconcile
from cineanime.catalog.store import Catalog, FeedSourceList
from cineanime.dates import parse_date, parse_datetime, to_iso, utcnow
from cineanime.extraction.movies import MovieExtractor
from cineanime.extraction.text import ArticleText, fetch_article
from cineanime.feeds.fetch import Feed, FeedItem, fetch_feed
from cineanime.feeds.links import resolve_link

logger = logging.getLogger(__name__)


class FeedWalker:
    """Drives text extraction, movie extraction and reconciliation per feed item."""

    def __init__(
        self,
        catalog: Catalog,
        sources: FeedSourceList,
        extractor: MovieExtractor,
        *,
        feed_fetcher: Callable[[str], Feed] = fetch_feed,
        article_fetcher: Callable[[str], ArticleText | None] = fetch_article,
        now: datetime | None = None,
    ) -> None:
        self.catalog = catalog
        self.sources = sources
        self.extractor = extractor
        self.feed_fetcher = feed_fetcher
        self.article_fetcher = article_fetcher
        self.now = now or utcnow()

    def run(self) -> None:
        for source in self.sources:
            try:
                self.process_source(source)
            except Exception:
                logger.exception("Source %s failed, moving on", source.name)

    def process_source(self, source: FeedSource) -> bool:
        """Process one feed. Returns False if it was skipped."""
        logger.info("Reading feed %s: %s", source.name, source.url)
        try:
            feed = self.feed_fetcher(source.url)
        except Exception as e:
            logger.error("Feed fetch failed for %s: %s", source.name, e)
            return False

        resolved = [(item, resolve_link(item.link)) for item in feed.items]

        watermark = parse_datetime(source.last_update_date)
        if feed.updated and watermark and feed.updated <= watermark:
            logger.info(
                "Feed %s not updated since %s, skipping",
                source.name,
                source.last_update_date,
            )
            return False

        for item, url in resolved:
            if not url:
                logger.info("No article URL for feed item %r", item.title)
                continue
            try:
                self.process_item(item, url)
            except Exception:
                logger.exception("Article %s failed, skipping", url)

        self.catalog.save()
        if feed.updated:
            source.last_update_date = to_iso(feed.updated)
        self.sources.save()
        logger.info("Feed %s done, catalog has %d movies", source.name, len(self.catalog))
        return True

    def process_item(self, item: FeedItem, url: str) -> int:
        """Extract and reconcile one article. Returns the number of mentions applied."""
        logger.info("Reading article %s", url)
        article = self.article_fetcher(url)
        if article is None:
            logger.warning("Could not extract %s, skipping", url)
            return 0

        published = (
            parse_datetime(article.published)
            or item.published
            or self.now
        )
        mentions = self.extractor.extract(article.text, parse_date(published))
        if not mentions:
            return 0

        from_article = Source(
            url=url,
            title=item.title,
            description=item.description,
            published_date=to_iso(published),
        )
        applied = 0
        for mention in mentions:
            if reconcile(mention, from_article, self.catalog) is not None:
                applied += 1
        return applied
