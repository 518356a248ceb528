"""RSS/Atom feed fetching (Google Alerts and friends)."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import feedparser
import requests
from bs4 import BeautifulSoup

from cineanime.dates import parse_datetime

logger = logging.getLogger(__name__)

_HEADERS = {"User-Agent": "cineanime/0.1 (+feed reader)"}


@dataclass(frozen=True)
class FeedItem:
    title: str
    link: str
    description: str = ""
    published: datetime | None = None


@dataclass(frozen=True)
class Feed:
    updated: datetime | None = None
    items: list[FeedItem] = field(default_factory=list)


def _plain(text: Any) -> str:
    """Google Alerts titles/summaries carry <b> highlighting; strip tags."""
    if not text:
        return ""
    return BeautifulSoup(str(text), "lxml").get_text(" ", strip=True)


def _content_value(entry: Any) -> str:
    content = entry.get("content") or []
    return content[0].get("value", "") if content else ""


def _entry_date(entry: Any) -> datetime | None:
    for key in ("published_parsed", "updated_parsed"):
        value = entry.get(key)
        if value:
            return parse_datetime(value)
    return None


def parse_feed(content: bytes | str) -> Feed:
    """Parse a feed document into a Feed."""
    parsed = feedparser.parse(content)
    if parsed.bozo and not parsed.entries:
        logger.warning("Feed could not be parsed: %s", parsed.get("bozo_exception"))

    meta = parsed.feed or {}
    updated = parse_datetime(meta.get("updated_parsed") or meta.get("published_parsed"))

    items: list[FeedItem] = []
    for entry in parsed.entries or []:
        link = entry.get("link") or ""
        title = _plain(entry.get("title"))
        if not link:
            continue
        items.append(
            FeedItem(
                title=title,
                link=str(link).strip(),
                description=_plain(entry.get("summary") or _content_value(entry)),
                published=_entry_date(entry),
            )
        )

    # Fall back to the newest item when the feed itself carries no date
    if updated is None:
        dates = [i.published for i in items if i.published]
        updated = max(dates) if dates else None
    return Feed(updated=updated, items=items)


def fetch_feed(url: str, *, timeout: int = 30) -> Feed:
    """Fetch and parse a feed. Raises requests.RequestException on transport errors."""
    resp = requests.get(url, headers=_HEADERS, timeout=timeout)
    resp.raise_for_status()
    feed = parse_feed(resp.content)
    logger.info("Fetched %d items from %s", len(feed.items), url)
    return feed
