"""Article fetch + main-text extraction.

Returns None for anything that isn't a readable article (HTTP errors,
paywalls, dead links, pages without a main body); callers skip those.
"""

import json
import logging
import re
from dataclasses import dataclass
from urllib.parse import urlparse

import requests
import trafilatura
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "it-IT,it;q=0.9,en;q=0.8",
}

MAX_BYTES = 2_000_000

# Pages with less body text than this are treated as non-articles
MIN_TEXT_CHARS = 200


@dataclass(frozen=True)
class ArticleText:
    text: str
    published: str | None = None  # ISO date/datetime as found in the page


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def html_to_text(html: str) -> str:
    """Plain text of the page's <article> (or <body>), scripts removed."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup.find_all(["script", "style", "noscript", "nav", "header", "footer"]):
        tag.decompose()
    root = soup.find("article") or soup.body or soup
    return _collapse(root.get_text(" "))


def extract_article(html: str) -> ArticleText | None:
    """Extract main text and publication date from a page's HTML."""
    if not html or not html.strip():
        return None

    published = None
    text = ""
    extracted = trafilatura.extract(
        html,
        output_format="json",
        with_metadata=True,
        include_comments=False,
        include_tables=False,
    )
    if extracted:
        data = json.loads(extracted)
        text = _collapse(data.get("text") or "")
        published = data.get("date") or None

    if len(text) < MIN_TEXT_CHARS:
        text = html_to_text(html)
    if len(text) < MIN_TEXT_CHARS:
        return None
    return ArticleText(text=text, published=published)


def fetch_html(url: str, *, timeout: int = 25) -> str | None:
    p = urlparse(url)
    if p.scheme not in ("http", "https") or not p.netloc:
        logger.warning("Not fetching non-http URL: %s", url)
        return None

    try:
        resp = requests.get(
            url,
            headers=_HEADERS,
            timeout=(5, timeout),
            allow_redirects=True,
            stream=True,
        )
        with resp:
            if resp.status_code >= 400:
                logger.warning("Article fetch failed for %s: HTTP %d", url, resp.status_code)
                return None
            content = b""
            for chunk in resp.iter_content(chunk_size=64 * 1024):
                content += chunk
                if len(content) > MAX_BYTES:
                    logger.warning("Article too large, skipping: %s", url)
                    return None
            encoding = resp.encoding or "utf-8"
    except requests.RequestException as e:
        logger.warning("Article fetch failed for %s: %s", url, e)
        return None

    try:
        return content.decode(encoding, errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


def fetch_article(url: str) -> ArticleText | None:
    """Fetch a URL and extract its article text. None if unusable."""
    html = fetch_html(url)
    if html is None:
        return None
    article = extract_article(html)
    if article is None:
        logger.warning("No article text found at %s", url)
    return article
