"""TMDB client — poster lookup for catalog records."""

import logging
import re
from pathlib import Path

import requests

from cineanime.catalog.store import Catalog

logger = logging.getLogger(__name__)

TMDB_SEARCH_URL = "https://api.themoviedb.org/3/search/movie"
TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p"


def search_movie(title: str, api_key: str, language: str = "it-IT") -> dict | None:
    """Search TMDB by title and return the most popular match, or None."""
    clean_title = re.sub(r"\W+", " ", title).strip()
    resp = requests.get(
        TMDB_SEARCH_URL,
        headers={
            "Accept": "application/json",
            "Authorization": f"Bearer {api_key}",
        },
        params={
            "query": clean_title,
            "include_adult": "false",
            "language": language,
        },
        timeout=15,
    )
    resp.raise_for_status()
    results = resp.json().get("results") or []
    if not results:
        return None
    return max(results, key=lambda r: r.get("popularity") or 0)


def image_url(file_path: str, size: str = "w500") -> str:
    """size: "w342" | "w500" | "original"."""
    return f"{TMDB_IMAGE_BASE}/{size}{file_path}"


def download(url: str, path: Path) -> None:
    resp = requests.get(url, timeout=30)
    resp.raise_for_status()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(resp.content)


def attach_posters(catalog: Catalog, api_key: str, images_dir: Path) -> int:
    """Look up and download a poster for every record that has none.

    The poster is stored as ``<images_dir>/<slug>.jpg`` and referenced as
    ``images/<slug>.jpg`` from the site. Returns the number of posters added.
    """
    added = 0
    for record in catalog:
        if record.poster:
            continue
        try:
            match = search_movie(record.title, api_key)
            if not match or not match.get("poster_path"):
                logger.info("No TMDB poster for %s", record.title)
                continue
            filename = f"{record.slug}.jpg"
            download(image_url(match["poster_path"]), Path(images_dir) / filename)
        except requests.RequestException:
            logger.exception("TMDB lookup failed for %s", record.title)
            continue
        record.tmdb_id = match.get("id")
        record.poster = f"images/{filename}"
        added += 1
        logger.info("Poster for %s: TMDB #%s", record.slug, record.tmdb_id)
    return added
