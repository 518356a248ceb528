"""Static site rendering.

Renders the catalog with Jinja2 into ``<output_dir>/index.html`` (films in
theaters within the next two weeks) and one page per film, and copies the
image directory verbatim.
"""

import logging
import re
import shutil
from datetime import date, datetime, timedelta
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from cineanime.catalog import MovieRecord, Source
from cineanime.catalog.store import Catalog
from cineanime.dates import parse_date, parse_datetime, to_iso, utcnow

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

UPCOMING_DAYS = 14

_IT_WEEKDAYS = [
    "lunedì", "martedì", "mercoledì", "giovedì", "venerdì", "sabato", "domenica",
]
_IT_MONTHS = [
    "gennaio", "febbraio", "marzo", "aprile", "maggio", "giugno",
    "luglio", "agosto", "settembre", "ottobre", "novembre", "dicembre",
]

_YEAR_RE = re.compile(r"^\d{4}$")


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def upcoming_movies(
    movies, now: datetime | date | None = None, days: int = UPCOMING_DAYS
) -> list[MovieRecord]:
    """Movies whose release date is within [today, today + days], soonest first."""
    today = parse_date(now or datetime.now())
    until = today + timedelta(days=days)
    selected = []
    for movie in movies:
        release = parse_date(movie.theater_release_date)
        if release is not None and today <= release <= until:
            selected.append((release, movie))
    selected.sort(key=lambda pair: pair[0])
    return [movie for _, movie in selected]


def newest_date(movies) -> str:
    """ISO string of the most recent ``last_source_date``; now if there is none."""
    dates = [
        d for d in (parse_datetime(m.last_source_date) for m in movies) if d
    ]
    return to_iso(max(dates) if dates else utcnow())


def format_iso(value) -> str:
    parsed = parse_datetime(value)
    return to_iso(parsed or utcnow())


def format_date_italian(value) -> str:
    """e.g. "lunedì 14 ottobre 2024". A bare year is returned unchanged."""
    if not value:
        return ""
    if isinstance(value, str) and _YEAR_RE.match(value):
        return value
    d = parse_date(value)
    if d is None:
        return str(value)
    return f"{_IT_WEEKDAYS[d.weekday()]} {d.day} {_IT_MONTHS[d.month - 1]} {d.year}"


def sort_by_date(sources: list[Source]) -> list[Source]:
    """Newest source first."""
    epoch = parse_datetime("1970-01-01")
    return sorted(
        sources,
        key=lambda s: parse_datetime(s.published_date) or epoch,
        reverse=True,
    )


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


def make_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "j2"]),
    )
    env.filters["upcoming_movies"] = upcoming_movies
    env.filters["newest_date"] = newest_date
    env.filters["format_iso"] = format_iso
    env.filters["format_date_italian"] = format_date_italian
    env.filters["sort_by_date"] = sort_by_date
    return env


def build_site(
    catalog: Catalog,
    output_dir: Path,
    images_dir: Path | None = None,
    now: datetime | None = None,
) -> list[Path]:
    """Render all pages into output_dir. Returns the written paths."""
    output_dir = Path(output_dir)
    env = make_environment()
    movies = sorted(catalog, key=lambda m: m.title.lower())
    context = {"movies": movies, "now": now or datetime.now()}

    written: list[Path] = []

    index = output_dir / "index.html"
    index.parent.mkdir(parents=True, exist_ok=True)
    index.write_text(env.get_template("index.html.j2").render(**context), encoding="utf-8")
    written.append(index)

    movie_template = env.get_template("movie.html.j2")
    for movie in movies:
        page = output_dir / "film" / movie.slug / "index.html"
        page.parent.mkdir(parents=True, exist_ok=True)
        page.write_text(movie_template.render(movie=movie, **context), encoding="utf-8")
        written.append(page)

    if images_dir and Path(images_dir).is_dir():
        shutil.copytree(images_dir, output_dir / "images", dirs_exist_ok=True)

    logger.info("Site built: %d pages in %s", len(written), output_dir)
    return written
