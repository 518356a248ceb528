from datetime import datetime, timedelta

from cineanime.catalog import MovieRecord, Source
from cineanime.catalog.store import Catalog
from cineanime.site.builder import (
    build_site,
    format_date_italian,
    newest_date,
    sort_by_date,
    upcoming_movies,
)

NOW = datetime(2024, 12, 1, 15, 30)


def _movie(slug, release=None, last_source=None):
    return MovieRecord(
        slug=slug,
        title=slug.title(),
        theater_release_date=release,
        last_source_date=last_source,
    )


def test_upcoming_window():
    def day(offset):
        return (NOW + timedelta(days=offset)).date().isoformat()

    movies = [
        _movie("plus-14", day(14)),
        _movie("minus-1", day(-1)),
        _movie("plus-15", day(15)),
        _movie("plus-3", day(3)),
        _movie("undated"),
        _movie("year-only", "2024"),
    ]

    assert [m.slug for m in upcoming_movies(movies, NOW)] == ["plus-3", "plus-14"]


def test_upcoming_includes_today():
    assert [m.slug for m in upcoming_movies([_movie("today", "2024-12-01")], NOW)] == ["today"]


def test_newest_date():
    movies = [
        _movie("a", last_source="2024-11-01T00:00:00+00:00"),
        _movie("b", last_source="2024-11-20T12:00:00+00:00"),
        _movie("c"),
    ]
    assert newest_date(movies) == "2024-11-20T12:00:00+00:00"


def test_format_date_italian():
    assert format_date_italian("2024-10-14") == "lunedì 14 ottobre 2024"
    assert format_date_italian("2024") == "2024"
    assert format_date_italian(None) == ""


def test_sort_by_date_newest_first():
    sources = [
        Source(url="old", published_date="2024-10-01T00:00:00+00:00"),
        Source(url="new", published_date="2024-11-01T00:00:00+00:00"),
    ]
    assert [s.url for s in sort_by_date(sources)] == ["new", "old"]
    assert [s.url for s in sources] == ["old", "new"]


def test_build_site(tmp_path):
    images = tmp_path / "images"
    images.mkdir()
    (images / "overlord-il-film.jpg").write_bytes(b"\xff\xd8poster")

    catalog = Catalog(
        [
            MovieRecord(
                slug="overlord-il-film",
                title="Overlord – Il film",
                theater_release_date="2024-12-09",
                theater_end_date="2024-12-11",
                last_source_date="2024-12-01T00:00:00+00:00",
                poster="images/overlord-il-film.jpg",
                sources=[
                    Source(
                        url="https://example.it/overlord?a=1&b=2",
                        title="Overlord <al cinema>",
                        published_date="2024-12-01T00:00:00+00:00",
                    )
                ],
            )
        ]
    )
    out = tmp_path / "site"

    written = build_site(catalog, out, images_dir=images, now=NOW)

    assert out / "index.html" in written
    index = (out / "index.html").read_text(encoding="utf-8")
    assert "Overlord – Il film" in index
    assert "lunedì 9 dicembre 2024" in index
    assert 'href="film/overlord-il-film/"' in index

    page = (out / "film" / "overlord-il-film" / "index.html").read_text(encoding="utf-8")
    assert "Overlord &lt;al cinema&gt;" in page
    assert (out / "images" / "overlord-il-film.jpg").read_bytes() == b"\xff\xd8poster"
