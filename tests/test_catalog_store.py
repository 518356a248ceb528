import json

import pytest

from cineanime.catalog import FeedSource, MovieRecord, Source
from cineanime.catalog.slug import slugify
from cineanime.catalog.store import Catalog, CatalogError, FeedSourceList


def test_slugify():
    assert slugify("Overlord – Il film") == "overlord-il-film"
    assert slugify("Pokémon: La città perduta") == "pokemon-la-citta-perduta"
    assert slugify("  The Last: Naruto The Movie!! ") == "the-last-naruto-the-movie"
    assert slugify("Ken Il Guerriero") == "ken-il-guerriero"


def test_catalog_save_and_load(tmp_path):
    path = tmp_path / "data" / "movies.json"
    catalog = Catalog(path=path)
    catalog.put(
        MovieRecord(
            slug="flow",
            title="Flow",
            aliases={"flow-un-mondo-da-salvare"},
            theater_release_date="2024-11-07",
            last_source_date="2024-10-01T00:00:00+00:00",
            sources=[Source(url="https://example.it/flow", published_date="2024-10-01")],
        )
    )
    catalog.save()

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw[0]["theaterReleaseDate"] == "2024-11-07"
    assert raw[0]["aliases"] == ["flow-un-mondo-da-salvare"]
    assert raw[0]["sources"][0]["publishedDate"] == "2024-10-01"

    loaded = Catalog.load(path)
    assert loaded.find("flow-un-mondo-da-salvare").slug == "flow"
    assert not (tmp_path / "data" / "movies.json.tmp").exists()


def test_missing_catalog_is_empty(tmp_path):
    assert len(Catalog.load(tmp_path / "movies.json")) == 0


def test_alias_collision_is_rejected(tmp_path):
    path = tmp_path / "movies.json"
    path.write_text(
        json.dumps(
            [
                {"slug": "a", "title": "A", "aliases": ["shared"], "sources": []},
                {"slug": "b", "title": "B", "aliases": ["shared"], "sources": []},
            ]
        ),
        encoding="utf-8",
    )
    with pytest.raises(CatalogError):
        Catalog.load(path)


def test_record_without_slug_is_rejected(tmp_path):
    path = tmp_path / "movies.json"
    path.write_text('[{"title": "No slug"}]', encoding="utf-8")
    with pytest.raises(CatalogError):
        Catalog.load(path)


def test_sources_seeded_from_alert_url(tmp_path):
    path = tmp_path / "sources.json"
    sources = FeedSourceList.load(path, seed_url="https://www.google.it/alerts/feeds/1/2")
    assert [s.name for s in sources] == ["google-alert"]

    sources.sources[0].last_update_date = "2024-12-01T00:00:00+00:00"
    sources.save()
    reloaded = FeedSourceList.load(path, seed_url="https://ignored.example")
    assert reloaded.sources == [
        FeedSource(
            name="google-alert",
            url="https://www.google.it/alerts/feeds/1/2",
            last_update_date="2024-12-01T00:00:00+00:00",
        )
    ]
