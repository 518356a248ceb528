import requests

from cineanime import tmdb
from cineanime.catalog import MovieRecord
from cineanime.catalog.store import Catalog


class FakeResponse:
    def __init__(self, payload=None, content=b"", status_code=200):
        self.payload = payload
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def json(self):
        return self.payload


def test_search_movie_picks_most_popular(monkeypatch):
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs))
        return FakeResponse(
            {
                "results": [
                    {"id": 1, "title": "Overlord", "popularity": 3.0},
                    {"id": 2, "title": "Overlord: Il Santo Regno", "popularity": 40.5},
                ]
            }
        )

    monkeypatch.setattr(tmdb.requests, "get", fake_get)

    match = tmdb.search_movie("Overlord – Il film: Capitolo del Santo Regno", "token")

    assert match["id"] == 2
    params = calls[0][1]["params"]
    assert params["query"] == "Overlord Il film Capitolo del Santo Regno"
    assert params["language"] == "it-IT"
    assert calls[0][1]["headers"]["Authorization"] == "Bearer token"


def test_image_url():
    assert tmdb.image_url("/abc.jpg") == "https://image.tmdb.org/t/p/w500/abc.jpg"
    assert tmdb.image_url("/abc.jpg", size="original") == "https://image.tmdb.org/t/p/original/abc.jpg"


def test_attach_posters(monkeypatch, tmp_path):
    def fake_get(url, **kwargs):
        if url == tmdb.TMDB_SEARCH_URL:
            if kwargs["params"]["query"] == "Flow":
                return FakeResponse({"results": [{"id": 7, "poster_path": "/flow.jpg", "popularity": 1}]})
            return FakeResponse(status_code=500)
        return FakeResponse(content=b"jpeg-bytes")

    monkeypatch.setattr(tmdb.requests, "get", fake_get)
    catalog = Catalog(
        [
            MovieRecord(slug="flow", title="Flow"),
            MovieRecord(slug="look-back", title="Look Back"),
            MovieRecord(slug="ken", title="Ken", poster="images/ken.jpg"),
        ]
    )

    added = tmdb.attach_posters(catalog, "token", tmp_path / "images")

    assert added == 1
    flow = catalog.get("flow")
    assert flow.tmdb_id == 7
    assert flow.poster == "images/flow.jpg"
    assert (tmp_path / "images" / "flow.jpg").read_bytes() == b"jpeg-bytes"
    assert catalog.get("look-back").poster is None
