from cineanime.extraction import text as text_extraction
from cineanime.extraction.text import extract_article, fetch_article, html_to_text

BODY = " ".join(["Overlord arriva nelle sale italiane dal 9 all'11 dicembre."] * 10)


def test_html_to_text_prefers_article():
    html = (
        "<html><body><nav>Menu</nav><article><h1>Titolo</h1>"
        "<p>Primo   paragrafo</p><script>var x;</script></article>"
        "<footer>Footer</footer></body></html>"
    )
    assert html_to_text(html) == "Titolo Primo paragrafo"


def test_extract_article_falls_back_to_page_text(monkeypatch):
    monkeypatch.setattr(text_extraction.trafilatura, "extract", lambda *a, **k: None)
    html = f"<html><body><article><p>{BODY}</p></article></body></html>"

    article = extract_article(html)

    assert article.text == BODY
    assert article.published is None


def test_extract_article_uses_trafilatura_metadata(monkeypatch):
    monkeypatch.setattr(
        text_extraction.trafilatura,
        "extract",
        lambda *a, **k: '{"text": "%s", "date": "2024-12-01"}' % BODY,
    )
    article = extract_article("<html><body>ignored</body></html>")
    assert article.text == BODY
    assert article.published == "2024-12-01"


def test_short_pages_are_not_articles(monkeypatch):
    monkeypatch.setattr(text_extraction.trafilatura, "extract", lambda *a, **k: None)
    assert extract_article("<html><body><p>Abbonati per leggere</p></body></html>") is None
    assert extract_article("   ") is None


def test_fetch_article_rejects_non_http():
    assert fetch_article("file:///etc/passwd") is None


class FakeStream:
    def __init__(self, chunks=(), status_code=200, error=None):
        self.chunks = list(chunks)
        self.status_code = status_code
        self.error = error
        self.encoding = "utf-8"

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def iter_content(self, chunk_size=1):
        yield from self.chunks
        if self.error:
            raise self.error


def _serve(monkeypatch, response=None, error=None):
    def fake_get(url, **kwargs):
        if error:
            raise error
        return response

    monkeypatch.setattr(text_extraction.requests, "get", fake_get)


def test_fetch_article_connection_error(monkeypatch):
    _serve(monkeypatch, error=text_extraction.requests.ConnectionError("refused"))
    assert fetch_article("https://example.it/a") is None


def test_fetch_article_http_error(monkeypatch):
    _serve(monkeypatch, FakeStream([b"<html>paywall</html>"], status_code=403))
    assert fetch_article("https://example.it/a") is None


def test_fetch_article_too_large(monkeypatch):
    big = b"x" * (text_extraction.MAX_BYTES // 2 + 1)
    _serve(monkeypatch, FakeStream([big, big]))
    assert fetch_article("https://example.it/a") is None


def test_fetch_article_connection_dropped_mid_body(monkeypatch):
    _serve(
        monkeypatch,
        FakeStream(
            [b"<html><body><article>"],
            error=text_extraction.requests.exceptions.ChunkedEncodingError("connection reset"),
        ),
    )
    assert fetch_article("https://example.it/a") is None


def test_fetch_article_reads_streamed_body(monkeypatch):
    monkeypatch.setattr(text_extraction.trafilatura, "extract", lambda *a, **k: None)
    html = f"<html><body><article><p>{BODY}</p></article></body></html>".encode()
    _serve(monkeypatch, FakeStream([html[:50], html[50:]]))

    article = fetch_article("https://example.it/a")

    assert article.text == BODY
