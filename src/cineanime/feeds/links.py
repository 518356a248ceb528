"""Feed link resolution and URL canonicalization."""

from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

# Hosts whose links wrap the real destination in a query parameter
REDIRECTOR_HOSTS = {"www.google.com", "google.com", "www.google.it", "google.it"}
REDIRECT_PARAMS = ("url", "q")

DEFAULT_STRIP_QUERY_PARAMS = {
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "utm_id",
    "gclid",
    "fbclid",
    "mc_cid",
    "mc_eid",
    "ref",
    "ref_src",
}


def canonicalize_url(url: str) -> str:
    """Canonicalize a URL for source dedup.

    - Lowercase scheme + hostname
    - Remove fragments
    - Strip common tracking query parameters
    """
    if not url:
        return ""
    p = urlparse(url.strip())
    scheme = (p.scheme or "https").lower()
    netloc = (p.netloc or "").lower()
    kept = [
        (k, v)
        for k, v in parse_qsl(p.query, keep_blank_values=True)
        if k.lower() not in DEFAULT_STRIP_QUERY_PARAMS
    ]
    query = urlencode(kept, doseq=True)
    return urlunparse((scheme, netloc, p.path or "/", p.params, query, ""))


def resolve_link(link: str | None) -> str | None:
    """Return the article URL behind a feed item link.

    Google Alerts links look like
    ``https://www.google.com/url?rct=j&sa=t&url=<destination>&ct=ga&...``;
    the destination is taken from the ``url`` (or ``q``) parameter. Other
    links are returned canonicalized. None if nothing usable is found.
    """
    if not link or not link.strip():
        return None
    p = urlparse(link.strip())
    if (p.hostname or "").lower() in REDIRECTOR_HOSTS and p.path == "/url":
        params = dict(parse_qsl(p.query))
        for key in REDIRECT_PARAMS:
            target = params.get(key)
            if target and target.startswith(("http://", "https://")):
                return canonicalize_url(target)
        return None
    if p.scheme not in ("http", "https"):
        return None
    return canonicalize_url(link)
