"""Title → slug normalization."""

import re

from unidecode import unidecode

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Return a lowercase, ASCII, dash-separated slug for a title.

    >>> slugify("Overlord – Il film")
    'overlord-il-film'
    """
    text = unidecode(title or "").lower()
    return _NON_ALNUM_RE.sub("-", text).strip("-")
