import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Feed seeded into data/sources.json on first run
GOOGLE_ALERT_RSS: str = os.environ.get("GOOGLE_ALERT_RSS", "")

# Country named in the extraction prompt
RELEASE_COUNTRY: str = os.environ.get("RELEASE_COUNTRY", "Italia")

# Poster lookup (optional)
TMDB_API_KEY: str = os.environ.get("TMDB_API_KEY", "")

# Paths
DATA_DIR = Path(os.environ.get("DATA_DIR", "data"))
SITE_DIR = Path(os.environ.get("SITE_DIR", "site"))
IMAGES_DIR = Path(os.environ.get("IMAGES_DIR", "images"))
LOG_DIR = Path(os.environ.get("LOG_DIR", "logs"))

# LLM (one provider required for `update`)
LLM_PROVIDER: str = os.environ.get("LLM_PROVIDER", "")  # openai | anthropic | google
LLM_MODEL: str = os.environ.get("LLM_MODEL", "")  # empty = provider default
LLM_API_KEY: str = os.environ.get("LLM_API_KEY", "")

# Per-provider API keys (any one is enough)
OPENAI_API_KEY: str = os.environ.get("OPENAI_API_KEY", "")
ANTHROPIC_API_KEY: str = os.environ.get("ANTHROPIC_API_KEY", "")
GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")

# Map provider name → env var value
_PROVIDER_KEYS: dict[str, str] = {
    "openai": OPENAI_API_KEY,
    "anthropic": ANTHROPIC_API_KEY,
    "google": GEMINI_API_KEY,
}


def resolve_llm() -> tuple[str, str, str]:
    """Resolve the LLM provider, API key, and model.

    Priority:
    1. LLM_API_KEY + LLM_PROVIDER env vars (explicit single-provider config)
    2. LLM_PROVIDER's own key (OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY)
    3. First per-provider key found

    Returns (provider, api_key, model). All empty strings if nothing configured.
    """
    if LLM_API_KEY:
        return LLM_PROVIDER or "openai", LLM_API_KEY, LLM_MODEL

    if LLM_PROVIDER and _PROVIDER_KEYS.get(LLM_PROVIDER):
        return LLM_PROVIDER, _PROVIDER_KEYS[LLM_PROVIDER], LLM_MODEL

    for prov, key in _PROVIDER_KEYS.items():
        if key:
            return prov, key, LLM_MODEL

    return "", "", LLM_MODEL
