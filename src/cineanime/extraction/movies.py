"""LLM-based extraction of anime theatrical releases from article text."""

import json
import logging
from datetime import date

from cineanime.catalog import CandidateMention
from cineanime.dates import parse_date
from cineanime.extraction.llm import LLMProvider

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """\
{date_line}Extract all Japanese anime movies mentioned in this article that you are \
sure will be released (or are already showing) in movie theaters in {country}, \
with their next first and last day in {country} theaters, as a JSON array.
If you are not sure that a movie will be released in theaters in {country}, \
do not add it to the array.
Format: [{{"title": "Movie Title", "theaterReleaseDate": "YYYY-MM-DD", "theaterEndDate": "YYYY-MM-DD"}}]
If you are not sure about a date, omit that field instead of guessing.
If no movie qualifies, answer with [].
Always respond with only JSON, never wrap it in markdown.
Article: {article}"""

# Longer articles are cut before being sent to the model
MAX_ARTICLE_CHARS = 12_000


def build_prompt(
    article_text: str, reference_date: date | None, country: str
) -> str:
    date_line = ""
    if reference_date:
        date_line = f"Current date is {reference_date.isoformat()}.\n"
    article = " ".join(article_text.split())[:MAX_ARTICLE_CHARS]
    return PROMPT_TEMPLATE.format(
        date_line=date_line, country=country, article=article
    )


def strip_code_fences(raw: str) -> str:
    """Remove markdown code fences if the model added them."""
    text = raw.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        end = len(lines) - 1 if lines[-1].strip().startswith("```") else len(lines)
        text = "\n".join(lines[1:end]).strip()
    if text.endswith("```"):
        text = text[:-3].strip()
    return text


def _clean_date(value) -> str | None:
    parsed = parse_date(value) if isinstance(value, str) else None
    if parsed is None or len(value.strip()) != 10:
        if value:
            logger.info("Dropping unparseable date %r", value)
        return None
    return parsed.isoformat()


def parse_mentions(raw: str) -> list[CandidateMention] | None:
    """Parse the model answer into mentions. None if it isn't a JSON array."""
    text = strip_code_fences(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.error("Error parsing response as JSON: %s", raw)
        return None
    if not isinstance(data, list):
        logger.error("Expected a JSON array, got: %s", raw)
        return None

    mentions: list[CandidateMention] = []
    for item in data:
        if not isinstance(item, dict):
            logger.warning("Ignoring non-object item: %r", item)
            continue
        title = item.get("title")
        if not isinstance(title, str) or not title.strip():
            logger.warning("Ignoring item without title: %r", item)
            continue
        mentions.append(
            CandidateMention(
                title=title.strip(),
                theater_release_date=_clean_date(
                    item.get("theaterReleaseDate") or item.get("release_date")
                ),
                theater_end_date=_clean_date(
                    item.get("theaterEndDate") or item.get("end_date")
                ),
            )
        )
    return mentions


class MovieExtractor:
    """Asks an LLM provider for the anime films announced in an article."""

    def __init__(self, provider: LLMProvider, country: str = "Italia") -> None:
        self.provider = provider
        self.country = country

    def extract(
        self, article_text: str, reference_date: date | None = None
    ) -> list[CandidateMention] | None:
        """Return the mentions found, or None when the call or parse failed."""
        prompt = build_prompt(article_text, reference_date, self.country)
        logger.debug("Prompt: %s", prompt)
        try:
            raw = self.provider.complete(prompt)
        except Exception as e:
            logger.error(
                "API request failed (%s): %s",
                self.provider.name,
                getattr(e, "body", None) or e,
            )
            return None

        mentions = parse_mentions(raw)
        if mentions is not None:
            logger.info(
                "Extracted %d anime movies: %s",
                len(mentions),
                ", ".join(m.title for m in mentions) or "-",
            )
        return mentions
