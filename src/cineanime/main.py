"""cineanime entry point.

  cineanime update        poll the feeds and update data/movies.json
  cineanime build         render the static site from data/movies.json
  cineanime extract URL   print the movies the LLM finds in one article
"""

import argparse
import json
import logging
import sys

from cineanime import config
from cineanime.catalog.store import CATALOG_FILENAME, SOURCES_FILENAME, Catalog, FeedSourceList
from cineanime.dates import parse_date
from cineanime.extraction.llm import get_provider
from cineanime.extraction.movies import MovieExtractor
from cineanime.extraction.text import fetch_article
from cineanime.feeds.walker import FeedWalker
from cineanime.runlog import RunLog
from cineanime.site.builder import build_site
from cineanime.tmdb import attach_posters

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger("cineanime.main")


def _make_extractor() -> MovieExtractor | None:
    provider_name, api_key, model = config.resolve_llm()
    if not api_key:
        logger.error(
            "No LLM API key configured (set OPENAI_API_KEY, ANTHROPIC_API_KEY, "
            "GEMINI_API_KEY or LLM_API_KEY)"
        )
        return None
    provider = get_provider(provider_name, api_key, model=model)
    return MovieExtractor(provider, country=config.RELEASE_COUNTRY)


def update_command(args: argparse.Namespace) -> int:
    extractor = _make_extractor()
    if extractor is None:
        return 1

    with RunLog(config.LOG_DIR) as run_log:
        catalog = Catalog.load(config.DATA_DIR / CATALOG_FILENAME)
        sources = FeedSourceList.load(
            config.DATA_DIR / SOURCES_FILENAME, seed_url=config.GOOGLE_ALERT_RSS
        )
        if not len(sources):
            logger.warning("No feed sources configured")

        before = len(catalog)
        FeedWalker(catalog, sources, extractor).run()

        if config.TMDB_API_KEY:
            if attach_posters(catalog, config.TMDB_API_KEY, config.IMAGES_DIR):
                catalog.save()

        run_log.append(
            "Run complete: %d movies (%d new), log at %s",
            len(catalog),
            len(catalog) - before,
            run_log.path,
        )
    return 0


def build_command(args: argparse.Namespace) -> int:
    catalog = Catalog.load(config.DATA_DIR / CATALOG_FILENAME)
    build_site(catalog, config.SITE_DIR, images_dir=config.IMAGES_DIR)
    return 0


def extract_command(args: argparse.Namespace) -> int:
    extractor = _make_extractor()
    if extractor is None:
        return 1
    article = fetch_article(args.url)
    if article is None:
        return 1
    mentions = extractor.extract(article.text, parse_date(article.published))
    if mentions is None:
        return 1
    print(json.dumps([m.to_dict() for m in mentions], ensure_ascii=False, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="cineanime")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("update", help="Poll feeds and update the movie catalog").set_defaults(
        func=update_command
    )
    sub.add_parser("build", help="Render the static site").set_defaults(func=build_command)
    extract = sub.add_parser("extract", help="Extract movies from one article URL")
    extract.add_argument("url")
    extract.set_defaults(func=extract_command)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
