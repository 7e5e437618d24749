"""Helper functions for enrich_articles CLI."""

from __future__ import annotations

import argparse
from collections.abc import Sequence

from enrich_articles.clients.article_store import ArticleStore
from enrich_articles.clients.completions import CompletionClient
from enrich_articles.clients.geocoding import GoogleGeocoder
from enrich_articles.clients.news_api import NewsApiClient
from enrich_articles.config import ApiKeys, Config
from enrich_articles.enrich import EnrichmentServices


def parse_enrich_articles_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for enrich_articles."""

    parser = argparse.ArgumentParser(
        description="Search news per category keyword, enrich articles with location and summary, and save them."
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config name (test/prod) or path to YAML file (default: CONFIG_ENV or prod)",
    )
    parser.add_argument(
        "--timing-output",
        default=None,
        help="File to write stopwatch records to (default: timing.output_path from config)",
    )
    parser.add_argument("--log-level", default="INFO", help="Python logging level (default: INFO)")
    parser.add_argument(
        "--load-local",
        action="store_true",
        help="Also save enriched articles to a local JSONL file",
    )

    return parser.parse_args(argv)


def build_search_client(config: Config, api_keys: ApiKeys) -> NewsApiClient:
    return NewsApiClient(api_keys.news_api_key, timeout=config.request_timeout)


def build_enrichment_services(config: Config, api_keys: ApiKeys) -> EnrichmentServices:
    """Create the completion, geocoding and persistence clients from config."""
    return EnrichmentServices(
        completions=CompletionClient(api_keys.openai_api_key, model=config.openai.model),
        geocoder=GoogleGeocoder(
            api_keys.google_geocoding_api_key,
            endpoint=config.geocoding.endpoint,
            timeout=config.request_timeout,
        ),
        store=ArticleStore(config.api_urls.articles_url, timeout=config.request_timeout),
    )
