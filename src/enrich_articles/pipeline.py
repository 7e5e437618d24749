"""Run the keyword → search → enrich → persist pipeline."""

from __future__ import annotations

import logging
from typing import Iterable

from enrich_articles.clients.news_api import NewsApiClient
from enrich_articles.config import Config, NewsApiSettings
from enrich_articles.enrich import EnrichmentServices, process_article
from enrich_articles.fetch_keywords import fetch_category_keywords
from enrich_articles.models import CategoryKeyword, EnrichedArticleRecord, Failure, Skip, Success
from enrich_articles.search_articles import search_category
from enrich_articles.timing import TimingRecorder

logger = logging.getLogger(__name__)


def process_categories(
    categories: Iterable[CategoryKeyword],
    search_client: NewsApiClient,
    settings: NewsApiSettings,
    services: EnrichmentServices,
    recorder: TimingRecorder,
) -> list[EnrichedArticleRecord]:
    """Search every category in turn and enrich each article found."""
    enriched: list[EnrichedArticleRecord] = []

    for category_keyword in categories:
        articles = search_category(search_client, category_keyword, settings, recorder)

        counts = {"enriched": 0, "skipped": 0, "failed": 0}
        for article in articles:
            result = process_article(article, category_keyword.category, services, recorder)
            if isinstance(result, Success):
                enriched.append(result.value)
                counts["enriched"] += 1
            elif isinstance(result, Skip):
                counts["skipped"] += 1
            elif isinstance(result, Failure):
                counts["failed"] += 1

        if articles:
            logger.info(
                "Category '%s': %d enriched, %d skipped, %d failed",
                category_keyword.category,
                counts["enriched"],
                counts["skipped"],
                counts["failed"],
            )

    logger.info("Total articles enriched: %d", len(enriched))
    return enriched


def run_enrichment(
    config: Config,
    search_client: NewsApiClient,
    services: EnrichmentServices,
    recorder: TimingRecorder,
) -> list[EnrichedArticleRecord]:
    """Fetch the category keywords, process them all, then write the timing log once."""
    try:
        categories = fetch_category_keywords(
            config.api_urls.category_keywords_url,
            envelope=config.keywords_envelope,
            timeout=config.request_timeout,
        )
        if not categories:
            logger.warning("No category keywords to process")
        return process_categories(categories, search_client, config.news_api, services, recorder)
    finally:
        recorder.flush()
