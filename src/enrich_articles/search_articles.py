"""Article search for a single category."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from enrich_articles.clients.news_api import (
    SORT_PUBLISHED_AT,
    SORT_RELEVANCY,
    STATUS_ERROR,
    STATUS_OK,
    EverythingRequest,
    NewsApiClient,
)
from enrich_articles.config import NewsApiSettings
from enrich_articles.models import CategoryKeyword, RawArticle
from enrich_articles.timing import Stopwatch, TimingRecorder

logger = logging.getLogger(__name__)


def resolve_sort_by(value: str) -> str:
    """publishedAt when configured as such (any case), relevancy otherwise."""
    return SORT_PUBLISHED_AT if value.lower() == SORT_PUBLISHED_AT.lower() else SORT_RELEVANCY


def resolve_language(value: str) -> Optional[str]:
    """Filter to English only when configured as "en"; anything else searches all languages."""
    return "en" if value.lower() == "en" else None


def build_search_request(
    category: str,
    settings: NewsApiSettings,
    now: datetime | None = None,
) -> EverythingRequest:
    now = now or datetime.now()
    return EverythingRequest(
        q=category,
        from_date=now - timedelta(days=settings.days_range),
        to_date=now,
        sort_by=resolve_sort_by(settings.sort_by),
        language=resolve_language(settings.language),
    )


def search_category(
    client: NewsApiClient,
    category_keyword: CategoryKeyword,
    settings: NewsApiSettings,
    recorder: TimingRecorder,
) -> list[RawArticle]:
    """
    Search articles for one category.

    Returns an empty list when the search fails or finds nothing, so the
    caller can always move on to the next category.
    """
    category = category_keyword.category
    request = build_search_request(category, settings)

    stopwatch = Stopwatch()
    try:
        response = client.get_everything(request)
    except Exception as e:
        logger.error("Exception while processing keyword '%s': %s", category, e)
        recorder.record(
            f"Exception while searching for keyword '{category}': {e}",
            stopwatch.elapsed_ms(),
        )
        return []
    recorder.record(f"Search for keyword '{category}'", stopwatch.elapsed_ms())

    if response.status == STATUS_ERROR:
        logger.warning("Search for keyword '%s' failed: %s", category, response.error_message)

    if response.status != STATUS_OK or response.total_results <= 0:
        logger.info("No articles found for keyword '%s'.", category)
        return []

    logger.info(
        "Found %d articles for keyword '%s' (%d total results)",
        len(response.articles),
        category,
        response.total_results,
    )
    return response.articles
