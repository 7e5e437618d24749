"""Persistence of enriched articles to the articles endpoint."""

from __future__ import annotations

import logging

import requests

from enrich_articles.models import EnrichedArticleRecord

logger = logging.getLogger(__name__)


class ArticleNotSavedError(Exception):
    """The articles endpoint refused a record."""


class ArticleStore:
    def __init__(self, articles_url: str, timeout: int = 30) -> None:
        self.articles_url = articles_url
        self.timeout = timeout

    def save(self, record: EnrichedArticleRecord) -> bool:
        """POST the record as JSON. Returns False on a non-2xx answer; transport errors propagate."""
        response = requests.post(self.articles_url, json=record.to_payload(), timeout=self.timeout)

        if 200 <= response.status_code < 300:
            logger.info("Article '%s' saved successfully.", record.title)
            return True

        logger.error(
            "Failed to save article '%s': %s - %s",
            record.title,
            response.reason,
            response.text,
        )
        return False
