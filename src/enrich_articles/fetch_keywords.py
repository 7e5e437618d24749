"""Load the category keywords to search for."""

from __future__ import annotations

import logging

import requests

from enrich_articles.models import CategoryKeyword

logger = logging.getLogger(__name__)


def parse_category_keyword(item: dict) -> CategoryKeyword:
    """Build a CategoryKeyword, raising on missing or mistyped fields."""
    item_id = item["id"]
    category = item["category"]
    keyword = item["keyword"]
    if isinstance(item_id, bool) or not isinstance(item_id, int):
        raise ValueError(f"Category keyword id must be an integer: {item_id!r}")
    if not isinstance(category, str) or not isinstance(keyword, str):
        raise ValueError(f"Category keyword {item_id} has non-string category or keyword")
    return CategoryKeyword(id=item_id, category=category, keyword=keyword)


def fetch_category_keywords(
    url: str,
    envelope: str = "$values",
    timeout: int = 30,
) -> list[CategoryKeyword]:
    """
    Fetch (category, keyword) pairs from the keyword endpoint.

    The endpoint wraps its items in an array under `envelope`. An empty body,
    a missing envelope, or any request/parse error yields an empty list.
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        if not response.text or not response.text.strip():
            logger.warning("No response received from category keywords endpoint %s", url)
            return []

        payload = response.json()
        if not isinstance(payload, dict) or envelope not in payload:
            logger.warning("Category keywords response has no '%s' property", envelope)
            return []

        category_keywords = [parse_category_keyword(item) for item in payload[envelope]]
    except Exception as e:
        logger.error("Exception while getting category keywords: %s", e)
        return []

    logger.info("Loaded %d category keywords", len(category_keywords))
    return category_keywords
