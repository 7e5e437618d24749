"""Per-article enrichment: location, coordinates, content and summary."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Any, Optional, Union

from enrich_articles.clients.article_store import ArticleNotSavedError, ArticleStore
from enrich_articles.clients.completions import CompletionClient
from enrich_articles.clients.geocoding import GoogleGeocoder
from enrich_articles.instructions import (
    EXTRACT_CONTENT_MAX_TOKENS,
    EXTRACT_CONTENT_PROMPT,
    EXTRACT_LOCATION_MAX_TOKENS,
    EXTRACT_LOCATION_PROMPT,
    SUMMARIZE_MAX_TOKENS,
    SUMMARIZE_PROMPT,
)
from enrich_articles.models import (
    DEFAULT_RADIUS,
    Coordinates,
    EnrichedArticleRecord,
    Failure,
    NormalizedArticle,
    RawArticle,
    Skip,
    StageResult,
    Success,
)
from enrich_articles.timing import Stopwatch, TimingRecorder

logger = logging.getLogger(__name__)

HTML_TAG_PATTERN = re.compile(r"<.*?>")
COORDINATE_PRECISION = Decimal("0.00001")

NO_TITLE = "No Title"
NO_DESCRIPTION = "No Description"
NO_URL = "No URL"
UNKNOWN = "Unknown"
NO_IMAGE = "No Image"


@dataclass
class EnrichmentServices:
    """External collaborators used while enriching a single article."""
    completions: CompletionClient
    geocoder: GoogleGeocoder
    store: ArticleStore


def strip_html_tags(text: str) -> str:
    """Remove every `<...>` span from text."""
    return HTML_TAG_PATTERN.sub("", text)


def normalize_article(raw: RawArticle) -> NormalizedArticle:
    """Apply placeholder defaults and strip HTML from the description."""
    return NormalizedArticle(
        title=raw.title or NO_TITLE,
        description=strip_html_tags(raw.description or NO_DESCRIPTION),
        url=raw.url or NO_URL,
        published_date=raw.published_at.date() if raw.published_at else None,
        source_name=raw.source_name,
        image_url=raw.url_to_image,
    )


def extract_location(completions: CompletionClient, description: str) -> Optional[str]:
    return completions.complete(
        EXTRACT_LOCATION_PROMPT.format(description=description),
        max_tokens=EXTRACT_LOCATION_MAX_TOKENS,
    )


def resolve_coordinates(geocoder: GoogleGeocoder, location: Optional[str]) -> Optional[Coordinates]:
    """Geocode the location, short-circuiting when nothing was extracted."""
    if not location:
        logger.info("Location is null or empty.")
        return None
    return geocoder.geocode(location)


def extract_article_text(completions: CompletionClient, description: str) -> Optional[str]:
    return completions.complete(
        EXTRACT_CONTENT_PROMPT.format(description=description),
        max_tokens=EXTRACT_CONTENT_MAX_TOKENS,
    )


def summarize_article_text(completions: CompletionClient, article_text: Optional[str]) -> Optional[str]:
    return completions.complete(
        SUMMARIZE_PROMPT.format(text=article_text or ""),
        max_tokens=SUMMARIZE_MAX_TOKENS,
    )


def round_coordinate(value: Any) -> Decimal:
    """Round to 5 decimal places, half to even. Unparsable values become 0.00000."""
    try:
        parsed = Decimal(str(value))
    except (InvalidOperation, ValueError):
        parsed = None
    if parsed is None or not parsed.is_finite():
        logger.warning("Unparsable coordinate %r, defaulting to 0", value)
        return Decimal("0.00000")
    return parsed.quantize(COORDINATE_PRECISION, rounding=ROUND_HALF_EVEN)


def build_article_record(
    article: NormalizedArticle,
    category: str,
    location: str,
    coordinates: Coordinates,
    summary: Optional[str],
    created_at: datetime,
) -> EnrichedArticleRecord:
    """Assemble the record, substituting placeholders for missing optional fields."""
    published_date = article.published_date.strftime("%Y-%m-%d") if article.published_date else UNKNOWN

    return EnrichedArticleRecord(
        created_at=created_at.strftime("%Y-%m-%dT%H:%M:%SZ"),
        title=article.title,
        text=summary,
        location=location,
        lat=round_coordinate(coordinates.lat),
        lng=round_coordinate(coordinates.lng),
        disruption_type=category,
        # Carries the cleaned description, not a computed severity level
        severity=article.description,
        source_name=article.source_name or UNKNOWN,
        published_date=published_date,
        url=article.url,
        image_url=article.image_url or NO_IMAGE,
        article_title=article.title,
        article_description=article.description,
        article_url=article.url,
        radius=DEFAULT_RADIUS,
    )


def enrich_article(
    article: NormalizedArticle,
    category: str,
    services: EnrichmentServices,
) -> Union[Success[EnrichedArticleRecord], Skip]:
    """
    Run the dependent enrichment calls for one article.

    Returns Skip as soon as coordinates cannot be resolved; the content and
    summary calls are only made for articles that can be placed on a map.
    Exceptions from the services propagate to the caller.
    """
    location = extract_location(services.completions, article.description)

    coordinates = resolve_coordinates(services.geocoder, location)
    if coordinates is None:
        reason = f"location '{location}' could not be geocoded" if location else "no location extracted"
        return Skip(reason=reason)

    article_text = extract_article_text(services.completions, article.description)
    summary = summarize_article_text(services.completions, article_text)

    record = build_article_record(
        article,
        category=category,
        location=location,
        coordinates=coordinates,
        summary=summary,
        created_at=datetime.now(timezone.utc),
    )
    return Success(record)


def process_article(
    raw: RawArticle,
    category: str,
    services: EnrichmentServices,
    recorder: TimingRecorder,
) -> StageResult[EnrichedArticleRecord]:
    """Enrich and persist one article, recording exactly one timing entry for the attempt."""
    stopwatch = Stopwatch()

    try:
        article = normalize_article(raw)
        outcome = enrich_article(article, category, services)

        if isinstance(outcome, Skip):
            logger.info("Skipping article '%s': %s", article.title, outcome.reason)
            recorder.record(
                f"Skipping article '{article.title}' due to unknown location",
                stopwatch.elapsed_ms(),
            )
            return outcome

        saved = services.store.save(outcome.value)
        recorder.record(f"Processing article '{article.title}'", stopwatch.elapsed_ms())
        if not saved:
            return Failure(ArticleNotSavedError(f"Article '{article.title}' was not saved"))
        return outcome
    except Exception as e:
        logger.error("Exception while processing article '%s': %s", raw.title, e)
        recorder.record(
            f"Exception while processing article '{raw.title or ''}': {e}",
            stopwatch.elapsed_ms(),
        )
        return Failure(e)
