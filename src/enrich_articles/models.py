"""Data models for the enrich_articles pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, Optional, TypeVar, Union

from common.utils import get_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_RADIUS = 10000


@dataclass(frozen=True)
class CategoryKeyword:
    """A topic label plus search term pair served by the keyword endpoint."""
    id: int
    category: str
    keyword: str


@dataclass(frozen=True)
class RawArticle:
    """Article as returned by the search service. Any field may be missing."""
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    published_at: Optional[datetime] = None
    source_name: Optional[str] = None
    url_to_image: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> RawArticle:
        source = get_value(payload, "source")
        return cls(
            title=get_value(payload, "title"),
            description=get_value(payload, "description"),
            url=get_value(payload, "url"),
            published_at=_parse_published_at(get_value(payload, "publishedAt")),
            source_name=get_value(source, "name") if source is not None else None,
            url_to_image=get_value(payload, "urlToImage"),
        )


def _parse_published_at(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unable to parse publishedAt %r", value)
        return None


@dataclass(frozen=True)
class NormalizedArticle:
    """Article with placeholders applied and the description HTML-stripped."""
    title: str
    description: str
    url: str
    published_date: Optional[date]
    source_name: Optional[str]
    image_url: Optional[str]


@dataclass(frozen=True)
class Coordinates:
    """Raw latitude/longitude values from the first geocoding result."""
    lat: Any
    lng: Any


@dataclass(frozen=True)
class EnrichedArticleRecord:
    created_at: str
    title: str
    text: Optional[str]
    location: str
    lat: Decimal
    lng: Decimal
    disruption_type: str
    severity: str
    source_name: str
    published_date: str
    url: str
    image_url: str
    article_title: str
    article_description: str
    article_url: str
    radius: int = DEFAULT_RADIUS

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON body accepted by the articles endpoint."""
        return {
            "createdAt": self.created_at,
            "title": self.title,
            "text": self.text,
            "location": self.location,
            # JSON numbers carry no scale; the rounded value itself survives exactly
            "lat": float(self.lat),
            "lng": float(self.lng),
            "disruptionType": self.disruption_type,
            "severity": self.severity,
            "sourceName": self.source_name,
            "publishedDate": self.published_date,
            "url": self.url,
            "imageUrl": self.image_url,
            "radius": self.radius,
            "article": {
                "title": self.article_title,
                "description": self.article_description,
                "url": self.article_url,
            },
        }


@dataclass(frozen=True)
class StopwatchRecord:
    task_name: str
    elapsed_milliseconds: int


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Skip:
    reason: str


@dataclass(frozen=True)
class Failure:
    error: Exception


StageResult = Union[Success[T], Skip, Failure]
