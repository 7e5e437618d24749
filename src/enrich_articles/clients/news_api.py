"""Thin client for the News API `/v2/everything` endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import requests

from enrich_articles.models import RawArticle

logger = logging.getLogger(__name__)

NEWS_API_ENDPOINT = "https://newsapi.org/v2/everything"

SORT_PUBLISHED_AT = "publishedAt"
SORT_RELEVANCY = "relevancy"

STATUS_OK = "ok"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class EverythingRequest:
    q: str
    from_date: datetime
    to_date: datetime
    sort_by: str = SORT_RELEVANCY
    language: Optional[str] = None


@dataclass
class EverythingResponse:
    status: str
    total_results: int = 0
    articles: list[RawArticle] = field(default_factory=list)
    error_message: Optional[str] = None


class NewsApiClient:
    def __init__(self, api_key: str, endpoint: str = NEWS_API_ENDPOINT, timeout: int = 30) -> None:
        self.api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout

    def get_everything(self, request: EverythingRequest) -> EverythingResponse:
        """
        Search all articles matching the request.

        An error payload from the API comes back as a response with
        status "error"; a body that is not JSON raises.
        """
        params = {
            "q": request.q,
            "from": request.from_date.strftime("%Y-%m-%dT%H:%M:%S"),
            "to": request.to_date.strftime("%Y-%m-%dT%H:%M:%S"),
            "sortBy": request.sort_by,
        }
        if request.language:
            params["language"] = request.language

        response = requests.get(
            self.endpoint,
            params=params,
            headers={"X-Api-Key": self.api_key},
            timeout=self.timeout,
        )
        payload = response.json()

        if payload.get("status") != STATUS_OK:
            logger.warning(
                "News API returned %s for '%s': %s",
                response.status_code,
                request.q,
                payload.get("message"),
            )
            return EverythingResponse(status=STATUS_ERROR, error_message=payload.get("message"))

        return EverythingResponse(
            status=STATUS_OK,
            total_results=int(payload.get("totalResults") or 0),
            articles=[RawArticle.from_payload(a) for a in payload.get("articles") or []],
        )
