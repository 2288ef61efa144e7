"""
NewsAPI client.

Wraps the ``/v2/everything`` search endpoint for one fixed query term and
turns its payload into ``RemoteArticle`` models.
"""

from datetime import datetime
from typing import List, Optional

import httpx
import structlog
from pydantic import BaseModel, ValidationError, field_validator

from ..config import Settings, get_settings
from ..exceptions import NewsSourceError

logger = structlog.get_logger(__name__)


class RemoteArticle(BaseModel):
    """Article as returned by NewsAPI (only the fields we keep)"""
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    urlToImage: Optional[str] = None
    publishedAt: Optional[datetime] = None

    @field_validator("publishedAt", mode="wrap")
    @classmethod
    def parse_published_at(cls, value, handler):
        # An unparseable timestamp becomes null instead of dropping the article
        try:
            return handler(value)
        except ValidationError:
            return None


class NewsApiResponse(BaseModel):
    status: Optional[str] = None
    totalResults: Optional[int] = None
    articles: Optional[List[RemoteArticle]] = None


class NewsApiClient:
    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = settings or get_settings()
        self.base_url = settings.news_api_url
        self.api_key = settings.news_api_key
        self.query = settings.news_query
        self.timeout = settings.news_api_timeout_seconds
        self._transport = transport

    async def fetch_articles(self) -> List[RemoteArticle]:
        """
        Fetch the current result set for the configured query.

        Raises:
            NewsSourceError: on network failure, a non-2xx status, or a body
                that is not a NewsAPI response.
        """
        params = {"q": self.query, "apiKey": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
                payload = NewsApiResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise NewsSourceError(f"News API returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise NewsSourceError(f"News API request failed: {e}") from e
        except (ValueError, ValidationError) as e:
            raise NewsSourceError(f"Malformed News API response: {e}") from e

        articles = payload.articles or []
        logger.info("news_api_fetched", query=self.query, article_count=len(articles))
        return articles
