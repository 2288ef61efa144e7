"""
News Sync Service
Keeps the article store mirroring the latest NewsAPI result set:
1. Fetch articles for the configured query
2. Map them to NewsArticle rows
3. Replace the stored snapshot (delete all, then insert all)

The HTTP endpoint and the hourly scheduler both go through ``sync``;
only the way they report the outcome differs.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

import structlog
from sqlalchemy.orm import Session

from ..core.database import session_scope
from ..models.news_article import NewsArticle
from ..repositories.article_repository import ArticleRepository
from .news_source import NewsApiClient, RemoteArticle

logger = structlog.get_logger(__name__)


class SyncStatus(str, Enum):
    UPDATED = "updated"
    EMPTY = "empty"


@dataclass
class SyncResult:
    status: SyncStatus
    article_count: int = 0


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def map_remote_article(remote: RemoteArticle) -> NewsArticle:
    return NewsArticle(
        title=remote.title,
        description=remote.description,
        url=remote.url,
        image_url=remote.urlToImage,
        published_at=to_naive_utc(remote.publishedAt),
    )


class NewsSyncService:
    """Fetch-normalize-replace routine shared by the manual and scheduled triggers"""

    def __init__(self, news_client: NewsApiClient, session_factory: Callable[[], Session]):
        self.news_client = news_client
        self.session_factory = session_factory
        # Serializes runs so a manual trigger never interleaves with the hourly one
        self._lock = asyncio.Lock()

    async def sync(self) -> SyncResult:
        """
        Run one sync.

        Returns:
            SyncResult with status EMPTY (store untouched) or UPDATED.

        Raises:
            NewsSourceError: the fetch failed.
            ArticleStoreError: the replace failed; the previous snapshot is kept.
        """
        async with self._lock:
            remote_articles = await self.news_client.fetch_articles()

            if not remote_articles:
                return SyncResult(status=SyncStatus.EMPTY)

            articles = [map_remote_article(remote) for remote in remote_articles]
            count = await asyncio.to_thread(self._replace_articles, articles)
            return SyncResult(status=SyncStatus.UPDATED, article_count=count)

    def _replace_articles(self, articles: List[NewsArticle]) -> int:
        with session_scope(self.session_factory) as db:
            return ArticleRepository(db).replace_all(articles)

    async def run_scheduled(self) -> None:
        """Scheduler entry point: logs the outcome and never raises."""
        logger.info("news_sync_started", trigger="schedule")
        try:
            result = await self.sync()
        except Exception as e:
            logger.error("news_sync_failed", trigger="schedule", error=str(e))
            return

        if result.status == SyncStatus.EMPTY:
            logger.info("news_sync_empty", trigger="schedule")
        else:
            logger.info("news_sync_completed", trigger="schedule", article_count=result.article_count)
