import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from ...exceptions import ArticleStoreError, NewsBackendError
from ...models.news_article import NewsArticle
from ...repositories.article_repository import ArticleRepository
from ...services.news_sync_service import NewsSyncService, SyncStatus
from ..dependencies import get_article_repository, get_sync_service, read_json_body, require_identity
from ..schemas import ArticleCreateRequest, ArticleResponse, MessageResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/news", response_model=List[ArticleResponse])
def get_news(repository: ArticleRepository = Depends(get_article_repository)):
    """Latest articles, newest first"""
    try:
        return repository.list_latest()
    except ArticleStoreError as e:
        logger.error("news_read_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch news")


@router.get("/fetch-news", response_model=MessageResponse)
async def fetch_news(sync_service: NewsSyncService = Depends(get_sync_service)):
    """Manually trigger the news sync"""
    logger.info("news_sync_started", trigger="manual")
    try:
        result = await sync_service.sync()
    except NewsBackendError as e:
        logger.error("news_sync_failed", trigger="manual", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch news")

    if result.status == SyncStatus.EMPTY:
        logger.info("news_sync_empty", trigger="manual")
        raise HTTPException(status_code=404, detail="No news found")

    logger.info("news_sync_completed", trigger="manual", article_count=result.article_count)
    return MessageResponse(message="News fetched and saved successfully!")


@router.post(
    "/news",
    response_model=MessageResponse,
    status_code=201,
    openapi_extra={"requestBody": {"content": {"application/json": {"schema": ArticleCreateRequest.model_json_schema()}}}},
)
async def create_news(
    request: Request,
    identity: Dict[str, Any] = Depends(require_identity),
    repository: ArticleRepository = Depends(get_article_repository),
):
    # The body is only read once the caller is authenticated
    try:
        body = ArticleCreateRequest.model_validate(await read_json_body(request))
    except ValidationError:
        raise HTTPException(status_code=422, detail="Invalid article payload")

    article = NewsArticle(
        title=body.title,
        description=body.description,
        url=body.url,
        image_url=body.image_url,
        published_at=datetime.now(timezone.utc).replace(tzinfo=None),
    )
    try:
        await asyncio.to_thread(repository.create, article)
    except ArticleStoreError as e:
        logger.error("news_create_failed", uid=identity.get("uid"), error=str(e))
        raise HTTPException(status_code=500, detail="Failed to add news")

    logger.info("news_created", article_id=article.id, uid=identity.get("uid"))
    return MessageResponse(message="News added successfully!")
