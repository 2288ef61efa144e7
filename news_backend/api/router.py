from fastapi import APIRouter

from .endpoints import contact, health, news

api_router = APIRouter()
api_router.include_router(news.router, prefix="/api", tags=["news"])

root_router = APIRouter()
root_router.include_router(health.router, tags=["health"])
root_router.include_router(contact.router, tags=["contact"])
