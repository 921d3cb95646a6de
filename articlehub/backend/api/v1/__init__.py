"""
API Version 1 Router.

Aggregates all v1 endpoint routers.
"""

from fastapi import APIRouter

from articlehub.backend.api.v1.endpoints import articles

router = APIRouter()

router.include_router(articles.router, prefix="/articles", tags=["articles"])
