"""
Articles API Endpoints.

Mini App article submission and editing. Callers are identified by the
Telegram initData in the request body.
"""

from fastapi import APIRouter

from articlehub.backend.core.dependencies import DbSession, Notifier, RequestId
from articlehub.backend.core.security import authenticate_init_data
from articlehub.backend.schemas.article import (
    ArticleEditRequest,
    ArticleResponse,
    ArticleSubmitRequest,
)
from articlehub.backend.schemas.base import ApiResponse, ResponseMetadata
from articlehub.backend.services.article import ArticleService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ArticleResponse],
    status_code=201,
    summary="Submit an article",
    description="Create a pending article and send it to the moderators.",
)
async def submit_article(
    data: ArticleSubmitRequest,
    db: DbSession,
    notifier: Notifier,
    request_id: RequestId,
) -> ApiResponse[ArticleResponse]:
    user = authenticate_init_data(data.init_data)
    service = ArticleService(db, notifier)
    article = await service.submit(user, data.article)
    return ApiResponse(
        data=ArticleResponse.model_validate(article),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/{article_id}/edit",
    response_model=ApiResponse[ArticleResponse],
    summary="Edit an article",
    description=(
        "Published articles keep their content until the edit is approved. "
        "Pending or rejected articles are updated and sent for moderation again."
    ),
)
async def edit_article(
    article_id: str,
    data: ArticleEditRequest,
    db: DbSession,
    notifier: Notifier,
    request_id: RequestId,
) -> ApiResponse[ArticleResponse]:
    user = authenticate_init_data(data.init_data)
    service = ArticleService(db, notifier)
    article = await service.edit(user, article_id, data.edit)
    return ApiResponse(
        data=ArticleResponse.model_validate(article),
        metadata=ResponseMetadata(request_id=request_id),
    )
