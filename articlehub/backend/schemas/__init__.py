# Pydantic schemas package
from articlehub.backend.schemas.article import (
    ArticleEditRequest,
    ArticleFields,
    ArticleResponse,
    ArticleSubmitRequest,
)
from articlehub.backend.schemas.base import (
    ApiResponse,
    ErrorDetail,
    ErrorResponse,
    ResponseMetadata,
)

__all__ = [
    "ApiResponse",
    "ArticleEditRequest",
    "ArticleFields",
    "ArticleResponse",
    "ArticleSubmitRequest",
    "ErrorDetail",
    "ErrorResponse",
    "ResponseMetadata",
]
