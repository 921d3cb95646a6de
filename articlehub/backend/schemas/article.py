"""
Article Schemas.

Pydantic schemas for the Mini App article endpoints. Every request carries
the raw Telegram initData that identifies the caller.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from articlehub.backend.models.article import ArticleStatus, MediaType


class ArticleFields(BaseModel):
    """Article content as written by the author."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Article title",
        examples=["How I learned to cook"],
    )
    body: str = Field(
        ...,
        min_length=1,
        description="Article text",
    )
    preview: str | None = Field(
        default=None,
        description="Short teaser; derived from the body when omitted",
    )
    media_url: str | None = Field(
        default=None,
        description="Image URL, base64 data URI or YouTube link",
    )
    media_type: MediaType | None = Field(
        default=None,
        description="Inferred from media_url when omitted",
    )
    category_id: str | None = Field(default=None, max_length=64)
    is_anonymous: bool = False
    allow_comments: bool = True


class ArticleSubmitRequest(BaseModel):
    """Schema for submitting a new article."""

    init_data: str = Field(..., min_length=1, alias="initData")
    article: ArticleFields

    model_config = ConfigDict(populate_by_name=True)


class ArticleEditRequest(BaseModel):
    """Schema for editing an existing article."""

    init_data: str = Field(..., min_length=1, alias="initData")
    edit: ArticleFields

    model_config = ConfigDict(populate_by_name=True)


class ArticleResponse(BaseModel):
    """Schema for an article in API responses."""

    id: str = Field(description="Article unique identifier")
    author_id: str
    category_id: str | None
    title: str
    body: str
    preview: str | None
    media_url: str | None
    media_type: str | None
    is_anonymous: bool
    allow_comments: bool
    status: ArticleStatus
    rejection_reason: str | None
    pending_edit: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
