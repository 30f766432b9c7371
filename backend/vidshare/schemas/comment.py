"""Comment Schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field

from vidshare.schemas.base import CamelModel
from vidshare.schemas.user import OwnerSummary


class CommentCreate(CamelModel):
    # Blank content is rejected by CommentStore with a VALIDATION_ERROR
    content: str = Field(max_length=2000)


class CommentResponse(CamelModel):
    id: UUID
    video_id: UUID
    content: str
    created_at: datetime
    owner: OwnerSummary
