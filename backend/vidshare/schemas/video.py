"""Video Schemas — publish request and catalog projections.

Invariants:
    - PublishVideoRequest.title: stripped, 1-200 chars
    - category must be a VideoCategory value; defaults to General
    - VideoDetail adds viewer-relative flags derived from membership, never stored
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from vidshare.core.domain_types import VideoCategory
from vidshare.schemas.base import CamelModel
from vidshare.schemas.user import OwnerSummary


class PublishVideoRequest(CamelModel):
    title: str = Field(max_length=200)
    description: str = Field("", max_length=5000)
    category: VideoCategory = VideoCategory.GENERAL
    video_url: str = Field(min_length=1, max_length=1024)
    thumbnail_url: str = Field("", max_length=1024)
    duration: float = Field(0.0, ge=0)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class VideoSummary(CamelModel):
    id: UUID
    title: str
    description: str
    category: str
    video_url: str
    thumbnail_url: str
    duration: float
    views: int
    likes_count: int
    saves_count: int
    is_published: bool
    created_at: datetime
    owner: OwnerSummary


class VideoDetail(VideoSummary):
    is_liked: bool = False
    is_saved: bool = False


class VideoPage(CamelModel):
    videos: list[VideoSummary]
    total: int
    page: int
    limit: int
