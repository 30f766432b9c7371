"""Comment Store — owned comments on videos with owner-only deletion.

Invariants:
    - add(): blank content -> InputValidationError; unknown video -> ResourceNotFoundError
    - remove(): unknown comment -> ResourceNotFoundError; requester != owner ->
      ForbiddenError and the comment stays
    - list_for_video(): most-recent-first, owner display fields loaded with the comment
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.core.authorization import ensure_owner
from vidshare.core.errors import InputValidationError, ResourceNotFoundError
from vidshare.models.comment import Comment
from vidshare.models.video import Video

logger = logging.getLogger(__name__)


class CommentStore:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, video_id: UUID, owner_id: UUID, content: str) -> Comment:
        content = (content or "").strip()
        if not content:
            raise InputValidationError("Comment content is required", field="content")

        exists = await self.db.execute(select(Video.id).where(Video.id == video_id))
        if exists.first() is None:
            raise ResourceNotFoundError("Video", str(video_id))

        comment = Comment(video_id=video_id, owner_id=owner_id, content=content)
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment, attribute_names=["owner"])
        return comment

    async def remove(self, comment_id: UUID, requester_id: UUID) -> None:
        comment = await self.db.get(Comment, comment_id)
        if comment is None:
            raise ResourceNotFoundError("Comment", str(comment_id))
        ensure_owner(requester_id, comment.owner_id, "Comment", comment_id)

        await self.db.delete(comment)
        await self.db.commit()
        logger.info(
            "Comment deleted",
            extra={"comment_id": comment_id, "user_id": requester_id},
        )

    async def list_for_video(self, video_id: UUID) -> list[Comment]:
        result = await self.db.execute(
            select(Comment)
            .where(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc()),
        )
        return list(result.scalars().all())
