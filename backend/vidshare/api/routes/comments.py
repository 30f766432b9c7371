"""Comment Routes — owner-only comment deletion."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.auth_gate import Identity, require_identity
from vidshare.api.envelope import api_response
from vidshare.infrastructure.database import get_db
from vidshare.services.comment_store import CommentStore

router = APIRouter(prefix="/api/v1/comments", tags=["comments"])


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: UUID,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    await CommentStore(db).remove(comment_id, identity.user_id)
    return api_response({}, "Comment deleted successfully")
