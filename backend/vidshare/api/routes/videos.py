"""Video Routes — catalog, engagement toggles, watch history and comments.

Invariants:
    - Literal paths (saved/me, user/me, history/me, user/{username}) are declared
      before /{video_id}
    - GET /{video_id} counts the view first; the history append for signed-in viewers
      is best-effort and never fails the request
    - Toggle responses carry the authoritative post-transaction state
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidshare.api.auth_gate import Identity, optional_identity, require_identity
from vidshare.api.envelope import api_response
from vidshare.core.repository_protocols import MediaStorage
from vidshare.infrastructure.database import get_db
from vidshare.schemas.comment import CommentCreate, CommentResponse
from vidshare.schemas.engagement import ToggleResponse
from vidshare.schemas.video import PublishVideoRequest, VideoPage, VideoSummary
from vidshare.services.comment_store import CommentStore
from vidshare.services.engagement_engine import EngagementEngine
from vidshare.services.history_ledger import HistoryLedger
from vidshare.services.video_catalog import VideoCatalog

router = APIRouter(prefix="/api/v1/videos", tags=["videos"])


def get_media_storage() -> MediaStorage | None:
    """No managed media storage by default; deployments override this dependency."""
    return None


def _summaries(videos) -> list[VideoSummary]:
    return [VideoSummary.model_validate(v) for v in videos]


@router.get("")
async def feed(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=50),
    category: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    videos, total = await VideoCatalog(db).feed(page, limit, category)
    return api_response(
        VideoPage(videos=_summaries(videos), total=total, page=page, limit=limit),
        "Videos fetched successfully",
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def publish(
    body: PublishVideoRequest,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    video = await VideoCatalog(db).publish(
        identity.user_id,
        title=body.title,
        video_url=body.video_url,
        category=body.category,
        thumbnail_url=body.thumbnail_url,
        duration=body.duration,
        description=body.description,
    )
    return api_response(
        VideoSummary.model_validate(video), "Video published successfully",
        status.HTTP_201_CREATED,
    )


@router.get("/saved/me")
async def my_saved_videos(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    videos = await VideoCatalog(db).list_saved(identity.user_id)
    return api_response(_summaries(videos), "Saved videos fetched successfully")


@router.get("/user/me")
async def my_videos(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    videos = await VideoCatalog(db).list_by_owner(identity.user_id)
    return api_response(_summaries(videos), "Your videos fetched successfully")


@router.get("/history/me")
async def my_watch_history(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    videos = await HistoryLedger(db).list_history(identity.user_id)
    return api_response(_summaries(videos), "Watch history fetched successfully")


@router.get("/user/{username}")
async def channel_videos(username: str, db: AsyncSession = Depends(get_db)):
    videos = await VideoCatalog(db).list_by_username(username)
    return api_response(_summaries(videos), "Channel videos fetched successfully")


@router.get("/{video_id}")
async def watch_video(
    video_id: UUID,
    identity: Identity | None = Depends(optional_identity),
    db: AsyncSession = Depends(get_db),
):
    viewer_id = identity.user_id if identity else None
    detail = await VideoCatalog(db).watch(video_id, viewer_id)
    if viewer_id is not None:
        await HistoryLedger(db).record_best_effort(viewer_id, video_id)
    return api_response(detail, "Video fetched successfully")


@router.delete("/{video_id}")
async def delete_video(
    video_id: UUID,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    media: MediaStorage | None = Depends(get_media_storage),
):
    await VideoCatalog(db, media).delete(video_id, identity.user_id)
    return api_response({}, "Video deleted successfully")


@router.post("/{video_id}/like")
async def toggle_like(
    video_id: UUID,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    result = await EngagementEngine(db).toggle_like(identity.user_id, video_id)
    message = "Video liked" if result.active else "Video unliked"
    return api_response(ToggleResponse.model_validate(result), message)


@router.post("/{video_id}/save")
async def toggle_save(
    video_id: UUID,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    result = await EngagementEngine(db).toggle_save(identity.user_id, video_id)
    message = "Video saved" if result.active else "Video removed from saved"
    return api_response(ToggleResponse.model_validate(result), message)


@router.post("/{video_id}/history")
async def add_to_history(
    video_id: UUID,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    added = await HistoryLedger(db).record(identity.user_id, video_id)
    return api_response(
        {"videoId": str(video_id), "added": added},
        "Added to watch history" if added else "Already in watch history",
    )


@router.get("/{video_id}/comments")
async def list_comments(video_id: UUID, db: AsyncSession = Depends(get_db)):
    comments = await CommentStore(db).list_for_video(video_id)
    return api_response(
        [CommentResponse.model_validate(c) for c in comments],
        "Comments fetched successfully",
    )


@router.post("/{video_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    video_id: UUID,
    body: CommentCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentStore(db).add(video_id, identity.user_id, body.content)
    return api_response(
        CommentResponse.model_validate(comment), "Comment added successfully",
        status.HTTP_201_CREATED,
    )
