"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Counters on users/videos are caches of relation tables and change only
      in the same transaction as the relation

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from vidshare.models.user import User  # noqa: F401
from vidshare.models.video import Video  # noqa: F401
from vidshare.models.engagement import VideoLike, VideoSave  # noqa: F401
from vidshare.models.subscription import Subscription  # noqa: F401
from vidshare.models.watch_history import WatchHistoryEntry  # noqa: F401
from vidshare.models.comment import Comment  # noqa: F401
