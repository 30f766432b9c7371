"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps UUIDs carried in token subjects; never a bare string
    - All valid categories encoded as an Enum, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class VideoCategory(str, Enum):
    """Catalog categories. GENERAL is the default for new videos."""
    GENERAL = "General"
    EDUCATION = "Education"
    ENTERTAINMENT = "Entertainment"
    TECHNOLOGY = "Technology"
    GAMING = "Gaming"


class TokenKind(str, Enum):
    """Which of the two session credentials a JWT is."""
    ACCESS = "access"
    REFRESH = "refresh"
