from src.capstone.schemas.notification import NotificationRead
from src.capstone.schemas.pagination import PaginatedResponse
from src.capstone.schemas.review import (
    BulkReviewItem,
    BulkReviewRequest,
    BulkReviewResult,
    ReviewAction,
    ReviewHistoryItem,
    ReviewQueueItem,
)
from src.capstone.schemas.team import TeamCreate, TeamMemberRead, TeamRead

__all__ = [
    "BulkReviewItem",
    "BulkReviewRequest",
    "BulkReviewResult",
    "NotificationRead",
    "PaginatedResponse",
    "ReviewAction",
    "ReviewHistoryItem",
    "ReviewQueueItem",
    "TeamCreate",
    "TeamMemberRead",
    "TeamRead",
]
