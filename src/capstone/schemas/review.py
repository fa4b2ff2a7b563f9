"""Assignment review schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ReviewAction(str, Enum):
    """Action applied by a bulk review."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"


class BulkReviewItem(BaseModel):
    assignment_id: UUID
    project_id: UUID
    comment: str | None = None


class BulkReviewRequest(BaseModel):
    action: ReviewAction
    items: list[BulkReviewItem] = Field(min_length=1)


class BulkReviewResult(BaseModel):
    """Outcome of a best-effort batch: applied items count, the rest are listed."""

    success: int
    failed: int
    failed_ids: list[UUID]


class ReviewQueueItem(BaseModel):
    assignment_id: UUID
    project_id: UUID
    project_title: str
    team_name: str | None
    title: str
    updated_at: datetime | None
    due_date: datetime | None
    status: str


class ReviewHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    decision: str
    comment: str | None
    created_at: datetime
    reviewer_id: UUID | None
