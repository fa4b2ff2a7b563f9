"""Repository layer - data access abstraction."""

from src.capstone.repositories.activity import ActivityLogRepository
from src.capstone.repositories.base import BaseRepository
from src.capstone.repositories.invitation import TeamInvitationRepository
from src.capstone.repositories.membership import MembershipRepository
from src.capstone.repositories.notification import NotificationRepository
from src.capstone.repositories.professor_request import ProfessorRequestRepository
from src.capstone.repositories.project import (
    AssignmentRepository,
    AssignmentReviewRepository,
    ProjectRepository,
)
from src.capstone.repositories.team import TeamRepository
from src.capstone.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    # Directory
    "MembershipRepository",
    "ProjectRepository",
    "TeamRepository",
    "UserRepository",
    # Workflows
    "AssignmentRepository",
    "AssignmentReviewRepository",
    "ProfessorRequestRepository",
    "TeamInvitationRepository",
    # Side channels
    "ActivityLogRepository",
    "NotificationRepository",
]
