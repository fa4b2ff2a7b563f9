"""Model exports.

Import from here: `from src.capstone.models import User, Team`
"""

# Enums
from src.capstone.models.enums import (
    AssignmentStatus,
    InvitationStatus,
    NotificationType,
    ProjectStatus,
    RequestStatus,
    ReviewDecision,
    Role,
    TeamRole,
)

# Models
from src.capstone.models.activity import ActivityLog
from src.capstone.models.invitation import TeamInvitation
from src.capstone.models.notification import Notification
from src.capstone.models.professor_request import (
    PostRequestTarget,
    PreRequestTarget,
    ProfessorAssignmentRequest,
    RequestTarget,
)
from src.capstone.models.project import Assignment, AssignmentReview, Project
from src.capstone.models.team import Team, TeamMembership
from src.capstone.models.user import User

__all__ = [
    # Enums
    "AssignmentStatus",
    "InvitationStatus",
    "NotificationType",
    "ProjectStatus",
    "RequestStatus",
    "ReviewDecision",
    "Role",
    "TeamRole",
    # Models
    "ActivityLog",
    "Assignment",
    "AssignmentReview",
    "Notification",
    "ProfessorAssignmentRequest",
    "Project",
    "Team",
    "TeamInvitation",
    "TeamMembership",
    "User",
    # Request shapes
    "PostRequestTarget",
    "PreRequestTarget",
    "RequestTarget",
]
