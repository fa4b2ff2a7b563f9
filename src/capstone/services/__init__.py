from src.capstone.services.assignment_service import AssignmentService
from src.capstone.services.directory_service import DirectoryService
from src.capstone.services.invitation_service import InvitationService
from src.capstone.services.notification_service import NotificationService
from src.capstone.services.professor_assignment_service import ProfessorAssignmentService
from src.capstone.services.review_service import ReviewService
from src.capstone.services.team_service import TeamService

__all__ = [
    "AssignmentService",
    "DirectoryService",
    "InvitationService",
    "NotificationService",
    "ProfessorAssignmentService",
    "ReviewService",
    "TeamService",
]
