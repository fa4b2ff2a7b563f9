"""Shared enums for models."""

from enum import Enum


class Role(str, Enum):
    """Platform-wide user role; drives every authorization check."""

    STUDENT = "STUDENT"
    PROFESSOR = "PROFESSOR"
    TA = "TA"
    ADMIN = "ADMIN"


class TeamRole(str, Enum):
    """User role within a team."""

    LEADER = "LEADER"
    MEMBER = "MEMBER"


class InvitationStatus(str, Enum):
    """Team invitation status."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class RequestStatus(str, Enum):
    """Professor assignment request status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ProjectStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"


class AssignmentStatus(str, Enum):
    PENDING = "PENDING"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"


class ReviewDecision(str, Enum):
    """Kind of entry in an assignment's review history."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"
    NOTE = "NOTE"


class NotificationType(str, Enum):
    TEAM_INVITATION = "TEAM_INVITATION"
    INVITATION_ACCEPTED = "INVITATION_ACCEPTED"
    INVITATION_DECLINED = "INVITATION_DECLINED"
    PROFESSOR_REQUEST = "PROFESSOR_REQUEST"
    PROFESSOR_REQUEST_APPROVED = "PROFESSOR_REQUEST_APPROVED"
    PROFESSOR_REQUEST_REJECTED = "PROFESSOR_REQUEST_REJECTED"
    ASSIGNMENT_REVIEW_REQUESTED = "ASSIGNMENT_REVIEW_REQUESTED"
