"""Workflow error taxonomy.

Services raise these; the calling layer maps ``kind`` to whatever transport
response it uses. ``code`` is a stable machine-readable identifier.
"""

from enum import Enum
from uuid import UUID


class ErrorKind(str, Enum):
    """Transport-agnostic error categories."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    INVALID_ARGUMENT = "invalid_argument"
    ALREADY_DECIDED = "already_decided"


class WorkflowError(Exception):
    """Base class for every failure raised by the workflow services."""

    kind: ErrorKind = ErrorKind.INVALID_ARGUMENT
    code: str = "WORKFLOW_ERROR"

    def __init__(self, message: str | None = None):
        self.message = message or self.code
        super().__init__(self.message)


# --- Kinds ---


class NotFoundError(WorkflowError):
    kind = ErrorKind.NOT_FOUND
    code = "NOT_FOUND"

    @classmethod
    def for_entity(cls, entity: str, entity_id: UUID) -> "NotFoundError":
        return cls(f"{entity} not found: {entity_id}")


class ForbiddenError(WorkflowError):
    kind = ErrorKind.FORBIDDEN
    code = "FORBIDDEN"


class ConflictError(WorkflowError):
    kind = ErrorKind.CONFLICT
    code = "CONFLICT"


class InvalidArgumentError(WorkflowError):
    kind = ErrorKind.INVALID_ARGUMENT
    code = "INVALID_ARGUMENT"


class AlreadyDecidedError(WorkflowError):
    kind = ErrorKind.ALREADY_DECIDED
    code = "ALREADY_DECIDED"


# --- Conflicts ---


class DuplicateNameError(ConflictError):
    code = "DUPLICATE_NAME"


class AlreadyMemberError(ConflictError):
    code = "ALREADY_MEMBER"


class DuplicatePendingError(ConflictError):
    code = "ALREADY_PENDING"


class TeamHasProjectError(ConflictError):
    code = "TEAM_HAS_PROJECT"


class CannotRemoveLeaderError(ConflictError):
    code = "CANNOT_REMOVE_LEADER"


class InvalidStateForReviewError(ConflictError):
    code = "INVALID_STATE_FOR_REVIEW"


# --- Invalid arguments ---


class NotATeamMemberError(InvalidArgumentError):
    code = "NOT_A_TEAM_MEMBER"


class InvalidInviteeError(InvalidArgumentError):
    code = "INVALID_INVITEE"


class InvalidProfessorError(InvalidArgumentError):
    code = "PROFESSOR_ID_INVALID"


# --- Forbidden ---


class NotTeamMemberError(ForbiddenError):
    code = "NOT_TEAM_MEMBER"
