"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, TeamFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid, utc_now
from tests.factories.team import (
    AssignmentFactory,
    ProjectFactory,
    TeamFactory,
    TeamMembershipFactory,
)
from tests.factories.user import UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid",
    "utc_now",
    # User
    "UserFactory",
    # Team
    "TeamFactory",
    "TeamMembershipFactory",
    # Project
    "AssignmentFactory",
    "ProjectFactory",
]
