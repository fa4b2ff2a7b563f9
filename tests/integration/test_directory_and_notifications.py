"""Integration tests for directory lookups and the notification read side."""

from uuid import uuid4

import pytest
from sqlmodel import select

from src.capstone.core.db import get_session
from src.capstone.core.exceptions import InvalidArgumentError, NotFoundError
from src.capstone.models import Notification, NotificationType
from src.capstone.services import factory
from tests.helpers import create_project, create_team_with_members, fetch_all

pytestmark = pytest.mark.integration


class TestDirectory:
    async def test_team_view_lists_members_and_project(
        self, directory, db_session, student, student2, professor
    ):
        team = await create_team_with_members(db_session, leader=student, members=[student2], name="Delta")
        await create_project(db_session, team, professor=professor, title="Rover")

        view = await directory.build_team_view(await directory.get_team(team.id))

        assert view.leader_id == student.id
        assert view.project_title == "Rover"
        assert {m.user_id for m in view.members} == {student.id, student2.id}

    async def test_lookups_raise_not_found(self, directory):
        with pytest.raises(NotFoundError):
            await directory.get_user(uuid4())
        with pytest.raises(NotFoundError):
            await directory.get_assignment(uuid4())

    async def test_teams_for_user(self, directory, db_session, student, student2):
        mine = await create_team_with_members(db_session, leader=student)
        await create_team_with_members(db_session, leader=student2)

        teams = await directory.list_teams_for_user(student.id)

        assert [t.id for t in teams] == [mine.id]

    async def test_invitable_users_are_outside_students(
        self, directory, db_session, student, student2, student3, professor
    ):
        team = await create_team_with_members(db_session, leader=student, members=[student2])

        invitable = await directory.list_invitable_users(team.id)

        assert [u.id for u in invitable] == [student3.id]


class TestNotifications:
    async def test_push_and_read_flow(self, notification_service, student):
        for i in range(3):
            await notification_service.push(student.id, NotificationType.TEAM_INVITATION, f"Invite {i}")

        assert await notification_service.unread_count(student.id) == 3

        first_page = await notification_service.list_for_user(student.id, limit=2)
        assert [n.title for n in first_page.items] == ["Invite 2", "Invite 1"]
        assert first_page.has_more is True
        second_page = await notification_service.list_for_user(
            student.id, cursor=first_page.next_cursor, limit=2
        )
        assert [n.title for n in second_page.items] == ["Invite 0"]
        assert second_page.has_more is False

        read = await notification_service.mark_read(first_page.items[0].id, student.id)
        assert read.is_read is True
        assert read.read_at is not None
        assert await notification_service.unread_count(student.id) == 2

        assert await notification_service.mark_all_read(student.id) == 2
        assert await notification_service.unread_count(student.id) == 0

    async def test_unread_filter(self, notification_service, student):
        note = await notification_service.push(student.id, NotificationType.TEAM_INVITATION, "One")
        await notification_service.push(student.id, NotificationType.TEAM_INVITATION, "Two")
        await notification_service.mark_read(note.id, student.id)

        unread = await notification_service.list_for_user(student.id, unread_only=True)

        assert [n.title for n in unread.items] == ["Two"]

    async def test_only_recipient_marks_read(self, notification_service, student, student2):
        note = await notification_service.push(student.id, NotificationType.TEAM_INVITATION, "Hi")
        note_id = note.id

        with pytest.raises(NotFoundError):
            await notification_service.mark_read(note_id, student2.id)

    async def test_garbage_cursor_rejected(self, notification_service, student):
        with pytest.raises(InvalidArgumentError):
            await notification_service.list_for_user(student.id, cursor="not-a-cursor")

    async def test_push_to_unknown_user_returns_none(self, notification_service):
        assert await notification_service.push(uuid4(), NotificationType.TEAM_INVITATION, "Ghost") is None


async def test_notifier_on_its_own_session(engine, db_session, student, student2):
    team = await create_team_with_members(db_session, leader=student)

    async with get_session(engine) as workflow_session, get_session(engine) as notifier_session:
        service = factory.get_invitation_service(workflow_session, notifier_session=notifier_session)
        await service.invite(team.id, student2.id, student.id)

    notes = await fetch_all(engine, select(Notification).where(Notification.recipient_id == student2.id))
    assert len(notes) == 1
