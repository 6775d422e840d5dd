"""Orchestration tests for NoteService with mocked repositories."""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from src.mdnotes.config import GuestAccess, Settings
from src.mdnotes.core.exceptions import (
    AuthorizationDeniedError,
    InvalidInputError,
    NotFoundError,
)
from src.mdnotes.core.models import Group, Note, NoteGroupPermission, Revision, User
from src.mdnotes.core.schemas.permissions import PermissionsUpdateDto
from src.mdnotes.core.services.note_service import NoteService

NOW = datetime(2025, 9, 13, 10, 30, tzinfo=timezone.utc)


def make_user(name):
    return User(id=uuid.uuid4(), username=name, display_name=name, groups=[])


def make_note(owner, alias="test4"):
    return Note(
        id=uuid.uuid4(),
        alias=alias,
        owner_id=owner.id if owner else None,
        owner=owner,
        current_revision_id=1,
        view_count=0,
        created_at=NOW,
    )


def make_revision(note, content, author, revision_id=1):
    return Revision(id=revision_id, note_id=note.id, content=content, author=author, created_at=NOW)


@pytest.fixture
def owner():
    return make_user("alice")


@pytest.fixture
def stranger():
    return make_user("mallory")


@pytest.fixture
def note(owner):
    return make_note(owner)


@pytest.fixture
def calls():
    return []


@pytest.fixture
def service(owner, stranger, note, calls):
    """NoteService whose collaborators append their name to ``calls``."""
    settings = Settings(guest_access=GuestAccess.WRITE, max_document_length=50)
    history = AsyncMock()
    history.record_visit.side_effect = lambda *a, **kw: calls.append("history")

    svc = NoteService(session=AsyncMock(), settings=settings, history_service=history)

    users = {owner.id: owner, stranger.id: stranger}

    async def resolve(identifier):
        calls.append("resolve")
        if identifier not in (note.alias, str(note.id)):
            raise NotFoundError(f"Note '{identifier}' not found", identifier=identifier)
        return note

    async def get_user(user_id):
        calls.append("actor")
        return users.get(user_id)

    async def update_content(target, text, author_id=None):
        calls.append("mutate")
        return target

    async def create(text, owner_id=None, alias=None, group_entries=()):
        created = make_note(users.get(owner_id), alias=alias)
        for group, can_edit in group_entries:
            created.group_permissions.append(NoteGroupPermission(group=group, group_id=group.id, can_edit=can_edit))
        return created

    svc.note_repo = AsyncMock()
    svc.note_repo.resolve.side_effect = resolve
    svc.note_repo.update_content.side_effect = update_content
    svc.note_repo.delete.side_effect = lambda *a, **kw: calls.append("mutate")
    svc.note_repo.record_view.side_effect = lambda *a, **kw: calls.append("view")
    svc.note_repo.create.side_effect = create

    svc.user_repo = AsyncMock()
    svc.user_repo.get_by_id.side_effect = get_user

    svc.group_repo = AsyncMock()
    svc.group_repo.get_by_name.side_effect = lambda name: Group(
        id=uuid.uuid4(), name=name, display_name=name, special=True
    )

    svc.revision_repo = AsyncMock()
    svc.revision_repo.get_head.side_effect = lambda n: make_revision(n, "This is a test note.", owner)
    svc.revision_repo.list_author_usernames.return_value = ["alice"]
    return svc


class TestOrdering:
    async def test_update_runs_resolve_authorize_mutate_history(self, service, owner, calls):
        result = await service.update_note(owner.id, "test4", "Lorem ipsum")

        assert calls == ["resolve", "actor", "mutate", "history"]
        assert result.alias == "test4"
        service.history_service.record_visit.assert_awaited_once()
        assert service.history_service.record_visit.await_args.kwargs == {"edited": True}

    async def test_read_records_view_then_history(self, service, owner, calls):
        result = await service.get_note(owner.id, "test4")

        assert calls == ["resolve", "actor", "view", "history"]
        assert result.content == "This is a test note."
        assert result.metadata.edited_by == ["alice"]
        assert result.permissions.owner == "alice"

    async def test_missing_note_stops_before_authorization(self, service, owner, calls):
        with pytest.raises(NotFoundError):
            await service.get_note(owner.id, "i_dont_exist")

        assert calls == ["resolve"]


class TestAuthorization:
    async def test_denied_update_has_no_side_effects(self, service, stranger, calls):
        with pytest.raises(AuthorizationDeniedError) as exc_info:
            await service.update_note(stranger.id, "test4", "Lorem ipsum")

        assert exc_info.value.anonymous is False
        assert exc_info.value.identifier == "test4"
        assert "mutate" not in calls
        service.note_repo.update_content.assert_not_awaited()
        service.history_service.record_visit.assert_not_awaited()

    async def test_guest_denied_is_anonymous(self, service, calls):
        with pytest.raises(AuthorizationDeniedError) as exc_info:
            await service.update_note(None, "test4", "Lorem ipsum")

        assert exc_info.value.anonymous is True
        assert calls == ["resolve"]

    async def test_unknown_actor_is_denied(self, service):
        with pytest.raises(AuthorizationDeniedError):
            await service.get_note(uuid.uuid4(), "test4")

    async def test_only_owner_may_delete(self, service, stranger, owner, calls):
        with pytest.raises(AuthorizationDeniedError):
            await service.delete_note(stranger.id, "test4")
        service.note_repo.delete.assert_not_awaited()

        await service.delete_note(owner.id, "test4")
        service.note_repo.delete.assert_awaited_once()

    async def test_delete_records_no_history(self, service, owner):
        await service.delete_note(owner.id, "test4")
        service.history_service.record_visit.assert_not_awaited()

    async def test_only_owner_may_change_permissions(self, service, stranger):
        with pytest.raises(AuthorizationDeniedError):
            await service.update_permissions(stranger.id, "test4", PermissionsUpdateDto())
        service.note_repo.update_permissions.assert_not_awaited()

    async def test_guest_creation_denied_unless_policy_allows(self, service):
        with pytest.raises(AuthorizationDeniedError) as exc_info:
            await service.create_note(None, "hello")
        assert exc_info.value.anonymous is True

        service.settings.guest_access = GuestAccess.CREATE
        service.permissions.guest_access = GuestAccess.CREATE
        result = await service.create_note(None, "hello")
        assert result.permissions.owner is None
        assert [(g.group, g.can_edit) for g in result.permissions.shared_to_groups] == [("everyone", True)]
        assert service.note_repo.create.await_args.kwargs["owner_id"] is None


class TestHistoryFailures:
    async def test_history_failure_does_not_fail_read(self, service, owner, caplog):
        service.history_service.record_visit.side_effect = RuntimeError("history store down")

        result = await service.get_note_content(owner.id, "test4")

        assert result == "This is a test note."
        assert "Failed to record history" in caplog.text
        service.session.rollback.assert_awaited_once()

    async def test_history_failure_does_not_fail_update(self, service, owner, calls):
        service.history_service.record_visit.side_effect = RuntimeError("history store down")

        result = await service.update_note(owner.id, "test4", "Lorem ipsum")

        assert result.id is not None
        assert "mutate" in calls

    async def test_guests_get_no_history(self, service, note, owner):
        everyone = Group(id=uuid.uuid4(), name="everyone", display_name="Everyone", special=True)
        note.group_permissions.append(NoteGroupPermission(group=everyone, group_id=everyone.id, can_edit=False))

        await service.get_note(None, "test4")
        service.history_service.record_visit.assert_not_awaited()


class TestValidation:
    async def test_content_too_long(self, service, owner):
        with pytest.raises(InvalidInputError):
            await service.create_note(owner.id, "x" * 51)

    async def test_update_content_checked_after_authorization(self, service, stranger):
        with pytest.raises(AuthorizationDeniedError):
            await service.update_note(stranger.id, "test4", "x" * 51)

    async def test_content_type_checked_after_authorization(self, service, stranger, owner):
        with pytest.raises(AuthorizationDeniedError):
            await service.update_note(stranger.id, "test4", b"{}", content_type="application/json")
        with pytest.raises(InvalidInputError):
            await service.update_note(owner.id, "test4", b"{}", content_type="application/json")

    async def test_markdown_bytes_are_decoded(self, service, owner):
        result = await service.create_note(owner.id, "héllo".encode(), content_type="text/markdown; charset=utf-8")
        assert service.note_repo.create.await_args.args[0] == "héllo"
        assert result.id is not None

    async def test_invalid_utf8(self, service, owner):
        with pytest.raises(InvalidInputError):
            await service.create_note(owner.id, b"\xff\xfe", content_type="text/plain")

    @pytest.mark.parametrize(
        "alias",
        ["has space", "ümlaut", "a/b", "x" * 65, "", "new", "API", str(uuid.uuid4())],
    )
    async def test_invalid_aliases(self, service, owner, alias):
        with pytest.raises(InvalidInputError):
            await service.create_note(owner.id, "hello", alias=alias)
        service.note_repo.create.assert_not_awaited()

    @pytest.mark.parametrize("alias", ["test2", "my.note", "a~b_c-d"])
    async def test_valid_aliases(self, service, owner, alias):
        result = await service.create_note(owner.id, "hello", alias=alias)
        assert result.alias == alias

    async def test_duplicate_access_list_entries(self, service, owner):
        request = PermissionsUpdateDto(
            shared_to_users=[{"username": "bob"}, {"username": "bob", "canEdit": True}]
        )
        with pytest.raises(InvalidInputError):
            await service.update_permissions(owner.id, "test4", request)

    async def test_unknown_grantee(self, service, owner):
        service.user_repo.get_by_usernames.return_value = []
        service.group_repo = AsyncMock()
        service.group_repo.get_by_names.return_value = []

        with pytest.raises(NotFoundError) as exc_info:
            await service.update_permissions(
                owner.id, "test4", PermissionsUpdateDto(shared_to_users=[{"username": "ghost"}])
            )
        assert exc_info.value.identifier == "ghost"
