"""Unit tests for UserSyncService against an in-memory repository."""

from dataclasses import replace
from uuid import UUID

import pytest

from boilerplate_api.application.services.user_sync_service import UserSyncService
from boilerplate_api.domain.entities import IdentityProviderUser, User, UserPage
from boilerplate_api.domain.errors import UserSyncError


class InMemoryUserRepository:
    """Just enough of UserRepository for the sync service."""

    def __init__(self, fail_with: Exception | None = None):
        self.users: dict[UUID, User] = {}
        self.fail_with = fail_with

    async def get_by_id(self, user_id: UUID) -> User | None:
        return self.users.get(user_id)

    async def get_by_clerk_id(self, clerk_id: str) -> User | None:
        return next((u for u in self.users.values() if u.clerk_id == clerk_id), None)

    async def list(self, page: int = 1, page_size: int = 10, search: str | None = None) -> UserPage:
        users = list(self.users.values())
        return UserPage(users=users, total=len(users))

    async def create(self, user: User) -> User:
        if self.fail_with is not None:
            raise self.fail_with
        self.users[user.id] = user
        return user

    async def update_fields(self, user_id, name=None, email=None) -> User | None:
        raise NotImplementedError

    async def update_by_clerk_id(self, clerk_id: str, name: str, email: str) -> User | None:
        existing = await self.get_by_clerk_id(clerk_id)
        if existing is None:
            return None
        updated = replace(existing, name=name, email=email)
        self.users[existing.id] = updated
        return updated

    async def delete(self, user_id: UUID) -> bool:
        return self.users.pop(user_id, None) is not None

    async def delete_by_clerk_id(self, clerk_id: str) -> bool:
        if self.fail_with is not None:
            raise self.fail_with
        existing = await self.get_by_clerk_id(clerk_id)
        if existing is None:
            return False
        del self.users[existing.id]
        return True


def _event(event_type: str, **data) -> dict:
    return {"type": event_type, "data": {"id": "user_1", **data}}


def _created(**data) -> dict:
    payload = {
        "email_addresses": [{"email_address": "jane@example.com"}],
        "first_name": "Jane",
        "last_name": "Doe",
    }
    payload.update(data)
    return _event("user.created", **payload)


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def service(repository: InMemoryUserRepository) -> UserSyncService:
    return UserSyncService(repository)


class TestSyncUser:
    @pytest.mark.asyncio
    async def test_created_inserts(self, service, repository):
        await service.handle_event(_created())

        (user,) = repository.users.values()
        assert user.clerk_id == "user_1"
        assert user.email == "jane@example.com"
        assert user.name == "Jane Doe"

    @pytest.mark.asyncio
    async def test_redelivery_updates_in_place(self, service, repository):
        await service.handle_event(_created())
        await service.handle_event(_created())
        await service.handle_event(
            _event(
                "user.updated",
                email_addresses=[{"email_address": "janet@example.com"}],
                first_name="Janet",
            )
        )

        (user,) = repository.users.values()
        assert user.name == "Janet"
        assert user.email == "janet@example.com"

    @pytest.mark.asyncio
    async def test_missing_email_raises(self, service, repository, caplog):
        with pytest.raises(UserSyncError) as exc_info:
            await service.sync_user(IdentityProviderUser(external_id="user_1"))

        assert exc_info.value.external_id == "user_1"
        assert repository.users == {}
        assert any(
            getattr(r, "extra", {}).get("event") == "webhook.user.sync.error"
            for r in caplog.records
        )

    @pytest.mark.asyncio
    async def test_storage_failure_is_reraised(self):
        service = UserSyncService(InMemoryUserRepository(fail_with=RuntimeError("db down")))

        with pytest.raises(RuntimeError, match="db down"):
            await service.handle_event(_created())

    @pytest.mark.asyncio
    async def test_payload_without_id_raises(self, service):
        with pytest.raises(UserSyncError):
            await service.handle_event({"type": "user.created", "data": {}})


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_deleted_removes_row(self, service, repository):
        await service.handle_event(_created())

        await service.handle_event(_event("user.deleted", deleted=True))

        assert repository.users == {}

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_an_error(self, service, caplog):
        assert await service.delete_user("user_missing") is False
        assert any(
            getattr(r, "extra", {}).get("event") == "webhook.user.delete.notfound"
            for r in caplog.records
        )

    @pytest.mark.asyncio
    async def test_failure_is_reraised(self):
        service = UserSyncService(InMemoryUserRepository(fail_with=RuntimeError("db down")))

        with pytest.raises(RuntimeError):
            await service.delete_user("user_1")


class TestUnhandledEvents:
    @pytest.mark.asyncio
    async def test_other_types_are_ignored(self, service, repository):
        await service.handle_event({"type": "session.created", "data": {"id": "sess_1"}})

        assert repository.users == {}
