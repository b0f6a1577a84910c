"""User sync service - mirrors Clerk users into the local users table."""

from typing import Any
from uuid import uuid4

from boilerplate_api.domain.entities import IdentityProviderUser, User
from boilerplate_api.domain.errors import UserSyncError
from boilerplate_api.domain.protocols import UserRepository
from boilerplate_api.infrastructure.telemetry.logging import ContextLogger, get_logger
from boilerplate_api.infrastructure.telemetry.metrics import record_user_operation


class UserSyncService:
    """Applies Clerk ``user.*`` webhook events to local storage.

    Every event is keyed by the Clerk user id, so redelivery of the same
    event converges on the same row instead of inserting duplicates.
    """

    def __init__(self, repository: UserRepository, logger: ContextLogger | None = None):
        self.repository = repository
        self.logger = logger or get_logger(__name__)

    async def handle_event(self, event: dict[str, Any]) -> None:
        """Dispatch a verified webhook event by its ``type``.

        Raises:
            UserSyncError: The event payload cannot be applied
        """
        event_type = event.get("type")
        data = event.get("data") or {}

        if event_type in ("user.created", "user.updated"):
            try:
                provider_user = IdentityProviderUser.from_payload(data)
            except ValueError as e:
                raise UserSyncError(
                    message="Webhook payload has no user id",
                    details={"type": event_type},
                ) from e
            await self.sync_user(provider_user)
        elif event_type == "user.deleted":
            external_id = data.get("id")
            if not external_id:
                raise UserSyncError(
                    message="Webhook payload has no user id",
                    details={"type": event_type},
                )
            await self.delete_user(external_id)
        else:
            self.logger.info(
                "Ignoring unhandled webhook event",
                extra={"event": "webhook.clerk.unhandled", "type": event_type},
            )

    async def sync_user(self, provider_user: IdentityProviderUser) -> User:
        """Create or update the local user linked to a Clerk user.

        Args:
            provider_user: User as described by the webhook payload

        Returns:
            The stored user

        Raises:
            UserSyncError: The Clerk user has no email address
        """
        external_id = provider_user.external_id
        email = provider_user.primary_email
        if not email:
            self.logger.error(
                "Clerk user has no email address",
                extra={"event": "webhook.user.sync.error", "clerk_id": external_id},
            )
            record_user_operation("sync", "error")
            raise UserSyncError(
                message="User has no email address",
                external_id=external_id,
                details={"clerk_id": external_id},
            )

        # display_name falls back to the email local part, so it is set here
        name = provider_user.display_name or email

        try:
            existing = await self.repository.get_by_clerk_id(external_id)
            if existing is not None:
                user = await self.repository.update_by_clerk_id(external_id, name=name, email=email)
                operation, event = "sync_update", "webhook.user.updated"
            else:
                user = await self.repository.create(
                    User(id=uuid4(), email=email, name=name, clerk_id=external_id)
                )
                operation, event = "sync_create", "webhook.user.created"
        except Exception as e:
            self.logger.error(
                "Failed to sync user",
                extra={
                    "event": "webhook.user.sync.error",
                    "clerk_id": external_id,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            record_user_operation("sync", "error")
            raise

        if user is None:
            # Row vanished between lookup and update
            record_user_operation("sync", "error")
            raise UserSyncError(
                message="User disappeared during sync",
                external_id=external_id,
                details={"clerk_id": external_id},
            )

        self.logger.info(
            "User synced from Clerk",
            extra={"event": event, "clerk_id": external_id, "user_id": str(user.id)},
        )
        record_user_operation(operation, "success")
        return user

    async def delete_user(self, external_id: str) -> bool:
        """Delete the local user linked to a Clerk user.

        Returns:
            False when no local user was linked, which is not an error
        """
        try:
            deleted = await self.repository.delete_by_clerk_id(external_id)
        except Exception as e:
            self.logger.error(
                "Failed to delete user",
                extra={
                    "event": "webhook.user.delete.error",
                    "clerk_id": external_id,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            record_user_operation("sync_delete", "error")
            raise

        if not deleted:
            self.logger.warning(
                "No local user linked to deleted Clerk user",
                extra={"event": "webhook.user.delete.notfound", "clerk_id": external_id},
            )
            record_user_operation("sync_delete", "not_found")
            return False

        self.logger.info(
            "User deleted via Clerk webhook",
            extra={"event": "webhook.user.deleted", "clerk_id": external_id},
        )
        record_user_operation("sync_delete", "success")
        return True
