"""Clerk webhook endpoint."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from boilerplate_api.application.services.user_sync_service import UserSyncService
from boilerplate_api.domain.errors import ValidationError
from boilerplate_api.infrastructure.auth import ClerkWebhookVerifier
from boilerplate_api.infrastructure.database import get_db
from boilerplate_api.infrastructure.middleware import RequestContext, get_request_context
from boilerplate_api.infrastructure.repositories import UserRepositoryImpl

router = APIRouter(prefix="/webhook")


def get_webhook_verifier(request: Request) -> ClerkWebhookVerifier:
    """FastAPI dependency returning the application's webhook verifier."""
    return request.app.state.webhook_verifier


@router.post("/clerk")
async def clerk_webhook(
    request: Request,
    verifier: ClerkWebhookVerifier = Depends(get_webhook_verifier),
    db: AsyncSession = Depends(get_db, scope="function"),
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    """Receive a Clerk user event and mirror it into the users table.

    The signature is computed over the raw body, so it is read unparsed.
    """
    logger = context.logger(__name__)

    payload = await request.body()
    event = verifier.verify(payload, request.headers)

    event_type = event.get("type")
    if not isinstance(event_type, str) or not isinstance(event.get("data"), dict):
        raise ValidationError(
            message="Malformed webhook event",
            details={"type": event_type},
        )

    logger.info(
        "Clerk webhook received",
        extra={"event": "webhook.clerk.received", "type": event_type},
    )

    service = UserSyncService(UserRepositoryImpl(db), logger)
    try:
        await service.handle_event(event)
        # A delivery is acknowledged only once its write is durable
        await db.commit()
    except Exception as e:
        # Nothing from a failed delivery may be committed
        await db.rollback()
        logger.error(
            "Failed to process Clerk webhook",
            extra={
                "event": "webhook.clerk.error",
                "type": event_type,
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
        return JSONResponse(status_code=500, content={"error": "Failed to process webhook"})

    return JSONResponse(content={"success": True})
