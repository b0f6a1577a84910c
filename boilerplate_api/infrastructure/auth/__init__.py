"""Authentication infrastructure - Clerk JWT and webhook verification."""

from boilerplate_api.infrastructure.auth.clerk import ClerkAuth
from boilerplate_api.infrastructure.auth.context import (
    AuthContext,
    get_optional_auth,
    require_auth,
)
from boilerplate_api.infrastructure.auth.webhooks import ClerkWebhookVerifier

__all__ = [
    "AuthContext",
    "ClerkAuth",
    "ClerkWebhookVerifier",
    "get_optional_auth",
    "require_auth",
]
