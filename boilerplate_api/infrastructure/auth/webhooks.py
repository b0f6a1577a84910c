"""Signature verification for Clerk webhooks (delivered through Svix)."""

import json
from collections.abc import Mapping
from typing import Any

from svix.webhooks import Webhook, WebhookVerificationError

from boilerplate_api.domain.errors import (
    ConfigurationError,
    WebhookHeadersMissingError,
    WebhookVerificationFailedError,
)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


class ClerkWebhookVerifier:
    """Checks the Svix signature headers against the shared webhook secret."""

    def __init__(self, secret: str):
        self.secret = secret

    def verify(self, payload: bytes, headers: Mapping[str, str]) -> dict[str, Any]:
        """Verify a delivery and return its decoded JSON body.

        Raises:
            WebhookHeadersMissingError: A signature header is absent
            WebhookVerificationFailedError: Signature, timestamp or body is invalid
            ConfigurationError: No webhook secret is configured
        """
        svix_headers = {name: headers.get(name) for name in SVIX_HEADERS}
        if not all(svix_headers.values()):
            raise WebhookHeadersMissingError(
                details={"headers": {name: bool(value) for name, value in svix_headers.items()}},
            )

        if not self.secret:
            raise ConfigurationError(
                message="CLERK_WEBHOOK_SECRET is not configured",
                setting="CLERK_WEBHOOK_SECRET",
            )

        try:
            # Only the signature is checked here, the body is decoded below
            Webhook(self.secret).verify(payload, svix_headers)
        except (WebhookVerificationError, ValueError) as e:
            raise WebhookVerificationFailedError(details={"error": str(e)}) from e

        try:
            event = json.loads(payload)
        except ValueError as e:
            raise WebhookVerificationFailedError(details={"error": "Payload is not valid JSON"}) from e

        if not isinstance(event, dict):
            raise WebhookVerificationFailedError(details={"error": "Payload is not a JSON object"})
        return event
