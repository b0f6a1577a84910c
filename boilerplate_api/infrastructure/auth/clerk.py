"""Clerk session token verification."""

import asyncio
from typing import Any

import jwt
from jwt import PyJWKClient

from boilerplate_api.config import Settings
from boilerplate_api.domain.errors import TokenExpiredError, TokenInvalidError
from boilerplate_api.infrastructure.telemetry.logging import get_logger
from boilerplate_api.infrastructure.telemetry.metrics import track_external_api_call

logger = get_logger(__name__)

# Clock skew tolerated on exp/nbf/iat, in seconds
CLOCK_SKEW_LEEWAY = 5


class ClerkAuth:
    """Clerk authentication handler for session JWT verification.

    Tokens are checked against ``CLERK_JWT_KEY`` when configured, otherwise
    against the public keys published at the issuer's JWKS endpoint.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.issuer = settings.clerk_issuer.rstrip("/") or None
        self.jwt_key = settings.clerk_jwt_key or None
        self.authorized_parties = settings.clerk_authorized_parties
        self.algorithm = "RS256"

        # JWKS client for fetching public keys
        self._jwks_client: PyJWKClient | None = None

    @property
    def jwks_client(self) -> PyJWKClient:
        """Get or create JWKS client."""
        if self._jwks_client is None:
            if not self.issuer:
                raise TokenInvalidError(
                    message="Token verification is not configured",
                    details={"missing": ["CLERK_JWT_KEY", "CLERK_ISSUER"]},
                )
            self._jwks_client = PyJWKClient(f"{self.issuer}/.well-known/jwks.json")
        return self._jwks_client

    async def _signing_key(self, token: str) -> Any:
        if self.jwt_key:
            return self.jwt_key

        # PyJWKClient fetches keys over blocking HTTP; keep it off the event loop
        with track_external_api_call("clerk", "jwks"):
            signing_key = await asyncio.to_thread(
                self.jwks_client.get_signing_key_from_jwt, token
            )
        return signing_key.key

    async def verify_token(self, token: str) -> dict[str, Any]:
        """Verify a Clerk session token.

        Args:
            token: The JWT token string

        Returns:
            Decoded token claims

        Raises:
            TokenExpiredError: If token is expired
            TokenInvalidError: If token is invalid
        """
        try:
            key = await self._signing_key(token)

            claims = jwt.decode(
                token,
                key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                leeway=CLOCK_SKEW_LEEWAY,
                options={
                    "verify_signature": True,
                    "verify_exp": True,
                    "verify_nbf": True,
                    "verify_iss": self.issuer is not None,
                    "verify_aud": False,  # Clerk session tokens carry azp, not aud
                    "require": ["exp", "sub"],
                },
            )

        except jwt.ExpiredSignatureError as e:
            logger.warning("Token expired", extra={"event": "auth.token.expired", "error": str(e)})
            raise TokenExpiredError(
                message="Token has expired",
                details={"error": str(e)},
            ) from e

        except jwt.InvalidIssuerError as e:
            logger.warning("Invalid token issuer", extra={"event": "auth.token.invalid", "error": str(e)})
            raise TokenInvalidError(
                message="Invalid token issuer",
                details={"error": str(e)},
            ) from e

        except jwt.InvalidSignatureError as e:
            logger.warning("Invalid token signature", extra={"event": "auth.token.invalid", "error": str(e)})
            raise TokenInvalidError(
                message="Invalid token signature",
                details={"error": str(e)},
            ) from e

        except jwt.DecodeError as e:
            logger.warning("Token decode error", extra={"event": "auth.token.invalid", "error": str(e)})
            raise TokenInvalidError(
                message="Invalid token format",
                details={"error": str(e)},
            ) from e

        except jwt.InvalidTokenError as e:
            logger.warning("Token rejected", extra={"event": "auth.token.invalid", "error": str(e)})
            raise TokenInvalidError(
                message="Invalid token",
                details={"error": str(e)},
            ) from e

        except TokenInvalidError:
            raise

        except Exception as e:
            logger.error(
                "Unexpected token verification error",
                extra={"event": "auth.token.error", "error": str(e)},
            )
            raise TokenInvalidError(
                message="Token verification failed",
                details={"error": str(e)},
            ) from e

        azp = claims.get("azp")
        if self.authorized_parties and azp not in self.authorized_parties:
            logger.warning(
                "Token issued for an unauthorized party",
                extra={"event": "auth.token.invalid", "azp": azp},
            )
            raise TokenInvalidError(
                message="Invalid token authorized party",
                details={"azp": azp},
            )

        logger.debug(
            "Token verified successfully",
            extra={"event": "auth.token.verified", "sub": claims.get("sub"), "sid": claims.get("sid")},
        )

        return claims
