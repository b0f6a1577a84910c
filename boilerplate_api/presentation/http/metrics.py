"""Prometheus scrape endpoint."""

import base64
import binascii
import secrets

from fastapi import APIRouter, Request, Response
from fastapi.security.utils import get_authorization_scheme_param
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from boilerplate_api.config import Settings

router = APIRouter()


def _basic_credentials(authorization: str | None) -> tuple[str, str] | None:
    """Decode a ``Basic`` Authorization header, or None when it is not one."""
    scheme, param = get_authorization_scheme_param(authorization)
    if scheme.lower() != "basic":
        return None
    try:
        decoded = base64.b64decode(param, validate=True).decode()
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return username, password


def _credentials_match(credentials: tuple[str, str] | None, settings: Settings) -> bool:
    if credentials is None:
        return False
    username, password = credentials
    # Evaluate both comparisons so timing does not reveal which one failed
    username_ok = secrets.compare_digest(username.encode(), settings.metrics_username.encode())
    password_ok = secrets.compare_digest(password.encode(), settings.metrics_password.encode())
    return username_ok and password_ok


@router.get("/metrics", include_in_schema=False)
async def metrics(request: Request) -> Response:
    """Expose metrics in Prometheus text format.

    Protected by HTTP Basic auth when metrics credentials are configured;
    otherwise the Authorization header is not looked at.
    """
    settings: Settings = request.app.state.settings
    if settings.metrics_auth_enabled:
        credentials = _basic_credentials(request.headers.get("Authorization"))
        if not _credentials_match(credentials, settings):
            return Response(
                content="Unauthorized",
                status_code=401,
                headers={"WWW-Authenticate": 'Basic realm="Metrics"'},
            )

    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
