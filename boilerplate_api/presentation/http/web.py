"""Web client endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from boilerplate_api.infrastructure.auth import AuthContext, require_auth
from boilerplate_api.infrastructure.database import get_db
from boilerplate_api.infrastructure.repositories import UserRepositoryImpl
from boilerplate_api.presentation.http.users import UserResponse
from boilerplate_api.presentation.http.validation import ApiModel, RequestValidator

router = APIRouter(prefix="/web")


class MeResponse(ApiModel):
    """The authenticated session and its linked local user, if any."""

    user_id: str
    session_id: str
    user: UserResponse | None


me_contract = RequestValidator(response=MeResponse)


@router.get("", response_class=PlainTextResponse)
async def hello() -> str:
    return "Hello World"


@router.get("/me")
async def me(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db, scope="function"),
) -> JSONResponse:
    """Return the caller's identity."""
    user = await UserRepositoryImpl(db).get_by_clerk_id(auth.clerk_id)

    return me_contract.respond(
        {"user_id": auth.user_id, "session_id": auth.session_id, "user": user}
    )
