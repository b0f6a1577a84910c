"""User management endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID, uuid4

from email_validator import EmailNotValidError, validate_email
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import AfterValidator, Field
from sqlalchemy.ext.asyncio import AsyncSession

from boilerplate_api.domain.entities import User
from boilerplate_api.domain.errors import UserNotFoundError
from boilerplate_api.infrastructure.database import get_db
from boilerplate_api.infrastructure.middleware import RequestContext, get_request_context
from boilerplate_api.infrastructure.repositories import MAX_PAGE_SIZE, UserRepositoryImpl
from boilerplate_api.infrastructure.telemetry.metrics import record_user_operation
from boilerplate_api.presentation.http.validation import (
    ApiModel,
    RequestValidator,
    ValidatedRequest,
)

router = APIRouter(prefix="/web/users")


def _check_email(value: str) -> str:
    """Reject invalid addresses but keep the submitted spelling."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return value


Email = Annotated[str, AfterValidator(_check_email)]


# Request/Response models
class UserParams(ApiModel):
    id: UUID


class UserListQuery(ApiModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=MAX_PAGE_SIZE)
    search: str | None = None


class CreateUserRequest(ApiModel):
    """Request to create a user."""

    name: str = Field(..., min_length=1, max_length=255)
    email: Email


class UpdateUserRequest(ApiModel):
    """Request to update a user; omitted fields keep their value."""

    name: str | None = Field(None, min_length=1, max_length=255)
    email: Email | None = None


class UserResponse(ApiModel):
    """User response."""

    id: UUID
    name: str = Field(..., min_length=1)
    email: str
    created_at: datetime
    updated_at: datetime


class UserListResponse(ApiModel):
    users: list[UserResponse]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)


list_users_contract = RequestValidator(query=UserListQuery, response=UserListResponse)
create_user_contract = RequestValidator(body=CreateUserRequest, response=UserResponse)
get_user_contract = RequestValidator(params=UserParams, response=UserResponse)
update_user_contract = RequestValidator(
    params=UserParams, body=UpdateUserRequest, response=UserResponse
)
delete_user_contract = RequestValidator(params=UserParams)


# Endpoints
@router.get("")
async def list_users(
    validated: ValidatedRequest = Depends(list_users_contract),
    db: AsyncSession = Depends(get_db, scope="function"),
) -> JSONResponse:
    """List users, newest first, optionally filtered by name or email."""
    query: UserListQuery = validated.query
    page = await UserRepositoryImpl(db).list(
        page=query.page,
        page_size=query.page_size,
        search=query.search or None,
    )
    record_user_operation("list", "success")

    return list_users_contract.respond(
        {
            "users": page.users,
            "total": page.total,
            "page": query.page,
            "page_size": query.page_size,
        }
    )


@router.post("", status_code=201)
async def create_user(
    validated: ValidatedRequest = Depends(create_user_contract),
    db: AsyncSession = Depends(get_db, scope="function"),
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    """Create a new user."""
    body: CreateUserRequest = validated.body
    user = await UserRepositoryImpl(db).create(
        User(id=uuid4(), email=body.email, name=body.name)
    )
    record_user_operation("create", "success")

    context.logger(__name__).info(
        "User created",
        extra={"event": "user.created", "target_user_id": str(user.id)},
    )

    return create_user_contract.respond(user, status_code=201)


@router.get("/{id}")
async def get_user(
    validated: ValidatedRequest = Depends(get_user_contract),
    db: AsyncSession = Depends(get_db, scope="function"),
) -> JSONResponse:
    """Get a user by ID."""
    user_id: UUID = validated.params.id
    user = await UserRepositoryImpl(db).get_by_id(user_id)
    if user is None:
        record_user_operation("get", "not_found")
        raise UserNotFoundError(details={"id": str(user_id)})

    record_user_operation("get", "success")
    return get_user_contract.respond(user)


@router.patch("/{id}")
async def update_user(
    validated: ValidatedRequest = Depends(update_user_contract),
    db: AsyncSession = Depends(get_db, scope="function"),
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    """Update a user's name and/or email."""
    user_id: UUID = validated.params.id
    body: UpdateUserRequest = validated.body
    user = await UserRepositoryImpl(db).update_fields(
        user_id, name=body.name, email=body.email
    )
    if user is None:
        record_user_operation("update", "not_found")
        raise UserNotFoundError(details={"id": str(user_id)})

    record_user_operation("update", "success")
    context.logger(__name__).info(
        "User updated",
        extra={"event": "user.updated", "target_user_id": str(user_id)},
    )

    return update_user_contract.respond(user)


@router.delete("/{id}", status_code=204)
async def delete_user(
    validated: ValidatedRequest = Depends(delete_user_contract),
    db: AsyncSession = Depends(get_db, scope="function"),
    context: RequestContext = Depends(get_request_context),
) -> Response:
    """Delete a user."""
    user_id: UUID = validated.params.id
    deleted = await UserRepositoryImpl(db).delete(user_id)
    if not deleted:
        record_user_operation("delete", "not_found")
        raise UserNotFoundError(details={"id": str(user_id)})

    record_user_operation("delete", "success")
    context.logger(__name__).info(
        "User deleted",
        extra={"event": "user.deleted", "target_user_id": str(user_id)},
    )

    return Response(status_code=204)
