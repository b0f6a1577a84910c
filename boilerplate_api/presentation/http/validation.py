"""Request and response validation against pydantic contracts.

A ``RequestValidator`` is declared once per route and used twice: as the
route's dependency, which checks path params, then query, then body, and
after the handler ran, through ``respond`` to check the outgoing payload.
"""

import json
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from boilerplate_api.domain.errors import ResponseSchemaError, ValidationError
from boilerplate_api.infrastructure.middleware.error_handler import format_validation_errors


class ApiModel(BaseModel):
    """Base for contract models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


@dataclass
class ValidatedRequest:
    """Parsed request parts; a part is None when the route declares no schema for it."""

    params: Any = None
    query: Any = None
    body: Any = None


class RequestValidator:
    """FastAPI dependency validating a request, plus the matching response check."""

    def __init__(
        self,
        params: type[BaseModel] | None = None,
        query: type[BaseModel] | None = None,
        body: type[BaseModel] | None = None,
        response: Any = None,
    ):
        self.params = params
        self.query = query
        self.body = body
        self.response = response
        self._response_adapter: TypeAdapter[Any] | None = (
            TypeAdapter(response) if response is not None else None
        )

    async def __call__(self, request: Request) -> ValidatedRequest:
        validated = ValidatedRequest()

        if self.params is not None:
            validated.params = self._validate("params", self.params, dict(request.path_params))

        if self.query is not None:
            validated.query = self._validate("query", self.query, dict(request.query_params))

        if self.body is not None:
            raw = await request.body()
            try:
                data = json.loads(raw) if raw else None
            except ValueError as e:
                raise ValidationError(
                    details={
                        "location": "body",
                        "errors": [{"loc": [], "msg": "Body is not valid JSON", "type": "json_invalid"}],
                    },
                ) from e
            validated.body = self._validate("body", self.body, data)

        return validated

    @staticmethod
    def _validate(location: str, model: type[BaseModel], data: Any) -> BaseModel:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(
                details={"location": location, "errors": format_validation_errors(e.errors())},
            ) from e

    def respond(self, payload: Any, status_code: int = 200) -> JSONResponse:
        """Validate ``payload`` against the response contract and serialize it.

        Raises:
            ResponseSchemaError: The payload does not satisfy the contract
        """
        if self._response_adapter is None:
            return JSONResponse(content=payload, status_code=status_code)

        try:
            validated = self._response_adapter.validate_python(payload, from_attributes=True)
        except PydanticValidationError as e:
            raise ResponseSchemaError(
                details={"errors": format_validation_errors(e.errors())},
            ) from e

        content = self._response_adapter.dump_python(validated, mode="json", by_alias=True)
        return JSONResponse(content=content, status_code=status_code)
