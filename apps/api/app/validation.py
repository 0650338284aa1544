"""Request payload validation.

Payloads are validated against pydantic models. Every field violation is
collected (pydantic does not stop at the first failing field) and reported as
a field-keyed mapping so callers can fix everything in one round trip.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine, Iterable, Mapping
from typing import Any, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from app.domain.result import Err, Ok, Result
from app.errors import ApiError, validation_failed

ModelT = TypeVar("ModelT", bound=BaseModel)

ROOT_ERROR_KEY = "_errors"
_TRANSPORT_LOCATIONS = frozenset({"body", "query", "path", "header", "cookie"})


def field_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Group pydantic-style error entries by dotted field location."""
    grouped: dict[str, list[str]] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _TRANSPORT_LOCATIONS:
            loc = loc[1:]
        key = ".".join(loc) or ROOT_ERROR_KEY
        grouped.setdefault(key, []).append(str(error.get("msg", "Invalid value")))
    return grouped


def validate_payload(raw: Any, schema: type[ModelT]) -> Result[ModelT]:
    """Validate ``raw`` against ``schema``, applying declared defaults on success."""
    try:
        return Ok(schema.model_validate(raw))
    except ValidationError as exc:
        return Err(validation_failed(field_errors(exc.errors(include_url=False))))


def _unwrap(result: Result[ModelT]) -> ModelT:
    if isinstance(result, Err):
        raise ApiError(result.failure)
    return result.value


def validated_body(schema: type[ModelT]) -> Callable[[Request], Coroutine[Any, Any, ModelT]]:
    """Build a dependency that parses and validates the JSON request body.

    Handlers place this dependency before or after the auth dependency to pick
    their own validation/authorization order.
    """

    async def dependency(request: Request) -> ModelT:
        try:
            raw = await request.json()
        except ValueError:
            raise ApiError(validation_failed({ROOT_ERROR_KEY: ["Request body must be valid JSON"]})) from None
        return _unwrap(validate_payload(raw, schema))

    return dependency


def validated_query(schema: type[ModelT]) -> Callable[[Request], Coroutine[Any, Any, ModelT]]:
    """Build a dependency that validates the query string against ``schema``."""

    async def dependency(request: Request) -> ModelT:
        return _unwrap(validate_payload(dict(request.query_params), schema))

    return dependency


def request_body_openapi(schema: type[BaseModel]) -> dict[str, Any]:
    """OpenAPI ``requestBody`` fragment for handlers that parse the body themselves."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema.model_json_schema(by_alias=True)}},
        }
    }


__all__ = [
    "ROOT_ERROR_KEY",
    "field_errors",
    "request_body_openapi",
    "validate_payload",
    "validated_body",
    "validated_query",
]
