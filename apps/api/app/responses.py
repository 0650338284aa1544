"""Single rendering step from service results to HTTP responses."""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.domain.result import Err, Result
from app.errors import Failure
from app.schemas.error import ErrorResponse


def render_failure(failure: Failure) -> JSONResponse:
    payload = ErrorResponse(error=failure.error, details=failure.details)
    return JSONResponse(
        status_code=failure.status_code,
        content=payload.model_dump(mode="json", exclude_none=True),
    )


def render(result: Result[Any]) -> JSONResponse:
    """Render ``Ok`` as the bare payload and ``Err`` as ``{error, details?}``."""
    if isinstance(result, Err):
        return render_failure(result.failure)

    value = result.value
    if isinstance(value, BaseModel):
        content = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    else:
        content = value
    return JSONResponse(status_code=result.status_code, content=content)


__all__ = ["render", "render_failure"]
