"""FastAPI application entrypoint.

Run with ``uvicorn app.main:create_app --factory``.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse

from app.adapters.backends import Backends, build_backends
from app.core.config import Settings, get_settings
from app.errors import ApiError, internal, validation_failed
from app.responses import render_failure
from app.routes import auth_router, items_router, storage_router, system_router
from app.routes.dependencies import REQUEST_ID_HEADER, get_request_correlation_id
from app.validation import field_errors

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

_OPENAPI_RESPONSE_CODES: dict[str, dict[str, set[str]]] = {
    "/api/auth/users": {"post": {"201", "400", "500"}},
    "/api/auth/me": {
        "get": {"200", "401", "404", "500"},
        "patch": {"200", "400", "401", "404", "500"},
    },
    "/api/auth/users/{uid}": {
        "get": {"200", "401", "403", "404", "500"},
        "patch": {"200", "400", "401", "403", "404", "500"},
        "delete": {"200", "401", "403", "404", "500"},
    },
    "/api/items": {"get": {"200", "401", "500"}, "post": {"201", "400", "401", "500"}},
    "/api/items/{itemId}": {
        "get": {"200", "401", "404", "500"},
        "put": {"200", "400", "401", "404", "500"},
        "delete": {"200", "401", "404", "500"},
    },
    "/api/storage/upload-url": {"post": {"200", "400", "401", "500"}},
    "/api/storage/files": {"get": {"200", "400", "401", "500"}},
    "/api/storage/files/{filename}": {"delete": {"200", "400", "401", "404", "500"}},
    "/api/storage/download-url/{file_path}": {"get": {"200", "401", "404", "500"}},
}


def _apply_contract_response_codes(schema: dict) -> None:
    """Limit documented response codes to the API contract."""
    for path, methods in _OPENAPI_RESPONSE_CODES.items():
        path_item = schema.get("paths", {}).get(path)
        if not path_item:
            continue

        for method, allowed_codes in methods.items():
            operation = path_item.get(method)
            if not operation:
                continue

            responses = operation.setdefault("responses", {})
            for status_code in list(responses.keys()):
                if status_code not in allowed_codes:
                    responses.pop(status_code, None)

            for status_code in sorted(allowed_codes):
                responses.setdefault(status_code, {"description": "See API contract"})


def create_app(settings: Settings | None = None, backends: Backends | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Starter Kit API", version=API_VERSION)
    app.state.settings = settings
    app.state.backends = backends or build_backends(settings)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        correlation_id = get_request_correlation_id(request)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("request.failed method=%s path=%s", request.method, request.url.path)
            response = render_failure(internal("Internal server error", exc))
        response.headers[REQUEST_ID_HEADER] = correlation_id
        logger.info(
            "request.completed method=%s path=%s status=%s duration_ms=%.1f",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    # Outermost, so responses rendered by the request logger get CORS headers too.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["Content-Length", REQUEST_ID_HEADER],
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return render_failure(exc.failure)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_, exc: RequestValidationError) -> JSONResponse:
        return render_failure(validation_failed(field_errors(exc.errors())))

    @app.get("/", include_in_schema=False)
    async def welcome() -> dict:
        return {"message": "Welcome to the Starter Kit API", "version": API_VERSION}

    api_prefix = "/api"
    app.include_router(system_router, prefix=api_prefix)
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(items_router, prefix=api_prefix)
    app.include_router(storage_router, prefix=api_prefix)

    def custom_openapi() -> dict:
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        _apply_contract_response_codes(schema)
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi

    return app
