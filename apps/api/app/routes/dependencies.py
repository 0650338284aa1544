"""Dependency wiring for routes."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.adapters.auth import AuthVerificationError, TokenVerifier
from app.adapters.backends import Backends
from app.core.config import Settings
from app.core.logging_safety import safe_log_identifier
from app.errors import ApiError, forbidden, unauthenticated
from app.schemas.auth import AuthPrincipal
from app.services.files import FileService
from app.services.items import ItemService
from app.services.users import UserService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-Id"


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id") or request.headers.get(REQUEST_ID_HEADER)
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_request_correlation_id(request: Request) -> str:
    return _request_correlation_id(request)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_backends(request: Request) -> Backends:
    return request.app.state.backends


def get_token_verifier(backends: Annotated[Backends, Depends(get_backends)]) -> TokenVerifier:
    return backends.token_verifier


def get_clock() -> Callable[[], datetime]:
    return lambda: datetime.now(UTC)


# Plain def: verification may block on the provider, so it runs in the threadpool.
def get_authenticated_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> AuthPrincipal:
    """Validate bearer token and attach normalized principal to request context."""
    correlation_id = _request_correlation_id(request)
    safe_correlation_id = safe_log_identifier(correlation_id, prefix="cid")
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials.strip():
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=invalid_or_missing_bearer",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise ApiError(unauthenticated("Unauthorized - Missing or invalid token format"))

    try:
        principal = verifier.verify_token(credentials.credentials.strip())
    except AuthVerificationError as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s reason=token_verification_failed",
            safe_correlation_id,
            request.method,
            request.url.path,
        )
        raise ApiError(unauthenticated("Unauthorized - Invalid token", str(exc) or "Invalid bearer token")) from exc

    safe_principal_id = safe_log_identifier(principal.user_id, prefix="pid")
    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s roles=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        safe_principal_id,
        ",".join(sorted(principal.roles)) or "-",
    )
    request.state.auth_principal = principal
    return principal


def require_roles(
    allowed_roles: set[str] | Callable[[Settings], set[str]],
) -> Callable[..., AuthPrincipal]:
    """Build a dependency that authenticates and then checks role membership.

    ``allowed_roles`` may be a fixed set or a function of the settings.
    """

    def dependency(
        request: Request,
        principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
        settings: Annotated[Settings, Depends(get_app_settings)],
    ) -> AuthPrincipal:
        roles = allowed_roles(settings) if callable(allowed_roles) else allowed_roles
        if not principal.has_any_role(roles):
            logger.warning(
                "auth.forbidden correlation_id=%s method=%s path=%s principal_id=%s",
                safe_log_identifier(_request_correlation_id(request), prefix="cid"),
                request.method,
                request.url.path,
                safe_log_identifier(principal.user_id, prefix="pid"),
            )
            raise ApiError(forbidden())
        return principal

    return dependency


require_admin = require_roles(lambda settings: settings.admin_roles)


def get_user_service(backends: Annotated[Backends, Depends(get_backends)]) -> UserService:
    return UserService(backends.users)


def get_item_service(
    backends: Annotated[Backends, Depends(get_backends)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ItemService:
    return ItemService(backends.documents, collection=settings.items_collection)


def get_file_service(
    backends: Annotated[Backends, Depends(get_backends)],
    clock: Annotated[Callable[[], datetime], Depends(get_clock)],
) -> FileService:
    return FileService(backends.objects, clock)
