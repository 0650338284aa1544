"""Authentication provider interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from app.schemas.auth import AuthPrincipal, PrincipalClaims


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""


class TokenVerifier(ABC):
    """Provider-neutral token verification interface."""

    @abstractmethod
    def verify_token(self, token: str) -> AuthPrincipal:
        """Verify token and return normalized principal."""


def principal_from_claims(user_id: str, claims: Mapping[str, Any]) -> AuthPrincipal:
    """Build a principal from verified claims, rejecting malformed role claims."""
    user_id = str(user_id or "").strip()
    if not user_id:
        raise AuthVerificationError("Bearer token missing user identity")

    roles = claims.get("roles")
    if roles is None:
        roles = []
    if not isinstance(roles, list | tuple | set | frozenset) or not all(isinstance(role, str) for role in roles):
        raise AuthVerificationError("Bearer token roles claim must be a list of strings")

    try:
        normalized = PrincipalClaims.model_validate({**claims, "roles": frozenset(roles)})
    except ValidationError as exc:
        raise AuthVerificationError("Bearer token claims are malformed") from exc
    return AuthPrincipal(user_id=user_id, claims=normalized)


__all__ = ["AuthVerificationError", "TokenVerifier", "principal_from_claims"]
