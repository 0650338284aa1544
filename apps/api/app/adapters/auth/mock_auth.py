"""Mock auth verifier for local development and tests."""

from app.adapters.auth.base import AuthVerificationError, TokenVerifier, principal_from_claims
from app.schemas.auth import AuthPrincipal


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>``
    - ``test:<user_id>:<role>[,<role>...]``
    """

    def __init__(self) -> None:
        self.verified_tokens: list[str] = []

    def verify_token(self, token: str) -> AuthPrincipal:
        self.verified_tokens.append(token)
        parts = token.split(":")
        if len(parts) not in (2, 3) or parts[0] != "test":
            raise AuthVerificationError("Invalid bearer token")

        roles: list[str] = []
        if len(parts) == 3:
            roles = [role.strip() for role in parts[2].split(",") if role.strip()]
            if not roles:
                raise AuthVerificationError("Bearer token missing role")

        return principal_from_claims(parts[1], {"uid": parts[1], "roles": roles})


__all__ = ["MockTokenVerifier"]
