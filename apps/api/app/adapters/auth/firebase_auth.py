"""Firebase Auth token verifier adapter."""

from __future__ import annotations

from firebase_admin import auth as firebase_auth

from app.adapters.auth.base import AuthVerificationError, TokenVerifier, principal_from_claims
from app.schemas.auth import AuthPrincipal

_REJECTED_TOKEN_ERRORS = (
    firebase_auth.InvalidIdTokenError,
    firebase_auth.UserDisabledError,
    firebase_auth.UserNotFoundError,
    ValueError,
)


class FirebaseTokenVerifier(TokenVerifier):
    """Verifies Firebase ID tokens and normalizes principal data.

    Revoked, expired and tampered tokens surface the provider's message as the
    rejection reason, as do tokens of accounts deleted since issuance (seen by
    the revocation lookup). Certificate fetch failures are not token rejections
    and propagate to the caller.
    """

    def __init__(
        self,
        client: firebase_auth.Client,
        *,
        project_id: str | None = None,
        audience: str | None = None,
        check_revoked: bool = True,
    ) -> None:
        self._client = client
        self._project_id = project_id
        self._audience = audience
        self._check_revoked = check_revoked

    def verify_token(self, token: str) -> AuthPrincipal:
        try:
            decoded = self._client.verify_id_token(token, check_revoked=self._check_revoked)
        except _REJECTED_TOKEN_ERRORS as exc:
            raise AuthVerificationError(str(exc) or "Invalid bearer token") from exc

        if self._audience and decoded.get("aud") != self._audience:
            raise AuthVerificationError("Invalid bearer token audience")

        if self._project_id:
            issuer = str(decoded.get("iss", ""))
            audience = str(decoded.get("aud", ""))
            if self._project_id not in issuer and audience != self._project_id:
                raise AuthVerificationError("Invalid bearer token issuer")

        return principal_from_claims(decoded.get("uid") or decoded.get("sub"), decoded)


__all__ = ["FirebaseTokenVerifier"]
