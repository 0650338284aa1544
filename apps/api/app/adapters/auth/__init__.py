"""Auth verifier adapters."""

from .base import AuthVerificationError, TokenVerifier, principal_from_claims
from .firebase_auth import FirebaseTokenVerifier
from .mock_auth import MockTokenVerifier

__all__ = [
    "AuthVerificationError",
    "TokenVerifier",
    "FirebaseTokenVerifier",
    "MockTokenVerifier",
    "principal_from_claims",
]
