"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PrincipalClaims(BaseModel):
    """Verified token claims.

    ``roles`` is validated once when the token is verified so role checks never
    have to guess its shape. Claims the provider adds beyond these are kept
    verbatim as extra attributes.
    """

    roles: frozenset[str] = frozenset()
    email: str | None = None
    email_verified: bool | None = None

    model_config = ConfigDict(extra="allow", frozen=True)


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal used by business services."""

    user_id: str = Field(min_length=1)
    claims: PrincipalClaims = Field(default_factory=PrincipalClaims)

    model_config = ConfigDict(frozen=True)

    @property
    def roles(self) -> frozenset[str]:
        return self.claims.roles

    def has_any_role(self, allowed_roles: set[str] | frozenset[str]) -> bool:
        return not self.claims.roles.isdisjoint(allowed_roles)
