"""Authentication schemas for JWT tokens and user context."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UserContext(BaseModel):
    """Authenticated caller for the current request.

    Identity comes from the bearer token; role comes from the user
    directory.
    """

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID = Field(description="Unique identifier for the user (from JWT sub claim)")
    email: str | None = Field(default=None, description="User's email address if available")
    role: str | None = Field(default=None, description="User's role (e.g., 'user', 'admin')")

    @property
    def is_admin(self) -> bool:
        """Check if the caller is an admin."""
        return self.role == "admin"


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Represents the claims contained in an issued access token.
    """

    model_config = ConfigDict(from_attributes=True)

    sub: str = Field(description="Subject - the user's UUID")
    email: str | None = Field(default=None, description="User's email address")
    exp: int = Field(description="Expiration timestamp (Unix epoch)")
    iat: int = Field(description="Issued at timestamp (Unix epoch)")

    def to_user_context(self, role: str | None = None) -> UserContext:
        """Convert token payload to UserContext.

        Args:
            role: Role resolved from the user directory.

        Returns:
            UserContext: User context derived from token claims.
        """
        return UserContext(
            user_id=UUID(self.sub),
            email=self.email,
            role=role,
        )
