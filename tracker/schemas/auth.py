"""Auth Schemas: login credentials and the login response.

Invariants:
    - Credentials.email and password are non-empty, email is stripped
    - LoginResult.token may be absent; an absent token is a failed login
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tracker.core.domain_types import EntityId


class Credentials(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("email cannot be empty or whitespace")
        return v


class LoginResult(BaseModel):
    """Login response. Server sends camelCase userId."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    token: str | None = None
    user_id: EntityId | None = Field(default=None, alias="userId")

    @property
    def has_token(self) -> bool:
        return bool(self.token)
