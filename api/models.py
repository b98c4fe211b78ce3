"""
API request and response models for the ClientDesk REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
crm/models.py, which own the internal domain representation. Route handlers
map between the two.

Timestamps are serialized in camelCase (createdAt/updatedAt) to keep the JSON
shape that existing API consumers expect.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from auth.models import User
from auth.tokens import MAX_PASSWORD_BYTES
from crm.models import Client

# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class Credentials(BaseModel):
    """Request body for POST /register and POST /login."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        """bcrypt ignores input past 72 bytes; reject rather than truncate."""
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class UserResponse(BaseModel):
    """Public view of a user. The password hash is never serialized."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    username: str
    created_at: str
    updated_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, username=user.username, created_at=user.created_at, updated_at=user.updated_at)


class RegisterResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    token: str


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


class ClientWrite(BaseModel):
    """Request body for POST /clients and PUT /clients/{client_id}.

    PUT is a full replacement: every field is written, so an omitted phone
    clears the stored value. Values are stored exactly as sent.
    """

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)


class ClientResponse(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    email: str
    phone: Optional[str]
    created_at: str
    updated_at: str

    @classmethod
    def from_client(cls, client: Client) -> "ClientResponse":
        """Build a ClientResponse from a crm Client dataclass."""
        return cls(
            id=client.id,
            name=client.name,
            email=client.email,
            phone=client.phone,
            created_at=client.created_at,
            updated_at=client.updated_at,
        )


class ClientMutationResponse(BaseModel):
    """Response for POST /clients and PUT /clients/{client_id}."""

    model_config = ConfigDict(frozen=True)

    message: str
    client: ClientResponse
