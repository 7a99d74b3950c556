"""
API request and response models for the employee directory REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py and
directory/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models accept missing fields (None) on purpose: "field is required"
is a domain rule owned by the issuer and the CRUD service, which report it
as a 400 with a readable message. Pydantic still rejects wrong types.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from auth.models import IssuedToken, User
from directory.models import Employee

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /users/register."""

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request body for POST /users/login."""

    email: Optional[str] = None
    password: Optional[str] = None


class EmployeeFields(BaseModel):
    """Request body for POST /employees and PUT /employees/{id}."""

    name: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    phone_number: Optional[str] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, username=user.username, email=user.email)


class AuthResponse(UserResponse):
    """Response for register and login: the identity plus its bearer token."""

    token: str

    @classmethod
    def from_issued(cls, issued: IssuedToken) -> "AuthResponse":
        user = issued.user
        return cls(id=user.id, username=user.username, email=user.email, token=issued.token)


class EmployeeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    company: str
    city: str
    phone_number: str

    @classmethod
    def from_employee(cls, employee: Employee) -> "EmployeeResponse":
        return cls(**employee.to_dict())


class MessageResponse(BaseModel):
    """Confirmation body, e.g. for DELETE /employees/{id}."""

    model_config = ConfigDict(frozen=True)

    message: str


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    message: str


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    components: dict[str, str]
