"""Pydantic schemas for user endpoints.

Bodies use camelCase on the wire (``firstName``, ``confirmPassword``, ...).
Request fields are optional so that missing values reach the services,
which answer with the specific messages the client expects.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    age: int | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = None


class RegisterResponse(CamelModel):
    user_id: str


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class LoginResponse(CamelModel):
    token: str


class UserProfileResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    first_name: str
    last_name: str
    age: int
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UpdateUserRequest(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    age: int | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = None

    def profile_changes(self) -> dict:
        """Profile fields that were sent, keyed by model column name."""
        return self.model_dump(exclude_unset=True, exclude_none=True, exclude={"password", "confirm_password"})


class PasswordResetRequest(CamelModel):
    email: str | None = None


class ResetPasswordRequest(CamelModel):
    token: str | None = None
    password: str | None = None
    confirm_password: str | None = None


class MessageResponse(BaseModel):
    message: str
