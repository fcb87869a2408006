from __future__ import annotations

import uuid
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class PublicProfile(BaseModel):
    """The only user shape that ever leaves the service."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    name: str
    image: str | None = None
    is_email_verified: bool


class GoogleAuthData(BaseModel):
    user: PublicProfile
    is_new_user: bool


class RegisterData(BaseModel):
    user_id: uuid.UUID
    email_sent: bool


class VerifyEmailData(BaseModel):
    already_verified: bool


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


# Request bodies are plain strings; the auth validators own every rule so the
# client always gets the same INVALID_INPUT envelope.
class RegisterIn(BaseModel):
    email: str
    name: str
    password: str


class VerifyEmailIn(BaseModel):
    email: str
    code: str


class EmailIn(BaseModel):
    email: str


class ResetPasswordIn(BaseModel):
    email: str
    code: str
    new_password: str


class LoginIn(BaseModel):
    email: str
    password: str


class GoogleAuthIn(BaseModel):
    credential: str
