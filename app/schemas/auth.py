"""
Auth Pydantic schemas.

Fields are optional so that missing values reach the credential service,
which reports them as a 400 with a single consistent message.
"""

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    name: str | None = None
    password: str | None = None
    role: str | None = None


class LoginRequest(BaseModel):
    name: str | None = None
    password: str | None = None


class MessageResponse(BaseModel):
    message: str


class LoginResponse(MessageResponse):
    token: str
