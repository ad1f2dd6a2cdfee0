"""Pydantic schemas for auth and account endpoints."""

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class UserResponse(BaseModel):
    id: str
    email: str | None


class SessionResponse(BaseModel):
    user: UserResponse
    access_token: str
    expires_in: int | None


class AccountDeleteRequest(BaseModel):
    confirmation: str | None = None
