"""
Pydantic models for API request/response validation
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class SessionRequest(BaseModel):
    """Client description sent when a session is issued or replaced"""
    client: str = Field(min_length=1)
    platform: dict[str, Any] = Field(default_factory=dict)


class LoginRequest(SessionRequest):
    """Login request model"""
    username: str
    password: str


class SessionTokenResponse(BaseModel):
    session_id: str


class UserResponse(BaseModel):
    id: int
    login: str
    email: str = ""
    group: Optional[str] = None


class LoginResponse(BaseModel):
    session_id: Optional[str] = None
    user: UserResponse


class SessionInfoResponse(BaseModel):
    """Current session as seen by the client"""
    client: str
    platform: dict[str, Any]
    expires: Optional[int] = None
    login_attempts: int = 0
    guest: bool
    user: Optional[UserResponse] = None
