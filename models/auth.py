"""
Authentication schemas.

The CMS verifies credentials; this service only carries its bearer token.
"""

from pydantic import BaseModel, Field
from typing import Optional


class LoginRequest(BaseModel):
    """Sign in with CMS credentials."""

    identifier: str = Field(
        "",
        description="Email or username"
    )
    password: str = Field(
        "",
        description="Password"
    )


class AdminUser(BaseModel):
    """CMS user behind a session."""

    id: int
    username: Optional[str] = None
    email: Optional[str] = None
    role: str = "Public"


class AdminSession(BaseModel):
    """
    Authenticated caller identity.

    token is the CMS bearer credential; it is forwarded on every CMS call.
    """

    token: str
    user: AdminUser