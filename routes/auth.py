"""
Authentication API routes.

Login is delegated to the CMS; the returned token is the bearer credential
for every other route.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import structlog

from exceptions import AuthRequiredError
from models.auth import AdminSession, AdminUser, LoginRequest
from routes.errors import handle_error
from services.auth_service import AuthService, get_auth_service

logger = structlog.get_logger(__name__)

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


# ===================
# DEPENDENCIES
# ===================

def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> AdminSession:
    """
    Resolve the request's bearer token to a session.

    Raises:
        401: No token, or the CMS rejected it
        503: CMS unreachable
    """
    if credentials is None or not credentials.credentials:
        raise AuthRequiredError()
    return auth_service.resolve_session(credentials.credentials)


# ===================
# ROUTES
# ===================

@router.post("/login", response_model=AdminSession)
def login(
    data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Sign in with CMS credentials.

    Raises:
        400: Identifier or password missing
        401: Invalid credentials
        403: Account blocked or unconfirmed
        503: CMS unreachable
    """
    try:
        return auth_service.login(data.identifier, data.password)
    except Exception as e:
        return handle_error(e)


@router.get("/session", response_model=AdminUser)
async def get_session(session: AdminSession = Depends(get_current_session)):
    """Get the user behind the current bearer token."""
    return session.user
