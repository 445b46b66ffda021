"""
Authentication service.

Credential checks are delegated to the CMS. A session is the CMS JWT plus
the user it resolves to; nothing is stored here.
"""

from typing import Optional
import structlog

from exceptions import (
    AccountBlockedError,
    AccountUnconfirmedError,
    BadRequestError,
    CmsUnavailableError,
    InvalidCredentialsError,
    SessionInvalidError,
)
from integrations.cms_client import CmsClient, CmsError, get_cms_client
from models.auth import AdminSession, AdminUser

logger = structlog.get_logger(__name__)


def _to_admin_user(user: dict) -> AdminUser:
    role = user.get("role") or {}
    return AdminUser(
        id=user["id"],
        username=user.get("username"),
        email=user.get("email"),
        role=(role.get("name") if isinstance(role, dict) else None) or "Public",
    )


class AuthService:
    """Login and session resolution against the CMS."""

    def __init__(self, client: Optional[CmsClient] = None):
        self.client = client or get_cms_client()

    def login(self, identifier: str, password: str) -> AdminSession:
        """
        Sign in with CMS credentials.

        Raises:
            BadRequestError: Identifier or password missing
            InvalidCredentialsError: CMS rejected the credentials
            AccountBlockedError: Account is blocked
            AccountUnconfirmedError: Email not confirmed
            CmsUnavailableError: CMS unreachable
        """
        if not identifier or not password:
            raise BadRequestError(
                "Please enter your email/username and password",
                code="AUTH_CREDENTIALS_REQUIRED"
            )

        try:
            body = self.client.authenticate(identifier, password)
        except CmsError as e:
            if e.transient:
                logger.error("cms_auth_unavailable", error=e.message)
                raise CmsUnavailableError(f"Authentication service unavailable: {e.message}")
            logger.info("login_rejected", status_code=e.status_code)
            raise InvalidCredentialsError(e.message or "Invalid email/username or password")

        user = body.get("user") or {}
        if user.get("blocked"):
            logger.info("login_blocked", user_id=user.get("id"))
            raise AccountBlockedError()
        if not user.get("confirmed", True):
            logger.info("login_unconfirmed", user_id=user.get("id"))
            raise AccountUnconfirmedError()

        session = AdminSession(token=body["jwt"], user=_to_admin_user(user))
        logger.info("login_succeeded", user_id=session.user.id, role=session.user.role)
        return session

    def resolve_session(self, token: str) -> AdminSession:
        """
        Resolve a bearer token to its session.

        Raises:
            SessionInvalidError: CMS rejected the token
            CmsUnavailableError: CMS unreachable
        """
        try:
            user = self.client.get_current_user(token)
        except CmsError as e:
            if e.transient:
                logger.error("cms_session_check_unavailable", error=e.message)
                raise CmsUnavailableError(f"Authentication service unavailable: {e.message}")
            raise SessionInvalidError()

        if user.get("blocked"):
            raise AccountBlockedError()

        return AdminSession(token=token, user=_to_admin_user(user))


_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    global _service
    if _service is None:
        _service = AuthService()
    return _service
