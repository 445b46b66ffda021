"""
Headless CMS integration.

Thin REST client for the CMS endpoints this service uses:
- POST /api/auth/local     credential check, returns a JWT and the user
- GET  /api/users/me       resolve a JWT back to its user and role
- POST /api/products       create a product record
"""

from typing import Any, Optional
import requests
import structlog

from config import settings

logger = structlog.get_logger(__name__)


class CmsError(Exception):
    """
    CMS request failed.

    Attributes:
        message: CMS-provided error message, else the transport error
        status_code: HTTP status from the CMS, None for transport failures
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def transient(self) -> bool:
        """True for timeouts, connection errors and 5xx responses."""
        return self.status_code is None or self.status_code >= 500


def extract_error_message(response: Optional[requests.Response]) -> Optional[str]:
    """
    Pull the error message out of a CMS error body.

    Handles {"error": {"message": ...}} and {"message": ...}.
    """
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if body.get("message"):
        return str(body["message"])
    return None


class CmsClient:
    """
    CMS REST client.

    One requests.Session per client; every call carries a timeout.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or settings.cms_api_url).rstrip("/")
        self.timeout = timeout or settings.cms_timeout_seconds
        self.session = session or requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        **kwargs: Any,
    ) -> dict:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                timeout=self.timeout,
                **kwargs,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            message = extract_error_message(e.response) or str(e) or "Unknown error"
            raise CmsError(message, status_code=e.response.status_code) from e
        except requests.RequestException as e:
            logger.warning(
                "cms_request_failed",
                method=method,
                path=path,
                error=str(e),
                error_type=type(e).__name__
            )
            raise CmsError(str(e) or "Unknown error") from e

        try:
            return response.json()
        except ValueError as e:
            raise CmsError("Invalid JSON response from CMS", status_code=response.status_code) from e

    # ===================
    # AUTH
    # ===================

    def authenticate(self, identifier: str, password: str) -> dict:
        """
        Verify credentials.

        Returns:
            {"jwt": str, "user": {...}} as returned by the CMS

        Raises:
            CmsError: On rejection (4xx) or transport failure
        """
        return self._request(
            "POST",
            "/api/auth/local",
            json={"identifier": identifier, "password": password},
        )

    def get_current_user(self, token: str) -> dict:
        """
        Resolve a JWT to its user, with role populated.

        Raises:
            CmsError: If the token is rejected or the CMS is unreachable
        """
        return self._request(
            "GET",
            "/api/users/me",
            token=token,
            params={"populate": "role"},
        )

    # ===================
    # CATALOG
    # ===================

    def create_product(self, data: dict, token: str) -> str:
        """
        Create a product record.

        Args:
            data: Product fields (sent as {"data": data})
            token: Caller's bearer credential

        Returns:
            Id assigned by the CMS

        Raises:
            CmsError: On rejection or transport failure
        """
        body = self._request(
            "POST",
            "/api/products",
            token=token,
            json={"data": data},
        )
        record = body.get("data") or {}
        product_id = record.get("id") or record.get("documentId")
        if product_id is None:
            raise CmsError("CMS response did not include a product id")
        return str(product_id)


_client: Optional[CmsClient] = None


def get_cms_client() -> CmsClient:
    global _client
    if _client is None:
        _client = CmsClient()
    return _client
