"""
Admin API client for the target project (GoTrue-compatible admin endpoints).

Construction does no I/O and accepts any URL or key; problems show up as
failed results when a call is made. No connection is held between calls.
"""
import logging
from typing import Optional

import httpx

from src.admin.models import AdminResult, User
from src.shared.errors import AdminApiError, error_message_from_body, format_http_error

log = logging.getLogger(__name__)

ADMIN_USERS_PATH = "/auth/v1/admin/users"
DEFAULT_TIMEOUT = 10.0


class AdminClient:
    """Privileged client scoped to one (url, secret_key) pair."""

    def __init__(
        self,
        url: str,
        secret_key: str,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.url = url
        self.secret_key = secret_key
        self._transport = transport
        self._timeout = timeout

    def __repr__(self) -> str:
        return f"AdminClient(url={self.url!r})"

    def _endpoint(self, path: str) -> str:
        return self.url.rstrip("/") + path

    def _request(self, method: str, path: str, **kwargs) -> AdminResult:
        headers = {
            "apikey": self.secret_key,
            "Authorization": f"Bearer {self.secret_key}",
        }
        try:
            with httpx.Client(transport=self._transport, timeout=self._timeout) as http:
                response = http.request(method, self._endpoint(path), headers=headers, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log.debug("%s %s failed: %s", method, path, e)
            return AdminResult(error=AdminApiError(format_http_error(e)))

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            message = error_message_from_body(body, response.reason_phrase or "Request failed")
            return AdminResult(error=AdminApiError(message, status=response.status_code))

        return AdminResult(data=body)

    def create_user(self, email: str, password: str) -> AdminResult:
        """
        Create an account with the given password.

        Returns:
            AdminResult with data=User on success
        """
        result = self._request("POST", ADMIN_USERS_PATH, json={"email": email, "password": password})
        if result.error is None:
            result.data = User.from_dict(result.data if isinstance(result.data, dict) else {})
        return result

    def list_users(self, page: int | None = None, per_page: int | None = None) -> AdminResult:
        """
        List accounts in the project.

        Returns:
            AdminResult with data={"users": [User, ...]} on success
        """
        params = {}
        if page is not None:
            params["page"] = page
        if per_page is not None:
            params["per_page"] = per_page

        result = self._request("GET", ADMIN_USERS_PATH, params=params or None)
        if result.error is None:
            raw_users = result.data.get("users") if isinstance(result.data, dict) else None
            result.data = {"users": [User.from_dict(u) for u in raw_users or []]}
        return result


def make_client(
    url: str,
    secret_key: str,
    transport: Optional[httpx.BaseTransport] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> AdminClient:
    """Build an admin client. Never raises and performs no I/O."""
    return AdminClient(url, secret_key, transport=transport, timeout=timeout)
