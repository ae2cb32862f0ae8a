# noqa: D401
"""Cookie-bearing HTTP session against the portal."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from bs4 import BeautifulSoup

from .errors import AuthenticationFailed, HttpError, TokenNotFound
from .logging import get_logger

logger = get_logger(__name__)

LOGIN_PATH = "identity/login"
TOKEN_FIELD = "__RequestVerificationToken"
RETURN_URL = "/home"


def extract_verification_token(html: str) -> str:
    """Return the anti-forgery token embedded in the login form."""

    soup = BeautifulSoup(html, "lxml")
    field = soup.select_one(f'input[name="{TOKEN_FIELD}"]')
    if field is None:
        raise TokenNotFound(f"Login page has no {TOKEN_FIELD} field")
    token = field.get("value")
    if not token:
        raise TokenNotFound(f"{TOKEN_FIELD} field carries no value")
    return str(token)


class SessionClient:
    """Authenticated session against the portal base URL.

    Cookies set during :meth:`authenticate` are kept by the underlying
    ``httpx.Client`` and sent with every later request.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = httpx.URL(base_url.rstrip("/") + "/")
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self) -> "SessionClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def resolve(self, path: str) -> httpx.URL:
        """Join ``path`` onto the base URL the way a browser would.

        A leading slash points at the host root; absolute URLs pass through.
        """

        return self.base_url.join(path)

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        data: Optional[Dict[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        """Send a request resolved against the base URL and check its status.

        Absolute URLs are sent as is, which is how question images hosted on
        another domain are fetched.
        """

        response = self._client.request(
            method, self.resolve(path), json=json, data=data, headers=headers
        )
        if not response.is_success:
            logger.warning(
                "request_failed",
                method=method,
                url=str(response.request.url),
                status=response.status_code,
            )
            raise HttpError(response.status_code, str(response.request.url))
        return response

    def authenticate(self, username: str, password: str) -> None:
        """Log in through the portal form.

        The login page is fetched first to obtain its anti-forgery token,
        then the credentials are posted back to the same endpoint.
        """

        page = self.request("GET", LOGIN_PATH)
        token = extract_verification_token(page.text)
        logger.debug("login_page_fetched", url=str(page.url))

        form = {
            "ReturnUrl": RETURN_URL,
            "UserName": username,
            "Password": password,
            "IsPersistent": "true",
            TOKEN_FIELD: token,
        }
        try:
            self.request("POST", LOGIN_PATH, data=form)
        except HttpError as exc:
            raise AuthenticationFailed(f"Login rejected for {username} (HTTP {exc.status})") from exc
        logger.info("authenticated", username=username)


__all__ = ["LOGIN_PATH", "SessionClient", "TOKEN_FIELD", "extract_verification_token"]
