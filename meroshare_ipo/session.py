from __future__ import annotations

import logging
from typing import Any, Optional

from meroshare_ipo.config import Endpoints, Settings
from meroshare_ipo.directory import public_headers, resolve_client_id
from meroshare_ipo.errors import AuthenticationError
from meroshare_ipo.schemas import Credentials
from meroshare_ipo.transport import RequestsTransport, Transport, TransportResponse

logger = logging.getLogger(__name__)


class MeroShareSession:
    """Owns the credentials and the bearer token for one MeroShare account.

    The token lives only in memory. ``request`` logs in on first use and
    re-authenticates at most once per call when the server answers 401.
    """

    def __init__(
        self,
        credentials: Credentials,
        transport: Optional[Transport] = None,
        endpoints: Optional[Endpoints] = None,
    ) -> None:
        self.credentials = credentials
        self.transport = transport or RequestsTransport()
        self.endpoints = endpoints or Endpoints()
        self.token: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[Transport] = None) -> "MeroShareSession":
        credentials = Credentials(
            username=settings.username,
            password=settings.password,
            dp_id=settings.dp_id,
        )
        transport = transport or RequestsTransport(
            timeout_seconds=settings.request_timeout_seconds,
            verify_ssl=settings.verify_ssl,
        )
        return cls(credentials, transport, Endpoints.from_settings(settings))

    @property
    def username(self) -> str:
        return self.credentials.username

    def login(self) -> str:
        creds = self.credentials
        if not (creds.username and creds.password):
            raise AuthenticationError("Username and password are required to log in")

        client_id = resolve_client_id(self.transport, self.endpoints, creds.dp_id)
        logger.info("Attempting login for user %s", creds.username)
        r = self.transport.send(
            "POST",
            self.endpoints.auth,
            headers=public_headers(self.endpoints),
            json={"username": creds.username, "password": creds.password, "clientId": client_id},
        )
        if not r.ok:
            raise AuthenticationError(f"Login failed with status {r.status_code}", status_code=r.status_code)

        body = r.json()
        body_status = body.get("statusCode") if isinstance(body, dict) else None
        # Upstream sends statusCode as a number or a numeric string.
        if body_status is not None and str(body_status).strip() != "200":
            status_text = str(body_status).strip()
            raise AuthenticationError(
                f"Login failed: {body.get('message') or 'unknown reason'} (statusCode: {status_text})",
                status_code=int(status_text) if status_text.isdigit() else r.status_code,
            )

        token = r.headers.get("Authorization")
        if not token:
            raise AuthenticationError("No authorization token received", status_code=r.status_code)

        self.token = token
        logger.info("Login successful for user %s", creds.username)
        return token

    def _auth_headers(self) -> dict[str, str]:
        return public_headers(self.endpoints) | {"Authorization": self.token or ""}

    def request(self, method: str, url: str, *, json: Any = None) -> TransportResponse:
        if not self.token:
            logger.info("No token found, logging in")
            self.login()

        r = self.transport.send(method, url, headers=self._auth_headers(), json=json)
        if r.status_code != 401:
            return r

        logger.warning("Token rejected with 401, logging in again")
        self.token = None
        self.login()
        r = self.transport.send(method, url, headers=self._auth_headers(), json=json)
        if r.status_code == 401:
            self.token = None
            raise AuthenticationError(f"{method.upper()} {url} still unauthorized after re-login", status_code=401)
        return r
