from __future__ import annotations

from dataclasses import dataclass, field
import json as json_lib
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError
import requests
from requests.structures import CaseInsensitiveDict
import urllib3

from meroshare_ipo.errors import TransportError

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class TransportResponse:
    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        try:
            return json_lib.loads(self.text)
        except ValueError as exc:
            raise TransportError(
                f"Expected a JSON body (status: {self.status_code})",
                status_code=self.status_code,
            ) from exc

    def message(self) -> str:
        """Server-supplied error text, or "" when the body has none."""
        try:
            body = json_lib.loads(self.text)
        except ValueError:
            return self.text.strip()
        if isinstance(body, dict):
            return str(body.get("message") or body.get("detail") or "").strip()
        return ""

    def parse(self, model: type[ModelT], data: Any, source: str) -> ModelT:
        """Validate one upstream record, reporting bad fields as a TransportError."""
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            fields = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
                for err in exc.errors()
            )
            raise TransportError(
                f"Malformed {model.__name__} from {source} (status: {self.status_code}): {fields}",
                status_code=self.status_code,
            ) from exc

    def json_list(self, source: str, key: str | None = None) -> list[Any]:
        """Body (or ``body[key]``) as a list; missing or null means empty."""
        body = self.json()
        if key is not None:
            if body is None:
                return []
            if not isinstance(body, dict):
                raise TransportError(
                    f"Expected a JSON object from {source} (status: {self.status_code})",
                    status_code=self.status_code,
                )
            body = body.get(key)
        if body is None:
            return []
        if not isinstance(body, list):
            raise TransportError(
                f"Expected a JSON list from {source} (status: {self.status_code})",
                status_code=self.status_code,
            )
        return body


class Transport(Protocol):
    def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> TransportResponse: ...


class RequestsTransport:
    """Blocking HTTP transport backed by a ``requests.Session``."""

    def __init__(
        self,
        timeout_seconds: int = 30,
        verify_ssl: bool = False,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.verify_ssl = verify_ssl
        self.session = session or requests.Session()
        if not verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def send(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        json: Any = None,
    ) -> TransportResponse:
        try:
            r = self.session.request(
                method.upper(),
                url,
                headers=headers,
                json=json,
                verify=self.verify_ssl,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method.upper()} {url} failed: {exc}") from exc

        return TransportResponse(
            status_code=int(r.status_code),
            headers=CaseInsensitiveDict(r.headers),
            text=r.text,
        )
