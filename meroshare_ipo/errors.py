from __future__ import annotations


class MeroShareError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(MeroShareError):
    pass


class NotFoundError(MeroShareError, LookupError):
    pass


class BrokerNotFoundError(NotFoundError):
    pass


class IssueNotFoundError(NotFoundError):
    pass


class ApplicationError(MeroShareError):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        server_message: str = "",
    ) -> None:
        super().__init__(message, status_code)
        self.server_message = server_message


class TransportError(MeroShareError):
    pass
