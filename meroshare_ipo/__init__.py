from meroshare_ipo.errors import (
    ApplicationError,
    AuthenticationError,
    BrokerNotFoundError,
    IssueNotFoundError,
    MeroShareError,
    NotFoundError,
    TransportError,
)
from meroshare_ipo.service import MeroShareService
from meroshare_ipo.session import MeroShareSession

__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "BrokerNotFoundError",
    "IssueNotFoundError",
    "MeroShareError",
    "MeroShareService",
    "MeroShareSession",
    "NotFoundError",
    "TransportError",
]
