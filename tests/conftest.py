import json

import pytest
from requests.structures import CaseInsensitiveDict

from meroshare_ipo.config import Endpoints
from meroshare_ipo.schemas import Credentials
from meroshare_ipo.service import MeroShareService
from meroshare_ipo.session import MeroShareSession
from meroshare_ipo.transport import TransportResponse

ENDPOINTS = Endpoints()

CAPITALS = [
    {"code": "11000", "name": "Other Capital", "id": 12},
    {"code": "123", "name": "Test Capital", "id": 55},
]
ISSUES = {
    "object": [
        {"scrip": "ABC", "companyName": "Alpha Bank", "companyShareId": 7},
        {"scrip": "XYZ", "companyName": "Xylo Hydro", "companyShareId": 9, "shareTypeName": "IPO"},
    ],
    "totalCount": 2,
}
BO_DETAIL = {"bankCode": "0401", "boid": "1301230000012345", "accountNumber": "ACC-FROM-BO"}
BANK_REQUEST = {"bank": {"id": 42, "name": "Test Bank"}}
BANK_ACCOUNTS = [
    {"id": 3001, "accountBranchId": 77, "accountNumber": "ACC-REGISTERED", "branchName": "Main"},
]
MALFORMED_BANK_ACCOUNTS = [{"id": 3001, "accountBranchId": 77, "accountNumber": None}]


def make_response(status_code=200, body=None, headers=None):
    text = "" if body is None else (body if isinstance(body, str) else json.dumps(body))
    return TransportResponse(status_code=status_code, headers=CaseInsensitiveDict(headers or {}), text=text)


def login_ok(token="token-1"):
    return make_response(200, {"statusCode": 200, "message": "Log in successful."}, {"Authorization": token})


class FakeTransport:
    """Answers requests from per-(method, url) queues and records every call.

    The last queued response for a route is reused once the queue runs dry.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, url, *responses):
        self.routes.setdefault((method.upper(), url), []).extend(responses)
        return self

    def send(self, method, url, *, headers=None, json=None):
        self.calls.append({"method": method.upper(), "url": url, "headers": dict(headers or {}), "json": json})
        queue = self.routes.get((method.upper(), url))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def calls_to(self, url, method=None):
        return [c for c in self.calls if c["url"] == url and (method is None or c["method"] == method.upper())]


@pytest.fixture
def transport():
    t = FakeTransport()
    t.add("GET", ENDPOINTS.capital, make_response(200, CAPITALS))
    t.add("POST", ENDPOINTS.auth, login_ok())
    return t


@pytest.fixture
def credentials():
    return Credentials(username="1234567", password="secret", dp_id="123")


@pytest.fixture
def session(transport, credentials):
    return MeroShareSession(credentials, transport, ENDPOINTS)


@pytest.fixture
def service(session):
    return MeroShareService(session)


@pytest.fixture
def linked_transport(transport):
    transport.add("POST", ENDPOINTS.applicable_issue, make_response(200, ISSUES))
    transport.add("GET", ENDPOINTS.my_detail("1301230000012345"), make_response(200, BO_DETAIL))
    transport.add("GET", ENDPOINTS.bank_request("0401"), make_response(200, BANK_REQUEST))
    transport.add("GET", ENDPOINTS.bank(42), make_response(200, BANK_ACCOUNTS))
    return transport
