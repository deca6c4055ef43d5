from __future__ import annotations

import logging

from meroshare_ipo.config import Endpoints
from meroshare_ipo.errors import BrokerNotFoundError, MeroShareError
from meroshare_ipo.schemas import CapitalItem
from meroshare_ipo.transport import Transport

logger = logging.getLogger(__name__)


def public_headers(endpoints: Endpoints) -> dict[str, str]:
    return {
        "Content-Type": "application/json",
        "Origin": endpoints.origin,
        "Referer": endpoints.referer,
    }


def fetch_capitals(transport: Transport, endpoints: Endpoints) -> list[CapitalItem]:
    """Fetch the DP (capital) directory. No authentication needed."""
    r = transport.send("GET", endpoints.capital, headers=public_headers(endpoints))
    if not r.ok:
        raise MeroShareError(
            f"Unable to fetch DP capital list (status: {r.status_code})",
            status_code=r.status_code,
        )
    capitals = [
        r.parse(CapitalItem, item, endpoints.capital)
        for item in r.json_list(endpoints.capital)
        if not isinstance(item, dict) or str(item.get("code", "")).strip()
    ]
    capitals.sort(key=lambda item: item.code)
    return capitals


def resolve_client_id(transport: Transport, endpoints: Endpoints, broker_code: str) -> int:
    code = str(broker_code).strip()
    logger.info("Fetching clientId for broker code %s", code)
    capital = next((item for item in fetch_capitals(transport, endpoints) if item.code.strip() == code), None)
    if capital is None:
        raise BrokerNotFoundError(f"Broker with code '{code}' not found in /capital/")
    return capital.client_id
