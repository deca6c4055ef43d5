"""Beneficiary-owner to bank-account resolution.

Three dependent lookups, each fatal on failure:
BO detail (bank code, demat) -> bank request (bank id) -> bank account.
"""
from __future__ import annotations

import logging

from meroshare_ipo.errors import NotFoundError, TransportError
from meroshare_ipo.schemas import BankAccount, BankLinkage, BODetail
from meroshare_ipo.session import MeroShareSession

logger = logging.getLogger(__name__)


def fetch_bo_detail(session: MeroShareSession, boid: str) -> BODetail:
    logger.info("Fetching BO details for BOID %s", boid)
    url = session.endpoints.my_detail(boid)
    r = session.request("GET", url)
    if not r.ok:
        raise NotFoundError(f"Failed to fetch BO details (status: {r.status_code})", status_code=r.status_code)
    return r.parse(BODetail, r.json(), url)


def fetch_bank_request(session: MeroShareSession, bank_code: str | None) -> int:
    if not bank_code:
        raise NotFoundError("BO detail has no bank code linked")

    logger.info("Fetching bank info for bank code %s", bank_code)
    r = session.request("GET", session.endpoints.bank_request(bank_code))
    if not r.ok:
        raise NotFoundError(
            f"Failed to fetch bank request details (status: {r.status_code})",
            status_code=r.status_code,
        )
    body = r.json()
    bank = body.get("bank") if isinstance(body, dict) else None
    bank_id = bank.get("id") if isinstance(bank, dict) else None
    if bank_id is None:
        raise NotFoundError(f"Bank request for bank code {bank_code} has no bank id")
    try:
        return int(bank_id)
    except (TypeError, ValueError) as exc:
        raise TransportError(
            f"Malformed bank id {bank_id!r} for bank code {bank_code}",
            status_code=r.status_code,
        ) from exc


def fetch_bank_account(session: MeroShareSession, bank_id: int) -> BankAccount:
    url = session.endpoints.bank(bank_id)
    r = session.request("GET", url)
    if not r.ok:
        raise NotFoundError(
            f"Failed to fetch bank account info (status: {r.status_code})",
            status_code=r.status_code,
        )
    accounts = r.json_list(url)
    if not accounts:
        raise NotFoundError(f"No bank account linked to bank id {bank_id}")

    account = r.parse(BankAccount, accounts[0], url)
    logger.info("Bank account info fetched for customerId %s", account.customer_id)
    return account


def resolve_bank_linkage(session: MeroShareSession, boid: str) -> BankLinkage:
    bo = fetch_bo_detail(session, boid)
    bank_id = fetch_bank_request(session, bo.bank_code)
    account = fetch_bank_account(session, bank_id)

    if bo.account_number and bo.account_number != account.account_number:
        logger.warning(
            "BO detail account number differs from the registered bank account; using the registered account"
        )
    return BankLinkage(demat=bo.demat, bank_id=bank_id, account=account)
