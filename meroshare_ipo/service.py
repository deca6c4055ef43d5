from __future__ import annotations

import logging
from typing import Any, Optional

from meroshare_ipo import accounts
from meroshare_ipo.config import Settings, settings
from meroshare_ipo.directory import fetch_capitals
from meroshare_ipo.errors import ApplicationError, IssueNotFoundError, MeroShareError, NotFoundError
from meroshare_ipo.schemas import (
    ApplicationDetail,
    ApplicationPayload,
    ApplicationReportItem,
    ApplyRequest,
    BankLinkage,
    CapitalItem,
    IssueItem,
)
from meroshare_ipo.session import MeroShareSession
from meroshare_ipo.transport import Transport

logger = logging.getLogger(__name__)

ISSUE_PAGE_SIZE = 10
REPORT_PAGE_SIZE = 200


class MeroShareService:
    def __init__(self, session: MeroShareSession) -> None:
        self.session = session

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[Transport] = None) -> "MeroShareService":
        return cls(MeroShareSession.from_settings(settings, transport))

    def get_capitals(self) -> list[CapitalItem]:
        return fetch_capitals(self.session.transport, self.session.endpoints)

    def fetch_applicable_issues(self, size: int = ISSUE_PAGE_SIZE) -> list[IssueItem]:
        payload = {
            "filterFieldParams": [
                {"key": "companyIssue.companyISIN.script", "alias": "Scrip"},
                {"key": "companyIssue.companyISIN.company.name", "alias": "Company Name"},
            ],
            "page": 1,
            "size": size,
            "searchRoleViewConstants": "VIEW_APPLICABLE_SHARE",
            "filterDateParams": [
                {"key": "minIssueOpenDate", "value": ""},
                {"key": "maxIssueCloseDate", "value": ""},
            ],
        }
        r = self.session.request("POST", self.session.endpoints.applicable_issue, json=payload)
        if not r.ok:
            raise MeroShareError(f"Failed to fetch IPOs (status: {r.status_code})", status_code=r.status_code)
        url = self.session.endpoints.applicable_issue
        return [r.parse(IssueItem, item, url) for item in r.json_list(url, key="object")]

    @staticmethod
    def find_issue_by_scrip(issues: list[IssueItem], target_script: str) -> IssueItem:
        target = target_script.strip().upper()
        share = next((item for item in issues if item.scrip.strip().upper() == target), None)
        if share is None:
            raise IssueNotFoundError(f"Target IPO '{target_script}' not found")
        return share

    def build_payload(
        self,
        issue: IssueItem,
        linkage: BankLinkage,
        request: ApplyRequest,
    ) -> ApplicationPayload:
        account = linkage.account
        return ApplicationPayload(
            account_branch_id=account.account_branch_id,
            account_number=account.account_number,
            account_type_id=1,
            applied_kitta=request.applied_kitta or "10",
            bank_id=str(linkage.bank_id),
            # The apply endpoint expects the login username here, not the demat.
            boid=self.session.username,
            company_share_id=str(issue.company_share_id),
            crn_number=request.crn_number,
            customer_id=account.customer_id,
            demat=linkage.demat,
            transaction_pin=request.pin,
        )

    def apply_for_issue(self, request: ApplyRequest) -> dict[str, Any]:
        issue = self.find_issue_by_scrip(self.fetch_applicable_issues(), request.target_script)
        logger.info("Target IPO found: %s (%s)", issue.company_name, issue.scrip)

        linkage = accounts.resolve_bank_linkage(self.session, request.boid)
        payload = self.build_payload(issue, linkage, request)

        logger.info("Applying IPO for %s", issue.scrip)
        r = self.session.request(
            "POST",
            self.session.endpoints.apply,
            json=payload.model_dump(by_alias=True),
        )
        if not r.ok:
            server_message = r.message()
            raise ApplicationError(
                f"IPO application failed for {request.target_script} "
                f"(status: {r.status_code}, message: {server_message or 'N/A'})",
                status_code=r.status_code,
                server_message=server_message,
            )

        result = r.json()
        if not isinstance(result, dict):
            result = {"response": result}
        logger.info(
            "IPO application successful for %s. Transaction reference: %s",
            issue.scrip,
            result.get("referenceNo") or "N/A",
        )
        return result

    def fetch_application_reports(self, size: int = REPORT_PAGE_SIZE) -> list[ApplicationReportItem]:
        """First page of active/completed applicant forms.

        Only page 1 is requested; accounts with more than ``size`` forms need
        to page explicitly.
        """
        payload = {
            "filterFieldParams": [
                {"key": "companyShare.companyIssue.companyISIN.script", "alias": "Scrip"},
                {"key": "companyShare.companyIssue.companyISIN.company.name", "alias": "Company Name"},
            ],
            "page": 1,
            "size": size,
            "searchRoleViewConstants": "VIEW_APPLICANT_FORM_COMPLETE",
            "filterDateParams": [
                {"key": "appliedDate", "condition": "", "alias": "", "value": ""},
            ],
        }
        r = self.session.request("POST", self.session.endpoints.active_search, json=payload)
        if not r.ok:
            raise MeroShareError(
                f"Failed to fetch application reports (status: {r.status_code})",
                status_code=r.status_code,
            )
        url = self.session.endpoints.active_search
        return [r.parse(ApplicationReportItem, item, url) for item in r.json_list(url, key="object")]

    def fetch_application_detail(self, applicant_form_id: int) -> ApplicationDetail:
        url = self.session.endpoints.report_detail(applicant_form_id)
        r = self.session.request("GET", url)
        if not r.ok:
            raise NotFoundError(
                f"Failed to fetch application detail for applicantFormId {applicant_form_id} "
                f"(status: {r.status_code})",
                status_code=r.status_code,
            )
        return r.parse(ApplicationDetail, r.json(), url)


meroshare_service = MeroShareService.from_settings(settings)
