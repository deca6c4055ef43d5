from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class UpstreamModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    username: str
    password: str
    dp_id: str


class CapitalItem(UpstreamModel):
    code: str
    name: str = ""
    client_id: int = Field(..., validation_alias=AliasChoices("client_id", "id"))


class IssueItem(UpstreamModel):
    scrip: str
    company_name: str = Field("", validation_alias=AliasChoices("company_name", "companyName"))
    company_share_id: int = Field(..., validation_alias=AliasChoices("company_share_id", "companyShareId"))
    share_type_name: Optional[str] = Field(None, validation_alias=AliasChoices("share_type_name", "shareTypeName"))
    share_group_name: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("share_group_name", "shareGroupName"),
    )
    issue_open_date: Optional[str] = Field(None, validation_alias=AliasChoices("issue_open_date", "issueOpenDate"))
    issue_close_date: Optional[str] = Field(None, validation_alias=AliasChoices("issue_close_date", "issueCloseDate"))
    action: Optional[str] = None


class BODetail(UpstreamModel):
    bank_code: Optional[str] = Field(None, validation_alias=AliasChoices("bank_code", "bankCode"))
    demat: str = Field(..., validation_alias=AliasChoices("demat", "boid"))
    # Informational only; the registered bank account is the source of truth.
    account_number: Optional[str] = Field(None, validation_alias=AliasChoices("account_number", "accountNumber"))


class BankAccount(UpstreamModel):
    customer_id: int = Field(..., validation_alias=AliasChoices("customer_id", "id", "customerId"))
    account_branch_id: int = Field(..., validation_alias=AliasChoices("account_branch_id", "accountBranchId"))
    account_number: str = Field(..., validation_alias=AliasChoices("account_number", "accountNumber"))
    branch_name: Optional[str] = Field(None, validation_alias=AliasChoices("branch_name", "branchName"))


class BankLinkage(BaseModel):
    demat: str
    bank_id: int
    account: BankAccount


class ApplicationPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    account_branch_id: int = Field(..., alias="accountBranchId")
    account_number: str = Field(..., alias="accountNumber")
    account_type_id: int = Field(1, alias="accountTypeId")
    applied_kitta: str = Field(..., alias="appliedKitta")
    bank_id: str = Field(..., alias="bankId")
    boid: str
    company_share_id: str = Field(..., alias="companyShareId")
    crn_number: str = Field(..., alias="crnNumber")
    customer_id: int = Field(..., alias="customerId")
    demat: str
    transaction_pin: str = Field(..., alias="transactionPIN")


class ApplyRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    target_script: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("target_script", "targetScript", "scrip"),
    )
    boid: str = Field(..., min_length=1)
    crn_number: str = Field(..., min_length=4, validation_alias=AliasChoices("crn_number", "crnNumber", "crn"))
    applied_kitta: str = Field(
        "10",
        validation_alias=AliasChoices("applied_kitta", "appliedKitta", "kitta"),
    )
    pin: str = Field(..., min_length=4, validation_alias=AliasChoices("pin", "transaction_pin"))

    @field_validator("applied_kitta")
    @classmethod
    def _positive_kitta(cls, value: str) -> str:
        # Sent upstream as a string, but must be a whole number of units.
        text = value.strip()
        if not text.isdigit() or int(text) <= 0:
            raise ValueError(f"applied_kitta must be a positive whole number, got '{value}'")
        return str(int(text))


class ApplyBody(BaseModel):
    """API body; fields left out fall back to the configured account."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    target_script: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("target_script", "targetScript", "scrip"),
    )
    boid: Optional[str] = None
    crn_number: Optional[str] = Field(None, validation_alias=AliasChoices("crn_number", "crnNumber", "crn"))
    applied_kitta: Optional[str] = Field(None, validation_alias=AliasChoices("applied_kitta", "appliedKitta", "kitta"))
    pin: Optional[str] = Field(None, validation_alias=AliasChoices("pin", "transaction_pin"))


class ApplicationReportItem(UpstreamModel):
    scrip: str = ""
    company_name: str = Field("", validation_alias=AliasChoices("company_name", "companyName"))
    applicant_form_id: int = Field(..., validation_alias=AliasChoices("applicant_form_id", "applicantFormId"))
    company_share_id: Optional[int] = Field(None, validation_alias=AliasChoices("company_share_id", "companyShareId"))
    applied_kitta: Optional[int] = Field(None, validation_alias=AliasChoices("applied_kitta", "appliedKitta"))
    received_kitta: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("received_kitta", "receivedKitta", "allotedKitta"),
    )
    status_name: Optional[str] = Field(None, validation_alias=AliasChoices("status_name", "statusName"))


class ApplicationDetail(ApplicationReportItem):
    applicant_form_id: Optional[int] = Field(None, validation_alias=AliasChoices("applicant_form_id", "applicantFormId"))
    stage_name: Optional[str] = Field(None, validation_alias=AliasChoices("stage_name", "stageName"))
    remark: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("remark", "reasonOrRemark", "meroshareRemark"),
    )
