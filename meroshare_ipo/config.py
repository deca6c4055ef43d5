from __future__ import annotations

from dataclasses import dataclass

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "MeroShare IPO Apply API"
    app_env: str = "development"
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    api_root: str = "https://webbackend.cdsc.com.np/api"
    origin: str = "https://meroshare.cdsc.com.np"
    request_timeout_seconds: int = 30
    verify_ssl: bool = False

    # USERNAME/PASSWORD are too generic to read from the environment directly.
    username: str = Field("", validation_alias=AliasChoices("mero_share_username", "meroshare_username"))
    password: str = Field("", validation_alias=AliasChoices("mero_share_password", "meroshare_password"))
    dp_id: str = ""
    target_script: str = ""
    boid: str = ""
    crn_number: str = Field("", validation_alias=AliasChoices("crn_number", "crn"))
    applied_kitta: str = "10"
    pin: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@dataclass(frozen=True)
class Endpoints:
    """Remote URLs, all derived from the API root."""

    api_root: str = "https://webbackend.cdsc.com.np/api"
    origin: str = "https://meroshare.cdsc.com.np"

    @classmethod
    def from_settings(cls, settings: Settings) -> "Endpoints":
        return cls(api_root=settings.api_root.rstrip("/"), origin=settings.origin.rstrip("/"))

    @property
    def base_url(self) -> str:
        return f"{self.api_root}/meroShare"

    @property
    def view_url(self) -> str:
        return f"{self.api_root}/meroShareView"

    @property
    def referer(self) -> str:
        return f"{self.origin}/"

    @property
    def capital(self) -> str:
        return f"{self.base_url}/capital/"

    @property
    def auth(self) -> str:
        return f"{self.base_url}/auth/"

    @property
    def applicable_issue(self) -> str:
        return f"{self.base_url}/companyShare/applicableIssue/"

    def my_detail(self, boid: str) -> str:
        return f"{self.view_url}/myDetail/{boid}"

    def bank_request(self, bank_code: str) -> str:
        return f"{self.api_root}/bankRequest/{bank_code}"

    def bank(self, bank_id: int | str) -> str:
        return f"{self.base_url}/bank/{bank_id}"

    @property
    def apply(self) -> str:
        return f"{self.base_url}/applicantForm/share/apply"

    @property
    def active_search(self) -> str:
        return f"{self.base_url}/applicantForm/active/search/"

    def report_detail(self, applicant_form_id: int | str) -> str:
        return f"{self.base_url}/applicantForm/report/detail/{applicant_form_id}"


settings = Settings()
