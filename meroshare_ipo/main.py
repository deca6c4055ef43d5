from typing import Any, Optional

from fastapi import FastAPI, HTTPException

from meroshare_ipo.config import settings
from meroshare_ipo.errors import (
    ApplicationError,
    AuthenticationError,
    MeroShareError,
    NotFoundError,
    TransportError,
)
from meroshare_ipo.schemas import (
    ApplicationDetail,
    ApplicationReportItem,
    ApplyBody,
    ApplyRequest,
    CapitalItem,
    IssueItem,
)
from meroshare_ipo.service import meroshare_service

app = FastAPI(title=settings.app_name)


def _http_error(exc: MeroShareError) -> HTTPException:
    if isinstance(exc, AuthenticationError):
        return HTTPException(status_code=401, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, TransportError):
        return HTTPException(status_code=502, detail=str(exc))
    if isinstance(exc, ApplicationError):
        return HTTPException(
            status_code=400,
            detail={
                "message": exc.server_message or str(exc),
                "upstream_status_code": exc.status_code,
            },
        )
    return HTTPException(status_code=400, detail=str(exc))


@app.get('/health')
def health() -> dict[str, str]:
    return {'status': 'ok', 'env': settings.app_env}


@app.get(f'{settings.api_prefix}/capitals', response_model=list[CapitalItem])
def get_capitals() -> list[CapitalItem]:
    try:
        return meroshare_service.get_capitals()
    except MeroShareError as exc:
        raise _http_error(exc) from exc


@app.get(f'{settings.api_prefix}/ipos', response_model=list[IssueItem])
def get_open_ipos() -> list[IssueItem]:
    try:
        return meroshare_service.fetch_applicable_issues()
    except MeroShareError as exc:
        raise _http_error(exc) from exc


@app.post(f'{settings.api_prefix}/apply')
def apply_ipo(body: Optional[ApplyBody] = None) -> dict[str, Any]:
    body = body or ApplyBody()
    try:
        request = ApplyRequest(
            target_script=body.target_script or settings.target_script,
            boid=body.boid or settings.boid,
            crn_number=body.crn_number or settings.crn_number,
            applied_kitta=body.applied_kitta or settings.applied_kitta,
            pin=body.pin or settings.pin,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"Incomplete application: {exc}") from exc

    try:
        return meroshare_service.apply_for_issue(request)
    except MeroShareError as exc:
        raise _http_error(exc) from exc


@app.get(f'{settings.api_prefix}/reports', response_model=list[ApplicationReportItem])
def get_application_reports() -> list[ApplicationReportItem]:
    try:
        return meroshare_service.fetch_application_reports()
    except MeroShareError as exc:
        raise _http_error(exc) from exc


@app.get(f'{settings.api_prefix}/reports/{{applicant_form_id}}', response_model=ApplicationDetail)
def get_application_detail(applicant_form_id: int) -> ApplicationDetail:
    try:
        return meroshare_service.fetch_application_detail(applicant_form_id)
    except MeroShareError as exc:
        raise _http_error(exc) from exc
