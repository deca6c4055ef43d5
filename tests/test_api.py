import pytest
from fastapi.testclient import TestClient

from meroshare_ipo import main

from conftest import ENDPOINTS, MALFORMED_BANK_ACCOUNTS, make_response

BOID = "1301230000012345"
PREFIX = main.settings.api_prefix


@pytest.fixture
def client(monkeypatch, service):
    monkeypatch.setattr(main, "meroshare_service", service)
    return TestClient(main.app)


def test_health(client):
    r = client.get("/health")

    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_capitals(client):
    r = client.get(f"{PREFIX}/capitals")

    assert r.status_code == 200
    assert r.json()[1] == {"code": "123", "name": "Test Capital", "client_id": 55}


def test_ipos(client, linked_transport):
    r = client.get(f"{PREFIX}/ipos")

    assert r.status_code == 200
    assert [item["scrip"] for item in r.json()] == ["ABC", "XYZ"]
    assert r.json()[1]["company_share_id"] == 9


def test_apply_uses_configured_defaults(client, linked_transport, monkeypatch):
    monkeypatch.setattr(main.settings, "target_script", "xyz")
    monkeypatch.setattr(main.settings, "boid", BOID)
    monkeypatch.setattr(main.settings, "crn_number", "CRN-1")
    monkeypatch.setattr(main.settings, "pin", "1234")
    linked_transport.add("POST", ENDPOINTS.apply, make_response(201, {"referenceNo": "REF-1"}))

    r = client.post(f"{PREFIX}/apply", json={"kitta": 20})

    assert r.status_code == 200
    assert r.json() == {"referenceNo": "REF-1"}
    payload = linked_transport.calls_to(ENDPOINTS.apply)[0]["json"]
    assert payload["appliedKitta"] == "20"
    assert payload["companyShareId"] == "9"


def test_apply_incomplete_request(client, monkeypatch):
    monkeypatch.setattr(main.settings, "target_script", "")
    monkeypatch.setattr(main.settings, "boid", "")

    r = client.post(f"{PREFIX}/apply", json={"crn": "CRN-1", "pin": "1234"})

    assert r.status_code == 422


def test_apply_rejection_maps_to_400(client, linked_transport):
    linked_transport.add("POST", ENDPOINTS.apply, make_response(409, {"message": "Already applied"}))

    r = client.post(
        f"{PREFIX}/apply",
        json={"scrip": "XYZ", "boid": BOID, "crn": "CRN-1", "pin": "1234"},
    )

    assert r.status_code == 400
    assert r.json()["detail"] == {"message": "Already applied", "upstream_status_code": 409}


def test_unknown_scrip_maps_to_404(client, linked_transport):
    r = client.post(
        f"{PREFIX}/apply",
        json={"scrip": "NOPE", "boid": BOID, "crn": "CRN-1", "pin": "1234"},
    )

    assert r.status_code == 404


def test_authentication_failure_maps_to_401(client, transport):
    transport.routes[("POST", ENDPOINTS.auth)] = [make_response(401, {"message": "bad password"})]

    r = client.get(f"{PREFIX}/reports")

    assert r.status_code == 401


def test_reports_and_detail(client, transport):
    transport.add(
        "POST",
        ENDPOINTS.active_search,
        make_response(200, {"object": [{"scrip": "XYZ", "applicantFormId": 5, "statusName": "Verified"}]}),
    )
    transport.add(
        "GET",
        ENDPOINTS.report_detail(5),
        make_response(200, {"applicantFormId": 5, "statusName": "Alloted", "stageName": "FINAL_APPROVED"}),
    )

    reports = client.get(f"{PREFIX}/reports")
    detail = client.get(f"{PREFIX}/reports/5")

    assert reports.json()[0]["applicant_form_id"] == 5
    assert detail.json()["stage_name"] == "FINAL_APPROVED"


def test_malformed_bank_account_maps_to_502(client, linked_transport):
    linked_transport.routes[("GET", ENDPOINTS.bank(42))] = [make_response(200, MALFORMED_BANK_ACCOUNTS)]

    r = client.post(
        f"{PREFIX}/apply",
        json={"scrip": "XYZ", "boid": BOID, "crn": "CRN-1", "pin": "1234"},
    )

    assert r.status_code == 502
    assert "BankAccount" in r.json()["detail"]
    assert linked_transport.calls_to(ENDPOINTS.apply) == []


@pytest.mark.parametrize("kitta", [0, "-5", "abc"])
def test_apply_invalid_kitta_is_422(client, linked_transport, kitta):
    r = client.post(
        f"{PREFIX}/apply",
        json={"scrip": "XYZ", "boid": BOID, "crn": "CRN-1", "pin": "1234", "kitta": kitta},
    )

    assert r.status_code == 422
    assert linked_transport.calls_to(ENDPOINTS.applicable_issue) == []
