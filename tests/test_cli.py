import json

import pytest

from meroshare_ipo import __main__ as cli
from meroshare_ipo.service import MeroShareService

from conftest import ENDPOINTS, MALFORMED_BANK_ACCOUNTS, make_response


@pytest.fixture(autouse=True)
def fake_service(monkeypatch, service):
    monkeypatch.setattr(MeroShareService, "from_settings", classmethod(lambda cls, settings, transport=None: service))
    return service


def test_ipos_command_prints_json(linked_transport, capsys):
    assert cli.main(["ipos"]) == 0

    out = json.loads(capsys.readouterr().out)
    assert [item["scrip"] for item in out] == ["ABC", "XYZ"]


def test_detail_not_found_exits_1(transport):
    transport.add("GET", ENDPOINTS.report_detail(3), make_response(404, {"message": "No data"}))

    assert cli.main(["detail", "3"]) == 1


def test_apply_with_missing_configuration_exits_2(monkeypatch):
    monkeypatch.setattr(cli.settings, "target_script", "")

    assert cli.main(["apply"]) == 2


def test_malformed_upstream_data_is_operation_failure(linked_transport, monkeypatch, caplog):
    monkeypatch.setattr(cli.settings, "target_script", "xyz")
    monkeypatch.setattr(cli.settings, "boid", "1301230000012345")
    monkeypatch.setattr(cli.settings, "crn_number", "CRN-1")
    monkeypatch.setattr(cli.settings, "pin", "1234")
    monkeypatch.setattr(cli.settings, "applied_kitta", "10")
    linked_transport.routes[("GET", ENDPOINTS.bank(42))] = [make_response(200, MALFORMED_BANK_ACCOUNTS)]

    assert cli.main(["apply"]) == 1

    assert "Operation failed" in caplog.text
    assert "Invalid configuration" not in caplog.text
    assert linked_transport.calls_to(ENDPOINTS.apply) == []


def test_invalid_kitta_argument_exits_2(monkeypatch):
    monkeypatch.setattr(cli.settings, "target_script", "xyz")
    monkeypatch.setattr(cli.settings, "boid", "1301230000012345")
    monkeypatch.setattr(cli.settings, "crn_number", "CRN-1")
    monkeypatch.setattr(cli.settings, "pin", "1234")

    assert cli.main(["apply", "--kitta", "0"]) == 2
