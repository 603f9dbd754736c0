"""API and integration tests for HostQuote endpoints."""
import pytest
from fastapi.testclient import TestClient

from hostquote.api import app


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    r = client.get("/v1/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["service"] == "hostquote"
    assert "X-Request-ID" in r.headers


def test_quote(client):
    r = client.post("/v1/quote", json={"number_of_users": 5})
    assert r.status_code == 200
    data = r.json()
    assert data["number_of_users"] == 5
    assert data["vm_configuration"]["terminal_server_count"] == 0
    assert data["additional_fees"]["onboarding"] == 1000
    assert data["additional_fees"]["support_access"] == 100
    assert data["total"] == pytest.approx(407.55)
    assert data["currency"] == "CAD"


def test_quote_multi_server(client):
    r = client.post("/v1/quote", json={"number_of_users": 26})
    assert r.status_code == 200
    vm = r.json()["vm_configuration"]
    assert vm["terminal_server_count"] == 1
    assert vm["users_on_main_server"] == 13
    assert vm["users_per_terminal_server"] == 13


def test_quote_below_minimum(client):
    r = client.post("/v1/quote", json={"number_of_users": 0})
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail["violated_bound"] == "minimum"
    assert detail["limit"] == 1
    assert detail["message"] == "Le nombre minimum d'usagers est de 1"


def test_quote_above_maximum(client, write_pricing, config_dict):
    config_dict["prerequisites"]["max_users"] = 20
    write_pricing(config_dict)
    r = client.post("/v1/quote", json={"number_of_users": 21})
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail["violated_bound"] == "maximum"
    assert detail["limit"] == 20


def test_quote_invalid_body(client):
    r = client.post("/v1/quote", json={"number_of_users": -3})
    assert r.status_code == 422
    r = client.post("/v1/quote", json={})
    assert r.status_code == 422


def test_quote_unknown_pricing(client):
    r = client.post("/v1/quote", json={"number_of_users": 5, "pricing": "missing"})
    assert r.status_code == 404


def test_quote_misconfigured_pricing(client, write_pricing, config_dict):
    config_dict["vm_calculation"]["min_users_per_server"] = 50
    write_pricing(config_dict)
    r = client.post("/v1/quote", json={"number_of_users": 5})
    assert r.status_code == 500


def test_topology(client):
    r = client.get("/v1/topology", params={"users": 27})
    assert r.status_code == 200
    data = r.json()
    assert data["vm_configuration"]["total_vms"] == 3
    assert data["required_resources"]["terminal_server_disk"] == 10


def test_topology_requires_positive_users(client):
    r = client.get("/v1/topology", params={"users": 0})
    assert r.status_code == 422


def test_pricing_list(client):
    r = client.get("/v1/pricing")
    assert r.status_code == 200
    assert any(p["id"] == "default" for p in r.json())


def test_pricing_detail(client):
    r = client.get("/v1/pricing/default")
    assert r.status_code == 200
    data = r.json()
    assert data["vm_calculation"]["max_users_per_server"] == 13
    assert data["costs"]["terminal_server_cal_cost"] == 11.36
    r = client.get("/v1/pricing/missing")
    assert r.status_code == 404


def test_report_pdf(client):
    r = client.post("/v1/report", json={"number_of_users": 14})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert "soumission-mirrt-14-usagers-" in r.headers["content-disposition"]
    assert r.content[:4] == b"%PDF"


def test_report_out_of_range(client):
    r = client.post("/v1/report", json={"number_of_users": 0})
    assert r.status_code == 422


def test_report_html(client):
    r = client.post("/v1/report/html", json={"number_of_users": 14})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "RESSOURCES INFONUAGIQUE" in r.text


def test_metrics(client):
    client.get("/v1/health")
    client.post("/v1/quote", json={"number_of_users": 5})
    client.post("/v1/quote", json={"number_of_users": 0})
    r = client.get("/v1/metrics")
    assert r.status_code == 200
    assert "hostquote_uptime_seconds" in r.text
    assert "hostquote_http_requests_total" in r.text
    assert 'hostquote_quotes_total{outcome="ok"}' in r.text
    assert 'hostquote_quotes_total{outcome="minimum"}' in r.text
