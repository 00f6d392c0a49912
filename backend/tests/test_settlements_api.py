"""Tests for the settlement API endpoints."""

import pytest
from fastapi.testclient import TestClient

from creditflow.core.dependencies import get_billing_client
from creditflow.main import app
from tests.conftest import make_invoice, make_payment


@pytest.fixture
def client(fake_api):
    """Create test client wired to the fake billing API."""

    async def override_billing_client():
        billing_client = fake_api.client()
        try:
            yield billing_client
        finally:
            await billing_client.client.aclose()

    app.dependency_overrides[get_billing_client] = override_billing_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def pending_invoices(fake_api):
    fake_api.org_currencies["O1"] = "USD"
    fake_api.invoices = [
        make_invoice(
            "i1",
            500,
            organization_id="O1",
            payments=[make_payment("a", 200), make_payment("b", 300)],
        ),
        make_invoice(
            "c1", 250, organization_id="O1", invoice_type="credit_note", reference="i1"
        ),
    ]
    return fake_api


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"


class TestRunSettlement:
    def test_returns_settlement_results(self, client, pending_invoices):
        response = client.post("/v1/settlements/run")

        assert response.status_code == 200
        assert response.json() == [
            {
                "payment_id": "b",
                "invoice_id": "i1",
                "amount_paid": 50,
                "status": "paid",
                "error_kind": None,
                "error_message": None,
            },
            {
                "payment_id": "a",
                "invoice_id": "i1",
                "amount_paid": 200,
                "status": "paid",
                "error_kind": None,
                "error_message": None,
            },
        ]
        assert pending_invoices.payments == [("b", 50), ("a", 200)]

    def test_payment_error_is_part_of_results(self, client, pending_invoices):
        pending_invoices.payment_statuses["a"] = "wrong_amount"

        response = client.post("/v1/settlements/run")

        assert response.status_code == 200
        body = {r["payment_id"]: r for r in response.json()}
        assert body["a"]["status"] == "error"
        assert body["a"]["error_kind"] == "settlement_mismatch"
        assert body["b"]["status"] == "paid"

    def test_fetch_failure_returns_502(self, client, fake_api):
        fake_api.invoices_status_code = 500

        response = client.post("/v1/settlements/run")

        assert response.status_code == 502
        detail = response.json()["detail"]
        assert detail["stage"] == "fetch_invoices"
        assert detail["kind"] == "transport"
        assert fake_api.payments == []


class TestPreviewSettlement:
    def test_returns_instructions_without_paying(self, client, pending_invoices):
        response = client.post("/v1/settlements/preview")

        assert response.status_code == 200
        assert response.json() == [
            {"payment_id": "b", "invoice_id": "i1", "amount_to_pay": 50},
            {"payment_id": "a", "invoice_id": "i1", "amount_to_pay": 200},
        ]
        assert pending_invoices.payments == []

    def test_fetch_failure_returns_502(self, client, fake_api):
        fake_api.invoices = "not a list"

        response = client.post("/v1/settlements/preview")

        assert response.status_code == 502
        assert response.json()["detail"]["kind"] == "schema"
