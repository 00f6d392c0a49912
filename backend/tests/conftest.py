"""Shared test fixtures for all test modules."""

import json
import re
from typing import Any
from urllib.parse import unquote

import httpx
import pytest
import pytest_asyncio

from creditflow.services.billing_client import BillingAPIClient

BASE_URL = "https://billing.test"

_SETTINGS_PATH = re.compile(r"/organization/(?P<org_id>[^/]+)/settings")
_PAY_PATH = re.compile(r"/payment/(?P<payment_id>[^/]+)/pay")


def make_payment(payment_id: str, amount: int, status: str = "pending") -> dict[str, Any]:
    return {"id": payment_id, "amount": amount, "status": status}


def make_invoice(
    invoice_id: str,
    amount: int,
    organization_id: str = "org_1",
    currency: str = "USD",
    invoice_type: str = "received",
    reference: str | None = None,
    payments: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build an invoice payload as the billing API returns it."""
    data: dict[str, Any] = {
        "id": invoice_id,
        "amount": amount,
        "organization_id": organization_id,
        "currency": currency,
        "type": invoice_type,
    }
    if reference is not None:
        data["reference"] = reference
    if payments is not None:
        data["payments"] = payments
    return data


class FakeBillingAPI:
    """In-memory billing API served through ``httpx.MockTransport``.

    ``org_currencies`` maps organization ids to a currency, or to an int HTTP
    status to fail with. ``payment_statuses`` maps payment ids to the status
    the API reports (default ``"paid"``) or to an int HTTP status.
    """

    def __init__(self) -> None:
        self.invoices: Any = []
        self.invoices_status_code = 200
        self.org_currencies: dict[str, str | int] = {}
        self.payment_statuses: dict[str, str | int] = {}
        self.settings_requests: list[str] = []
        self.payments: list[tuple[str, int]] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        # Match on the raw path so percent-encoded slashes stay inside one segment.
        path = request.url.raw_path.decode("ascii").partition("?")[0]

        if path == "/v2/invoices/pending" and request.method == "GET":
            if self.invoices_status_code != 200:
                return httpx.Response(self.invoices_status_code)
            return httpx.Response(200, json=self.invoices)

        match = _SETTINGS_PATH.fullmatch(path)
        if match and request.method == "GET":
            org_id = unquote(match.group("org_id"))
            self.settings_requests.append(org_id)
            currency = self.org_currencies.get(org_id, 404)
            if isinstance(currency, int):
                return httpx.Response(currency, json={"error": "unavailable"})
            return httpx.Response(200, json={"organization_id": org_id, "currency": currency})

        match = _PAY_PATH.fullmatch(path)
        if match and request.method == "POST":
            payment_id = unquote(match.group("payment_id"))
            body = json.loads(request.content)
            self.payments.append((payment_id, body["amount"]))
            status = self.payment_statuses.get(payment_id, "paid")
            if isinstance(status, int):
                return httpx.Response(status)
            return httpx.Response(200, json={"status": status})

        return httpx.Response(404)

    def client(self) -> BillingAPIClient:
        transport = httpx.MockTransport(self.handler)
        return BillingAPIClient(
            base_url=BASE_URL,
            client=httpx.AsyncClient(transport=transport),
        )


@pytest.fixture
def fake_api():
    """Return a fresh fake billing API."""
    return FakeBillingAPI()


@pytest_asyncio.fixture
async def billing_client(fake_api):
    """Yield a BillingAPIClient talking to the fake billing API."""
    client = fake_api.client()
    yield client
    await client.client.aclose()
