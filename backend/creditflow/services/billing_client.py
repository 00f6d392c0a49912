"""HTTP client for the billing API (invoices, organization settings, payments)."""

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from creditflow.core.config import settings
from creditflow.core.exceptions import DecodeError, EncodeError, SchemaError, TransportError
from creditflow.schemas.billing import (
    Invoice,
    InvoiceList,
    OrganizationSettings,
    PaymentRequest,
    PaymentResponse,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def path_segment(value: str) -> str:
    """Percent-encode an id for use as a single URL path segment."""
    segment = quote(value, safe="")
    # httpx would still collapse bare dot segments.
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return segment


class BillingAPIClient:
    """Async client for the billing API.

    Pass ``client`` to reuse an existing ``httpx.AsyncClient`` (tests hand in
    one built on ``httpx.MockTransport``). Otherwise the client is created on
    entering the async context and closed on exit.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = (base_url or settings.BILLING_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "BillingAPIClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("BillingAPIClient must be used as an async context manager")
        return self._client

    async def fetch_invoices(self) -> list[Invoice]:
        """GET the pending invoices."""
        url = f"{self.base_url}/v2/invoices/pending"
        body = await self._request("GET", url)
        invoices = self._parse(body, InvoiceList, url)
        logger.info("Fetched %d pending invoices", len(invoices))
        return invoices

    async def fetch_organization_currency(self, organization_id: str) -> str:
        """GET the canonical currency of an organization."""
        url = f"{self.base_url}/organization/{path_segment(organization_id)}/settings"
        body = await self._request("GET", url)
        org_settings = self._parse(body, TypeAdapter(OrganizationSettings), url)
        return org_settings.currency

    async def submit_payment(self, payment_id: str, amount: int) -> str:
        """POST a payment and return the status reported by the API."""
        url = f"{self.base_url}/payment/{path_segment(payment_id)}/pay"
        payload = self._encode({"amount": amount}, url)
        body = await self._request("POST", url, content=payload)
        response = self._parse(body, TypeAdapter(PaymentResponse), url)
        return response.status

    async def _request(self, method: str, url: str, content: bytes | None = None) -> Any:
        headers = {"Accept": "application/json"}
        if content is not None:
            headers["Content-Type"] = "application/json"
        try:
            resp = await self.client.request(method, url, content=content, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"{method} {url} returned HTTP {exc.response.status_code}",
                {"status_code": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        try:
            return resp.json()
        except ValueError as exc:
            raise DecodeError(f"{method} {url} returned invalid JSON") from exc

    @staticmethod
    def _encode(payload: dict[str, Any], url: str) -> bytes:
        try:
            return PaymentRequest.model_validate(payload).model_dump_json().encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise EncodeError(f"Could not serialize request body for {url}: {exc}") from exc

    @staticmethod
    def _parse(body: Any, adapter: TypeAdapter[T], url: str) -> T:
        try:
            return adapter.validate_python(body)
        except ValidationError as exc:
            raise SchemaError(
                f"Response from {url} does not match the expected schema",
                {"errors": exc.error_count()},
            ) from exc
