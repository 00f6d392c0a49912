"""Billing API error hierarchy.

Every failure talking to the billing API inherits from BillingAPIError, so
callers can catch one type and still tell failures apart through ``kind``.
"""

from typing import Any


class BillingAPIError(Exception):
    """Base exception for all billing API failures."""

    kind = "billing_api"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class TransportError(BillingAPIError):
    """Raised when an endpoint cannot be reached or answers with a non-2xx status."""

    kind = "transport"


class DecodeError(BillingAPIError):
    """Raised when a response body is not valid JSON."""

    kind = "decode"


class SchemaError(BillingAPIError):
    """Raised when a JSON response does not have the expected shape."""

    kind = "schema"


class EncodeError(BillingAPIError):
    """Raised when a request payload cannot be serialized."""

    kind = "encode"


class SettlementMismatchError(BillingAPIError):
    """Raised when the payment API accepts a request but does not report it paid."""

    kind = "settlement_mismatch"
