"""Invoice, payment and settlement enums."""

from enum import Enum


class InvoiceType(str, Enum):
    """Invoice types returned by the billing API."""

    RECEIVED = "received"
    CREDIT_NOTE = "credit_note"


class PaymentStatus(str, Enum):
    """Payment status values returned by the billing API."""

    PENDING = "pending"
    PAID = "paid"


class SettlementStatus(str, Enum):
    """Outcome of settling a single payment."""

    PAID = "paid"
    ERROR = "error"
