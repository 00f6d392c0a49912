from creditflow.models.currency import CurrencyCode
from creditflow.models.invoice import InvoiceType, PaymentStatus, SettlementStatus

__all__ = [
    "CurrencyCode",
    "InvoiceType",
    "PaymentStatus",
    "SettlementStatus",
]
