from creditflow.schemas.billing import (
    Invoice,
    InvoiceList,
    OrganizationSettings,
    Payment,
    PaymentRequest,
    PaymentResponse,
)
from creditflow.schemas.settlement import (
    PaymentInstruction,
    PaymentInstructionResponse,
    SettlementResult,
    SettlementResultResponse,
    StageFailureDetail,
)

__all__ = [
    "Invoice",
    "InvoiceList",
    "OrganizationSettings",
    "Payment",
    "PaymentInstruction",
    "PaymentInstructionResponse",
    "PaymentRequest",
    "PaymentResponse",
    "SettlementResult",
    "SettlementResultResponse",
    "StageFailureDetail",
]
