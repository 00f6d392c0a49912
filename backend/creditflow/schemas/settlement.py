"""Settlement schemas."""

from pydantic import BaseModel, ConfigDict, Field

from creditflow.models.invoice import SettlementStatus


class PaymentInstruction(BaseModel):
    """Amount to charge for one payment after credit allocation."""

    model_config = ConfigDict(frozen=True)

    payment_id: str
    invoice_id: str
    amount_to_pay: int = Field(ge=0)


class SettlementResult(BaseModel):
    """Outcome of submitting one payment instruction."""

    payment_id: str
    invoice_id: str
    amount_paid: int
    status: SettlementStatus
    error_kind: str | None = None
    error_message: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == SettlementStatus.PAID


class PaymentInstructionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_id: str
    invoice_id: str
    amount_to_pay: int


class SettlementResultResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_id: str
    invoice_id: str
    amount_paid: int
    status: SettlementStatus
    error_kind: str | None = None
    error_message: str | None = None


class StageFailureDetail(BaseModel):
    stage: str
    kind: str
    message: str
