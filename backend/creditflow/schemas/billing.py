"""Billing API wire schemas."""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from creditflow.models.invoice import InvoiceType, PaymentStatus


class Payment(BaseModel):
    """A payment owed on a received invoice."""

    model_config = ConfigDict(extra="ignore")

    id: str
    amount: int = Field(ge=0)
    status: str

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID.value


class Invoice(BaseModel):
    """A pending invoice or credit note."""

    model_config = ConfigDict(extra="ignore")

    id: str
    amount: int
    organization_id: str
    currency: str
    type: str
    reference: str | None = None
    payments: list[Payment] | None = None

    @property
    def is_received(self) -> bool:
        return self.type == InvoiceType.RECEIVED.value

    @property
    def is_credit_note(self) -> bool:
        return self.type == InvoiceType.CREDIT_NOTE.value


class OrganizationSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    organization_id: str
    currency: str


class PaymentRequest(BaseModel):
    amount: int = Field(ge=0)


class PaymentResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: str


InvoiceList = TypeAdapter(list[Invoice])
