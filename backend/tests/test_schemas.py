"""Tests for the package-level model and schema exports."""

import creditflow.models
import creditflow.schemas
from creditflow.models import InvoiceType, SettlementStatus
from creditflow.schemas import Invoice, PaymentInstruction, SettlementResult
from tests.conftest import make_invoice, make_payment


def test_models_package_exports():
    for name in creditflow.models.__all__:
        assert hasattr(creditflow.models, name)


def test_schemas_package_exports():
    for name in creditflow.schemas.__all__:
        assert hasattr(creditflow.schemas, name)


def test_invoice_from_package_import():
    invoice = Invoice.model_validate(
        make_invoice("i1", 10, payments=[make_payment("p1", 10)])
    )
    assert invoice.type == InvoiceType.RECEIVED
    assert invoice.is_received


def test_settlement_result_from_package_import():
    instruction = PaymentInstruction(payment_id="p1", invoice_id="i1", amount_to_pay=5)
    result = SettlementResult(
        payment_id=instruction.payment_id,
        invoice_id=instruction.invoice_id,
        amount_paid=instruction.amount_to_pay,
        status=SettlementStatus.PAID,
    )
    assert result.succeeded
