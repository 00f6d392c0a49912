"""Settlement of received invoices against their credit notes."""

import logging
from collections.abc import Awaitable, Callable

from creditflow.core.config import settings
from creditflow.core.exceptions import SettlementMismatchError
from creditflow.core.pipeline import Pipeline
from creditflow.models.invoice import PaymentStatus, SettlementStatus
from creditflow.schemas.billing import Invoice
from creditflow.schemas.settlement import PaymentInstruction, SettlementResult
from creditflow.services.credit_allocator import allocate

logger = logging.getLogger(__name__)

SubmitPayment = Callable[[str, int], Awaitable[str]]


def partition_invoices(invoices: list[Invoice]) -> tuple[list[Invoice], list[Invoice]]:
    """Split invoices into received invoices with payments and credit notes."""
    received = [inv for inv in invoices if inv.is_received and inv.payments]
    credit_notes = [inv for inv in invoices if inv.is_credit_note]
    return received, credit_notes


def credit_total_for(invoice: Invoice, credit_notes: list[Invoice]) -> int:
    """Sum the credit notes that reference ``invoice``."""
    return sum(cn.amount for cn in credit_notes if cn.reference == invoice.id)


class SettlementService:
    """Computes and submits payment instructions for pending invoices."""

    def __init__(self, submit_payment: SubmitPayment, fail_fast: bool | None = None):
        self.submit_payment = submit_payment
        self.fail_fast = settings.SETTLEMENT_FAIL_FAST if fail_fast is None else fail_fast

    def plan(self, invoices: list[Invoice]) -> list[PaymentInstruction]:
        """Compute every payment instruction without submitting anything."""
        received, credit_notes = partition_invoices(invoices)
        instructions: list[PaymentInstruction] = []
        for invoice in received:
            credit_total = credit_total_for(invoice, credit_notes)
            for allocation in allocate(invoice.payments or [], credit_total):
                instructions.append(
                    PaymentInstruction(
                        payment_id=allocation.payment.id,
                        invoice_id=invoice.id,
                        amount_to_pay=allocation.amount_to_pay,
                    )
                )
        return instructions

    async def settle_payment(self, instruction: PaymentInstruction) -> SettlementResult:
        """Submit one instruction; any failure is confined to this payment."""

        async def submit(_: object) -> str:
            return await self.submit_payment(instruction.payment_id, instruction.amount_to_pay)

        async def check_status(status: str) -> str:
            if status != PaymentStatus.PAID.value:
                raise SettlementMismatchError(
                    "the paid amount is not correct",
                    {"payment_id": instruction.payment_id, "status": status},
                )
            return status

        pipeline = (
            Pipeline(f"settle:{instruction.payment_id}")
            .add_stage("submit_payment", submit)
            .add_stage("check_status", check_status)
        )
        outcome = await pipeline.run()

        if outcome.ok:
            logger.info(
                "Payment %s successfully paid (amount=%d)",
                instruction.payment_id,
                instruction.amount_to_pay,
            )
            return SettlementResult(
                payment_id=instruction.payment_id,
                invoice_id=instruction.invoice_id,
                amount_paid=instruction.amount_to_pay,
                status=SettlementStatus.PAID,
            )

        # A failed run always carries its error.
        error = outcome.error
        logger.warning("Error paying %s: %s", instruction.payment_id, error)
        return SettlementResult(
            payment_id=instruction.payment_id,
            invoice_id=instruction.invoice_id,
            amount_paid=0,
            status=SettlementStatus.ERROR,
            error_kind=error.kind,  # type: ignore[union-attr]
            error_message=str(error),
        )

    async def settle(self, invoices: list[Invoice]) -> list[SettlementResult]:
        """Settle all received invoices, one payment at a time.

        With ``fail_fast`` the first failed payment stops every later
        submission; otherwise each failure is recorded and the run continues.
        """
        results: list[SettlementResult] = []
        for instruction in self.plan(invoices):
            result = await self.settle_payment(instruction)
            results.append(result)
            if self.fail_fast and not result.succeeded:
                logger.warning(
                    "Stopping settlement after failed payment %s", instruction.payment_id
                )
                break
        return results
