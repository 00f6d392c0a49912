"""Credit allocation across the outstanding payments of an invoice."""

from dataclasses import dataclass

from creditflow.schemas.billing import Payment


@dataclass
class PaymentAllocation:
    """Amount still owed on a payment once credit is applied."""

    payment: Payment
    amount_to_pay: int

    @property
    def credit_applied(self) -> int:
        return self.payment.amount - self.amount_to_pay


def allocation_order(payments: list[Payment]) -> list[Payment]:
    """Largest amount first; equal amounts by payment id ascending."""
    return sorted(payments, key=lambda p: (-p.amount, p.id))


def allocate(payments: list[Payment], credit_total: int) -> list[PaymentAllocation]:
    """Spend ``credit_total`` against ``payments`` in allocation order.

    Paid payments are skipped and consume no credit. A payment fully covered by
    the remaining credit yields a zero-amount allocation; the first payment that
    is not fully covered absorbs what is left, and every later one pays in full.

    Returns:
        One PaymentAllocation per non-paid payment, in processing order.
    """
    remaining = max(credit_total, 0)
    allocations: list[PaymentAllocation] = []

    for payment in allocation_order(payments):
        if payment.is_paid:
            continue

        if remaining >= payment.amount:
            remaining -= payment.amount
            allocations.append(PaymentAllocation(payment=payment, amount_to_pay=0))
        else:
            allocations.append(
                PaymentAllocation(payment=payment, amount_to_pay=payment.amount - remaining)
            )
            remaining = 0

    return allocations
