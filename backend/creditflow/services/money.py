"""Currency conversion between USD and CLP at a fixed exchange rate."""

from decimal import ROUND_HALF_UP, Decimal

from creditflow.core.config import settings
from creditflow.models.currency import CurrencyCode
from creditflow.schemas.billing import Invoice


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class MoneyConverter:
    """Converts amounts between the supported currencies.

    Any pair outside USD/CLP is passed through unchanged; unknown currencies
    are never an error.
    """

    def __init__(self, dollar_in_clp: int | None = None):
        self.rate = Decimal(dollar_in_clp if dollar_in_clp is not None else settings.DOLLAR_IN_CLP)
        if self.rate <= 0:
            raise ValueError("Exchange rate must be positive")

    def can_convert(self, from_currency: str, to_currency: str) -> bool:
        supported = {c.value for c in CurrencyCode}
        return from_currency in supported and to_currency in supported

    def convert(self, amount: int, from_currency: str, to_currency: str) -> int:
        """Convert ``amount`` from one currency to another.

        Args:
            amount: Non-negative integer amount in ``from_currency``.
            from_currency: Source currency code.
            to_currency: Target currency code.

        Returns:
            The converted amount, or ``amount`` unchanged when the currencies
            are equal or the pair is not supported.
        """
        if from_currency == to_currency or not self.can_convert(from_currency, to_currency):
            return amount

        if to_currency == CurrencyCode.CLP.value:
            return round_half_up(Decimal(amount) * self.rate)
        return round_half_up(Decimal(amount) / self.rate)

    def convert_invoice(self, invoice: Invoice, to_currency: str) -> Invoice:
        """Return a copy of ``invoice`` expressed in ``to_currency``.

        The invoice amount and each payment amount are rounded on their own,
        so payments may not sum exactly to the converted invoice amount.
        """
        if invoice.currency == to_currency or not self.can_convert(invoice.currency, to_currency):
            return invoice

        payments = None
        if invoice.payments is not None:
            payments = [
                payment.model_copy(
                    update={"amount": self.convert(payment.amount, invoice.currency, to_currency)}
                )
                for payment in invoice.payments
            ]

        return invoice.model_copy(
            update={
                "amount": self.convert(invoice.amount, invoice.currency, to_currency),
                "currency": to_currency,
                "payments": payments,
            }
        )


def convert(amount: int, from_currency: str, to_currency: str) -> int:
    """Convert using the configured exchange rate."""
    return MoneyConverter().convert(amount, from_currency, to_currency)
