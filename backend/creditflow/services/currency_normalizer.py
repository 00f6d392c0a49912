"""Currency normalization of invoices into each organization's canonical currency."""

import logging
from collections.abc import Awaitable, Callable

from creditflow.core.config import settings
from creditflow.core.exceptions import BillingAPIError
from creditflow.schemas.billing import Invoice
from creditflow.services.money import MoneyConverter

logger = logging.getLogger(__name__)

CurrencyLookup = Callable[[str], Awaitable[str]]


def group_by_organization(invoices: list[Invoice]) -> dict[str, list[Invoice]]:
    """Group invoices by organization, keeping first-seen order of groups and members."""
    groups: dict[str, list[Invoice]] = {}
    for invoice in invoices:
        groups.setdefault(invoice.organization_id, []).append(invoice)
    return groups


class CurrencyNormalizer:
    """Converts invoices into the canonical currency of their organization."""

    def __init__(
        self,
        lookup_currency: CurrencyLookup,
        converter: MoneyConverter | None = None,
        fail_fast: bool | None = None,
    ):
        self.lookup_currency = lookup_currency
        self.converter = converter or MoneyConverter()
        self.fail_fast = settings.CURRENCY_LOOKUP_FAIL_FAST if fail_fast is None else fail_fast

    async def resolve_currencies(self, organization_ids: list[str]) -> dict[str, str | None]:
        """Look up each organization's currency once, one request at a time.

        A failed lookup maps to ``None`` unless ``fail_fast`` is set, in which
        case the error propagates.
        """
        resolved: dict[str, str | None] = {}
        for organization_id in organization_ids:
            if organization_id in resolved:
                continue
            try:
                resolved[organization_id] = await self.lookup_currency(organization_id)
            except BillingAPIError as exc:
                if self.fail_fast:
                    raise
                logger.warning(
                    "Currency lookup failed for organization %s, keeping original currency: %s",
                    organization_id,
                    exc,
                )
                resolved[organization_id] = None
        return resolved

    def apply_currencies(
        self, invoices: list[Invoice], currencies: dict[str, str | None]
    ) -> list[Invoice]:
        """Convert every invoice using the resolved organization currencies, in input order."""
        normalized: list[Invoice] = []
        for invoice in invoices:
            currency = currencies.get(invoice.organization_id)
            if currency is not None and invoice.currency != currency:
                if not self.converter.can_convert(invoice.currency, currency):
                    logger.warning(
                        "No exchange rate from %s to %s, invoice %s left unconverted",
                        invoice.currency,
                        currency,
                        invoice.id,
                    )
                invoice = self.converter.convert_invoice(invoice, currency)
            normalized.append(invoice)
        return normalized

    async def normalize(self, invoices: list[Invoice]) -> list[Invoice]:
        """Return ``invoices`` expressed in their organization's canonical currency.

        Each organization is looked up once, in first-seen order. Output keeps
        the input order; every input invoice appears exactly once.
        """
        groups = group_by_organization(invoices)
        currencies = await self.resolve_currencies(list(groups))
        return self.apply_currencies(invoices, currencies)
