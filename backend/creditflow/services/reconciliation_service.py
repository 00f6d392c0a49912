"""End-to-end reconciliation: fetch, normalize, allocate and settle."""

import logging
from dataclasses import dataclass

from creditflow.core.pipeline import Pipeline, StageResult
from creditflow.schemas.billing import Invoice
from creditflow.schemas.settlement import PaymentInstruction, SettlementResult
from creditflow.services.billing_client import BillingAPIClient
from creditflow.services.currency_normalizer import CurrencyNormalizer
from creditflow.services.money import MoneyConverter
from creditflow.services.settlement_service import SettlementService

logger = logging.getLogger(__name__)


@dataclass
class ReconciliationRun:
    """Result of one reconciliation run."""

    outcome: StageResult

    @property
    def ok(self) -> bool:
        return self.outcome.ok

    @property
    def results(self) -> list[SettlementResult]:
        return self.outcome.value if self.outcome.ok else []

    @property
    def paid_count(self) -> int:
        return sum(1 for r in self.results if r.succeeded)


class ReconciliationService:
    """Builds and runs the reconciliation pipeline against the billing API."""

    def __init__(
        self,
        client: BillingAPIClient,
        converter: MoneyConverter | None = None,
        currency_fail_fast: bool | None = None,
        settlement_fail_fast: bool | None = None,
    ):
        self.client = client
        self.normalizer = CurrencyNormalizer(
            client.fetch_organization_currency,
            converter=converter,
            fail_fast=currency_fail_fast,
        )
        self.settlement = SettlementService(client.submit_payment, fail_fast=settlement_fail_fast)

    async def _fetch_invoices(self, _: object) -> list[Invoice]:
        return await self.client.fetch_invoices()

    async def _plan(self, invoices: list[Invoice]) -> list[PaymentInstruction]:
        return self.settlement.plan(invoices)

    def build_pipeline(self, dry_run: bool = False) -> Pipeline:
        pipeline = (
            Pipeline("reconciliation")
            .add_stage("fetch_invoices", self._fetch_invoices)
            .add_stage("normalize_currency", self.normalizer.normalize)
        )
        if dry_run:
            return pipeline.add_stage("plan", self._plan)
        return pipeline.add_stage("settle", self.settlement.settle)

    async def run(self) -> ReconciliationRun:
        """Fetch pending invoices and settle every outstanding payment."""
        outcome = await self.build_pipeline().run()
        run = ReconciliationRun(outcome=outcome)
        if run.ok:
            logger.info(
                "Reconciliation finished: %d payments processed, %d paid",
                len(run.results),
                run.paid_count,
            )
        else:
            _log_fatal(outcome)
        return run

    async def preview(self) -> StageResult:
        """Compute payment instructions without submitting any payment."""
        outcome = await self.build_pipeline(dry_run=True).run()
        if not outcome.ok:
            _log_fatal(outcome)
        return outcome


def _log_fatal(outcome: StageResult) -> None:
    logger.error("Reconciliation aborted at stage %s: %s", outcome.stage, outcome.error)
