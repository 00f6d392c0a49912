import logging
from typing import Any

from arq import cron
from arq.worker import func

from creditflow.core.config import settings
from creditflow.core.logging import configure_logging
from creditflow.services.billing_client import BillingAPIClient
from creditflow.services.reconciliation_service import ReconciliationService
from creditflow.tasks import redis_settings

logger = logging.getLogger(__name__)


async def startup(ctx: dict[str, Any]) -> None:
    configure_logging()


async def run_settlement_task(ctx: dict[str, Any]) -> int:
    """Background task: fetch pending invoices, apply credit notes and pay the rest.

    Returns:
        Number of payments successfully paid (0 when the run failed before
        settling anything).
    """
    async with BillingAPIClient() as client:
        run = await ReconciliationService(client).run()

    if not run.ok:
        return 0

    failed = len(run.results) - run.paid_count
    if failed > 0:
        logger.warning("Settlement run finished with %d failed payment(s)", failed)
    return run.paid_count


class WorkerSettings:
    # keep_result=0 frees the fixed manual job id as soon as a run completes.
    functions = [
        func(run_settlement_task, keep_result=0),
    ]
    cron_jobs = [
        cron(run_settlement_task, minute=settings.settlement_cron_minutes, keep_result=0),
    ]
    # One job at a time, so a manual run never overlaps a scheduled one.
    max_jobs = 1
    on_startup = startup
    redis_settings = redis_settings
