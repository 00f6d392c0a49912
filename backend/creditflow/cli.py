"""Run one settlement from the command line.

Prints one line per processed payment and exits with status 1 when the run
fails before any payment is settled.
"""

import argparse
import asyncio
import sys

from creditflow.core.logging import configure_logging
from creditflow.schemas.settlement import PaymentInstruction, SettlementResult
from creditflow.services.billing_client import BillingAPIClient
from creditflow.services.reconciliation_service import ReconciliationService


def format_result(result: SettlementResult) -> str:
    if result.succeeded:
        return f"SUCCESS: payment {result.payment_id} successfully paid"
    return f"ERROR: paying {result.payment_id} {result.error_message}"


def format_instruction(instruction: PaymentInstruction) -> str:
    return (
        f"PLAN: payment {instruction.payment_id} (invoice {instruction.invoice_id}) "
        f"amount {instruction.amount_to_pay}"
    )


async def run(dry_run: bool = False, base_url: str | None = None) -> int:
    async with BillingAPIClient(base_url=base_url) as client:
        service = ReconciliationService(client)
        outcome = await service.preview() if dry_run else (await service.run()).outcome

    if not outcome.ok:
        print(f"FATAL: {outcome.stage} failed: {outcome.error}", file=sys.stderr)
        return 1

    formatter = format_instruction if dry_run else format_result
    for item in outcome.value:
        print(formatter(item))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="print the amount to pay for each payment without paying",
    )
    parser.add_argument("--base-url", default=None, help="billing API base URL")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    return asyncio.run(run(dry_run=args.dry_run, base_url=args.base_url))


if __name__ == "__main__":
    sys.exit(main())
