"""Settlement API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from creditflow.core.dependencies import get_billing_client
from creditflow.core.pipeline import StageResult
from creditflow.schemas.settlement import (
    PaymentInstruction,
    PaymentInstructionResponse,
    SettlementResult,
    SettlementResultResponse,
    StageFailureDetail,
)
from creditflow.services.billing_client import BillingAPIClient
from creditflow.services.reconciliation_service import ReconciliationService

router = APIRouter()


def _raise_stage_failure(outcome: StageResult) -> None:
    detail = StageFailureDetail(
        stage=outcome.stage or "unknown",
        kind=outcome.error.kind if outcome.error else "unknown",
        message=str(outcome.error),
    )
    raise HTTPException(status_code=502, detail=detail.model_dump())


@router.post(
    "/run",
    response_model=list[SettlementResultResponse],
    summary="Run settlement",
    responses={502: {"description": "Billing API failure before any payment was submitted"}},
)
async def run_settlement(
    client: BillingAPIClient = Depends(get_billing_client),
) -> list[SettlementResult]:
    """Fetch pending invoices, apply credit notes and pay the remaining balances."""
    run = await ReconciliationService(client).run()
    if not run.ok:
        _raise_stage_failure(run.outcome)
    return run.results


@router.post(
    "/preview",
    response_model=list[PaymentInstructionResponse],
    summary="Preview settlement",
    responses={502: {"description": "Billing API failure"}},
)
async def preview_settlement(
    client: BillingAPIClient = Depends(get_billing_client),
) -> list[PaymentInstruction]:
    """Compute the amount to pay for each outstanding payment without paying."""
    outcome = await ReconciliationService(client).preview()
    if not outcome.ok:
        _raise_stage_failure(outcome)
    return outcome.value
