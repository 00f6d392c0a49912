from collections.abc import AsyncGenerator

from creditflow.services.billing_client import BillingAPIClient


async def get_billing_client() -> AsyncGenerator[BillingAPIClient, None]:
    async with BillingAPIClient() as client:
        yield client
