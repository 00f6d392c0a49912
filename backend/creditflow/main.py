from fastapi import FastAPI

from creditflow.core.config import settings
from creditflow.routers import settlements

OPENAPI_TAGS = [
    {
        "name": "Settlements",
        "description": "Apply credit notes to pending invoices and pay the remaining balances.",
    },
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Reconciles pending invoices against their credit notes, normalizing amounts "
        "into each organization's currency and paying the remaining balances."
    ),
    debug=settings.DEBUG,
    openapi_tags=OPENAPI_TAGS,
)

app.include_router(settlements.router, prefix="/v1/settlements", tags=["Settlements"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
