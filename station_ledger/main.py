"""
Station Ledger FastAPI application.

Run with: python -m station_ledger.main
"""

from fastapi import FastAPI

from station_ledger.config import get_settings
from station_ledger.logging_config import configure_logging
from station_ledger.api.health import router as health_router
from station_ledger.api.accounts import router as accounts_router
from station_ledger.api.vouchers import router as vouchers_router
from station_ledger.api.reports import router as reports_router

settings = get_settings()

configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Double-entry ledger for fuel-station back offices",
)

# Register routers
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(vouchers_router)
app.include_router(reports_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "station_ledger.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
