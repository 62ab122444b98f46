import uvicorn
from fastapi import FastAPI

from creditmind.api.routes.accounts import router as accounts_router
from creditmind.api.routes.analytics import router as analytics_router
from creditmind.api.routes.backup import router as backup_router
from creditmind.api.routes.health import router as health_router
from creditmind.api.routes.imports import router as imports_router
from creditmind.api.routes.rewards import router as rewards_router
from creditmind.api.routes.transactions import router as transactions_router
from creditmind.config import settings

app = FastAPI(title="CreditMind API", version="0.1.0")
app.include_router(health_router)
app.include_router(accounts_router)
app.include_router(transactions_router)
app.include_router(imports_router)
app.include_router(rewards_router)
app.include_router(analytics_router)
app.include_router(backup_router)


def run() -> None:
    uvicorn.run("creditmind.api.app:app", host=settings.app_host, port=settings.app_port, reload=False)
