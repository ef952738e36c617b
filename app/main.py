# app/main.py
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy import text

from app.database import engine
from app.game.errors import UpgradeError
from app.logging_config import setup_logging
from app.routes.base import router as base_router
from app.routes.catalog import router as catalog_router
from app.routes.economy import router as economy_router
from app.routes.upgrades import router as upgrades_router

setup_logging()

app = FastAPI(title="Base Upgrade Tracker", version="0.3.0")

app.include_router(catalog_router)
app.include_router(economy_router)
app.include_router(base_router)
app.include_router(upgrades_router)


@app.exception_handler(UpgradeError)
async def upgrade_error_handler(request: Request, exc: UpgradeError) -> JSONResponse:
    # Log 4xx as warning, 5xx as error
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.error}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.error}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.error, **exc.detail()},
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/db-ping")
def db_ping() -> dict:
    with engine.connect() as conn:
        result = conn.execute(text("SELECT 1")).scalar_one()
    return {"db": "ok", "select_1": result}
