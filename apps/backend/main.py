# apps/backend/main.py
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.backend.middleware.errors import install_error_handlers
from apps.backend.middleware.request_log import install_request_logging

from apps.backend.routes.health import router as health_router
from apps.backend.routes.points import router as points_router

from apps.backend.services.loyalty.points_ledger import PointsLedger
from apps.backend.services.settings import Settings, settings as default_settings

log = logging.getLogger("points.main")


def create_app(ledger: Optional[PointsLedger] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    logging.getLogger("points").setLevel(settings.LOG_LEVEL)

    app = FastAPI(
        title="Payer Points",
        version=settings.POINTS_VERSION,
        description="Per-payer points balances with FIFO spending",
    )

    # One ledger per application; routes reach it through app.state
    app.state.ledger = ledger if ledger is not None else PointsLedger()

    # -------------------------------------------------------------------
    # Error handling (plain-text messages, no stack leaks)
    # -------------------------------------------------------------------
    install_error_handlers(app)

    # -------------------------------------------------------------------
    # Access log
    # -------------------------------------------------------------------
    if settings.REQUEST_LOGGING:
        install_request_logging(app)

    # -------------------------------------------------------------------
    # CORS (controlled)
    # -------------------------------------------------------------------
    if settings.CORS_MODE == "allowlist":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ALLOW_ORIGINS,
            allow_credentials=False,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    # -------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------
    app.include_router(health_router)
    app.include_router(points_router)

    log.info("Payer points app created (version=%s)", settings.POINTS_VERSION)
    return app


app = create_app()
