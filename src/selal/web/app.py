"""
Selal Web API - FastAPI application.

Mounts the registration wizard and fleet routers under /api.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from selal import __version__
from selal.config import settings
from registration.api import router as registration_router
from fleet.api import router as fleet_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(title="Selal", version=__version__)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Selal starting up...")
        logger.info(f"  Environment: {settings.selal_env}")
        logger.info(f"  OTP mocked: {settings.otp_mocked}")

    # CORS for the frontend dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(registration_router, prefix="/api")
    app.include_router(fleet_router, prefix="/api")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": __version__}

    return app


app = create_app()
