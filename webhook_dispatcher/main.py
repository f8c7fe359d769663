from typing import Optional

import requests
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .api import sources, status, subscriptions, webhooks
from .config import Settings, get_settings
from .database import Database
from .utils.logging import configure_logging, logger


def create_app(settings: Optional[Settings] = None, http=None) -> FastAPI:
    """Build the application with its own storage handle and HTTP session."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Webhook Dispatcher",
        description="Registers webhook subscriptions and fans events out to them",
        version="1.0.0"
    )
    app.state.settings = settings
    app.state.database = Database(settings.database_url)
    app.state.http = http if http is not None else requests.Session()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(subscriptions.router, prefix="/api/webhooks", tags=["webhooks"])
    app.include_router(status.router, prefix="/api", tags=["logs"])
    app.include_router(sources.router, prefix="/api", tags=["events"])
    app.include_router(webhooks.router, tags=["events"])

    @app.get("/")
    def read_root():
        return {"message": "Welcome to Webhook Dispatcher"}

    @app.get("/health")
    def health_check(request: Request):
        try:
            request.app.state.database.ping()
            db_status = "healthy"
        except Exception as e:
            db_status = f"unhealthy: {str(e)}"

        return {
            "status": "up",
            "database": db_status,
        }

    @app.on_event("startup")
    async def startup_event():
        app.state.database.create_all()
        logger.info("Webhook dispatcher started")

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.http.close()
        app.state.database.dispose()
        logger.info("Webhook dispatcher stopped")

    return app


app = create_app()
