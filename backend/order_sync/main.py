"""
NGenius Order Sync API - Main Application Entry Point.

Creates orders at checkout, opens N-Genius payment sessions and
reconciles gateway notifications with the stored orders.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from order_sync.core.config import settings
from order_sync.core.database import close_db, init_db
from order_sync.core.logging import configure_logging, get_logger
from order_sync.middleware import ErrorHandlerMiddleware, RequestIdMiddleware
from order_sync.routers import health_router, orders_router, payments_router

# Configure logging before anything else
configure_logging(settings)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(
        "Starting application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        mode=settings.mode,
    )
    if settings.is_sandbox:
        logger.warning("Sandbox mode: webhook signature mismatches are tolerated")

    await init_db()

    # Initialize Sentry if configured
    if settings.sentry_dsn:
        import sentry_sdk

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
        )
        logger.info("Sentry initialized")

    yield

    logger.info("Shutting down application")
    await close_db()


def create_app() -> FastAPI:
    """
    Application factory function.
    Creates and configures the FastAPI application.
    """
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="N-Genius checkout and payment reconciliation API",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Add middleware (order matters - last added = outermost)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    app.include_router(health_router)
    app.include_router(payments_router)
    app.include_router(orders_router)

    logger.info(
        "Application created",
        routes=len(app.routes),
        cors_origins=len(settings.allowed_origins),
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(
        "Server starting",
        port=settings.port,
        mode=settings.mode,
        endpoints=[
            "POST /create-payment",
            "POST /webhook/ngenius",
            "POST /fix-missing-order",
            "GET  /user-orders/{userId}",
        ],
    )
    uvicorn.run(
        "order_sync.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
