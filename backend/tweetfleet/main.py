"""Tweetfleet Slack gateway: main application."""

import asyncio
import logging
import os
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tweetfleet import config
from tweetfleet.errors import GatewayError
from tweetfleet.gateway import Gateway, build_gateway
from tweetfleet.log_redact import install_log_redaction
from tweetfleet.routers.slack import router as slack_router

# --- Logging ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
if config.LOG_REDACTION:
    install_log_redaction()
logger = logging.getLogger("tweetfleet.api")


def _log_startup_env_warnings() -> None:
    if not os.getenv("SLACK_SIGNING_SECRET") and not os.getenv("SLACK_SIGNING_SECRET_FILE"):
        logger.warning("SLACK_SIGNING_SECRET is not set; every Slack webhook will be rejected.")
    if not config.SLACK_MOD_CHANNEL:
        logger.warning("SLACK_MOD_CHANNEL is not set; invite requests cannot be relayed.")
    if not config.EVE_CLIENT_ID or not config.EVE_CALLBACK:
        logger.warning("EVE_CLIENT_ID / EVE_CALLBACK are not set; the invite login flow will fail.")


@asynccontextmanager
async def _lifespan(app: FastAPI):
    _log_startup_env_warnings()
    gateway: Gateway = app.state.gateway
    sweepers = [
        asyncio.create_task(store.run_sweeper(), name=f"sweeper-{i}")
        for i, store in enumerate(gateway.stores)
    ]
    try:
        yield
    finally:
        await gateway.dispatcher.drain(timeout=config.SHUTDOWN_DRAIN_SECONDS)
        for task in sweepers:
            task.cancel()
        for task in sweepers:
            with suppress(asyncio.CancelledError):
                await task


async def _gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.__class__.__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "invalid request body") if errors else "invalid request body"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": message})


def create_app(gateway: Optional[Gateway] = None) -> FastAPI:
    app = FastAPI(
        title="tweetfleet-slack",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=_lifespan,
    )
    app.state.gateway = gateway or build_gateway()

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_methods=["GET", "POST"],
            allow_headers=["Authorization", "Content-Type"],
        )

    app.add_exception_handler(GatewayError, _gateway_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.include_router(slack_router)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    return app


app = create_app()
