"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from curve_engine.config import Config
from curve_engine.datasources import ChainGateway, Web3ChainGateway
from curve_engine.errors import (
    CurveEngineError,
    InsufficientInput,
    InvalidAddress,
    InvalidCredential,
    InvalidSlippage,
    PhaseError,
    PrecisionError,
    RpcFailure,
    TransactionReverted,
)
from curve_engine.api import router

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    InvalidCredential: 400,
    InvalidSlippage: 400,
    PrecisionError: 400,
    InsufficientInput: 400,
    InvalidAddress: 400,
    PhaseError: 409,
    TransactionReverted: 409,
    RpcFailure: 502,
}


async def handle_engine_error(request: Request, exc: CurveEngineError) -> JSONResponse:
    """Map engine errors to JSON responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    body = {
        "success": False,
        "error": type(exc).__name__,
        "message": str(exc),
    }
    if isinstance(exc, TransactionReverted) and exc.tx_hash:
        body["txHash"] = exc.tx_hash

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {type(exc).__name__}: {exc}")

    return JSONResponse(status_code=status_code, content=body)


def create_app(
    config: Config | None = None,
    gateway: ChainGateway | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. If None, loads from environment.
        gateway: Chain gateway. If None, a Web3ChainGateway is created for
            config.rpc_url.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()

    # Create gateway
    if gateway is None:
        gateway = Web3ChainGateway(
            rpc_url=config.rpc_url,
            receipt_timeout=config.receipt_timeout_seconds,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info("Starting Bonding Curve Trading API")
        logger.info(f"Using RPC endpoint: {config.rpc_url}")
        logger.info(f"History window: {config.history_window_blocks} blocks")

        yield

        # Shutdown
        logger.info("Shutting down...")
        await gateway.close()

    app = FastAPI(
        title="Bonding Curve Trading API",
        description="Quotes, trades and trade history for bonding curve tokens",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.gateway = gateway

    app.add_exception_handler(CurveEngineError, handle_engine_error)

    # Include API routes
    app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
