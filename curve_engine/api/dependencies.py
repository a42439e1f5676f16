"""FastAPI dependencies for dependency injection."""

from fastapi import Request

from curve_engine.config import Config
from curve_engine.datasources import ChainGateway


def get_gateway(request: Request) -> ChainGateway:
    """Get the gateway created by the application factory."""
    return request.app.state.gateway


def get_config(request: Request) -> Config:
    """Get the application configuration."""
    return request.app.state.config
