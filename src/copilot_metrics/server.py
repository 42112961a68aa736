"""FastAPI application factory for the Copilot metrics proxy."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .aggregation import to_daily_series, to_language_ranking
from .config import ConfigStore, Settings, load_settings
from .errors import MetricsProxyError
from .github_client import GitHubMetricsClient
from .stats import summarize_series

logger = logging.getLogger(__name__)

SERVICE_NAME = "copilot-metrics"


class ConfigRequest(BaseModel):
    token: Optional[str] = None
    org: Optional[str] = None


# ============================================
# Dependencies
# ============================================


def get_config_store(request: Request) -> ConfigStore:
    return request.app.state.config_store


def get_metrics_client(request: Request) -> GitHubMetricsClient:
    return request.app.state.metrics_client


# ============================================
# Routes
# ============================================

router = APIRouter(prefix="/api", tags=["copilot"])


@router.get("/config")
def read_config(store: ConfigStore = Depends(get_config_store)) -> Dict[str, Any]:
    """Report whether a credential is stored; never returns the token"""
    return store.get_status().to_dict()


@router.post("/config")
def write_config(
    body: ConfigRequest,
    store: ConfigStore = Depends(get_config_store),
) -> Dict[str, Any]:
    """Store the GitHub token and organization for later metrics requests"""
    store.set_credential(body.token, body.org)
    return {"success": True, "message": "Configuration saved. You can now fetch data."}


@router.get("/copilot-metrics")
def copilot_metrics(client: GitHubMetricsClient = Depends(get_metrics_client)) -> JSONResponse:
    """Forward the raw GitHub Copilot metrics feed verbatim"""
    return JSONResponse(content=client.fetch_metrics())


@router.get("/copilot-metrics/dashboard")
def copilot_dashboard(client: GitHubMetricsClient = Depends(get_metrics_client)) -> Dict[str, Any]:
    """Daily series, language ranking and summary computed from the feed"""
    records = client.fetch_metrics()
    series = to_daily_series(records)
    ranking = to_language_ranking(records)
    return {
        "daily": [metric.to_dict() for metric in series],
        "languages": [language.to_dict() for language in ranking],
        "summary": summarize_series(series).to_dict(),
    }


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok", "service": SERVICE_NAME}


# ============================================
# Error handlers
# ============================================


async def _handle_proxy_error(request: Request, exc: MetricsProxyError) -> JSONResponse:
    logger.warning(
        "Request failed: %s %s -> %s %s",
        request.method,
        request.url.path,
        exc.status_code,
        type(exc).__name__,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Rejected malformed request body: %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Token and Organization are required."},
    )


# ============================================
# Application factory
# ============================================


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ConfigStore] = None,
    client: Optional[GitHubMetricsClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Process settings; loaded from the environment when omitted.
        store: Credential store shared by all requests of this app.
        client: GitHub metrics client; built from ``store`` and ``settings``
            when omitted.
    """
    settings = settings or load_settings()
    store = store or ConfigStore()
    client = client or GitHubMetricsClient(
        store=store,
        base_url=settings.api_base_url,
        timeout_seconds=settings.timeout_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Starting Copilot metrics proxy")
        logger.info(f"GitHub API: {settings.api_base_url} (timeout {settings.timeout_seconds}s)")
        yield
        logger.info("Shutting down Copilot metrics proxy")
        client.close()

    app = FastAPI(
        title="Copilot Metrics Proxy",
        description="Credential-guarded proxy and aggregation for GitHub Copilot metrics",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.config_store = store
    app.state.metrics_client = client

    app.add_exception_handler(MetricsProxyError, _handle_proxy_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.include_router(router)

    return app
