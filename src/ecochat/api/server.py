"""
FastAPI REST API Server for EcoChat.

Features:
- Query analysis and provider selection without a completion call
- Chat endpoint returning the answer with sustainability information
- Provider catalog listing and health monitoring
- CORS middleware for web clients
- Global exception handling
"""

from __future__ import annotations

import asyncio
import os
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

import psutil
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ecochat import __version__
from ecochat.api.models import (
    AnalysisResponse,
    AnalyzeRequest,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    ErrorType,
    FootprintModel,
    HealthResponse,
    HealthStatus,
    ProviderInfo,
    ProviderScoreModel,
    QueryAnalysisModel,
    SustainabilityInfo,
    create_error_response,
)
from ecochat.core.config import get_config
from ecochat.core.pipeline import EcoChat
from ecochat.utils.errors import (
    ConfigurationError,
    EcoChatError,
    ProviderAuthenticationError,
    ProviderError,
    ProviderRateLimitError,
    ValidationError,
)
from ecochat.utils.logging import LogContext, ServiceLogger, get_logger, setup_logging

# =============================================================================
# Module Constants
# =============================================================================

API_VERSION = __version__
API_PREFIX = "/api/v1"

logger = get_logger(__name__)
api_logger = ServiceLogger("api")


# =============================================================================
# Global State
# =============================================================================

_ecochat_instance: EcoChat | None = None
_ecochat_lock = asyncio.Lock()

# Server start time for uptime tracking
_server_start_time: float = time.time()


# =============================================================================
# Lifespan Management
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Record start time on startup, close HTTP clients on shutdown."""
    global _server_start_time, _ecochat_instance
    _server_start_time = time.time()

    log_config = get_config().logging
    setup_logging(log_config.level, log_config.json_format, log_config.log_file)

    logger.info("Starting EcoChat API server", version=API_VERSION)

    # EcoChat is created lazily on first request
    yield

    logger.info("Shutting down EcoChat API server")

    if _ecochat_instance is not None:
        await _ecochat_instance.close()
        _ecochat_instance = None


# =============================================================================
# FastAPI Application Setup
# =============================================================================

app = FastAPI(
    title="EcoChat API",
    description="""
    Sustainability-aware chat API.

    Every query is scored for complexity and category, matched against a
    catalog of provider/region profiles, and answered together with the
    estimated energy, CO2 and water saved compared to a worst-case baseline.
    """,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# =============================================================================
# CORS Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# =============================================================================
# Dependency Injection
# =============================================================================


async def get_ecochat() -> EcoChat:
    """
    Get or create the EcoChat singleton instance.

    Raises:
        HTTPException: If the configured catalog cannot be loaded
    """
    global _ecochat_instance

    async with _ecochat_lock:
        if _ecochat_instance is None:
            try:
                _ecochat_instance = EcoChat(config=get_config())
            except ConfigurationError as e:
                api_logger.error("Failed to initialize EcoChat", error=str(e))
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail=f"Service initialization failed: {e}",
                ) from e

    return _ecochat_instance


def get_request_id(request: Request) -> str:
    """Get or generate request ID for tracking."""
    return request.headers.get("X-Request-ID", f"req-{uuid.uuid4().hex[:12]}")


# =============================================================================
# Exception Handlers
# =============================================================================


def _error_json(
    request: Request,
    status_code: int,
    exc: EcoChatError,
    error_type: ErrorType,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    error_response = create_error_response(
        error=str(exc),
        error_type=error_type,
        error_code=exc.code,
        details=details or exc.details or None,
        request_id=get_request_id(request),
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handle validation errors."""
    api_logger.warning("Validation error", error=str(exc), field=exc.field)
    return _error_json(
        request,
        status.HTTP_400_BAD_REQUEST,
        exc,
        ErrorType.VALIDATION_ERROR,
        details={"field": exc.field},
    )


@app.exception_handler(ProviderRateLimitError)
async def rate_limit_error_handler(
    request: Request, exc: ProviderRateLimitError
) -> JSONResponse:
    """Handle upstream rate limits, forwarding Retry-After when known."""
    api_logger.warning("Rate limit exceeded", provider=exc.provider)
    response = _error_json(
        request, status.HTTP_429_TOO_MANY_REQUESTS, exc, ErrorType.RATE_LIMIT_ERROR
    )
    if exc.retry_after:
        response.headers["Retry-After"] = str(exc.retry_after)
    return response


@app.exception_handler(ProviderAuthenticationError)
async def provider_auth_error_handler(
    request: Request, exc: ProviderAuthenticationError
) -> JSONResponse:
    """Handle upstream authentication failures."""
    api_logger.error("Provider authentication failed", provider=exc.provider)
    return _error_json(request, status.HTTP_502_BAD_GATEWAY, exc, ErrorType.AUTHENTICATION_ERROR)


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """Handle provider errors."""
    api_logger.error("Provider error", provider=exc.provider, error=str(exc))
    return _error_json(request, status.HTTP_502_BAD_GATEWAY, exc, ErrorType.PROVIDER_ERROR)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    """Handle configuration errors (missing key, empty catalog)."""
    api_logger.error("Configuration error", error=str(exc), config_key=exc.config_key)
    return _error_json(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc, ErrorType.CONFIGURATION_ERROR
    )


@app.exception_handler(EcoChatError)
async def ecochat_error_handler(request: Request, exc: EcoChatError) -> JSONResponse:
    """Handle other EcoChat errors."""
    api_logger.error("EcoChat error", error=str(exc))
    return _error_json(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc, ErrorType.INTERNAL_ERROR
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    error_type = ErrorType.INTERNAL_ERROR
    if exc.status_code == 404:
        error_type = ErrorType.NOT_FOUND_ERROR
    elif exc.status_code == 400:
        error_type = ErrorType.VALIDATION_ERROR
    elif exc.status_code == 503:
        # get_ecochat() could not build the pipeline
        error_type = ErrorType.CONFIGURATION_ERROR

    error_response = create_error_response(
        error=str(exc.detail),
        error_type=error_type,
        request_id=get_request_id(request),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    api_logger.error("Unhandled exception", error=str(exc), exc_info=True)

    error_response = create_error_response(
        error="An internal error occurred. Please try again later.",
        error_type=ErrorType.INTERNAL_ERROR,
        error_code="INTERNAL_001",
        request_id=get_request_id(request),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(mode="json"),
    )


# =============================================================================
# Estimation Endpoints
# =============================================================================


@app.post(
    f"{API_PREFIX}/analyze",
    response_model=AnalysisResponse,
    responses={
        422: {"description": "Invalid request body"},
        500: {"model": ErrorResponse, "description": "Internal Error"},
    },
    tags=["Estimate"],
    summary="Analyze a query and select a provider",
)
async def analyze_query(
    req: Request,
    request: AnalyzeRequest,
    eco: EcoChat = Depends(get_ecochat),
) -> AnalysisResponse:
    """Score the query, rank providers and estimate savings."""
    with LogContext(request_id=get_request_id(req)):
        analysis, estimate = eco.estimate(request.query)

        ranking = None
        if request.include_ranking:
            ranking = [
                ProviderScoreModel.model_validate(score.to_dict())
                for score in eco.selector.rank(analysis)
            ]

        footprint = await eco.footprint(estimate) if request.include_footprint else None

        api_logger.info(
            "Analysis complete",
            category=analysis.category.value,
            complexity=round(analysis.complexity, 4),
            provider=estimate.provider.name,
        )

    return AnalysisResponse(
        query=request.query,
        analysis=QueryAnalysisModel.from_analysis(analysis),
        sustainability=SustainabilityInfo.from_estimate(estimate),
        ranking=ranking,
        footprint=FootprintModel.from_footprint(footprint),
    )


@app.post(
    f"{API_PREFIX}/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        429: {"model": ErrorResponse, "description": "Rate Limited"},
        502: {"model": ErrorResponse, "description": "Provider Error"},
        500: {"model": ErrorResponse, "description": "Internal Error"},
    },
    tags=["Chat"],
    summary="Answer a query with sustainability information",
)
async def chat(
    req: Request,
    request: ChatRequest,
    eco: EcoChat = Depends(get_ecochat),
) -> ChatResponse:
    """Run the full pipeline for one query."""
    kwargs: dict[str, Any] = {}
    if request.max_tokens is not None:
        kwargs["max_tokens"] = request.max_tokens
    if request.temperature is not None:
        kwargs["temperature"] = request.temperature

    with LogContext(request_id=get_request_id(req)):
        result = await eco.chat(request.query, **kwargs)

    return ChatResponse(
        id=result.id,
        answer=result.answer,
        model=result.model,
        analysis=QueryAnalysisModel.from_analysis(result.analysis),
        sustainability=SustainabilityInfo.from_estimate(result.estimate),
        footprint=FootprintModel.from_footprint(result.footprint),
        execution_time=result.execution_time,
    )


# =============================================================================
# Catalog & Health Endpoints
# =============================================================================


@app.get(
    f"{API_PREFIX}/providers",
    response_model=list[ProviderInfo],
    tags=["Health"],
    summary="List catalog providers",
)
async def list_providers(eco: EcoChat = Depends(get_ecochat)) -> list[ProviderInfo]:
    """List all catalog providers with their regional carbon intensity."""
    catalog = eco.catalog
    return [
        ProviderInfo.from_profile(profile, catalog.intensity_for(profile.region))
        for profile in catalog.providers
    ]


@app.get(
    f"{API_PREFIX}/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health check",
)
async def health_check(eco: EcoChat = Depends(get_ecochat)) -> HealthResponse:
    """Check API health status."""
    uptime_seconds = time.time() - _server_start_time

    try:
        process = psutil.Process(os.getpid())
        memory_usage_mb = process.memory_info().rss / 1024 / 1024
    except psutil.Error:
        memory_usage_mb = None

    stats = eco.stats
    available = stats["available_providers"]

    return HealthResponse(
        status=HealthStatus.HEALTHY if available else HealthStatus.DEGRADED,
        version=API_VERSION,
        providers_total=stats["providers"],
        providers_available=available,
        footprint_enabled=stats["footprint_enabled"],
        uptime_seconds=uptime_seconds,
        memory_usage_mb=memory_usage_mb,
        timestamp=datetime.utcnow(),
    )


# =============================================================================
# Root Endpoint
# =============================================================================


@app.get("/", tags=["Root"], summary="API root")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "EcoChat API",
        "version": API_VERSION,
        "description": "Sustainability-aware chat estimation",
        "docs": "/docs",
        "health": f"{API_PREFIX}/health",
    }


# =============================================================================
# Server Entry Point
# =============================================================================


def run_server(
    host: str = "0.0.0.0",
    port: int = 8000,
    reload: bool = False,
    workers: int = 1,
    log_level: str = "info",
) -> None:
    """
    Run the API server with uvicorn.

    Args:
        host: Host to bind to
        port: Port to listen on
        reload: Enable auto-reload for development
        workers: Number of worker processes
        log_level: uvicorn log level
    """
    import uvicorn

    uvicorn.run(
        "ecochat.api.server:app",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level.lower(),
    )


__all__ = [
    "app",
    "run_server",
    "get_ecochat",
    "API_VERSION",
    "API_PREFIX",
]
