"""
FastAPI REST API for EcoChat.

Usage:
    # Run the server
    from ecochat.api import run_server
    run_server(host="0.0.0.0", port=8000)

    # Or use the app directly with uvicorn
    uvicorn ecochat.api.server:app --reload
"""

from ecochat.api.models import (
    AnalysisResponse,
    AnalyzeRequest,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    ErrorType,
    HealthResponse,
    HealthStatus,
    ProviderInfo,
    SustainabilityInfo,
    create_error_response,
)
from ecochat.api.server import API_PREFIX, API_VERSION, app, get_ecochat, run_server

__all__ = [
    # Server
    "app",
    "run_server",
    "get_ecochat",
    "API_PREFIX",
    "API_VERSION",
    # Request Models
    "AnalyzeRequest",
    "ChatRequest",
    # Response Models
    "AnalysisResponse",
    "ChatResponse",
    "SustainabilityInfo",
    "ProviderInfo",
    "HealthResponse",
    "HealthStatus",
    "ErrorResponse",
    "ErrorType",
    "create_error_response",
]
