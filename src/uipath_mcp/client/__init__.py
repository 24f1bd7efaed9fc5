"""Orchestrator API client: auth, request dispatch, entities and analytics."""

from uipath_mcp.client.analytics import (
    OrchestratorAnalytics,
    compute_duration,
    success_rate,
)
from uipath_mcp.client.executor import FOLDER_HEADER, RequestExecutor
from uipath_mcp.client.odata import ODataQuery, QueryFallback, fetch_collection
from uipath_mcp.client.orchestrator import OrchestratorClient
from uipath_mcp.client.token_manager import REFRESH_BUFFER, TokenManager
from uipath_mcp.client.transport import TransportConfig

__all__ = [
    "compute_duration",
    "fetch_collection",
    "FOLDER_HEADER",
    "ODataQuery",
    "OrchestratorAnalytics",
    "OrchestratorClient",
    "QueryFallback",
    "REFRESH_BUFFER",
    "RequestExecutor",
    "success_rate",
    "TokenManager",
    "TransportConfig",
]
