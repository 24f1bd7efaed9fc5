"""FastAPI routes exposing the tool and resource catalog over HTTP."""

import logging
from functools import lru_cache
from typing import Annotated, Any

from fastapi import APIRouter, Body, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from uipath_mcp import __version__
from uipath_mcp.client.analytics import OrchestratorAnalytics
from uipath_mcp.client.orchestrator import OrchestratorClient
from uipath_mcp.config import client_config_from_headers, get_settings
from uipath_mcp.exceptions import (
    ApiError,
    AuthenticationError,
    MissingCredentialsError,
    NotFoundError,
    ResourceReadError,
    ResponseFormatError,
    TransportError,
    UnknownResourceError,
    UnknownToolError,
)
from uipath_mcp.models.config import ClientConfig
from uipath_mcp.tools.dispatcher import ToolDispatcher, format_error, get_tool, list_tools
from uipath_mcp.tools.resources import ResourceReader, list_resources

logger = logging.getLogger(__name__)

router = APIRouter()

# Dependency injection
_env_client: OrchestratorClient | None = None

# Distinct header credential sets kept alive at once; older ones are rebuilt on demand
HEADER_CLIENT_CACHE_SIZE = 32


def get_env_client() -> OrchestratorClient:
    """Get or create the client configured from the environment.

    Raises:
        MissingCredentialsError: If the environment lacks credentials
    """
    global _env_client
    if _env_client is None:
        _env_client = OrchestratorClient(get_settings().client_config())
    return _env_client


def get_client(request: Request) -> OrchestratorClient:
    """Client for this request: credential headers first, else the environment.

    Clients built from headers are reused per distinct configuration so each
    credential set keeps its own token cache; only the most recently used
    ``HEADER_CLIENT_CACHE_SIZE`` of them are retained.
    """
    settings = get_settings()
    config = client_config_from_headers(
        request.headers, timeout_seconds=settings.uipath_timeout_seconds
    )
    if config is None:
        return get_env_client()

    return _header_client(config)


@lru_cache(maxsize=HEADER_CLIENT_CACHE_SIZE)
def _header_client(config: ClientConfig) -> OrchestratorClient:
    return OrchestratorClient(config)


def _analytics(client: OrchestratorClient) -> OrchestratorAnalytics:
    settings = get_settings()
    return OrchestratorAnalytics(
        client,
        dashboard_queue_sample=settings.dashboard_queue_sample,
        job_stats_fallback_limit=settings.job_stats_fallback_limit,
        folder_overview_limit=settings.folder_overview_limit,
    )


def error_status(exc: BaseException) -> int:
    """HTTP status code for a failed tool or resource call."""
    if isinstance(exc, MissingCredentialsError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, (UnknownToolError, UnknownResourceError, NotFoundError)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ValidationError):
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if isinstance(
        exc,
        (AuthenticationError, ApiError, TransportError, ResponseFormatError, ResourceReadError),
    ):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(exc: BaseException) -> JSONResponse:
    code = error_status(exc)
    if code >= 500:
        logger.error(f"Request failed: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=code, content=format_error(exc))


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.get("/tools")
async def get_tools() -> dict[str, Any]:
    return {"tools": list_tools()}


@router.post("/tools/{tool_name}")
async def call_tool(
    tool_name: str,
    request: Request,
    body: Annotated[dict[str, Any] | None, Body()] = None,
):
    """Run a tool.

    The body is either ``{"arguments": {...}}`` or the arguments object itself.
    """
    try:
        get_tool(tool_name)
        client = get_client(request)
        arguments = body or {}
        if isinstance(arguments.get("arguments"), dict):
            arguments = arguments["arguments"]
        dispatcher = ToolDispatcher(client, _analytics(client))
        return await dispatcher.call_tool(tool_name, arguments)
    except Exception as e:
        return _error_response(e)


@router.get("/resources")
async def get_resources() -> dict[str, Any]:
    return {"resources": list_resources()}


@router.get("/resources/read")
async def read_resource(uri: str, request: Request):
    try:
        client = get_client(request)
        return await ResourceReader(client, _analytics(client)).read(uri)
    except Exception as e:
        return _error_response(e)
