"""UiPath Orchestrator adapter - typed client, analytics and tool surface."""

__version__ = "0.1.0"

from uipath_mcp.exceptions import ApiError, AuthenticationError, OrchestratorError

__all__ = ["__version__", "ApiError", "AuthenticationError", "OrchestratorError"]
