"""Custom exceptions for the UiPath Orchestrator adapter."""

import json

# Prefix the Orchestrator uses when it rejects $count/$orderby/$filter options
INVALID_QUERY_MARKER = "Invalid OData"


class OrchestratorError(Exception):
    """Base class for every error raised by the adapter."""

    error_type = "uipath_mcp_error"


class AuthenticationError(OrchestratorError):
    """Raised when the client-credentials token exchange fails."""

    error_type = "authentication_error"

    def __init__(self, body_text: str, status_code: int | None = None) -> None:
        self.body_text = body_text
        self.status_code = status_code
        super().__init__(f"Failed to obtain access token: {body_text}")


class ApiError(OrchestratorError):
    """Raised for any non-2xx response from the Orchestrator API.

    The error body is parsed once so callers can branch on
    ``invalid_query_options`` instead of matching message text.
    """

    error_type = "api_error"

    def __init__(self, status_code: int, body_text: str) -> None:
        self.status_code = status_code
        self.body_text = body_text
        self.error_message = _extract_error_message(body_text)
        super().__init__(f"API request failed ({status_code}): {body_text}")

    @property
    def invalid_query_options(self) -> bool:
        """Whether the server rejected the OData query options themselves."""
        return 400 <= self.status_code < 500 and INVALID_QUERY_MARKER in self.error_message


class TransportError(OrchestratorError):
    """Raised when an API request never got an HTTP response (connect, timeout)."""

    error_type = "transport_error"

    def __init__(self, method: str, path: str, cause: Exception) -> None:
        self.method = method
        self.path = path
        self.cause = cause
        super().__init__(f"API request {method} {path} failed: {type(cause).__name__}: {cause}")


class ResponseFormatError(OrchestratorError):
    """Raised when a response body does not have the shape of the expected record."""

    error_type = "response_error"

    def __init__(self, record_name: str, detail: str) -> None:
        self.record_name = record_name
        self.detail = detail
        super().__init__(f"Unexpected {record_name} payload from Orchestrator: {detail}")


class NotFoundError(OrchestratorError):
    """Raised at the tool boundary when a named entity lookup finds nothing."""

    error_type = "not_found"


class MissingCredentialsError(OrchestratorError):
    """Raised when only part of the credential headers were supplied."""

    error_type = "missing_credentials"

    def __init__(self, message: str = "Missing UiPath credentials") -> None:
        super().__init__(message)


class UnknownToolError(OrchestratorError):
    """Raised when a tool name is not in the catalog."""

    error_type = "unknown_tool"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class UnknownResourceError(OrchestratorError):
    """Raised when a resource URI is not in the catalog."""

    error_type = "unknown_resource"

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"Unknown resource: {uri}")


class ResourceReadError(OrchestratorError):
    """Raised when reading a resource fails; wraps the underlying error."""

    error_type = "resource_error"

    def __init__(self, uri: str, cause: Exception) -> None:
        self.uri = uri
        self.cause = cause
        super().__init__(f"Failed to read resource {uri}: {cause}")


def _extract_error_message(body_text: str) -> str:
    """Pull the human-readable message out of an Orchestrator error body.

    Handles both the flat ``{"message": ...}`` shape and the OData
    ``{"error": {"message": ...}}`` shape; falls back to the raw text.
    """
    try:
        payload = json.loads(body_text)
    except (ValueError, TypeError):
        return body_text or ""

    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str):
            return message
        error = payload.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
    return body_text
