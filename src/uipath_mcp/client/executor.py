"""Authenticated, folder-scoped request dispatch."""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from uipath_mcp.client.token_manager import TokenManager
from uipath_mcp.client.transport import TransportConfig
from uipath_mcp.exceptions import ApiError, ResponseFormatError, TransportError

logger = logging.getLogger(__name__)

FOLDER_HEADER = "X-UIPATH-OrganizationUnitId"


def encode_query(params: dict[str, str]) -> str:
    """URL-encode query parameters with spaces as %20.

    The OData parser treats '+' literally, so form-style '+' for spaces
    must not reach the server.
    """
    return urlencode(params).replace("+", "%20")


class RequestExecutor:
    """Sends requests to the tenant's Orchestrator API root.

    Every call obtains a token first, attaches the bearer header and, when a
    folder id is given, the folder scoping header.
    """

    def __init__(
        self,
        base_url: str,
        token_manager: TokenManager,
        transport: TransportConfig,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token_manager = token_manager
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_url(self, path: str, params: dict[str, str] | None = None) -> str:
        url = f"{self._base_url}{path}"
        if params:
            url = f"{url}?{encode_query(params)}"
        return url

    async def execute(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        body: Any = None,
        folder_id: int | None = None,
    ) -> Any:
        """Perform one API call and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Route below the Orchestrator root, e.g. "/odata/Jobs"
            params: Query parameters
            body: JSON payload
            folder_id: Folder (organization unit) to scope the call to

        Returns:
            Parsed JSON, or None for an empty response body

        Raises:
            ApiError: On any non-2xx response
            TransportError: If the request failed before a response arrived
            AuthenticationError: If no token could be obtained
        """
        token = await self._token_manager.ensure_token()

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        if folder_id is not None:
            headers[FOLDER_HEADER] = str(folder_id)

        url = self.build_url(path, params)
        logger.debug(f"{method} {path} (folder={folder_id})")

        try:
            async with self._transport.open() as client:
                resp = await client.request(method, url, headers=headers, json=body)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} transport failure: {type(e).__name__}: {e}")
            raise TransportError(method, path, e) from e

        if not 200 <= resp.status_code < 300:
            error = ApiError(resp.status_code, resp.text)
            logger.warning(f"{method} {path} failed with HTTP {resp.status_code}")
            raise error

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise ResponseFormatError("JSON", f"{method} {path} returned a non-JSON body") from e
