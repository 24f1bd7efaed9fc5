"""Bearer token acquisition and caching for the Orchestrator API.

Uses the OAuth 2.0 client-credentials grant against the organization's
identity endpoint. The token is cached on the instance and refreshed once it
is within ``REFRESH_BUFFER`` of its expiry.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import httpx

from uipath_mcp.client.transport import TransportConfig
from uipath_mcp.exceptions import AuthenticationError
from uipath_mcp.models.config import ClientConfig

logger = logging.getLogger(__name__)

REFRESH_BUFFER = timedelta(minutes=5)

TOKEN_SCOPES = " ".join([
    "OR.Execution",
    "OR.Queues",
    "OR.Folders",
    "OR.Jobs",
    "OR.Assets",
    "OR.Robots",
    "OR.Machines",
    "OR.Monitoring",
    "OR.Settings",
    "OR.Audit",
    "OR.License",
])


class TokenManager:
    """Caches the access token for one set of client credentials.

    Concurrent callers that find the token expired may each run an
    exchange; the last response wins.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: TransportConfig,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._clock = clock or (lambda: datetime.now(UTC))
        self._access_token: str | None = None
        self._expires_at: datetime | None = None

    @property
    def expires_at(self) -> datetime | None:
        return self._expires_at

    def has_usable_token(self) -> bool:
        """True while the cached token is outside the refresh buffer."""
        if not self._access_token or self._expires_at is None:
            return False
        return self._clock() < self._expires_at - REFRESH_BUFFER

    async def ensure_token(self) -> str:
        """Return a usable bearer token, exchanging credentials if needed.

        Raises:
            AuthenticationError: If the identity endpoint rejects the
                credentials or cannot be reached
        """
        if self.has_usable_token():
            return self._access_token

        return await self._exchange()

    async def _exchange(self) -> str:
        identity_url = self._config.identity_url
        logger.debug(
            f"Requesting access token from {identity_url} "
            f"(client id length={len(self._config.client_id)}, "
            f"secret length={len(self._config.client_secret)})"
        )

        form = {
            "grant_type": "client_credentials",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
            "scope": TOKEN_SCOPES,
        }

        try:
            async with self._transport.open() as client:
                resp = await client.post(
                    identity_url,
                    data=form,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Identity endpoint unreachable: {e}")
            raise AuthenticationError(f"identity endpoint unreachable: {e}") from e

        if not 200 <= resp.status_code < 300:
            logger.warning(f"Token exchange failed with HTTP {resp.status_code}")
            raise AuthenticationError(resp.text, status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise AuthenticationError("identity response is not JSON") from e
        if not isinstance(data, dict):
            raise AuthenticationError("identity response is not a JSON object")
        token = data.get("access_token")
        if not token or not isinstance(token, str):
            raise AuthenticationError("no access token in identity response")

        expires_in = float(data.get("expires_in") or 0)
        self._access_token = token
        self._expires_at = self._clock() + timedelta(seconds=expires_in)
        logger.info(f"Obtained access token, expires in {expires_in:.0f}s")
        return token
